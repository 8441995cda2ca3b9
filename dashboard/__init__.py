import logging

from flask import Flask, jsonify
from flask_socketio import SocketIO
from flask_wtf.csrf import CSRFProtect, CSRFError
from config import Config

socketio = SocketIO()
csrf = CSRFProtect()


def create_app(config_class=Config, store=None, auth_service=None):
    """Build the app. ``store`` and ``auth_service`` default to the backends
    named in the config."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger('dashboard').setLevel(level)

    from dashboard.serializers import DashboardJSONProvider
    app.json = DashboardJSONProvider(app)

    csrf.init_app(app)

    # CORS origins
    allowed_origins = []
    cors_origins = app.config.get('CORS_ALLOWED_ORIGINS', '')
    if cors_origins:
        for origin in cors_origins.split(','):
            origin = origin.strip()
            if origin:
                allowed_origins.append(origin)

    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins if allowed_origins else None,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'eventlet')
    )

    # Injected dependencies
    from dashboard.store import build_store
    from dashboard.auth_service import build_auth_service
    from dashboard.live import LiveQueryHub
    from dashboard.countdown import CountdownRegistry
    from dashboard.recurrence import now_in

    if store is None:
        store = build_store(app.config)
    if auth_service is None:
        auth_service = build_auth_service(app.config)

    def broadcast(event, payload, room):
        socketio.emit(event, payload, to=room)

    tz_name = app.config.get('TIMEZONE', 'UTC')
    app.extensions['dashboard'] = {
        'store': store,
        'auth': auth_service,
        'hub': LiveQueryHub(store, broadcast),
        'countdowns': CountdownRegistry(
            spawn=socketio.start_background_task,
            sleep=socketio.sleep,
            clock=lambda: now_in(tz_name),
            interval=app.config.get('COUNTDOWN_INTERVAL', 1.0),
        ),
    }

    # Register current_user before_request
    from dashboard.decorators import load_current_user

    @app.before_request
    def before_request():
        load_current_user()

    # Error responses
    from dashboard.errors import DashboardError

    @app.errorhandler(DashboardError)
    def handle_dashboard_error(e):
        if e.status_code >= 500:
            app.logger.error('%s: %s', type(e).__name__, e.message)
        return jsonify({'error': e.message}), e.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        return jsonify({'error': e.description}), 400

    # Register blueprints
    from dashboard.routes import (
        main, auth, bots, organizer, calendar, academic, birthdays,
        projects, targets, violations, activity, notifications,
        profile, settings
    )
    app.register_blueprint(main.bp)
    app.register_blueprint(auth.bp)
    app.register_blueprint(bots.bp)
    app.register_blueprint(organizer.bp)
    app.register_blueprint(calendar.bp)
    app.register_blueprint(academic.bp)
    app.register_blueprint(birthdays.bp)
    app.register_blueprint(projects.bp)
    app.register_blueprint(projects.archived_bp)
    app.register_blueprint(targets.bp)
    app.register_blueprint(violations.bp)
    app.register_blueprint(activity.bp)
    app.register_blueprint(notifications.bp)
    app.register_blueprint(profile.bp)
    app.register_blueprint(settings.bp)

    from dashboard import events  # noqa: F401

    app.logger.info('Dashboard started (store=%s)', type(store).__name__)
    return app


def shutdown(app):
    """Stop every countdown timer and live feed the app started."""
    deps = app.extensions.get('dashboard', {})
    if 'countdowns' in deps:
        deps['countdowns'].cancel_all()
    if 'hub' in deps:
        deps['hub'].close()
    app.logger.info('Dashboard stopped')
