import logging
import os

from dashboard import create_app, shutdown, socketio

logging.basicConfig(
    level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = create_app()

if __name__ == '__main__':
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() in ('true', '1')
    port = int(os.environ.get('PORT', 8080))
    try:
        socketio.run(app, host='0.0.0.0', port=port, debug=debug)
    finally:
        shutdown(app)
