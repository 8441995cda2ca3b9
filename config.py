import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SESSION_SECRET') or os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None

    FIREBASE_WEB_API_KEY = os.environ.get('FIREBASE_WEB_API_KEY', '')
    FIREBASE_STORAGE_BUCKET = os.environ.get('FIREBASE_STORAGE_BUCKET', '')
    STORE_BACKEND = os.environ.get('STORE_BACKEND', 'firestore')
    SESSION_DAYS = int(os.environ.get('SESSION_DAYS', 5))

    TIMEZONE = os.environ.get('TIMEZONE', 'UTC')
    LEAP_DAY_POLICY = os.environ.get('LEAP_DAY_POLICY', 'feb_28')
    COUNTDOWN_INTERVAL = float(os.environ.get('COUNTDOWN_INTERVAL', 1.0))

    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '')
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'eventlet')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    WTF_CSRF_ENABLED = False
    STORE_BACKEND = 'memory'
    FIREBASE_STORAGE_BUCKET = ''
    SOCKETIO_ASYNC_MODE = 'threading'
    LEAP_DAY_POLICY = 'feb_28'
    TIMEZONE = 'UTC'
    COUNTDOWN_INTERVAL = 0.05
    LOG_LEVEL = 'DEBUG'
