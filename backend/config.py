import os


def _flag(name, default):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Bind address for the Socket.IO server
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3003'))
    # Comma separated list, or '*' for any origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Name given to players who join with an empty username
    DEFAULT_USERNAME = os.environ.get('DEFAULT_USERNAME', 'Guest')
    # Reject turn/direction/kick force changes from connections that have not joined
    REQUIRE_JOIN_FOR_UPDATES = _flag('REQUIRE_JOIN_FOR_UPDATES', '1')
    # Answer a second join on the same connection with join_error instead of only logging it
    REPLY_ON_DUPLICATE_JOIN = _flag('REPLY_ON_DUPLICATE_JOIN', '1')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
