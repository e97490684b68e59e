import sys

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')

    # One session per process; handlers reach it through current_app
    from kickoff.services.session import EventRouter
    from kickoff.socketio_events import SocketIOTransport, register_socketio_handlers
    flask_app.extensions['session_router'] = EventRouter(
        SocketIOTransport(socketio, namespace=namespace),
        default_username=flask_app.config.get('DEFAULT_USERNAME', 'Guest'),
        require_join=flask_app.config.get('REQUIRE_JOIN_FOR_UPDATES', True),
        reply_on_duplicate=flask_app.config.get('REPLY_ON_DUPLICATE_JOIN', True),
    )
    register_socketio_handlers(namespace=namespace)

    from kickoff.main import main
    flask_app.register_blueprint(main)

    @click.command('serve')
    @click.option('--host', default=None, help='Bind address (defaults to HOST).')
    @click.option('--port', default=None, type=int, help='Port (defaults to PORT).')
    def serve_command(host, port):
        """Runs the Socket.IO session server."""
        serve(flask_app, host=host, port=port)

    flask_app.cli.add_command(serve_command)

    return flask_app


def serve(flask_app, host=None, port=None):
    host = host or flask_app.config.get('HOST', '0.0.0.0')
    port = port or flask_app.config.get('PORT', 3003)
    flask_app.logger.info(f"[serve] listening on {host}:{port} (Ctrl+C to exit)")
    try:
        socketio.run(flask_app, host=host, port=port, allow_unsafe_werkzeug=True)
    except OSError as exc:
        # eventlet and gevent surface bind failures as OSError
        flask_app.logger.error(f"[serve] could not start server on {host}:{port}: {exc}")
        sys.exit(1)
    except SystemExit as exc:
        # werkzeug reports bind failures itself and exits with status 1
        if exc.code:
            flask_app.logger.error(f"[serve] could not start server on {host}:{port} (exit status {exc.code})")
        raise
