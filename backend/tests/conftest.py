import json
import os
import sys
import pytest

# Ensure the backend root (containing the `kickoff` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from kickoff import create_app, socketio
from kickoff.services.session import EventRouter, Transport


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    DEFAULT_USERNAME = 'Guest'
    REQUIRE_JOIN_FOR_UPDATES = True
    REPLY_ON_DUPLICATE_JOIN = True
    LOG_LEVEL = 'DEBUG'


class RecordingTransport(Transport):
    """Keeps every outbound message as (connection_id, event, decoded body)."""

    def __init__(self):
        self.sent = []

    def send(self, connection_id, event, payload):
        self.sent.append((connection_id, event, json.loads(payload)))

    def to(self, connection_id, event=None):
        return [body for cid, name, body in self.sent
                if cid == connection_id and (event is None or name == event)]

    def events_for(self, connection_id):
        return [name for cid, name, _ in self.sent if cid == connection_id]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def router(transport):
    return EventRouter(transport)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Open Socket.IO test clients on demand; all are closed at teardown."""
    opened = []

    def _connect():
        test_client = socketio.test_client(flask_app, namespace='/')
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected('/'):
                test_client.disconnect(namespace='/')
        except Exception:
            pass


def received(test_client, name=None):
    """Drain a test client's queue, returning decoded payloads as (name, body)."""
    events = []
    for pkt in test_client.get_received('/'):
        if name is not None and pkt['name'] != name:
            continue
        args = pkt.get('args') or [None]
        body = args[0]
        if isinstance(body, str):
            body = json.loads(body)
        events.append((pkt['name'], body))
    return events


@pytest.fixture()
def drain():
    return received
