from flask import current_app, request
from flask_socketio import SocketIO

from kickoff import socketio
from kickoff.services.session import EventRouter, Transport
from kickoff.services.session import messages


class SocketIOTransport(Transport):
    """Deliver router output to a single Socket.IO sid."""

    def __init__(self, server: SocketIO, namespace: str = '/'):
        self.server = server
        self.namespace = namespace

    def send(self, connection_id: str, event: str, payload: str) -> None:
        # socketio.emit works outside a request context, e.g. during disconnect
        self.server.emit(event, payload, to=connection_id, namespace=self.namespace)


def _router() -> EventRouter:
    return current_app.extensions['session_router']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _router().connect(_get_sid())


def handle_disconnect(reason=None):
    _router().disconnect(_get_sid())


def handle_join(data=None):
    _router().join(_get_sid(), data)


def handle_leave(data=None):
    _router().leave(_get_sid())


def handle_turn_change(data=None):
    _router().change_turn(_get_sid(), data)


def handle_direction_change(data=None):
    _router().change_direction(_get_sid(), data)


def handle_kick_force_change(data=None):
    _router().change_kick_force(_get_sid(), data)


def handle_roster_query(data=None):
    _router().query_roster(_get_sid())


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the session protocol handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event(messages.JOIN, handle_join, namespace=namespace)
    socketio.on_event(messages.LEAVE, handle_leave, namespace=namespace)
    socketio.on_event(messages.TURN_CHANGE, handle_turn_change, namespace=namespace)
    socketio.on_event(messages.DIRECTION_CHANGE, handle_direction_change, namespace=namespace)
    socketio.on_event(messages.KICK_FORCE_CHANGE, handle_kick_force_change, namespace=namespace)
    socketio.on_event(messages.ROSTER_QUERY, handle_roster_query, namespace=namespace)
