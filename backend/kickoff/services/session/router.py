import logging
import threading
from typing import Any, Dict, List, Optional

from kickoff.models import ConnectionState, Player, TurnState
from . import messages
from .errors import (
    ConnectionClosedError,
    DuplicateError,
    NotFoundError,
    NotJoinedError,
    SessionError,
)
from .registry import Registry


logger = logging.getLogger(__name__)


class Transport:
    """Outbound half of the event channel: deliver one named message to one connection."""

    def send(self, connection_id: str, event: str, payload: str) -> None:
        raise NotImplementedError


class EventRouter:
    """Validates inbound session messages, applies them and fans out the results.

    Every public method runs under a single lock so registry changes,
    turn-state updates and the sends they trigger are never interleaved.
    """

    def __init__(self, transport: Transport, default_username: str = 'Guest',
                 require_join: bool = True, reply_on_duplicate: bool = True):
        self.transport = transport
        self.default_username = default_username
        self.require_join = require_join
        self.reply_on_duplicate = reply_on_duplicate
        self.registry = Registry()
        self.state = TurnState()
        self._connections: Dict[str, ConnectionState] = {}
        self._lock = threading.RLock()

    # ---- connection lifecycle ----

    def connect(self, connection_id: str) -> None:
        with self._lock:
            self._connections[connection_id] = ConnectionState.CONNECTED
            logger.info(f"[connect] id={connection_id}")

    def join(self, connection_id: str, payload) -> Optional[Player]:
        with self._lock:
            try:
                if self.connection_state(connection_id) is ConnectionState.CLOSED:
                    raise ConnectionClosedError(connection_id)
                request = messages.decode(messages.JOIN, payload)
                player = self.registry.register(connection_id, request.display_name(self.default_username))
            except DuplicateError as exc:
                logger.info(f"[join-duplicate] id={connection_id}")
                if self.reply_on_duplicate:
                    self._reply_error(connection_id, messages.JOIN, exc)
                return None
            except SessionError as exc:
                self._reply_error(connection_id, messages.JOIN, exc)
                return None

            self._connections[connection_id] = ConnectionState.ACTIVE
            roster = self.registry.snapshot()
            count = str(len(roster))
            joined = messages.encode({
                'player': player.to_dict(),
                'players': [p.to_dict() for p in roster],
                'playerCount': count,
                'state': self.state.to_dict(),
            })
            peer_joined = messages.encode({
                'player': player.to_dict(),
                'playerCount': count,
            })
            self.transport.send(connection_id, messages.JOINED, joined)
            self._fan_out(connection_id, messages.PEER_JOINED, peer_joined)
            logger.info(f"[join] player={player.username} id={connection_id} order={player.turn_order} count={count}")
            return player

    def leave(self, connection_id: str) -> Optional[Player]:
        """Explicit leave: the connection stays open but may not rejoin."""
        with self._lock:
            player = self._remove(connection_id)
            if player is None:
                logger.info(f"[leave] id={connection_id} (not joined)")
                return None
            self._connections[connection_id] = ConnectionState.CLOSED
            self._send(connection_id, messages.LEFT, {
                'player': player.to_dict(),
                'playerCount': str(len(self.registry)),
            })
            return player

    def disconnect(self, connection_id: str) -> Optional[Player]:
        with self._lock:
            player = self._remove(connection_id)
            self._connections.pop(connection_id, None)
            if player is None:
                logger.info(f"[disconnect] id={connection_id} (not joined)")
            return player

    # ---- shared turn state ----

    def change_turn(self, connection_id: str, payload) -> bool:
        return self._apply_change(messages.TURN_CHANGE, connection_id, payload)

    def change_direction(self, connection_id: str, payload) -> bool:
        return self._apply_change(messages.DIRECTION_CHANGE, connection_id, payload)

    def change_kick_force(self, connection_id: str, payload) -> bool:
        return self._apply_change(messages.KICK_FORCE_CHANGE, connection_id, payload)

    # ---- queries ----

    def query_roster(self, connection_id: str) -> None:
        with self._lock:
            self._send(connection_id, messages.ROSTER_REPLY, self.roster())

    def roster(self) -> Dict[str, Any]:
        with self._lock:
            players = self.registry.snapshot()
            return {
                'players': [p.to_dict() for p in players],
                'playerCount': str(len(players)),
            }

    def turn_state(self) -> Dict[str, Any]:
        with self._lock:
            return self.state.to_dict()

    def connection_state(self, connection_id: str) -> ConnectionState:
        with self._lock:
            return self._connections.get(connection_id, ConnectionState.CONNECTED)

    # ---- helpers ----

    def _apply_change(self, kind: str, connection_id: str, payload) -> bool:
        with self._lock:
            try:
                if self.connection_state(connection_id) is ConnectionState.CLOSED:
                    raise ConnectionClosedError(connection_id)
                if self.require_join and connection_id not in self.registry:
                    raise NotJoinedError(connection_id)
                change = messages.decode(kind, payload)
            except SessionError as exc:
                self._reply_error(connection_id, kind, exc)
                return False
            # shared state changes only once the outbound payload exists
            wire = messages.encode(change.to_wire())
            setattr(self.state, change.state_field, change.value)
            self._fan_out(connection_id, kind, wire)
            logger.info(f"[{kind}] id={connection_id} {change.wire_field}={change.value!r}")
            return True

    def _remove(self, connection_id: str) -> Optional[Player]:
        try:
            player = self.registry.unregister(connection_id)
        except NotFoundError:
            return None
        count = str(len(self.registry))
        self._broadcast(connection_id, messages.PEER_LEFT, {
            'player': player.to_dict(),
            'playerCount': count,
        })
        logger.info(f"[leave] player={player.username} id={connection_id} count={count}")
        return player

    def _recipients(self, sender_id: str) -> List[str]:
        return [p.id for p in self.registry.snapshot() if p.id != sender_id]

    def _send(self, connection_id: str, event: str, body: Dict[str, Any]) -> None:
        self.transport.send(connection_id, event, messages.encode(body))

    def _broadcast(self, sender_id: str, event: str, body: Dict[str, Any]) -> None:
        self._fan_out(sender_id, event, messages.encode(body))

    def _fan_out(self, sender_id: str, event: str, payload: str) -> None:
        for connection_id in self._recipients(sender_id):
            self.transport.send(connection_id, event, payload)

    def _reply_error(self, connection_id: str, kind: str, exc: SessionError) -> None:
        logger.warning(f"[{kind}-error] id={connection_id} {exc}")
        self._send(connection_id, messages.error_event(kind), messages.error_body(kind, exc))
