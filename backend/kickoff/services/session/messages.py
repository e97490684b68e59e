"""Wire catalog and codec for session messages.

Payloads travel as JSON text. Every inbound kind is decoded into its own
record type up front, so handlers never touch raw client data. Decode
failures raise ``DecodeError``; absent required fields raise
``ValidationError`` naming each missing field.
"""

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Tuple, Type

from .errors import DecodeError, SessionError, ValidationError


JOIN = 'join'
JOINED = 'joined'
PEER_JOINED = 'peer_joined'
LEAVE = 'leave'
LEFT = 'left'
PEER_LEFT = 'peer_left'
TURN_CHANGE = 'turn_change'
DIRECTION_CHANGE = 'direction_change'
KICK_FORCE_CHANGE = 'kick_force_change'
ROSTER_QUERY = 'roster_query'
ROSTER_REPLY = 'roster_reply'

# Prefix of the human readable text sent on <kind>_error
ERROR_CONTEXT = {
    JOIN: 'Error creating player',
    TURN_CHANGE: 'Error updating player turn',
    DIRECTION_CHANGE: 'Error updating player direction',
    KICK_FORCE_CHANGE: 'Error updating player kick force',
}


def error_event(kind: str) -> str:
    return f'{kind}_error'


def error_body(kind: str, exc: SessionError) -> Dict[str, str]:
    context = ERROR_CONTEXT.get(kind, f'Error handling {kind}')
    return {'message': f'{context}: {exc}'}


@dataclass(frozen=True)
class JoinRequest:
    kind: ClassVar[str] = JOIN

    username: Any
    turn_hint: Any = None

    @classmethod
    def required_fields(cls) -> Tuple[str, ...]:
        return ('username', 'turnOrder')

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> 'JoinRequest':
        return cls(username=fields['username'], turn_hint=fields['turnOrder'])

    def display_name(self, default: str) -> str:
        if self.username is None:
            return default
        name = str(self.username).strip()
        return name or default


@dataclass(frozen=True)
class StateChange:
    """A new value for one field of the shared turn state."""

    kind: ClassVar[str] = ''
    wire_field: ClassVar[str] = ''
    state_field: ClassVar[str] = ''

    value: Any

    @classmethod
    def required_fields(cls) -> Tuple[str, ...]:
        return (cls.wire_field,)

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> 'StateChange':
        return cls(value=fields[cls.wire_field])

    def to_wire(self) -> Dict[str, Any]:
        return {self.wire_field: self.value}


@dataclass(frozen=True)
class TurnChange(StateChange):
    kind: ClassVar[str] = TURN_CHANGE
    wire_field: ClassVar[str] = 'playerTurn'
    state_field: ClassVar[str] = 'active_turn'


@dataclass(frozen=True)
class DirectionChange(StateChange):
    kind: ClassVar[str] = DIRECTION_CHANGE
    wire_field: ClassVar[str] = 'playerDirection'
    state_field: ClassVar[str] = 'direction'


@dataclass(frozen=True)
class KickForceChange(StateChange):
    kind: ClassVar[str] = KICK_FORCE_CHANGE
    wire_field: ClassVar[str] = 'kickForce'
    state_field: ClassVar[str] = 'kick_force'


MESSAGE_TYPES: Dict[str, Type] = {
    JOIN: JoinRequest,
    TURN_CHANGE: TurnChange,
    DIRECTION_CHANGE: DirectionChange,
    KICK_FORCE_CHANGE: KickForceChange,
}


def load(payload) -> Dict[str, Any]:
    """Turn a transport payload into a field mapping.

    Text is parsed as JSON. Clients that already send objects are accepted
    when every value in them could have come from JSON.
    """
    if isinstance(payload, Mapping):
        fields = dict(payload)
        try:
            json.dumps(fields)
        except (TypeError, ValueError) as exc:
            raise DecodeError(f'Payload is not JSON compatible: {exc}') from exc
        return fields
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise DecodeError(f'Payload is not valid UTF-8: {exc}') from exc
    if not isinstance(payload, str):
        raise DecodeError(f'Expected JSON text, got {type(payload).__name__}')
    try:
        fields = json.loads(payload)
    except ValueError as exc:
        raise DecodeError(f'Invalid JSON: {exc}') from exc
    if not isinstance(fields, dict):
        raise DecodeError('Expected a JSON object')
    return fields


def decode(kind: str, payload):
    try:
        message_type = MESSAGE_TYPES[kind]
    except KeyError:
        raise DecodeError(f'Unknown message kind: {kind}') from None
    fields = load(payload)
    missing = [name for name in message_type.required_fields() if name not in fields]
    if missing:
        raise ValidationError(kind, missing)
    return message_type.from_fields(fields)


def encode(body: Mapping[str, Any]) -> str:
    return json.dumps(body)
