from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class ConnectionState(Enum):
    CONNECTED = 'connected'  # open, no join yet
    ACTIVE = 'active'        # joined, present in the roster
    CLOSED = 'closed'


@dataclass
class Player:
    id: str
    username: str
    turn_order: int = 0

    def copy(self) -> 'Player':
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'username': self.username,
            'turnOrder': self.turn_order,
        }


@dataclass
class TurnState:
    """Last broadcast value of each shared per-turn field.

    Values are relayed as received; nothing here interprets them.
    """
    active_turn: Optional[Any] = None
    direction: Optional[Any] = None
    kick_force: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'playerTurn': self.active_turn,
            'playerDirection': self.direction,
            'kickForce': self.kick_force,
        }
