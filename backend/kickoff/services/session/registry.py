import logging
from typing import Iterator, List, Optional

from kickoff.models import Player
from .errors import DuplicateError, NotFoundError


logger = logging.getLogger(__name__)


class Registry:
    """Authoritative roster of joined players, kept in join order.

    ``turn_order`` of every player equals its index in the roster, so the
    values are always exactly ``0..N-1``. Callers only ever see copies.
    """

    def __init__(self):
        self._players: List[Player] = []

    def register(self, connection_id: str, username: str) -> Player:
        if self._find(connection_id) is not None:
            raise DuplicateError(connection_id)
        player = Player(id=connection_id, username=username, turn_order=len(self._players))
        self._players.append(player)
        self._renumber()
        logger.debug(f"[registry-add] id={connection_id} order={player.turn_order} size={len(self._players)}")
        return player.copy()

    def unregister(self, connection_id: str) -> Player:
        player = self._find(connection_id)
        if player is None:
            raise NotFoundError(connection_id)
        self._players.remove(player)
        self._renumber()
        logger.debug(f"[registry-remove] id={connection_id} size={len(self._players)}")
        return player.copy()

    def get(self, connection_id: str) -> Optional[Player]:
        player = self._find(connection_id)
        return player.copy() if player else None

    def snapshot(self) -> List[Player]:
        return [p.copy() for p in self._players]

    def _renumber(self) -> None:
        for index, player in enumerate(self._players):
            player.turn_order = index

    def _find(self, connection_id: str) -> Optional[Player]:
        for player in self._players:
            if player.id == connection_id:
                return player
        return None

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, connection_id) -> bool:
        return self._find(connection_id) is not None

    def __iter__(self) -> Iterator[Player]:
        return iter(self.snapshot())
