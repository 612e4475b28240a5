import itertools
from typing import Dict, List, Optional

from catfish.models import Player


class ConnectionRegistry:
    """Connected players keyed by Socket.IO sid, in join order.

    The host is tracked explicitly and handed to the earliest-joined remaining
    player when the current host leaves. An empty registry has no host.
    """

    def __init__(self):
        self._players: Dict[str, Player] = {}
        self._seq = itertools.count()
        self.host_id: Optional[str] = None

    def __contains__(self, player_id) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def add(self, player_id: str, name: str) -> bool:
        """Add a player; returns False if the id is already registered."""
        if player_id in self._players:
            return False
        self._players[player_id] = Player(id=player_id, name=name, joined_at=next(self._seq))
        if self.host_id is None:
            self.host_id = player_id
        return True

    def remove(self, player_id: str) -> Optional[Player]:
        player = self._players.pop(player_id, None)
        if player is not None and self.host_id == player_id:
            remaining = self.players()
            self.host_id = remaining[0].id if remaining else None
        return player

    def players(self) -> List[Player]:
        return sorted(self._players.values(), key=lambda p: p.joined_at)

    def ids(self) -> List[str]:
        return [p.id for p in self.players()]

    def is_host(self, player_id: str) -> bool:
        return self.host_id is not None and self.host_id == player_id

    def name_of(self, player_id: str) -> Optional[str]:
        player = self._players.get(player_id)
        return player.name if player else None

    def add_points(self, player_id: str, points: int) -> None:
        player = self._players.get(player_id)
        if player is not None and points > 0:
            player.score += points

    def reset_scores(self) -> None:
        for player in self._players.values():
            player.score = 0

    def roster(self):
        return [p.to_dict() for p in self.players()]
