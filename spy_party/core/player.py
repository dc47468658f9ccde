"""
Player class representing a participant of the session.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .exceptions import MalformedSnapshotError


@dataclass(frozen=True)
class Player:
    """Represents a player on the roster."""
    id: str
    name: str
    score: float = 0

    def __str__(self) -> str:
        return f"{self.name} ({self.score} pts)"

    def add_points(self, delta: float) -> "Player":
        """Return a copy of the player with ``delta`` added to the score."""
        if not delta:
            return self
        return replace(self, score=self.score + delta)

    def reset_score(self) -> "Player":
        """Return a copy of the player with a zero score."""
        return replace(self, score=0)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "score": self.score}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        try:
            score = data.get("score", 0)
            if isinstance(score, bool) or not isinstance(score, (int, float)):
                raise MalformedSnapshotError(f"score of player {data.get('id')!r} is not a number")
            return cls(id=str(data["id"]), name=str(data["name"]), score=score)
        except (KeyError, AttributeError, TypeError) as e:
            raise MalformedSnapshotError(f"invalid player entry: {e}") from e


def get_player(players: Sequence[Player], player_id: Optional[str]) -> Optional[Player]:
    """Get player by id."""
    for player in players:
        if player.id == player_id:
            return player
    return None


def leaderboard(players: Iterable[Player]) -> List[Player]:
    """Players ordered by descending score; ties keep roster order."""
    return sorted(players, key=lambda p: p.score, reverse=True)


def roster_text(players: Iterable[Player]) -> str:
    """Current names joined back into the comma separated setup input."""
    return ", ".join(p.name for p in players)
