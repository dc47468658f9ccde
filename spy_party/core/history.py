"""
Round history ledger: the capped, newest-first log of settled rounds.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .exceptions import MalformedSnapshotError

HISTORY_LIMIT = 50


@dataclass(frozen=True)
class RoundHistoryEntry:
    """One settled round. Names are copied so the entry outlives roster edits."""
    id: str
    word: str
    spy_name: str
    accused_name: Optional[str]  # None if nobody was accused
    spy_guessed: bool
    date: str  # ISO-8601
    spy_found: bool = False  # accused id matched the spy id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "word": self.word,
            "spyName": self.spy_name,
            "accusedName": self.accused_name,
            "spyGuessed": self.spy_guessed,
            "date": self.date,
            "spyFound": self.spy_found,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundHistoryEntry":
        try:
            accused = data.get("accusedName")
            spy_found = data.get("spyFound")
            if spy_found is None:
                # Older snapshots carry names only
                spy_found = accused is not None and accused == data["spyName"]
            return cls(
                id=str(data["id"]),
                word=str(data["word"]),
                spy_name=str(data["spyName"]),
                accused_name=None if accused is None else str(accused),
                spy_guessed=bool(data["spyGuessed"]),
                date=str(data["date"]),
                spy_found=bool(spy_found),
            )
        except (KeyError, AttributeError, TypeError) as e:
            raise MalformedSnapshotError(f"invalid history entry: {e}") from e


def record_round(
    history: Tuple[RoundHistoryEntry, ...],
    entry: RoundHistoryEntry,
    limit: int = HISTORY_LIMIT,
) -> Tuple[RoundHistoryEntry, ...]:
    """Prepend ``entry`` and drop everything beyond the ``limit`` newest rounds."""
    return ((entry,) + tuple(history))[:limit]
