"""
Round engine: private role reveal sequencing and settlement scoring.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Sequence, Tuple

from .exceptions import InvalidTransitionError, MalformedSnapshotError, MissingVerdictError
from .history import RoundHistoryEntry
from .player import Player, get_player

logger = logging.getLogger(__name__)

# Verdict sentinel for "the group accused nobody"
NOBODY = "nobody"

SPY_FOUND_BONUS = 0.5
SPY_GUESS_BONUS = 4.0


@dataclass(frozen=True)
class CurrentRound:
    """State of the round being played."""
    word: str
    spy_id: str
    reveal_index: int = 0
    is_revealed: bool = False  # True while the current player looks at the card

    def is_spy(self, player_id: str) -> bool:
        return player_id == self.spy_id

    def reveal_finished(self, player_count: int) -> bool:
        """Check if every player has seen and hidden their card."""
        return self.reveal_index >= player_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "spyId": self.spy_id,
            "revealIndex": self.reveal_index,
            "isRevealed": self.is_revealed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CurrentRound":
        try:
            reveal_index = data["revealIndex"]
            if isinstance(reveal_index, bool) or not isinstance(reveal_index, int) or reveal_index < 0:
                raise MalformedSnapshotError(f"bad reveal index {reveal_index!r}")
            return cls(
                word=str(data["word"]),
                spy_id=str(data["spyId"]),
                reveal_index=reveal_index,
                is_revealed=bool(data["isRevealed"]),
            )
        except (KeyError, AttributeError, TypeError) as e:
            raise MalformedSnapshotError(f"invalid current round: {e}") from e


@dataclass(frozen=True)
class RevealCard:
    """What the device shows to the player currently holding it."""
    player_name: str
    revealed: bool
    is_spy: bool = False
    word: Optional[str] = None  # never set for the spy

    @property
    def message(self) -> str:
        if not self.revealed:
            return f"Turn of {self.player_name}"
        if self.is_spy:
            return "You are the spy!"
        return f"The word is: {self.word}"


def start_round(word: str, spy_id: str) -> CurrentRound:
    """Create a fresh round with the first player's card face down."""
    return CurrentRound(word=word, spy_id=spy_id, reveal_index=0, is_revealed=False)


def reveal(current: CurrentRound) -> CurrentRound:
    """Show the current player's card."""
    if current.is_revealed:
        raise InvalidTransitionError("reveal", message="The current card is already revealed")
    return replace(current, is_revealed=True)


def acknowledge(current: CurrentRound, player_count: int) -> Tuple[CurrentRound, bool]:
    """
    Hide the current card and pass the device to the next player.

    Returns:
        (updated round, finished) where finished is True once the last
        player has hidden their card.
    """
    if not current.is_revealed:
        raise InvalidTransitionError("acknowledge", message="The current card has not been revealed yet")
    updated = replace(current, is_revealed=False, reveal_index=current.reveal_index + 1)
    return updated, updated.reveal_finished(player_count)


def advance(current: CurrentRound, player_count: int) -> Tuple[CurrentRound, bool]:
    """Single "next" action: reveal a face-down card, or hide a face-up one and move on."""
    if current.is_revealed:
        return acknowledge(current, player_count)
    return reveal(current), False


def reveal_card(players: Sequence[Player], current: Optional[CurrentRound]) -> Optional[RevealCard]:
    """Card for the player whose turn it is, or None outside the reveal sequence."""
    if current is None or current.reveal_finished(len(players)):
        return None
    player = players[current.reveal_index]
    if not current.is_revealed:
        return RevealCard(player_name=player.name, revealed=False)
    is_spy = current.is_spy(player.id)
    return RevealCard(
        player_name=player.name,
        revealed=True,
        is_spy=is_spy,
        word=None if is_spy else current.word,
    )


def score_deltas(
    players: Sequence[Player],
    spy_id: str,
    accused_id: Optional[str],
    spy_guessed: bool,
    spy_found_bonus: float = SPY_FOUND_BONUS,
    spy_guess_bonus: float = SPY_GUESS_BONUS,
) -> Dict[str, float]:
    """
    Compute per-player score changes for a round.

    Scoring rules (independent bonuses):
    1. Spy found (accused == spy): every citizen +spy_found_bonus, spy +0
    2. Spy not found (someone else, or nobody): nobody changes
    3. Spy guessed the word: spy +spy_guess_bonus, found or not
    """
    spy_found = accused_id is not None and accused_id == spy_id
    deltas: Dict[str, float] = {}
    for player in players:
        delta = 0.0
        if player.id == spy_id:
            if spy_guessed:
                delta += spy_guess_bonus
        elif spy_found:
            delta += spy_found_bonus
        deltas[player.id] = delta
    return deltas


def settle(
    players: Sequence[Player],
    current: CurrentRound,
    accused_id: Optional[str],
    spy_guessed: bool,
    entry_id: str,
    date: str,
    spy_found_bonus: float = SPY_FOUND_BONUS,
    spy_guess_bonus: float = SPY_GUESS_BONUS,
) -> Tuple[Tuple[Player, ...], RoundHistoryEntry]:
    """
    Apply the group's verdict to the roster.

    Args:
        players: Roster in play
        current: The round being settled
        accused_id: Id of the accused player, or NOBODY. None means the
            verdict was never collected.
        spy_guessed: Whether the spy guessed the secret word
        entry_id: Id for the history entry
        date: ISO timestamp for the history entry

    Returns:
        (players with updated scores, history entry for the round)
    """
    if accused_id is None:
        raise MissingVerdictError()

    accused = None if accused_id == NOBODY else accused_id
    deltas = score_deltas(players, current.spy_id, accused, spy_guessed, spy_found_bonus, spy_guess_bonus)
    updated = tuple(p.add_points(deltas.get(p.id, 0.0)) for p in players)

    spy = get_player(players, current.spy_id)
    spy_name = spy.name if spy else "Unknown"
    accused_name = None
    if accused is not None:
        accused_player = get_player(players, accused)
        accused_name = accused_player.name if accused_player else "?"

    entry = RoundHistoryEntry(
        id=entry_id,
        word=current.word,
        spy_name=spy_name,
        accused_name=accused_name,
        spy_guessed=spy_guessed,
        date=date,
        spy_found=accused is not None and accused == current.spy_id,
    )
    logger.info(
        "Round settled: word=%r spy=%s accused=%s spy_guessed=%s",
        current.word, spy_name, accused_name or NOBODY, spy_guessed,
    )
    return updated, entry
