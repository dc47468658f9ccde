"""
Session state machine managing the roster, rounds and view transitions.
"""

import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..config.game_config import GameConfig, default_config
from .exceptions import (
    EmptyPoolError,
    GameError,
    InsufficientPlayersError,
    InvalidTransitionError,
    MalformedSnapshotError,
)
from .history import RoundHistoryEntry, record_round
from .player import Player, get_player
from .randomizer import Randomizer
from .roster import IdFactory, build_roster, new_id
from .round_engine import CurrentRound, RevealCard, advance, reveal_card, settle, start_round

logger = logging.getLogger(__name__)


class View(Enum):
    """Current session view."""
    SETUP = "SETUP"
    PLAYER_PREVIEW = "PLAYER_PREVIEW"
    WORD_SELECT = "WORD_SELECT"
    REVEAL = "REVEAL"
    IN_PROGRESS = "IN_PROGRESS"
    RESULTS = "RESULTS"
    LEADERBOARD = "LEADERBOARD"


@dataclass(frozen=True)
class SessionState:
    """Complete session state. Replaced as a whole on every transition."""
    players: Tuple[Player, ...] = ()
    history: Tuple[RoundHistoryEntry, ...] = ()  # newest first
    view: View = View.SETUP
    current_round: Optional[CurrentRound] = None

    def get_player(self, player_id: str) -> Optional[Player]:
        return get_player(self.players, player_id)

    def reveal_card(self) -> Optional[RevealCard]:
        """Card to show during the reveal sequence."""
        if self.view != View.REVEAL:
            return None
        return reveal_card(self.players, self.current_round)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "players": [p.to_dict() for p in self.players],
            "history": [h.to_dict() for h in self.history],
            "view": self.view.value,
            "currentRound": self.current_round.to_dict() if self.current_round else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionState":
        if not isinstance(data, dict):
            raise MalformedSnapshotError(f"expected an object, got {type(data).__name__}")
        missing = [key for key in ("players", "history", "view") if key not in data]
        if missing:
            raise MalformedSnapshotError(f"missing keys {missing}", missing=missing)
        if not isinstance(data["players"], list) or not isinstance(data["history"], list):
            raise MalformedSnapshotError("players and history must be lists")
        try:
            view = View(data["view"])
        except ValueError as e:
            raise MalformedSnapshotError(f"unknown view {data['view']!r}") from e

        round_data = data.get("currentRound")
        return cls(
            players=tuple(Player.from_dict(p) for p in data["players"]),
            history=tuple(RoundHistoryEntry.from_dict(h) for h in data["history"]),
            view=view,
            current_round=CurrentRound.from_dict(round_data) if round_data is not None else None,
        )


def default_state() -> SessionState:
    """The empty session: no players, no history, SETUP view, no round."""
    return SessionState()


def dumps_state(state: SessionState) -> str:
    """Serialize a session to its JSON snapshot."""
    return json.dumps(state.to_dict())


def loads_state(blob: str) -> SessionState:
    """Parse a JSON snapshot; raises MalformedSnapshotError on any defect."""
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise MalformedSnapshotError(f"not valid JSON: {e}") from e
    except RecursionError as e:
        raise MalformedSnapshotError("snapshot is nested too deeply") from e
    return SessionState.from_dict(data)


# Inbound events

@dataclass(frozen=True)
class SubmitRoster:
    raw_names: str


@dataclass(frozen=True)
class ConfirmRoster:
    pass


@dataclass(frozen=True)
class EditRoster:
    pass


@dataclass(frozen=True)
class SelectWord:
    word: str = ""  # empty means a random word from the bank


@dataclass(frozen=True)
class RevealNext:
    pass


@dataclass(frozen=True)
class EndRound:
    pass


@dataclass(frozen=True)
class SettleRound:
    accused_id: Optional[str]  # player id, NOBODY, or None if not chosen yet
    spy_guessed: bool = False


@dataclass(frozen=True)
class NewRound:
    pass


@dataclass(frozen=True)
class EditWithResetChoice:
    reset: bool


@dataclass(frozen=True)
class FullReset:
    pass


@dataclass
class TransitionResult:
    """Result of dispatching an event."""
    accepted: bool
    state: SessionState
    error: Optional[GameError] = None
    message: str = ""


class SessionMachine:
    """Reducer from (state, event) to the next session state."""

    def __init__(
        self,
        config: GameConfig = default_config,
        randomizer: Optional[Randomizer] = None,
        word_bank: Sequence[str] = (),
        id_factory: Optional[IdFactory] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.randomizer = randomizer or Randomizer(seed=config.random_seed)
        self.word_bank = list(word_bank)
        self.id_factory = id_factory or new_id
        self.clock = clock or datetime.now
        self._handlers: Dict[type, Tuple[Optional[View], Callable[[SessionState, Any], SessionState]]] = {
            SubmitRoster: (View.SETUP, self._submit_roster),
            EditRoster: (View.PLAYER_PREVIEW, self._edit_roster),
            ConfirmRoster: (View.PLAYER_PREVIEW, self._confirm_roster),
            SelectWord: (View.WORD_SELECT, self._select_word),
            RevealNext: (View.REVEAL, self._reveal_next),
            EndRound: (View.IN_PROGRESS, self._end_round),
            SettleRound: (View.RESULTS, self._settle_round),
            NewRound: (View.LEADERBOARD, self._new_round),
            EditWithResetChoice: (View.LEADERBOARD, self._edit_with_reset_choice),
            FullReset: (None, self._full_reset),
        }

    def dispatch(self, state: SessionState, event: Any) -> TransitionResult:
        """
        Apply an event to the session.

        Rejected events never raise: the result carries the unchanged state
        and the error that caused the rejection.
        """
        try:
            handler = self._handlers.get(type(event))
            if handler is None:
                raise InvalidTransitionError(event, state.view, message=f"Unknown event {event!r}")
            required_view, apply = handler
            if required_view is not None and state.view != required_view:
                raise InvalidTransitionError(event, state.view)
            new_state = apply(state, event)
        except EmptyPoolError as e:
            logger.error("Invariant violated while handling %s: %s", type(event).__name__, e.message)
            return TransitionResult(accepted=False, state=state, error=e, message=e.message)
        except GameError as e:
            logger.warning("Rejected %s: %s", type(event).__name__, e.message)
            return TransitionResult(accepted=False, state=state, error=e, message=e.message)

        logger.debug("%s: %s -> %s", type(event).__name__, state.view.value, new_state.view.value)
        return TransitionResult(accepted=True, state=new_state)

    def _submit_roster(self, state: SessionState, event: SubmitRoster) -> SessionState:
        players = build_roster(event.raw_names, self.id_factory)
        if len(players) < self.config.min_players:
            raise InsufficientPlayersError(len(players), self.config.min_players)
        return replace(state, players=players, view=View.PLAYER_PREVIEW)

    def _edit_roster(self, state: SessionState, event: EditRoster) -> SessionState:
        return replace(state, view=View.SETUP)

    def _confirm_roster(self, state: SessionState, event: ConfirmRoster) -> SessionState:
        return replace(state, view=View.WORD_SELECT)

    def _select_word(self, state: SessionState, event: SelectWord) -> SessionState:
        word = (event.word or "").strip() or self.randomizer.pick_word(self.word_bank)
        spy_id = self.randomizer.pick_spy(state.players)
        return replace(state, view=View.REVEAL, current_round=start_round(word, spy_id))

    def _reveal_next(self, state: SessionState, event: RevealNext) -> SessionState:
        if state.current_round is None:
            raise InvalidTransitionError(event, state.view, message="No round is being revealed")
        current, finished = advance(state.current_round, len(state.players))
        view = View.IN_PROGRESS if finished else View.REVEAL
        return replace(state, current_round=current, view=view)

    def _end_round(self, state: SessionState, event: EndRound) -> SessionState:
        return replace(state, view=View.RESULTS)

    def _settle_round(self, state: SessionState, event: SettleRound) -> SessionState:
        if state.current_round is None:
            raise InvalidTransitionError(event, state.view, message="No round to settle")
        players, entry = settle(
            state.players,
            state.current_round,
            event.accused_id,
            event.spy_guessed,
            entry_id=self.id_factory(),
            date=self.clock().isoformat(),
            spy_found_bonus=self.config.spy_found_bonus,
            spy_guess_bonus=self.config.spy_guess_bonus,
        )
        return replace(
            state,
            players=players,
            history=record_round(state.history, entry, self.config.history_limit),
            current_round=None,
            view=View.LEADERBOARD,
        )

    def _new_round(self, state: SessionState, event: NewRound) -> SessionState:
        return replace(state, current_round=None, view=View.WORD_SELECT)

    def _edit_with_reset_choice(self, state: SessionState, event: EditWithResetChoice) -> SessionState:
        # Accepting the prompt zeroes scores and clears history; declining only changes view
        if event.reset:
            return replace(
                state,
                players=tuple(p.reset_score() for p in state.players),
                history=(),
                current_round=None,
                view=View.SETUP,
            )
        return replace(state, current_round=None, view=View.SETUP)

    def _full_reset(self, state: SessionState, event: FullReset) -> SessionState:
        return default_state()
