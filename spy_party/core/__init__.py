"""
Core game components: session state machine, rounds, roster and scoring.
"""

from .exceptions import (
    GameError,
    InsufficientPlayersError,
    EmptyPoolError,
    MissingVerdictError,
    InvalidTransitionError,
    MalformedSnapshotError,
)
from .player import Player, get_player, leaderboard, roster_text
from .roster import build_roster, parse_names, new_id
from .randomizer import Randomizer
from .history import RoundHistoryEntry, record_round, HISTORY_LIMIT
from .round_engine import (
    NOBODY,
    CurrentRound,
    RevealCard,
    start_round,
    reveal,
    acknowledge,
    advance,
    reveal_card,
    score_deltas,
    settle,
)
from .game_engine import (
    View,
    SessionState,
    SessionMachine,
    TransitionResult,
    default_state,
    dumps_state,
    loads_state,
    SubmitRoster,
    ConfirmRoster,
    EditRoster,
    SelectWord,
    RevealNext,
    EndRound,
    SettleRound,
    NewRound,
    EditWithResetChoice,
    FullReset,
)
from .word_bank import load_words

__all__ = [
    'GameError',
    'InsufficientPlayersError',
    'EmptyPoolError',
    'MissingVerdictError',
    'InvalidTransitionError',
    'MalformedSnapshotError',
    'Player',
    'get_player',
    'leaderboard',
    'roster_text',
    'build_roster',
    'parse_names',
    'new_id',
    'Randomizer',
    'RoundHistoryEntry',
    'record_round',
    'HISTORY_LIMIT',
    'NOBODY',
    'CurrentRound',
    'RevealCard',
    'start_round',
    'reveal',
    'acknowledge',
    'advance',
    'reveal_card',
    'score_deltas',
    'settle',
    'View',
    'SessionState',
    'SessionMachine',
    'TransitionResult',
    'default_state',
    'dumps_state',
    'loads_state',
    'SubmitRoster',
    'ConfirmRoster',
    'EditRoster',
    'SelectWord',
    'RevealNext',
    'EndRound',
    'SettleRound',
    'NewRound',
    'EditWithResetChoice',
    'FullReset',
    'load_words',
]
