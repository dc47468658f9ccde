"""
Game configuration and constants.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for session parameters."""

    # Roster
    min_players: int = 3

    # Scoring
    spy_found_bonus: float = 0.5  # Each citizen, when the accused player is the spy
    spy_guess_bonus: float = 4.0  # Spy, when they guessed the secret word

    # History
    history_limit: int = 50  # Most recent rounds kept, newest first

    # Word bank
    word_bank_path: Optional[str] = None  # None uses the bundled list

    # Persistence
    data_dir: str = "data"
    storage_key: str = "spy_game_state"

    # Runtime
    log_level: str = "INFO"
    random_seed: Optional[int] = None  # Random seed for reproducible word/spy picks


# Default configuration instance
default_config = GameConfig()
