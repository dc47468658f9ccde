"""
Roster building from the free-form player name input.
"""

import uuid
from typing import Callable, Dict, List, Optional, Tuple

from .player import Player

IdFactory = Callable[[], str]


def new_id() -> str:
    """Generate a fresh unique identifier."""
    return str(uuid.uuid4())


def parse_names(raw_input: str) -> List[str]:
    """Split comma separated input into trimmed, non-empty names."""
    return [name.strip() for name in raw_input.split(",") if name.strip()]


def build_roster(raw_input: str, id_factory: Optional[IdFactory] = None) -> Tuple[Player, ...]:
    """
    Build a roster from comma separated names.

    Repeated names get an occurrence counter from the second occurrence on,
    so "Ana, Ana, Ana" becomes "Ana", "Ana (2)", "Ana (3)". Every call hands
    out new ids and zero scores; enforcing a minimum size is up to the caller.

    Args:
        raw_input: Names separated by commas, as typed by the host
        id_factory: Callable returning unique ids (uuid4 strings by default)

    Returns:
        Tuple of players in input order
    """
    make_id = id_factory or new_id
    name_counts: Dict[str, int] = {}
    players = []

    for name in parse_names(raw_input):
        count = name_counts.get(name, 0) + 1
        name_counts[name] = count
        display_name = name if count == 1 else f"{name} ({count})"
        players.append(Player(id=make_id(), name=display_name, score=0))

    return tuple(players)
