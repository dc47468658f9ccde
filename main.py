"""
Session host for the Spy party game, plus a batch simulation runner.
"""

import argparse
import logging
import random
from dataclasses import replace
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from spy_party.config import GameConfig, default_config, load_config
from spy_party.core import (
    NOBODY,
    ConfirmRoster,
    EditRoster,
    EditWithResetChoice,
    EndRound,
    FullReset,
    NewRound,
    RevealCard,
    RevealNext,
    SelectWord,
    SessionMachine,
    SessionState,
    SettleRound,
    SubmitRoster,
    TransitionResult,
    View,
    leaderboard,
    load_words,
)
from spy_party.storage import JsonFileStore, MemoryStore, SnapshotEmitter, SnapshotStore, load_state, save_state

logger = logging.getLogger(__name__)


class SpyGame:
    """Holds the live session, persists it and re-emits it after every event."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[SnapshotStore] = None,
        emitter: Optional[SnapshotEmitter] = None,
        machine: Optional[SessionMachine] = None,
    ):
        self.config = config or default_config
        self.store = store if store is not None else JsonFileStore(self.config.data_dir)
        self.emitter = emitter or SnapshotEmitter()
        self.machine = machine or SessionMachine(
            config=self.config,
            word_bank=load_words(self.config.word_bank_path),
        )
        self.state: SessionState = load_state(self.store, self.config.storage_key)
        logger.info(
            "Session loaded: view=%s players=%d rounds=%d",
            self.state.view.value, len(self.state.players), len(self.state.history),
        )

    def handle(self, event: Any) -> TransitionResult:
        """Dispatch one inbound event and publish the resulting snapshot."""
        result = self.machine.dispatch(self.state, event)
        if result.accepted:
            self.state = result.state
            self._persist()
        self.emitter.emit_state(event, result)
        return result

    def _persist(self) -> None:
        try:
            save_state(self.store, self.state, self.config.storage_key)
        except (OSError, TypeError, ValueError) as e:
            # In-memory state stays authoritative for the rest of the process
            logger.error("Error saving session snapshot: %s", e)

    # Inbound events

    def submit_roster(self, raw_names: str) -> TransitionResult:
        return self.handle(SubmitRoster(raw_names))

    def confirm_roster(self) -> TransitionResult:
        return self.handle(ConfirmRoster())

    def edit_roster(self) -> TransitionResult:
        return self.handle(EditRoster())

    def select_word(self, word: str = "") -> TransitionResult:
        return self.handle(SelectWord(word))

    def reveal_next(self) -> TransitionResult:
        return self.handle(RevealNext())

    def end_round(self) -> TransitionResult:
        return self.handle(EndRound())

    def settle_round(self, accused_id: Optional[str], spy_guessed: bool = False) -> TransitionResult:
        return self.handle(SettleRound(accused_id, spy_guessed))

    def new_round(self) -> TransitionResult:
        return self.handle(NewRound())

    def edit_players(self, reset: bool) -> TransitionResult:
        return self.handle(EditWithResetChoice(reset))

    def full_reset(self) -> TransitionResult:
        return self.handle(FullReset())

    # Read models

    @property
    def view(self) -> View:
        return self.state.view

    def reveal_card(self) -> Optional[RevealCard]:
        return self.state.reveal_card()

    def play_reveal(self) -> None:
        """Walk every player through reveal and hide until the round is in progress."""
        while self.state.view == View.REVEAL:
            result = self.reveal_next()
            if not result.accepted:
                break

    def get_game_summary(self) -> Dict[str, Any]:
        """Get session summary as dictionary."""
        return {
            "view": self.state.view.value,
            "rounds": len(self.state.history),
            "leaderboard": [(p.name, p.score) for p in leaderboard(self.state.players)],
            "last_round": self.state.history[0].to_dict() if self.state.history else None,
        }


def simulate(game: SpyGame, names: str, rounds: int, rng: random.Random) -> Dict[str, Any]:
    """
    Play ``rounds`` automated rounds with random verdicts.

    Returns:
        The final session summary
    """
    if game.state.view != View.SETUP:
        game.full_reset()

    result = game.submit_roster(names)
    if not result.accepted:
        raise SystemExit(result.message)
    game.confirm_roster()

    for round_number in range(1, rounds + 1):
        result = game.select_word("")
        if not result.accepted:
            raise SystemExit(result.message)
        current = game.state.current_round
        spy = game.state.get_player(current.spy_id)
        game.play_reveal()
        game.end_round()

        candidates = [p.id for p in game.state.players] + [NOBODY]
        accused_id = candidates[rng.randrange(len(candidates))]
        spy_guessed = rng.random() < 0.3
        game.settle_round(accused_id, spy_guessed)

        entry = game.state.history[0]
        print(
            f"[Round {round_number}] word={entry.word!r} spy={spy.name} "
            f"accused={entry.accused_name or 'nobody'} spy_guessed={entry.spy_guessed}"
        )
        if round_number < rounds:
            game.new_round()

    return game.get_game_summary()


def _print_summary(summary: Dict[str, Any]) -> None:
    print("\n📊 SESSION SUMMARY")
    print("-" * 60)
    print(f"Rounds played: {summary['rounds']}")
    for position, (name, score) in enumerate(summary["leaderboard"], start=1):
        print(f"  {position}. {name}: {score}")


def main():
    """Entry point for a simulated session."""
    parser = argparse.ArgumentParser(
        description="Simulate a Spy party game session",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # 5 rounds, default players
  python main.py --players "Ana, Luis, Sofia, Leo" --rounds 10
  python main.py --config configs/party.yaml --persist
        """
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: $SPY_PARTY_CONFIG or built-in defaults)"
    )
    parser.add_argument(
        "--players",
        "-p",
        type=str,
        default="Ana, Luis, Sofia, Mariana",
        help="Comma separated player names"
    )
    parser.add_argument(
        "--rounds",
        "-n",
        type=int,
        default=5,
        help="Number of rounds to play (default: 5)"
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        default=None,
        help="Random seed for reproducible words, spies and verdicts"
    )
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Save the session snapshot under the configured data directory"
    )

    args = parser.parse_args()

    config = load_config(args.config)
    if args.seed is not None:
        config = replace(config, random_seed=args.seed)

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = JsonFileStore(config.data_dir) if args.persist else MemoryStore()
    game = SpyGame(config=config, store=store)

    print("Spy Party Simulation")
    print("=" * 60)
    summary = simulate(game, args.players, args.rounds, random.Random(config.random_seed))
    _print_summary(summary)


if __name__ == "__main__":
    load_dotenv()
    main()
