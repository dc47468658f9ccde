"""
Tests for reveal sequencing and settlement scoring.
"""

import pytest

from spy_party.core import (
    NOBODY,
    CurrentRound,
    InvalidTransitionError,
    MissingVerdictError,
    acknowledge,
    advance,
    build_roster,
    reveal,
    reveal_card,
    score_deltas,
    settle,
    start_round,
)


@pytest.fixture
def players(id_factory):
    """Ana, Luis, Sofia, Leo as id-1..id-4."""
    return build_roster("Ana, Luis, Sofia, Leo", id_factory)


def test_start_round_face_down():
    """Test that a round starts at the first player with the card hidden."""
    current = start_round("Beach", "id-2")
    assert current == CurrentRound(word="Beach", spy_id="id-2", reveal_index=0, is_revealed=False)


def test_reveal_then_acknowledge_advances_once():
    """Test one reveal/hide pair."""
    current = reveal(start_round("Beach", "id-2"))
    assert current.is_revealed
    assert current.reveal_index == 0

    current, finished = acknowledge(current, 4)
    assert not finished
    assert not current.is_revealed
    assert current.reveal_index == 1


def test_reveal_twice_rejected():
    """Test that a face-up card cannot be revealed again."""
    current = reveal(start_round("Beach", "id-2"))
    with pytest.raises(InvalidTransitionError):
        reveal(current)


def test_acknowledge_requires_reveal():
    """Test that a player cannot be skipped without seeing the card."""
    with pytest.raises(InvalidTransitionError):
        acknowledge(start_round("Beach", "id-2"), 4)


def test_reveal_sequence_finishes_after_last_player():
    """Test that the sequence finishes exactly on the last hide."""
    current = start_round("Beach", "id-2")
    for index in range(4):
        assert current.reveal_index == index
        current, finished = advance(current, 4)
        assert current.is_revealed and not finished
        current, finished = advance(current, 4)
        assert not current.is_revealed
        assert finished == (index == 3)
    assert current.reveal_index == 4


def test_reveal_card_for_citizen_and_spy(players):
    """Test what each player sees."""
    current = start_round("Beach", "id-2")

    card = reveal_card(players, current)
    assert card.player_name == "Ana"
    assert not card.revealed
    assert card.word is None
    assert card.message == "Turn of Ana"

    card = reveal_card(players, reveal(current))
    assert card.revealed and not card.is_spy
    assert card.word == "Beach"
    assert card.message == "The word is: Beach"

    current, _ = acknowledge(reveal(current), len(players))
    card = reveal_card(players, reveal(current))
    assert card.player_name == "Luis"
    assert card.is_spy
    assert card.word is None
    assert card.message == "You are the spy!"


def test_reveal_card_none_outside_sequence(players):
    """Test that no card is shown once everybody has seen theirs."""
    assert reveal_card(players, None) is None
    done = CurrentRound(word="Beach", spy_id="id-2", reveal_index=4, is_revealed=False)
    assert reveal_card(players, done) is None


def test_scoring_spy_found_without_guess(players):
    """Test citizens +0.5 and spy +0 when the spy is caught."""
    deltas = score_deltas(players, "id-2", "id-2", spy_guessed=False)
    assert deltas == {"id-1": 0.5, "id-2": 0.0, "id-3": 0.5, "id-4": 0.5}


def test_scoring_nobody_accused_spy_guessed(players):
    """Test spy +4 and citizens +0 when nobody is accused and the spy guesses."""
    deltas = score_deltas(players, "id-2", None, spy_guessed=True)
    assert deltas == {"id-1": 0.0, "id-2": 4.0, "id-3": 0.0, "id-4": 0.0}


def test_scoring_spy_found_and_guessed(players):
    """Test that both bonuses apply independently."""
    deltas = score_deltas(players, "id-2", "id-2", spy_guessed=True)
    assert deltas == {"id-1": 0.5, "id-2": 4.0, "id-3": 0.5, "id-4": 0.5}


def test_scoring_wrong_accusation(players):
    """Test that accusing a citizen gives nobody points."""
    deltas = score_deltas(players, "id-2", "id-3", spy_guessed=False)
    assert set(deltas.values()) == {0.0}


def test_scoring_custom_bonuses(players):
    deltas = score_deltas(players, "id-2", "id-2", True, spy_found_bonus=1, spy_guess_bonus=2)
    assert deltas["id-1"] == 1
    assert deltas["id-2"] == 2


def test_settle_updates_scores_and_snapshots_names(players):
    """Test that settlement applies deltas and records names."""
    current = CurrentRound(word="Beach", spy_id="id-2", reveal_index=4)
    updated, entry = settle(players, current, "id-2", True, entry_id="r1", date="2024-05-01T20:30:00")

    assert [p.score for p in updated] == [0.5, 4.0, 0.5, 0.5]
    assert [p.id for p in updated] == [p.id for p in players]
    assert entry.id == "r1"
    assert entry.word == "Beach"
    assert entry.spy_name == "Luis"
    assert entry.accused_name == "Luis"
    assert entry.spy_guessed
    assert entry.spy_found
    # Inputs are untouched
    assert all(p.score == 0 for p in players)


def test_settle_nobody(players):
    """Test the nobody sentinel."""
    current = CurrentRound(word="Beach", spy_id="id-2", reveal_index=4)
    updated, entry = settle(players, current, NOBODY, False, entry_id="r1", date="now")

    assert all(p.score == 0 for p in updated)
    assert entry.accused_name is None
    assert not entry.spy_found


def test_settle_requires_verdict(players):
    """Test that settlement without a verdict is rejected."""
    current = CurrentRound(word="Beach", spy_id="id-2", reveal_index=4)
    with pytest.raises(MissingVerdictError):
        settle(players, current, None, False, entry_id="r1", date="now")


def test_settle_unknown_ids(players):
    """Test placeholder names for ids missing from the roster."""
    current = CurrentRound(word="Beach", spy_id="ghost", reveal_index=4)
    _, entry = settle(players, current, "stranger", False, entry_id="r1", date="now")

    assert entry.spy_name == "Unknown"
    assert entry.accused_name == "?"


def test_settle_spy_found_by_id_not_name():
    """Test two players sharing a display name."""
    ids = iter(["a", "b", "c"])
    players = build_roster("Ana, Ana (2), Ana", lambda: next(ids))
    assert [p.name for p in players] == ["Ana", "Ana (2)", "Ana (2)"]

    current = CurrentRound(word="Beach", spy_id="c", reveal_index=3)
    updated, entry = settle(players, current, "b", False, entry_id="r1", date="now")

    assert entry.spy_name == entry.accused_name == "Ana (2)"
    assert not entry.spy_found
    assert all(p.score == 0 for p in updated)
