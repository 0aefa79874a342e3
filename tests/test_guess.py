import pytest

from appleorange.engine.errors import NotActivePlayer
from appleorange.engine.guess import declare_impostor, normalize_word
from appleorange.engine.rounds import submit_clue
from appleorange.engine.voting import cast_vote
from appleorange.models.event import EventType
from appleorange.models.game import RoundPhase, WinReason


def give_clues(game, skip=()):
    for pid in sorted(game.current_round.players_giving_clues):
        if pid not in skip:
            submit_clue(game, pid, f"clue from {pid}")


@pytest.mark.parametrize("guess", ["Apple", "  apple ", "APPLE\n"])
def test_orange_guessing_the_word_wins(make_game, guess):
    game = make_game(players=5, alt="p2", primary=" Apple")

    win = declare_impostor(game, "p2", guess)

    assert win is game.win
    assert win.winners == ["p2"]
    assert win.why is WinReason.ORANGE_GUESSED_APPLE
    assert game.log[-1].type is EventType.ORANGE_GUESSED_RIGHT
    assert game.log[-1].user_id == "p2"


def test_orange_guessing_wrong_hands_win_to_active_players(make_game):
    game = make_game(players=5, alt="p2")

    win = declare_impostor(game, "p2", "Apples")

    assert win.why is WinReason.ORANGE_GUESSED_WRONG
    assert win.winners == ["p1", "p3", "p4", "p5"]
    assert game.log[-1].type is EventType.ORANGE_GUESSED_WRONG
    assert game.log[-1].guess == "Apples"


def test_wrong_guess_excludes_players_already_voted_out(make_game):
    game = make_game(players=6, alt="p6")
    give_clues(game)
    for voter in ["p2", "p3", "p4", "p5", "p6"]:
        cast_vote(game, voter, "p1")
    cast_vote(game, "p1", "p2")
    assert game.current_round.players_still_in == {"p2", "p3", "p4", "p5", "p6"}

    with pytest.raises(NotActivePlayer):
        declare_impostor(game, "p1", "Apple")

    win = declare_impostor(game, "p6", "banana")
    assert win.winners == ["p2", "p3", "p4", "p5"]


def test_orange_can_declare_mid_round(make_game):
    game = make_game(players=5, alt="p4")
    submit_clue(game, "p1", "red")

    win = declare_impostor(game, "p4", "apple")

    assert win.why is WinReason.ORANGE_GUESSED_APPLE
    assert game.current_round.phase is RoundPhase.CLUES


def test_apple_declaring_withdraws_without_ending_game(make_game):
    game = make_game(players=5, alt="p5", observers=1)
    submit_clue(game, "p3", "pie")

    result = declare_impostor(game, "p3", "Orange")

    assert result is None
    assert game.win is None
    rnd = game.current_round
    assert "p3" not in rnd.players_still_in
    assert "p3" not in rnd.players_giving_clues
    assert "p3" not in rnd.users_voting
    assert "p3" not in rnd.clues
    assert rnd.users_voting == {"p1", "p2", "p4", "p5", "o1"}

    entry = game.log[-1]
    assert entry.type is EventType.APPLE_THOUGHT_IT_WAS_THE_ORANGE
    assert entry.user_id == "p3"
    assert entry.guess == "Orange"


def test_observers_cannot_declare(make_game):
    game = make_game(observers=1)

    with pytest.raises(NotActivePlayer):
        declare_impostor(game, "o1", "Apple")
    assert game.log == []


def test_withdrawal_of_last_missing_clue_giver_opens_voting(make_game):
    game = make_game(players=5, alt="p1")
    give_clues(game, skip={"p5"})
    assert game.current_round.phase is RoundPhase.CLUES

    declare_impostor(game, "p5", "Orange")

    assert game.current_round.phase is RoundPhase.VOTING


def test_withdrawal_cancels_ballots_aimed_at_the_player(make_game):
    game = make_game(players=6, alt="p6")
    give_clues(game)
    cast_vote(game, "p1", "p2")
    cast_vote(game, "p3", "p4")

    declare_impostor(game, "p2", "Orange")

    assert game.current_round.votes == {"p3": "p4"}
    # p1 peut revoter pour un candidat restant.
    cast_vote(game, "p1", "p4")
    assert game.current_round.votes == {"p1": "p4", "p3": "p4"}


def test_withdrawal_of_last_missing_voter_resolves_round(make_game):
    game = make_game(players=5, alt="p5")
    give_clues(game)
    for voter in ["p2", "p3", "p4"]:
        cast_vote(game, voter, "p5")
    cast_vote(game, "p5", "p2")

    declare_impostor(game, "p1", "Orange")

    assert game.win is not None
    assert game.win.why is WinReason.ORANGE_VOTED_OUT
    assert game.win.winners == ["p2", "p3", "p4"]


def test_emptied_sudden_death_falls_back_to_ordinary_round(make_game):
    game = make_game(players=5, alt="p5")
    give_clues(game)
    for voter, target in {"p1": "p2", "p2": "p1", "p3": "p1", "p4": "p2", "p5": "p3"}.items():
        cast_vote(game, voter, target)
    assert game.current_round.players_giving_clues == {"p1", "p2"}

    declare_impostor(game, "p1", "Orange")
    declare_impostor(game, "p2", "Orange")

    assert game.win is None
    assert len(game.rounds) == 3
    assert game.rounds[1].phase is RoundPhase.RESOLVED
    rnd = game.current_round
    assert rnd.is_sudden_death is False
    assert rnd.players_giving_clues == {"p3", "p4", "p5"}
    assert game.log[-1].type is EventType.NEXT_ROUND
    assert game.log[-1].user_ids == ["p3", "p4", "p5"]


def test_normalize_word():
    assert normalize_word("  ÉCLAIR ") == "éclair"
    assert normalize_word("Straße") == normalize_word("STRASSE")
    assert normalize_word(None) == ""
