from types import SimpleNamespace

import pytest

from appleorange.engine.rounds import create_game
from appleorange.models.game import WordPair
from appleorange.models.player import User

NAMES = ["Alice", "Bob", "Charlie", "Dana", "Eve", "Frank", "Gus", "Hana"]


def _pick(user_id):
    """RNG factice: `choice` renvoie toujours le joueur demandé."""
    return SimpleNamespace(choice=lambda seq: next(u for u in seq if u.id == user_id))


@pytest.fixture
def make_game():
    def _make(players=5, alt="p1", observers=0, primary="Apple", decoy="Orange"):
        users = [User(id=f"p{i + 1}", name=NAMES[i]) for i in range(players)]
        watchers = [User(id=f"o{i + 1}", name=f"Observer {i + 1}") for i in range(observers)]
        return create_game(WordPair(primary=primary, alt=decoy), users, watchers, rng=_pick(alt))

    return _make
