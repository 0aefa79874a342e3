"""
Gestion des manches (Round Manager).

API:
- create_game(words, players, observers, rng)  → Game avec la manche d'ouverture
- submit_clue(game, user_id, text)             → enregistre l'indice d'un joueur

Le tirage de l'orange passe par un générateur injectable (`rng.choice`) pour que
les tests et les parties rejouables soient déterministes.
"""
from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from appleorange.config.settings import settings
from appleorange.engine.errors import AlreadySubmitted, GameOver, NotEligible
from appleorange.engine.transitions import advance
from appleorange.models.event import EventType
from appleorange.models.game import Game, Round, RoundPhase, WordPair
from appleorange.models.player import User

logger = logging.getLogger(__name__)


def _default_rng():
    if settings.RANDOM_SEED is not None:
        return random.Random(settings.RANDOM_SEED)
    return random


def create_game(
    words: WordPair,
    players: Iterable[User],
    observers: Iterable[User] = (),
    rng: Optional[random.Random] = None,
) -> Game:
    """
    Crée une partie: tire l'orange parmi `players` et ouvre la première manche.

    Raises:
        ValueError: aucun joueur, ou un même id présent deux fois
            (joueurs et observateurs confondus).
    """
    players = list(players)
    observers = list(observers)
    if not players:
        raise ValueError("A game needs at least one player")

    ids = [u.id for u in players + observers]
    if len(set(ids)) != len(ids):
        raise ValueError("Player and observer ids must be unique")

    rng = rng or _default_rng()
    alt_player = rng.choice(players).id

    player_ids = {p.id for p in players}
    game = Game(
        words=words,
        players=players,
        observers=observers,
        alt_player=alt_player,
        rounds=[Round.ordinary(player_ids, set(ids))],
    )
    logger.info(
        "Game created",
        extra={"game_id": game.id, "players": len(players), "observers": len(observers)},
    )
    return game


def submit_clue(game: Game, user_id: str, text: str) -> RoundPhase:
    """Enregistre l'indice de `user_id` pour la manche courante; renvoie la phase résultante."""
    if game.is_over:
        raise GameOver(game_id=game.id, user_id=user_id)

    rnd = game.current_round
    if user_id not in rnd.players_giving_clues:
        raise NotEligible(game_id=game.id, user_id=user_id)
    if rnd.clues.get(user_id):
        raise AlreadySubmitted(game_id=game.id, user_id=user_id)

    # Un indice vide compte comme soumis mais peut être remplacé plus tard.
    clue = (text or "").strip()
    rnd.clues[user_id] = clue
    game.touch()
    game.record(EventType.CLUE, user_id=user_id, clue=clue)
    logger.debug(
        "Clue accepted",
        extra={"game_id": game.id, "user_id": user_id, "missing": len(rnd.missing_clues)},
    )
    return advance(game)
