"""
Déclarations "je suis l'orange" (Guess Handler).

- declare_impostor(game, user_id, guess)

Utilisable à tout moment par un joueur actif, quelle que soit la phase:
- l'orange tente le mot commun → fin de partie (gagnée ou perdue);
- une pomme qui se croit orange se retire d'elle-même, la partie continue.

La comparaison est exacte après `strip()` + `casefold()`; pas de tolérance aux fautes.
"""
from __future__ import annotations

import logging
from typing import Optional

from appleorange.engine.errors import GameOver, NotActivePlayer
from appleorange.engine.transitions import advance
from appleorange.models.event import EventType
from appleorange.models.game import Game, Round, Win, WinReason, utcnow

logger = logging.getLogger(__name__)


def normalize_word(word: Optional[str]) -> str:
    return (word or "").strip().casefold()


def declare_impostor(game: Game, user_id: str, guess: str) -> Optional[Win]:
    """Traite la déclaration de `user_id`; renvoie le `Win` si la partie se termine."""
    if game.is_over:
        raise GameOver(game_id=game.id, user_id=user_id)

    rnd = game.current_round
    if user_id not in rnd.players_still_in:
        raise NotActivePlayer(game_id=game.id, user_id=user_id)

    game.touch()
    if user_id == game.alt_player:
        if normalize_word(guess) == normalize_word(game.words.primary):
            game.record(EventType.ORANGE_GUESSED_RIGHT, user_id=user_id, guess=guess)
            return game.finish({user_id}, WinReason.ORANGE_GUESSED_APPLE)

        game.record(EventType.ORANGE_GUESSED_WRONG, user_id=user_id, guess=guess)
        return game.finish(rnd.players_still_in - {user_id}, WinReason.ORANGE_GUESSED_WRONG)

    _withdraw(rnd, user_id)
    game.record(EventType.APPLE_THOUGHT_IT_WAS_THE_ORANGE, user_id=user_id, guess=guess)
    logger.info(
        "Apple withdrew believing they were the orange",
        extra={"game_id": game.id, "user_id": user_id, "remaining": len(rnd.players_still_in)},
    )

    # Plus personne à départager (mort subite vidée): on repart sur une manche normale.
    if not rnd.players_giving_clues:
        rnd.resolved_at = utcnow()
        game.record(EventType.NEXT_ROUND, user_ids=rnd.players_still_in)
        game.rounds.append(Round.ordinary(rnd.players_still_in, rnd.users_voting))

    advance(game)
    return None


def _withdraw(rnd: Round, user_id: str) -> None:
    """Retire un joueur de la manche courante en gardant les invariants indices/votes."""
    rnd.players_still_in.discard(user_id)
    rnd.players_giving_clues.discard(user_id)
    rnd.users_voting.discard(user_id)
    rnd.clues.pop(user_id, None)
    rnd.votes.pop(user_id, None)
    # Les bulletins visant le joueur retiré sont annulés: leurs auteurs revotent.
    for voter_id in [v for v, target in rnd.votes.items() if target == user_id]:
        del rnd.votes[voter_id]
