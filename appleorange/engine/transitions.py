"""
Transitions de phase d'une manche.

`advance(game)` est appelé à la fin de chaque action acceptée (indice, vote,
déclaration). C'est le seul endroit où une manche change de phase:

    CLUES   --(tous les indices reçus)-->  VOTING
    VOTING  --(tous les votants ont voté)--> RESOLVED (+ nouvelle manche ou fin)
"""
from __future__ import annotations

import logging

from appleorange.engine.tally import resolve
from appleorange.models.game import Game, RoundPhase, utcnow

logger = logging.getLogger(__name__)


def advance(game: Game) -> RoundPhase:
    """Applique les transitions dues et renvoie la phase de la manche courante."""
    if game.is_over:
        return game.current_round.phase

    rnd = game.current_round
    if rnd.phase is RoundPhase.CLUES and rnd.clues_complete:
        rnd.voting_started_at = utcnow()
        logger.info(
            "Voting opened",
            extra={"game_id": game.id, "round_index": len(game.rounds) - 1, "voters": len(rnd.users_voting)},
        )

    if rnd.phase is RoundPhase.VOTING and rnd.votes_complete:
        resolve(game, rnd)

    return game.current_round.phase
