"""
Votes d'élimination (Vote Tallier, partie publique).

- cast_vote(game, voter_id, target_id) → enregistre (ou remplace) le bulletin d'un votant.

Le dépouillement (`tally.resolve`) est déclenché par `transitions.advance` dès que
tous les votants autorisés ont un bulletin. Un votant qui revote écrase son
bulletin précédent: il n'est jamais compté deux fois.
"""
from __future__ import annotations

import logging

from appleorange.engine.errors import CluesIncomplete, GameOver, InvalidTarget, NotAllowedToVote
from appleorange.engine.transitions import advance
from appleorange.models.game import Game, RoundPhase

logger = logging.getLogger(__name__)


def cast_vote(game: Game, voter_id: str, target_id: str) -> RoundPhase:
    """Enregistre le vote de `voter_id` contre `target_id`; renvoie la phase résultante."""
    if game.is_over:
        raise GameOver(game_id=game.id, user_id=voter_id)

    rnd = game.current_round
    if voter_id not in rnd.users_voting:
        raise NotAllowedToVote(game_id=game.id, user_id=voter_id)
    if rnd.phase is not RoundPhase.VOTING:
        raise CluesIncomplete(game_id=game.id, user_id=voter_id)
    if target_id not in rnd.players_giving_clues:
        raise InvalidTarget(game_id=game.id, user_id=voter_id)

    previous = rnd.votes.get(voter_id)
    rnd.votes[voter_id] = target_id
    game.touch()
    logger.debug(
        "Vote accepted",
        extra={
            "game_id": game.id,
            "user_id": voter_id,
            "target_id": target_id,
            "recast": previous is not None,
            "missing": len(rnd.missing_votes),
        },
    )
    return advance(game)
