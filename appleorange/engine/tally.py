"""
Dépouillement d'une manche (Vote Tallier, partie interne).

- count_ballots(votes)  → {player_id: nb de voix}
- rank(counts)          → [(player_id, voix)] trié par voix desc puis par id
- resolve(game, rnd)    → élimination, mort subite ou fin de partie

Règles:
- Majorité stricte (2 × voix > bulletins) → le joueur en tête est éliminé.
- Sinon → manche de mort subite entre les ex aequo en tête (au moins les deux premiers).
- Départage des égalités: ordre croissant des player_ids (déterministe).
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Set, Tuple

from appleorange.config.settings import settings
from appleorange.models.event import EventType
from appleorange.models.game import Game, Round, WinReason, utcnow

logger = logging.getLogger(__name__)


def count_ballots(votes: Dict[str, str]) -> Dict[str, int]:
    """Nombre de voix reçues par chaque joueur visé."""
    return dict(Counter(votes.values()))


def rank(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    """Return targets sorted by votes (descending), ties by player id."""
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def has_majority(ranking: List[Tuple[str, int]], ballots_cast: int) -> bool:
    return bool(ranking) and ranking[0][1] * 2 > ballots_cast


def sudden_death_candidates(ranking: List[Tuple[str, int]]) -> Set[str]:
    """
    Joueurs remis en jeu quand personne n'a la majorité: tous les ex aequo en tête.
    Les deux premiers du classement sont toujours retenus: si le premier est seul
    en tête (pluralité sans majorité), seul le deuxième du classement le rejoint.
    """
    if len(ranking) < 2:
        raise AssertionError("Sudden death needs at least two voted-for players")
    top = ranking[0][1]
    candidates = {ranking[0][0], ranking[1][0]}
    candidates.update(pid for pid, votes in ranking[2:] if votes == top)
    return candidates


def resolve(game: Game, rnd: Round) -> Optional[Round]:
    """
    Clôt la manche `rnd` (tous les votes sont là).
    Renvoie la nouvelle manche ouverte, ou None si la partie est terminée.
    """
    counts = count_ballots(rnd.votes)
    ballots_cast = sum(counts.values())
    if not ballots_cast:
        raise AssertionError(f"Cannot tally game {game.id}: no ballots cast")

    ranking = rank(counts)
    rnd.resolved_at = utcnow()
    round_index = len(game.rounds) - 1
    logger.info(
        "Round tallied",
        extra={"game_id": game.id, "round_index": round_index, "ballots": ballots_cast, "ranking": ranking},
    )

    if has_majority(ranking, ballots_cast):
        return _eliminate(game, rnd, ranking[0][0])

    candidates = sudden_death_candidates(ranking)
    game.record(EventType.SUDDEN_DEATH_ROUND, user_ids=candidates)
    new_round = Round.sudden_death(candidates, rnd.players_still_in, rnd.users_voting)
    game.rounds.append(new_round)
    logger.info(
        "Sudden death round started",
        extra={"game_id": game.id, "round_index": round_index + 1, "candidates": sorted(candidates)},
    )
    return new_round


def _eliminate(game: Game, rnd: Round, eliminated: str) -> Optional[Round]:
    rnd.player_eliminated = eliminated
    survivors = rnd.players_still_in - {eliminated}

    if eliminated == game.alt_player:
        game.record(EventType.ORANGE_VOTED_OUT, user_id=eliminated)
        game.finish(survivors, WinReason.ORANGE_VOTED_OUT)
        return None

    game.record(EventType.APPLE_VOTED_OUT, user_id=eliminated)

    # L'orange a tenu jusqu'au dernier carré (moins de trois restants si la partie
    # a commencé à trois ou a été réduite par des retraits).
    if len(survivors) <= settings.SURVIVAL_PLAYER_COUNT:
        game.record(EventType.ORANGE_SURVIVED, user_id=game.alt_player)
        game.finish({game.alt_player}, WinReason.ORANGE_SURVIVED)
        return None

    game.record(EventType.NEXT_ROUND, user_ids=survivors)
    new_round = Round.ordinary(survivors, rnd.users_voting - {eliminated})
    game.rounds.append(new_round)
    logger.info(
        "Player voted out",
        extra={"game_id": game.id, "user_id": eliminated, "remaining": len(survivors)},
    )
    return new_round
