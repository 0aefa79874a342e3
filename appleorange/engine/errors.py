"""
Erreurs de règles du moteur.

Chaque refus d'action joueur lève une sous-classe de `GameRuleError` avec un `code`
stable (exploitable par la couche transport). La validation a toujours lieu avant
toute écriture: une action refusée laisse la partie intacte.

Les violations d'invariants internes ne passent PAS par ici: elles lèvent
`AssertionError` (bug du moteur, pas une erreur joueur).
"""
from __future__ import annotations

from typing import Optional


class GameRuleError(ValueError):
    """Action refusée par les règles du jeu (non fatale)."""

    code = "rule_error"
    default_message = "Action refusée."

    def __init__(self, message: Optional[str] = None, *, game_id: Optional[str] = None, user_id: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
        self.game_id = game_id
        self.user_id = user_id


class NotEligible(GameRuleError):
    code = "not_eligible"
    default_message = "You don't need to give clues right now."


class AlreadySubmitted(GameRuleError):
    code = "already_submitted"
    default_message = "You already gave a clue and can't change it."


class NotAllowedToVote(GameRuleError):
    code = "not_allowed_to_vote"
    default_message = "You're not allowed to vote now."


class CluesIncomplete(GameRuleError):
    code = "clues_incomplete"
    default_message = "Everyone needs to submit their clues first."


class InvalidTarget(GameRuleError):
    code = "invalid_target"
    default_message = "That player isn't up for elimination."


class GameOver(GameRuleError):
    code = "game_over"
    default_message = "The game is already over."


class NotActivePlayer(GameRuleError):
    code = "not_active_player"
    default_message = "You're not an active player in this game."
