"""
Models / event.py
Rôle:
- Définir l'entrée du journal d'audit d'une partie (append-only, chronologique).

Notes:
- `type` restreint à `EventType` pour éviter les fautes de frappe.
- `user_id` pour les événements à sujet unique, `user_ids` (trié) pour les autres.
- `clue` n'est rempli que pour `clue`, `guess` que pour les déclarations.
- Les entrées sont figées (`frozen`) : on ne corrige jamais le journal, on ajoute.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    CLUE = "clue"
    NEXT_ROUND = "next_round"
    SUDDEN_DEATH_ROUND = "sudden_death_round"
    APPLE_VOTED_OUT = "event_apple_voted_out"
    ORANGE_VOTED_OUT = "event_orange_voted_out"
    ORANGE_SURVIVED = "orange_survived"
    APPLE_THOUGHT_IT_WAS_THE_ORANGE = "apple_thought_it_was_the_orange"
    ORANGE_GUESSED_RIGHT = "orange_guessed_right"
    ORANGE_GUESSED_WRONG = "orange_guessed_wrong"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LogEvent(BaseModel):
    """Représente une transition d'état consignée dans le journal de la partie."""
    type: EventType
    user_id: Optional[str] = None  # acteur/sujet unique
    user_ids: List[str] = Field(default_factory=list)  # sujets multiples (ex: candidats)
    guess: Optional[str] = None  # texte proposé lors d'une déclaration
    clue: Optional[str] = None  # indice soumis
    timestamp: datetime = Field(default_factory=utcnow)  # moment de l'écriture (UTC)

    model_config = ConfigDict(frozen=True)
