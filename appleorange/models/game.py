"""
Models / game.py
Rôle:
- Définir l'agrégat `Game` (une partie) et ses manches `Round`.
- Porter les invariants simples (phase de manche, complétude indices/votes, horodatage).

Champs principaux (Game):
- words: paire de mots (exportée sous `word_pair`); seul `primary` est comparé aux propositions de l'orange.
- players / observers: fixés à la création (les observateurs votent mais ne jouent pas).
- alt_player: l'orange, tiré au sort à la création, immuable.
- win: résultat terminal; une fois posé, plus aucune mutation n'est acceptée.
- rounds / log: listes append-only (la dernière manche est la manche courante).

Notes:
- Les ensembles de joueurs sont des `set`; tout ce qui sort vers l'extérieur
  (winners, user_ids du journal) est trié par id pour rester déterministe.
"""
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from appleorange.models import event as event_model
from appleorange.models.event import EventType, LogEvent
from appleorange.models.player import User

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Horloge du moteur (les tests patchent `event.utcnow`)."""
    return event_model.utcnow()


class WordPair(BaseModel):
    primary: str  # mot commun des pommes
    alt: str  # mot leurre donné à l'orange

    model_config = ConfigDict(frozen=True)


class WinReason(str, Enum):
    ORANGE_GUESSED_APPLE = "orange_guessed_apple"
    ORANGE_GUESSED_WRONG = "orange_guessed_wrong"
    ORANGE_VOTED_OUT = "orange_voted_out"
    # Valeur historique (faute comprise) conservée telle quelle pour les clients existants.
    ORANGE_SURVIVED = "orange_surived"


class Win(BaseModel):
    """Issue terminale d'une partie."""
    winners: List[str]  # player_ids triés
    why: WinReason

    model_config = ConfigDict(frozen=True)


class RoundPhase(str, Enum):
    CLUES = "clues"
    VOTING = "voting"
    RESOLVED = "resolved"


class Round(BaseModel):
    """Un cycle indices → votes → dépouillement."""
    is_sudden_death: bool = False
    clues: Dict[str, str] = Field(default_factory=dict)  # player_id -> indice
    votes: Dict[str, str] = Field(default_factory=dict)  # voter_id -> player_id visé
    players_still_in: Set[str] = Field(default_factory=set)
    players_giving_clues: Set[str] = Field(default_factory=set)
    users_voting: Set[str] = Field(default_factory=set)
    player_eliminated: Optional[str] = None
    round_started_at: datetime = Field(default_factory=utcnow)
    voting_started_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    @classmethod
    def ordinary(cls, players_still_in: Set[str], users_voting: Set[str]) -> "Round":
        """Manche normale: tous les joueurs actifs donnent un indice et sont éliminables."""
        return cls(
            players_still_in=set(players_still_in),
            players_giving_clues=set(players_still_in),
            users_voting=set(users_voting),
        )

    @classmethod
    def sudden_death(cls, candidates: Set[str], players_still_in: Set[str], users_voting: Set[str]) -> "Round":
        """Manche de mort subite: seuls les ex aequo sont en jeu, personne n'est retiré."""
        return cls(
            is_sudden_death=True,
            players_still_in=set(players_still_in),
            players_giving_clues=set(candidates),
            users_voting=set(users_voting),
        )

    @property
    def phase(self) -> RoundPhase:
        if self.resolved_at is not None:
            return RoundPhase.RESOLVED
        if self.voting_started_at is not None:
            return RoundPhase.VOTING
        return RoundPhase.CLUES

    @property
    def missing_clues(self) -> Set[str]:
        return self.players_giving_clues - set(self.clues)

    @property
    def missing_votes(self) -> Set[str]:
        return self.users_voting - set(self.votes)

    @property
    def clues_complete(self) -> bool:
        return not self.missing_clues

    @property
    def votes_complete(self) -> bool:
        return not self.missing_votes


class Game(BaseModel):
    """Agrégat racine d'une partie. Muté uniquement par les opérations du moteur."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    words: WordPair = Field(serialization_alias="word_pair")
    players: List[User]
    observers: List[User] = Field(default_factory=list)
    alt_player: str
    win: Optional[Win] = None
    rounds: List[Round] = Field(default_factory=list)  # chronologique
    log: List[LogEvent] = Field(default_factory=list)  # chronologique

    @property
    def current_round(self) -> Round:
        if not self.rounds:
            raise AssertionError(f"Game {self.id} has no round")
        return self.rounds[-1]

    @property
    def is_over(self) -> bool:
        return self.win is not None

    def touch(self) -> datetime:
        """Met à jour `updated_at` sans jamais reculer (horloge murale non monotone)."""
        now = utcnow()
        if now > self.updated_at:
            self.updated_at = now
        return self.updated_at

    def record(self, type: EventType, **fields: Any) -> LogEvent:
        """Ajoute une entrée au journal (append-only) et la renvoie."""
        if "user_ids" in fields:
            fields["user_ids"] = sorted(fields["user_ids"])
        entry = LogEvent(type=type, **fields)
        self.log.append(entry)
        logger.debug(
            "Game event recorded",
            extra={"game_id": self.id, "event_type": entry.type.value, "log_size": len(self.log)},
        )
        return entry

    def finish(self, winners: Set[str] | List[str], why: WinReason) -> Win:
        """Pose l'issue terminale (une seule fois)."""
        if self.win is not None:
            raise AssertionError(f"Game {self.id} is already finished")
        self.win = Win(winners=sorted(winners), why=why)
        logger.info(
            "Game finished",
            extra={"game_id": self.id, "why": why.value, "winners": self.win.winners},
        )
        return self.win

    def to_dict(self) -> Dict[str, Any]:
        """Dump JSON-compatible (sets → listes triées) pour les collaborateurs externes."""
        data = self.model_dump(mode="json", by_alias=True)
        for rnd in data["rounds"]:
            for key in ("players_still_in", "players_giving_clues", "users_voting"):
                rnd[key] = sorted(rnd[key])
        return data
