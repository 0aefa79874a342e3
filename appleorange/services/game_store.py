"""
Game store registry
===================

Registre en mémoire des parties en cours, adressées par `game_id`.

- Chaque partie a son propre `RLock`: les actions sur une même partie sont
  sérialisées, deux parties différentes avancent indépendamment.
- Les lectures renvoient des copies profondes: l'appelant ne peut pas modifier
  l'agrégat autrement que via `submit_clue` / `cast_vote` / `declare_impostor`.
- Aucune persistance: un redémarrage du process perd les parties.

API:
- GAMES.create_game(words, players, observers, rng) → snapshot Game
- GAMES.get(game_id) / GAMES.events(game_id)       → snapshots
- GAMES.submit_clue / cast_vote / declare_impostor  → snapshot après action
- GAMES.export_events(game_id, path=None)          → Path du fichier NDJSON
"""
from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Callable, Dict, Iterable, Iterator, List, Optional, TypeVar

from appleorange.config.settings import settings
from appleorange.engine import guess, rounds, voting
from appleorange.engine.errors import GameRuleError
from appleorange.models.event import LogEvent
from appleorange.models.game import Game, WordPair
from appleorange.models.player import User
from .io_utils import write_events_ndjson

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnknownGame(KeyError):
    """Aucune partie enregistrée sous cet identifiant."""


class GameStore:
    def __init__(self) -> None:
        self._games: Dict[str, Game] = {}
        self._locks: Dict[str, RLock] = {}
        self._lock = RLock()

    # -----------------------------
    # Registre
    # -----------------------------
    def create_game(
        self,
        words: WordPair,
        players: Iterable[User],
        observers: Iterable[User] = (),
        rng: Optional[random.Random] = None,
    ) -> Game:
        game = rounds.create_game(words, players, observers, rng=rng)
        with self._lock:
            self._games[game.id] = game
            self._locks[game.id] = RLock()
        return game.model_copy(deep=True)

    def drop(self, game_id: str) -> None:
        """Retire une partie du registre (terminée ou abandonnée)."""
        with self._lock:
            self._games.pop(game_id, None)
            self._locks.pop(game_id, None)

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._games.keys())

    @contextmanager
    def _locked(self, game_id: str) -> Iterator[Game]:
        with self._lock:
            game = self._games.get(game_id)
            lock = self._locks.get(game_id)
        if game is None or lock is None:
            raise UnknownGame(game_id)
        with lock:
            yield game

    # -----------------------------
    # Lectures (copies)
    # -----------------------------
    def get(self, game_id: str) -> Game:
        with self._locked(game_id) as game:
            return game.model_copy(deep=True)

    def events(self, game_id: str) -> List[LogEvent]:
        """Journal de la partie (copies profondes: `user_ids` reste une liste mutable)."""
        with self._locked(game_id) as game:
            return [event.model_copy(deep=True) for event in game.log]

    # -----------------------------
    # Actions joueurs
    # -----------------------------
    def _apply(self, game_id: str, action: str, user_id: str, fn: Callable[[Game], T]) -> Game:
        with self._locked(game_id) as game:
            try:
                fn(game)
            except GameRuleError as exc:
                logger.warning(
                    "Action rejected",
                    extra={"game_id": game_id, "user_id": user_id, "action": action, "code": exc.code},
                )
                raise
            return game.model_copy(deep=True)

    def submit_clue(self, game_id: str, user_id: str, text: str) -> Game:
        return self._apply(game_id, "clue", user_id, lambda g: rounds.submit_clue(g, user_id, text))

    def cast_vote(self, game_id: str, voter_id: str, target_id: str) -> Game:
        return self._apply(game_id, "vote", voter_id, lambda g: voting.cast_vote(g, voter_id, target_id))

    def declare_impostor(self, game_id: str, user_id: str, guess_text: str) -> Game:
        return self._apply(
            game_id, "declare", user_id, lambda g: guess.declare_impostor(g, user_id, guess_text)
        )

    # -----------------------------
    # Export d'audit
    # -----------------------------
    def export_events(self, game_id: str, path: Optional[Path] = None) -> Path:
        """Écrit le journal en NDJSON (par défaut `<DATA_DIR>/games/<game_id>.ndjson`)."""
        target = path or Path(settings.DATA_DIR) / "games" / f"{game_id}.ndjson"
        with self._locked(game_id) as game:
            size = write_events_ndjson(target, game.log, limit=settings.MAX_AUDIT_EVENTS)
        logger.info("Game log exported", extra={"game_id": game_id, "path": str(target), "bytes": size})
        return target


# -----------------------------
# Singleton global
# -----------------------------
GAMES = GameStore()
