"""
Configuration du moteur (Settings)
==================================

Rôle
----
- Centraliser les paramètres du moteur de règles (seuil de survie, graine RNG, exports).
- Les valeurs par défaut correspondent aux règles officielles du jeu.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Les modules du moteur importent `from appleorange.config.settings import settings`.

Exemples de `.env`
------------------
APP_NAME="Apple Apple Orange (Staging)"
SURVIVAL_PLAYER_COUNT=3
RANDOM_SEED=42
DATA_DIR="/var/opt/appleorange/data"
"""
from typing import Optional
import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Nom du service (repris dans les exports d'audit)
    APP_NAME: str = "Apple Apple Orange"

    # L'orange gagne dès qu'il ne reste plus que ce nombre de joueurs actifs
    # (lui + deux pommes) après une élimination par vote.
    SURVIVAL_PLAYER_COUNT: int = 3

    # Graine optionnelle pour le tirage de l'orange (parties rejouables en dev)
    RANDOM_SEED: Optional[int] = None

    # Répertoire des exports NDJSON du journal. Par défaut: <repo>/appleorange/data
    DATA_DIR: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")

    # Nombre max de lignes exportées par journal (None = tout le journal)
    MAX_AUDIT_EVENTS: Optional[int] = None

    # Paramétrage pydantic-settings :
    # - lit le fichier .env (UTF-8) si présent
    # - ignore les clés supplémentaires pour éviter les erreurs
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Instance unique importable partout : `settings`
settings = Settings()
