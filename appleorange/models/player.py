"""
Models / player.py
Rôle:
- Définir la structure minimale d'un participant (joueur ou observateur).

Champs:
- id: identifiant opaque fourni par le service d'identité externe.
- name: nom d'affichage.
"""
from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """Participant authentifié en amont (le moteur ne fait que lire l'id)."""
    id: str  # identifiant unique (uuid côté service d'identité)
    name: str  # nom affiché

    model_config = ConfigDict(frozen=True)
