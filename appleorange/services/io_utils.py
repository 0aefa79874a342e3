"""
Utilitaires IO du journal d'audit basés sur orjson.
- events_to_ndjson(events)      → bytes (une entrée JSON par ligne)
- write_events_ndjson(path, ev) → écrit en binaire (création des dossiers si besoin)

Attention:
- orjson renvoie/attend des bytes; on écrit en mode binaire.
- Les datetimes sont sérialisés en RFC 3339 par orjson.
"""
from pathlib import Path
from typing import Iterable, Optional

import orjson as json

from appleorange.models.event import LogEvent


def events_to_ndjson(events: Iterable[LogEvent], limit: Optional[int] = None) -> bytes:
    """Sérialise le journal (les `limit` dernières entrées si fourni)."""
    rows = [event.model_dump(mode="python", exclude_none=True) for event in events]
    if limit is not None:
        rows = rows[-limit:] if limit > 0 else []
    return b"".join(json.dumps(row, option=json.OPT_APPEND_NEWLINE) for row in rows)


def write_events_ndjson(path: Path, events: Iterable[LogEvent], limit: Optional[int] = None) -> int:
    """Écrit le journal en NDJSON; renvoie le nombre d'octets écrits."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = events_to_ndjson(events, limit=limit)
    with path.open("wb") as f:
        f.write(data)
    return len(data)
