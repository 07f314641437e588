# bookstore/storage.py
"""
JSON document storage for the catalogue.

Each collection lives in its own document shaped as ``{key: [...]}``,
e.g. ``{"books": [...]}``. Documents are read once at startup and
rewritten wholesale after every mutation. Reads never raise: a
missing or malformed document yields an empty collection so the
service can always start. Writes report success as a boolean instead
of propagating I/O errors.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# Serialises writes so two documents are never written concurrently.
_write_lock = threading.Lock()


def load_document(path: Path, key: str) -> List[Dict[str, Any]]:
    """Load the list stored under ``key`` in the JSON document at ``path``.

    Returns an empty list when the file is missing, unreadable, not
    valid JSON, or does not have the expected ``{key: [...]}`` shape.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s, starting with no %s: %s", path, key, exc)
        return []

    if not isinstance(data, dict) or not isinstance(data.get(key), list):
        logger.warning("Document %s has no '%s' list, starting empty", path, key)
        return []
    return data[key]


def save_document(path: Path, key: str, items: List[Dict[str, Any]]) -> bool:
    """Overwrite the document at ``path`` with ``{key: items}``.

    Returns ``True`` when the document was written and ``False`` when
    serialisation or the write failed. Failures are logged, never raised.
    """
    with _write_lock:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps({key: items}, ensure_ascii=False, indent=2)
            with path.open("w", encoding="utf-8") as f:
                f.write(payload)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write %s to %s", key, path)
            return False
    logger.debug("Wrote %d %s to %s", len(items), key, path)
    return True
