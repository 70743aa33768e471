"""Helpers for list values stored as JSON text columns."""

import json
from typing import Any, Iterable, List, Optional


def load_list(raw: Optional[str]) -> List[Any]:
    if not raw:
        return []
    value = json.loads(raw)
    return list(value) if isinstance(value, list) else []


def dump_list(values: Optional[Iterable[Any]]) -> str:
    """Serialize as a sorted, de-duplicated JSON list so equal sets store identically."""
    return json.dumps(sorted(set(values or ())))
