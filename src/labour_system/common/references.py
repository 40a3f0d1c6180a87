from __future__ import annotations

from typing import Any, Dict, Iterable, List, Protocol, Sequence


class SummarySource(Protocol):
    def get_summaries(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        ...


def expand(items: List[Dict[str, Any]], *, key: str, target: str, source: SummarySource) -> List[Dict[str, Any]]:
    """Attach the summary of the entity referenced by item[key] as item[target].

    Missing references resolve to None.
    """
    ids = sorted({item[key] for item in items if item.get(key)})
    summaries = source.get_summaries(ids) if ids else {}
    for item in items:
        item[target] = summaries.get(item.get(key)) if item.get(key) else None
    return items


def expand_many(items: List[Dict[str, Any]], *, key: str, target: str, source: SummarySource) -> List[Dict[str, Any]]:
    """Like `expand` for list-valued references."""
    ids = sorted({ref for item in items for ref in (item.get(key) or [])})
    summaries = source.get_summaries(ids) if ids else {}
    for item in items:
        item[target] = [summaries[ref] for ref in (item.get(key) or []) if ref in summaries]
    return items


def unique(ids: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for i in ids:
        seen.setdefault(i, None)
    return list(seen)
