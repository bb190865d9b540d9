"""
Merge search results from overlapping queries into unique candidates.

A login surfaced by several queries becomes one CandidateEntry whose
source_queries lists every query that found it, in the order the
queries were run.
"""

from typing import Dict, Iterable, Mapping, Sequence, Tuple, Union

from .schema import CandidateEntry, SearchItem

ItemsByQuery = Union[Mapping[str, Sequence[SearchItem]], Iterable[Tuple[str, Sequence[SearchItem]]]]


def merge_candidates(items_by_query: ItemsByQuery) -> Tuple[Dict[str, CandidateEntry], int]:
    """
    Deduplicate search items by login, accumulating provenance.

    Args:
        items_by_query: Mapping (or ordered pairs) of query -> search items

    Returns:
        Tuple of (login -> CandidateEntry in first-seen order,
        total items seen including repeats)
    """
    pairs = items_by_query.items() if isinstance(items_by_query, Mapping) else items_by_query

    entries: Dict[str, CandidateEntry] = {}
    total_seen = 0

    for query, items in pairs:
        total_seen += len(items)
        for item in items:
            existing = entries.get(item.login)
            if existing is None:
                entries[item.login] = CandidateEntry(item=item, source_queries=[query])
            elif existing.source_queries[-1] != query:
                existing.source_queries.append(query)

    return entries, total_seen
