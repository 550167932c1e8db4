"""Dependency path queries between mentions.

Negation-bearing adjectives often attach to a path token rather than lying on
the path itself ("*decreased* PTPN13 expression increases phosphorylation of
EphrinB1": "decreased" modifies "PTPN13"), so paths used for polarity checks
are expanded with the adjectival modifiers of every token.
"""

import re

from eventschema.document import DependencyGraph
from eventschema.mention import BaseMention


def shortest_token_path(source: BaseMention, target: BaseMention) -> list[int]:
    """Return the shortest undirected path between any token of each mention.

    Non-empty paths always win over unreachable pairs. Mentions in different
    sentences (a coreference artifact) or sentences without a dependency parse
    yield an empty path.
    """
    if source.document.document_id != target.document.document_id or source.sentence != target.sentence:
        return []
    deps = source.sentence_obj.dependencies
    if deps is None:
        return []
    shortest: list[int] = []
    for tok1 in source.tokens:
        for tok2 in target.tokens:
            path = deps.shortest_path(tok1, tok2, ignore_direction=True)
            if path and (not shortest or len(path) < len(shortest)):
                shortest = path
    return shortest


def get_modifiers(token: int, deps: DependencyGraph, pattern: re.Pattern[str]) -> list[int]:
    """Return tokens reached from `token` by one outgoing modifier edge."""
    return [tok for tok, label in deps.outgoing_edges(token) if pattern.search(label)]


def expand_with_modifiers(path: list[int], deps: DependencyGraph, pattern: re.Pattern[str]) -> list[int]:
    """Return `path` with each token followed by its adjectival modifiers."""
    expanded: list[int] = []
    for token in path:
        expanded.append(token)
        expanded.extend(get_modifiers(token, deps, pattern))
    return expanded
