"""
Triangular cycle enumeration over the exchange graph.
"""

from typing import Iterable, Iterator, Tuple

import networkx as nx

Cycle = Tuple[str, str, str]


def enumerate_cycles(graph: nx.DiGraph, tokens: Iterable[str]) -> Iterator[Cycle]:
    """
    Yield every 3-hop closed path ``a -> b -> c -> a``.

    The same triangle is yielded once per starting token and direction,
    since each rotation starts with a different token. Degenerate paths
    (a repeated token) are never produced.

    Args:
        graph: Exchange graph from ``build_graph``
        tokens: Start tokens, in the order to visit them

    Yields:
        (token_a, token_b, token_c)
    """
    for token_a in tokens:
        if token_a not in graph:
            continue
        for token_b in graph.successors(token_a):
            if token_b == token_a:
                continue
            for token_c in graph.successors(token_b):
                if token_c == token_a or token_c == token_b:
                    continue
                if graph.has_edge(token_c, token_a):
                    yield token_a, token_b, token_c


def count_cycles(graph: nx.DiGraph, tokens: Iterable[str]) -> int:
    """Number of cycles ``enumerate_cycles`` would yield."""
    return sum(1 for _ in enumerate_cycles(graph, tokens))
