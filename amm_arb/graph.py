"""
Exchange graph construction from pool snapshots.

Every usable pool contributes two directed edges (one per swap direction)
to a NetworkX DiGraph. The ExchangeEdge for ``a -> b`` is stored on the
edge's ``edge`` attribute, so ``graph[a][b]["edge"]`` is the lookup.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import networkx as nx

from .types import ExchangeEdge, PoolSnapshot
from .utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GraphBuildStats:
    """
    What happened to the input while building the graph.

    Attributes:
        pools_seen: Snapshots given to the builder
        pools_skipped: Snapshots dropped for a zero reserve
        edges: Directed edges in the final graph
        overwritten: Edge insertions that replaced an edge from another pool
    """

    pools_seen: int
    pools_skipped: int
    edges: int
    overwritten: int


def _add_edge(graph: nx.DiGraph, edge: ExchangeEdge) -> bool:
    """Insert an edge; returns True if it replaced another pool's edge."""
    replaced = False
    if graph.has_edge(edge.from_token, edge.to_token):
        previous = graph[edge.from_token][edge.to_token]["edge"]
        replaced = previous.source_pool != edge.source_pool
        if replaced:
            logger.debug(
                "Pool %s replaces %s for %s -> %s",
                edge.source_pool,
                previous.source_pool,
                edge.from_token,
                edge.to_token,
            )
    graph.add_edge(edge.from_token, edge.to_token, edge=edge)
    return replaced


def build_graph_with_stats(
    snapshots: Iterable[PoolSnapshot],
) -> Tuple[nx.DiGraph, List[str], GraphBuildStats]:
    """
    Build the directed exchange graph and report how much input survived.

    Pools with a zero reserve are skipped. When two pools connect the same
    ordered token pair, the later snapshot wins.

    Args:
        snapshots: Pool snapshots in iteration order

    Returns:
        Tuple of (graph, tokens, stats) where tokens lists graph nodes in
        insertion order
    """
    graph = nx.DiGraph()
    seen = 0
    skipped = 0
    overwritten = 0

    for snap in snapshots:
        seen += 1
        if not snap.is_usable:
            skipped += 1
            logger.debug(
                "Skipping pool %s: zero reserve (%d/%d)",
                snap.id,
                snap.reserve_a,
                snap.reserve_b,
            )
            continue

        forward = ExchangeEdge(
            from_token=snap.token_a,
            to_token=snap.token_b,
            reserve_in=snap.reserve_a,
            reserve_out=snap.reserve_b,
            source_pool=snap.id,
            decimals_in=snap.decimals_a,
            decimals_out=snap.decimals_b,
        )
        backward = ExchangeEdge(
            from_token=snap.token_b,
            to_token=snap.token_a,
            reserve_in=snap.reserve_b,
            reserve_out=snap.reserve_a,
            source_pool=snap.id,
            decimals_in=snap.decimals_b,
            decimals_out=snap.decimals_a,
        )
        overwritten += _add_edge(graph, forward)
        overwritten += _add_edge(graph, backward)

    stats = GraphBuildStats(
        pools_seen=seen,
        pools_skipped=skipped,
        edges=graph.number_of_edges(),
        overwritten=overwritten,
    )
    if overwritten:
        logger.info(
            "%d edge(s) replaced by a parallel pool for the same token pair",
            overwritten,
        )
    return graph, list(graph.nodes), stats


def build_graph(snapshots: Iterable[PoolSnapshot]) -> Tuple[nx.DiGraph, List[str]]:
    """
    Build directed exchange graph from pool snapshots.

    Args:
        snapshots: Pool snapshots

    Returns:
        Tuple of (graph, tokens)
    """
    graph, tokens, _ = build_graph_with_stats(snapshots)
    return graph, tokens


def get_edge(graph: nx.DiGraph, from_token: str, to_token: str) -> ExchangeEdge:
    """Return the ExchangeEdge for a directed token pair (KeyError if absent)."""
    return graph[from_token][to_token]["edge"]
