"""Network-wide search for the station pairs with the largest maximum flow."""

from __future__ import annotations

from typing import List, Tuple

from railflow.algorithms.bfs import reachable_nodes
from railflow.algorithms.max_flow import calc_max_flow
from railflow.graph.pair import NetworkPair
from railflow.logging import get_logger
from railflow.types.base import NodeID
from railflow.types.dto import NetworkMaxFlow

logger = get_logger(__name__)


def all_pairs_max_flow(pair: NetworkPair) -> NetworkMaxFlow:
    """Find every station pair that achieves the largest pairwise maximum flow.

    Pairs are visited in node insertion order as ``(a, b)`` with ``a``
    inserted before ``b``. Pairs in different components are skipped
    without running a flow.

    Args:
        pair: Network pair to analyze.

    Returns:
        NetworkMaxFlow with the winning pairs in visiting order and their
        common flow value. An empty or linkless network gives no pairs and
        value 0.
    """
    regular = pair.regular
    best = 0
    winners: List[Tuple[NodeID, NodeID]] = []
    for node in regular.nodes:
        reachable = reachable_nodes(regular, node.name)
        for other in regular.nodes[node.index + 1 :]:
            if other.index not in reachable:
                continue
            value = calc_max_flow(pair, node.name, other.name)
            if value > best:
                best = value
                winners = [(node.name, other.name)]
            elif value == best and value > 0:
                winners.append((node.name, other.name))

    logger.debug(f"All-pairs max flow {best} over {len(winners)} pairs")
    return NetworkMaxFlow(pairs=tuple(winners), value=best)
