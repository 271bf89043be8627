"""Path tracing and bottleneck helpers."""

from __future__ import annotations

from typing import Iterable, List

from railflow.algorithms.bfs import SearchState
from railflow.graph.flow_network import FlowNetwork, Link
from railflow.types.base import NodeID


def path_links(
    network: FlowNetwork, state: SearchState, target: NodeID
) -> List[Link]:
    """Links of the path recorded in ``state``, from a source to ``target``.

    Args:
        network: Network the search ran on.
        state: Search state whose predecessor links describe the path.
        target: Identifier of the node where the path ends.

    Returns:
        Links in source-to-target order. Empty if ``target`` has no
        predecessor (it was not reached, or it is a source).
    """
    node = network.find_node(target)
    if node is None:
        return []
    links: List[Link] = []
    current = node.index
    while state.pred[current] is not None:
        link = network.link(state.pred[current])
        links.append(link)
        current = link.origin
    links.reverse()
    return links


def links_bottleneck(links: Iterable[Link]) -> int:
    """Smallest capacity among ``links``. Zero for an empty sequence."""
    return min((link.capacity for link in links), default=0)


def path_bottleneck(
    network: FlowNetwork, state: SearchState, target: NodeID
) -> int:
    """Smallest remaining capacity along the recorded path to ``target``."""
    return links_bottleneck(path_links(network, state, target))
