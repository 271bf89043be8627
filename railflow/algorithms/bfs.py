"""Breadth-first searches over a FlowNetwork."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from railflow.graph.flow_network import FlowNetwork
from railflow.types.base import LinkIndex, NodeID, NodeIndex


@dataclass
class SearchState:
    """Per-query scratch state, indexed by node index.

    Allocated fresh for every search so no query can observe another's marks.
    """

    visited: List[bool]
    cost: List[Optional[int]]
    pred: List[Optional[LinkIndex]]

    @classmethod
    def for_network(cls, network: FlowNetwork, cost: int = 0) -> "SearchState":
        n = network.num_nodes
        return cls(visited=[False] * n, cost=[cost] * n, pred=[None] * n)


def augmenting_path(
    network: FlowNetwork,
    sources: Iterable[NodeID],
    target: NodeID,
) -> Optional[SearchState]:
    """Search for a path with spare capacity from any source to ``target``.

    Links are admitted when their destination is unvisited, their capacity
    is positive, and they are active. Outgoing links are explored in
    insertion order. The search stops the moment ``target`` is reached.

    Args:
        network: Residual network to search.
        sources: Identifiers of the source stations. Unknown ones are skipped.
        target: Identifier of the target station.

    Returns:
        The search state with predecessor links set along the discovered
        path, or None if ``target`` is unreachable.
    """
    target_node = network.find_node(target)
    if target_node is None:
        return None

    state = SearchState.for_network(network)
    queue: deque[NodeIndex] = deque()
    for source in sources:
        node = network.find_node(source)
        if node is None or state.visited[node.index]:
            continue
        state.visited[node.index] = True
        queue.append(node.index)

    while queue:
        current = queue.popleft()
        for link in network.out_links(current):
            if state.visited[link.dest] or link.capacity <= 0 or not link.active:
                continue
            state.visited[link.dest] = True
            state.pred[link.dest] = link.index
            if link.dest == target_node.index:
                return state
            queue.append(link.dest)
    return None


def reachable_nodes(network: FlowNetwork, start: NodeID) -> Set[NodeIndex]:
    """Indices of all nodes reachable from ``start``, ignoring capacities.

    Uses an explicit stack, so deep line topologies do not hit recursion
    limits.
    """
    node = network.find_node(start)
    if node is None:
        return set()
    seen = {node.index}
    stack = [node.index]
    while stack:
        current = stack.pop()
        for link in network.out_links(current):
            if link.dest not in seen:
                seen.add(link.dest)
                stack.append(link.dest)
    return seen


def end_of_line_stations(network: FlowNetwork, station: NodeID) -> List[NodeID]:
    """Stations with a single outgoing link in the component of ``station``.

    Stations are returned in breadth-first discovery order. ``station``
    itself is included when it is an end of line.
    """
    node = network.find_node(station)
    if node is None:
        return []
    seen = {node.index}
    queue = deque([node.index])
    result: List[NodeID] = []
    while queue:
        current = queue.popleft()
        if network.degree(current) == 1:
            result.append(network.node(current).name)
        for link in network.out_links(current):
            if link.dest not in seen:
                seen.add(link.dest)
                queue.append(link.dest)
    return result
