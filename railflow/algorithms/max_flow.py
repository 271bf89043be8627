"""Maximum flow by repeated breadth-first augmentation (Edmonds-Karp)."""

from __future__ import annotations

from typing import Iterable, List, Literal, Tuple, Union, overload

from railflow.algorithms.bfs import augmenting_path
from railflow.algorithms.paths import links_bottleneck, path_links
from railflow.graph.flow_network import Link
from railflow.graph.pair import NetworkPair
from railflow.logging import get_logger
from railflow.types.base import NodeID
from railflow.types.dto import FlowSummary

logger = get_logger(__name__)


def _as_sources(sources: Union[NodeID, Iterable[NodeID]]) -> List[NodeID]:
    if isinstance(sources, str):
        return [sources]
    return list(sources)


@overload
def calc_max_flow(
    pair: NetworkPair,
    sources: Union[NodeID, Iterable[NodeID]],
    target: NodeID,
    *,
    return_summary: Literal[False] = False,
) -> int: ...


@overload
def calc_max_flow(
    pair: NetworkPair,
    sources: Union[NodeID, Iterable[NodeID]],
    target: NodeID,
    *,
    return_summary: Literal[True],
) -> Tuple[int, FlowSummary]: ...


def calc_max_flow(
    pair: NetworkPair,
    sources: Union[NodeID, Iterable[NodeID]],
    target: NodeID,
    *,
    return_summary: bool = False,
) -> Union[int, Tuple[int, FlowSummary]]:
    """Compute the maximum flow from a set of sources to a target.

    The pair is reset first (all flows zero, residual capacities restored).
    While the residual network has an augmenting path, the path bottleneck is
    pushed through it. Breadth-first search makes every path a shortest one
    by hop count, which bounds the run at O(|V| * |E|^2).

    On return the regular network holds the flow assignment and the residual
    network the remaining capacities; deactivated links carry no flow.

    Args:
        pair: Regular/residual network pair to solve on (mutated in place).
        sources: One source identifier or an iterable of them. Acts as a
            super-source when several are given.
        target: Identifier of the target station.
        return_summary: If True, also return a FlowSummary with per-link
            flows and the minimum cut.

    Returns:
        The maximum flow value, or ``(value, FlowSummary)`` when
        ``return_summary`` is set. Disconnected or degenerate queries
        (target among the sources) give 0.

    Examples:
        >>> pair = NetworkPair()
        >>> for name in "ABC":
        ...     _ = pair.add_node(name)
        >>> _ = pair.add_link("A", "B", 5)
        >>> _ = pair.add_link("B", "C", 3)
        >>> calc_max_flow(pair, "A", "C")
        3
    """
    source_list = _as_sources(sources)
    pair.reset()

    max_flow = 0
    augmentations = 0
    while True:
        state = augmenting_path(pair.residual, source_list, target)
        if state is None:
            break
        path = path_links(pair.residual, state, target)
        bottleneck = links_bottleneck(path)
        augment_path(pair, path, bottleneck)
        max_flow += bottleneck
        augmentations += 1

    logger.debug(
        f"Max flow {source_list} -> {target!r}: {max_flow} "
        f"after {augmentations} augmentations"
    )
    if not return_summary:
        return max_flow
    return max_flow, _build_flow_summary(pair, source_list, max_flow)


def augment_path(pair: NetworkPair, path: Iterable[Link], value: int) -> None:
    """Push ``value`` units along a residual path.

    Each residual link adds flow to its regular counterpart, clamped at
    capacity. Any excess cancels flow on the reverse regular link. Both
    residual directions are then recomputed from the regular flows.
    """
    for residual_link in path:
        regular = pair.regular.link(residual_link.corresponding)
        reverse = pair.regular.link(regular.reverse)

        intended = regular.flow + value
        if intended > regular.capacity:
            excess = intended - regular.capacity
            regular.flow = regular.capacity
            reverse.flow -= excess
            if reverse.flow < 0:
                raise RuntimeError(
                    "Flow cancellation exceeded reverse flow on link "
                    f"{pair.regular.endpoints(reverse)}; residual pairing broken."
                )
        else:
            regular.flow = intended
        pair.sync_residual(regular)


def _build_flow_summary(
    pair: NetworkPair, sources: List[NodeID], total_flow: int
) -> FlowSummary:
    """Build a FlowSummary from the solved pair."""
    residual = pair.residual
    regular = pair.regular

    reachable = set()
    stack = []
    for source in sources:
        node = residual.find_node(source)
        if node is not None and node.index not in reachable:
            reachable.add(node.index)
            stack.append(node.index)
    while stack:
        current = stack.pop()
        for link in residual.out_links(current):
            if link.active and link.capacity > 0 and link.dest not in reachable:
                reachable.add(link.dest)
                stack.append(link.dest)

    min_cut = tuple(
        link.index
        for link in regular.links
        if link.active and link.origin in reachable and link.dest not in reachable
    )
    return FlowSummary(
        total_flow=total_flow,
        link_flow={link.index: link.flow for link in regular.links},
        reachable=frozenset(regular.node(i).name for i in reachable),
        min_cut=min_cut,
    )
