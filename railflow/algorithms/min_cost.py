"""Minimum-cost maximum flow by negative-cycle cancellation.

Phase one fixes the flow value with Edmonds-Karp. Phase two works on a
disposable signed-cost residual network: a forward edge per regular link
(true cost, capacity ``capacity - flow``) and an undo edge (negated cost,
capacity ``flow``). Every negative cycle found there is a cheaper way to
route the same amount, so pushing its bottleneck around it lowers total cost
without changing the net flow at any node.
"""

from __future__ import annotations

from typing import List, Optional

from railflow.algorithms.bfs import SearchState
from railflow.algorithms.max_flow import calc_max_flow
from railflow.algorithms.paths import links_bottleneck
from railflow.config import FLOW_CONFIG, FlowConfig
from railflow.graph.flow_network import FlowNetwork, Link
from railflow.graph.pair import NetworkPair
from railflow.logging import get_logger
from railflow.types.base import NodeID, NodeIndex
from railflow.types.dto import MinCostFlowResult

logger = get_logger(__name__)

_UNREACHED = None


def calc_min_cost_max_flow(
    pair: NetworkPair,
    source: NodeID,
    target: NodeID,
    *,
    config: FlowConfig = FLOW_CONFIG,
) -> MinCostFlowResult:
    """Compute the maximum flow between two stations at minimum cost.

    Args:
        pair: Regular/residual network pair (mutated; holds the min-cost flow
            assignment on return).
        source: Identifier of the departure station.
        target: Identifier of the arrival station.
        config: Solver limits.

    Returns:
        MinCostFlowResult with the flow value, its minimum total cost
        (sum of ``cost * flow`` over regular links), and the number of
        cycles cancelled.

    Raises:
        RuntimeError: If cancellation does not terminate within the bound
            implied by integer costs, which means the network pairing is
            corrupt.
    """
    flow = calc_max_flow(pair, [source], target)
    regular = pair.regular

    aux = build_min_cost_residual(regular)
    bound = config.max_cancellations(
        sum(link.capacity * abs(link.cost) for link in regular.links)
    )

    cancelled = 0
    while True:
        cycle = find_negative_cycle(aux)
        if not cycle:
            break
        if cancelled >= bound:
            raise RuntimeError(
                f"Negative-cycle cancellation exceeded {bound} iterations."
            )
        bottleneck = links_bottleneck(cycle)
        cancel_cycle(regular, aux, cycle, bottleneck)
        cancelled += 1
        logger.debug(
            f"Cancelled cycle of {len(cycle)} links, cost "
            f"{sum(link.cost for link in cycle)}, bottleneck {bottleneck}"
        )

    # Keep residual capacities consistent with the redistributed flow
    for link in regular.links:
        pair.sync_residual(link)

    cost = total_cost(regular)
    logger.debug(
        f"Min-cost max flow {source!r} -> {target!r}: flow {flow}, cost {cost}, "
        f"{cancelled} cycles cancelled"
    )
    return MinCostFlowResult(flow=flow, cost=cost, cancelled_cycles=cancelled)


def total_cost(network: FlowNetwork) -> int:
    """Sum of ``cost * flow`` over every link of a network."""
    return sum(link.cost * link.flow for link in network.links)


def build_min_cost_residual(regular: FlowNetwork) -> FlowNetwork:
    """Build the signed-cost residual network for the current regular flows.

    For each regular link, the auxiliary network gets a forward edge with the
    link's cost and capacity ``capacity - flow`` and a reverse edge with the
    negated cost and capacity ``flow``. Both point back to the regular link.
    """
    aux = FlowNetwork()
    for node in regular.nodes:
        aux.add_node(node.name)
    for link in regular.links:
        origin, dest = regular.endpoints(link)
        fwd, undo = aux.add_bidirectional_link(
            origin, dest, link.capacity, link.service
        )
        assert fwd is not None and undo is not None
        fwd.cost = link.cost
        undo.cost = -link.cost
        fwd.capacity = link.capacity - link.flow
        undo.capacity = link.flow
        fwd.corresponding = link.index
        undo.corresponding = link.index
        fwd.active = undo.active = link.active
    return aux


def find_negative_cycle(
    network: FlowNetwork, source: Optional[NodeID] = None
) -> List[Link]:
    """Find a negative-cost cycle among links with positive capacity.

    Runs Bellman-Ford relaxation over incoming links. With ``source`` given,
    distances are relative to it and only cycles reachable from it are
    found. Without it every node starts at distance 0, as if a virtual
    source reached all nodes at no cost, so any negative cycle is found.

    A relaxation that still succeeds on pass ``|V|`` proves a cycle. It is
    traced by walking predecessor links back from the relaxed node until a
    node repeats.

    Returns:
        The cycle's links in traversal order, or an empty list.

    Raises:
        RuntimeError: If the predecessor chain ends before closing a cycle.
    """
    n = network.num_nodes
    if n == 0:
        return []
    state = SearchState.for_network(network, cost=0)
    dist = state.cost
    if source is not None:
        start = network.find_node(source)
        if start is None:
            return []
        dist[:] = [_UNREACHED] * n
        dist[start.index] = 0

    for pass_no in range(1, n + 1):
        updated = False
        for node in network.nodes:
            for link in network.in_links(node.index):
                if link.capacity <= 0 or not link.active:
                    continue
                origin_cost = dist[link.origin]
                if origin_cost is _UNREACHED:
                    continue
                candidate = origin_cost + link.cost
                current = dist[node.index]
                if current is _UNREACHED or candidate < current:
                    dist[node.index] = candidate
                    state.pred[node.index] = link.index
                    updated = True
                    if pass_no == n:
                        return _trace_cycle(network, state, node.index)
        if not updated:
            break
    return []


def _trace_cycle(
    network: FlowNetwork, state: SearchState, start: NodeIndex
) -> List[Link]:
    seen = set()
    current = start
    while current not in seen:
        seen.add(current)
        pred = state.pred[current]
        if pred is None:
            raise RuntimeError(
                "Negative-cycle trace did not close at node "
                f"{network.node(current).name!r}."
            )
        current = network.link(pred).origin

    cycle: List[Link] = []
    anchor = current
    while True:
        link = network.link(state.pred[current])
        cycle.append(link)
        current = link.origin
        if current == anchor:
            break
    cycle.reverse()
    return cycle


def cancel_cycle(
    regular: FlowNetwork, aux: FlowNetwork, cycle: List[Link], value: int
) -> None:
    """Push ``value`` units around a cycle of the auxiliary network.

    Undo edges (negative cost) take flow off their regular link; forward
    edges add flow. Each traversed edge loses ``value`` capacity and its
    partner edge gains it.
    """
    for edge in cycle:
        regular_link = regular.link(edge.corresponding)
        partner = aux.link(edge.reverse)
        if edge.cost < 0:
            regular_link.flow -= value
        else:
            regular_link.flow += value
        edge.capacity -= value
        partner.capacity += value
