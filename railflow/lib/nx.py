"""NetworkX graph conversion utilities.

Example:
    >>> import networkx as nx
    >>> from railflow.lib.nx import from_networkx, to_networkx
    >>>
    >>> G = nx.Graph()
    >>> G.add_edge("Lisboa", "Porto", capacity=8, service="PREMIUM")
    >>> network = from_networkx(G)
    >>> network.max_flow("Lisboa", "Porto")
    8
    >>> G_out = to_networkx(network.pair.regular)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from railflow.graph.flow_network import FlowNetwork
from railflow.network import RailNetwork
from railflow.types.base import Service

if TYPE_CHECKING:
    import networkx as nx

    NxGraph = Union[nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph]
else:
    NxGraph = Any


def to_networkx(network: FlowNetwork) -> "nx.MultiDiGraph":
    """Convert a FlowNetwork to a NetworkX MultiDiGraph.

    Every directed link becomes one edge keyed by its link index, so a rail
    appears as two anti-parallel edges.

    Args:
        network: Network to convert, typically ``RailNetwork.pair.regular``.

    Returns:
        nx.MultiDiGraph with edge attributes ``capacity``, ``flow``,
        ``cost``, ``service`` (tier name) and ``active``.
    """
    import networkx as nx

    G = nx.MultiDiGraph()
    G.add_nodes_from(network.node_names())
    for link in network.links:
        src, dst = network.endpoints(link)
        G.add_edge(
            src,
            dst,
            key=link.index,
            capacity=link.capacity,
            flow=link.flow,
            cost=link.cost,
            service=link.service.name,
            active=link.active,
        )
    return G


def from_networkx(
    G: NxGraph,
    *,
    capacity_attr: str = "capacity",
    service_attr: str = "service",
    default_capacity: int = 1,
) -> RailNetwork:
    """Build a RailNetwork from any NetworkX graph.

    Nodes are added in graph order, each edge becomes a bidirectional rail.
    In directed graphs an edge whose endpoints are already joined by a rail
    (for instance the reverse of an earlier edge) is not added again.

    Args:
        G: NetworkX graph (DiGraph, MultiDiGraph, Graph, or MultiGraph).
        capacity_attr: Edge attribute holding the capacity.
        service_attr: Edge attribute holding a Service or its name.
        default_capacity: Capacity used when the attribute is missing.

    Returns:
        The populated RailNetwork.

    Raises:
        TypeError: If G is not a NetworkX graph.
        ValueError: If a service name is not recognized.
    """
    import networkx as nx

    if not isinstance(G, (nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph)):
        raise TypeError(
            f"Expected NetworkX graph (DiGraph, MultiDiGraph, Graph, MultiGraph), "
            f"got {type(G).__name__}"
        )

    network = RailNetwork()
    for node in G.nodes():
        network.add_station(str(node))

    directed = G.is_directed()
    for u, v, data in G.edges(data=True):
        src, dst = str(u), str(v)
        if directed and network.pair.regular.find_link(src, dst) is not None:
            continue
        service = data.get(service_attr, Service.STANDARD)
        if not isinstance(service, Service):
            service = Service.from_string(str(service))
        capacity = int(data.get(capacity_attr, default_capacity))
        network.add_rail(src, dst, capacity, service)
    return network
