"""Arena-based directed flow network.

Nodes and links live in flat lists and reference each other by integer index.
Every link records the index of its reverse (the anti-parallel link created
with it) and, once wired, the index of its corresponding link in a paired
network. Search state never lives on nodes; algorithms allocate their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from railflow.types.base import LinkIndex, NodeID, NodeIndex, Service


@dataclass
class Node:
    """A named vertex of a FlowNetwork.

    Attributes:
        name: Unique identifier within the owning network.
        index: Position in the network's node arena.
        outgoing: Indices of links leaving this node, in insertion order.
        incoming: Indices of links entering this node, in insertion order.
    """

    name: NodeID
    index: NodeIndex
    outgoing: List[LinkIndex] = field(default_factory=list)
    incoming: List[LinkIndex] = field(default_factory=list)


@dataclass
class Link:
    """A directed capacitated link.

    Attributes:
        index: Position in the network's link arena.
        origin: Index of the origin node.
        dest: Index of the destination node.
        capacity: Link capacity. In a residual network this is the capacity
            still available in this direction.
        service: Service tier of the rail.
        cost: Per-unit cost. Derived from ``service`` unless given explicitly.
        flow: Current flow, kept within ``[0, capacity]``.
        active: False while the rail is simulated as failed.
        reverse: Index of the anti-parallel link created alongside this one.
        corresponding: Index of the paired link in the other network, or None
            until wired.
    """

    index: LinkIndex
    origin: NodeIndex
    dest: NodeIndex
    capacity: int
    service: Service = Service.STANDARD
    cost: Optional[int] = None
    flow: int = 0
    active: bool = True
    reverse: LinkIndex = -1
    corresponding: Optional[LinkIndex] = None

    def __post_init__(self) -> None:
        if self.cost is None:
            self.cost = self.service.cost

    @property
    def remaining(self) -> int:
        return self.capacity - self.flow


class FlowNetwork:
    """Owns the nodes and links of one network instance.

    Links are only ever created in forward/reverse pairs through
    :meth:`add_bidirectional_link`; there is no single-link insertion API.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._links: List[Link] = []
        self._index: Dict[NodeID, NodeIndex] = {}
        self._total_links = 0

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __repr__(self) -> str:
        return (
            f"FlowNetwork(nodes={len(self._nodes)}, links={len(self._links)}, "
            f"pairs={self._total_links})"
        )

    #
    # Nodes
    #
    def add_node(self, node_id: NodeID) -> bool:
        """Declare a node.

        Args:
            node_id: Unique identifier of the node.

        Returns:
            True if the node was created, False if it already existed.
        """
        if node_id in self._index:
            return False
        index = len(self._nodes)
        self._nodes.append(Node(name=node_id, index=index))
        self._index[node_id] = index
        return True

    def find_node(self, node_id: NodeID) -> Optional[Node]:
        """Return the node with the given identifier, or None."""
        index = self._index.get(node_id)
        if index is None:
            return None
        return self._nodes[index]

    def node(self, index: NodeIndex) -> Node:
        return self._nodes[index]

    @property
    def nodes(self) -> List[Node]:
        return self._nodes

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    def node_names(self) -> List[NodeID]:
        return [n.name for n in self._nodes]

    #
    # Links
    #
    def add_bidirectional_link(
        self,
        source_id: NodeID,
        dest_id: NodeID,
        capacity: int,
        service: Service = Service.STANDARD,
    ) -> Tuple[Optional[Link], Optional[Link]]:
        """Create a link and its reverse between two existing nodes.

        Both links get the same capacity and service. The pair counter is
        incremented once per successful call.

        Args:
            source_id: Origin of the forward link.
            dest_id: Destination of the forward link.
            capacity: Capacity of each direction.
            service: Service tier, which determines per-unit cost.

        Returns:
            (link, reverse) on success, or (None, None) if either endpoint is
            absent. Nothing is created in the latter case.

        Raises:
            ValueError: If ``capacity`` is negative.
        """
        if capacity < 0:
            raise ValueError(f"Link capacity must be non-negative, got {capacity}.")
        src = self.find_node(source_id)
        dst = self.find_node(dest_id)
        if src is None or dst is None:
            return None, None

        fwd_index = len(self._links)
        rev_index = fwd_index + 1
        fwd = Link(
            index=fwd_index,
            origin=src.index,
            dest=dst.index,
            capacity=capacity,
            service=service,
            reverse=rev_index,
        )
        rev = Link(
            index=rev_index,
            origin=dst.index,
            dest=src.index,
            capacity=capacity,
            service=service,
            reverse=fwd_index,
        )
        self._links.append(fwd)
        self._links.append(rev)
        src.outgoing.append(fwd_index)
        dst.incoming.append(fwd_index)
        dst.outgoing.append(rev_index)
        src.incoming.append(rev_index)

        self._total_links += 1
        return fwd, rev

    def link(self, index: LinkIndex) -> Link:
        return self._links[index]

    @property
    def links(self) -> List[Link]:
        return self._links

    @property
    def total_links(self) -> int:
        """Number of bidirectional link pairs created."""
        return self._total_links

    def out_links(self, node_index: NodeIndex) -> Iterator[Link]:
        for link_index in self._nodes[node_index].outgoing:
            yield self._links[link_index]

    def in_links(self, node_index: NodeIndex) -> Iterator[Link]:
        for link_index in self._nodes[node_index].incoming:
            yield self._links[link_index]

    def degree(self, node_index: NodeIndex) -> int:
        """Number of outgoing links of a node."""
        return len(self._nodes[node_index].outgoing)

    def find_link(self, source_id: NodeID, dest_id: NodeID) -> Optional[Link]:
        """Return the first link from ``source_id`` to ``dest_id``, or None."""
        src = self.find_node(source_id)
        dst = self.find_node(dest_id)
        if src is None or dst is None:
            return None
        for link in self.out_links(src.index):
            if link.dest == dst.index:
                return link
        return None

    def endpoints(self, link: Link) -> Tuple[NodeID, NodeID]:
        """Names of a link's origin and destination."""
        return self._nodes[link.origin].name, self._nodes[link.dest].name

    def reset_flow(self) -> None:
        for link in self._links:
            link.flow = 0
