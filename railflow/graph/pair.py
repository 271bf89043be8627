"""Regular/residual network pair built in lockstep.

The regular network carries real capacities and flows. The residual network
mirrors it link by link and stores, in each link's ``capacity``, how much flow
can still be pushed in that direction. Link ``i`` of one network corresponds
to link ``i`` of the other; the pairing is written explicitly on every link.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from railflow.graph.flow_network import FlowNetwork, Link
from railflow.logging import get_logger
from railflow.types.base import LinkIndex, NodeID, Service

logger = get_logger(__name__)


class NetworkPair:
    """A regular FlowNetwork and its residual twin.

    All link creation goes through :meth:`add_link`, which creates the
    forward/reverse pair in both networks and cross-wires all four
    corresponding references before returning.

    Attributes:
        regular: Network with original capacities and current flows.
        residual: Network whose link capacities are remaining capacities.
    """

    def __init__(self) -> None:
        self.regular = FlowNetwork()
        self.residual = FlowNetwork()

    def __repr__(self) -> str:
        return f"NetworkPair(regular={self.regular!r})"

    def add_node(self, node_id: NodeID) -> bool:
        """Declare a node in both networks. False if it already exists."""
        if not self.regular.add_node(node_id):
            return False
        self.residual.add_node(node_id)
        return True

    def add_link(
        self,
        source_id: NodeID,
        dest_id: NodeID,
        capacity: int,
        service: Service = Service.STANDARD,
    ) -> Optional[Tuple[LinkIndex, LinkIndex]]:
        """Declare a bidirectional rail in both networks.

        Args:
            source_id: One endpoint of the rail.
            dest_id: The other endpoint of the rail.
            capacity: Capacity in each direction.
            service: Service tier of the rail.

        Returns:
            Regular-network (forward, reverse) link indices, or None if either
            endpoint is unknown (nothing is created then).
        """
        fwd, rev = self.regular.add_bidirectional_link(
            source_id, dest_id, capacity, service
        )
        if fwd is None or rev is None:
            logger.debug(
                f"Rail {source_id!r} -> {dest_id!r} not created: unknown endpoint"
            )
            return None
        res_fwd, res_rev = self.residual.add_bidirectional_link(
            source_id, dest_id, capacity, service
        )
        assert res_fwd is not None and res_rev is not None

        fwd.corresponding = res_fwd.index
        rev.corresponding = res_rev.index
        res_fwd.corresponding = fwd.index
        res_rev.corresponding = rev.index
        return fwd.index, rev.index

    def reset(self) -> None:
        """Zero all flows and restore residual capacities to the originals."""
        for link in self.regular.links:
            link.flow = 0
            self.residual.link(link.corresponding).capacity = link.capacity

    def sync_residual(self, link: Link) -> None:
        """Recompute both residual directions of a regular link from its flows.

        Remaining capacity towards ``link.dest`` is the unused capacity of
        ``link`` plus whatever flow the reverse link carries and could cancel.
        """
        reverse = self.regular.link(link.reverse)
        self.residual.link(link.corresponding).capacity = (
            link.capacity - link.flow + reverse.flow
        )
        self.residual.link(reverse.corresponding).capacity = (
            reverse.capacity - reverse.flow + link.flow
        )

    def set_active(self, link_indices: Iterable[LinkIndex], active: bool) -> None:
        """Set the active flag of regular links in lockstep.

        The flag moves together on each link, its reverse, and the residual
        counterparts of both.
        """
        for index in link_indices:
            link = self.regular.link(index)
            reverse = self.regular.link(link.reverse)
            link.active = active
            reverse.active = active
            self.residual.link(link.corresponding).active = active
            self.residual.link(reverse.corresponding).active = active

    def active_links(self) -> list[Link]:
        return [link for link in self.regular.links if link.active]
