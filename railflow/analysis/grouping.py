"""Incoming-capacity analysis over stations and station groups."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from railflow.algorithms.bfs import end_of_line_stations
from railflow.algorithms.max_flow import calc_max_flow
from railflow.graph.pair import NetworkPair
from railflow.logging import get_logger
from railflow.types.base import NodeID
from railflow.types.dto import GroupAverage

logger = get_logger(__name__)


class GroupingAnalyzer:
    """Measures how much flow can arrive at stations and groups of stations.

    A station's incoming flow is the maximum flow into it from a
    super-source made of every end-of-line station in its component other
    than itself.

    Attributes:
        pair: Network pair the flows are computed on.
    """

    def __init__(self, pair: NetworkPair) -> None:
        self.pair = pair

    def super_source(self, station: NodeID) -> List[NodeID]:
        """End-of-line stations of ``station``'s component, excluding it."""
        return [
            name
            for name in end_of_line_stations(self.pair.regular, station)
            if name != station
        ]

    def incoming_flow(self, station: NodeID) -> int:
        """Maximum flow that can arrive at ``station`` from the line ends."""
        sources = self.super_source(station)
        if not sources:
            return 0
        return calc_max_flow(self.pair, sources, station)

    def average_incoming_flow(self, stations: Sequence[NodeID]) -> Optional[float]:
        """Mean incoming flow over ``stations``; None when there are none."""
        if not stations:
            return None
        total = sum(self.incoming_flow(station) for station in stations)
        return total / len(stations)

    def rank_groups(
        self, groups: Mapping[str, Sequence[NodeID]]
    ) -> List[GroupAverage]:
        """Rank groups by average incoming flow, highest first.

        Args:
            groups: Group name -> member station identifiers.

        Returns:
            One GroupAverage per group. Groups without members carry
            ``average=None`` and sort after every group with data; ties keep
            the mapping's order.
        """
        cache: Dict[NodeID, int] = {}
        results: List[GroupAverage] = []
        for name, stations in groups.items():
            if not stations:
                logger.debug(f"Group {name!r} has no stations")
                results.append(GroupAverage(name=name, average=None, size=0))
                continue
            total = 0
            for station in stations:
                if station not in cache:
                    cache[station] = self.incoming_flow(station)
                total += cache[station]
            results.append(
                GroupAverage(name=name, average=total / len(stations), size=len(stations))
            )

        results.sort(
            key=lambda g: (g.average is None, -(g.average or 0.0)),
        )
        return results
