"""RailNetwork: stations, rails and every flow query in one object."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from railflow.algorithms.max_flow import calc_max_flow
from railflow.algorithms.min_cost import calc_min_cost_max_flow
from railflow.analysis.failure import FailureAnalyzer
from railflow.analysis.grouping import GroupingAnalyzer
from railflow.analysis.pairs import all_pairs_max_flow
from railflow.config import FLOW_CONFIG, FlowConfig
from railflow.graph.pair import NetworkPair
from railflow.logging import get_logger
from railflow.repository import Station, StationRepository
from railflow.types.base import GroupKind, LinkIndex, NodeID, RailRef, Service
from railflow.types.dto import (
    FailureImpact,
    FlowSummary,
    GroupAverage,
    MinCostFlowResult,
    NetworkMaxFlow,
    StationReduction,
)

logger = get_logger(__name__)


class RailNetwork:
    """A railway network ready for flow queries.

    Stations are registered both in the station repository (for grouping
    queries) and as nodes of the regular/residual network pair. Rails are
    bidirectional and addressed by ``(source, target)`` station names.

    Every query validates station and rail names before touching the flow
    state, so a bad name raises ValueError without side effects.

    Attributes:
        pair: Regular/residual network pair.
        repository: Station records and groupings.
        flow_config: Limits passed to the min-cost solver.
    """

    def __init__(self, flow_config: Optional[FlowConfig] = None) -> None:
        self.pair = NetworkPair()
        self.repository = StationRepository()
        self.flow_config = flow_config if flow_config is not None else FLOW_CONFIG
        self._grouping = GroupingAnalyzer(self.pair)
        self._failure = FailureAnalyzer(self.pair, self._grouping)

    def __contains__(self, name: object) -> bool:
        return name in self.pair.regular

    def __repr__(self) -> str:
        return (
            f"RailNetwork(stations={self.pair.regular.num_nodes}, "
            f"rails={self.pair.regular.total_links})"
        )

    #
    # Construction
    #
    def add_station(self, station: Union[Station, NodeID]) -> bool:
        """Add a station by record or bare name.

        Returns:
            True if added, False if a station with that name already exists.
        """
        if isinstance(station, str):
            station = Station(name=station)
        if not self.repository.add_station(station):
            return False
        self.pair.add_node(station.name)
        return True

    def add_rail(
        self,
        source: NodeID,
        target: NodeID,
        capacity: int,
        service: Union[Service, str] = Service.STANDARD,
    ) -> Tuple[LinkIndex, LinkIndex]:
        """Add a bidirectional rail between two existing stations.

        Args:
            source: One endpoint.
            target: The other endpoint.
            capacity: Capacity in each direction.
            service: Service tier, as a Service or its dataset spelling.

        Returns:
            (forward, reverse) regular link indices.

        Raises:
            ValueError: If an endpoint is unknown, the capacity is negative, or
                the service string is not recognized.
        """
        if isinstance(service, str):
            service = Service.from_string(service)
        self._require_stations([source, target])
        created = self.pair.add_link(source, target, capacity, service)
        assert created is not None
        return created

    #
    # Lookups
    #
    @property
    def stations(self) -> List[NodeID]:
        return self.pair.regular.node_names()

    @property
    def rails(self) -> List[RailRef]:
        """Every rail once, in declaration direction."""
        regular = self.pair.regular
        return [regular.endpoints(link) for link in regular.links[::2]]

    def find_rail(self, source: NodeID, target: NodeID) -> LinkIndex:
        """Regular link index of the rail from ``source`` to ``target``.

        Raises:
            ValueError: If either station is unknown or they are not directly
                connected.
        """
        self._require_stations([source, target])
        link = self.pair.regular.find_link(source, target)
        if link is None:
            raise ValueError(f"No rail between '{source}' and '{target}'.")
        return link.index

    def rail_name(self, link: LinkIndex) -> RailRef:
        return self.pair.regular.endpoints(self.pair.regular.link(link))

    def random_rails(self, count: int, seed: Optional[int] = None) -> List[RailRef]:
        """Pick ``count`` distinct rails at random, reproducibly for a seed."""
        links = self._failure.select_random_links(count, seed)
        return [self.rail_name(index) for index in links]

    #
    # Flow queries
    #
    def max_flow(
        self, sources: Union[NodeID, Iterable[NodeID]], target: NodeID
    ) -> int:
        """Maximum flow from one or more source stations to ``target``."""
        source_list = self._source_list(sources)
        self._require_stations([*source_list, target])
        return calc_max_flow(self.pair, source_list, target)

    def max_flow_summary(
        self, sources: Union[NodeID, Iterable[NodeID]], target: NodeID
    ) -> FlowSummary:
        """Maximum flow with per-link flows, reachable set and minimum cut."""
        source_list = self._source_list(sources)
        self._require_stations([*source_list, target])
        _, summary = calc_max_flow(self.pair, source_list, target, return_summary=True)
        return summary

    def min_cost_max_flow(self, source: NodeID, target: NodeID) -> MinCostFlowResult:
        """Maximum flow from ``source`` to ``target`` at its minimum cost."""
        self._require_stations([source, target])
        return calc_min_cost_max_flow(
            self.pair, source, target, config=self.flow_config
        )

    def incoming_flow(self, station: NodeID) -> int:
        """Maximum flow into ``station`` from the line ends of its component."""
        self._require_stations([station])
        return self._grouping.incoming_flow(station)

    def all_pairs_max_flow(self) -> NetworkMaxFlow:
        return all_pairs_max_flow(self.pair)

    def failure_impact(
        self,
        rails: Iterable[RailRef],
        sources: Union[NodeID, Iterable[NodeID]],
        target: NodeID,
    ) -> FailureImpact:
        """Maximum flow before and after the given rails fail."""
        links = self._rail_links(rails)
        source_list = self._source_list(sources)
        self._require_stations([*source_list, target])
        return self._failure.max_flow_under_failure(links, source_list, target)

    def rank_groups_by_average_incoming_flow(
        self, groups: Mapping[str, Sequence[NodeID]]
    ) -> List[GroupAverage]:
        """Rank arbitrary station groups by average incoming flow."""
        for members in groups.values():
            self._require_stations(members)
        return self._grouping.rank_groups(groups)

    def top_groupings(self, kind: Union[GroupKind, str]) -> List[GroupAverage]:
        """Rank the repository's districts, municipalities or townships."""
        return self._grouping.rank_groups(self.repository.grouping(kind))

    def rank_stations_by_degradation(
        self, rails: Iterable[RailRef]
    ) -> List[StationReduction]:
        """Rank every station by the share of incoming flow lost to ``rails``."""
        return self._failure.rank_stations_by_degradation(self._rail_links(rails))

    #
    # Helpers
    #
    @staticmethod
    def _source_list(sources: Union[NodeID, Iterable[NodeID]]) -> List[NodeID]:
        if isinstance(sources, str):
            return [sources]
        return list(sources)

    def _require_stations(self, names: Iterable[NodeID]) -> None:
        for name in names:
            if name not in self.pair.regular:
                raise ValueError(f"Station '{name}' not found in network.")

    def _rail_links(self, rails: Iterable[RailRef]) -> List[LinkIndex]:
        return [self.find_rail(source, target) for source, target in rails]
