"""Rail failure simulation.

Failures are simulated by deactivating links in place rather than copying
the network: the flag moves on a link, its reverse, and both residual
counterparts together, and every query restores it before returning.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Set, Union

from railflow.algorithms.max_flow import calc_max_flow
from railflow.analysis.grouping import GroupingAnalyzer
from railflow.graph.pair import NetworkPair
from railflow.logging import get_logger
from railflow.seed_manager import SeedManager
from railflow.types.base import LinkIndex, NodeID
from railflow.types.dto import FailureImpact, StationReduction

logger = get_logger(__name__)


class FailureAnalyzer:
    """Compares flows with and without a set of failed rails.

    Links are addressed by regular-network link index. Deactivating either
    direction of a rail takes down both.

    Attributes:
        pair: Network pair to analyze.
        grouping: Analyzer used for super-source incoming flows.
    """

    def __init__(
        self, pair: NetworkPair, grouping: Optional[GroupingAnalyzer] = None
    ) -> None:
        self.pair = pair
        self.grouping = grouping if grouping is not None else GroupingAnalyzer(pair)

    def deactivate_links(self, links: Iterable[LinkIndex]) -> None:
        self.pair.set_active(links, False)

    def activate_links(self, links: Iterable[LinkIndex]) -> None:
        self.pair.set_active(links, True)

    @contextmanager
    def links_deactivated(self, links: Iterable[LinkIndex]) -> Iterator[None]:
        """Deactivate ``links`` for the duration of a ``with`` block."""
        link_list = list(links)
        self.deactivate_links(link_list)
        try:
            yield
        finally:
            self.activate_links(link_list)

    def max_flow_under_failure(
        self,
        links: Iterable[LinkIndex],
        sources: Union[NodeID, Iterable[NodeID]],
        target: NodeID,
    ) -> FailureImpact:
        """Maximum flow before and after ``links`` fail.

        Args:
            links: Regular link indices to fail.
            sources: Source station(s).
            target: Target station.

        Returns:
            FailureImpact with the baseline and degraded flow values. The
            links are active again on return.
        """
        link_list = list(links)
        source_list = [sources] if isinstance(sources, str) else list(sources)
        baseline = calc_max_flow(self.pair, source_list, target)
        with self.links_deactivated(link_list):
            degraded = calc_max_flow(self.pair, source_list, target)
        logger.debug(
            f"Failure of {len(link_list)} links: {source_list} -> {target!r} "
            f"{baseline} -> {degraded}"
        )
        return FailureImpact(baseline=baseline, degraded=degraded)

    def incoming_reduced_flow(
        self, links: Iterable[LinkIndex], station: NodeID
    ) -> int:
        """Incoming flow of ``station`` while ``links`` are down."""
        with self.links_deactivated(links):
            return self.grouping.incoming_flow(station)

    def rank_stations_by_degradation(
        self, links: Iterable[LinkIndex]
    ) -> List[StationReduction]:
        """Rank every station by the share of incoming flow lost to failures.

        The super-source of each station is taken from the intact topology
        for both measurements. Stations with a baseline of 0 count as a 0%
        reduction.

        Returns:
            StationReduction records sorted by reduction percentage, highest
            first. Ties keep network insertion order.
        """
        link_list = list(links)
        results: List[StationReduction] = []
        for node in self.pair.regular.nodes:
            baseline = self.grouping.incoming_flow(node.name)
            degraded = self.incoming_reduced_flow(link_list, node.name)
            results.append(
                StationReduction(station=node.name, baseline=baseline, degraded=degraded)
            )
        results.sort(key=lambda r: r.reduction_pct, reverse=True)
        return results

    def select_random_links(
        self, count: int, seed: Optional[int] = None
    ) -> List[LinkIndex]:
        """Pick ``count`` distinct active rails at random.

        A station is drawn uniformly, then one of its outgoing links. Each
        rail is chosen at most once in either direction.

        Args:
            count: Number of rails to pick.
            seed: Master seed for reproducible picks.

        Returns:
            Regular link indices of the chosen rails.

        Raises:
            ValueError: If ``count`` is negative or exceeds the number of
                active rails.
        """
        regular = self.pair.regular
        available = sum(1 for link in regular.links if link.active) // 2
        if count < 0 or count > available:
            raise ValueError(
                f"Cannot select {count} rails; the network has {available} active rails."
            )

        rng = SeedManager(seed).create_random_state("failure", "random_rails", count)
        chosen: List[LinkIndex] = []
        taken: Set[LinkIndex] = set()
        while len(chosen) < count:
            node = regular.node(rng.randrange(regular.num_nodes))
            if not node.outgoing:
                continue
            link = regular.link(rng.choice(node.outgoing))
            if not link.active or link.index in taken:
                continue
            chosen.append(link.index)
            taken.update((link.index, link.reverse))
        return chosen
