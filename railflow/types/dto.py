"""Result containers returned by flow queries.

All containers are frozen dataclasses so results can be shared freely once a
query returns; they carry plain names and integers, never arena indices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from railflow.types.base import LinkIndex, NodeID


@dataclass(frozen=True)
class FlowSummary:
    """Detailed state of a completed maximum-flow run.

    Attributes:
        total_flow: Maximum flow value achieved.
        link_flow: Flow on every regular link, keyed by link index.
        reachable: Stations reachable from the sources in the final residual
            network (the source side of the minimum cut).
        min_cut: Regular links leaving the reachable set; their capacities
            sum to ``total_flow``.
    """

    total_flow: int
    link_flow: Dict[LinkIndex, int]
    reachable: FrozenSet[NodeID]
    min_cut: Tuple[LinkIndex, ...]


@dataclass(frozen=True)
class MinCostFlowResult:
    """Maximum flow value together with the minimum cost to carry it."""

    flow: int
    cost: int
    cancelled_cycles: int = 0


@dataclass(frozen=True)
class FailureImpact:
    """Maximum flow before and after a set of rails fails."""

    baseline: int
    degraded: int

    @property
    def reduction_pct(self) -> float:
        return reduction_pct(self.baseline, self.degraded)


@dataclass(frozen=True)
class StationReduction:
    """Incoming flow of one station with and without failed rails."""

    station: NodeID
    baseline: int
    degraded: int

    @property
    def reduction_pct(self) -> float:
        return reduction_pct(self.baseline, self.degraded)


@dataclass(frozen=True)
class GroupAverage:
    """Average incoming flow over the stations of one group.

    ``average`` is None when the group has no member stations.
    """

    name: str
    average: Optional[float]
    size: int = 0


@dataclass(frozen=True)
class NetworkMaxFlow:
    """Station pairs achieving the largest pairwise maximum flow."""

    pairs: Tuple[Tuple[NodeID, NodeID], ...] = field(default_factory=tuple)
    value: int = 0


def reduction_pct(baseline: int, degraded: int) -> float:
    """Percentage of ``baseline`` lost in ``degraded``. Zero when baseline is 0."""
    if baseline == 0:
        return 0.0
    return 100.0 * (1.0 - degraded / baseline)
