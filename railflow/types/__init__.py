"""Shared typing constructs for railflow.

This package defines the service-tier and grouping enums, index aliases used
by the graph arena, and the frozen result containers returned by queries. It
contains no algorithmic logic.
"""

from railflow.types.base import (
    SERVICE_COSTS,
    GroupKind,
    LinkIndex,
    NodeID,
    NodeIndex,
    RailRef,
    Service,
)
from railflow.types.dto import (
    FailureImpact,
    FlowSummary,
    GroupAverage,
    MinCostFlowResult,
    NetworkMaxFlow,
    StationReduction,
    reduction_pct,
)

__all__ = [
    # Enums
    "Service",
    "GroupKind",
    # Type aliases and constants
    "NodeID",
    "NodeIndex",
    "LinkIndex",
    "RailRef",
    "SERVICE_COSTS",
    # DTOs
    "FlowSummary",
    "MinCostFlowResult",
    "FailureImpact",
    "StationReduction",
    "GroupAverage",
    "NetworkMaxFlow",
    "reduction_pct",
]
