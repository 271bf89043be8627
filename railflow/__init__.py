"""railflow: train capacity analysis over railway networks.

railflow models a railway as bidirectional capacitated rails between stations
and answers flow questions about it: how many trains can travel between
stations, at what minimum cost, how much capacity reaches a station from the
ends of its lines, and how much is lost when rails fail.

Primary API:
    RailNetwork - Stations, rails and every flow query
    load_network_files() - Build a RailNetwork from station and network CSVs
    load_scenario_yaml() - Build a RailNetwork from a YAML scenario
    from_networkx() / to_networkx() - NetworkX interop

Example:
    from railflow import RailNetwork

    net = RailNetwork()
    for name in ("Lisboa", "Entroncamento", "Porto"):
        net.add_station(name)
    net.add_rail("Lisboa", "Entroncamento", 10)
    net.add_rail("Entroncamento", "Porto", 6, "ALFA PENDULAR")

    net.max_flow("Lisboa", "Porto")                       # 6
    net.min_cost_max_flow("Lisboa", "Porto").cost         # 6 * 2 + 6 * 4
    net.failure_impact([("Entroncamento", "Porto")], "Lisboa", "Porto")
"""

from __future__ import annotations

from railflow import cli, logging
from railflow._version import __version__
from railflow.analysis import FailureAnalyzer, GroupingAnalyzer, all_pairs_max_flow
from railflow.graph import FlowNetwork, Link, NetworkPair, Node
from railflow.io import (
    RailRecord,
    build_network,
    load_network_csv,
    load_network_files,
    load_scenario_file,
    load_scenario_yaml,
    load_stations_csv,
)
from railflow.lib.nx import from_networkx, to_networkx
from railflow.network import RailNetwork
from railflow.repository import Station, StationRepository
from railflow.types.base import GroupKind, Service
from railflow.types.dto import (
    FailureImpact,
    FlowSummary,
    GroupAverage,
    MinCostFlowResult,
    NetworkMaxFlow,
    StationReduction,
)

__all__ = [
    # Version
    "__version__",
    # Model
    "RailNetwork",
    "Station",
    "StationRepository",
    "FlowNetwork",
    "NetworkPair",
    "Node",
    "Link",
    # Analysis
    "FailureAnalyzer",
    "GroupingAnalyzer",
    "all_pairs_max_flow",
    # Types
    "Service",
    "GroupKind",
    "FlowSummary",
    "MinCostFlowResult",
    "FailureImpact",
    "StationReduction",
    "GroupAverage",
    "NetworkMaxFlow",
    # Loading
    "RailRecord",
    "build_network",
    "load_network_csv",
    "load_network_files",
    "load_scenario_file",
    "load_scenario_yaml",
    "load_stations_csv",
    # Library integrations (NetworkX)
    "from_networkx",
    "to_networkx",
    # Utilities
    "cli",
    "logging",
]
