"""Graph primitives.

This package provides the arena-based `FlowNetwork` with its `Node` and `Link`
records, and `NetworkPair`, which keeps a regular network and its residual
twin in lockstep.
"""

from railflow.graph.flow_network import FlowNetwork, Link, Node
from railflow.graph.pair import NetworkPair

__all__ = ["FlowNetwork", "Link", "Node", "NetworkPair"]
