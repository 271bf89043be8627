"""Flow algorithms over FlowNetwork pairs.

- `bfs`: augmenting-path search, reachability and end-of-line discovery.
- `paths`: path tracing and bottleneck helpers.
- `max_flow`: Edmonds-Karp maximum flow with optional min-cut summary.
- `min_cost`: minimum-cost maximum flow by negative-cycle cancellation.
"""

from railflow.algorithms.bfs import (
    SearchState,
    augmenting_path,
    end_of_line_stations,
    reachable_nodes,
)
from railflow.algorithms.max_flow import augment_path, calc_max_flow
from railflow.algorithms.min_cost import (
    build_min_cost_residual,
    calc_min_cost_max_flow,
    find_negative_cycle,
    total_cost,
)
from railflow.algorithms.paths import links_bottleneck, path_bottleneck, path_links

__all__ = [
    "SearchState",
    "augmenting_path",
    "end_of_line_stations",
    "reachable_nodes",
    "augment_path",
    "calc_max_flow",
    "build_min_cost_residual",
    "calc_min_cost_max_flow",
    "find_negative_cycle",
    "total_cost",
    "links_bottleneck",
    "path_bottleneck",
    "path_links",
]
