"""Higher-level flow analyses.

- `grouping`: super-source incoming flow per station and per station group.
- `failure`: flow degradation under failed rails.
- `pairs`: the station pairs with the largest maximum flow.
"""

from railflow.analysis.failure import FailureAnalyzer
from railflow.analysis.grouping import GroupingAnalyzer
from railflow.analysis.pairs import all_pairs_max_flow

__all__ = ["FailureAnalyzer", "GroupingAnalyzer", "all_pairs_max_flow"]
