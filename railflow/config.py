"""Configuration classes for railflow components."""

from dataclasses import dataclass


@dataclass
class FlowConfig:
    """Limits for the flow solvers."""

    # Cycle-cancellation bound is (sum of capacity * |cost| over links) times
    # this factor, plus one. Each cancellation lowers integer cost by >= 1.
    cancellation_bound_factor: int = 1

    def max_cancellations(self, cost_capacity_sum: int) -> int:
        """Upper bound on negative-cycle cancellations for one query."""
        return self.cancellation_bound_factor * cost_capacity_sum + 1


@dataclass
class DisplayConfig:
    """Defaults for tabular CLI output."""

    # Rows shown by ranking commands when -n is not given
    default_top: int = 10

    # Decimal places for averages and percentages
    precision: int = 2

    # Labels shown for stations with an empty grouping field
    no_district_label: str = "NO DISTRICT"
    no_municipality_label: str = "NO MUNICIPALITY"
    no_township_label: str = "NO TOWNSHIP"

    def format_number(self, value: float) -> str:
        return f"{value:.{self.precision}f}"


@dataclass
class DatasetConfig:
    """Column layout and default file names of the CSV datasets."""

    stations_file: str = "stations.csv"
    network_file: str = "network.csv"

    station_columns: tuple = ("Name", "District", "Municipality", "Township", "Line")
    network_columns: tuple = ("Station_A", "Station_B", "Capacity", "Service")


# Global configuration instances
FLOW_CONFIG = FlowConfig()
DISPLAY_CONFIG = DisplayConfig()
DATASET_CONFIG = DatasetConfig()
