"""Loading stations and rails from CSV datasets and YAML scenarios."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

import pandas as pd
import yaml

from railflow.config import DATASET_CONFIG
from railflow.logging import get_logger
from railflow.network import RailNetwork
from railflow.repository import Station
from railflow.types.base import NodeID, Service

logger = get_logger(__name__)

_SCENARIO_KEYS = {"stations", "rails", "datasets"}
_STATION_FIELDS = {"name", "district", "municipality", "township", "line"}
_RAIL_FIELDS = {"source", "target", "capacity", "service"}


@dataclass(frozen=True)
class RailRecord:
    """One row of a network dataset: a bidirectional rail between stations."""

    source: NodeID
    target: NodeID
    capacity: int
    service: Service = Service.STANDARD


def _read_csv(path: Union[str, Path], columns: Iterable[str]) -> pd.DataFrame:
    """Read a dataset as strings, checking that ``columns`` are present."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Dataset file not found: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name}: missing columns {missing}")
    return df


def _parse_capacity(value: Any, where: str) -> int:
    try:
        capacity = int(str(value).strip())
    except ValueError:
        raise ValueError(f"{where}: invalid capacity '{value}'") from None
    if capacity < 0:
        raise ValueError(f"{where}: capacity must be non-negative, got {capacity}")
    return capacity


def _parse_service(value: Any, where: str) -> Service:
    try:
        return Service.from_string(str(value))
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from None


def load_stations_csv(path: Union[str, Path]) -> List[Station]:
    """Read a stations dataset.

    Columns are matched by header name; blank cells become empty strings.

    Args:
        path: CSV file with Name, District, Municipality, Township and Line
            columns.

    Returns:
        Station records in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a column is missing or a row has no name.
    """
    name_col, district_col, municipality_col, township_col, line_col = (
        DATASET_CONFIG.station_columns
    )
    df = _read_csv(path, DATASET_CONFIG.station_columns)

    stations: List[Station] = []
    for row_number, record in enumerate(df.to_dict(orient="records"), start=2):
        name = str(record.get(name_col, "")).strip()
        if not name:
            raise ValueError(f"{Path(path).name} row {row_number}: empty station name")
        stations.append(
            Station(
                name=name,
                district=str(record.get(district_col, "")).strip(),
                municipality=str(record.get(municipality_col, "")).strip(),
                township=str(record.get(township_col, "")).strip(),
                line=str(record.get(line_col, "")).strip(),
            )
        )
    logger.info(f"Loaded {len(stations)} stations from {path}")
    return stations


def load_network_csv(path: Union[str, Path]) -> List[RailRecord]:
    """Read a network dataset.

    Args:
        path: CSV file with Station_A, Station_B, Capacity and Service columns.

    Returns:
        Rail records in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a column is missing, a capacity is not a non-negative
            integer, or a service tier is unknown. The message names the row.
    """
    source_col, target_col, capacity_col, service_col = DATASET_CONFIG.network_columns
    df = _read_csv(path, DATASET_CONFIG.network_columns)

    rails: List[RailRecord] = []
    for row_number, record in enumerate(df.to_dict(orient="records"), start=2):
        where = f"{Path(path).name} row {row_number}"
        rails.append(
            RailRecord(
                source=str(record[source_col]).strip(),
                target=str(record[target_col]).strip(),
                capacity=_parse_capacity(record[capacity_col], where),
                service=_parse_service(record[service_col], where),
            )
        )
    logger.info(f"Loaded {len(rails)} rails from {path}")
    return rails


def build_network(
    stations: Iterable[Station],
    rails: Iterable[RailRecord],
    network: Optional[RailNetwork] = None,
) -> RailNetwork:
    """Populate a RailNetwork from station and rail records.

    Duplicate stations are skipped. Rails naming an unknown station are
    skipped with a warning, so nothing is ever half-created.

    Args:
        stations: Station records.
        rails: Rail records.
        network: Network to extend; a new one is created when omitted.

    Returns:
        The populated network.
    """
    if network is None:
        network = RailNetwork()
    for station in stations:
        if not network.add_station(station):
            logger.debug(f"Duplicate station '{station.name}' skipped")
    skipped = 0
    for rail in rails:
        unknown = [n for n in (rail.source, rail.target) if n not in network]
        if unknown:
            logger.warning(
                f"Rail {rail.source} - {rail.target} skipped: unknown station(s) {unknown}"
            )
            skipped += 1
            continue
        network.add_rail(rail.source, rail.target, rail.capacity, rail.service)
    logger.info(
        f"Built {network!r}" + (f" ({skipped} rails skipped)" if skipped else "")
    )
    return network


def load_network_files(
    stations_path: Union[str, Path], network_path: Union[str, Path]
) -> RailNetwork:
    """Build a RailNetwork from a stations CSV and a network CSV."""
    return build_network(load_stations_csv(stations_path), load_network_csv(network_path))


def load_scenario_yaml(
    yaml_str: str, base_dir: Optional[Union[str, Path]] = None
) -> RailNetwork:
    """Build a RailNetwork from a YAML scenario.

    A scenario may reference CSV datasets and declare stations and rails
    inline; datasets are loaded first. Example::

        datasets:
          stations: stations.csv
          network: network.csv
        stations:
          - Lisboa
          - {name: Porto, district: Porto}
        rails:
          - {source: Lisboa, target: Porto, capacity: 8, service: PREMIUM}

    Args:
        yaml_str: Scenario document.
        base_dir: Directory dataset paths are relative to. Defaults to the
            current directory.

    Returns:
        The populated network.

    Raises:
        ValueError: If the document has the wrong shape or unknown keys.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")

    unknown = set(data) - _SCENARIO_KEYS
    if unknown:
        raise ValueError(
            f"Unrecognized top-level key(s) in scenario: {sorted(unknown)}. "
            f"Allowed keys are {sorted(_SCENARIO_KEYS)}"
        )

    network = RailNetwork()
    base = Path(base_dir) if base_dir is not None else Path.cwd()

    datasets = data.get("datasets")
    if datasets is not None:
        if not isinstance(datasets, dict):
            raise ValueError("'datasets' must be a mapping")
        extra = set(datasets) - {"stations", "network"}
        if extra:
            raise ValueError(f"Unrecognized dataset key(s): {sorted(extra)}")
        stations = (
            load_stations_csv(base / datasets["stations"])
            if "stations" in datasets
            else []
        )
        rails = (
            load_network_csv(base / datasets["network"]) if "network" in datasets else []
        )
        build_network(stations, rails, network)

    build_network(
        _parse_scenario_stations(data.get("stations", [])),
        _parse_scenario_rails(data.get("rails", [])),
        network,
    )
    return network


def load_scenario_file(path: Union[str, Path]) -> RailNetwork:
    """Build a RailNetwork from a YAML scenario file.

    Dataset paths inside the scenario are resolved against the file's
    directory.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Scenario file not found: {path}")
    return load_scenario_yaml(path.read_text(), base_dir=path.parent)


def _parse_scenario_stations(entries: Any) -> List[Station]:
    if not isinstance(entries, list):
        raise ValueError("'stations' must be a list")
    stations: List[Station] = []
    for entry in entries:
        if isinstance(entry, str):
            stations.append(Station(name=entry))
            continue
        if not isinstance(entry, dict) or "name" not in entry:
            raise ValueError(
                "Each station must be a name or a mapping with a 'name' key"
            )
        extra = set(entry) - _STATION_FIELDS
        if extra:
            raise ValueError(
                f"Unrecognized station key(s) for '{entry['name']}': {sorted(extra)}"
            )
        stations.append(Station(**{k: str(v) for k, v in entry.items()}))
    return stations


def _parse_scenario_rails(entries: Any) -> List[RailRecord]:
    if not isinstance(entries, list):
        raise ValueError("'rails' must be a list")
    rails: List[RailRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(
                "Each rail definition must be a mapping with 'source' and 'target'"
            )
        if not {"source", "target", "capacity"} <= set(entry):
            raise ValueError(
                "Each rail definition must include 'source', 'target' and 'capacity'"
            )
        extra = set(entry) - _RAIL_FIELDS
        if extra:
            raise ValueError(f"Unrecognized rail key(s): {sorted(extra)}")
        where = f"rail {entry['source']} - {entry['target']}"
        rails.append(
            RailRecord(
                source=str(entry["source"]),
                target=str(entry["target"]),
                capacity=_parse_capacity(entry["capacity"], where),
                service=_parse_service(entry.get("service", "STANDARD"), where),
            )
        )
    return rails
