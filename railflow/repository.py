"""Station records and their district, municipality and township groupings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from railflow.types.base import GroupKind, NodeID


@dataclass(frozen=True)
class Station:
    """A station as described by a stations dataset.

    Grouping fields may be empty strings when the dataset leaves them blank.

    Attributes:
        name: Unique station name; doubles as the network node identifier.
        district: District the station belongs to.
        municipality: Municipality the station belongs to.
        township: Township the station belongs to.
        line: Name of the line the station is on.
    """

    name: NodeID
    district: str = ""
    municipality: str = ""
    township: str = ""
    line: str = ""

    def group(self, kind: GroupKind) -> str:
        """Value of the grouping field selected by ``kind``."""
        if kind is GroupKind.DISTRICT:
            return self.district
        if kind is GroupKind.MUNICIPALITY:
            return self.municipality
        return self.township


class StationRepository:
    """Stations keyed by name, with insertion-ordered group indexes."""

    def __init__(self) -> None:
        self._stations: Dict[NodeID, Station] = {}
        self._groups: Dict[GroupKind, Dict[str, List[NodeID]]] = {
            kind: {} for kind in GroupKind
        }

    def __len__(self) -> int:
        return len(self._stations)

    def __contains__(self, name: object) -> bool:
        return name in self._stations

    def add_station(self, station: Station) -> bool:
        """Register a station and index it under each of its groups.

        Returns:
            True if added, False if a station with the same name exists.
        """
        if station.name in self._stations:
            return False
        self._stations[station.name] = station
        for kind, groups in self._groups.items():
            groups.setdefault(station.group(kind), []).append(station.name)
        return True

    def find_station(self, name: NodeID) -> Optional[Station]:
        return self._stations.get(name)

    @property
    def stations(self) -> List[Station]:
        return list(self._stations.values())

    @property
    def districts(self) -> Dict[str, List[NodeID]]:
        return self.grouping(GroupKind.DISTRICT)

    @property
    def municipalities(self) -> Dict[str, List[NodeID]]:
        return self.grouping(GroupKind.MUNICIPALITY)

    @property
    def townships(self) -> Dict[str, List[NodeID]]:
        return self.grouping(GroupKind.TOWNSHIP)

    def grouping(self, kind: Union[GroupKind, str]) -> Dict[str, List[NodeID]]:
        """Group name -> member station names for one grouping level.

        Args:
            kind: GroupKind or its name ("district", "municipality",
                "township").

        Returns:
            A copy of the index; stations with a blank field are grouped
            under the empty string.
        """
        if isinstance(kind, str):
            kind = GroupKind.from_string(kind)
        return {name: list(members) for name, members in self._groups[kind].items()}

    def is_valid_district(self, district: str) -> bool:
        return district in self._groups[GroupKind.DISTRICT]

    def is_valid_municipality(self, municipality: str) -> bool:
        return municipality in self._groups[GroupKind.MUNICIPALITY]

    def is_valid_township(self, township: str) -> bool:
        return township in self._groups[GroupKind.TOWNSHIP]
