"""Base enums and aliases for rail network flow analysis."""

from __future__ import annotations

from enum import IntEnum

#: Station identifier as declared by the data collaborator.
NodeID = str

#: Stable index of a node inside a FlowNetwork arena.
NodeIndex = int

#: Stable index of a directed link inside a FlowNetwork arena.
LinkIndex = int

#: A rail addressed by its endpoint names, as (source, target).
RailRef = tuple[str, str]


class Service(IntEnum):
    """Service tier of a rail. Determines the per-unit cost of flow."""

    STANDARD = 0
    PREMIUM = 1  # "Alfa Pendular" in the source datasets
    EXPRESS = 2

    @property
    def cost(self) -> int:
        """Cost of moving one unit of flow over a link of this tier."""
        return SERVICE_COSTS[self]

    @classmethod
    def from_string(cls, value: str) -> "Service":
        """Parse a service tier as written in network datasets.

        Args:
            value: Case-insensitive tier name. Dataset spellings such as
                "ALFA PENDULAR" are accepted alongside member names.

        Returns:
            The corresponding Service member.

        Raises:
            ValueError: If the string doesn't match any known tier.
        """
        key = value.strip().upper().replace(" ", "_").replace("-", "_")
        key = _SERVICE_ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(e.name for e in cls)
            raise ValueError(
                f"Invalid service '{value}'. Valid values are: {valid}"
            ) from None


SERVICE_COSTS: dict[Service, int] = {
    Service.STANDARD: 2,
    Service.PREMIUM: 4,
    Service.EXPRESS: 6,
}

_SERVICE_ALIASES = {
    "ALFA_PENDULAR": "PREMIUM",
    "VERY_EXPENSIVE": "EXPRESS",
}


class GroupKind(IntEnum):
    """Station grouping levels available in station datasets."""

    DISTRICT = 1
    MUNICIPALITY = 2
    TOWNSHIP = 3

    @classmethod
    def from_string(cls, value: str) -> "GroupKind":
        try:
            return cls[value.strip().upper()]
        except KeyError:
            valid = ", ".join(e.name.lower() for e in cls)
            raise ValueError(
                f"Invalid grouping '{value}'. Valid values are: {valid}"
            ) from None
