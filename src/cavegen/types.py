"""Core value types: grid locations and placed resources."""

import math
from dataclasses import dataclass
from enum import Enum

# Orthogonal and 8-way neighbour offsets (dx, dy); +X is east, +Y is south
ORTHOGONAL_DELTAS: tuple[tuple[int, int], ...] = ((0, -1), (-1, 0), (1, 0), (0, 1))
NEIGHBOR_DELTAS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)

ORE_AMOUNT_MIN = 1
ORE_AMOUNT_MAX = 3


@dataclass(frozen=True)
class Location:
    """Immutable 2D tile coordinate."""

    x: int
    y: int

    def distance_to(self, other: "Location") -> float:
        """Euclidean distance to another location."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def manhattan_to(self, other: "Location") -> int:
        """Manhattan distance to another location."""
        return abs(self.x - other.x) + abs(self.y - other.y)


class ResourceKind(str, Enum):
    """Kinds of mineable seams."""

    CRYSTAL = "crystal"
    ORE = "ore"
    RECHARGE = "recharge"


@dataclass(frozen=True)
class Resource:
    """A resource seam placed at a tile.

    Ore carries an ``amount`` in [1, 3]; crystals and recharge seams carry
    none. The pairing is checked on construction.
    """

    x: int
    y: int
    kind: ResourceKind
    amount: int | None = None

    def __post_init__(self) -> None:
        if self.kind == ResourceKind.ORE:
            if self.amount is None or not (
                ORE_AMOUNT_MIN <= self.amount <= ORE_AMOUNT_MAX
            ):
                raise ValueError(
                    f"Ore amount must be in [{ORE_AMOUNT_MIN}, {ORE_AMOUNT_MAX}], "
                    f"got {self.amount}"
                )
        elif self.amount is not None:
            raise ValueError(f"{self.kind.value} resources carry no amount")

    @property
    def location(self) -> Location:
        return Location(self.x, self.y)

    def distance_to(self, other: "Resource") -> float:
        """Euclidean distance to another resource."""
        return math.hypot(self.x - other.x, self.y - other.y)
