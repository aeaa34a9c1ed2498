"""Tile data models and structures."""
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Union
from enum import Enum


class TileCategory(str, Enum):
    """Tile category enumeration."""
    DOTS = "DOTS"
    BAMBOO = "BAMBOO"
    CHAR = "CHAR"
    WIND = "WIND"
    DRAGON = "DRAGON"
    FLOWER = "FLOWER"
    SEASON = "SEASON"


class TileLocation(str, Enum):
    """Where a visible tile currently sits."""
    BOARD = "board"
    DOCK = "dock"


# Flowers and seasons match any tile of their own category
WILDCARD_CATEGORIES = frozenset({TileCategory.FLOWER, TileCategory.SEASON})

SUITED_CATEGORIES = (TileCategory.DOTS, TileCategory.BAMBOO, TileCategory.CHAR)
WIND_VALUES = ("E", "S", "W", "N")
DRAGON_VALUES = ("R", "G", "Wh")
BONUS_VALUES = (1, 2, 3, 4)

TileValue = Union[int, str]

# Values each category may carry
LEGAL_VALUES: Dict[TileCategory, tuple] = {
    TileCategory.DOTS: tuple(range(1, 10)),
    TileCategory.BAMBOO: tuple(range(1, 10)),
    TileCategory.CHAR: tuple(range(1, 10)),
    TileCategory.WIND: WIND_VALUES,
    TileCategory.DRAGON: DRAGON_VALUES,
    TileCategory.FLOWER: BONUS_VALUES,
    TileCategory.SEASON: BONUS_VALUES,
}


def is_legal_value(category: TileCategory, value: Any) -> bool:
    """True if ``value`` is a valid face value for ``category``."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return False
    return value in LEGAL_VALUES[TileCategory(category)]


class Position(NamedTuple):
    """Grid position. One x/y unit is half a tile; z is the layer."""
    x: int
    y: int
    z: int


@dataclass(frozen=True)
class TileFace:
    """Category and value of a tile, without placement."""
    category: TileCategory
    value: TileValue


@dataclass(frozen=True)
class Tile:
    """A placed tile.

    Tiles are immutable; state changes produce a new tile through
    ``dataclasses.replace`` so board snapshots can share instances.
    """
    id: str
    category: TileCategory
    value: TileValue
    x: int
    y: int
    z: int
    is_visible: bool = True
    location: TileLocation = TileLocation.BOARD

    @property
    def position(self) -> Position:
        return Position(self.x, self.y, self.z)

    @property
    def face(self) -> TileFace:
        return TileFace(self.category, self.value)

    @property
    def on_board(self) -> bool:
        return self.is_visible and self.location == TileLocation.BOARD

    @property
    def in_dock(self) -> bool:
        return self.is_visible and self.location == TileLocation.DOCK

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "category": self.category.value,
            "value": self.value,
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "is_visible": self.is_visible,
            "location": self.location.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tile":
        """Build a tile from its dictionary form.

        Raises:
            ValueError: If ``is_visible`` is present and not a boolean.
        """
        is_visible = data.get("is_visible", True)
        if not isinstance(is_visible, bool):
            raise ValueError(f"is_visible must be a boolean, got {is_visible!r}")

        return cls(
            id=str(data["id"]),
            category=TileCategory(data["category"]),
            value=data["value"],
            x=int(data["x"]),
            y=int(data["y"]),
            z=int(data["z"]),
            is_visible=is_visible,
            location=TileLocation(data.get("location", TileLocation.BOARD.value)),
        )


def board_sort_key(tile: Tile):
    """Sort order used for boards: layer, then row, then column."""
    return (tile.z, tile.y, tile.x)
