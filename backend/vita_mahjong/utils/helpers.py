"""Utility helper functions."""
from typing import Dict, Any, List, Optional, Tuple
from collections import Counter

from ..models.tile import Tile, TileCategory, TileLocation, is_legal_value


def validate_board_json(tiles_json: List[Dict[str, Any]]) -> Tuple[bool, Optional[str]]:
    """
    Validate a board given as a list of tile dictionaries.

    Args:
        tiles_json: Tile data to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(tiles_json, list):
        return False, "Board must be a list of tiles"

    seen_ids = set()
    seen_cells = set()

    for i, tile_data in enumerate(tiles_json):
        if not isinstance(tile_data, dict):
            return False, f"Tile {i} must be an object"

        for field in ("id", "category", "value", "x", "y", "z"):
            if field not in tile_data:
                return False, f"Tile {i} missing '{field}' field"

        try:
            category = TileCategory(tile_data["category"])
        except ValueError:
            return False, f"Tile {i} has unknown category '{tile_data['category']}'"

        if not is_legal_value(category, tile_data["value"]):
            return False, f"Tile {i} has invalid value {tile_data['value']!r} for {category.value}"

        if not isinstance(tile_data.get("is_visible", True), bool):
            return False, f"Tile {i} has non-boolean 'is_visible'"

        location = tile_data.get("location", TileLocation.BOARD.value)
        try:
            TileLocation(location)
        except ValueError:
            return False, f"Tile {i} has unknown location '{location}'"

        try:
            x, y, z = int(tile_data["x"]), int(tile_data["y"]), int(tile_data["z"])
        except (TypeError, ValueError):
            return False, f"Tile {i} has non-integer coordinates"

        if z < 0:
            return False, f"Tile {i} has negative layer"

        tile_id = str(tile_data["id"])
        if tile_id in seen_ids:
            return False, f"Duplicate tile id '{tile_id}'"
        seen_ids.add(tile_id)

        # Only visible board tiles occupy a cell
        if tile_data.get("is_visible", True) and location == TileLocation.BOARD.value:
            if (x, y, z) in seen_cells:
                return False, f"Two tiles share cell ({x}, {y}, {z})"
            seen_cells.add((x, y, z))

    return True, None


def parse_board(tiles_json: List[Dict[str, Any]]) -> List[Tile]:
    """Validate and convert tile dictionaries to Tile objects.

    Raises:
        ValueError: If the board is malformed.
    """
    is_valid, error = validate_board_json(tiles_json)
    if not is_valid:
        raise ValueError(error)
    return [Tile.from_dict(t) for t in tiles_json]


def format_board_for_display(tiles: List[Tile]) -> str:
    """
    Format a board for human-readable display, one grid per layer.

    Args:
        tiles: Tiles to format (invisible and docked tiles are skipped).

    Returns:
        Formatted string representation.
    """
    board = [t for t in tiles if t.on_board]
    if not board:
        return "Empty board"

    min_x = min(t.x for t in board)
    min_y = min(t.y for t in board)
    cols = max(t.x for t in board) - min_x + 1
    rows = max(t.y for t in board) - min_y + 1
    max_z = max(t.z for t in board)

    lines = [f"Board with {len(board)} tiles, {max_z + 1} layers:", "-" * 40]

    for z in range(max_z, -1, -1):  # Top to bottom
        layer = [t for t in board if t.z == z]
        if not layer:
            continue

        lines.append(f"\nLayer {z} ({len(layer)} tiles):")
        grid = [[" . " for _ in range(cols)] for _ in range(rows)]
        for t in layer:
            grid[t.y - min_y][t.x - min_x] = f"{t.category.value[0]}{str(t.value)[:2]:<2}"
        for row in grid:
            lines.append("  " + "".join(row))

    return "\n".join(lines)


def extract_board_statistics(tiles: List[Tile]) -> Dict[str, Any]:
    """
    Extract tile statistics from a board.

    Args:
        tiles: Board tiles.

    Returns:
        Dictionary with tile statistics.
    """
    visible = [t for t in tiles if t.is_visible]
    board = [t for t in visible if t.location == TileLocation.BOARD]

    tiles_per_layer = Counter(t.z for t in board)
    categories = Counter(t.category.value for t in visible)

    return {
        "total_tiles": len(tiles),
        "visible_tiles": len(visible),
        "board_tiles": len(board),
        "dock_tiles": len(visible) - len(board),
        "layers": len(tiles_per_layer),
        "tiles_per_layer": {f"layer_{z}": n for z, n in sorted(tiles_per_layer.items())},
        "categories": dict(categories),
    }
