"""
Tile Collapse - Direction Constants and Utilities

The 4-neighbourhood used everywhere in the engine. Directions are integer
indices so they can address the propagator and compatibility tables directly.
"""

# Grid coordinates: x grows to the east, y grows to the south.
WEST, SOUTH, EAST, NORTH = 0, 1, 2, 3
DIRECTIONS = (WEST, SOUTH, EAST, NORTH)

DIRECTION_NAMES = {
    WEST: "west",
    SOUTH: "south",
    EAST: "east",
    NORTH: "north",
}

# (dx, dy) per direction
DIRECTION_DELTAS = {
    WEST: (-1, 0),
    SOUTH: (0, 1),
    EAST: (1, 0),
    NORTH: (0, -1),
}

OPPOSITE = {
    WEST: EAST,
    SOUTH: NORTH,
    EAST: WEST,
    NORTH: SOUTH,
}


def opposite(direction: int) -> int:
    """Get the opposite direction."""
    return OPPOSITE[direction]


def wrap_coord(value: int, size: int) -> int:
    """Wrap a coordinate onto [0, size)."""
    if size == 0:
        return 0
    return value % size


def travel(
    x: int,
    y: int,
    direction: int,
    width: int,
    height: int,
    periodic: bool,
    footprint: int = 1,
) -> tuple[int, int] | None:
    """
    Step one cell from (x, y) in the given direction.

    Args:
        x: Column of the starting cell
        y: Row of the starting cell
        direction: One of WEST, SOUTH, EAST, NORTH
        width: Grid width in cells
        height: Grid height in cells
        periodic: Whether the grid wraps around at its edges
        footprint: Side length of the pattern placed at each cell

    Returns:
        The (x, y) of the neighbour, or None if it falls outside a
        non-wrapping grid.
    """
    dx, dy = DIRECTION_DELTAS[direction]
    nx = x + dx
    ny = y + dy

    if not periodic:
        if nx < 0 or ny < 0 or nx + footprint > width or ny + footprint > height:
            return None

    return wrap_coord(nx, width), wrap_coord(ny, height)
