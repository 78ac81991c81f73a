"""Named seed patterns and initial-table generation."""

from core.errors import PatternError
from life.cell import Status

ALIVE_CHAR = "#"

PATTERNS = {
    # still lifes
    "block": ("##",
              "##"),
    "beehive": (".##.",
                "#..#",
                ".##."),
    # oscillators
    "blinker": ("#",
                "#",
                "#"),
    "toad": (".###",
             "###."),
    "beacon": ("##..",
               "##..",
               "..##",
               "..##"),
    # spaceships, truncated at the board edge
    "glider": (".#.",
               "..#",
               "###"),
}


def parse_rows(rows):
    """Convert ``#``/``.`` rows into a table of statuses."""
    return [[Status.ALIVE if char == ALIVE_CHAR else Status.DEAD for char in row] for row in rows]


def build_initial_state(name, rows, cols):
    """A ``rows`` x ``cols`` dead board with pattern ``name`` centred in it."""
    try:
        picture = parse_rows(PATTERNS[name])
    except KeyError:
        raise PatternError(f"Unknown pattern: {name}", pattern=name) from None

    height, width = len(picture), max(len(row) for row in picture)
    if height > rows or width > cols:
        raise PatternError(
            f"Pattern {name} ({height}x{width}) does not fit in {rows}x{cols}",
            pattern=name,
            context={"rows": rows, "cols": cols},
        )

    board = [[Status.DEAD] * cols for _ in range(rows)]
    top, left = (rows - height) // 2, (cols - width) // 2
    for x, row in enumerate(picture):
        for y, status in enumerate(row):
            board[top + x][left + y] = status
    return board
