import logging
import random

log = logging.getLogger(__name__)

SIZE = 9
BOX = 3
EMPTY = None

# Number of random clues placed before the seed grid is solved.
SEED_CLUES = 4
# Chance that any one cell of the solved grid is blanked out.
BLANK_PROBABILITY = 0.6

DIFFICULTY_BLANK_PROBABILITIES = {
    'easy': 0.5,
    'medium': BLANK_PROBABILITY,
    'hard': 0.7,
}

DIGITS = range(1, SIZE + 1)


class InvalidValue(ValueError):
    """Raised when a cell is given something other than empty or a digit 1-9."""

    def __init__(self, value):
        super().__init__(f"Invalid value: {value!r}")
        self.value = value


def _check_value(value):
    if value is EMPTY:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValue(value)
    if value < 1 or value > SIZE:
        raise InvalidValue(value)


def _content_is_legal(content):
    values = [v for v in content if v is not EMPTY]
    return len(values) == len(set(values))


class Grid:
    """A 9x9 Sudoku board addressed by (x, y), x being the column.

    Cells hold a digit 1-9 or None. Nothing here enforces the Sudoku rules;
    use is_legal() to check them.
    """

    def __init__(self):
        self.cells = [EMPTY] * (SIZE * SIZE)

    @staticmethod
    def index(x, y):
        return x + y * SIZE

    @classmethod
    def from_rows(cls, rows):
        """Build a grid from 9 rows of 9 values, where 0 or None is empty."""
        if not isinstance(rows, (list, tuple)) or len(rows) != SIZE:
            raise ValueError("Grid must have 9 rows")
        grid = cls()
        for y, row in enumerate(rows):
            if not isinstance(row, (list, tuple)) or len(row) != SIZE:
                raise ValueError(f"Row {y} must have 9 cells")
            for x, value in enumerate(row):
                if value == 0 and not isinstance(value, bool):
                    value = EMPTY
                grid.set(x, y, value)
        return grid

    def to_rows(self):
        return [[v or 0 for v in self.row_content(y)] for y in range(SIZE)]

    def get(self, x, y):
        return self.cells[self.index(x, y)]

    def set(self, x, y, value):
        _check_value(value)
        self.cells[self.index(x, y)] = value

    def row_content(self, y):
        return [self.get(x, y) for x in range(SIZE)]

    def column_content(self, x):
        return [self.get(x, y) for y in range(SIZE)]

    def box_content(self, bx, by):
        x0, y0 = bx * BOX, by * BOX
        return [self.get(x0 + dx, y0 + dy) for dy in range(BOX) for dx in range(BOX)]

    def affecting_content(self, x, y):
        # The cell itself shows up in all three groups.
        return (self.row_content(y)
                + self.column_content(x)
                + self.box_content(x // BOX, y // BOX))

    def candidates(self, x, y):
        seen = set(self.affecting_content(x, y))
        return {d for d in DIGITS if d not in seen}

    def is_legal(self):
        for i in range(SIZE):
            if not _content_is_legal(self.row_content(i)):
                return False
            if not _content_is_legal(self.column_content(i)):
                return False
            if not _content_is_legal(self.box_content(i % BOX, i // BOX)):
                return False
        return True

    def is_complete(self):
        return EMPTY not in self.cells

    def empty_cells(self):
        """Coordinates of every empty cell in scan order (row by row)."""
        return [(x, y) for y in range(SIZE) for x in range(SIZE) if self.get(x, y) is EMPTY]

    def clone(self):
        grid = Grid()
        grid.cells = self.cells[:]
        return grid

    def solve(self):
        return solve(self)

    def format(self):
        divider = "+-------+-------+-------+"
        lines = []
        for y in range(SIZE):
            if y % BOX == 0:
                lines.append(divider)
            line = ""
            for x in range(SIZE):
                if x % BOX == 0:
                    line += "| "
                value = self.get(x, y)
                line += (" " if value is EMPTY else str(value)) + " "
            lines.append(line + "|")
        lines.append(divider)
        return "\n".join(lines)

    def __str__(self):
        return self.format()

    def __repr__(self):
        filled = SIZE * SIZE - self.cells.count(EMPTY)
        return f"<Grid {filled}/81 filled>"

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cells == other.cells

    __hash__ = None


def solve(grid):
    """Fill in the empty cells of grid by backtracking.

    Returns a complete, legal Grid or None when there is no solution. The
    argument is never mutated; each branch works on its own clone. A grid
    that is already complete is handed back as is.
    """
    if grid.is_complete():
        return grid
    if not grid.is_legal():
        return None

    missing = []
    for x, y in grid.empty_cells():
        options = grid.candidates(x, y)
        if not options:
            return None
        missing.append((x, y, options))

    # Most constrained cell first; sort is stable so ties keep scan order.
    missing.sort(key=lambda m: len(m[2]))
    x, y, options = missing[0]
    for value in sorted(options):
        attempt = grid.clone()
        attempt.set(x, y, value)
        solution = solve(attempt)
        if solution is not None:
            return solution
    return None


def random_seed(rng):
    seed = Grid()
    for _ in range(SEED_CLUES):
        x = rng.randrange(SIZE)
        y = rng.randrange(SIZE)
        seed.set(x, y, rng.randint(1, SIZE))
    return seed


def generate_solution(rng):
    """Solve random seeds until one works and return the full grid."""
    attempts = 0
    while True:
        attempts += 1
        seed = random_seed(rng)
        log.debug("solving (attempt %d)\n%s", attempts, seed.format())
        solved = seed.solve()
        if solved is not None:
            return solved
        log.debug("seed failed (attempt %d)", attempts)


def blank_cells(solution, rng, blank_probability=BLANK_PROBABILITY):
    """Return a copy of solution with each cell cleared with the given probability."""
    puzzle = solution.clone()
    for y in range(SIZE):
        for x in range(SIZE):
            if rng.random() < blank_probability:
                puzzle.set(x, y, EMPTY)
    return puzzle


def generate_puzzle(rng=None, blank_probability=BLANK_PROBABILITY, with_solution=False):
    """Build a playable puzzle.

    A few random clues are solved into a full grid, then every cell is
    blanked with probability blank_probability. Seeds that cannot be solved
    are thrown away and a new one is drawn, so this always returns a grid.
    With with_solution, returns (puzzle, solution) where solution is the
    full grid the puzzle was cut from.
    """
    if not 0 <= blank_probability <= 1:
        raise ValueError(f"blank_probability must be between 0 and 1, got {blank_probability}")
    if rng is None:
        rng = random.Random()

    solution = generate_solution(rng)
    puzzle = blank_cells(solution, rng, blank_probability)
    if with_solution:
        return puzzle, solution
    return puzzle
