"""Command-line front end: generate, solve or serve puzzles."""

import argparse
import logging
import random
import sys

from game import DIFFICULTY_BLANK_PROBABILITIES, Grid, InvalidValue, SIZE, generate_puzzle

log = logging.getLogger(__name__)

DIFFICULTIES = tuple(DIFFICULTY_BLANK_PROBABILITIES)
IGNORED_CHARS = set(" \t|-+")


def parse_grid(text):
    """Read a grid from text: 9 lines of 9 cells, '0' or '.' for blanks.

    Spaces and box drawing characters (| - +) are skipped, as are lines
    that hold nothing else.
    """
    rows = []
    for line in text.splitlines():
        cells = [ch for ch in line if ch not in IGNORED_CHARS]
        if not cells:
            continue
        if len(cells) != SIZE:
            raise ValueError(f"Line {len(rows) + 1} has {len(cells)} cells, expected 9")
        row = []
        for ch in cells:
            if ch == '.':
                row.append(0)
            elif ch.isdigit():
                row.append(int(ch))
            else:
                raise InvalidValue(ch)
        rows.append(row)
    return Grid.from_rows(rows)


def cmd_generate(args):
    rng = random.Random(args.seed)
    puzzle, solution = generate_puzzle(
        rng, DIFFICULTY_BLANK_PROBABILITIES[args.difficulty], with_solution=True)
    print(puzzle.format())
    if args.solution:
        print()
        print(solution.format())
    return 0


def cmd_solve(args):
    try:
        with open(args.file) as f:
            grid = parse_grid(f.read())
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    solution = grid.solve()
    if solution is None:
        print("Puzzle has no solution", file=sys.stderr)
        return 1
    print(solution.format())
    return 0


def cmd_serve(args):
    import eventlet
    eventlet.monkey_patch()
    from main import app, socketio

    log.info("Serving on %s:%d", args.host, args.port)
    socketio.run(app, host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="sudoku", description="Generate and solve Sudoku puzzles.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Print a new puzzle.")
    gen.add_argument("--seed", type=int, help="Random seed for reproducibility.")
    gen.add_argument("--difficulty", choices=DIFFICULTIES, default="medium")
    gen.add_argument("--solution", action="store_true", help="Also print the full grid the puzzle was cut from.")
    gen.set_defaults(func=cmd_generate)

    solve = sub.add_parser("solve", help="Solve a puzzle read from a text file.")
    solve.add_argument("file")
    solve.set_defaults(func=cmd_solve)

    serve = sub.add_parser("serve", help="Run the HTTP and Socket.IO backend.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--debug", action="store_true")
    serve.set_defaults(func=cmd_serve)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
