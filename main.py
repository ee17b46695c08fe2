from flask import Flask, request, jsonify
from flask_socketio import SocketIO, emit
from flask_cors import CORS, cross_origin
import random

from game import Grid, generate_puzzle, SIZE, DIFFICULTY_BLANK_PROBABILITIES

app = Flask(__name__)
app.config["DEFAULT_DIFFICULTY"] = "medium"
app.config.from_prefixed_env("SUDOKU")
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*")


class Unsolvable(Exception):
    pass


def _payload(data):
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _generate(data):
    difficulty = data.get('difficulty') or app.config["DEFAULT_DIFFICULTY"]
    if not isinstance(difficulty, str) or difficulty not in DIFFICULTY_BLANK_PROBABILITIES:
        raise ValueError(f"Unknown difficulty: {difficulty}")

    seed = data.get('seed')
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError("Seed must be an integer")

    puzzle = generate_puzzle(random.Random(seed), DIFFICULTY_BLANK_PROBABILITIES[difficulty])
    app.logger.info("Generated %s puzzle (seed=%s)", difficulty, seed)
    return {
        "puzzle": puzzle.to_rows(),
        "difficulty": difficulty,
        "text": puzzle.format(),
    }


def _grid_from(data):
    rows = data.get('grid')
    if rows is None:
        raise ValueError("Grid is required")
    return Grid.from_rows(rows)


def _solve(data):
    solution = _grid_from(data).solve()
    if solution is None:
        raise Unsolvable("Puzzle has no solution")
    return {"solution": solution.to_rows(), "text": solution.format()}


def _coordinate(data, name):
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < SIZE:
        raise ValueError(f"{name} must be an integer between 0 and 8")
    return value


@app.route("/")
def index():
    return "Sudoku backend is running!"


@app.route("/generate", methods=['POST'])
@cross_origin()
def generate_route():
    try:
        data = _payload(request.get_json(silent=True))
        return jsonify(_generate(data))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        app.logger.exception("Puzzle generation failed")
        return jsonify({"error": str(e)}), 500


@app.route("/solve", methods=['POST'])
@cross_origin()
def solve_route():
    try:
        data = _payload(request.get_json(silent=True))
        return jsonify(_solve(data))
    except Unsolvable as e:
        return jsonify({"error": str(e)}), 422
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        app.logger.exception("Solving failed")
        return jsonify({"error": str(e)}), 500


@app.route("/candidates", methods=['POST'])
@cross_origin()
def candidates_route():
    try:
        data = _payload(request.get_json(silent=True))
        grid = _grid_from(data)
        x, y = _coordinate(data, 'x'), _coordinate(data, 'y')
        return jsonify({"x": x, "y": y, "candidates": sorted(grid.candidates(x, y))})
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        app.logger.exception("Candidate lookup failed")
        return jsonify({"error": str(e)}), 500


@socketio.on('generate')
def on_generate(data):
    try:
        emit('puzzle_generated', _generate(_payload(data)))
    except ValueError as e:
        emit('error', {"message": str(e)})


@socketio.on('solve')
def on_solve(data):
    try:
        emit('puzzle_solved', _solve(_payload(data)))
    except (Unsolvable, ValueError) as e:
        emit('error', {"message": str(e)})

