"""
Tilemerge CLI - Command-line interface for the engine.

Usage:
    tilemerge play [--hard] [--new]      Play in the terminal
    tilemerge serve [--host] [--port]    Run the REST API
    tilemerge leaderboard [--mode]       Show the top scores of a server
"""

import argparse
import logging
import os
import sys

from .engine_core import Difficulty, Direction, GameEngine, SIZE


KEYS = {
    "w": Direction.UP, "k": Direction.UP,
    "s": Direction.DOWN, "j": Direction.DOWN,
    "a": Direction.LEFT, "h": Direction.LEFT,
    "d": Direction.RIGHT, "l": Direction.RIGHT,
}

DEFAULT_LEADERBOARD_URL = "http://localhost:3001/api"


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tilemerge - 2048 in the terminal",
        prog="tilemerge",
    )
    parser.add_argument(
        "--data-dir",
        default=os.getenv("TILEMERGE_DATA_DIR"),
        help="Where games and the best score are saved (default ~/.tilemerge)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("TILEMERGE_LOG_LEVEL", "WARNING"),
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--hard", action="store_true", help="Hard spawn policy")
    play_parser.add_argument("--new", action="store_true", help="Ignore any saved game")
    play_parser.add_argument("--url", default=os.getenv("TILEMERGE_LEADERBOARD_URL"),
                             help="Leaderboard server to submit final scores to")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=3001)

    # Leaderboard command
    board_parser = subparsers.add_parser("leaderboard", help="Show top scores")
    board_parser.add_argument("--url", default=os.getenv("TILEMERGE_LEADERBOARD_URL",
                                                         DEFAULT_LEADERBOARD_URL))
    board_parser.add_argument("--mode", choices=[d.value for d in Difficulty], default="easy")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    elif args.command == "leaderboard":
        cmd_leaderboard(args)
    else:
        parser.print_help()
        sys.exit(1)


def render(engine: GameEngine) -> str:
    """Text rendering of the board and scores."""
    width = max(4, len(str(max((t.value for t in engine.grid if t), default=0))) + 1)
    border = "+" + ("-" * width + "+") * SIZE
    lines = [
        f"{engine.difficulty.value.upper()}  score {engine.score}  "
        f"best {engine.best_score} ({engine.player_name})",
        border,
    ]
    for row in range(SIZE):
        cells = []
        for col in range(SIZE):
            tile = engine.grid[row * SIZE + col]
            cells.append(str(tile.value).rjust(width) if tile else " " * width)
        lines.append("|" + "|".join(cells) + "|")
        lines.append(border)
    return "\n".join(lines)


def cmd_play(args):
    """Interactive game loop."""
    from .api.app import create_service
    from .api.schemas import MoveRequest, NewGameRequest

    service = create_service(data_dir=args.data_dir, leaderboard_url=args.url)
    engine = service.engine
    difficulty = Difficulty.HARD if args.hard else None

    response = service.new_game(NewGameRequest(restore=not args.new, difficulty=difficulty))
    if response.restored:
        print("Resuming your saved game.")

    print("Moves: w/a/s/d or k/h/j/l   u: undo   n: new game   q: quit")
    while True:
        print(render(engine))
        try:
            key = input("> ").strip().lower()
        except EOFError:
            break

        if key == "q":
            break
        if key == "u":
            if not service.undo().undone:
                print("Nothing to undo.")
            continue
        if key == "n":
            service.new_game(NewGameRequest(difficulty=difficulty))
            continue
        if key not in KEYS:
            print(f"Unknown key: {key!r}")
            continue

        result = service.move(MoveRequest(direction=KEYS[key]))
        for value in result.milestones:
            print(f"*** {value}! ***")

        if result.state.is_game_over:
            print(render(engine))
            print(f"Game over! Final score: {engine.score}")
            service.submit_final_score()
            service.new_game(NewGameRequest(difficulty=difficulty))


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    if args.data_dir:
        os.environ["TILEMERGE_DATA_DIR"] = args.data_dir

    uvicorn.run(
        "tilemerge.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


def cmd_leaderboard(args):
    """Print the top scores of a leaderboard server."""
    from .leaderboard import HttpScoreSink

    sink = HttpScoreSink(args.url)
    try:
        entries = sink.fetch_leaderboard(Difficulty(args.mode))
    finally:
        sink.close()

    if not entries:
        print("No scores yet.")
        return

    for rank, entry in enumerate(entries, start=1):
        print(f"{rank:>2}. {entry.user.name:<20} {entry.score:>8}")


if __name__ == "__main__":
    main()
