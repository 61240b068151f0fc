"""
Morris CLI - Command-line interface for the engine.

Usage:
    morris play [--load INDEX] [--name NAME]   Play in the terminal
    morris list                                List saved games
    morris serve [--host HOST] [--port PORT]   Run the HTTP API
"""

import argparse
import logging
import os
import sys

_BOARD_TEMPLATE = """\
 {0} ----------- {1} ----------- {2}
 |             |             |
 |   {3} ------- {4} ------- {5}   |
 |   |         |         |   |
 |   |   {6} --- {7} --- {8}   |   |
 |   |   |           |   |   |
 {9} - {10} - {11}           {12} - {13} - {14}
 |   |   |           |   |   |
 |   |   {15} --- {16} --- {17}   |   |
 |   |         |         |   |
 |   {18} ------- {19} ------- {20}   |
 |             |             |
 {21} ----------- {22} ----------- {23}"""

_MARKS = {None: ".", 0: "C", 1: "D"}

_PROMPTS = {
    "pick_up": "pick up one of your tokens",
    "place": "place a token",
    "capture": "capture an opponent token",
}


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Morris - Nine Men's Morris rules engine",
        prog="morris",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("MORRIS_LOG_LEVEL", "INFO"),
        help="Logging level (default: $MORRIS_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--data-file",
        default=os.getenv("MORRIS_DATA_FILE"),
        help="Saved games file (default: $MORRIS_DATA_FILE or ~/.morris/data.txt)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--load", type=int, metavar="INDEX", help="Resume a saved game")
    play_parser.add_argument("--name", help="Name used when saving")

    # List command
    subparsers.add_parser("list", help="List saved games")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "list":
        cmd_list(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def format_board(board) -> str:
    """Draw the board with C for Cat, D for Dog and . for empty."""
    marks = [_MARKS[None if n.occupant is None else int(n.occupant)] for n in board.nodes]
    return _BOARD_TEMPLATE.format(*marks)


def format_status(board) -> str:
    """One line per team plus whose turn it is."""
    lines = []
    for team in board.teams:
        lines.append(
            f"{team.player.label}: {team.unplaced_tokens} to place, {team.alive_tokens} alive"
        )
    phase = board.phase.name.lower()
    lines.append(f"{board.current_player.label} to {_PROMPTS[phase]}")
    return "\n".join(lines)


def _open_store(args):
    from .storage import GameStore
    return GameStore(args.data_file) if args.data_file else GameStore()


def cmd_list(args):
    """List saved games."""
    store = _open_store(args)
    games = store.list_games()
    if not games:
        print("No saved games.")
        return
    for game in games:
        print(f"{game.index:3d}  {game.name}  ({game.num_boards} boards)")


def cmd_play(args):
    """Play a game reading point indices from stdin."""
    from .engine_core.serialization import RecordError
    from .session import Game

    store = _open_store(args)
    if args.load is not None:
        try:
            game = store.load(args.load)
        except (IndexError, RecordError) as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(f"Loaded game: {game.name}")
    else:
        game = Game(name=args.name)

    print("Enter a point 0-23, 'u' to undo, 's' to save, 'q' to quit.")
    while True:
        print()
        print(format_board(game.current_board))
        print(format_status(game.current_board))

        try:
            line = input("> ").strip().lower()
        except EOFError:
            print()
            break

        if line in ("q", "quit"):
            break
        if line in ("u", "undo"):
            game.undo()
            continue
        if line in ("s", "save"):
            _save(store, game)
            continue

        try:
            index = int(line)
        except ValueError:
            print(f"Not a point: {line!r}")
            continue
        if not 0 <= index <= 23:
            print("Points are numbered 0-23")
            continue

        result = game.apply_input(index)
        if not result.accepted:
            print(f"Rejected: {result.error}")
            if result.loser is not None:
                break
            continue
        for change in result.changes:
            print(f"  - {change}")
        if result.loser is not None:
            print()
            print(format_board(game.current_board))
            print(f"\n{result.winner.label} wins!")
            break


def _save(store, game):
    name = game.name
    if not name:
        try:
            name = input("Game name: ").strip()
        except EOFError:
            return
    try:
        index = store.save(game, game_index=game.game_index, name=name)
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return
    print(f"Saved as {game.name!r} (index {index})")


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    if args.data_file:
        os.environ["MORRIS_DATA_FILE"] = args.data_file
    uvicorn.run("morris.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
