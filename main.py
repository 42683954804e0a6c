#!/usr/bin/env python3
"""
Hypersweeper - Main entry point.

Usage:
    python main.py presets
    python main.py new [--preset NAME] [--size N N N N N N] [--mines N]
                       [--wrap AXIS ...] [--seed HEX] [--first X Y Z U V W]
    python main.py play [--preset NAME] [--probe-marked] [--counts]
"""
import argparse
import logging
from typing import List, Optional

from src.hypersweeper.board import GameState
from src.hypersweeper.environment import cell_symbol, render_board
from src.hypersweeper.session import GameSession
from src.hypersweeper.settings import (
    DIMENSIONS,
    PRESETS,
    TESSERACT,
    GameSettings,
    parse_seed,
)


def build_settings(args: argparse.Namespace) -> GameSettings:
    """Combine a preset with any overrides given on the command line."""
    base = PRESETS.get(args.preset.lower())
    if base is None:
        raise SystemExit(f"Unknown preset: {args.preset}")

    size = tuple(args.size) if args.size else base.size
    wrap = base.wrap
    if args.wrap is not None:
        unknown = sorted(set(args.wrap) - set(range(DIMENSIONS)))
        if unknown:
            raise SystemExit(f"Wrap axes must be within 0..{DIMENSIONS - 1}, got {unknown}")
        wrap = tuple(axis in args.wrap for axis in range(DIMENSIONS))
    mines = args.mines if args.mines is not None else base.mines
    seed = args.seed if args.seed is not None else base.seed

    overridden = (size, wrap, mines, seed) != (base.size, base.wrap, base.mines, base.seed)
    name = "Custom" if overridden else base.name

    try:
        return GameSettings(name, size, wrap, mines, seed)
    except ValueError as error:
        raise SystemExit(f"Invalid settings: {error}")


def print_board(session: GameSession, show_delta: bool = True) -> None:
    """Print the board and a status line."""
    board = session.board
    if board is None:
        print(render_board(session.settings.size, lambda _: ".", show_delta))
    else:
        print(render_board(
            board.size,
            lambda coordinate: cell_symbol(
                board.cell_at(coordinate), show_delta, board.game_state
            ),
            show_delta,
        ))

    status = session.status()
    result = {
        GameState.VICTORY.name: "You won!",
        GameState.LOSS.name: "You lost!",
    }.get(status["state"], "")
    print(
        f"\n({status['marked']}/{status['mines']})  {status['dimensions']}  "
        f"seed: {status['seed'] or '-'}  {status['elapsed']:.0f}s  {result}"
    )


def presets(args: argparse.Namespace) -> None:
    """List the built-in presets."""
    for key, preset in PRESETS.items():
        print(f"{key:<12} {preset.describe()}")


def new(args: argparse.Namespace) -> None:
    """Generate a board, probe the first cell and show it."""
    settings = build_settings(args)
    session = GameSession(settings)
    first = args.first or [extent // 2 for extent in settings.size]

    try:
        session.probe(first)
    except IndexError as error:
        raise SystemExit(f"Invalid first cell: {error}")

    print_board(session, not args.counts)


def parse_command(line: str) -> Optional[List[str]]:
    """Split an input line into a command word and its arguments."""
    words = line.split()
    return words or None


def play(args: argparse.Namespace) -> None:
    """Play interactively on the terminal."""
    settings = build_settings(args)
    session = GameSession(settings, probe_marked=args.probe_marked)

    print(f"{settings.name}: {settings.describe()}")
    print(
        "Commands: p X Y Z U V W (probe), m ... (mark), h ... (highlight), "
        "c ... (clear highlight), g N (toggle highlight group), n (new game), q"
    )
    print_board(session, not args.counts)

    while True:
        try:
            words = parse_command(input("> "))
        except EOFError:
            break
        if words is None:
            continue

        command, values = words[0].lower(), words[1:]
        if command == "q":
            break
        if command == "n":
            session.reset()
            print_board(session, not args.counts)
            continue

        try:
            numbers = [int(value) for value in values]
            if command == "p":
                session.probe(numbers)
            elif command == "m":
                session.mark(numbers)
            elif command == "h":
                session.highlight(numbers, True)
            elif command == "c":
                session.highlight(numbers, False)
            elif command == "g":
                selected = session.toggle_highlight_group(numbers[0])
                print(f"Highlight groups: {selected:08b}")
                continue
            else:
                print(f"Unknown command: {command}")
                continue
        except (ValueError, IndexError) as error:
            print(f"Invalid input: {error}")
            continue

        print_board(session, not args.counts)


def add_settings_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by commands that start games."""
    parser.add_argument(
        "--preset", default=TESSERACT.name, help="Preset to start from"
    )
    parser.add_argument(
        "--size", type=int, nargs=DIMENSIONS, metavar="N", help="Axis extents"
    )
    parser.add_argument("--mines", type=int, help="Number of mines")
    parser.add_argument(
        "--wrap", type=int, nargs="*", metavar="AXIS", help="Axes that wrap around"
    )
    parser.add_argument("--seed", type=parse_seed, help="Generation seed (hex)")
    parser.add_argument(
        "--counts", action="store_true",
        help="Show neighbour mine counts instead of remaining-mines deltas",
    )


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Hypersweeper - Minesweeper on up to six wrapping axes"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log engine debug messages"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("presets", help="List built-in presets")

    new_parser = subparsers.add_parser("new", help="Generate and show a board")
    add_settings_arguments(new_parser)
    new_parser.add_argument(
        "--first", type=int, nargs=DIMENSIONS, metavar="I",
        help="First cell to probe (default: centre)",
    )

    play_parser = subparsers.add_parser("play", help="Play on the terminal")
    add_settings_arguments(play_parser)
    play_parser.add_argument(
        "--probe-marked", action="store_true", help="Allow probing marked cells"
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "presets":
        presets(args)
    elif args.command == "new":
        new(args)
    elif args.command == "play":
        play(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
