"""Command-line front end: terminal play, level passwords, and rule presets."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from mordicus.config import LevelType, get_game_config, toggle_original_config
from mordicus.directions import Direction
from mordicus.levels import LevelCatalog
from mordicus.session import GameRun, Outcome
from mordicus.store import JsonFileStore, MemoryStore, Store, best_bonus

logger = logging.getLogger(__name__)

_DIRECTION_KEYS: dict[str, Direction] = {
    "w": Direction.UP,
    "d": Direction.RIGHT,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "up": Direction.UP,
    "right": Direction.RIGHT,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mordicus",
        description="Mordicus grid puzzle: play in the terminal and manage progress.",
    )
    parser.add_argument(
        "--store", type=str, default=None,
        help="Path to a JSON file for scores and passwords (in-memory if omitted).",
    )
    parser.add_argument(
        "--levels", type=str, default=None,
        help="Path to a levels JSON file (bundled levels if omitted).",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- play ---
    play_p = sub.add_parser("play", help="Play from stdin commands.")
    play_p.add_argument("--password", type=str, default=None)
    play_p.add_argument(
        "--continue", dest="resume", action="store_true",
        help="Resume from the checkpoint saved in the store.",
    )
    play_p.add_argument(
        "--level-type", type=str, default=None,
        choices=[t.value for t in LevelType],
    )

    # --- passwords ---
    pw_p = sub.add_parser("passwords", help="List checkpoint passwords per stage.")
    pw_p.add_argument(
        "--level-type", type=str, default=LevelType.ORIGINAL.value,
        choices=[t.value for t in LevelType],
    )

    # --- config ---
    cfg_p = sub.add_parser("config", help="Show or change the active rule preset.")
    cfg_p.add_argument(
        "--toggle", action="store_true",
        help="Switch between the remake and original rules.",
    )
    cfg_p.add_argument("--save", type=str, default=None, help="Write the preset as JSON.")

    return parser


def _open_store(path: str | None) -> Store:
    return JsonFileStore(path) if path else MemoryStore()


def _open_catalog(path: str | None) -> LevelCatalog:
    return LevelCatalog.from_file(path) if path else LevelCatalog.default()


def _print_state(run: GameRun, out: TextIO) -> None:
    snapshot = run.session.snapshot
    print(  # noqa: T201
        f"STAGE {run.level.stage:03d}  SCORE {run.score:06d}  "
        f"BONUS {snapshot.bonus:04d}  LIVES {snapshot.lives:02d}",
        file=out,
    )
    print(snapshot.grid, file=out)  # noqa: T201


def _run_play(args: argparse.Namespace, store: Store, catalog: LevelCatalog,
              stdin: TextIO, out: TextIO) -> int:
    config = get_game_config(store)
    level_type = LevelType(args.level_type) if args.level_type else config.level_type
    if args.password:
        level = catalog.find_by_password(args.password, level_type)
        if level is None:
            print("No level found for this password.", file=out)  # noqa: T201
            return 2
    elif catalog.stage_count(level_type) == 0:
        print(f"No {level_type.value} levels loaded.", file=out)  # noqa: T201
        return 2
    elif args.resume:
        level = catalog.furthest_played_level(
            store, level_type, config.password_every_x_levels,
        )
    else:
        level = catalog.first_level(level_type)

    run = GameRun(catalog, config, store, level=level)
    _print_state(run, out)

    for line in stdin:
        command = line.strip().lower()
        if not command:
            continue
        if command == "q":
            break

        if command in _DIRECTION_KEYS:
            if run.outcome is not Outcome.PLAYING:
                continue
            if run.move(_DIRECTION_KEYS[command]):
                _print_state(run, out)
        elif command in ("z", "y"):
            if (run.undo() if command == "z" else run.redo()) is not None:
                _print_state(run, out)
        elif command == "x" and run.outcome is Outcome.PLAYING:
            run.abort()
        elif command == "r" and run.outcome in (Outcome.RETRY, Outcome.COMPLETE):
            run.retry()
            _print_state(run, out)
        elif command == "n" and run.outcome is Outcome.COMPLETE:
            run.next_level()
            if not run.completed:
                _print_state(run, out)
        else:
            print(f"Ignored: {command}", file=out)  # noqa: T201
            continue

        if run.completed:
            print(f"CONGRATULATIONS! FINAL SCORE {run.score:06d}", file=out)  # noqa: T201
            break
        if run.outcome is Outcome.GAME_OVER:
            print(f"GAME OVER. PASSWORD: {run.current_password}", file=out)  # noqa: T201
            break
        if run.outcome is Outcome.COMPLETE:
            best = best_bonus(store, run.level.password)
            print(f"LEVEL COMPLETE. BEST BONUS {best:04d}. r=retry n=next", file=out)  # noqa: T201
        elif run.outcome is Outcome.RETRY:
            print("TRY AGAIN! r=retry", file=out)  # noqa: T201

    return 0


def _run_passwords(args: argparse.Namespace, store: Store, catalog: LevelCatalog,
                   stdin: TextIO, out: TextIO) -> int:
    level_type = LevelType(args.level_type)
    for level in catalog.levels(level_type):
        print(f"{level.level_type.value} level #{level.stage} password: {level.password}",  # noqa: T201
              file=out)
    return 0


def _run_config(args: argparse.Namespace, store: Store, catalog: LevelCatalog,
                stdin: TextIO, out: TextIO) -> int:
    config = toggle_original_config(store) if args.toggle else get_game_config(store)
    if args.save:
        config.save(args.save)
    for key, value in config.to_dict().items():
        print(f"{key}: {value}", file=out)  # noqa: T201
    return 0


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    out: TextIO | None = None,
) -> int:
    """Entry point for the ``mordicus`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "play": _run_play,
        "passwords": _run_passwords,
        "config": _run_config,
    }
    store = _open_store(args.store)
    catalog = _open_catalog(args.levels)
    return handlers[args.command](
        args, store, catalog, stdin or sys.stdin, out or sys.stdout,
    )


if __name__ == "__main__":
    sys.exit(main())
