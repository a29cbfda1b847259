from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping, Sequence

from imagebuilder_tools.common import ImageBuilderToolError

Command = Callable[[Sequence[str]], None]


def command_map() -> dict[str, Command]:
    """
    Map CLI command names to Python entry functions.

    Each value is a `main(argv)` function from one helper module.
    """
    from imagebuilder_tools.promote_recipe import main as promote_recipe
    from imagebuilder_tools.resolve_latest_recipe import main as resolve_latest_recipe

    return {
        "promote-recipe": promote_recipe,
        "resolve-latest-recipe": resolve_latest_recipe,
    }


def build_parser(commands: Mapping[str, Command]) -> argparse.ArgumentParser:
    """Build argument parser with one positional command choice."""
    parser = argparse.ArgumentParser(
        prog="imagebuilder-tools",
        description="Run one Image Builder helper command.",
    )
    parser.add_argument("command", choices=sorted(commands.keys()))
    # Everything after the command name belongs to that command's own parser.
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def run_command(command: str, args: Sequence[str], commands: Mapping[str, Command]) -> None:
    """
    Run one registered command.

    `commands` is passed in to keep this function easy to test.
    """
    commands[command](list(args))


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)

    try:
        run_command(args.command, args.args, commands)
    except ImageBuilderToolError as exc:
        # Keep failures short and readable in workflow logs.
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
