"""CLI entrypoint for Mela Recipe Parser."""

from __future__ import annotations

import argparse
import logging
import sys
import zipfile
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from mela_recipe_parser.codec import dump_payload
from mela_recipe_parser.config import ParserSettings, load_settings
from mela_recipe_parser.errors import IncorrectIDFormatError, MelaRecipeError
from mela_recipe_parser.identity import validate_identity
from mela_recipe_parser.recipes import Recipes, load_from_path, write_json, write_native

logger = logging.getLogger(__name__)

# Errors reported as a one-line message instead of a traceback.
_REPORTED_ERRORS = (MelaRecipeError, ValueError, zipfile.BadZipFile, OSError)


def _load_dotenv() -> None:
    """Load a .env file from the working directory (or its parents) when present."""
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the command-line parser."""
    p = argparse.ArgumentParser(
        prog="mela-recipes",
        description="Read, convert and validate Mela .melarecipe / .melarecipes exports.",
    )
    p.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging.",
    )
    sub = p.add_subparsers(dest="command")

    # Convert sub-command
    convert_p = sub.add_parser("convert", help="Convert a Mela export to JSON or back to Mela format.")
    convert_p.add_argument("path", type=str, help="Path to a .melarecipe or .melarecipes file.")
    convert_p.add_argument(
        "--to",
        choices=["json", "native"],
        default="json",
        help="Output format (default: json).",
    )
    convert_p.add_argument(
        "--out",
        type=str,
        default="",
        help="Output directory (default: the input file's directory).",
    )

    # Show sub-command
    show_p = sub.add_parser("show", help="List the recipes contained in a Mela export.")
    show_p.add_argument("path", type=str, help="Path to a .melarecipe or .melarecipes file.")
    show_p.add_argument(
        "--json",
        action="store_true",
        help="Print the recipes as JSON instead of a summary.",
    )

    # Validate sub-command
    validate_p = sub.add_parser(
        "validate",
        help="Check that every recipe id can be written back in Mela format.",
    )
    validate_p.add_argument("path", type=str, help="Path to a .melarecipe or .melarecipes file.")
    return p


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and dispatch to the requested command."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    # -- Logging setup --------------------------------------------------------
    level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )
    if not args.command:
        parser.print_help()
        print(
            "\nTip: run 'mela-recipes show <file>' to inspect an export,\n"
            "     or 'mela-recipes convert <file> --to json' to export plain JSON.",
            file=sys.stderr,
        )
        return 1

    _load_dotenv()
    settings = load_settings()
    try:
        if args.command == "convert":
            return _convert(args, settings)
        if args.command == "show":
            return _show(args, settings)
        if args.command == "validate":
            return _validate(args, settings)
    except _REPORTED_ERRORS as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    parser.print_help()
    return 1


# -- Commands -------------------------------------------------------------------


def _convert(args: argparse.Namespace, settings: ParserSettings) -> int:
    """Load an export and write it as plain JSON or native Mela format."""
    source = Path(args.path)
    out_dir = Path(args.out) if args.out else source.resolve().parent
    container = load_from_path(source, settings=settings)
    if args.to == "native":
        destination = write_native(container, out_dir, settings=settings)
    else:
        destination = write_json(container, out_dir, settings=settings)
    print(destination)
    return 0


def _show(args: argparse.Namespace, settings: ParserSettings) -> int:
    """Print a summary (or the JSON payload) of the recipes in an export."""
    container = load_from_path(args.path, settings=settings)
    if args.json:
        print(dump_payload(container.to_payload(), indent=settings.json_indent).decode("utf-8"))
        return 0
    _print_summary(container)
    return 0


def _print_summary(container: Recipes) -> None:
    print(f"\n  Recipes - {len(container)}")
    print("  " + "=" * 58)
    for recipe in container:
        flags = []
        if recipe.favorite:
            flags.append("favorite")
        if recipe.want_to_cook:
            flags.append("want to cook")
        marker = f" ({', '.join(flags)})" if flags else ""
        print(f"\n  {recipe.display_name}{marker}")
        print(f"    id: {recipe.id}")
        if recipe.categories:
            print(f"    categories: {', '.join(recipe.categories)}")
    print()


def _validate(args: argparse.Namespace, settings: ParserSettings) -> int:
    """Check the identity rule for every recipe; non-zero exit when any fails."""
    container = load_from_path(args.path, settings=settings)
    failures = 0
    for recipe in container:
        try:
            validate_identity(recipe)
        except IncorrectIDFormatError as exc:
            failures += 1
            print(f"  FAIL  {recipe.display_name}: {exc}")
        else:
            print(f"  OK    {recipe.display_name}")
    print(f"\n  {len(container) - failures}/{len(container)} recipes valid")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
