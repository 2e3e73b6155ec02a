"""Rulesmith CLI entry point.

Provides subcommands for running the preview web server, printing a
progression table, and evaluating a single formula. Accepts configuration via
flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import just_fix_windows_console
from dotenv import load_dotenv

just_fix_windows_console()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stdout.isatty()
except (AttributeError, ValueError):  # pragma: no cover - exotic stdout replacements
    _COLOR_ENABLED = False


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def _formula_arg(text: str):
    name, sep, expr = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=EXPR, got {text!r}")
    return name.strip(), expr


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Rulesmith progression preview

    Preview an experience curve and derived-stat formulas level by level, or
    serve the same preview as a JSON API. Configuration can be provided via
    CLI flags or environment variables. If both are present, CLI flags take
    precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                       Bind address for the web server (default: 0.0.0.0)
          PORT                       Port for the web server (default: 5000)
          RULESMITH_DEFAULT_LEVELS   Preview length when none is given (default: 20)
          RULESMITH_MAX_LEVELS       Largest preview the API accepts (default: 100)
          RULESMITH_LOG_LEVEL        debug | info | warn | error (default: info)

        Examples:
          # Run the preview API on the default host and port
          python run.py serve

          # Print 10 levels of a linear curve with a custom HP formula
          python run.py table --kind linear --base 50 --factor 2 --levels 10 --formula "hp=VIT * 12"

          # Same table as JSON
          python run.py table --json

          # Check one formula at level 5
          python run.py eval "INT * 10 + WIS * 5" --level 5
        """
    )

    parser = argparse.ArgumentParser(
        prog="Rulesmith",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Rulesmith {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the preview web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask development server exposing /api/progression/*",
    )
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    serve_parser.set_defaults(command="serve")

    table_parser = subparsers.add_parser(
        "table",
        help="Print a progression preview table",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    table_parser.add_argument(
        "--kind",
        choices=["linear", "quadratic", "exponential"],
        default=None,
        help="Curve shape (default: quadratic)",
    )
    table_parser.add_argument("--base", type=float, default=None, help="Base XP (default: 100)")
    table_parser.add_argument("--factor", type=float, default=None, help="Growth factor (default: 1.5)")
    table_parser.add_argument(
        "--levels",
        type=int,
        default=None,
        help="Number of levels (default: env RULESMITH_DEFAULT_LEVELS or 20)",
    )
    table_parser.add_argument(
        "--formula",
        dest="formulas",
        action="append",
        type=_formula_arg,
        default=None,
        metavar="NAME=EXPR",
        help="Derived stat formula; repeat for several (default: hp and mp)",
    )
    table_parser.add_argument("--json", action="store_true", help="Emit JSON instead of a text table")
    table_parser.set_defaults(command="table")

    eval_parser = subparsers.add_parser(
        "eval",
        help="Evaluate one formula against a level's preview stats",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    eval_parser.add_argument("expression", help="Formula, e.g. 'VIT * 10 + 50'")
    eval_parser.add_argument("--level", type=int, default=1, help="Preview level (default: 1)")
    eval_parser.set_defaults(command="eval")

    # If no subcommand provided, default to serve
    if len(argv) == 0:
        argv = ["serve"]

    return parser.parse_args(argv)


def _paint(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def render_table(rows, slot_names) -> str:
    """Format rows as a fixed-width text table (one line per level)."""
    headers = ["Lvl", "XP Needed", "Total XP"] + [f"Est. {name.upper()}" for name in slot_names]
    body = []
    for r in rows:
        cells = [str(r.level), str(r.xp_needed), str(r.xp_total)]
        cells += [str(r.derived[name]) for name in slot_names]
        body.append(cells)
    widths = [max(len(h), *(len(row[i]) for row in body)) if body else len(h) for i, h in enumerate(headers)]
    lines = ["  ".join(_paint(h.rjust(w), Fore.YELLOW) for h, w in zip(headers, widths))]
    for cells in body:
        painted = []
        for i, (c, w) in enumerate(zip(cells, widths)):
            color = Fore.CYAN if i == 1 else (Fore.RED if c == "Err" else Fore.GREEN if i > 2 else "")
            painted.append(_paint(c.rjust(w), color) if color else c.rjust(w))
        lines.append("  ".join(painted))
    return "\n".join(lines)


def _run_table(args) -> int:
    from rulesmith.config import DEFAULT_CURVE, DEFAULT_FORMULAS, Settings
    from rulesmith.models import CurveConfig, CurveKind, FormulaSet, table_to_dicts
    from rulesmith.services.table_service import build_table

    curve = CurveConfig(
        kind=CurveKind.parse(args.kind) if args.kind else DEFAULT_CURVE.kind,
        base=args.base if args.base is not None else DEFAULT_CURVE.base,
        factor=args.factor if args.factor is not None else DEFAULT_CURVE.factor,
    )
    formulas = FormulaSet.from_mapping(dict(args.formulas)) if args.formulas else DEFAULT_FORMULAS
    levels = args.levels if args.levels is not None else Settings.from_env().default_levels
    rows = build_table(curve, formulas, levels)
    if args.json:
        print(json.dumps({"level_count": len(rows), "rows": table_to_dicts(rows)}, indent=2))
    else:
        print(render_table(rows, formulas.names()))
    return 0


def _run_eval(args) -> int:
    from rulesmith.formula import EvalError, evaluate
    from rulesmith.models import snapshot_for

    result = evaluate(args.expression, snapshot_for(args.level))
    if isinstance(result, EvalError):
        print(_paint(f"error: {result.code}", Fore.RED))
        return 1
    print(result)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "serve").lower()

    if mode == "table":
        return _run_table(args)
    if mode == "eval":
        return _run_eval(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from rulesmith.server import start_server

    divider = _paint("=" * 40, Fore.MAGENTA)
    lines = [
        divider,
        f"  {_paint('Rulesmith Preview Server', Fore.CYAN + Style.BRIGHT)}",
        divider,
        f"  {_paint('Host:', Fore.YELLOW):12} {_paint(str(host), Fore.GREEN)}",
        f"  {_paint('Port:', Fore.YELLOW):12} {_paint(str(port), Fore.GREEN)}",
        f"  {_paint('Version:', Fore.YELLOW):12} {_paint(__version__, Fore.GREEN)}",
        divider,
        "",
    ]
    print("\n".join(lines))
    start_server(host=host, port=port, debug=bool(getattr(args, "debug", False)))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
