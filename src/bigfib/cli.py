# src/bigfib/cli.py

"""
bigfib - exact Fibonacci numbers on fixed-capacity limb vectors

Description:
    Computes F(k) with 32-bit limb arithmetic (fast doubling or plain
    iteration), prints the fixed-width hexadecimal rendering and the time
    spent, and can benchmark a range of indices.

usage: see bigfib -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import sys
import textwrap
from importlib.resources import files as pkg_files

import gmpy2
from colorama import Fore, Style
from colorama import init as colorama_init

import bigfib.config as CONFIG
from bigfib import __version__ as _ver
from bigfib.bench import run_bench, write_csv
from bigfib.fibonacci import Algorithm, limbs_needed
from bigfib.fmt import colour_label, format_elapsed, format_result
from bigfib.runtime import APPLY, CFG, DEFAULT_CAPACITY, ensure_runtime_deps
from bigfib.runtime import current as _rt_current
from bigfib.service import FibService
from bigfib.utility import UserInputError, flatten_dotted, parse_index, typename
from bigfib.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("bench", "init", "where", "profiles")


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not (msg.startswith("Invalid input:") or msg.startswith("Error:")):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def verify_hex(k: int, hex_text: str, capacity: int) -> bool:
    """Compare a hex result with gmpy2.fib(k) reduced to the capacity."""
    expected = int(gmpy2.fib(k)) % (1 << (32 * capacity))
    return int(hex_text, 16) == expected


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      bench [LOWER] [UPPER]
          Compute F(k) for every k in [LOWER, UPPER] and write k, engine time
          and read latency (ns) as CSV (see --output).

      init [overwrite]
          Create the workspace and copy the packaged profiles if missing.
          'overwrite' requires the environment variable BIGFIB_DEV=1.

      where
          Show the workspace and package paths.

      profiles
          List available profiles.

    interactive mode (no arguments):
      input N | output | time | algorithm [NAME] | h | q
    """)

    p = argparse.ArgumentParser(
        prog="bigfib",
        description="Exact Fibonacci numbers on fixed-capacity 32-bit limb vectors",
        usage=(
            "bigfib [k] [--algorithm NAME] [--capacity N|auto] [--profile NAME] [--verify] [--debug]\n"
            "       bigfib bench [LOWER] [UPPER] [--output FILE] [--quiet]\n"
            "       bigfib init|where|profiles\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[command] [args]",
                   help="an index k, or a command followed by its arguments")
    p.add_argument("--algorithm", default=None, help=f"one of: {', '.join(Algorithm.names())}")
    p.add_argument("--capacity", default=None, help="number of 32-bit limbs, or 'auto' to fit F(k)")
    p.add_argument("--profile", default=None, help="profile name from the workspace")
    p.add_argument("--output", default=None, help="bench: CSV file (relative paths are workspace-relative)")
    p.add_argument("--verify", action="store_true", help="cross-check the result against gmpy2.fib")
    p.add_argument("--quiet", action="store_true", help="suppress progress and summary output")
    p.add_argument("--debug", action="store_true", help="show timings, profile settings and tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        if "--debug" in (argv if argv is not None else sys.argv) or _rt_current().debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str, debug: bool) -> None:
    if not CONFIG.has_profile(name):
        available = ", ".join(CONFIG.list_all_profiles()) or "(none)"
        raise UserInputError(f"Unknown profile: '{name}'. Available profiles: {available}")
    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if debug:
        _rt_current().debug = True
        print(f"[debug] active profile: {selected.name}", file=sys.stderr)
        print(f"[debug] profile file: {selected._source}", file=sys.stderr)
        flat = flatten_dotted(selected.as_dict())
        for k in sorted(flat.keys(), key=str.lower):
            v = CFG(k, None)
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
        print(file=sys.stderr)


def _resolve_capacity(raw: str | None, k: int | None) -> int:
    if raw is None:
        return int(CFG("ENGINE.CAPACITY", DEFAULT_CAPACITY))
    if raw.strip().lower() == "auto":
        if k is None:
            raise UserInputError("--capacity auto needs an index (or a bench range)")
        return limbs_needed(k)
    try:
        cap = int(raw)
    except ValueError:
        raise UserInputError(f"Invalid input: --capacity must be a positive integer or 'auto', got '{raw}'") from None
    if cap <= 0:
        raise UserInputError(f"Invalid input: --capacity must be positive, got {cap}")
    return cap


def _run_one(service: FibService, k: int, args) -> int:
    service.set_index(str(k))
    state = service.snapshot()
    print(format_result(state.result))
    if not args.quiet:
        print(f"F({k}) via {state.algorithm.value}, capacity {service.capacity} limbs: "
              f"{format_elapsed(state.elapsed_ns)}")
    if args.verify:
        ok = verify_hex(k, state.result, service.capacity)
        print(colour_label("OK" if ok else "MISMATCH", ok) + " against gmpy2.fib")
        return 0 if ok else 1
    if k > 1 and limbs_needed(k) > service.capacity and not args.quiet:
        print(f"{Fore.YELLOW}note:{Style.RESET_ALL} F({k}) may need up to {limbs_needed(k)} limbs; "
              f"the result is exact only modulo 2**(32*{service.capacity}).", file=sys.stderr)
    return 0


def _run_bench(items: list[str], args) -> int:
    lower = parse_index(items[0]) if items else int(CFG("BENCH.LOWER_BOUND", 0))
    upper = parse_index(items[1]) if len(items) > 1 else int(CFG("BENCH.UPPER_BOUND", 1000))
    capacity = _resolve_capacity(args.capacity, upper)
    service = FibService(capacity=capacity, algorithm=args.algorithm)

    out = args.output or CFG("BENCH.OUTPUT_FILE", "results/bench.csv")
    path = os.path.expanduser(out)
    if not os.path.isabs(path):
        path = os.path.join(workspace_dir(), path)

    rows = run_bench(service, lower, upper, progress=not args.quiet)
    count = write_csv(rows, path)
    if not args.quiet:
        print(f"Wrote {count} rows ({service.algorithm()}, capacity {capacity}) to {path}")
    return 0


def _repl(service: FibService) -> int:
    print(f"{Fore.YELLOW}{Style.BRIGHT}bigfib v{_ver}{Style.RESET_ALL} "
          f"— capacity {service.capacity} limbs, algorithm {service.algorithm()}")
    while True:
        try:
            line = input("\nbigfib> ").strip()
            low = line.lower()
            if low in {"", "q", "quit"}:
                break
            if low in {"h", "help"}:
                print("input N        set the index and compute F(N)")
                print("output         show the hex result")
                print("time           show the elapsed time (ns)")
                print("algorithm [A]  show or select the algorithm "
                      f"({', '.join(Algorithm.names())}; unknown names select fast-doubling)")
                print("q              quit")
                continue

            cmd, _, arg = line.partition(" ")
            cmd = cmd.lower()
            if cmd == "input" and arg:
                service.write_attribute("input", arg)
            elif cmd == "algorithm" and arg:
                service.write_attribute("algorithm", arg)
                print(f"Algorithm: {service.algorithm()}")
            elif cmd in FibService.ATTRIBUTES and not arg:
                print(service.read_attribute(cmd), end="")
            else:
                print(f"{Fore.RED}Invalid input: {Style.RESET_ALL}'{line}'. Type H for help.")
        except UserInputError as e:
            msg = str(e)
            prefix = f"{Fore.RED}Invalid input:{Style.RESET_ALL}"
            msg = msg.replace("Invalid input:", prefix, 1) if msg.startswith("Invalid input:") else f"{prefix} {msg}"
            print(msg, file=sys.stderr)
        except (EOFError, KeyboardInterrupt):
            print()
            break
    return 0


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    if args.debug:
        faulthandler.enable()

    if not ensure_runtime_deps(strict=True):
        return 1

    # First run seeds the workspace silently
    ensure_workspace_seeded()

    items = list(args.items)
    command = items[0].lower() if items and items[0].lower() in COMMANDS else None

    if command == "init":
        overwrite = len(items) > 1 and items[1] == "overwrite"
        if overwrite and os.environ.get("BIGFIB_DEV") != "1":
            print("Refusing to overwrite: set BIGFIB_DEV=1 to enable developer overwrite.")
            return 2
        ws, copied = seed_workspace(overwrite=overwrite)
        print(f"Workspace ready at: {ws}" + (" (overwrote existing files)" if overwrite else ""))
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0
    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('bigfib')}")
        return 0
    if command == "profiles":
        for name, desc in CONFIG.list_profiles_with_descriptions():
            print(f"{name:<16} {desc}")
        return 0

    profile_name = _select_profile_name(args.profile)
    _apply_profile(profile_name, args.debug)
    if args.profile:
        CONFIG.write_current_profile(profile_name)

    if command == "bench":
        return _run_bench(items[1:], args)

    if items:
        if len(items) > 1:
            parser.error(f"unexpected arguments: {' '.join(items[1:])}")
        k = parse_index(items[0])
        service = FibService(capacity=_resolve_capacity(args.capacity, k), algorithm=args.algorithm)
        return _run_one(service, k, args)

    service = FibService(capacity=_resolve_capacity(args.capacity, None), algorithm=args.algorithm)
    return _repl(service)


if __name__ == "__main__":
    raise SystemExit(main())
