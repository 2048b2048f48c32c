"""
Command-line interface for consolekit (ck).
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from typing import Any, List, Optional

from .config import ConsoleConfig, load_config
from .console import CommandConsole, is_error_result
from .daemon import ConsoleDaemon
from .demo import build_demo_scene, demo_universe
from .directory import SceneDirectory
from .version import __version__

REPL_PROMPT = "> "
DEMO_MODULE = "consolekit.demo"


def build_cli_parser() -> argparse.ArgumentParser:
    cli = argparse.ArgumentParser(prog="ck", description="consolekit command console")
    cli.add_argument(
        "--version",
        action="version",
        version=f"consolekit {__version__} (Python {sys.version.split()[0]})",
    )
    cli.add_argument("--module", "-m", action="append", default=[], help="Module to scan for commands (repeatable)")
    cli.add_argument("--no-examples", action="store_true", help="Exclude the built-in example commands")
    cli.add_argument("--include-private", action="store_true", help="Register private members too")
    cli.add_argument("--interactive", action="store_true", help="Allow 'select' targeting")
    cli.add_argument("--log-level", default=None, help="Logging level (default from CK_LOG_LEVEL)")
    sub = cli.add_subparsers(dest="command", required=True)

    exec_cmd = sub.add_parser("exec", help="Execute one command line")
    exec_cmd.add_argument("line", nargs="+", help="Command line, e.g. '@Player1 get health'")

    predict_cmd = sub.add_parser("predict", help="Show completion candidates for partial input")
    predict_cmd.add_argument("text", nargs="*", default=[])

    sub.add_parser("list", help="List registered command names")

    info_cmd = sub.add_parser("info", help="Show the type info of a command")
    info_cmd.add_argument("name")

    sub.add_parser("repl", help="Start an interactive console session")

    serve_cmd = sub.add_parser("serve", help="Serve the console over HTTP")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)
    serve_cmd.add_argument("--watch", action="store_true", help="Reload commands when module sources change")
    serve_cmd.add_argument("--dry-run", action="store_true", help="Print the server settings and exit")
    return cli


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _config_from_args(args: argparse.Namespace) -> ConsoleConfig:
    config = load_config()
    if args.no_examples:
        config.include_examples = False
    if args.include_private:
        config.include_private = True
    if args.interactive:
        config.interactive = True
    if args.log_level:
        config.log_level = args.log_level.lower()
    config.command_modules = [*config.command_modules, *args.module]
    return config


def _build_console(config: ConsoleConfig) -> CommandConsole:
    if not config.command_modules:
        directory = build_demo_scene(interactive=config.interactive)
        return CommandConsole(directory=directory, config=config, type_universe=demo_universe())
    universe: List[Any] = []
    for name in config.command_modules:
        try:
            universe.append(importlib.import_module(name))
        except ImportError as exc:
            raise SystemExit(f"Cannot import command module '{name}': {exc}") from exc
    directory = SceneDirectory(interactive=config.interactive)
    return CommandConsole(directory=directory, config=config, type_universe=universe)


def _print_result(result: str) -> None:
    stream = sys.stderr if is_error_result(result) else sys.stdout
    print(result, file=stream)


def _run_repl(console: CommandConsole) -> None:
    print(console.help_text())
    while True:
        try:
            line = input(REPL_PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()
            return
        stripped = line.strip()
        if not stripped:
            continue
        lowered = stripped.lower()
        if lowered in {"quit", "exit"}:
            return
        if lowered == "help":
            print(console.help_text())
            print("Commands: " + ", ".join(console.get_all_command_names()))
            continue
        if lowered == "history":
            for index, entry in enumerate(console.history.entries(), start=1):
                print(f"{index:>3}  {entry}")
            continue
        if lowered == "log":
            for entered, result in console.logs.transcript():
                print(f"> {entered}")
                print(f"  {result}")
            continue
        _print_result(console.execute_command(stripped))


def main(argv: list[str] | None = None) -> None:
    cli = build_cli_parser()
    args = cli.parse_args(argv)
    config = _config_from_args(args)
    _configure_logging(config.log_level)
    console = _build_console(config)

    if args.command == "exec":
        result = console.execute_command(" ".join(args.line))
        _print_result(result)
        if is_error_result(result):
            raise SystemExit(1)
        return

    if args.command == "predict":
        text = " ".join(args.text)
        for candidate in console.predict(text):
            print(candidate)
        hint: Optional[str] = console.hint(text)
        if hint:
            print(f"hint: {hint}")
        return

    if args.command == "list":
        for name in console.get_all_command_names():
            print(name)
        return

    if args.command == "info":
        info = console.get_command_type_info(args.name)
        if info is None:
            print(f"Unknown command '{args.name}'", file=sys.stderr)
            raise SystemExit(1)
        print(f"{args.name.lower()} {info}")
        return

    if args.command == "repl":
        _run_repl(console)
        return

    if args.command == "serve":
        from .server import create_app

        app = create_app(console)
        if args.dry_run:
            print(
                json.dumps(
                    {
                        "status": "ready",
                        "host": args.host,
                        "port": args.port,
                        "watch": args.watch,
                        "commands": len(console.get_all_command_names()),
                    },
                    indent=2,
                )
            )
            return
        import uvicorn

        daemon: ConsoleDaemon | None = None
        if args.watch:
            modules = config.command_modules or [DEMO_MODULE]
            daemon = ConsoleDaemon(console=console, module_names=modules)
            daemon.start_watcher()
        try:
            uvicorn.run(app, host=args.host, port=args.port)
        finally:
            if daemon is not None:
                daemon.stop_watcher()
        return


if __name__ == "__main__":  # pragma: no cover
    main()
