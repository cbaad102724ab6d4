"""
Slotwatch CLI - Command-line interface for the service.

Usage:
    slotwatch serve [--host HOST] [--port PORT]   Run the GSI webhook
    slotwatch replay <file> [--seed N]            Replay recorded snapshots
"""

from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Slotwatch - kill feed victim slot attribution",
        prog="slotwatch",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the GSI webhook server")
    serve_parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT or 3000)")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay a recorded snapshot file")
    replay_parser.add_argument("file", help="JSON array of snapshots, or one snapshot per line")
    replay_parser.add_argument("--seed", type=int, help="Seed for initial attributions")
    replay_parser.add_argument("--quiet", "-q", action="store_true", help="Only print the final table")

    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "replay":
        cmd_replay(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    from .api import APIService, create_app
    from .config import Settings
    from .integrations import HighlightDispatcher, LoggingHighlightSink
    from .logging_config import configure_logging
    from .session import MatchManager

    settings = Settings.from_env()
    logger = configure_logging(settings)

    service = APIService(
        manager=MatchManager(seed=settings.seed, summary_interval=settings.summary_interval),
        dispatcher=HighlightDispatcher(
            sink=LoggingHighlightSink(),
            enabled=settings.highlights_enabled,
        ),
    )
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("GSI server starting on %s:%d", host, port)
    uvicorn.run(create_app(service), host=host, port=port, log_config=None)


def load_snapshots(path: Path) -> list[Any]:
    """
    Read a recorded snapshot file.

    Accepts a JSON array, a single JSON object, or one JSON object per line.
    """
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return [json.loads(line) for line in text.splitlines() if line.strip()]

    return data if isinstance(data, list) else [data]


def cmd_replay(args):
    """Feed recorded snapshots through a fresh manager."""
    from .session import MatchManager
    from .tracking import Snapshot

    try:
        snapshots = load_snapshots(Path(args.file))
    except FileNotFoundError:
        print(f"Error: File not found: {args.file}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Could not parse {args.file}: {e}")
        sys.exit(1)

    manager = MatchManager(seed=args.seed)
    last_session = None
    ticks = 0

    for payload in snapshots:
        result = manager.handle(Snapshot.from_payload(payload))
        if manager.current is not None:
            last_session = manager.current
        if result is None:
            continue
        ticks += 1
        if not args.quiet:
            for line in result.messages():
                print(f"[{result.game_time:7.1f}] {line}")

    print(f"\nReplayed {len(snapshots)} snapshots ({ticks} ticks)")
    if last_session is None:
        print("No match in progress found.")
        return

    state = last_session.state
    print(f"Match {last_session.match_id}: {state.total_kills} kills")
    for victim_id, mapping in sorted(state.mappings.items()):
        lock = " [locked]" if mapping.locked else ""
        print(
            f"  victim {victim_id}: {state.display_name(mapping.hero_name)} "
            f"({mapping.confidence:.2f}){lock}"
        )
    for hero in state.unmapped_heroes():
        print(f"  {hero.display_name}: 0 kills (unmapped)")


if __name__ == "__main__":
    main()
