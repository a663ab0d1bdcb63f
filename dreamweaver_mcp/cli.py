# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver CLI — record dreams, browse the journal, run the servers.

Usage:
    dreamweaver record "I was flying..."      Analyze and save a dream
    dreamweaver record --emotions 害怕,困惑     Tags-only dream
    dreamweaver list                          Recent dreams
    dreamweaver show <id>                     One dream with its fragments
    dreamweaver delete <id>                   Remove a dream
    dreamweaver stats                         Dashboard numbers
    dreamweaver badges                        Achievement wall
    dreamweaver graph                         Relationship graph as JSON
    dreamweaver export                        Whole journal as JSON
    dreamweaver config --model M              Show or change analysis settings
    dreamweaver serve                         Start MCP server (stdio)
    dreamweaver web --port 5000               Start web API
    dreamweaver --data-dir PATH               Override data directory
"""

import argparse
import logging
import sys
from pathlib import Path


def _setup_cli_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def _serve() -> None:
    """Start the MCP server over stdio."""
    from dreamweaver_mcp._app import configure_logging
    configure_logging()

    from dreamweaver_mcp.server import mcp
    mcp.run()


def _web(host: str, port: int, debug: bool) -> None:
    from interface.web import run_server
    run_server(host=host, port=port, debug=debug)


def _record(args) -> int:
    from journal.draft import DreamDraft
    from journal.journal import get_journal
    from journal.schemas import (
        AnalysisError, AnalysisInProgressError, DreamweaverValidationError,
    )
    from dreamweaver_mcp.tools.dreams import _format_dream, _split_tags

    fields = {
        "text": args.text or "",
        "context": args.context or "",
        "reentry_record": args.reentry or "",
        "characters": _split_tags(args.characters or ""),
        "locations": _split_tags(args.locations or ""),
        "emotions": _split_tags(args.emotions or ""),
    }
    if args.date:
        fields["date"] = args.date

    try:
        dream = get_journal().submit(DreamDraft(**fields))
    except (DreamweaverValidationError, AnalysisInProgressError, AnalysisError) as e:
        print(f"Not recorded: {e}", file=sys.stderr)
        return 1
    print(_format_dream(dream))
    return 0


def _journal_action(action: str, dream_id: str = "", n: int = 10) -> int:
    from dreamweaver_mcp.tools.dreams import dreamweaver_journal
    out = dreamweaver_journal(action=action, dream_id=dream_id, n=n)
    print(out)
    return 1 if out.startswith("Error") else 0


def _insights(view: str, badge_id: str = "") -> int:
    from dreamweaver_mcp.tools.dreams import dreamweaver_insights
    out = dreamweaver_insights(view=view, badge_id=badge_id)
    print(out)
    return 1 if out.startswith("Error") else 0


def _export() -> int:
    from interface.storage import get_store
    from journal.journal import get_journal
    print(get_store().export_json(get_journal().dreams))
    return 0


def _config(args) -> int:
    import json
    from journal import analysis
    from journal.schemas import DreamweaverValidationError

    try:
        analysis.update_config(
            model=args.model,
            api_url=args.api_url,
            api_key_env=args.api_key_env,
            timeout=args.timeout,
            temperature=args.temperature,
        )
    except DreamweaverValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(analysis.status(), indent=2))
    return 0


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        prog="dreamweaver",
        description="Dreamweaver — dream journal with AI fragment analysis",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Override data directory (default: $DREAMWEAVER_DATA_DIR or ~/.dreamweaver/)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")
    parser.add_argument(
        "--version", action="store_true",
        help="Show version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    # record
    record_parser = sub.add_parser("record", help="Analyze and save a dream")
    record_parser.add_argument("text", nargs="?", default="", help="Dream narrative")
    record_parser.add_argument("--characters", help="Comma-separated characters")
    record_parser.add_argument("--locations", help="Comma-separated locations")
    record_parser.add_argument("--emotions", help="Comma-separated emotions")
    record_parser.add_argument("--context", help="Recent life events / mood")
    record_parser.add_argument("--reentry", help="Re-entry / active imagination record")
    record_parser.add_argument("--date", help="YYYY-MM-DD (default: today)")

    # list / show / delete
    list_parser = sub.add_parser("list", help="Recent dreams")
    list_parser.add_argument("-n", type=int, default=10, help="How many to show")
    show_parser = sub.add_parser("show", help="Show one dream")
    show_parser.add_argument("dream_id")
    delete_parser = sub.add_parser("delete", help="Delete a dream")
    delete_parser.add_argument("dream_id")

    # views
    sub.add_parser("stats", help="Emotion/color frequencies and energy trend")
    badges_parser = sub.add_parser("badges", help="Achievement wall")
    badges_parser.add_argument("badge_id", nargs="?", default="", help="Show just this badge")
    sub.add_parser("graph", help="Fragment/entity graph as JSON")
    sub.add_parser("export", help="Whole journal as JSON")

    # analysis settings
    config_parser = sub.add_parser("config", help="Show or change analysis settings")
    config_parser.add_argument("--model", help="Gemini model name")
    config_parser.add_argument("--api-url", help="Gemini API base URL")
    config_parser.add_argument("--api-key-env", help="Env var holding the API key")
    config_parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    config_parser.add_argument("--temperature", type=float, help="Sampling temperature")

    # servers
    sub.add_parser("serve", help="Start MCP server (stdio)")
    web_parser = sub.add_parser("web", help="Start web API")
    web_parser.add_argument("--host", default="127.0.0.1")
    web_parser.add_argument("--port", type=int, default=5000)
    web_parser.add_argument("--debug", action="store_true")

    args = parser.parse_args(argv)

    if args.version:
        from dreamweaver_mcp import __version__
        print(f"dreamweaver {__version__}")
        sys.exit(0)

    if args.data_dir is not None:
        from core.paths import configure
        configure(args.data_dir)

    if args.command == "serve":
        _serve()
        return

    _setup_cli_logging(args.verbose)

    if args.command == "web":
        _web(args.host, args.port, args.debug)
        return

    if args.command == "record":
        sys.exit(_record(args))
    elif args.command == "list":
        sys.exit(_journal_action("list", n=args.n))
    elif args.command in ("show", "delete"):
        sys.exit(_journal_action(args.command, dream_id=args.dream_id))
    elif args.command == "stats":
        sys.exit(_insights("dashboard"))
    elif args.command == "badges":
        sys.exit(_insights("badges", badge_id=args.badge_id))
    elif args.command == "graph":
        sys.exit(_insights("graph"))
    elif args.command == "config":
        sys.exit(_config(args))
    elif args.command == "export":
        sys.exit(_export())
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
