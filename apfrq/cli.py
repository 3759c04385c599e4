"""
CLI (Command Line Interface).

    apfrq build [--root DIR] [--out-dir DIR]     generate the JSON indexes
    apfrq serve [--root DIR] [--port N]          serve the site folder over HTTP
    apfrq show <path> [--base-url URL]           print one page of the archive
    apfrq interactive [--base-url URL]           browse the archive in the terminal

Note:
- The browsing loop lives in apfrq/interactive.py
- The build step lives in apfrq/build.py
"""

from __future__ import annotations

import argparse
import functools
import logging
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from apfrq.build import BuildError, build_all
from apfrq.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, MODES, MODE_PATH, SiteConfig, load_tables
from apfrq.site import Site


def _site_config(args: argparse.Namespace) -> SiteConfig:
    return SiteConfig(
        base_url=args.base_url,
        mode=args.mode,
        timeout=args.timeout,
        tables=load_tables(args.tables),
    )


def _cmd_build(args: argparse.Namespace) -> int:
    try:
        build_all(args.root, args.out_dir, questions=not args.no_questions)
    except BuildError as exc:
        print(f"ERROR: {exc}")
        return 1
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    from apfrq.interactive import print_page

    location = (args.path or "").strip()
    if not location:
        print("Please provide a path (e.g. / or /course/ap-biology?view=topic).")
        return 1

    site = Site.from_config(_site_config(args), initial=location)
    page = site.start()
    print_page(page, site.location)
    return 0


def _cmd_interactive(args: argparse.Namespace) -> int:
    from apfrq.interactive import run_interactive

    site = Site.from_config(_site_config(args), initial=args.path or "/")
    run_interactive(site, base_url=args.base_url)
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    root = args.root.resolve()
    if not (root / "data").is_dir():
        print(f"Warning: {root / 'data'} does not exist yet (run `apfrq build`).")

    handler = functools.partial(SimpleHTTPRequestHandler, directory=str(root))
    server = ThreadingHTTPServer((args.host, args.port), handler)
    print(f"Serving {root} at http://{args.host}:{args.port}/ (Ctrl+C to stop)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nStopped.")
    finally:
        server.server_close()
    return 0


def _add_site_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="Where the built site is served")
    p.add_argument("--mode", choices=MODES, default=MODE_PATH, help="Path or hash (#/...) addressing")
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="HTTP timeout in seconds")
    p.add_argument("--tables", type=Path, default=None, help="JSON file with title overrides / home categories")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="apfrq", description="AP FRQ archive tools")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="Build the JSON indexes")
    p_build.add_argument("--root", type=Path, default=Path.cwd(), help="Site root containing courses/ and questions/")
    p_build.add_argument("--out-dir", type=Path, default=None, help="Output folder (default: <root>/data)")
    p_build.add_argument("--no-questions", action="store_true", help="Skip the topic (questions) indexes")

    p_serve = sub.add_parser("serve", help="Serve the site folder over HTTP")
    p_serve.add_argument("--root", type=Path, default=Path.cwd(), help="Site root (contains data/)")
    p_serve.add_argument("--host", type=str, default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    p_show = sub.add_parser("show", help="Print one page of the archive")
    p_show.add_argument("path", type=str, help="Site path, e.g. /course/ap-biology?view=topic")
    _add_site_args(p_show)

    p_inter = sub.add_parser("interactive", help="Browse the archive in the terminal")
    p_inter.add_argument("path", type=str, nargs="?", default="/", help="Start path")
    _add_site_args(p_inter)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "build":
        raise SystemExit(_cmd_build(args))
    if args.command == "serve":
        raise SystemExit(_cmd_serve(args))
    if args.command == "show":
        raise SystemExit(_cmd_show(args))
    if args.command == "interactive":
        raise SystemExit(_cmd_interactive(args))

    raise SystemExit(2)
