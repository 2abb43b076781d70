from __future__ import annotations

import argparse
import json
import logging
import sys

import uvicorn

from sqlfinder.detector import analyze_directory
from sqlfinder.errors import DiscoveryError
from sqlfinder.settings import Settings, get_settings


def _settings_from_args(args: argparse.Namespace) -> Settings:
	overrides = {}
	if getattr(args, "workers", None):
		overrides["max_workers"] = args.workers
	if getattr(args, "timeout", None) is not None:
		overrides["parse_timeout_seconds"] = args.timeout
	if getattr(args, "log_level", None):
		overrides["log_level"] = args.log_level
	return get_settings().model_copy(update=overrides)


def cmd_analyze(args: argparse.Namespace) -> int:
	settings = _settings_from_args(args)
	logging.basicConfig(
		level=settings.log_level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
		stream=sys.stderr,
	)
	try:
		results = analyze_directory(args.path, settings=settings, use_tree=not args.no_tree)
	except DiscoveryError as exc:
		print(f"error: {exc}", file=sys.stderr)
		return 2
	print(json.dumps([r.to_wire() for r in results], indent=2))
	return 0


def cmd_serve(args: argparse.Namespace) -> int:
	settings = get_settings()
	uvicorn.run(
		"api:app",
		host=args.host or settings.api_host,
		port=args.port or settings.api_port,
		reload=args.reload,
	)
	return 0


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="sqlfinder")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Find SQL in the Java files under a directory and print JSON")
	pa.add_argument("path", help="Path to the directory to scan")
	pa.add_argument("--workers", type=int, help="Number of worker threads")
	pa.add_argument("--timeout", type=float, help="Per-file parse timeout in seconds (0 disables)")
	pa.add_argument("--no-tree", action="store_true", help="Use the line scanner for every file")
	pa.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
	pa.set_defaults(func=cmd_analyze)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host")
	ps.add_argument("--port", type=int)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)
	return parser


def main(argv=None) -> None:
	args = build_parser().parse_args(argv)
	sys.exit(args.func(args))


if __name__ == "__main__":
	main()
