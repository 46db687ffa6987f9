"""Thin CLI entry point: builds a Manifest and calls the engine."""

import argparse
import logging
import sys
from pathlib import Path

from takesync import discover, ffutil
from takesync.engine import process
from takesync.manifest import Manifest, OutputConfig, ScanConfig, load_manifest
from takesync.media import MediaItem


def describe(item: MediaItem) -> str:
    """One-line summary: ``name[duration] ~~~~ start - end``."""
    end = item.end
    return "{}[{}] ~~~~ {} - {}".format(
        item.name,
        item.duration_pretty or "unknown",
        item.start_pretty or "unknown",
        end.strftime("%Y-%m-%d %H:%M:%S") if end is not None else "unknown",
    )


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
    )


def _cmd_scan(args: argparse.Namespace) -> None:
    if args.manifest:
        m = load_manifest(args.manifest)
    elif args.directories:
        m = Manifest(
            directories=args.directories,
            scan=ScanConfig(workers=args.workers, copy_to_tmp=args.copy_to_tmp),
            output=OutputConfig(output_dir=args.output_dir, write_projects=not args.dry_run),
        )
    else:
        print("Error: provide one or more DIRECTORIES or --manifest.", file=sys.stderr)
        sys.exit(1)

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:3.0%}] {stage}")

    result = process(m, on_progress=on_progress if args.progress else None)

    print(f"ffprobe version found: {result.ffprobe_version or 'unknown'}")
    print()
    if not result.groups:
        print("No overlapping video/audio takes found.")
    for g in result.groups:
        print(describe(g.group.video))
        for audio in g.group.audios:
            print(f"    {describe(audio)}")
        if g.project_path:
            print(f"  Project: {g.project_path}")
        print()
    if result.incomplete_items:
        print(f"Takes without a usable timestamp: {len(result.incomplete_items)}")


def _cmd_list(args: argparse.Namespace) -> None:
    ffutil.check_ffprobe()
    print(f"ffprobe version found: {ffutil.ffprobe_version() or 'unknown'}")
    print()
    for item in discover.media_items(args.directories, workers=args.workers):
        print(describe(item))


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="takesync",
        description="TakeSync: match video takes with separately recorded audio and build REAPER projects.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    scan = sub.add_parser("scan", help="Find overlapping takes and write a project per video")
    scan.add_argument("directories", nargs="*", type=Path, help="Directories to search")
    scan.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    scan.add_argument("--output-dir", "-o", type=Path, default=Path("."), help="Where to write .rpp files")
    scan.add_argument("--workers", type=int, default=4, help="Parallel ffprobe processes")
    scan.add_argument("--copy-to-tmp", action="store_true", help="Copy matched media to the temp dir and reference the copies")
    scan.add_argument("--dry-run", action="store_true", help="Report groups without writing project files")
    scan.add_argument("--progress", action="store_true", help="Print pipeline stages")

    lst = sub.add_parser("list", help="Print every media file with its resolved start and end")
    lst.add_argument("directories", nargs="+", type=Path, help="Directories to search")
    lst.add_argument("--workers", type=int, default=4, help="Parallel ffprobe processes")

    serve = sub.add_parser("serve", help="Launch the web API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _setup_logging(args.verbose)

    if args.command == "serve":
        from takesync.web import create_app
        app = create_app()
        print(f"TakeSync web API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    try:
        if args.command == "list":
            _cmd_list(args)
        else:
            _cmd_scan(args)
    except ffutil.FFprobeNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
