import argparse
import os
import sys
from pathlib import Path

from phpcity.config import DEFAULT_MAX_WORKERS, DEFAULT_OUTPUT_DIR
from phpcity.errors import PHPCityError
from phpcity.services import analysis, output
from phpcity.services.hierarchy import build_hierarchy
from phpcity.services.layout import compute_layout


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phpcity",
        description="Extract PHP class metrics and lay them out as a city.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Parse a PHP project and write its class records as JSON.",
    )
    run_parser.add_argument("project_dir", help="Path to the PHP project to parse.")
    run_parser.add_argument(
        "output_dir",
        nargs="?",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory for the JSON file (default: {DEFAULT_OUTPUT_DIR}).",
    )
    run_parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Parallel parser processes; 1 parses in-process (default: {DEFAULT_MAX_WORKERS}).",
    )
    run_parser.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Also parse files matched by .gitignore rules.",
    )
    run_parser.add_argument(
        "--all-types",
        action="store_true",
        help="Emit one record per declared type instead of one per file.",
    )

    layout_parser = subparsers.add_parser(
        "layout",
        help="Compute the city layout of a JSON record file.",
    )
    layout_parser.add_argument("records_file", help="JSON file written by `phpcity run`.")
    layout_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the layout to this file instead of stdout.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the HTTP API for renderers.",
    )
    serve_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project to analyze by default (default: current directory).",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind the server to (default: 127.0.0.1).",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000).",
    )
    serve_parser.add_argument(
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help="Directory holding previously written record files.",
    )

    return parser


def _print_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr, flush=True)


def run_project(args: argparse.Namespace) -> int:
    project_dir = args.project_dir
    if not os.path.isdir(project_dir):
        _print_error(f"Directory '{project_dir}' does not exist or is not accessible.")
        return 1

    records = analysis.scan_project(
        project_dir,
        max_workers=args.workers,
        respect_gitignore=not args.no_gitignore,
        all_types=args.all_types,
    )

    if not records:
        print("No PHP classes found in the specified directory.")
        return 0

    project_name = Path(project_dir).resolve().name
    output_path = output.write_records_json(records, project_name, args.output_dir)

    summary = analysis.summarize(records)
    print(f"Successfully parsed {summary.total} classes.")
    print(f"JSON file generated: {output_path}")
    print("\nSummary:")
    print(f"  Classes: {summary.classes}")
    print(f"  Interfaces: {summary.interfaces}")
    print(f"  Abstract classes: {summary.abstract_classes}")
    print(f"  Traits: {summary.traits}")
    return 0


def layout_project(args: argparse.Namespace) -> int:
    records = output.load_records(args.records_file)
    layout = compute_layout(build_hierarchy(records))

    if args.output:
        path = output.write_layout_json(layout, args.output)
        print(f"✅ Layout written to {path}")
    else:
        print(layout.model_dump_json(indent=2, by_alias=True))
    return 0


def serve(args: argparse.Namespace) -> int:
    import uvicorn
    from phpcity.routers import analysis as analysis_router

    target_path = os.path.abspath(args.path)
    if not os.path.isdir(target_path):
        _print_error(f"Directory '{target_path}' does not exist or is not accessible.")
        return 1

    analysis_router.ROOT_PATH = Path(target_path)
    analysis_router.OUTPUT_DIR = Path(args.output_dir).resolve()
    print(f"📂 Analyzing PHP project at: {target_path}")

    url = f"http://{args.host}:{args.port}"
    print(f"🚀 Starting server at {url}")
    print("   Press Ctrl+C to stop.")

    uvicorn.run(
        "phpcity.main:app",
        host=args.host,
        port=args.port,
        reload=False,
    )
    return 0


COMMANDS = {
    "run": run_project,
    "layout": layout_project,
    "serve": serve,
}


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the CLI.

    Returns the process exit status: 0 on success (including projects without
    any class), 1 on invalid input, unwritable output or any other failure.
    """
    args = _build_parser().parse_args(argv)

    try:
        return COMMANDS[args.command](args)
    except PHPCityError as e:
        _print_error(str(e))
        return 1
    except Exception as e:
        _print_error(f"Unexpected failure: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
