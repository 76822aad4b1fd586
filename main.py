# ABOUTME: Command line interface running the query preprocessing phases on Markdown pages
# ABOUTME: Supports separate markup/script invocations via a disk store, a one-shot build, and classification

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from analysis.classifier import classify_queries
from integration.preprocessor import QueryPreprocessor
from models import PreprocessorSettings
from parsers.queries import PreprocessError, extract_queries

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_preprocessor(args: argparse.Namespace) -> QueryPreprocessor:
    """Create a preprocessor from environment settings and CLI overrides"""
    settings = PreprocessorSettings.from_env(
        component_development_mode=True if args.dev else None,
        store_dir=args.store_dir,
    )
    return QueryPreprocessor(settings)


def write_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        sys.stdout.write(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print(f"   [OK] Written to: {output}")


def run_markup(args: argparse.Namespace) -> int:
    preprocessor = build_preprocessor(args)
    content = args.file.read_text(encoding="utf-8")

    result = preprocessor.markup(content, str(args.file))
    write_output(result.code if result else content, args.output)
    return 0


def run_script(args: argparse.Namespace) -> int:
    preprocessor = build_preprocessor(args)
    if preprocessor.settings.store_dir is None:
        # A fresh in-memory store never holds the markup phase entries
        print(
            "ERROR: The script phase needs --store-dir or QUERYBIND_STORE_DIR "
            "pointing at the store written by the markup phase"
        )
        return 1

    script_content = args.script.read_text(encoding="utf-8") if args.script else ""
    attributes = {"context": args.context} if args.context else {}

    result = preprocessor.script(script_content, str(args.file), attributes)
    write_output(result.code if result else script_content, args.output)
    return 0


def run_build(args: argparse.Namespace) -> int:
    preprocessor = build_preprocessor(args)
    content = args.file.read_text(encoding="utf-8")
    script_content = args.script.read_text(encoding="utf-8") if args.script else ""

    markup, script = preprocessor.process(content, str(args.file), script_content)
    if markup is None or script is None:
        print(
            f"ERROR: {args.file} is not a managed page "
            f"(expected suffix {preprocessor.settings.managed_extension})"
        )
        return 1

    args.output_dir.mkdir(parents=True, exist_ok=True)
    stem = args.file.stem
    write_output(markup.code, args.output_dir / f"{stem}.markup{args.file.suffix}")
    write_output(script.code, args.output_dir / f"{stem}.script.js")
    return 0


def run_classify(args: argparse.Namespace) -> int:
    content = args.file.read_text(encoding="utf-8")
    records = extract_queries(content)
    classified = classify_queries({r.id: r.compiled_query_string for r in records})

    report = classified.model_dump(exclude={"metadata"})
    print(json.dumps(report, indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate reactive query bindings for Markdown pages"
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Enable component development mode",
    )
    parser.add_argument(
        "--store-dir",
        type=Path,
        default=None,
        help="Persist extracted queries here so phases can run separately",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    markup_parser = subparsers.add_parser("markup", help="Run the markup phase")
    markup_parser.add_argument("file", type=Path, help="Markdown page")
    markup_parser.add_argument("--output", type=Path, default=None)
    markup_parser.set_defaults(handler=run_markup)

    script_parser = subparsers.add_parser("script", help="Run the script phase")
    script_parser.add_argument("file", type=Path, help="Markdown page the script belongs to")
    script_parser.add_argument(
        "--script", type=Path, default=None, help="Existing script block content"
    )
    script_parser.add_argument(
        "--context", default=None, help="Script block context attribute (e.g. module)"
    )
    script_parser.add_argument("--output", type=Path, default=None)
    script_parser.set_defaults(handler=run_script)

    build_parser = subparsers.add_parser("build", help="Run both phases on a page")
    build_parser.add_argument("file", type=Path, help="Markdown page")
    build_parser.add_argument(
        "--script", type=Path, default=None, help="Existing script block content"
    )
    build_parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Output directory for results",
    )
    build_parser.set_defaults(handler=run_build)

    classify_parser = subparsers.add_parser(
        "classify", help="Print the dependency classification of a page's queries"
    )
    classify_parser.add_argument("file", type=Path, help="Markdown page")
    classify_parser.set_defaults(handler=run_classify)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.file.exists():
        print(f"ERROR: File not found: {args.file}")
        return 1

    try:
        return int(args.handler(args))
    except ValidationError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1
    except PreprocessError as e:
        logger.exception(f"Preprocessing failed for {args.file}")
        print(f"ERROR: {e}")
        return 1
    except OSError as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
