"""CLI entrypoints for docsite commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .api.render_markdown import generate_api_markdown
from .config import ConfigError, load_config
from .extract import ExtractionError, ingest_package, parse_doc_output
from .logging import configure_logging
from .site import SiteBuilder
from .stores.package_store import PackageDataError, PackageNotFoundError, PackageStore


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root or .docsite.yml path (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Build cross-linked API documentation from extracted deno doc data.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Render API pages, narrative docs and llms.txt.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output directory (defaults to output_dir from config, then dist/).",
    )

    markdown_parser = subparsers.add_parser(
        "markdown",
        help="Print the markdown documentation of one package.",
    )
    _add_verbose_option(markdown_parser, suppress_default=True)
    markdown_parser.add_argument("package", help="Package name as listed in index.json.")
    _add_path_argument(markdown_parser)

    ingest_parser = subparsers.add_parser(
        "ingest",
        help="Store deno doc output for a package and refresh index.json.",
    )
    _add_verbose_option(ingest_parser, suppress_default=True)
    ingest_parser.add_argument("name", help="Package name used for file names and URLs.")
    ingest_parser.add_argument("specifier", help="Display specifier, e.g. @scope/pkg.")
    ingest_parser.add_argument("version", help="Package version.")
    ingest_parser.add_argument(
        "--from-json",
        type=Path,
        default=None,
        help="Read existing `deno doc --json` output instead of running deno.",
    )
    _add_path_argument(ingest_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.path))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "build":
        try:
            result = SiteBuilder(config).build(args.out)
        except (PackageDataError, OSError) as exc:
            parser.exit(1, f"docsite build failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Site built at {_relativize(result.output_dir)} ({len(result.files)} files)")
    elif args.command == "markdown":
        store = PackageStore(config.data_dir, exclude=config.api.exclude_packages)
        try:
            package = store.require_package(args.package)
            text = generate_api_markdown(
                package,
                base_url=config.site.base_url,
                type_index=store.type_index(),
            )
        except PackageNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except PackageDataError as exc:
            parser.exit(1, f"docsite markdown failed: {exc}\nRun with --verbose for more details.\n")
        sys.stdout.write(text)
    elif args.command == "ingest":
        try:
            nodes = None
            if args.from_json is not None:
                nodes = parse_doc_output(args.from_json.read_text(encoding="utf-8"))
            info = ingest_package(config.data_dir, args.name, args.specifier, args.version, nodes=nodes)
        except (ExtractionError, OSError) as exc:
            parser.exit(1, f"docsite ingest failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Ingested {info.specifier}@{info.version} ({info.export_count} exports)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
