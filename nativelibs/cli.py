"""CLI entrypoints for nativelibs commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .errors import ConfigurationError, InternalConsistencyError
from .logging import configure_logging
from .metadata import write_metadata, build_manifest
from .orchestrator import CopyNativeLibraries
from .steps import SymlinkFile, execute_step


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # Subcommands suppress defaults so flags given before the command survive.
    verbose_default: object = argparse.SUPPRESS if suppress_default else False
    log_file_default: object = argparse.SUPPRESS if suppress_default else None
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=verbose_default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        default=log_file_default,
        help="Also write log records to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nativelibs",
        description="Assemble native library trees and their content manifests.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Assemble libs/, assetLibs/ and metadata.txt from a build definition.",
    )
    _add_logging_options(build_parser, suppress_default=True)
    build_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to .nativelibs.yml or its directory (defaults to current directory).",
    )
    build_parser.add_argument(
        "--output-root",
        default=None,
        help="Override the output root declared in the build definition.",
    )

    metadata_parser = subparsers.add_parser(
        "metadata",
        help="Hash every file under a directory in metadata.txt format.",
    )
    _add_logging_options(metadata_parser, suppress_default=True)
    metadata_parser.add_argument("directory", help="Directory to hash.")
    metadata_parser.add_argument(
        "--output",
        default=None,
        help="Write the manifest to this file instead of stdout.",
    )

    link_parser = subparsers.add_parser(
        "link",
        help="Create or replace a symlink pointing at an existing file.",
    )
    _add_logging_options(link_parser, suppress_default=True)
    link_parser.add_argument("existing", help="File the link should point at.")
    link_parser.add_argument("desired", help="Where the link should be created.")
    link_parser.add_argument(
        "--root",
        default=".",
        help="Directory relative paths are resolved against (defaults to current directory).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for nativelibs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "build":
        try:
            config = load_config(Path(args.path))
            if args.output_root:
                config.output_root = Path(args.output_root).expanduser().resolve()
            outputs = CopyNativeLibraries.from_config(config).run()
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigurationError as exc:
            parser.exit(1, f"Invalid build definition: {exc}\n")
        except InternalConsistencyError as exc:  # pragma: no cover - caller bug
            parser.exit(1, f"nativelibs build failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"nativelibs build failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Native libraries assembled; metadata at {_relativize(outputs.metadata_path)}")
    elif args.command == "metadata":
        directory = Path(args.directory)
        if not directory.is_dir():
            parser.exit(1, f"Not a directory: {directory}\n")
        if args.output:
            entries = write_metadata(directory, Path(args.output))
            print(f"Wrote {len(entries)} entries to {args.output}")
        else:
            for entry in build_manifest(directory):
                print(entry.to_line())
    elif args.command == "link":
        step = SymlinkFile(
            root=Path(args.root).expanduser().resolve(),
            existing_file=Path(args.existing),
            desired_link=Path(args.desired),
        )
        try:
            execute_step(step)
        except OSError as exc:
            parser.exit(1, f"nativelibs link failed: {exc}\n")
        print(step.describe())
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
