import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import ReaderSettings
from .errors import ParseError
from .logging_config import configure_logging
from .reader import lookup, open_reader

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="msereader",
        description="Inspect indentation-structured record documents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a YAML settings file overriding the defaults.",
    )
    parser.add_argument(
        "--ignore-invalid",
        action="store_true",
        help="Skip invalid content without reporting warnings.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_version = sub.add_parser("version", help="Print the format version a document declares.")
    p_version.add_argument("file", type=Path)

    p_get = sub.add_parser("get", help="Print the text stored at a dotted key path.")
    p_get.add_argument("file", type=Path)
    p_get.add_argument("path", help="Dotted path of nested keys, e.g. 'set info.title'.")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(logging.INFO, package_level=logging.DEBUG if args.debug else None)

    settings = ReaderSettings.load(args.settings_path)
    if args.ignore_invalid:
        settings = settings.model_copy(update={"ignore_invalid": True})

    try:
        with open_reader(args.file, settings=settings) as reader:
            if args.command == "version":
                status = " (newer than this application)" if reader.newer_than_app else ""
                print(f"{reader.file_app_version}{status}")
                code = 0
            else:
                value = lookup(reader, args.path)
                if value is None:
                    logger.error("Key path not found: %s", args.path)
                    code = 1
                else:
                    print(value)
                    code = 0
            reader.show_warnings()
    except OSError as e:
        print(f"{args.file}: {e.strerror or e}", file=sys.stderr)
        return 2
    except ParseError as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 2
    return code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
