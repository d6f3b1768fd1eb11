import sys
import os
import curses
import logging

from config_paths import load_config, setup_logging
from file_type_handler import FileTypeHandler, StorageError
from grid_store import GridStore

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

try:
    from _version import __version__
except Exception:
    __version__ = "0.0.0"


logger = logging.getLogger(__name__)

USAGE = "Usage: {prog} <csv-file>"


def _prog_name() -> str:
    return os.path.basename(sys.argv[0]) or "csvtui"


def main():
    args = sys.argv[1:]

    if "-v" in args or "-V" in args:
        print(__version__)
        return

    if "-h" in args:
        print(
            "csvtui - terminal CSV viewer and editor\n\n"
            + USAGE.format(prog=_prog_name())
            + "\n  csvtui -v\n"
        )
        return

    if len(args) != 1:
        print(USAGE.format(prog=_prog_name()), file=sys.stderr)
        sys.exit(1)

    path = args[0]
    config = load_config()
    try:
        setup_logging(config["LOG_LEVEL"])
    except OSError as e:
        print(f"Warning: Failed to open log file: {e}", file=sys.stderr)

    for warning in config["WARNINGS"]:
        logger.warning("%s", warning)
        print(f"Warning: {warning}", file=sys.stderr)

    handler = FileTypeHandler(path)
    try:
        headers, rows = handler.load()
    except StorageError as e:
        logger.error("Load of %s failed: %s", path, e)
        print(e, file=sys.stderr)
        sys.exit(1)

    store = GridStore.load(headers, rows)

    def curses_main(stdscr):
        return Orchestrator(stdscr, store, handler, config).run()

    messages = curses.wrapper(curses_main)
    for msg, is_error in messages or []:
        print(msg, file=sys.stderr if is_error else sys.stdout)


if __name__ == "__main__":
    main()
