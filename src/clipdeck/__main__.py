import argparse
import logging
import sys
import time

from clipdeck import __version__
from clipdeck.config import LOG_PATH, MonitorSettings
from clipdeck.formats import classify_text, markdown_score
from clipdeck.markdown import markdown_to_html
from clipdeck.redact import is_password_like
from clipdeck.utils import ensure_dirs, entry_preview

logger = logging.getLogger("clipdeck")


def configure_logging(verbose: bool = False) -> None:
    ensure_dirs()

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH),
            logging.StreamHandler(sys.stderr),
        ],
    )


def read_input(path: str | None) -> str:
    """Read text from a file, or from stdin when path is None or "-"."""
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def run_watch(verbose: bool = False) -> int:
    """Monitor the clipboard in the foreground until interrupted."""
    configure_logging(verbose)

    from clipdeck.monitor import ClipboardManager

    manager: ClipboardManager | None = None

    def on_change() -> None:
        entries = manager.entries if manager else []
        if entries:
            logger.info("History: %d entries, newest: %s", len(entries), entry_preview(entries[0]))
        else:
            logger.info("History is empty")

    manager = ClipboardManager(on_change=on_change, settings=MonitorSettings.from_env())
    manager.start_monitoring()
    logger.info("clipdeck v%s watching the clipboard (Ctrl-C to stop)", __version__)
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        manager.close()
    return 0


def run_render(path: str | None) -> int:
    try:
        text = read_input(path)
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 1
    print(markdown_to_html(text))
    return 0


def run_classify(path: str | None) -> int:
    try:
        text = read_input(path)
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 1
    print(f"markdown score: {markdown_score(text)}")
    print(f"category:       {classify_text(text)}")
    print(f"password-like:  {'yes' if is_password_like(text) else 'no'}")
    return 0


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog="clipdeck",
        description="clipdeck - clipboard history engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  watch       Monitor the clipboard in the foreground (default)
  render      Convert markdown from FILE or stdin to HTML
  classify    Show how FILE or stdin would be classified

Examples:
  clipdeck                   # watch the clipboard
  clipdeck render notes.md   # print HTML for a markdown file
  pbpaste | clipdeck classify
""",
    )
    parser.add_argument("--version", action="version", version=f"clipdeck {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every capture")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["watch", "render", "classify"],
        default="watch",
        help="Command to run",
    )
    parser.add_argument("file", nargs="?", help="Input file for render/classify (default: stdin)")

    args = parser.parse_args(argv)

    if args.command == "render":
        sys.exit(run_render(args.file))
    elif args.command == "classify":
        sys.exit(run_classify(args.file))
    else:
        sys.exit(run_watch(args.verbose))


if __name__ == "__main__":
    main()
