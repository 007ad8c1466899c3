"""Entry point for trellis CLI."""

import logging
import sys

from trellis.cli import build_parser
from trellis.config import Settings


def setup_logging(verbose: bool, tui: bool = False) -> None:
    """Log to stderr, or to the Textual devtools console while the TUI owns the terminal."""
    handlers = None
    if tui:
        from textual.logging import TextualHandler

        handlers = [TextualHandler()]
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=handlers,
    )


def main():
    parser = build_parser()
    args = parser.parse_args()

    # No noun = TUI mode
    if args.noun is None:
        from trellis.ui import TrellisApp

        setup_logging(args.verbose, tui=True)
        app = TrellisApp(Settings.from_args(args))
        app.run()
        return

    setup_logging(args.verbose)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
