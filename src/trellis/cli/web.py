"""Handler for 'trellis web' command."""

import shutil
import sys

from textual_serve.server import Server


def web(args) -> int:
    """Serve the editor TUI in a browser."""
    trellis = shutil.which("trellis")
    if trellis is None:
        print("error: trellis not found on PATH", file=sys.stderr)
        return 1

    command = f"{trellis} --board-file {args.board_file} --tree-file {args.tree_file}"
    server = Server(command, host=args.host, port=args.port, title="trellis")

    print(f"serving trellis at http://{args.host}:{args.port}")
    server.serve()
    return 0
