"""CLI entry point: python -m cookiecore.mcp [save_path]"""

from __future__ import annotations

import logging
import os
import sys


def main() -> None:
    if len(sys.argv) > 2:
        print("Usage: python -m cookiecore.mcp [save_path]", file=sys.stderr)
        print("Example: python -m cookiecore.mcp ~/.cookiecore/save.json", file=sys.stderr)
        sys.exit(1)

    # stdout carries the protocol; diagnostics go to stderr
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    from cookiecore.catalog import define_game
    from cookiecore.mcp.server import create_server
    from cookiecore.persistence import FileStorage

    storage = FileStorage(os.path.expanduser(sys.argv[1])) if len(sys.argv) == 2 else None
    server = create_server(define_game(), storage=storage)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
