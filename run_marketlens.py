#!/usr/bin/env python3
"""
MarketLens - Server Runner

Runs the MarketLens MCP server (stdio transport) from a source checkout,
with the project root as the working directory so ./.env and
./data/watchlist.json resolve there.
"""

import subprocess
import sys
from pathlib import Path


def main() -> None:
    """Run the MarketLens MCP server."""
    project_root = Path(__file__).parent

    cmd = [sys.executable, "-m", "marketlens.server"]

    try:
        subprocess.run(cmd, cwd=project_root)
    except KeyboardInterrupt:
        print("\nServer stopped.")
    except Exception as e:
        print(f"Error running server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
