#!/usr/bin/env python3
"""
Start the callboard API server.
"""

import sys
from pathlib import Path

import uvicorn

# Add the project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from callboard.core.config import HOST, PORT, current_env


def main():
    print(f"Starting callboard API ({current_env()})...")
    print(f"Server listens on {PORT}")

    uvicorn.run(
        "callboard.api.main:app",
        host=HOST,
        port=PORT,
    )


if __name__ == "__main__":
    main()
