#!/usr/bin/env python3
"""Start prefix-list-monitor with environment file selection.

Default: uses .env (development).
Use ENV_FILE=.env.production for production.

Usage:
    python scripts/start.py                          # dev (.env), long-running
    python scripts/start.py --once                   # single check, exit code = outcome
    python scripts/start.py --env .env.production    # prod via flag
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path


def main() -> int:
    parser = argparse.ArgumentParser(description="Start prefix-list-monitor")
    parser.add_argument(
        "--env",
        default=os.getenv("ENV_FILE", ".env"),
        help="Environment file path (default: .env)",
    )
    parser.add_argument("--once", action="store_true", help="Run one check and exit")
    args, passthrough = parser.parse_known_args()

    project_root = Path(__file__).resolve().parent.parent
    os.environ["ENV_FILE"] = args.env

    cmd = ["poetry", "run", "prefix-list-monitor"] + passthrough
    if args.once:
        cmd.append("--once")
    return subprocess.run(cmd, cwd=project_root).returncode


if __name__ == "__main__":
    sys.exit(main())
