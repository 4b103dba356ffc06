from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="newsgate deployment smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:3000"))
    parser.add_argument(
        "--origin",
        default=os.getenv("PUBLIC_APP_URL", "http://localhost:3000"),
        help="Origin header sent with the CORS preflight",
    )
    parser.add_argument("--timeout", type=float, default=30.0)
    parser.add_argument("--retries", type=int, default=3)
    return parser.parse_args(argv)
