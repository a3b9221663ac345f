"""Probe a running instance's rate limiter.

Sends repeated explain requests and prints each status so you can see where
HTTP 429 responses begin. Every non-throttled request reaches the provider
unless it is cached, so point it at a test deployment.

Usage:
    python scripts/check_rate_limit.py --url http://localhost:3001 --requests 35
"""

from __future__ import annotations

import argparse
import sys

import httpx


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--url", default="http://localhost:3001", help="Base URL of the API")
    parser.add_argument("--requests", type=int, default=35, help="Number of requests to send")
    parser.add_argument("--word", default="test")
    parser.add_argument("--age", type=int, default=3)
    parser.add_argument("--language", default="English")
    parser.add_argument("--timeout", type=float, default=30.0, help="Per-request timeout in seconds")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    """Send the requests and return how many were throttled."""
    payload = {"word": args.word, "age": args.age, "language": args.language}
    throttled = 0

    with httpx.Client(base_url=args.url, timeout=args.timeout) as client:
        for i in range(1, args.requests + 1):
            try:
                response = client.post("/api/explain", json=payload)
            except httpx.HTTPError as exc:
                print(f"Request {i}: Error - {exc}")
                continue

            if response.status_code == 429:
                throttled += 1
            print(f"Request {i}: {response.status_code} - {response.text}")

    print(f"{throttled}/{args.requests} requests throttled")
    return throttled


def main(argv: list[str] | None = None) -> int:
    run(parse_args(argv))
    return 0


if __name__ == "__main__":
    sys.exit(main())
