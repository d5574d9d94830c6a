"""Lightweight CLI helpers for gptsearch."""
from __future__ import annotations

import argparse
import json
import os
from typing import List, Optional

import httpx


def _headers(args: argparse.Namespace) -> dict[str, str]:
    token = args.token or os.getenv("GPTSEARCH_AUTH_SECRET")
    return {"Authorization": f"Bearer {token}"} if token else {}


def _report_http_error(exc: httpx.HTTPError) -> None:
    print(f"Request failed: {exc}")
    response = getattr(exc, "response", None)
    if response is not None:
        print(f"Response text: {response.text}")


def _command_search(args: argparse.Namespace) -> int:
    api_base = args.api.rstrip("/")
    try:
        with httpx.Client(timeout=args.timeout) as client:
            response = client.get(
                f"{api_base}/search", params={"q": args.query}, headers=_headers(args)
            )
            response.raise_for_status()
            body = response.json()
    except httpx.HTTPError as exc:
        _report_http_error(exc)
        return 1

    if args.json:
        print(json.dumps(body, indent=2, ensure_ascii=False))
        return 0

    print(f"Results ({body.get('date')}):")
    for idx, item in enumerate(body.get("results") or [], start=1):
        print(f"{idx}. {item}")
    links = [link for link in body.get("links") or [] if link]
    if links:
        print("Sources:")
        for link in links:
            print(f"- {link}")
    return 0


def _command_browse(args: argparse.Namespace) -> int:
    api_base = args.api.rstrip("/")
    payload = {"url": args.url, "topic": args.topic}
    try:
        with httpx.Client(timeout=args.timeout) as client:
            response = client.post(f"{api_base}/browse", json=payload, headers=_headers(args))
            response.raise_for_status()
            items = response.json()
    except httpx.HTTPError as exc:
        _report_http_error(exc)
        return 1

    if args.json:
        print(json.dumps(items, indent=2, ensure_ascii=False))
        return 0

    if not items:
        print("No relevant passages found.")
    for idx, item in enumerate(items, start=1):
        print(f"{idx}. {item}")
    return 0


def _command_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from app.config import settings

    uvicorn.run(
        "app.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=False,
    )
    return 0


def _add_client_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--api",
        default="http://localhost:8181",
        help="gptsearch API base URL (default: http://localhost:8181).",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Bearer token (default: $GPTSEARCH_AUTH_SECRET).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="HTTP timeout per request in seconds (default: 120).",
    )
    parser.add_argument("--json", action="store_true", help="Print the raw JSON response.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gptsearch",
        description="Query a gptsearch retrieval API or run the server.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Run query-mode retrieval via /search.")
    search_parser.add_argument("query", help="Search query.")
    _add_client_options(search_parser)
    search_parser.set_defaults(func=_command_search)

    browse_parser = subparsers.add_parser("browse", help="Ingest a page via /browse.")
    browse_parser.add_argument("url", help="Page URL to ingest.")
    browse_parser.add_argument("--topic", "-t", required=True, help="Relevance query for the page.")
    _add_client_options(browse_parser)
    browse_parser.set_defaults(func=_command_browse)

    serve_parser = subparsers.add_parser("serve", help="Run the API server with uvicorn.")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: settings).")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: settings).")
    serve_parser.set_defaults(func=_command_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
