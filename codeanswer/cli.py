"""Lightweight CLI for asking the codeanswer API a question."""
from __future__ import annotations

import argparse
import json
from typing import Any, List, Mapping, Optional

import httpx
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table


def _render_answer(console: Console, body: Mapping[str, Any]) -> None:
    selection = body.get("selection") or {}
    snippets = body.get("snippets") or []

    if snippets:
        top = snippets[0]
        console.print(
            f"[bold]{top.get('repo_name')}[/bold] {top.get('relative_path')} "
            f"(lines {top.get('start_line')}-{top.get('end_line')})"
        )
    console.print(Markdown(selection.get("answer") or ""))

    if len(snippets) > 1:
        table = Table(title="Other matches")
        table.add_column("#", justify="right")
        table.add_column("Repository")
        table.add_column("Path")
        table.add_column("Lines")
        table.add_column("Score", justify="right")
        for idx, snippet in enumerate(snippets[1:], start=1):
            table.add_row(
                str(idx),
                str(snippet.get("repo_name")),
                str(snippet.get("relative_path")),
                f"{snippet.get('start_line')}-{snippet.get('end_line')}",
                f"{float(snippet.get('score') or 0.0):.3f}",
            )
        console.print(table)


def _command_ask(args: argparse.Namespace) -> int:
    console = Console()
    api_base = args.api.rstrip("/")
    params = {"q": args.query, "user_id": args.user_id, "limit": args.limit}

    try:
        with httpx.Client(timeout=args.timeout) as client:
            response = client.get(f"{api_base}/answer", params=params)
            response.raise_for_status()
            body = response.json()
    except httpx.HTTPError as exc:
        console.print(f"Answer request failed: {exc}", markup=False)
        if hasattr(exc, "response") and exc.response is not None:
            try:
                error_detail = exc.response.json()
                console.print(f"Error detail: {error_detail}", markup=False)
            except Exception:
                console.print(f"Response text: {exc.response.text}", markup=False)
        return 1

    if args.json:
        console.print_json(json.dumps(body))
    else:
        _render_answer(console, body)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codeanswer",
        description="Ask natural-language questions against the codeanswer API.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask_parser = subparsers.add_parser("ask", help="Ask a question via /answer.")
    ask_parser.add_argument("query", help="Question, optionally with repo:/lang: filters.")
    ask_parser.add_argument("--user-id", "-u", required=True, help="Caller id echoed in the answer.")
    ask_parser.add_argument(
        "--api",
        default="http://localhost:8000/api/v1",
        help="codeanswer API base URL (default: http://localhost:8000/api/v1).",
    )
    ask_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Result limit forwarded to the API (default: 10).",
    )
    ask_parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="HTTP timeout in seconds (default: 120).",
    )
    ask_parser.add_argument("--json", action="store_true", help="Print the raw JSON response.")
    ask_parser.set_defaults(func=_command_ask)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
