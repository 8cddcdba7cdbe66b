#!/usr/bin/env python3
"""
Merge one translation branch into another through the HTTP API.

The script first prints the merge preview. When the preview has no
conflicts the merge is applied straight away; otherwise it stops and lists
the conflicting keys, unless --force is given, in which case every conflict
is resolved with the source branch's translations.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import urllib.error
import urllib.request
from typing import Any, Optional


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Preview and merge a translation branch into another branch.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("source", help="Id of the branch to merge from")
    parser.add_argument("target", help="Id of the branch to merge into")
    parser.add_argument(
        "--base-url",
        default=os.environ.get("LEXIBRANCH_BASE_URL", "http://localhost:8000"),
        help="Base URL of the API",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("LEXIBRANCH_TOKEN"),
        help="Bearer token (defaults to $LEXIBRANCH_TOKEN)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Resolve every conflict with the source branch's translations",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the preview",
    )
    parser.add_argument("--timeout", type=int, default=30, help="HTTP timeout in seconds")
    args = parser.parse_args()
    if not args.token:
        parser.error("--token or LEXIBRANCH_TOKEN is required")
    return args


def request_json(
    method: str,
    url: str,
    token: str,
    *,
    payload: Optional[dict[str, Any]] = None,
    timeout: int = 30,
) -> dict[str, Any]:
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    request = urllib.request.Request(url, data=data, method=method)
    request.add_header("Authorization", f"Bearer {token}")
    if data is not None:
        request.add_header("Content-Type", "application/json")
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return json.loads(response.read().decode("utf-8"))
    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        sys.exit(f"{method} {url} failed with HTTP {exc.code}: {body}")
    except urllib.error.URLError as exc:
        sys.exit(f"{method} {url} failed: {exc.reason}")


def print_preview(preview: dict[str, Any]) -> None:
    print(f"\n=== {preview['source']['name']} -> {preview['target']['name']} ===")
    for title in ("added", "modified", "deleted", "conflicts"):
        entries = preview.get(title) or []
        print(f"{title:<10} {len(entries)}")
        for entry in entries:
            print(f"  - {entry['key']}")


def main() -> int:
    args = parse_args()
    base_url = args.base_url.rstrip("/")

    preview = request_json(
        "GET",
        f"{base_url}/api/branches/{args.source}/merge-preview/{args.target}",
        args.token,
        timeout=args.timeout,
    )
    print_preview(preview)
    if args.dry_run:
        return 0

    conflicts = preview.get("conflicts") or []
    if conflicts and not args.force:
        print(
            f"\n{len(conflicts)} conflict(s) need a resolution; rerun with --force "
            "to take the source side.",
            file=sys.stderr,
        )
        return 1

    result = request_json(
        "POST",
        f"{base_url}/api/branches/{args.source}/merge",
        args.token,
        payload={
            "target_branch_id": args.target,
            "resolutions": [
                {"key": entry["key"], "resolution": "source"} for entry in conflicts
            ],
        },
        timeout=args.timeout,
    )
    if not result.get("success"):
        # Target changed between preview and merge.
        remaining = [entry["key"] for entry in result.get("conflicts") or []]
        print(f"\nMerge aborted, unresolved: {', '.join(remaining)}", file=sys.stderr)
        return 1

    print(f"\nMerged {result['merged']} key(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
