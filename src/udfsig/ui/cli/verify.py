"""
Container verification and inspection commands.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ...api import inspect_container
from ...config import get_limits
from ...errors import UdfSigError
from ..helpers import format_result_lines, format_size_kb, status_label
from ..workflows import summarize, verify_paths

if TYPE_CHECKING:
    import argparse


def cmd_verify(args: argparse.Namespace) -> None:
    """Verify one or more UDF containers and exit with the batch status."""
    limits = get_limits()
    jobs = max(1, getattr(args, "jobs", 1) or 1)
    verifications = verify_paths(args.files, limits, max_workers=jobs)

    for item in verifications:
        if args.json:
            print(json.dumps({"file": str(item.path), **item.result.to_dict()}, ensure_ascii=False))
            continue
        print(f"{item.path.name}:")
        for line in format_result_lines(item.result):
            print(f"  {line}")

    summary = summarize(verifications)
    if not args.json:
        print()
        if summary.total == 1:
            print(f"  RESULT: {status_label(verifications[0].result.status)}")
        else:
            print(
                f"  RESULT: {summary.valid_count} valid, {summary.invalid_count} invalid, "
                f"{summary.indeterminate_count} indeterminate, "
                f"{summary.unsigned_count} unsigned (of {summary.total})"
            )
    if summary.exit_code:
        sys.exit(summary.exit_code)


def cmd_info(args: argparse.Namespace) -> None:
    """Show which entries a container holds and the detected signature format."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: {path} not found", file=sys.stderr)
        sys.exit(1)

    try:
        with path.open("rb") as fh:
            info = inspect_container(fh, limits=get_limits())
    except (UdfSigError, OSError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Container: {path.name}")
    content_size = info["content_size"]
    signature_size = info["signature_size"]
    print(
        "  content.xml: "
        + (format_size_kb(content_size) if content_size is not None else "missing")
    )
    print(
        "  sign.sgn:    "
        + (format_size_kb(signature_size) if signature_size is not None else "missing")
    )
    fmt = info["signature_format"]
    print(f"  Format:      {fmt.name if fmt is not None else 'unsigned'}")
