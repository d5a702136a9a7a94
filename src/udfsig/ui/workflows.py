"""Batch verification workflow.

UI-agnostic orchestration: verifies several container files and
summarizes the outcome.

Constraints:
- No stdout/stderr output (no print)
- No sys.exit()
- No argparse imports
- Returns structured results, never raises on business errors
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..api import verify_file
from ..config import DEFAULT_LIMITS
from .helpers import status_tone

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..config import VerificationLimits
    from ..core.result import VerificationResult

_logger = logging.getLogger(__name__)

# Exit codes for batch verification
EXIT_ALL_VALID = 0
EXIT_INVALID = 1
EXIT_INDETERMINATE = 2
EXIT_UNSIGNED = 3


@dataclass(frozen=True, slots=True)
class FileVerification:
    """Verification outcome for one container file."""

    path: Path
    result: VerificationResult


@dataclass(frozen=True, slots=True)
class BatchSummary:
    """Counts per display tone across a batch."""

    total: int
    valid_count: int
    invalid_count: int
    indeterminate_count: int
    unsigned_count: int

    @property
    def exit_code(self) -> int:
        """0 all signed files valid, 1 any invalid, 2 any indeterminate, 3 nothing signed."""
        if self.invalid_count:
            return EXIT_INVALID
        if self.indeterminate_count:
            return EXIT_INDETERMINATE
        if not self.valid_count:
            return EXIT_UNSIGNED
        return EXIT_ALL_VALID


def verify_paths(
    paths: Sequence[str | Path],
    limits: VerificationLimits = DEFAULT_LIMITS,
    max_workers: int = 1,
) -> list[FileVerification]:
    """
    Verify container files, optionally in parallel.

    ``verify`` holds no shared state, so files are verified on independent
    worker threads without coordination.  Results keep the input order.
    """
    resolved = [Path(p) for p in paths]

    def _one(path: Path) -> FileVerification:
        _logger.debug("Verifying %s", path)
        return FileVerification(path=path, result=verify_file(path, limits=limits))

    if max_workers <= 1 or len(resolved) <= 1:
        return [_one(p) for p in resolved]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(_one, resolved))


def summarize(verifications: Sequence[FileVerification]) -> BatchSummary:
    """Count results by display tone."""
    tones = [status_tone(v.result.status) for v in verifications]
    return BatchSummary(
        total=len(tones),
        valid_count=tones.count("valid"),
        invalid_count=tones.count("invalid"),
        indeterminate_count=tones.count("indeterminate"),
        unsigned_count=tones.count("unsigned"),
    )
