# patch_abis.py
"""
Post-`forge build` step: mark simulation-only functions as view in out/.

Run from the contracts root after compiling:

    forge build && python patch_abis.py

Every target in the manifest is attempted. Missing functions are only
reported; read/parse/write failures make the process exit non-zero once
the rest of the manifest has been processed.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from config import LOG_LEVEL, PATCH_TARGETS, artifact_path
from chain.abi_patch import PatchResult, PatchStatus, patch_abi

logger = logging.getLogger(__name__)


class PatchTarget(BaseModel):
    path: Path
    function: str = Field(min_length=1)

    @classmethod
    def for_contract(cls, contract: str, function: str) -> "PatchTarget":
        return cls(path=artifact_path(contract), function=function)


class BatchReport(BaseModel):
    results: List[PatchResult] = Field(default_factory=list)

    @property
    def failed(self) -> List[PatchResult]:
        return [r for r in self.results if r.status == PatchStatus.FAILED]

    @property
    def missing(self) -> List[PatchResult]:
        return [r for r in self.results if r.status == PatchStatus.NOT_FOUND]

    @property
    def ok(self) -> bool:
        return not self.failed


def default_targets() -> List[PatchTarget]:
    return [PatchTarget.for_contract(c, fn) for c, fn in PATCH_TARGETS]


def run_patches(targets: Optional[Iterable[PatchTarget]] = None) -> BatchReport:
    """Patch each target in order; one failure doesn't stop the rest."""
    if targets is None:
        targets = default_targets()

    report = BatchReport()
    for target in targets:
        try:
            result = patch_abi(target.path, target.function)
        except Exception as e:
            logger.exception("Failed to patch %s in %s", target.function, target.path)
            result = PatchResult(
                path=target.path,
                function=target.function,
                status=PatchStatus.FAILED,
                error=f"{type(e).__name__}: {e}",
            )
        report.results.append(result)
    return report


def main() -> int:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    report = run_patches()
    patched = len(report.results) - len(report.failed) - len(report.missing)
    logger.info(
        "ABI patch: %d patched, %d not found, %d failed",
        patched, len(report.missing), len(report.failed),
    )
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
