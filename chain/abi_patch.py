# chain/abi_patch.py
"""
Rewrites the declared stateMutability of a function in a build artifact.

Some contract functions revert-or-return and are only meant to be run with
eth_call (simulateOperation, isOperationReady, ...). Solidity can't declare
them view, so the ABI is patched after `forge build` and the generated
bindings treat them as read-only calls.
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel

from .abi import abi_entries, function_selector, read_artifact, write_artifact

logger = logging.getLogger(__name__)

STATE_MUTABILITY = ("pure", "view", "nonpayable", "payable")


class PatchStatus(str, Enum):
    PATCHED = "patched"
    UNCHANGED = "unchanged"  # already had the target value
    NOT_FOUND = "not_found"
    FAILED = "failed"


class PatchResult(BaseModel):
    path: Path
    function: str
    status: PatchStatus
    previous: Optional[str] = None
    selector: Optional[str] = None
    error: Optional[str] = None


def patch_abi(
    path: Union[str, Path],
    function_name: str,
    mutability: str = "view",
) -> PatchResult:
    """
    Set `stateMutability` of the first function named `function_name`.

    Read, parse, or shape errors propagate and the file is not touched.
    A missing function is logged and reported as NOT_FOUND, also without
    touching the file. Otherwise the whole document is written back.
    """
    if not function_name:
        raise ValueError("function_name must be non-empty")
    if mutability not in STATE_MUTABILITY:
        raise ValueError(f"Invalid stateMutability: {mutability!r}")

    path = Path(path)
    document = read_artifact(path)
    abi = abi_entries(document, path)

    matches = [
        e for e in abi
        if e.get("type") == "function" and e.get("name") == function_name
    ]
    if not matches:
        logger.warning("Function %s not found in %s", function_name, path)
        return PatchResult(
            path=path, function=function_name, status=PatchStatus.NOT_FOUND
        )

    # Overloads: only the first declaration is rewritten
    if len(matches) > 1:
        logger.warning(
            "%s: %d functions named %s, leaving %d overload(s) as declared",
            path, len(matches), function_name, len(matches) - 1,
        )

    entry = matches[0]
    previous = entry.get("stateMutability")
    entry["stateMutability"] = mutability

    write_artifact(path, document)

    selector = function_selector(entry)
    status = PatchStatus.UNCHANGED if previous == mutability else PatchStatus.PATCHED
    logger.info(
        "%s: %s [%s] %s -> %s", path, function_name, selector, previous, mutability
    )

    return PatchResult(
        path=path,
        function=function_name,
        status=status,
        previous=previous,
        selector=selector,
    )
