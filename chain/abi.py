# chain/abi.py
"""
Reads and writes contract artifacts produced by `forge build` in out/.

Artifacts are whole JSON documents; the compiler owns every key except the
`abi` entries we patch, so everything is loaded and written back as-is.
"""
from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import List, Dict, Any, Union

from web3 import Web3

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class MalformedAbiError(ValueError):
    """Artifact parsed as JSON but has no usable `abi` list."""


def _reject_constant(name: str):
    # json accepts NaN / Infinity / -Infinity, which aren't JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def read_artifact(path: PathLike) -> Any:
    """
    Read and parse a build artifact.

    Raises:
        FileNotFoundError / OSError if the file can't be read.
        UnicodeDecodeError if it isn't UTF-8.
        json.JSONDecodeError / ValueError if the content isn't valid JSON.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        return json.load(f, parse_constant=_reject_constant)


def abi_entries(document: Any, path: PathLike) -> List[Dict[str, Any]]:
    """Return the document's `abi` list, checking only its shape."""
    if not isinstance(document, dict):
        raise MalformedAbiError(f"Artifact is not a JSON object: {path}")
    if "abi" not in document:
        raise MalformedAbiError(f"No 'abi' key in {path}")

    abi = document["abi"]
    if not isinstance(abi, list):
        raise MalformedAbiError(f"'abi' in {path} is not a list")

    for i, entry in enumerate(abi):
        if not isinstance(entry, dict):
            raise MalformedAbiError(f"abi[{i}] in {path} is not an object")
    return abi


def dump_artifact(document: Any) -> str:
    # Same layout forge emits: 2-space indent, no trailing newline.
    return json.dumps(document, indent=2, ensure_ascii=False)


def write_artifact(path: PathLike, document: Any) -> None:
    """
    Replace the artifact with `document`.

    The text is fully serialized and written to a sibling temp file before
    being moved over the original, so a failure leaves the old file intact.
    Symlinks are followed and the file they point to is replaced. The
    directory holding that file must be writable, not just the file.
    """
    path = Path(path).resolve()
    text = dump_artifact(document)

    fd, tmp = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        if path.exists():
            os.chmod(tmp, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp, path)
        logger.debug("Wrote %s (%d chars)", path, len(text))
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


# ------------------------------------------------------------
# Signatures / selectors
# ------------------------------------------------------------

def _canonical_type(param: Any) -> str:
    if not isinstance(param, dict):
        return str(param)
    typ = str(param.get("type", ""))
    if typ.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){typ[len('tuple'):]}"
    return typ


def function_signature(entry: Dict[str, Any]) -> str:
    """e.g. simulateOperation((address,uint256,bytes),bytes32)"""
    args = ",".join(_canonical_type(p) for p in entry.get("inputs") or [])
    return f"{entry.get('name', '')}({args})"


def function_selector(entry: Dict[str, Any]) -> str:
    """First 4 bytes of keccak256(signature), 0x-prefixed."""
    digest = Web3.keccak(text=function_signature(entry))
    return "0x" + bytes(digest[:4]).hex()
