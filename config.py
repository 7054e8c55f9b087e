from dotenv import load_dotenv
from pathlib import Path
import os

load_dotenv()

# ------------------------------------------------------------
# Build output (Foundry artifacts)
# ------------------------------------------------------------
FOUNDRY_OUT = Path(os.getenv("FOUNDRY_OUT", "out"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def artifact_path(contract_name: str) -> Path:
    """out/<Name>.sol/<Name>.json"""
    return FOUNDRY_OUT / f"{contract_name}.sol" / f"{contract_name}.json"


# ------------------------------------------------------------
# Patch manifest
# ------------------------------------------------------------
# Functions declared non-view in Solidity but only ever called through
# eth_call as simulations. Bindings generated from the patched ABI expose
# them as calls instead of transactions.
PATCH_TARGETS = (
    ("Endorser", "isOperationReady"),
    ("OperationValidator", "simulateOperation"),
)
