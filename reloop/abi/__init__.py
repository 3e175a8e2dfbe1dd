"""
Contract ABIs bundled with the indexer.

Only the events the indexer consumes and the ``tokenURI`` view
function are included.
"""

import json
import os
from functools import lru_cache
from typing import Any, Dict, List

RWA = "ReLoopRWA"
MARKETPLACE = "ReLoopMarketplace"


@lru_cache(maxsize=None)
def load_abi(name: str) -> List[Dict[str, Any]]:
    """
    Load a bundled ABI by contract name (:data:`RWA` or :data:`MARKETPLACE`)
    """
    current_folder = os.path.realpath(os.path.dirname(__file__))
    with open(f"{current_folder}/{name}.json", "r") as f:
        return json.load(f)


def event_abis() -> List[Dict[str, Any]]:
    """
    Event ABIs of both contracts
    """
    return [
        item
        for name in (RWA, MARKETPLACE)
        for item in load_abi(name)
        if item["type"] == "event"
    ]
