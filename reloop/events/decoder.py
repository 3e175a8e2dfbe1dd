"""
Decoding raw logs into event names and arguments.
"""

import logging
from typing import Any, Dict, List, Tuple
from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import event_abi_to_log_topic
from hexbytes import HexBytes

from reloop.utils import to_hex

logger = logging.getLogger(__name__)


class EventDecoder:
    """
    Decodes raw logs (as returned by ``eth_getLogs``) using event ABIs.

    Logs are matched by the first topic (event signature hash) and by the
    number of indexed arguments. Logs that don't match any ABI are skipped.

    Args:
        abis: Event ABIs
    """

    _by_topic: Dict[str, Dict[str, Any]]

    def __init__(self, abis: List[Dict[str, Any]]):
        self._by_topic = {}
        for abi in abis:
            if abi["type"] != "event":
                continue
            self._by_topic[to_hex(event_abi_to_log_topic(abi))] = abi

    def decode(self, log: Dict[str, Any]) -> Tuple[str, Dict[str, Any]] | None:
        """
        Decode a raw log.

        Args:
            log: Raw log with ``topics`` and ``data``

        Returns:
            ``(event_name, args)`` tuple, ``None`` if the log is not recognized
        """
        topics = [to_hex(t) for t in log["topics"]]
        if len(topics) == 0:
            return None
        abi = self._by_topic.get(topics[0])
        if abi is None:
            return None

        indexed = [i for i in abi["inputs"] if i["indexed"]]
        plain = [i for i in abi["inputs"] if not i["indexed"]]
        if len(indexed) != len(topics) - 1:
            # Same signature, different indexing (e.g. ERC20 Transfer)
            logger.debug("Skipping %s log with %d topics", abi["name"], len(topics))
            return None

        args = {}
        try:
            for inp, topic in zip(indexed, topics[1:]):
                args[inp["name"]] = decode([inp["type"]], HexBytes(topic))[0]
            values = decode([i["type"] for i in plain], HexBytes(log["data"]))
        except DecodingError as e:
            logger.warning("Could not decode %s log: %s", abi["name"], e)
            return None
        for inp, value in zip(plain, values):
            args[inp["name"]] = value
        return abi["name"], {k: _plain(v) for k, v in args.items()}


def _plain(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    return value
