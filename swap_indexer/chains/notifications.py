from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger
from solders.rpc.responses import LogsNotification


@dataclass(frozen=True)
class Notification:
    slot: int
    signature: str
    failed: bool = False


def parse_notification(raw: str | bytes | dict[str, Any]) -> Notification | None:
    """
    Parse a ``logsNotification`` payload, with or without the JSON-RPC
    ``params`` envelope. Returns None for anything that is not
    a usable notification: invalid JSON, subscription acknowledgements, or a
    payload without a slot or signature.
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Invalid JSON notification: {!r}", raw)
            return None
    else:
        data = raw
    if not isinstance(data, dict):
        logger.warning("Unexpected notification payload: {!r}", data)
        return None

    envelope = data.get("params", data)
    if not isinstance(envelope, dict) or "result" not in envelope:
        # Subscription ack or other RPC response
        logger.debug("Ignoring non-notification message: {}", data)
        return None

    result = envelope.get("result")
    if not isinstance(result, dict):
        logger.debug("Ignoring non-notification message: {}", data)
        return None
    context = result.get("context")
    slot = context.get("slot") if isinstance(context, dict) else None
    if isinstance(slot, bool) or not isinstance(slot, int) or slot < 0:
        logger.warning("Notification without a valid slot: {}", data)
        return None

    value = result.get("value")
    signature = value.get("signature") if isinstance(value, dict) else None
    if not isinstance(signature, str) or not signature:
        logger.warning("Notification at slot {} without a signature; skipping", slot)
        return None

    return Notification(slot=slot, signature=signature, failed=value.get("err") is not None)


def notification_from_message(msg: LogsNotification) -> Notification | None:
    """Build a Notification from a solders ``LogsNotification``."""
    slot = msg.result.context.slot
    signature = str(msg.result.value.signature)
    if not signature:
        logger.warning("Notification at slot {} without a signature; skipping", slot)
        return None
    return Notification(slot=slot, signature=signature, failed=msg.result.value.err is not None)
