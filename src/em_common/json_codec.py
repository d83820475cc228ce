"""Decoding of raw ledger payloads."""

import json
from typing import Any

from src.em_common.errors import LedgerResponseError


def decode_ledger_json(tx_name: str, payload: bytes) -> Any:
    """Decode a ledger evaluate() payload as JSON.

    An empty payload decodes to None (the contract returned nothing).
    """
    text = payload.decode("utf-8", errors="replace").strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise LedgerResponseError(tx_name, f"invalid JSON ({exc.msg})") from None
