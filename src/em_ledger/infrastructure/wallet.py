"""File-system identity wallet.

Layout matches the Fabric SDK wallets, one JSON file per identity:

    <wallet_path>/<label>.id
    {
        "credentials": {"certificate": "-----BEGIN...", "privateKey": "-----BEGIN..."},
        "mspId": "Org1MSP",
        "type": "X.509",
        "version": 1
    }
"""

import asyncio
import json
import logging
from pathlib import Path

from src.em_ledger.domain.models import Identity

logger = logging.getLogger("em.ledger")


class FileSystemWallet:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _file_for(self, label: str) -> Path:
        return self._path / f"{label}.id"

    async def get(self, label: str) -> Identity | None:
        """Load an identity by label, or None if it is absent or unreadable."""
        return await asyncio.to_thread(self._read, label)

    def _read(self, label: str) -> Identity | None:
        file = self._file_for(label)
        if not file.is_file():
            return None
        try:
            data = json.loads(file.read_text(encoding="utf-8"))
            credentials = data["credentials"]
            return Identity(
                label=label,
                msp_id=data["mspId"],
                certificate=credentials["certificate"],
                private_key=credentials["privateKey"],
                type=data.get("type", "X.509"),
            )
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Wallet entry %s is unreadable: %s", file, exc)
            return None

    async def put(self, identity: Identity) -> None:
        """Store an identity (used by enrolment tooling and tests)."""
        await asyncio.to_thread(self._write, identity)

    def _write(self, identity: Identity) -> None:
        self._path.mkdir(parents=True, exist_ok=True)
        payload = {
            "credentials": {
                "certificate": identity.certificate,
                "privateKey": identity.private_key,
            },
            "mspId": identity.msp_id,
            "type": identity.type,
            "version": 1,
        }
        self._file_for(identity.label).write_text(json.dumps(payload), encoding="utf-8")
