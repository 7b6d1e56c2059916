from __future__ import annotations

import base64
import binascii
import time
from dataclasses import dataclass

import requests
from loguru import logger
from solders.transaction import VersionedTransaction

from swap_indexer.config import AppSettings


@dataclass
class TransactionFetcher:
    rpc_url: str
    timeout: float = 30.0
    retries: int = 2
    backoff: float = 0.5
    commitment: str = "confirmed"

    @classmethod
    def create(cls, settings: AppSettings) -> TransactionFetcher:
        return cls(
            rpc_url=settings.sol_rpc_url,
            timeout=settings.fetch_timeout_sec,
            retries=max(0, settings.fetch_retries),
            backoff=settings.fetch_backoff_sec,
            commitment=settings.commitment,
        )

    def _get_transaction(self, signature: str) -> dict:
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getTransaction",
            "params": [
                signature,
                {
                    "encoding": "base64",
                    "commitment": self.commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        }
        delay = self.backoff
        attempt = 0
        while True:
            try:
                r = requests.post(self.rpc_url, json=payload, timeout=self.timeout)
                r.raise_for_status()
                return r.json()
            except requests.RequestException as e:
                attempt += 1
                if attempt > self.retries:
                    raise
                logger.warning(
                    "getTransaction {} failed (attempt {}/{}): {}; retrying in {}s",
                    signature,
                    attempt,
                    self.retries + 1,
                    e,
                    delay,
                )
                time.sleep(delay)
                delay *= 2

    def fetch_raw(self, signature: str) -> bytes | None:
        """Wire bytes of the transaction, or None if it is unavailable."""
        try:
            data = self._get_transaction(signature)
        except (requests.RequestException, ValueError) as e:
            logger.warning("getTransaction {} failed: {}", signature, e)
            return None
        res = data.get("result") if isinstance(data, dict) else None
        if not res:
            if isinstance(data, dict) and data.get("error"):
                logger.warning("RPC error for {}: {}", signature, data["error"])
            else:
                logger.info("Transaction not found: {}", signature)
            return None
        if not isinstance(res, dict):
            logger.warning("Unexpected getTransaction result for {}: {!r}", signature, res)
            return None
        tx_field = res.get("transaction") or []
        b64 = tx_field[0] if isinstance(tx_field, list) and tx_field else None
        if not isinstance(b64, str):
            logger.warning("Unexpected transaction encoding for {}: {!r}", signature, tx_field)
            return None
        try:
            return base64.b64decode(b64, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.warning("Invalid base64 transaction for {}: {}", signature, e)
            return None

    def fetch(self, signature: str) -> VersionedTransaction | None:
        raw = self.fetch_raw(signature)
        if raw is None:
            return None
        return decode_transaction(raw, signature)


def decode_transaction(raw: bytes, signature: str = "") -> VersionedTransaction | None:
    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:  # noqa: BLE001
        logger.warning("Unable to deserialize transaction {}: {}", signature, e)
        return None
