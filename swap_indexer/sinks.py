from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loguru import logger
from sqlalchemy.orm import sessionmaker

from swap_indexer.config import AppSettings
from swap_indexer.db import SwapEvent, make_session_factory, session_scope


@dataclass(frozen=True)
class DecodedEvent:
    signature: str
    slot: int
    amount_in: int
    minimum_amount_out: int

    def to_record(self) -> dict:
        return {
            "transaction_signature": self.signature,
            "slot": self.slot,
            "amount_in": self.amount_in,
            "min_amount_out": self.minimum_amount_out,
        }


class EventSink(Protocol):
    def save(self, event: DecodedEvent) -> None: ...


@dataclass
class JsonLinesSink:
    """Appends one JSON object per line. Open and write errors propagate."""

    path: Path

    def save(self, event: DecodedEvent) -> None:
        line = json.dumps(event.to_record())
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.info("Saved swap event {} to {}", event.signature, self.path)


@dataclass
class DatabaseSink:
    SessionFactory: sessionmaker

    def save(self, event: DecodedEvent) -> None:
        with session_scope(self.SessionFactory) as s:
            s.add(
                SwapEvent(
                    transaction_signature=event.signature,
                    slot=event.slot,
                    amount_in=str(event.amount_in),
                    min_amount_out=str(event.minimum_amount_out),
                )
            )
        logger.info("Saved swap event {} to database", event.signature)


def make_sink(settings: AppSettings) -> EventSink:
    if settings.sink == "database":
        return DatabaseSink(SessionFactory=make_session_factory(settings.database_url))
    return JsonLinesSink(path=Path(settings.events_path))
