from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger
from solders.instruction import Instruction
from solders.pubkey import Pubkey


class InstructionDecoder(Protocol):
    def can_handle(self, program_id: Pubkey) -> bool: ...

    def decode(self, data: bytes) -> Any | None: ...


@dataclass
class DecoderAdapter:
    decoders: list[InstructionDecoder] = field(default_factory=list)

    def register(self, decoder: InstructionDecoder) -> None:
        self.decoders.append(decoder)

    def decode(self, ix: Instruction) -> Any | None:
        """Return the decoded variant of ``ix`` or None when nothing matches."""
        for d in self.decoders:
            if not d.can_handle(ix.program_id):
                continue
            variant = d.decode(bytes(ix.data))
            if variant is None:
                logger.debug("No variant matched for {} ({} bytes)", ix.program_id, len(ix.data))
            return variant
        return None
