from __future__ import annotations

from dataclasses import dataclass

from construct import ConstructError, Int64ul, Int8ul, Struct
from solders.pubkey import Pubkey

from swap_indexer.config import RAYDIUM_AMM_V4_PROGRAM_ID

SWAP_BASE_IN = 9
SWAP_BASE_OUT = 11
SWAP_BASE_IN_V2 = 16
SWAP_BASE_OUT_V2 = 17

TAG = Int8ul

SWAP_BASE_IN_LAYOUT = Struct(
    "amount_in" / Int64ul,
    "minimum_amount_out" / Int64ul,
)

SWAP_BASE_OUT_LAYOUT = Struct(
    "max_amount_in" / Int64ul,
    "amount_out" / Int64ul,
)


@dataclass(frozen=True)
class SwapBaseIn:
    amount_in: int
    minimum_amount_out: int


@dataclass(frozen=True)
class SwapBaseOut:
    max_amount_in: int
    amount_out: int


@dataclass(frozen=True)
class SwapBaseInV2:
    amount_in: int
    minimum_amount_out: int


@dataclass(frozen=True)
class SwapBaseOutV2:
    max_amount_in: int
    amount_out: int


RaydiumAmmV4Instruction = SwapBaseIn | SwapBaseOut | SwapBaseInV2 | SwapBaseOutV2

_VARIANTS = {
    SWAP_BASE_IN: (SWAP_BASE_IN_LAYOUT, SwapBaseIn),
    SWAP_BASE_OUT: (SWAP_BASE_OUT_LAYOUT, SwapBaseOut),
    SWAP_BASE_IN_V2: (SWAP_BASE_IN_LAYOUT, SwapBaseInV2),
    SWAP_BASE_OUT_V2: (SWAP_BASE_OUT_LAYOUT, SwapBaseOutV2),
}


class RaydiumAmmV4Decoder:
    """
    Raydium AMM v4 instruction payloads: a one byte tag followed by
    little-endian u64 arguments. Only the swap variants are decoded; any other
    tag, an empty payload or a truncated one yields None.
    """

    def __init__(self, program_id: str = RAYDIUM_AMM_V4_PROGRAM_ID):
        self.program_id = Pubkey.from_string(program_id)

    def can_handle(self, program_id: Pubkey) -> bool:
        return program_id == self.program_id

    def decode(self, data: bytes) -> RaydiumAmmV4Instruction | None:
        if not data:
            return None
        entry = _VARIANTS.get(TAG.parse(data[:1]))
        if entry is None:
            return None
        layout, cls = entry
        try:
            parsed = layout.parse(data[1:])
        except ConstructError:
            return None
        return cls(**{k: v for k, v in parsed.items() if not k.startswith("_")})
