from __future__ import annotations

import struct
from types import SimpleNamespace

import pytest
from solders.instruction import CompiledInstruction
from solders.message import MessageHeader
from solders.pubkey import Pubkey

from helpers import RAYDIUM, swap_base_in


@pytest.fixture
def raydium_message():
    """Legacy-style message: payer, signer, pool, vault, raydium program, other program."""
    keys = [Pubkey.new_unique() for _ in range(4)] + [
        Pubkey.from_string(RAYDIUM),
        Pubkey.new_unique(),
    ]
    instructions = [
        CompiledInstruction(5, swap_base_in(1, 1), bytes([0, 1])),  # other program
        CompiledInstruction(4, swap_base_in(500, 450), bytes([0, 2, 3])),
        CompiledInstruction(4, struct.pack("<BQQ", 11, 9, 8), bytes([0, 2])),  # base-out
        CompiledInstruction(4, swap_base_in(700, 600), bytes([1, 3])),
    ]
    return SimpleNamespace(header=MessageHeader(2, 1, 1), account_keys=keys, instructions=instructions)
