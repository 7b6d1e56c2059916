from __future__ import annotations

import struct

RAYDIUM = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"


def swap_base_in(amount_in: int, min_out: int) -> bytes:
    return struct.pack("<BQQ", 9, amount_in, min_out)


class ListSink:
    def __init__(self):
        self.events = []

    def save(self, event):
        self.events.append(event)
