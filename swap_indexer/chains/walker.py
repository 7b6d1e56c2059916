from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from swap_indexer.chains.accounts import ProgramFilter, ResolveError, program_id_of, resolve_instruction
from swap_indexer.decoders.base import DecoderAdapter
from swap_indexer.decoders.raydium_amm_v4 import SwapBaseIn
from swap_indexer.sinks import DecodedEvent, EventSink


@dataclass
class TransactionWalker:
    program_filter: ProgramFilter
    adapter: DecoderAdapter
    sink: EventSink | None = None

    def walk(self, message, signature: str, slot: int) -> list[DecodedEvent]:
        """
        Decode every instruction of ``message`` in order and hand each swap
        base-in event to the sink as soon as it is decoded. An instruction that
        fails to resolve is skipped; its siblings are still processed.
        """
        account_keys = list(message.account_keys)
        header = message.header
        events: list[DecodedEvent] = []
        for idx, cix in enumerate(message.instructions):
            try:
                program_id = program_id_of(account_keys, cix)
                if not self.program_filter.accepts(program_id):
                    continue
                ix = resolve_instruction(account_keys, header, cix)
            except ResolveError as e:
                logger.warning("Skipping instruction {} of {}: {}", idx, signature, e)
                continue

            variant = self.adapter.decode(ix)
            if not isinstance(variant, SwapBaseIn):
                continue

            event = DecodedEvent(
                signature=signature,
                slot=slot,
                amount_in=variant.amount_in,
                minimum_amount_out=variant.minimum_amount_out,
            )
            logger.info(
                "[SwapBaseIn] signature={} amount_in={} min_out={} slot={}",
                signature,
                event.amount_in,
                event.minimum_amount_out,
                slot,
            )
            if self.sink is not None:
                self.sink.save(event)
            events.append(event)
        return events
