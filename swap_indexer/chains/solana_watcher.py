from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger
from solana.rpc.commitment import Commitment
from solana.rpc.websocket_api import connect as ws_connect
from solders.rpc.config import RpcTransactionLogsFilterMentions
from solders.rpc.responses import LogsNotification

from swap_indexer.chains.accounts import ProgramFilter
from swap_indexer.chains.notifications import Notification, notification_from_message, parse_notification
from swap_indexer.chains.rpc import TransactionFetcher
from swap_indexer.chains.session import SessionWindow
from swap_indexer.chains.walker import TransactionWalker
from swap_indexer.config import AppSettings
from swap_indexer.decoders.base import DecoderAdapter
from swap_indexer.decoders.raydium_amm_v4 import RaydiumAmmV4Decoder
from swap_indexer.sinks import make_sink


@dataclass
class SwapWatcher:
    settings: AppSettings
    fetcher: TransactionFetcher
    walker: TransactionWalker
    window: SessionWindow = field(default_factory=SessionWindow)

    @classmethod
    def create(cls, settings: AppSettings) -> SwapWatcher:
        walker = TransactionWalker(
            program_filter=ProgramFilter.from_string(settings.program_id),
            adapter=DecoderAdapter([RaydiumAmmV4Decoder(settings.program_id)]),
            sink=make_sink(settings),
        )
        return cls(
            settings=settings,
            fetcher=TransactionFetcher.create(settings),
            walker=walker,
            window=SessionWindow(limit=settings.slot_window),
        )

    def handle(self, notification: Notification, window: SessionWindow | None = None) -> bool:
        """
        Process one notification end to end. Returns False once the slot window
        is exhausted; the notification that exhausts it is still processed.
        """
        window = window if window is not None else self.window
        terminal = window.observe(notification.slot)
        if notification.failed:
            logger.debug("Transaction {} failed on chain; decoding anyway", notification.signature)
        logger.info("Transaction detected: {} (slot {})", notification.signature, notification.slot)
        tx = self.fetcher.fetch(notification.signature)
        if tx is not None:
            self.walker.walk(tx.message, notification.signature, notification.slot)
        return not terminal

    def handle_raw(self, raw, window: SessionWindow | None = None) -> bool:
        notification = parse_notification(raw)
        if notification is None:
            return True
        return self.handle(notification, window)

    def handle_message(self, msg, window: SessionWindow | None = None) -> bool:
        if isinstance(msg, LogsNotification):
            notification = notification_from_message(msg)
            if notification is None:
                return True
            return self.handle(notification, window)
        if isinstance(msg, (str, bytes, dict)):
            return self.handle_raw(msg, window)
        # subscribe/unsubscribe acks and other responses
        logger.debug("Ignoring {} message", type(msg).__name__)
        return True

    async def run_subscribe(self):
        program = self.settings.program_pubkey()
        logger.info("Connecting to {}", self.settings.sol_ws_url)
        async with ws_connect(self.settings.sol_ws_url) as websocket:
            await websocket.logs_subscribe(
                filter_=RpcTransactionLogsFilterMentions(program),
                commitment=Commitment(self.settings.commitment),
            )
            first_resp = await websocket.recv()
            subscription_id = first_resp[0].result
            logger.info("Subscribed to logs mentioning {} (subscription {})", program, subscription_id)

            running = True
            while running:
                try:
                    msgs = await websocket.recv()
                except Exception as e:
                    logger.exception("Solana subscription error: {}", e)
                    return
                for msg in msgs if isinstance(msgs, list) else [msgs]:
                    if not self.handle_message(msg):
                        running = False
                        break

            try:
                await websocket.logs_unsubscribe(subscription_id)
                logger.info("Unsubscribed from logs (subscription {})", subscription_id)
            except Exception as e:  # noqa: BLE001
                logger.warning("Logs unsubscribe failed: {}", e)
