import asyncio

from loguru import logger

from swap_indexer.chains.solana_watcher import SwapWatcher
from swap_indexer.config import AppSettings


def main():
    settings = AppSettings()
    logger.remove()
    logger.add(lambda m: print(m, end=""), level=settings.log_level)

    watcher = SwapWatcher.create(settings)
    logger.info("Swap watcher: program {} window {} slots", settings.program_id, settings.slot_window)
    asyncio.run(watcher.run_subscribe())


if __name__ == "__main__":
    main()
