from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

DEFAULT_SLOT_WINDOW = 100


@dataclass
class SessionWindow:
    """
    Bounds a run to ``limit`` slots past the first observed one.

    Unarmed until the first slot is observed, then armed with that slot for
    the rest of the run. Slots are non-decreasing but may repeat or skip.
    """

    limit: int = DEFAULT_SLOT_WINDOW
    initial_slot: int | None = None

    @property
    def armed(self) -> bool:
        return self.initial_slot is not None

    def observe(self, slot: int) -> bool:
        """Record ``slot``; True once it is ``limit`` or more slots past the initial one."""
        if self.initial_slot is None:
            self.initial_slot = slot
            logger.info("Initial slot: {}", slot)
            return False
        diff = slot - self.initial_slot
        logger.debug("Slot {} ({} past initial)", slot, diff)
        if diff >= self.limit:
            logger.info("Reached {} slot window at slot {}", self.limit, slot)
            return True
        return False
