"""Local task id generation: prefix + bounded random integer, re-rolled on collision."""

import logging
import random
from typing import Container, Optional

logger = logging.getLogger("taskboard.ids")

ID_PREFIX = "T"
ID_SPACE = 100000
MAX_ROLLS = 64


def generate_task_id(taken: Container[str], rng: Optional[random.Random] = None) -> str:
    """
    Return an id not contained in ``taken``.

    ``taken`` should hold every live id plus any id retired by a purge,
    so ids are never handed to a second task. If the random space looks
    saturated the range is widened instead of looping forever.
    """
    rand = rng or random
    upper = ID_SPACE
    while True:
        for _ in range(MAX_ROLLS):
            candidate = f"{ID_PREFIX}{rand.randrange(upper)}"
            if candidate not in taken:
                return candidate
            logger.debug(f"Id collision on {candidate}, re-rolling")
        upper *= 10
        logger.warning(f"⚠️ {MAX_ROLLS} id collisions in a row, widening id range to {upper}")
