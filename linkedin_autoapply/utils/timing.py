"""Timing utilities"""

import asyncio
import random

from linkedin_autoapply.config import DELAYS


async def human_delay(min_ms=300, max_ms=800):
    """Random human-like delay"""
    await asyncio.sleep(random.uniform(min_ms, max_ms) / 1000)


class Pacer:
    """Randomized pauses between discrete operations.

    `sleep` and `rng` are injectable so tests can run without waiting.
    """

    def __init__(self, sleep=asyncio.sleep, rng=random, delays=None):
        self._sleep = sleep
        self._rng = rng
        self._delays = delays or DELAYS

    async def pause(self, kind):
        min_ms, max_ms = self._delays[kind]
        await self._sleep(self._rng.uniform(min_ms, max_ms) / 1000)
