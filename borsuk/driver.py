import asyncio
import logging
import math
from dataclasses import dataclass
from math import pi
from typing import Awaitable, Callable

import numpy as np

from .config import Configuration
from .emergency_trap import AbortFlag
from .io import Io
from .transport import Transport

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

@dataclass(frozen=True)
class Frame:
    left: int
    right: int
    auto_stop: int = 0

    def to_bytes(self) -> bytes:
        return np.array([self.left, self.right, self.auto_stop], dtype=np.int8).tobytes()

STOP = Frame(0, 0)

def _valid_power(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and Io.POWER_MIN <= value <= Io.POWER_MAX

def check_side(phi: float) -> tuple[bool, float]:
    """Pick the shorter rotation: (clockwise, angle), with angle in [0, pi]."""
    if phi <= pi:
        return False, phi
    return True, 2 * pi - phi

def quarter_turns(phi: float) -> int:
    # halves round up
    return math.floor(2 * phi / pi + 0.5)

class Borsuk:
    """
    Open-loop actuation for the two-wheeled drawing robot.

    Every primitive is a fixed power applied for a fixed time; nothing is read
    back from the robot. Frames are only sent while the abort flag is down.
    """

    def __init__(self, transport: Transport, config: Configuration, abort: AbortFlag, sleep: Sleep = asyncio.sleep) -> None:
        self.transport = transport
        self.config = config
        self.abort = abort
        self.sleep = sleep

    async def send_go(self, left, right):
        logger.debug(f"engines l {left}, r {right}")

        if not (_valid_power(left) and _valid_power(right)):
            logger.debug(f"Ignoring invalid engine powers l {left}, r {right}")
            return
        if self.abort.is_set():
            return

        await self.transport.send(Frame(int(left), int(right)).to_bytes())

    async def send_stop(self):
        await self.send_go(0, 0)

    async def turn_by(self, phi: float):
        """
        Turn by `phi` (radians, [0, 2*pi)) rounded to quarter turns.

        A quarter turn is an arc forward to one side followed by an arc back
        bent the other way, which leaves the pen roughly in place.
        """
        clockwise, dphi = check_side(phi)
        turns = quarter_turns(dphi)
        logger.debug(f"turn cw: {clockwise} by {dphi:.3f} ({turns} quarter turns)")

        value = self.config.turn_power
        duration = self.config.turn_phase_time
        if clockwise:
            mul1, mul2 = 2, 1
        else:
            mul1, mul2 = 1, 2

        for _ in range(turns):
            await self.send_go(-mul1 * value, -mul2 * value)
            await self.sleep(duration)
            await self.send_go(mul2 * value, mul1 * value)
            await self.sleep(duration)
        await self.send_stop()

    async def go_forward(self, distance: float):
        value = self.config.forward_power
        duration = self.config.forward_time_per_unit * distance
        logger.debug(f"go forward for {distance:.3f}")

        # negative power drives forward on this chassis
        await self.send_go(-value, -value)
        await self.sleep(duration)
        await self.send_stop()
