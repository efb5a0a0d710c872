import asyncio
import logging
from enum import Enum

from .config import Configuration
from .drawing import Command, DrawingState
from .driver import Borsuk, Sleep
from .emergency_trap import AbortFlag, DrawingAborted
from .transport import Transport

logger = logging.getLogger(__name__)

class RunOutcome(Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

class Session:
    """Everything one drawing run owns: the transport, the abort flag and the robot driving them."""

    def __init__(self, transport: Transport, config: Configuration, sleep: Sleep = asyncio.sleep) -> None:
        self.transport = transport
        self.config = config
        self.sleep = sleep
        self.abort = AbortFlag()
        self.robot = Borsuk(transport, config, self.abort, sleep)

    @property
    def aborted(self) -> bool:
        return self.abort.is_set()

    async def stop(self):
        """Stop the motors and cancel the run at the next command boundary."""
        await self.robot.send_stop()
        self.abort.set()

async def run(commands: list[Command], session: Session) -> RunOutcome:
    state = DrawingState()
    try:
        for index, command in enumerate(commands):
            session.abort.trap()
            logger.info(f"Command {index + 1}/{len(commands)}: {command}")
            await state.perform(command, session.robot)
            await session.sleep(session.config.settle_delay)
        session.abort.trap()
    except DrawingAborted:
        logger.info(f"Drawing aborted at {state.pose}")
        return RunOutcome.CANCELLED

    logger.info(f"Drawing completed at {state.pose}")
    return RunOutcome.COMPLETED
