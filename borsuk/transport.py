import abc
import asyncio
import logging

import numpy as np
import websockets

from .config import Configuration

logger = logging.getLogger(__name__)

class Transport(abc.ABC):
    async def open(self) -> None:
        pass

    @abc.abstractmethod
    async def send(self, frame: bytes) -> None:
        pass

    async def close(self) -> None:
        pass

class DryRunTransport(Transport):
    """Logs frames instead of sending them, for running without the robot."""

    def __init__(self) -> None:
        self.frames: list[bytes] = []

    async def send(self, frame: bytes) -> None:
        left, right, auto_stop = np.frombuffer(frame, dtype=np.int8).tolist()
        logger.info(f"engines l {left}, r {right}, auto stop {auto_stop}")
        self.frames.append(frame)

class WebSocketTransport(Transport):
    """
    Binary frames to the robot's websocket endpoint.

    A frame sent while the connection is down is dropped; the connection is
    re-established in the background every `reconnect_delay` seconds.
    """

    def __init__(self, url: str, reconnect_delay: float = 1.0) -> None:
        self.url = url
        self.reconnect_delay = reconnect_delay
        self._connection = None
        self._reconnect_task: asyncio.Task | None = None

    async def _connect(self):
        self._connection = await websockets.connect(self.url)
        logger.info(f"Connected to {self.url}")

    async def _reconnect(self):
        while self._connection is None:
            await asyncio.sleep(self.reconnect_delay)
            try:
                await self._connect()
            except (OSError, asyncio.TimeoutError, websockets.WebSocketException) as e:
                logger.warning(f"Connecting to {self.url} failed: {e}")

    def _schedule_reconnect(self):
        if self._reconnect_task is None or self._reconnect_task.done():
            self._reconnect_task = asyncio.create_task(self._reconnect())

    async def open(self) -> None:
        try:
            await self._connect()
        except (OSError, asyncio.TimeoutError, websockets.WebSocketException) as e:
            logger.warning(f"Connecting to {self.url} failed: {e}")
            self._schedule_reconnect()

    async def send(self, frame: bytes) -> None:
        if self._connection is None:
            logger.warning(f"Not connected to {self.url}, dropping frame {frame.hex()}")
            self._schedule_reconnect()
            return

        try:
            await self._connection.send(frame)
        except websockets.ConnectionClosed as e:
            logger.warning(f"Connection to {self.url} closed ({e}), dropping frame {frame.hex()}")
            self._connection = None
            self._schedule_reconnect()

    async def close(self) -> None:
        if self._reconnect_task is not None:
            self._reconnect_task.cancel()
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

def make_transport(config: Configuration) -> Transport:
    if config.dry_run:
        return DryRunTransport()
    return WebSocketTransport(config.robot_url, config.reconnect_delay)
