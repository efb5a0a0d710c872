import numpy as np
import pytest

from borsuk.config import Configuration
from borsuk.sequencer import Session
from borsuk.transport import Transport


class Recorder(Transport):
    """Transport and sleep in one, so frames and waits land in a single timeline."""

    def __init__(self):
        self.timeline = []

    async def send(self, frame: bytes) -> None:
        self.timeline.append(("send", tuple(np.frombuffer(frame, dtype=np.int8).tolist())))

    async def sleep(self, seconds: float) -> None:
        self.timeline.append(("sleep", seconds))

    @property
    def frames(self):
        return [value for kind, value in self.timeline if kind == "send"]

    @property
    def sleeps(self):
        return [value for kind, value in self.timeline if kind == "sleep"]


@pytest.fixture
def config(tmp_path):
    return Configuration(str(tmp_path / "config.json"))


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def session(recorder, config):
    return Session(recorder, config, sleep=recorder.sleep)
