import asyncio
import logging

from borsuk import transport as transport_module
from borsuk.config import Configuration
from borsuk.driver import Frame
from borsuk.transport import DryRunTransport, WebSocketTransport, make_transport


def test_dry_run_logs_frames(caplog):
    transport = DryRunTransport()
    with caplog.at_level(logging.INFO, logger="borsuk.transport"):
        asyncio.run(transport.send(Frame(-15, 30).to_bytes()))
    assert transport.frames == [bytes([241, 30, 0])]
    assert "engines l -15, r 30" in caplog.text


def test_make_transport(tmp_path):
    config = Configuration(str(tmp_path / "config.json"))
    transport = make_transport(config)
    assert isinstance(transport, WebSocketTransport)
    assert transport.url == config.robot_url

    config.dry_run = True
    assert isinstance(make_transport(config), DryRunTransport)


def test_unreachable_robot_drops_frames(caplog):
    async def scenario():
        transport = WebSocketTransport("ws://127.0.0.1:9/ws", reconnect_delay=60)
        await transport.open()
        await transport.send(Frame(0, 0).to_bytes())
        await transport.close()

    with caplog.at_level(logging.WARNING, logger="borsuk.transport"):
        asyncio.run(scenario())
    assert "dropping frame 000000" in caplog.text


def test_connect_timeout_keeps_reconnecting(monkeypatch):
    class Connection:
        def __init__(self):
            self.sent = []

        async def send(self, frame):
            self.sent.append(frame)

        async def close(self):
            pass

    connection = Connection()
    attempts = []

    async def connect(url):
        attempts.append(url)
        if len(attempts) < 3:
            raise asyncio.TimeoutError()
        return connection

    monkeypatch.setattr(transport_module.websockets, "connect", connect)

    async def scenario():
        transport = WebSocketTransport("ws://192.168.4.1/ws", reconnect_delay=0)
        await transport.open()
        await transport._reconnect_task
        await transport.send(Frame(-15, -15).to_bytes())
        await transport.close()

    asyncio.run(scenario())
    assert len(attempts) == 3
    assert connection.sent == [bytes([241, 241, 0])]
