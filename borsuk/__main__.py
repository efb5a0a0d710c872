import argparse
import asyncio
import base64
import logging
import signal
import sys

from .config import Configuration
from .drawing import Command
from .parser import ParseError, parse
from .sequencer import RunOutcome, Session, run
from .transport import make_transport
from .visualizer import visualize

logger = logging.getLogger("borsuk")

EXIT_CODES = {
    RunOutcome.COMPLETED: 0,
    RunOutcome.FAILED: 1,
    RunOutcome.CANCELLED: 130,
}

def load(filename: str) -> list[Command] | None:
    """Read and parse a drawing file, logging why it was rejected."""
    try:
        with open(filename, "r", encoding="utf-8") as f:
            return parse(f.read())
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {filename}: {e}")
    except ParseError as e:
        logger.error(f"Rejected drawing: {e}")
    return None

async def draw_file(commands: list[Command], config: Configuration) -> RunOutcome:
    session = Session(make_transport(config), config)
    stopping: list[asyncio.Task] = []
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, lambda: stopping.append(asyncio.create_task(session.stop())))

    await session.transport.open()
    try:
        return await run(commands, session)
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        await asyncio.gather(*stopping)
        await session.transport.close()

def preview_file(commands: list[Command], output: str):
    with open(output, "wb") as f:
        f.write(base64.b64decode(visualize(commands)))
    logger.info(f"Preview of {len(commands)} commands written to {output}")

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="borsuk", description="Drive the borsuk drawing robot from a drawing file")
    parser.add_argument("--config", default="config.json", help="configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every frame")
    subparsers = parser.add_subparsers(dest="command", required=True)

    draw_parser = subparsers.add_parser("draw", help="draw a file once")
    draw_parser.add_argument("file")
    draw_parser.add_argument("--url", help="robot websocket url")
    draw_parser.add_argument("--dry-run", action="store_true", help="log frames instead of sending them")

    serve_parser = subparsers.add_parser("serve", help="serve the web interface")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    preview_parser = subparsers.add_parser("preview", help="render the planned path to a PNG")
    preview_parser.add_argument("file")
    preview_parser.add_argument("--output", default="preview.png")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "serve":
        import uvicorn
        uvicorn.run("borsuk:app", host=args.host, port=args.port)
        return 0

    commands = load(args.file)
    if commands is None:
        return EXIT_CODES[RunOutcome.FAILED]

    if args.command == "preview":
        preview_file(commands, args.output)
        return 0

    config = Configuration(args.config)
    if args.url:
        config.robot_url = args.url
    if args.dry_run:
        config.dry_run = True

    outcome = asyncio.run(draw_file(commands, config))
    logger.info(f"Drawing {outcome.value}")
    return EXIT_CODES[outcome]

if __name__ == "__main__":
    sys.exit(main())
