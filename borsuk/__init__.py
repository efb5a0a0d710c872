import asyncio
import base64
import logging
from pathlib import Path

from fastapi import APIRouter, Body, FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse, Response

from borsuk import status as messages
from borsuk.config import Configuration, InvalidConfiguration
from borsuk.drawing import Command
from borsuk.parser import ParseError, parse
from borsuk.sequencer import RunOutcome, Session, run
from borsuk.status import Status
from borsuk.transport import make_transport
from borsuk.visualizer import visualize

commands: list[Command] | None = None
session: Session | None = None
drawing_task: asyncio.Task | None = None
current_status: Status = messages.IDLE
logger = logging.getLogger(__name__)
config = Configuration()

app = FastAPI()

api_router = APIRouter()

@api_router.get("/")
@api_router.get("/status")
def read_status():
    return {
        "status": current_status.to_dict(),
        "file_ready": commands is not None,
        "command_count": len(commands) if commands is not None else 0,
        "drawing": session is not None
    }

@app.get("/", include_in_schema=False)
async def redirect_to_ui():
    """Redirect root path to UI"""
    return RedirectResponse(url="/ui")

@app.get("/ui")
async def ui():
    """Serve the web UI"""
    return FileResponse(Path(__file__).parent / "static" / "index.html")

@api_router.post("/file")
async def upload_file(request: Request):
    """
    Load a drawing file sent as the plain text request body.

    The whole file is rejected on the first bad line and has to be sent again.

    Returns:
        Dict with status and the number of parsed commands
    """
    global commands
    global current_status

    if session is not None:
        raise HTTPException(status_code=409, detail="Already drawing")

    try:
        text = (await request.body()).decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Drawing files must be UTF-8 text")

    try:
        commands = parse(text)
    except ParseError as e:
        commands = None
        current_status = Status.error(str(e))
        logger.info(f"Rejected drawing file: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    current_status = messages.READY
    logger.info(f"Loaded drawing file with {len(commands)} commands")
    return {"status": current_status.to_dict(), "command_count": len(commands)}

async def do_draw(drawing: list[Command], current: Session):
    global session
    global current_status

    try:
        await current.transport.open()
        outcome = await run(drawing, current)
        if outcome == RunOutcome.COMPLETED:
            current_status = messages.FINISHED
        logger.info(f"Drawing finished: {outcome.value}")
    except Exception as e:
        logger.error(f"Error during drawing: {str(e)}")
        current_status = Status.error(f"Drawing failed: {str(e)}")
    finally:
        await current.transport.close()
        session = None

@api_router.post("/start")
async def start_drawing():
    """
    Start drawing the loaded file in the background.

    Returns:
        Dict with status
    """
    global session
    global current_status
    global drawing_task

    if session is not None:
        raise HTTPException(status_code=409, detail="Already drawing")
    if commands is None:
        raise HTTPException(status_code=400, detail="No drawing file loaded")

    session = Session(make_transport(config), config)
    current_status = messages.RUNNING
    drawing_task = asyncio.create_task(do_draw(commands, session))
    return {"status": current_status.to_dict()}

@api_router.post("/stop")
async def stop_drawing():
    """
    Stop the robot and abort the current drawing.

    The loaded file is discarded; it has to be loaded again before the next run.

    Returns:
        Dict with status
    """
    global commands
    global current_status

    if session is not None:
        await session.stop()
    commands = None
    current_status = messages.ABORTED
    logger.info("Drawing aborted")
    return {"status": current_status.to_dict()}

@api_router.get("/preview")
async def get_preview():
    """
    Returns a PNG rendering of the loaded drawing.

    Returns:
        The PNG image or a 404 error when no file is loaded
    """
    if commands is None:
        raise HTTPException(status_code=404, detail="No drawing file loaded")

    image = await asyncio.to_thread(visualize, commands)
    return Response(content=base64.b64decode(image), media_type="image/png")

@api_router.get("/config")
async def get_config():
    return config.to_dict()

@api_router.post("/config")
async def set_config(values: dict = Body(...)):
    """
    Update configuration values and persist them.

    Args:
        values: Mapping of configuration keys to their new values

    Returns:
        Dict with status and the full configuration
    """
    try:
        config.update(values)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Unknown configuration key: {e}")
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        config.save()
    except OSError as e:
        logger.error(f"Failed to save configuration: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to save configuration: {str(e)}")

    logger.info(f"Configuration updated: {values}")
    return {"status": "success", "config": config.to_dict()}

# Mount the API router at both / and /api paths
app.include_router(api_router)
app.include_router(api_router, prefix="/api")
