"""FastAPI backend for EmpathyAI."""

from contextlib import asynccontextmanager
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from empathyai.config import Config
from empathyai.controller import SessionController
from empathyai.errors import (
    CaptureUnavailableError,
    ClassificationError,
    EmptyInputError,
    GenerationError,
    NothingToSummarizeError,
    SummarizeError,
    UnsupportedLanguageError,
)
from empathyai.events import EventBus
from empathyai.languages import list_languages
from empathyai.logging_utils import setup_logging
from empathyai.providers import create_backend

logger = logging.getLogger(__name__)

HEARTBEAT_SECONDS = 15.0


# Request models
class ChatRequest(BaseModel):
    text: str


class CaptureResultRequest(BaseModel):
    text: str = ""
    is_final: bool = False


class CaptureErrorRequest(BaseModel):
    code: str


class CapabilitiesRequest(BaseModel):
    capture: bool
    playback: bool = True


class LanguageRequest(BaseModel):
    language: str


class AudioRequest(BaseModel):
    enabled: bool


class PlaybackFinishedRequest(BaseModel):
    utterance_id: str


def build_controller() -> Optional[SessionController]:
    """Controller from configuration, or None when the backend can't be created."""
    try:
        backend = create_backend(Config.ASSISTANT_PROVIDER)
        logger.info("Backend initialized: %s", Config.ASSISTANT_PROVIDER)
    except ValueError as e:
        logger.error("Backend not initialized: %s", e)
        for problem in Config.validate():
            logger.error("Missing setting: %s", problem)
        return None

    return SessionController(
        backend,
        bus=EventBus(),
        cap=Config.MAX_LOG_LENGTH,
        language=Config.DEFAULT_LANGUAGE,
        audio_enabled=Config.AUDIO_ENABLED,
    )


def get_controller(request: Request) -> SessionController:
    controller = request.app.state.controller
    if controller is None:
        raise HTTPException(
            status_code=503,
            detail="Assistant backend not initialized. Please check your configuration and API keys.",
        )
    return controller


router = APIRouter()


def _entries_payload(controller: SessionController, entries):
    return {
        "entries": [e.to_dict() for e in entries] if entries else [],
        "state": controller.state.to_dict(),
    }


@router.get("/health")
async def health(request: Request):
    controller = request.app.state.controller
    return {
        "status": "ok" if controller is not None else "degraded",
        "provider": controller.backend.name if controller is not None else None,
    }


@router.get("/languages")
async def languages():
    return {"languages": list_languages()}


@router.get("/session")
async def session_view(controller: SessionController = Depends(get_controller)):
    return controller.view()


@router.get("/session/transcript")
async def session_transcript(controller: SessionController = Depends(get_controller)):
    return {"entries": [e.to_dict() for e in controller.store.snapshot()]}


@router.post("/session/capabilities")
async def session_capabilities(
    body: CapabilitiesRequest, controller: SessionController = Depends(get_controller)
):
    controller.set_capabilities(capture=body.capture, playback=body.playback)
    return {"capture_available": controller.capture.available}


@router.post("/session/language")
async def session_language(body: LanguageRequest, controller: SessionController = Depends(get_controller)):
    try:
        changed = controller.set_language(body.language)
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not changed:
        raise HTTPException(status_code=409, detail="A turn is in progress.")
    return {"language": controller.state.language}


@router.post("/session/audio")
async def session_audio(body: AudioRequest, controller: SessionController = Depends(get_controller)):
    controller.set_audio_enabled(body.enabled)
    return {"audio_enabled": controller.state.audio_enabled}


@router.post("/capture/start")
async def capture_start(controller: SessionController = Depends(get_controller)):
    try:
        started = controller.start_capture()
    except CaptureUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"started": started, "capture_state": controller.capture_state.value}


@router.post("/capture/stop")
async def capture_stop(controller: SessionController = Depends(get_controller)):
    stopped = controller.stop_capture()
    return {"stopped": stopped, "capture_state": controller.capture_state.value}


@router.post("/capture/result")
async def capture_result(
    body: CaptureResultRequest, controller: SessionController = Depends(get_controller)
):
    try:
        await controller.capture.deliver_result(body.text, body.is_final)
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (ClassificationError, GenerationError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"capture_state": controller.capture_state.value}


@router.post("/capture/error")
async def capture_error(body: CaptureErrorRequest, controller: SessionController = Depends(get_controller)):
    await controller.capture.deliver_error(body.code)
    return {"capture_state": controller.capture_state.value, "message": controller.state.status_message}


@router.post("/capture/end")
async def capture_end(controller: SessionController = Depends(get_controller)):
    await controller.capture.deliver_end()
    return {"capture_state": controller.capture_state.value}


@router.post("/playback/finished")
async def playback_finished(
    body: PlaybackFinishedRequest, controller: SessionController = Depends(get_controller)
):
    controller.playback_finished(body.utterance_id)
    return {"speaking": controller.player.speaking}


@router.post("/chat")
async def chat(body: ChatRequest, controller: SessionController = Depends(get_controller)):
    """Send typed text through one turn."""
    try:
        entries = await controller.submit_text(body.text)
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (ClassificationError, GenerationError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    if entries is None:
        raise HTTPException(status_code=409, detail="The assistant is busy. Please wait.")
    return _entries_payload(controller, entries)


@router.post("/summarize")
async def summarize(controller: SessionController = Depends(get_controller)):
    try:
        summary = await controller.summarize()
    except NothingToSummarizeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SummarizeError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if summary is None:
        raise HTTPException(status_code=409, detail="The assistant is busy. Please wait.")
    return {"summary": summary, "current": controller.last_summary is not None}


@router.get("/events")
async def events(request: Request, controller: SessionController = Depends(get_controller)):
    """Stream session events via Server-Sent Events."""
    queue = controller.bus.subscribe()

    async def event_generator():
        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=HEARTBEAT_SECONDS)
                except asyncio.TimeoutError:
                    # Send heartbeat to keep connection alive
                    yield ": heartbeat\n\n"
                    continue
                yield event.to_sse()
        finally:
            controller.bus.unsubscribe(queue)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering for nginx
        },
    )


@router.get("/favicon.ico")
async def favicon():
    """Return empty favicon to prevent 404 errors."""
    return Response(content="", media_type="image/x-icon")


def create_app(controller: Optional[SessionController] = None) -> FastAPI:
    """Build the application.

    Without an explicit controller one is built from ``Config`` at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.controller is None and controller is None:
            setup_logging(Config.LOG_DIR, Config.LOG_LEVEL)
            app.state.controller = build_controller()
        yield
        if app.state.controller is not None:
            await app.state.controller.backend.aclose()

    app = FastAPI(title="EmpathyAI", lifespan=lifespan)
    app.state.controller = controller

    # CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
