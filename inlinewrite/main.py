"""inlinewrite — FastAPI surface over the inline transformation engine.

Loads settings on startup and builds one AppContext. Exposes the pipeline
at /transform/{intent}, the authoring side of the shared store at
/custom-prompt, the handoff producer and mirror at /share and /handoff,
and lifecycle signals at /signals/{signal}. The foreground sync timer runs
for the lifetime of the app.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request

from inlinewrite.config import load_settings, save_settings
from inlinewrite.context import AppContext
from inlinewrite.engine.controller import DebugLog
from inlinewrite.engine.host import TextBuffer
from inlinewrite.engine.intents import resolve_intent
from inlinewrite.schemas import (
    ChatMessageOut,
    ChatRequest,
    ChatResponse,
    CustomPromptRequest,
    CustomPromptResponse,
    HandoffResponse,
    SettingsRequest,
    SettingsResponse,
    ShareRequest,
    TransformRequest,
    TransformResponse,
)
from inlinewrite.signals import LifecycleSignal
from inlinewrite.store.shared import SharedStoreUnavailable

logging.basicConfig(level=logging.INFO)
# httpx logs full request URLs at INFO, and the API key travels in the query string.
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def create_app(
    settings_path: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app. ``transport`` replaces the network for the remote call."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the context and start the foreground sync on startup."""
        settings = load_settings(settings_path)
        context = AppContext.create(settings, transport=transport)
        context.start()
        app.state.context = context
        logger.info(
            f"inlinewrite started (model={settings.gemini.model}, "
            f"api_key={'set' if settings.gemini.api_key else 'missing'}, "
            f"sync_interval={settings.foreground_sync.interval_seconds}s)"
        )
        yield
        await context.teardown()
        logger.info("inlinewrite shutting down")

    app = FastAPI(title="inlinewrite", version="0.1.0", lifespan=lifespan)
    app.include_router(_build_router())
    return app


def _build_router() -> APIRouter:
    router = APIRouter()

    # -----------------------------------------------------------------------
    # Pipeline
    # -----------------------------------------------------------------------

    @router.post("/transform/{intent_name}", response_model=TransformResponse)
    async def transform(
        intent_name: str,
        request: TransformRequest,
        context: AppContext = Depends(get_context),
    ):
        """Run one intent against the supplied buffer and return the edited buffer."""
        try:
            intent = resolve_intent(intent_name)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))

        cursor = request.selection_end if request.selection_end is not None else request.cursor
        buffer = TextBuffer(request.text, cursor=cursor, selection_start=request.selection_start)
        debug_log = DebugLog(visible=request.debug)
        controller = context.controller_for(buffer, debug_log=debug_log)

        state = await controller.invoke(intent)
        return TransformResponse(
            text=buffer.text,
            status=controller.status,
            state=state.value,
            failure=controller.failure,
            log=debug_log.shown_lines(),
        )

    # -----------------------------------------------------------------------
    # Authoring side
    # -----------------------------------------------------------------------

    @router.get("/custom-prompt", response_model=CustomPromptResponse)
    async def read_custom_prompt(context: AppContext = Depends(get_context)):
        """Authoring screen load: check the shared namespace, then read the prompt."""
        storage_ok = context.config_store.verify_access()
        return CustomPromptResponse(
            prompt=context.prompt_manager.get_custom_prompt(),
            storage_ok=storage_ok,
        )

    @router.put("/custom-prompt", response_model=CustomPromptResponse)
    async def save_custom_prompt(
        request: CustomPromptRequest,
        context: AppContext = Depends(get_context),
    ):
        try:
            context.prompt_manager.save_custom_prompt(request.prompt)
        except SharedStoreUnavailable as e:
            logger.error(f"Saving custom prompt failed: {e}")
            raise HTTPException(status_code=503, detail="Could not access shared storage")
        return CustomPromptResponse(prompt=request.prompt)

    @router.get("/settings", response_model=SettingsResponse)
    async def read_settings(context: AppContext = Depends(get_context)):
        gemini = context.settings.gemini
        return SettingsResponse(api_key_configured=bool(gemini.api_key), model=gemini.model)

    @router.put("/settings", response_model=SettingsResponse)
    async def update_settings(
        request: SettingsRequest,
        context: AppContext = Depends(get_context),
    ):
        new_settings = context.settings.model_copy(deep=True)
        new_settings.gemini.api_key = request.api_key.strip()
        new_settings.gemini.model = request.model.value
        try:
            save_settings(new_settings)
        except OSError as e:
            logger.error(f"Saving settings failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Saving settings failed: {e}")
        await context.apply_settings(new_settings)
        return SettingsResponse(
            api_key_configured=bool(new_settings.gemini.api_key),
            model=new_settings.gemini.model,
        )

    # -----------------------------------------------------------------------
    # Handoff + foreground sync
    # -----------------------------------------------------------------------

    @router.post("/share", response_model=HandoffResponse)
    async def share(request: ShareRequest, context: AppContext = Depends(get_context)):
        """Producer side: write shared content and announce it."""
        try:
            timestamp = context.handoff.publish(request.content)
        except SharedStoreUnavailable as e:
            logger.error(f"Publishing shared content failed: {e}")
            raise HTTPException(status_code=503, detail="Could not access shared storage")
        return HandoffResponse(timestamp=timestamp, content=request.content)

    @router.get("/handoff", response_model=HandoffResponse)
    async def handoff(context: AppContext = Depends(get_context)):
        mirror = context.foreground_sync.mirror
        return HandoffResponse(timestamp=mirror.timestamp, content=mirror.content)

    @router.post("/signals/{signal_name}", response_model=HandoffResponse)
    async def post_signal(signal_name: str, context: AppContext = Depends(get_context)):
        try:
            signal = LifecycleSignal(signal_name)
        except ValueError:
            raise HTTPException(
                status_code=404,
                detail=f"Unknown signal '{signal_name}'. "
                f"Available: {[s.value for s in LifecycleSignal]}",
            )
        context.bus.post(signal)
        mirror = context.foreground_sync.mirror
        return HandoffResponse(timestamp=mirror.timestamp, content=mirror.content)

    # -----------------------------------------------------------------------
    # Chat
    # -----------------------------------------------------------------------

    @router.post("/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest, context: AppContext = Depends(get_context)):
        reply = await context.chat.send_message(request.message)
        return ChatResponse(
            reply=ChatMessageOut(role=reply.role.value, text=reply.text) if reply else None,
            conversation=[
                ChatMessageOut(role=m.role.value, text=m.text)
                for m in context.chat.conversation
            ],
        )

    @router.delete("/chat", response_model=ChatResponse)
    async def clear_chat(context: AppContext = Depends(get_context)):
        context.chat.clear()
        return ChatResponse()

    # -----------------------------------------------------------------------
    # Operational
    # -----------------------------------------------------------------------

    @router.get("/health")
    async def health(context: AppContext = Depends(get_context)):
        """Liveness check."""
        return {
            "status": "healthy",
            "model": context.settings.gemini.model,
            "foreground_sync": context.foreground_sync.running,
        }

    return router


app = create_app()
