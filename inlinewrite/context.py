"""Application context — everything one process needs, built and torn down explicitly.

Constructed once per process (or per test) and passed to whatever needs it.
``start`` needs a running event loop because it starts the foreground timer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from inlinewrite.chat import ChatSession
from inlinewrite.config import Settings
from inlinewrite.engine.client import TransformationClient
from inlinewrite.engine.controller import DebugLog, StatusController
from inlinewrite.engine.host import Pasteboard, TextDocumentProxy
from inlinewrite.signals import SignalBus
from inlinewrite.store.handoff import HandoffStore
from inlinewrite.store.shared import CustomPromptManager, SharedConfigReader, SharedStore
from inlinewrite.sync import ForegroundSync

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    client: TransformationClient
    config_store: SharedStore
    config_reader: SharedConfigReader
    prompt_manager: CustomPromptManager
    handoff: HandoffStore
    bus: SignalBus
    foreground_sync: ForegroundSync
    chat: ChatSession
    pasteboard: Pasteboard = field(default_factory=Pasteboard)
    transport: httpx.AsyncBaseTransport | None = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AppContext:
        """Wire all collaborators from settings. Starts nothing."""
        stores = settings.shared_store
        config_store = SharedStore(stores.root, stores.config_group)
        bus = SignalBus()
        handoff = HandoffStore(SharedStore(stores.root, stores.handoff_group), bus)
        client = TransformationClient.from_settings(settings.gemini, transport)
        return cls(
            settings=settings,
            client=client,
            config_store=config_store,
            config_reader=SharedConfigReader(config_store),
            prompt_manager=CustomPromptManager(config_store),
            handoff=handoff,
            bus=bus,
            foreground_sync=ForegroundSync(
                handoff, bus, settings.foreground_sync.interval_seconds
            ),
            chat=ChatSession(client),
            transport=transport,
        )

    def start(self) -> None:
        self.foreground_sync.start()
        logger.info("Application context started")

    async def teardown(self) -> None:
        self.foreground_sync.stop()
        await self.client.aclose()
        logger.info("Application context torn down")

    def controller_for(
        self, proxy: TextDocumentProxy, debug_log: DebugLog | None = None
    ) -> StatusController:
        """A StatusController bound to one host buffer.

        Each controller gets its own DebugLog unless one is passed in, so
        concurrent invocations never see each other's snippets or prompts.
        """
        return StatusController(
            proxy,
            self.client,
            self.config_reader,
            pasteboard=self.pasteboard,
            debug_log=debug_log if debug_log is not None else DebugLog(),
        )

    async def apply_settings(self, settings: Settings) -> None:
        """Swap in a client built from new settings; the old one is closed."""
        old_client = self.client
        self.settings = settings
        self.client = TransformationClient.from_settings(settings.gemini, self.transport)
        self.chat.client = self.client
        await old_client.aclose()
        logger.info(f"Settings applied: model={settings.gemini.model}")
