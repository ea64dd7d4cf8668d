"""HTTP/WebSocket boundary between the log watcher and the office UI."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .commands import get_agents, get_claude_home
from .config import OfficeConfig
from .events import APP_EVENT_TOPIC, WATCHER_STATUS, Event, EventBus
from .exceptions import ClaudeHomeNotFoundError
from .watcher.log_watcher import LogWatcher

logger = logging.getLogger(__name__)


class OfficeServer:
    """Serves the roster, the watched root and the live event stream.

    The server owns the EventBus the watcher emits into. Every WebSocket
    client gets its own queue, fed from the watcher thread.
    """

    def __init__(
        self,
        config: OfficeConfig,
        bus: EventBus | None = None,
        watcher: LogWatcher | None = None,
    ):
        """Initialize the server.

        Args:
            config: Configuration for watcher and server
            bus: Event bus to use; a new one is created when None
            watcher: Prebuilt watcher; built from ``config`` on startup when None
        """
        self.config = config
        self.bus = bus or EventBus()
        self.watcher = watcher
        self.last_watcher_status: dict[str, Any] | None = None
        self.bus.subscribe(APP_EVENT_TOPIC, self._remember_watcher_status)

        self.app = FastAPI(
            title="Agents Office",
            description="Live view of Claude Code activity as office agents",
            version=__version__,
            lifespan=self._lifespan,
        )
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_routes()

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        self.start_watcher()
        try:
            yield
        finally:
            self.stop_watcher()

    def start_watcher(self) -> None:
        """Start the log watcher.

        Raises:
            ClaudeHomeNotFoundError: If the watch root cannot be resolved.
        """
        if self.watcher is None:
            self.watcher = LogWatcher.from_config(self.config, self.bus)
        if not self.watcher.is_running():
            self.watcher.start()

    def stop_watcher(self) -> None:
        if self.watcher is not None:
            self.watcher.stop()

    def _remember_watcher_status(self, event: Event) -> None:
        if event.data.get("type") == WATCHER_STATUS:
            self.last_watcher_status = event.data

    def _setup_routes(self):
        """Setup FastAPI routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            watcher = self.watcher
            return {
                "status": "healthy",
                "timestamp": datetime.now(UTC).isoformat(),
                "version": __version__,
                "watcher": {
                    "running": watcher is not None and watcher.is_running(),
                    "failed": watcher is not None and watcher.failed,
                    "root": str(watcher.root) if watcher else None,
                    "tracked_files": len(watcher.tailer.tracked_paths()) if watcher else 0,
                },
            }

        @self.app.get("/claude-home")
        async def claude_home():
            try:
                return {"path": get_claude_home(self.config)}
            except ClaudeHomeNotFoundError as e:
                raise HTTPException(status_code=500, detail=str(e)) from e

        @self.app.get("/agents")
        async def list_agents():
            return [agent.to_dict() for agent in get_agents()]

        @self.app.websocket("/ws/events")
        async def events_websocket(websocket: WebSocket):
            """Stream every app event to the client."""
            await websocket.accept()
            logger.info("WebSocket client connected to /ws/events")

            loop = asyncio.get_running_loop()
            queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

            def forward(event: Event) -> None:
                # Runs on the watcher thread
                loop.call_soon_threadsafe(queue.put_nowait, event.data)

            async def pump() -> None:
                while True:
                    await websocket.send_json(await queue.get())

            subscription_id = self.bus.subscribe(APP_EVENT_TOPIC, forward)
            sender: asyncio.Task | None = None
            try:
                if self.last_watcher_status is not None:
                    await websocket.send_json(self.last_watcher_status)
                sender = asyncio.create_task(pump())
                # Clients only listen; receiving is how a disconnect is noticed
                while True:
                    await websocket.receive_text()
            except WebSocketDisconnect:
                logger.info("WebSocket client disconnected from /ws/events")
            finally:
                if sender is not None:
                    sender.cancel()
                    try:
                        await sender
                    except asyncio.CancelledError:
                        pass
                    except Exception:
                        logger.exception("Event stream to WebSocket client failed")
                self.bus.unsubscribe(subscription_id)

    async def start_server(self):
        """Start the HTTP server."""
        import uvicorn

        logger.info(
            f"Starting Agents Office server on {self.config.server_host}:{self.config.server_port}"
        )
        config = uvicorn.Config(
            self.app,
            host=self.config.server_host,
            port=self.config.server_port,
            log_level=self.config.log_level.lower(),
        )
        server = uvicorn.Server(config)
        await server.serve()
