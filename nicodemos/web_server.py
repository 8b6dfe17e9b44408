"""HTTP surface for the assistant and the deliberation committee."""

import asyncio
import json
import logging
from typing import Any

from aiohttp import web
from pydantic import ValidationError

from nicodemos.deliberation import AgentUpdate, DeliberationOrchestrator
from nicodemos.errors import DeliberationFailure
from nicodemos.query import BackendExhausted, ConversationTurn, QueryProcessor

logger = logging.getLogger(__name__)


def _ndjson(payload: dict[str, Any]) -> bytes:
    return (json.dumps(payload, ensure_ascii=False) + "\n").encode("utf-8")


class WebServer:
    """HTTP server exposing the assistant endpoints."""

    def __init__(
        self,
        processor: QueryProcessor,
        orchestrator: DeliberationOrchestrator | None = None,
        host: str = "0.0.0.0",
        port: int = 3000,
    ):
        """Initialize web server.

        Args:
            processor: Single-shot assistant pipeline
            orchestrator: Deliberation committee, or None when not configured
            host: Bind address
            port: Bind port
        """
        self.processor = processor
        self.orchestrator = orchestrator
        self.host = host
        self.port = port
        self.app = web.Application()
        self._setup_routes()
        logger.info(f"Web server initialized on port {port}")

    def _setup_routes(self):
        """Set up HTTP routes."""
        self.app.router.add_get("/", self._handle_health)
        self.app.router.add_get("/health", self._handle_health)
        self.app.router.add_post("/api/assistant/ask", self._handle_ask)
        self.app.router.add_post("/api/assistant/deliberate", self._handle_deliberate)
        logger.info("Routes configured: /, /health, /api/assistant/ask, /api/assistant/deliberate")

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        health = await self.processor.health_check()
        return web.json_response({
            "status": "healthy" if health["overall"] else "degraded",
            "service": "Nicodemos IA",
            "components": health,
            "deliberation": self.orchestrator is not None,
        })

    async def _read_json(self, request: web.Request) -> dict[str, Any]:
        try:
            data = await request.json()
        except json.JSONDecodeError:
            raise web.HTTPBadRequest(text="Request body must be JSON")
        if not isinstance(data, dict):
            raise web.HTTPBadRequest(text="Request body must be a JSON object")
        return data

    async def _handle_ask(self, request: web.Request) -> web.Response:
        """
        Answer a question with the single-shot pipeline.

        Expects JSON: {"question": "...", "history": [{"role": "...", "content": "..."}]}
        """
        data = await self._read_json(request)
        question = str(data.get("question") or "").strip()
        if not question:
            return web.json_response({"error": "No question provided"}, status=400)

        raw_history = data.get("history") or []
        if not isinstance(raw_history, list):
            return web.json_response({"error": "Invalid history: expected a list of turns"}, status=400)

        try:
            history = [ConversationTurn.model_validate(turn) for turn in raw_history]
        except ValidationError as e:
            return web.json_response({"error": f"Invalid history: {e.errors()}"}, status=400)

        outcome = await self.processor.ask(question, history)
        if isinstance(outcome, BackendExhausted):
            return web.json_response(
                {
                    "error": "All AI models failed. Please try again later.",
                    "failures": [str(failure) for failure in outcome.failures],
                },
                status=503,
            )

        return web.json_response(outcome.answer.model_dump(mode="json", by_alias=True))

    async def _handle_deliberate(self, request: web.Request) -> web.StreamResponse:
        """
        Run the deliberation committee, streaming progress as NDJSON.

        Expects JSON: {"question": "..."}
        Emits one {"type": "update"} line per agent update, then a single
        {"type": "result"} or {"type": "error"} line.
        """
        if self.orchestrator is None:
            return web.json_response({"error": "Deliberation is not configured"}, status=503)

        data = await self._read_json(request)
        question = str(data.get("question") or "").strip()
        if not question:
            return web.json_response({"error": "No question provided"}, status=400)

        response = web.StreamResponse(headers={"Content-Type": "application/x-ndjson"})
        await response.prepare(request)

        updates: asyncio.Queue[AgentUpdate | None] = asyncio.Queue()
        task = asyncio.create_task(self.orchestrator.run(question, updates.put_nowait))
        task.add_done_callback(lambda _: updates.put_nowait(None))

        try:
            while True:
                update = await updates.get()
                if update is None:
                    break
                await response.write(_ndjson({"type": "update", **update.model_dump(mode="json")}))

            try:
                result = task.result()
            except DeliberationFailure as e:
                logger.error(f"Deliberation failed: {e}")
                await response.write(_ndjson({"type": "error", "stage": e.stage, "error": str(e)}))
            except Exception as e:
                logger.exception("Unexpected deliberation error")
                await response.write(_ndjson({"type": "error", "stage": None, "error": str(e)}))
            else:
                await response.write(_ndjson({"type": "result", **result.model_dump(mode="json")}))

            await response.write_eof()
        finally:
            # Client went away mid-stream
            if not task.done():
                task.cancel()
        return response

    async def start(self):
        """Start the web server."""
        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        await site.start()
        logger.info(f"Web server started on {self.host}:{self.port}")
        return runner

    async def stop(self, runner):
        """Stop the web server."""
        await runner.cleanup()
