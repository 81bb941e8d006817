"""Web server exposing the question pipeline over HTTP."""

import logging
from typing import Any

from aiohttp import web

from medads.classification.models import Classification
from medads.experience.models import ExperienceContext
from medads.query import QueryContext, QuestionPipeline, ServiceContainer, validate_question
from medads.relevance.models import ContextualRelevanceResult

logger = logging.getLogger(__name__)

NDJSON_CONTENT_TYPE = "application/x-ndjson"


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


class WebServer:
    """HTTP server for the question pipeline endpoints."""

    def __init__(
        self,
        container: ServiceContainer,
        pipeline: QuestionPipeline | None = None,
        host: str = "0.0.0.0",
        port: int = 3000,
    ):
        """Initialize web server.

        Args:
            container: Services shared by all requests
            pipeline: Pipeline override, built from the container when omitted
            host: Bind address
            port: Bind port
        """
        self.container = container
        self.pipeline = pipeline or QuestionPipeline(container)
        self.host = host
        self.port = port
        self.app = web.Application()
        self._setup_routes()
        logger.info(f"Web server initialized on port {port}")

    def _setup_routes(self):
        """Set up HTTP routes."""
        self.app.router.add_get("/", self._handle_health)
        self.app.router.add_get("/health", self._handle_health)
        self.app.router.add_post("/api/classify", self._handle_classify)
        self.app.router.add_post("/api/ask", self._handle_ask)
        self.app.router.add_get("/api/ask", self._handle_ask_stream)
        self.app.router.add_post("/api/experience", self._handle_experience)
        logger.info("Routes configured: /, /health, /api/classify, /api/ask, /api/experience")

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response({"status": "healthy", "service": "medical-sponsor-pipeline"})

    async def _handle_classify(self, request: web.Request) -> web.Response:
        """
        Classify a question.

        Expects JSON: {"question": "...", "history": [...]}. The ``debug``
        query flag surfaces classifier errors instead of the fallback.
        """
        try:
            data = await self._read_json(request)
            question = validate_question(data.get("question"))
        except ValueError as e:
            return web.json_response({"error": str(e)}, status=400)

        debug = request.query.get("debug", "").lower() in ("1", "true", "yes")
        try:
            classification = await self.container.classifier.classify(
                question, data.get("history"), raise_on_error=debug
            )
            return web.json_response(classification.to_wire())

        except Exception as e:
            logger.error(f"Error classifying question: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def _handle_ask(self, request: web.Request) -> web.Response:
        """
        Answer a question in one response.

        Expects JSON: {"question": "...", "history": [...]}
        """
        try:
            data = await self._read_json(request)
            question = validate_question(data.get("question"))
            query_context = self._query_context(request, data)
        except ValueError as e:
            return web.json_response({"error": str(e)}, status=400)

        try:
            result = await self.pipeline.process(question, query_context)
            return web.json_response(result.to_wire())

        except Exception as e:
            logger.error(f"Error answering question: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def _handle_ask_stream(self, request: web.Request) -> web.StreamResponse:
        """
        Stream an answer as newline-delimited JSON events.

        Expects the question in the ``question`` query parameter.
        """
        try:
            question = validate_question(request.query.get("question"))
            query_context = self._query_context(request, {})
        except ValueError as e:
            return web.json_response({"error": str(e)}, status=400)

        response = web.StreamResponse(headers={"Content-Type": NDJSON_CONTENT_TYPE})
        await response.prepare(request)

        async for event in self.pipeline.stream_answer(question, query_context):
            await response.write(event.to_ndjson())

        await response.write_eof()
        return response

    async def _handle_experience(self, request: web.Request) -> web.Response:
        """
        Select the interactive experience for a question.

        Expects JSON: {"question": "...", "classification": {...},
        "contextualRelevance": {...}, "estimatedWaitTime": ms}
        """
        try:
            data = await self._read_json(request)
            question = validate_question(data.get("question"))

            classification = None
            if data.get("classification") is not None:
                classification = Classification.model_validate(data["classification"])

            relevance = None
            if data.get("contextualRelevance") is not None:
                relevance = ContextualRelevanceResult.model_validate(data["contextualRelevance"])

            query_context = self._query_context(request, data)
            wait_time_ms = _optional_int(data.get("estimatedWaitTime"))
        except ValueError as e:
            return web.json_response({"error": str(e)}, status=400)

        try:
            selection = await self.container.selector.select_experience(
                ExperienceContext(
                    question=question,
                    classification=classification,
                    contextual_relevance=relevance,
                    estimated_wait_time_ms=wait_time_ms,
                    user_agent=query_context.user_agent,
                    device_memory_gb=query_context.device_memory_gb,
                    hardware_concurrency=query_context.hardware_concurrency,
                )
            )
            return web.json_response(selection.to_wire())

        except Exception as e:
            logger.error(f"Error selecting experience: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def _read_json(self, request: web.Request) -> dict[str, Any]:
        """Read a JSON object body.

        Raises:
            ValueError: If the body is not a JSON object
        """
        try:
            data = await request.json()
        except ValueError as e:
            raise ValueError(f"Invalid JSON body: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")
        return data

    def _query_context(self, request: web.Request, data: dict[str, Any]) -> QueryContext:
        """Build request context from the body, falling back to client hint headers."""
        return QueryContext(
            history=data.get("history"),
            user_agent=data.get("userAgent") or request.headers.get("User-Agent"),
            device_memory_gb=_optional_float(
                data.get("deviceMemory", request.headers.get("Device-Memory"))
            ),
            hardware_concurrency=_optional_int(data.get("hardwareConcurrency")),
            user_id=data.get("userId"),
            timestamp=data.get("timestamp"),
        )

    async def start(self):
        """Start the web server."""
        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        await site.start()
        logger.info(f"Web server started on {self.host}:{self.port}")
        logger.info(f"Ask endpoint: http://localhost:{self.port}/api/ask")
        return runner

    async def stop(self, runner):
        """Stop the web server."""
        await runner.cleanup()
        logger.info("Web server stopped")
