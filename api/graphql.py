"""GraphQL-style operation endpoint for Vercel."""

from http.server import BaseHTTPRequestHandler
import json
import asyncio

from src.utils.logging_config import LoggingConfig
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.settings import AppConfig

LoggingConfig.setup_logging()
_logger = get_structured_logger(__name__)

# Lazy imports to avoid initialization errors
_services_loaded = False
_execute = None
_list_operations = None


def _get_loop() -> asyncio.AbstractEventLoop:
    try:
        loop = asyncio.get_event_loop()
        if loop.is_closed():
            raise RuntimeError("event loop is closed")
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop


def _load_services() -> bool:
    """Import the service layer and verify the store once per cold start."""
    global _services_loaded, _execute, _list_operations

    if _services_loaded:
        return True

    try:
        from src.services.dispatcher import execute, list_operations
        from src.services.supabase_client import connect_with_retry

        _get_loop().run_until_complete(connect_with_retry())

        _execute = execute
        _list_operations = list_operations
        _services_loaded = True
        return True
    except Exception as e:
        _logger.error(f"Failed to load services: {e}", exc_info=True)
        return False


def parse_request_body(raw_body: str) -> tuple[str, dict]:
    """
    Extract operation name and variables from a request body.

    Raises ValueError when the body is not a usable operation request.
    """
    try:
        body = json.loads(raw_body) if raw_body else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Body is not valid JSON: {e.msg}") from e

    if not isinstance(body, dict):
        raise ValueError("Body must be a JSON object")

    operation_name = body.get("operationName")
    if not operation_name or not isinstance(operation_name, str):
        raise ValueError("operationName is required")

    variables = body.get("variables") or {}
    if not isinstance(variables, dict):
        raise ValueError("variables must be a JSON object")

    return operation_name, variables


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for operation requests."""

    def _send_json(self, status: int, payload: dict, correlation_id: str = None):
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        if correlation_id:
            self.send_header(LoggingConfig.LOG_CORRELATION_ID_HEADER, correlation_id)
        self.end_headers()
        self.wfile.write(json.dumps(payload, default=str).encode('utf-8'))

    def do_POST(self):
        """Handle an operation request."""
        incoming_id = self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER) if self.headers else None

        with correlation_context(incoming_id) as correlation_id:
            try:
                content_length = int(self.headers.get('Content-Length', 0))
                raw_body = self.rfile.read(content_length).decode('utf-8') if content_length > 0 else ""

                try:
                    operation_name, variables = parse_request_body(raw_body)
                except ValueError as e:
                    _logger.warning("Rejected malformed request", error=str(e))
                    self._send_json(400, {"errors": [{"message": str(e), "extensions": {"code": "BAD_REQUEST"}}]}, correlation_id)
                    return

                if not _load_services():
                    self._send_json(500, {"errors": [{"message": "service initialization failed", "extensions": {"code": "STORE_UNAVAILABLE"}}]}, correlation_id)
                    return

                response = _get_loop().run_until_complete(
                    _execute(operation_name, variables, timeout=AppConfig.REQUEST_TIMEOUT_SECONDS)
                )
                self._send_json(200, response, correlation_id)

            except Exception as e:
                _logger.error(f"Error processing operation request: {e}", exc_info=True)
                self._send_json(500, {"errors": [{"message": "internal server error", "extensions": {"code": "INTERNAL_SERVER_ERROR"}}]}, correlation_id)

    def do_GET(self):
        """List available operations."""
        if not _load_services():
            self._send_json(500, {"error": "service initialization failed"})
            return
        self._send_json(200, {"status": "ok", "endpoint": "graphql", "operations": _list_operations()})
