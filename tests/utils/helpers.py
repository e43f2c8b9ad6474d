"""Test helper functions."""

import json
from io import BytesIO
from typing import Any, Dict, Optional
from unittest.mock import Mock


def create_operation_body(operation_name: str, variables: Optional[Dict[str, Any]] = None) -> str:
    """Serialize an operation request body."""
    return json.dumps({"operationName": operation_name, "variables": variables or {}})


def build_handler(handler_class, method: str = "POST", path: str = "/api/graphql", body: str = "", headers: Optional[Dict[str, str]] = None):
    """Instantiate a BaseHTTPRequestHandler subclass against an in-memory socket."""
    raw_headers = {"Content-Length": str(len(body.encode("utf-8")))}
    raw_headers.update(headers or {})
    header_lines = "".join(f"{name}: {value}\r\n" for name, value in raw_headers.items())
    request = f"{method} {path} HTTP/1.1\r\n{header_lines}\r\n{body}".encode("utf-8")

    class MockSocket:
        def makefile(self, *args, **kwargs):
            return BytesIO(request)

        def sendall(self, data):
            pass

        def close(self):
            pass

    h = handler_class.__new__(handler_class)
    h.rfile = BytesIO(request)
    h.wfile = BytesIO()
    h.client_address = ("127.0.0.1", 8000)
    h.server = None
    h.request = MockSocket()
    h.raw_requestline = h.rfile.readline()
    h.parse_request()

    h.send_response = Mock()
    h.send_header = Mock()
    h.end_headers = Mock()
    return h


def read_json_response(h) -> Dict[str, Any]:
    h.wfile.seek(0)
    return json.loads(h.wfile.read().decode("utf-8"))
