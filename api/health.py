"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from src.services.dispatcher import list_operations
from src.utils.settings import AppConfig


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        """Report liveness and the operations this deployment serves."""
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        response = json.dumps({
            "status": "ok",
            "service": AppConfig.SERVICE_NAME,
            "operations": list_operations(),
        })
        self.wfile.write(response.encode('utf-8'))

    def do_POST(self):
        """Handle POST request (same as GET for health check)."""
        self.do_GET()
