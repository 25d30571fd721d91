"""
CORS middleware for the serverless deployment.

The function is called directly by browsers from the Netlify-hosted
frontend, so every response carries permissive CORS headers and preflight
requests are answered before any route logic runs.

This is a plain ASGI middleware rather than a `BaseHTTPMiddleware`: it
rewrites the `http.response.start` message, so wrapping it around the whole
application also covers the 500 responses sent by Starlette's
`ServerErrorMiddleware`.
"""

from fastapi import Response, status
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
ALLOWED_HEADERS = ("Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization")


class CorsHeadersMiddleware:
    """
    Middleware that adds wildcard CORS headers to all HTTP responses.

    Headers added:
    - Access-Control-Allow-Origin: *
    - Access-Control-Allow-Methods: fixed method list
    - Access-Control-Allow-Headers: fixed header list

    `OPTIONS` requests short-circuit with an empty 200 response.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origin: str = "*",
        allow_methods: tuple[str, ...] = ALLOWED_METHODS,
        allow_headers: tuple[str, ...] = ALLOWED_HEADERS,
    ) -> None:
        self.app = app
        self.cors_headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ", ".join(allow_methods),
            "Access-Control-Allow-Headers": ", ".join(allow_headers),
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            preflight = Response(status_code=status.HTTP_200_OK, headers=self.cors_headers)
            await preflight(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.update(self.cors_headers)
            await send(message)

        await self.app(scope, receive, send_with_cors)
