"""
Serverless entrypoint for Netlify Functions.

Netlify invokes `handler` with Lambda-style events; Mangum translates them
to ASGI requests for the application. The function is called directly from
the browser, so the CORS middleware wraps the whole application: every
response carries wildcard CORS headers, unhandled-error 500s included, and
preflight requests are answered before routing.

The lifespan protocol is off: each invocation may run in a fresh process,
and the connection pool is reclaimed with it.
"""

from mangum import Mangum

from ummah_api.core.middleware import CorsHeadersMiddleware
from ummah_api.main import create_app

app = create_app()
asgi_app = CorsHeadersMiddleware(app)

handler = Mangum(asgi_app, lifespan="off")
