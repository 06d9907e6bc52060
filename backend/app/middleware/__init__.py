"""
Layerpost Backend — Middleware Package
=======================================

Pipeline order for a request (outer → inner):

    [Static Assets] → [Request ID] → [Access Log] → [GZip] → [Body Decoder] → [Error Handler] → Routes

    1. Static Assets: answers /static/* itself; other paths continue
    2. Request ID: correlation ID for every later log line and error envelope
    3. Access Log: one line per request (health probes skipped)
    4. GZip: compresses responses on the way out
    5. Body Decoder: request.state.payload for POST/PUT/PATCH
    6. Error Handler: terminal catch-all, innermost so it runs last

Starlette executes middleware in reverse order of `add_middleware` calls;
`app.loaders.http.load_http` adds them innermost first.
"""
