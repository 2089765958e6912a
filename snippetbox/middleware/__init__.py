"""
Snippetbox — Middleware Package
=================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Security Headers] → [Session]
            → [Panic Recovery] → Route

    1. Request ID: correlation ID available to everything below it
    2. Logging: records the final status and duration, request ID included
    3. Security Headers: applied to every response a handler produces,
       including redirects raised by the auth gate and recovered 500s
    4. Session: loads session data for the handler and saves it afterwards
    5. Panic Recovery: turns an exception escaping a route into a plain 500,
       so the layers above still see an ordinary response

Responses travel back through the chain in reverse order.
"""
