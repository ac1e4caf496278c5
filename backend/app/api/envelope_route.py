"""Envelope Route — request/response encryption stage for envelope-enabled routers.

Invariants:
    - Inbound: a JSON object body with truthy `encrypted` and a `data` field is replaced
      by the decrypted structure before dependencies and validation run
    - Inbound decryption failure raises InvalidPayloadError (400); the handler never runs
    - Outbound: a JSON result with truthy `encrypted` and non-null `data` has `data`
      replaced by its sealed form; this is the last mutation to the body
    - Unflagged bodies pass through byte-for-byte

Design Decisions:
    - Custom APIRoute class over a global middleware: only routers that opt in
      (route_class=EnvelopeRoute) pay for or expose the envelope contract
    - Handlers return a plain dict carrying the flag; sealing happens here, after
      the handler and before the bytes leave, never by patching the response class
    - request.state.envelope_encrypted records that the client spoke in envelopes,
      so handlers can answer in kind
"""

import json
import logging
from typing import Any, Callable, Coroutine

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.types import Message

from app.core.envelope_cipher import (
    EnvelopeCipher, is_sealed_envelope, seal_body, wants_sealing,
)

logger = logging.getLogger(__name__)

ENCRYPTED_QUERY_PARAM = "encrypted"


def client_wants_encryption(request: Request) -> bool:
    """True if the request arrived sealed or asked for a sealed reply."""
    if getattr(request.state, "envelope_encrypted", False):
        return True
    return request.query_params.get(ENCRYPTED_QUERY_PARAM, "").lower() == "true"


def _replay(scope_request: Request, body: bytes) -> Request:
    """Rebuild the request so downstream readers see `body`."""
    sent = False

    async def receive() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await scope_request.receive()

    return Request(scope_request.scope, receive)


async def open_request_envelope(request: Request, cipher: EnvelopeCipher) -> Request:
    raw = await request.body()
    if not raw:
        return request
    try:
        body = json.loads(raw)
    except ValueError:
        # not JSON at all: let FastAPI's own body parsing report it
        return request
    if not is_sealed_envelope(body):
        return request

    plaintext = cipher.open(body["data"])
    request.state.envelope_encrypted = True
    return _replay(request, json.dumps(plaintext).encode("utf-8"))


def seal_response(response: Response, cipher: EnvelopeCipher) -> Response:
    if not isinstance(response, JSONResponse):
        return response
    try:
        body = json.loads(response.body)
    except ValueError:
        return response
    if not wants_sealing(body):
        return response

    sealed = JSONResponse(
        seal_body(body, cipher),
        status_code=response.status_code,
        background=response.background,
    )
    sealed.raw_headers.extend(
        (name, value) for name, value in response.raw_headers
        if name not in (b"content-length", b"content-type")
    )
    return sealed


class EnvelopeRoute(APIRoute):
    """APIRoute that opens inbound envelopes and seals flagged responses."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()

        async def envelope_route_handler(request: Request) -> Response:
            cipher: EnvelopeCipher = request.app.state.envelope_cipher
            request.state.envelope_encrypted = False
            request = await open_request_envelope(request, cipher)
            response = await original_route_handler(request)
            return seal_response(response, cipher)

        return envelope_route_handler
