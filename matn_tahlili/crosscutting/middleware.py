# matn_tahlili/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middlewares HTTP (contexto + límites de payload)
===============================================================================

Objetivo
--------
1) RequestContextMiddleware:
   - Generar/propagar request_id
   - Setear contextvars (method/path)
   - Log y métricas por request

2) BodyLimitMiddleware:
   - Defender la API de payloads gigantes (incluyendo chunked uploads)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Colaboradores:
  - matn_tahlili/context.py
  - crosscutting/metrics.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import ErrorCode, build_error_body
from .logger import logger
from .metrics import record_request_metrics


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RequestContextMiddleware

    Responsabilidades:
      - Generar/aceptar X-Request-Id
      - Setear contextvars para correlación de logs
      - Emitir logs y métricas por request
      - Restaurar el contexto previo al terminar (clear_context(token))
    ----------------------------------------------------------------------------
    """

    _QUIET_PATHS = {"/healthz", "/metrics"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get("x-request-id") or "").strip()
        request_id = (
            incoming if self._is_valid_request_id(incoming) else str(uuid.uuid4())
        )

        token = set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-Id"] = request_id
            return response
        except Exception:
            latency = time.perf_counter() - start
            logger.exception(
                "request falló",
                extra={"status_code": 500, "latency_ms": round(latency * 1000, 2)},
            )
            raise
        finally:
            latency = time.perf_counter() - start

            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=status_code,
                latency_seconds=latency,
            )

            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completado",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(latency * 1000, 2),
                    },
                )

            clear_context(token)

    @staticmethod
    def _is_valid_request_id(value: str) -> bool:
        # Aceptamos UUIDs y también ids cortos razonables.
        return bool(value) and len(value) <= 128


class _BodyTooLarge(Exception):
    pass


class BodyLimitMiddleware:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      BodyLimitMiddleware

    Responsabilidades:
      - Rechazar requests cuyo body exceda max_body_bytes
      - Funciona tanto con Content-Length como con transferencia chunked

    Nota:
      - El límite de upload (10MiB) se aplica además por archivo en el router;
        este middleware es la barrera gruesa (multipart incluye overhead).
      - Va dentro de RequestContextMiddleware para que el 413 lleve X-Request-Id.
    ----------------------------------------------------------------------------
    """

    def __init__(self, app, max_body_bytes: int | None = None):
        from .config import get_settings

        self.app = app
        self._max_bytes = (
            max_body_bytes
            if max_body_bytes is not None
            else get_settings().max_body_bytes
        )

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {k.decode().lower(): v.decode() for k, v in scope.get("headers", [])}
        path = scope.get("path", "")
        # RequestContextMiddleware (más externo) ya dejó el request_id en scope["state"]
        req_id = (
            (scope.get("state") or {}).get("request_id")
            or (headers.get("x-request-id") or "").strip()
            or str(uuid.uuid4())
        )

        cl = headers.get("content-length")
        if cl:
            try:
                if int(cl) > self._max_bytes:
                    logger.warning(
                        "payload demasiado grande (por content-length)",
                        extra={
                            "content_length": cl,
                            "max_bytes": self._max_bytes,
                            "path": path,
                        },
                    )
                    await self._send_413(send, request_id=req_id)
                    return
            except ValueError:
                # Content-Length inválido -> seguimos y controlamos por streaming
                pass

        started = False

        async def send_wrapper(message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        received = 0

        async def receive_limited():
            nonlocal received
            msg = await receive()
            if msg["type"] == "http.request":
                received += len(msg.get("body", b"") or b"")
                if received > self._max_bytes:
                    raise _BodyTooLarge()
            return msg

        try:
            await self.app(scope, receive_limited, send_wrapper)
        except _BodyTooLarge:
            # Si ya arrancó la respuesta, no podemos enviar otra sin romper el protocolo
            if started:
                logger.error(
                    "payload excedió límite luego de iniciar respuesta",
                    extra={"path": path},
                )
                raise
            logger.warning(
                "payload demasiado grande (streaming)",
                extra={
                    "received_bytes": received,
                    "max_bytes": self._max_bytes,
                    "path": path,
                },
            )
            await self._send_413(send, request_id=req_id)

    async def _send_413(self, send, *, request_id: str) -> None:
        max_mb = self._max_bytes / (1024 * 1024)
        body = json.dumps(
            build_error_body(
                code=ErrorCode.PAYLOAD_TOO_LARGE,
                detail=f"So'rov hajmi juda katta. Maksimal {max_mb:.0f}MB.",
                request_id=request_id,
            ),
            ensure_ascii=False,
        ).encode("utf-8")

        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"x-request-id", request_id.encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
