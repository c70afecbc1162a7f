"""matn_tahlili.infrastructure.services.retry

Name: Retry Policy (exponential backoff + jitter)

Qué es
------
Política de **resiliencia** para las llamadas al oráculo de corrección.
  - Clasificación de errores: **transient** (reintentar) vs **permanent** (fail-fast)
  - `RetryPolicy`: objeto explícito (intentos, backoff, predicado) que se
    inyecta en el adapter; el pipeline no sabe nada de reintentos.
  - Decorator de `tenacity` construido desde la política.

CRC (Component Card)
--------------------
Component: RetryPolicy
Responsibilities:
  - Decidir qué errores son reintentables
  - Construir el decorator tenacity con backoff+jitter
  - Loguear cada intento (before_sleep)
Collaborators:
  - tenacity (motor de retry)
  - crosscutting.config.Settings (attempts/delays)
  - infrastructure/services/oracle/google_oracle.py (consumidor)
Constraints:
  - Reintentar SOLO errores transitorios (429, 5xx, timeouts, conexión)
  - No reintentar errores permanentes (400, 401, 403, 404)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ...crosscutting.config import Settings
from ...crosscutting.logger import logger

T = TypeVar("T")

# R: HTTP status codes que indican fallas transitorias (reintentables)
TRANSIENT_HTTP_CODES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504})

# R: HTTP status codes que indican fallas permanentes (no reintentar)
PERMANENT_HTTP_CODES: frozenset[int] = frozenset({400, 401, 403, 404})

_TRANSIENT_NAME_PATTERNS = (
    "timeout",
    "timedout",
    "connection",
    "connect",
    "unavailable",
    "resourceexhausted",
    "deadline",
)

_TRANSIENT_MESSAGE_PATTERNS = (
    "rate limit",
    "too many requests",
    "quota exceeded",
    "resource_exhausted",
    "temporarily unavailable",
    "service unavailable",
    "connection reset",
    "connection refused",
    "timed out",
    "deadline exceeded",
)


def get_http_status_code(exception: BaseException) -> int | None:
    """R: Extrae un status code HTTP desde distintos tipos de exception.

    Soporta (best-effort):
      - google.genai.errors.APIError (atributo `code`)
      - httpx.HTTPStatusError (exception.response.status_code)
      - excepciones que expongan `status_code`
    """
    code = getattr(exception, "code", None)
    # R: `code` puede ser un status gRPC (< 100); solo aceptamos códigos HTTP.
    if isinstance(code, int) and code >= 100:
        return code

    resp = getattr(exception, "response", None)
    status_code = getattr(resp, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    status_code = getattr(exception, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    return None


def is_transient_error(exception: BaseException) -> bool:
    """R: Decide si un error es transitorio (reintentar) o permanente (fail-fast).

    Reglas (en orden):
      1) Status code HTTP: permanent -> False, transient -> True.
      2) Timeouts / errores de conexión built-in -> True.
      3) Heurística por nombre de clase y por mensaje.
      4) Default: False (no reintentamos lo desconocido).
    """
    status_code = get_http_status_code(exception)
    if status_code is not None:
        if status_code in PERMANENT_HTTP_CODES:
            return False
        if status_code in TRANSIENT_HTTP_CODES:
            return True

    if isinstance(exception, (TimeoutError, ConnectionError)):
        return True

    exception_name = type(exception).__name__.lower()
    if any(p in exception_name for p in _TRANSIENT_NAME_PATTERNS):
        return True

    message = str(exception).lower()
    return any(p in message for p in _TRANSIENT_MESSAGE_PATTERNS)


def _log_retry(retry_state: RetryCallState) -> None:
    """R: Loguea cada intento antes de dormir (before_sleep)."""
    fn = getattr(retry_state, "fn", None)
    wait_time = (
        retry_state.next_action.sleep if retry_state.next_action is not None else 0
    )
    exc = retry_state.outcome.exception() if retry_state.outcome else None

    logger.warning(
        "Reintentando llamada externa",
        extra={
            "function": getattr(fn, "__name__", "unknown"),
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(float(wait_time), 2),
            "error": str(exc) if exc else None,
            "error_type": type(exc).__name__ if exc else None,
        },
    )


@dataclass(frozen=True)
class RetryPolicy:
    """
    Política de reintentos por chunk.

    Atributos:
      max_attempts: intentos totales (1 = sin reintentos)
      base_delay: espera inicial del backoff exponencial (segundos)
      max_delay: techo de espera (segundos)
      is_retryable: predicado de clasificación de errores
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    is_retryable: Callable[[BaseException], bool] = field(
        default=is_transient_error, compare=False
    )

    def __post_init__(self) -> None:
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        if self.max_delay <= 0:
            raise ValueError("max_delay must be > 0")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay_seconds,
            max_delay=settings.retry_max_delay_seconds,
        )

    def decorator(self) -> Callable[[Callable[..., T]], Callable[..., T]]:
        """R: Decorator tenacity (stop + wait exponencial con jitter + predicado)."""
        return retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.base_delay,
                max=self.max_delay,
                jitter=self.base_delay,
            ),
            retry=retry_if_exception(self.is_retryable),
            before_sleep=_log_retry,
            reraise=True,
        )

    def call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Ejecuta `fn` bajo la política (reraise de la última excepción)."""
        return self.decorator()(fn)(*args, **kwargs)
