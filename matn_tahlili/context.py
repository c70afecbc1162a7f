"""
===============================================================================
TARJETA CRC — matn_tahlili/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar el contexto del request de análisis/export en un único ContextVar
    (request_id, método, path) como snapshot inmutable.
  - Exponerlo a logs y handlers sin pasarlo por el pipeline de corrección.

Colaboradores:
  - crosscutting.middleware.RequestContextMiddleware (bind / reset)
  - crosscutting.logger (_ContextFilter)

Notas:
  - asyncio.to_thread copia el contexto: los logs del oráculo emitidos en
    threads mantienen el request_id del request que los originó.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("matn_request", default=_EMPTY)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> Token:
    """Publica el contexto del request; devuelve el token para `clear_context`."""
    return _current.set(
        RequestContext(request_id=request_id, method=method, path=path)
    )


def current_request_id() -> str:
    return _current.get().request_id


def get_context_dict() -> dict[str, str]:
    """Campos no vacíos del contexto actual (para enriquecer logs)."""
    return {k: v for k, v in asdict(_current.get()).items() if v}


def clear_context(token: Token | None = None) -> None:
    # Con token se restaura el valor previo; sin token se vacía.
    if token is not None:
        _current.reset(token)
    else:
        _current.set(_EMPTY)
