"""
===============================================================================
MÓDULO: Logger estructurado para el pipeline de corrección
===============================================================================

Objetivo
--------
Cada línea de log es un objeto JSON correlacionable por request_id. El texto
del usuario (documentos, chunks, correcciones) NUNCA se vuelca: se resume
como {"chars": n, "sha256": prefijo}, suficiente para correlacionar dos logs
del mismo texto sin exponerlo.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  _ContextFilter + _TextSummarizer + JSONFormatter + setup_logger()

Responsabilidades:
  - Inyectar request_id / method / path desde matn_tahlili.context
  - Resumir campos con texto de usuario y ocultar la API key del oráculo
  - Serializar a JSON (o a una línea legible con LOG_JSON=false)

Colaboradores:
  - matn_tahlili/context.py
  - crosscutting/config.py (LOG_LEVEL / LOG_JSON, leídos del entorno)
===============================================================================
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from ..context import get_context_dict

# Claves de `extra` que transportan texto del usuario.
TEXT_KEYS: frozenset[str] = frozenset(
    {"text", "original", "corrected", "raw_text", "content", "wrong", "correct", "body"}
)

SECRET_KEYS: frozenset[str] = frozenset({"google_api_key", "api_key"})

_CONTEXT_FIELDS = ("request_id", "method", "path")

# Atributos estándar de LogRecord (todo lo demás vino por `extra`).
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", *_CONTEXT_FIELDS}


class _ContextFilter(logging.Filter):
    """Copia el contexto del request al record sin pisar `extra` explícitos."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_context_dict()
        for name in _CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, ctx.get(name, "-"))
        return True


class _TextSummarizer:
    """Reemplaza texto de usuario por un resumen y oculta secretos."""

    def __init__(self, max_str: int = 300):
        self._max_str = max_str

    @staticmethod
    def summarize_text(value: str) -> dict[str, Any]:
        digest = hashlib.sha256(value.encode("utf-8", "replace")).hexdigest()
        return {"chars": len(value), "sha256": digest[:12]}

    def clean(self, key: str, value: Any) -> Any:
        lowered = key.lower()
        if lowered in SECRET_KEYS:
            return "***"
        if lowered in TEXT_KEYS:
            return self._summarize_any(value)
        if isinstance(value, str) and len(value) > self._max_str:
            return value[: self._max_str] + "…"
        if isinstance(value, (bytes, bytearray)):
            return f"<{len(value)} bytes>"
        return value

    def _summarize_any(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.summarize_text(value)
        if isinstance(value, (list, tuple)):
            return {"items": len(value)}
        return "<omitido>"


class JSONFormatter(logging.Formatter):
    """LogRecord -> una línea JSON (timestamp UTC, nivel, contexto, extra)."""

    def __init__(self) -> None:
        super().__init__()
        self._cleaner = _TextSummarizer()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }
        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, "-")
            if value and value != "-":
                payload[name] = value

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                payload[key] = self._cleaner.clean(key, value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(name: str = "matn-tahlili") -> logging.Logger:
    """
    Logger del servicio (idempotente).

    Lee LOG_LEVEL / LOG_JSON del entorno: el logger se importa antes de que
    Settings pueda validarse (p.ej. sin GOOGLE_API_KEY).
    """
    log = logging.getLogger(name)
    level = (os.getenv("LOG_LEVEL") or "INFO").upper()
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        use_json = (os.getenv("LOG_JSON") or "true").strip().lower() not in {
            "0",
            "false",
            "no",
        }
        handler = logging.StreamHandler(sys.stdout)
        handler.addFilter(_ContextFilter())
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s [%(request_id)s] %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
