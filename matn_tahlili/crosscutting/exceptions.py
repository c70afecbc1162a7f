# matn_tahlili/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del servicio (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" y corta (se muestra tal cual en la UI)

Taxonomía
---------
  TextCheckError
    ├─ EmptyInputError            (400) no hay texto utilizable
    ├─ UnsupportedFormatError     (400) extensión no soportada
    ├─ OversizedInputError        (413) excede límite de tamaño
    ├─ OracleError                (500) el corrector externo falló
    ├─ MalformedOracleResponseError (nunca llega al cliente)
    └─ EmptyExportError           (400) export sin runs

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  TextCheckError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a respuestas JSON)
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class TextCheckError(Exception):
    """Base para errores internos del sistema (error_code + error_id + message)."""

    error_code: str = "INTERNAL_ERROR"
    default_message: str = "Server xatosi"

    def __init__(
        self,
        message: str | None = None,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message or self.default_message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(self.message)


class EmptyInputError(TextCheckError):
    """No quedó texto utilizable luego de la ingesta."""

    error_code: str = "EMPTY_INPUT"
    default_message: str = "Matn topilmadi"


class UnsupportedFormatError(TextCheckError):
    """La extensión del archivo no está soportada (solo .txt / .docx)."""

    error_code: str = "UNSUPPORTED_FORMAT"
    default_message: str = "Faqat TXT yoki DOCX fayl yuklang."

    def __init__(self, filename: str = "", **kwargs):
        super().__init__(**kwargs)
        self.filename = filename


class OversizedInputError(TextCheckError):
    """El upload o el texto excede el límite configurado."""

    error_code: str = "PAYLOAD_TOO_LARGE"

    def __init__(self, *, limit_name: str, actual: int, maximum: int, **kwargs):
        kwargs.setdefault("message", _oversized_message(limit_name, maximum))
        super().__init__(**kwargs)
        self.limit_name = limit_name
        self.actual = actual
        self.maximum = maximum


class OracleError(TextCheckError):
    """
    El oráculo de corrección falló para un chunk (red, rate limit, non-2xx).

    chunk_index permite al caller decidir (abortar o conservar el chunk).
    """

    error_code: str = "ORACLE_ERROR"
    default_message: str = "Tahlil xizmati bilan bog'lanib bo'lmadi"

    def __init__(self, chunk_index: int, **kwargs):
        super().__init__(**kwargs)
        self.chunk_index = chunk_index


class MalformedOracleResponseError(TextCheckError):
    """
    La respuesta estructurada del oráculo no se pudo interpretar.

    Nunca es fatal: el adapter la degrada a cero correcciones para ese chunk.
    """

    error_code: str = "MALFORMED_ORACLE_RESPONSE"

    def __init__(self, raw: str = "", **kwargs):
        super().__init__(**kwargs)
        self.raw = raw


class EmptyExportError(TextCheckError):
    """Se pidió exportar una secuencia de runs vacía."""

    error_code: str = "EMPTY_EXPORT"
    default_message: str = "Eksport uchun natija yo'q"


def _oversized_message(limit_name: str, maximum: int) -> str:
    if limit_name == "upload_bytes":
        return f"Fayl juda katta. Maksimal {maximum / (1024 * 1024):.0f}MB."
    return f"Matn juda uzun. Maksimal {maximum} belgi."
