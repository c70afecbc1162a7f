"""
===============================================================================
ARCHIVO: uploads.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Ciclo de vida de uploads (archivo temporal acotado)

Responsabilidades:
    - Volcar un UploadFile a un archivo temporal leyendo por bloques (anti OOM).
    - Aplicar el límite duro de bytes (OversizedInputError).
    - Borrar el temporal en TODA salida: éxito, error o cancelación.

Colaboradores:
    - interfaces/api/http/routers/analysis.py
    - crosscutting.exceptions.OversizedInputError
===============================================================================
"""

from __future__ import annotations

import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path, PurePath
from typing import AsyncIterator, Protocol

from ...crosscutting.exceptions import OversizedInputError
from ...crosscutting.logger import logger

_READ_BLOCK = 1024 * 1024  # 1MB


class AsyncReadable(Protocol):
    filename: str | None

    async def read(self, size: int = -1) -> bytes: ...


@asynccontextmanager
async def spooled_upload(
    upload: AsyncReadable, max_bytes: int
) -> AsyncIterator[Path]:
    """
    Adquiere el upload como archivo temporal y lo libera al salir del scope.

    Uso:
        async with spooled_upload(file, settings.max_upload_bytes) as path:
            content = path.read_bytes()
    """
    suffix = PurePath(upload.filename or "").suffix.lower()
    fd, name = tempfile.mkstemp(prefix="matn-", suffix=suffix)
    path = Path(name)
    total = 0

    try:
        with os.fdopen(fd, "wb") as out:
            while True:
                piece = await upload.read(_READ_BLOCK)
                if not piece:
                    break
                total += len(piece)
                if total > max_bytes:
                    raise OversizedInputError(
                        limit_name="upload_bytes", actual=total, maximum=max_bytes
                    )
                out.write(piece)

        logger.info("upload recibido", extra={"upload_bytes": total})
        yield path
    finally:
        path.unlink(missing_ok=True)
