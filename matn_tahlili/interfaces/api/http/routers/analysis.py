"""
===============================================================================
TARJETA CRC — routers/analysis.py
===============================================================================

Módulo:
    Endpoint de análisis (POST /api/analyze)

Responsabilidades:
    - Aceptar archivo (.txt / .docx, tope de bytes) o texto pegado.
      Si vienen ambos, gana el archivo.
    - Rechazar extensiones no soportadas ANTES de leer el cuerpo del archivo.
    - Extraer texto dentro del scope del archivo temporal (se borra siempre).
    - Delegar en AnalyzeDocumentUseCase y mapear a AnalyzeRes.

Colaboradores:
    - infrastructure.parsers (classify_source, extract_document, spooled_upload)
    - container.get_analyze_document_use_case
    - schemas.analysis
===============================================================================
"""

from __future__ import annotations

import asyncio
from pathlib import Path, PurePath

from fastapi import APIRouter, Depends, File, Form, UploadFile

from .....application.usecases import AnalyzeDocumentUseCase
from .....container import get_analyze_document_use_case
from .....crosscutting.config import get_settings
from .....crosscutting.exceptions import EmptyInputError, UnsupportedFormatError
from .....crosscutting.logger import logger
from .....domain.entities import Document, SourceFormat
from .....infrastructure.parsers import (
    SourceKind,
    classify_source,
    extract_document,
    spooled_upload,
)
from .....infrastructure.parsers.contracts import ExtractedText
from .....infrastructure.parsers.normalize import normalize_text
from ..schemas.analysis import AnalyzeRes, InputFormat, to_analyze_res

router = APIRouter(tags=["analysis"])


def _display_name(filename: str) -> str:
    """Nos quedamos con basename (algunos browsers mandan el path completo)."""
    return PurePath(filename.replace("\\", "/")).name


def _read_and_extract(path: Path, filename: str) -> ExtractedText:
    return extract_document(filename, path.read_bytes())


async def _document_from_upload(file: UploadFile) -> tuple[Document, InputFormat]:
    filename = file.filename or ""
    kind = classify_source(filename)
    if kind == SourceKind.UNSUPPORTED:
        raise UnsupportedFormatError(filename=filename)

    async with spooled_upload(file, get_settings().max_upload_bytes) as path:
        extracted = await asyncio.to_thread(_read_and_extract, path, filename)

    if extracted.warnings:
        logger.warning(
            "Extracción con avisos",
            extra={"source_kind": kind.value, "warnings": extracted.warnings},
        )

    is_docx = kind == SourceKind.RICH_DOCUMENT
    document = Document(
        raw_text=extracted.content,
        source_format=SourceFormat.RICH_TEXT if is_docx else SourceFormat.PLAIN,
        display_name=_display_name(filename),
    )
    return document, ("docx" if is_docx else "txt")


@router.post("/analyze", response_model=AnalyzeRes)
async def analyze(
    file: UploadFile | None = File(None),
    text: str | None = Form(None),
    use_case: AnalyzeDocumentUseCase = Depends(get_analyze_document_use_case),
):
    if file is not None and file.filename:
        document, input_format = await _document_from_upload(file)
    elif text:
        document = Document(raw_text=normalize_text(text))
        input_format = "text"
    else:
        raise EmptyInputError()

    result = await use_case.execute(document)
    return to_analyze_res(result, input_format=input_format)
