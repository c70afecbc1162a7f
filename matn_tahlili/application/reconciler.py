"""
===============================================================================
TARJETA CRC — application/reconciler.py
===============================================================================

Módulo:
    Reconciliación de la salida del oráculo sobre el texto original

Responsabilidades:
    - FullText: adoptar el texto reescrito tal cual.
    - Records: aplicar cada registro (no-op descartado) en orden, sobre la copia
      de trabajo resultante del registro anterior.
    - Nunca tocar texto fuera de los spans encontrados; nunca fallar si `wrong`
      no aparece.

Reglas de búsqueda:
    - `wrong` de un solo token (letras / apóstrofos / guiones, sin espacios):
      sólo ocurrencias NO pegadas a otras letras ("yer" no toca "yerda").
    - Cualquier otro `wrong`: substring literal, sin anclas.
    - Todas las ocurrencias se reemplazan en una pasada; el reemplazo es literal
      (sin expansión de backreferences).

Colaboradores:
    - domain.entities (OracleOutcome, CorrectionRecord)
    - application/usecases/analyze_document.py
===============================================================================
"""

from __future__ import annotations

import re
from typing import Iterable

from ..domain.entities import CorrectionRecord, FullText, OracleOutcome, Records

# Letra = carácter de palabra que no es dígito ni "_" (incluye ʻ ʼ, que son Lm).
_LETTER = r"[^\W\d_]"
_SINGLE_TOKEN = re.compile(rf"(?:{_LETTER}|['‘’ʻʼ`-])+")


def is_single_token(wrong: str) -> bool:
    return _SINGLE_TOKEN.fullmatch(wrong) is not None


def _boundary_pattern(wrong: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!{_LETTER}){re.escape(wrong)}(?!{_LETTER})")


def apply_record(text: str, record: CorrectionRecord) -> str:
    """Aplica un registro; devuelve el texto sin cambios si no hay match."""
    if record.is_noop:
        return text

    if is_single_token(record.wrong):
        return _boundary_pattern(record.wrong).sub(lambda _m: record.correct, text)
    return text.replace(record.wrong, record.correct)


def applied_records(
    original: str, records: Iterable[CorrectionRecord]
) -> tuple[str, list[CorrectionRecord]]:
    """
    Aplica los registros en orden y reporta cuáles cambiaron el texto.

    Returns:
        (texto reconciliado, registros efectivamente aplicados)
    """
    text = original
    applied: list[CorrectionRecord] = []
    for record in records:
        updated = apply_record(text, record)
        if updated != text:
            applied.append(record)
            text = updated
    return text, applied


def reconcile_detailed(
    original: str, outcome: OracleOutcome
) -> tuple[str, list[CorrectionRecord]]:
    """
    Texto corregido para un chunk más los registros que lo cambiaron.

    FullText no trae registros: la lista queda vacía.
    """
    if isinstance(outcome, FullText):
        return outcome.text, []
    if isinstance(outcome, Records):
        return applied_records(original, outcome.records)
    raise TypeError(f"OracleOutcome desconocido: {type(outcome).__name__}")


def reconcile(original: str, outcome: OracleOutcome) -> str:
    """Texto corregido para un chunk, según el resultado del oráculo."""
    return reconcile_detailed(original, outcome)[0]
