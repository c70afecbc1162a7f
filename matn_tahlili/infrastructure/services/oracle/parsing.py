"""
Name: Parsing tolerante de respuestas estructuradas del oráculo

Responsabilidades:
  - Convertir el cuerpo de respuesta en CorrectionRecord[].
  - Tolerar bloques ```json ... ``` y texto alrededor del objeto JSON.
  - Descartar ítems malformados sin invalidar el resto.

Colaboradores:
  - domain.entities.CorrectionRecord / CorrectionKind
  - crosscutting.exceptions.MalformedOracleResponseError

Contrato:
  - parse_structured_response() levanta MalformedOracleResponseError SOLO si el
    cuerpo completo no es interpretable. El adapter la degrada a cero
    correcciones; nunca llega al cliente.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ....crosscutting.exceptions import MalformedOracleResponseError
from ....domain.entities import CorrectionKind, CorrectionRecord

_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


def _strip_fences(body: str) -> str:
    match = _FENCE.search(body)
    return match.group(1).strip() if match else body.strip()


def _load_json(body: str) -> Any:
    candidate = _strip_fences(body)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass

    # R: Último recurso: el primer objeto {...} embebido en texto libre.
    start, end = candidate.find("{"), candidate.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(candidate[start : end + 1])
        except json.JSONDecodeError:
            pass

    raise MalformedOracleResponseError(
        raw=body, message="Oracle javobini JSON sifatida o'qib bo'lmadi"
    )


def _coerce_kind(value: Any) -> CorrectionKind:
    try:
        return CorrectionKind(str(value).strip().lower())
    except ValueError:
        return CorrectionKind.GRAMMAR


def _to_record(item: Any) -> CorrectionRecord | None:
    if not isinstance(item, dict):
        return None
    wrong, correct = item.get("wrong"), item.get("correct")
    if not isinstance(wrong, str) or not isinstance(correct, str):
        return None
    reason = item.get("reason")
    return CorrectionRecord(
        wrong=wrong,
        correct=correct,
        kind=_coerce_kind(item.get("kind")),
        reason=reason if isinstance(reason, str) else "",
    )


def parse_structured_response(body: str) -> tuple[list[CorrectionRecord], int]:
    """
    Devuelve (records, descartados).

    Acepta tanto {"corrections": [...]} como una lista desnuda [...].
    """
    if not (body or "").strip():
        raise MalformedOracleResponseError(raw=body or "", message="Bo'sh javob")

    data = _load_json(body)
    items = data.get("corrections") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise MalformedOracleResponseError(
            raw=body, message="Javobda 'corrections' ro'yxati yo'q"
        )

    records: list[CorrectionRecord] = []
    dropped = 0
    for item in items:
        record = _to_record(item)
        if record is None:
            dropped += 1
        else:
            records.append(record)
    return records, dropped
