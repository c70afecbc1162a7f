"""
Name: Fake Correction Oracle (Deterministic Test Double)

Qué es
------
Implementación determinista de `domain.services.CorrectionOracle` para tests/CI
y desarrollo local (FAKE_ORACLE=1). No realiza IO ni llama APIs externas.

Comportamiento
--------------
- Usa un diccionario de sustituciones `wrong -> correct`.
- structured: emite un JSON {"corrections": [...]} con las sustituciones cuyo
  `wrong` aparece en el chunk (pasa por el mismo parsing que el real).
- rewrite: devuelve el chunk con las sustituciones aplicadas.

Constraints:
  - Determinismo total: mismas entradas -> misma salida
"""

from __future__ import annotations

import json
from typing import Mapping

from ....domain.entities import Chunk
from .base import BaseCorrectionOracle

# R: Errores frecuentes (sin apóstrofos de la ortografía latina uzbeka).
DEFAULT_SUBSTITUTIONS: Mapping[str, str] = {
    "kitop": "kitob",
    "oqidim": "o'qidim",
    "notogri": "noto'g'ri",
    "togri": "to'g'ri",
}


class FakeCorrectionOracle(BaseCorrectionOracle):
    """R: Oráculo fake determinista."""

    def __init__(
        self,
        substitutions: Mapping[str, str] | None = None,
        *,
        protocol: str = "structured",
    ) -> None:
        super().__init__(protocol=protocol)
        self._substitutions = dict(
            DEFAULT_SUBSTITUTIONS if substitutions is None else substitutions
        )

    def _complete(self, chunk: Chunk) -> str:
        hits = [
            (wrong, correct)
            for wrong, correct in self._substitutions.items()
            if wrong and wrong in chunk.text
        ]

        if self.protocol == "rewrite":
            text = chunk.text
            for wrong, correct in hits:
                text = text.replace(wrong, correct)
            return text

        return json.dumps(
            {
                "corrections": [
                    {
                        "wrong": wrong,
                        "correct": correct,
                        "kind": "spelling",
                        "reason": "imlo xatosi",
                    }
                    for wrong, correct in hits
                ]
            },
            ensure_ascii=False,
        )
