"""
===============================================================================
TARJETA CRC — application/differ.py
===============================================================================

Módulo:
    Diff estructural a nivel palabra -> AnnotatedRun[]

Responsabilidades:
    - Tokenizar en palabras, signos de puntuación sueltos y corridas de
      whitespace (el whitespace es su propio token: reconstrucción exacta).
    - Alinear con difflib.SequenceMatcher (bloques comunes más largos primero,
      determinista; autojunk desactivado para no descartar tokens frecuentes).
    - SequenceMatcher es una heurística de bloque común más largo, no un LCS
      exacto: en textos muy editados puede conservar un token `same` menos que
      el óptimo. Se acepta; la reconstrucción dual sigue siendo exacta.
    - Convertir opcodes en runs same/removed/added y coalescer runs contiguos
      del mismo tipo.

Garantías:
    - same+removed == original ; same+added == corregido (exacto).
    - diff(X, X) -> un único run `same` (cero si X == "").
    - Función pura.

Colaboradores:
    - domain.entities.AnnotatedRun / RunKind
===============================================================================
"""

from __future__ import annotations

import re
from difflib import SequenceMatcher

from ..domain.entities import AnnotatedRun, RunKind

_TOKEN = re.compile(r"\s+|[\w'‘’ʻʼ`-]+|[^\w\s]")


def tokenize(text: str) -> list[str]:
    """"".join(tokenize(t)) == t para cualquier t."""
    return _TOKEN.findall(text)


def _append(runs: list[AnnotatedRun], text: str, kind: RunKind) -> None:
    if not text:
        return
    if runs and runs[-1].kind == kind:
        runs[-1] = AnnotatedRun(text=runs[-1].text + text, kind=kind)
    else:
        runs.append(AnnotatedRun(text=text, kind=kind))


def diff(original: str, corrected: str) -> list[AnnotatedRun]:
    a = tokenize(original)
    b = tokenize(corrected)

    matcher = SequenceMatcher(None, a, b, autojunk=False)
    runs: list[AnnotatedRun] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _append(runs, "".join(a[i1:i2]), RunKind.SAME)
            continue
        # replace = removed seguido de added
        if tag in ("delete", "replace"):
            _append(runs, "".join(a[i1:i2]), RunKind.REMOVED)
        if tag in ("insert", "replace"):
            _append(runs, "".join(b[j1:j2]), RunKind.ADDED)

    return runs
