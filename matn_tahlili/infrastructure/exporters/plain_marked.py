"""
Name: Export de texto plano con marcadores

Formato:
  - removed -> ~~texto~~
  - added   -> [[texto]]
  - same    -> sin marcar
  - `\`, `~`, `[` y `]` dentro del texto de un run se escapan con `\`
    (el original puede contener "~5~" o "[[x]]" literales).

strip_markers() recupera el texto corregido (descarta removed, desenvuelve added,
quita los escapes).
"""

from __future__ import annotations

import re
from typing import Sequence

from ...domain.entities import AnnotatedRun, RunKind

REMOVED_OPEN, REMOVED_CLOSE = "~~", "~~"
ADDED_OPEN, ADDED_CLOSE = "[[", "]]"

_SPECIAL = re.compile(r"([\\~\[\]])")
_ESCAPED = re.compile(r"\\(.)", re.DOTALL)

# Orden de alternativas = prioridad del scanner.
_MARKED = re.compile(
    r"~~(?P<removed>(?:\\.|[^\\~])*)~~"
    r"|\[\[(?P<added>(?:\\.|[^\\\[\]])*)\]\]"
    r"|\\(?P<escaped>.)"
    r"|(?P<plain>[^\\~\[\]]+|.)",
    re.DOTALL,
)


def escape_run_text(text: str) -> str:
    return _SPECIAL.sub(r"\\\1", text)


def unescape_run_text(text: str) -> str:
    return _ESCAPED.sub(r"\1", text)


def render_plain_marked(runs: Sequence[AnnotatedRun]) -> str:
    parts: list[str] = []
    for run in runs:
        text = escape_run_text(run.text)
        if run.kind == RunKind.REMOVED:
            parts.append(f"{REMOVED_OPEN}{text}{REMOVED_CLOSE}")
        elif run.kind == RunKind.ADDED:
            parts.append(f"{ADDED_OPEN}{text}{ADDED_CLOSE}")
        else:
            parts.append(text)
    return "".join(parts)


def strip_markers(marked: str) -> str:
    """
    Inversa de render_plain_marked hacia el texto corregido.

    Marcadores sueltos sin cerrar (texto editado a mano) se conservan literales.
    """
    out: list[str] = []
    for match in _MARKED.finditer(marked):
        if match.group("removed") is not None:
            continue
        if match.group("added") is not None:
            out.append(unescape_run_text(match.group("added")))
        elif match.group("escaped") is not None:
            out.append(match.group("escaped"))
        else:
            out.append(match.group("plain"))
    return "".join(out)


def export_plain_marked(runs: Sequence[AnnotatedRun]) -> bytes:
    return render_plain_marked(runs).encode("utf-8")
