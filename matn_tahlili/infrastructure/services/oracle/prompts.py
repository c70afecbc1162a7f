"""
Name: Instrucciones fijas del oráculo (por protocolo)

Responsabilidades:
  - Definir la instrucción de sistema para cada protocolo (rewrite / structured).
  - Versionar el prompt para observabilidad (logs).

Notas:
  - El texto del usuario NUNCA se interpola en la instrucción: va como contenido
    aparte en la llamada.
"""

from __future__ import annotations

PROMPT_VERSION = "v1"

REWRITE_INSTRUCTION = (
    "Matndagi imlo va grammatik xatolarni aniqlab, to‘g‘rilangan variantni qaytar. "
    "Faqat to‘g‘rilangan matnning o‘zini qaytar: izoh, sarlavha yoki qo‘shtirnoq "
    "qo‘shma. Xatosi yo‘q qismlarni, xat boshlari va tinish belgilarini o‘zgartirma."
)

STRUCTURED_INSTRUCTION = (
    "Matndagi imlo, grammatik va uslubiy xatolarni aniqla. Javobni FAQAT quyidagi "
    "JSON ko‘rinishida qaytar, boshqa hech narsa yozma:\n"
    '{"corrections": [{"wrong": "...", "correct": "...", '
    '"kind": "spelling|grammar|style", "reason": "..."}]}\n'
    "\"wrong\" matnda aynan qanday yozilgan bo‘lsa shunday bo‘lsin. "
    'Xato topilmasa {"corrections": []} qaytar.'
)

_INSTRUCTIONS = {
    "rewrite": REWRITE_INSTRUCTION,
    "structured": STRUCTURED_INSTRUCTION,
}


def instruction_for(protocol: str) -> str:
    """Instrucción de sistema para el protocolo dado (KeyError si no existe)."""
    return _INSTRUCTIONS[protocol]
