"""
Name: Google Gemini Correction Oracle (Adapter)

Qué hace
--------
Implementación concreta de `domain.services.CorrectionOracle` usando Google GenAI.
  - Una llamada por chunk con instrucción fija (por protocolo) como system prompt
  - Reintenta errores transitorios según la RetryPolicy inyectada (tenacity)
  - En protocolo structured pide `application/json` al modelo

Arquitectura
------------
- Capa: Infrastructure
- Rol: Adapter hacia un proveedor externo (Google GenAI)
- El cliente `genai.Client` es un handle de proceso, de solo lectura, que
  construye el composition root y se inyecta aquí.

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: GoogleCorrectionOracle
Responsibilities:
  - Traducir Chunk -> generate_content(...)
  - Aplicar retry sólo a la llamada al SDK
Collaborators:
  - google.genai.Client: SDK externo
  - retry.RetryPolicy: resiliencia
  - base.BaseCorrectionOracle: métricas + interpretación por protocolo
"""

from __future__ import annotations

from google import genai
from google.genai import types

from ....crosscutting.exceptions import OracleError
from ....crosscutting.logger import logger
from ....domain.entities import Chunk
from ..retry import RetryPolicy
from .base import BaseCorrectionOracle
from .prompts import PROMPT_VERSION, instruction_for


class GoogleCorrectionOracle(BaseCorrectionOracle):
    """R: Oráculo de corrección sobre Gemini (por defecto gemini-1.5-flash)."""

    DEFAULT_MODEL_ID = "gemini-1.5-flash"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        model_id: str | None = None,
        protocol: str = "structured",
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """
        R: Inicializa el adapter (preferible vía DI).

        Raises:
            OracleError: si no hay API key y no se inyectó `client`.
        """
        super().__init__(protocol=protocol)

        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleCorrectionOracle: GOOGLE_API_KEY not configured")
            raise OracleError(chunk_index=-1, message="GOOGLE_API_KEY sozlanmagan")

        self._client = client or genai.Client(api_key=resolved_key)
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()
        self._retry_policy = retry_policy or RetryPolicy()

        # R: Preconstruimos el wrapper con retry (no una closure por llamada).
        self._generate_content = self._retry_policy.decorator()(
            self._client.models.generate_content
        )
        self._config = types.GenerateContentConfig(
            system_instruction=instruction_for(self.protocol),
            temperature=0.0,
            response_mime_type=(
                "application/json" if self.protocol == "structured" else "text/plain"
            ),
        )

        logger.info(
            "GoogleCorrectionOracle initialized",
            extra={
                "model_id": self._model_id,
                "protocol": self.protocol,
                "prompt_version": PROMPT_VERSION,
                "max_attempts": self._retry_policy.max_attempts,
            },
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def _complete(self, chunk: Chunk) -> str:
        response = self._generate_content(
            model=self._model_id, contents=chunk.text, config=self._config
        )
        text = getattr(response, "text", "") or ""

        logger.info(
            "GoogleCorrectionOracle: chunk corregido",
            extra={
                "chunk_index": chunk.index,
                "chunk_chars": len(chunk.text),
                "response_chars": len(text),
                "protocol": self.protocol,
            },
        )
        return text
