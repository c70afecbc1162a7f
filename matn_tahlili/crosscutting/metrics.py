"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus): observabilidad de bajo acoplamiento

Responsabilidades:
    - Definir métricas Prometheus en un registry propio.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO texto del usuario, NO nombres de archivo).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - infrastructure/services/oracle: latencia y fallas del oráculo.
    - application/usecases: exportaciones por formato.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# ------------------------
# HTTP
# ------------------------
_requests_total = Counter(
    "matn_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)
_request_latency = Histogram(
    "matn_request_latency_seconds",
    "Latencia de requests HTTP",
    ["endpoint", "method"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60),
    registry=_registry,
)

# ------------------------
# Oráculo de corrección
# ------------------------
_oracle_latency = Histogram(
    "matn_oracle_call_seconds",
    "Latencia por llamada al oráculo (por chunk)",
    ["protocol"],
    buckets=(0.25, 0.5, 1, 2, 5, 10, 20, 40, 90),
    registry=_registry,
)
_oracle_failures_total = Counter(
    "matn_oracle_failures_total",
    "Llamadas al oráculo que fallaron luego de los reintentos",
    ["protocol"],
    registry=_registry,
)
_oracle_malformed_total = Counter(
    "matn_oracle_malformed_responses_total",
    "Respuestas estructuradas que no se pudieron interpretar",
    registry=_registry,
)
_chunks_per_document = Histogram(
    "matn_chunks_per_document",
    "Cantidad de chunks por análisis",
    buckets=(1, 2, 4, 8, 16, 32, 64, 128),
    registry=_registry,
)

# ------------------------
# Export
# ------------------------
_exports_total = Counter(
    "matn_exports_total",
    "Exportaciones generadas",
    ["format"],
    registry=_registry,
)


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP.

    - endpoint se normaliza para no explotar cardinalidad.
    - status se agrupa por 2xx/4xx/5xx.
    """
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def observe_oracle_latency(protocol: str, seconds: float) -> None:
    _oracle_latency.labels(protocol=protocol).observe(seconds)


def record_oracle_failure(protocol: str) -> None:
    _oracle_failures_total.labels(protocol=protocol).inc()


def record_malformed_oracle_response(count: int = 1) -> None:
    _oracle_malformed_total.inc(count)


def observe_chunks_per_document(count: int) -> None:
    _chunks_per_document.observe(count)


def record_export(export_format: str) -> None:
    _exports_total.labels(format=export_format).inc()


# -----------------------------------------------------------------------------
# Helpers internos
# -----------------------------------------------------------------------------


def _normalize_endpoint(path: str) -> str:
    """Normaliza paths para evitar cardinalidad alta (IDs numéricos -> {id})."""
    return re.sub(r"/\d+", "/{id}", path)


def _status_bucket(code: int) -> str:
    """Agrupa status code para baja cardinalidad."""
    if 200 <= code < 300:
        return "2xx"
    if 400 <= code < 500:
        return "4xx"
    if 500 <= code < 600:
        return "5xx"
    return "other"


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
