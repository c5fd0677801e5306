"""
prowgen: Violações canônicas de validação

Este módulo define o payload canônico de violação produzido pelo validator
de catálogos. Violações são artefatos de diagnóstico e devem ser:

- explícitas
- serializáveis
- acionáveis sem reexecutar em modo verboso (arquivo, job e campo)

Nenhuma violação é fatal isoladamente: o validator coleta todas antes de
qualquer materialização.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Violation:
    """
    Violação de regra detectada em um catálogo.

    Campos:
    - type: código estável da regra violada (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados (source, job, field, value, ...)
    - hint: ação sugerida ao autor do catálogo
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável da violação."""
        return asdict(self)

    def __str__(self) -> str:
        source = self.details.get("source")
        return f"{source}: {self.message}" if source else self.message


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de violação
# ---------------------------------------------------------------------------

# Identidade do catálogo
ORG_MISSING = "ORG_MISSING"
REPO_MISSING = "REPO_MISSING"

# Job
JOB_NAME_MISSING = "JOB_NAME_MISSING"
JOB_NAME_DUPLICATED = "JOB_NAME_DUPLICATED"
JOB_IMAGE_MISSING = "JOB_IMAGE_MISSING"
JOB_RESOURCE_UNKNOWN = "JOB_RESOURCE_UNKNOWN"
JOB_MODIFIER_INVALID = "JOB_MODIFIER_INVALID"
JOB_TYPE_INVALID = "JOB_TYPE_INVALID"
JOB_ARCHITECTURE_INVALID = "JOB_ARCHITECTURE_INVALID"
JOB_TIMEOUT_INVALID = "JOB_TIMEOUT_INVALID"
JOB_REPO_INVALID = "JOB_REPO_INVALID"
JOB_REQUIREMENT_UNKNOWN = "JOB_REQUIREMENT_UNKNOWN"

# Periodic
PERIODIC_SCHEDULE_CONFLICT = "PERIODIC_SCHEDULE_CONFLICT"
PERIODIC_SCHEDULE_MISSING = "PERIODIC_SCHEDULE_MISSING"
PERIODIC_CRON_INVALID = "PERIODIC_CRON_INVALID"
PERIODIC_INTERVAL_INVALID = "PERIODIC_INTERVAL_INVALID"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def missing_identity(*, source: str, field_name: str) -> Violation:
    return Violation(
        type=ORG_MISSING if field_name == "org" else REPO_MISSING,
        message=f"{field_name} must be set",
        details={"source": source, "field": field_name},
        hint=f"Declare '{field_name}' no topo do catálogo.",
    )


def invalid_choice(
    *,
    type: str,
    source: str,
    job: str,
    field_name: str,
    value: Any,
    allowed: List[str],
) -> Violation:
    return Violation(
        type=type,
        message=(
            f"'{value}' is not a valid {field_name} for job '{job}'. "
            f"Must be one of {', '.join(allowed)}"
        ),
        details={
            "source": source,
            "job": job,
            "field": field_name,
            "value": value,
            "allowed": list(allowed),
        },
        hint=f"Use apenas valores permitidos em '{field_name}'.",
    )


def job_violation(
    *,
    type: str,
    source: str,
    job: str,
    field_name: str,
    message: str,
    value: Any = None,
    hint: Optional[str] = None,
) -> Violation:
    details: Dict[str, Any] = {"source": source, "job": job, "field": field_name}
    if value is not None:
        details["value"] = value
    return Violation(type=type, message=message, details=details, hint=hint)
