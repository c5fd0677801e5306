"""
prowgen: Exceções tipadas

Este módulo define as exceções internas levantadas pelos estágios de
expansão, validação, materialização e verificação de drift.

Objetivo:
- Permitir que cada estágio levante exceções semânticas tipadas
- Carregar contexto estruturado (arquivo, job, campo) em `details`
- Evitar ValueError/RuntimeError genéricos nos pontos de falha do compilador

Falhas de carregamento de documento vivem em `prowgen.core.config.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import Violation


@dataclass(eq=False)
class ProwgenException(Exception):
    """Base class para exceções internas do prowgen.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Expansão
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class MatrixDimensionNotFound(ProwgenException):
    """Job referencia uma dimensão que não está declarada na matrix do catálogo."""


# ---------------------------------------------------------------------------
# Validação
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class CatalogValidationError(ProwgenException):
    """Erro múltiplo: todas as violações coletadas de um catálogo."""

    violations: List[Violation] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  * {v}" for v in self.violations)
        return "\n".join(lines)


def raise_for_violations(source: str, violations: List[Violation]) -> None:
    """Levanta `CatalogValidationError` se houver ao menos uma violação."""
    if not violations:
        return
    raise CatalogValidationError(
        message=f"{source}: validation failed with {len(violations)} error(s)",
        details={"source": source, "count": len(violations)},
        hint="Corrija todas as violações listadas antes de regenerar os jobs.",
        violations=list(violations),
    )


# ---------------------------------------------------------------------------
# Materialização
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class JobNameTooLongError(ProwgenException):
    """Nome materializado excede o limite de identificadores da plataforma."""


@dataclass(eq=False)
class RequirementPresetNotFound(ProwgenException):
    """Requirement referenciado por um job não existe na tabela de presets."""


# ---------------------------------------------------------------------------
# Drift
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ConfigDriftError(ProwgenException):
    """Saída gerada difere do arquivo persistido (modo check)."""
