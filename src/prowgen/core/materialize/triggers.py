"""Padrões de trigger de presubmits (comentários `/test ...`)."""

from __future__ import annotations

from typing import Optional


def default_trigger_for(*names: str) -> str:
    """Trigger padrão da plataforma, aceitando qualquer um dos nomes dados."""
    alternatives = "|".join(n for n in names if n)
    return f"(?m)^/test( | .* )({alternatives}),?($|\\s.*)"


def presubmit_trigger(job_name: str, materialized_name: str, custom: Optional[str] = None) -> str:
    """
    Combina o trigger do nome do job, o do nome materializado e, quando
    declarada, uma frase customizada ancorada no início da linha.
    """
    trigger = f"({default_trigger_for(job_name, materialized_name)})"
    if custom:
        trigger += f"|((?m)^{custom}(\\s+|$))"
    return trigger


def rerun_command(job_name: str) -> str:
    return f"/test {job_name}"
