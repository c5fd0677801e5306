"""
Aplicação de modificadores de comportamento.

    - hidden: suprime o reporte de resultado; em presubmits também limpa
      os estados reportados ao canal de chat
    - presubmit_optional: presubmit não bloqueante
    - presubmit_skipped: presubmit só dispara manualmente

Postsubmits ignoram silenciosamente modificadores sem equivalente.
"""

from __future__ import annotations

from typing import List

from prowgen.core.config.schema import Modifier
from prowgen.core.prow.types import Postsubmit, Presubmit


def apply_modifiers_presubmit(presubmit: Presubmit, modifiers: List[str]) -> None:
    for modifier in modifiers:
        if modifier == Modifier.PRESUBMIT_OPTIONAL:
            presubmit.optional = True
        elif modifier == Modifier.HIDDEN:
            presubmit.skip_report = True
            presubmit.reporter_config = {"slack": {"job_states_to_report": []}}
        elif modifier == Modifier.PRESUBMIT_SKIPPED:
            presubmit.always_run = False


def apply_modifiers_postsubmit(postsubmit: Postsubmit, modifiers: List[str]) -> None:
    for modifier in modifiers:
        if modifier == Modifier.HIDDEN:
            postsubmit.skip_report = True
            postsubmit.reporter_config = {"slack": {"report": False}}
