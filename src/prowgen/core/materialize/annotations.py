"""
Anotações de integração com o dashboard de CI.

Quando a integração está habilitada na base config, cada job recebe uma
anotação de agrupamento no dashboard; postsubmits e periódicos recebem
também e-mail de alerta e limiar de falhas.

Política de colisão: anotações declaradas pelo usuário prevalecem sobre
as injetadas (merge não destrutivo).
"""

from __future__ import annotations

from typing import Dict

from prowgen.core.config.schema import DEFAULT_BRANCH, JobType, TestgridConfig


TESTGRID_DASHBOARD = "testgrid-dashboards"
TESTGRID_ALERT_EMAIL = "testgrid-alert-email"
TESTGRID_NUM_FAILURES = "testgrid-num-failures-to-alert"


def dashboard_prefix(org: str, repo: str, branch: str) -> str:
    prefix = org
    if branch != DEFAULT_BRANCH:
        prefix += f"_{branch}"
    return f"{prefix}_{repo}"


def dashboard_annotations(
    testgrid: TestgridConfig, *, org: str, repo: str, branch: str, job_type: JobType
) -> Dict[str, str]:
    if not testgrid.enabled:
        return {}

    prefix = dashboard_prefix(org, repo, branch)
    if job_type is JobType.PRESUBMIT:
        return {TESTGRID_DASHBOARD: prefix}

    out = {TESTGRID_DASHBOARD: f"{prefix}_{job_type.value}"}
    if testgrid.alert_email:
        out[TESTGRID_ALERT_EMAIL] = testgrid.alert_email
    if testgrid.num_failures_to_alert:
        out[TESTGRID_NUM_FAILURES] = testgrid.num_failures_to_alert
    return out


def merge_annotations(injected: Dict[str, str], declared: Dict[str, str]) -> Dict[str, str]:
    """União em que as chaves de `declared` vencem em caso de colisão."""
    merged = dict(injected)
    merged.update(declared)
    return merged
