"""
Validator de catálogos de jobs.

Verifica um catálogo (já resolvido e expandido) contra as regras
estruturais e semânticas antes da materialização. Todas as regras são
avaliadas de forma independente e **todas** as violações são coletadas:
nenhuma regra interrompe a avaliação das demais.

Regras:
    - org e repo não vazios
    - nome de job declarado e único no catálogo
    - imagem declarada em todo job
    - preset de recursos referenciado existe na tabela do repositório
    - modificadores ∈ {hidden, presubmit_optional, presubmit_skipped}
    - tipos ∈ {presubmit, postsubmit, periodic}
    - arquiteturas ∈ conjunto suportado
    - periódico declara exatamente um entre cron e interval; cron válido
      (gramática de 5/6 campos) e interval com duração válida
    - timeout, quando declarado, é uma duração válida
    - repos extras no formato `org/repo[@branch]`
    - requirements (requeridos ou excluídos) existem na tabela de presets
"""

from __future__ import annotations

import re
from collections import Counter
from typing import List

from croniter import croniter

from prowgen.core import errors as E
from prowgen.core.config.schema import Architecture, Job, JobsConfig, JobType, Modifier
from prowgen.core.durations import is_valid_duration
from prowgen.core.errors import Violation


EXTRA_REPO_PATTERN = re.compile(r"^[^/@\s]+/[^/@\s]+(@[^@\s]+)?$")

_MODIFIERS = [m.value for m in Modifier]
_TYPES = [t.value for t in JobType]
_ARCHITECTURES = [a.value for a in Architecture]


def is_valid_cron(expression: str) -> bool:
    if len(expression.split()) not in (5, 6) and not expression.startswith("@"):
        return False
    return croniter.is_valid(expression)


def _check_choices(
    out: List[Violation], *, source: str, job: Job, field_name: str, values: List[str], allowed: List[str], type: str
) -> None:
    for value in values:
        if value not in allowed:
            out.append(
                E.invalid_choice(
                    type=type, source=source, job=job.name, field_name=field_name, value=value, allowed=allowed
                )
            )


def _check_periodic(out: List[Violation], source: str, job: Job) -> None:
    cron = job.common.cron
    interval = job.common.interval

    if cron and interval:
        out.append(
            E.job_violation(
                type=E.PERIODIC_SCHEDULE_CONFLICT,
                source=source,
                job=job.name,
                field_name="cron",
                message=f"cron and interval cannot be both set in periodic {job.name}",
                hint="Mantenha apenas um entre 'cron' e 'interval'.",
            )
        )
    elif not cron and not interval:
        out.append(
            E.job_violation(
                type=E.PERIODIC_SCHEDULE_MISSING,
                source=source,
                job=job.name,
                field_name="cron",
                message=f"cron and interval cannot be both empty in periodic {job.name}",
                hint="Declare 'cron' ou 'interval' para o job periódico.",
            )
        )
    elif cron:
        if not is_valid_cron(cron):
            out.append(
                E.job_violation(
                    type=E.PERIODIC_CRON_INVALID,
                    source=source,
                    job=job.name,
                    field_name="cron",
                    value=cron,
                    message=f"invalid cron string {cron} in periodic {job.name}",
                )
            )
    elif not is_valid_duration(interval):
        out.append(
            E.job_violation(
                type=E.PERIODIC_INTERVAL_INVALID,
                source=source,
                job=job.name,
                field_name="interval",
                value=interval,
                message=f"cannot parse duration {interval} in periodic {job.name}",
            )
        )


def _check_job(out: List[Violation], catalog: JobsConfig, job: Job) -> None:
    source = catalog.source
    common = job.common
    # tabelas efetivas do job: as do repositório mais as declaradas no próprio job
    resource_presets = {**(catalog.common.resources_presets or {}), **(common.resources_presets or {})}
    requirement_presets = {**(catalog.common.requirement_presets or {}), **(common.requirement_presets or {})}

    if not job.name:
        out.append(
            E.job_violation(
                type=E.JOB_NAME_MISSING,
                source=source,
                job=job.name,
                field_name="name",
                message="name must be set for every job",
            )
        )

    if not common.image:
        out.append(
            E.job_violation(
                type=E.JOB_IMAGE_MISSING,
                source=source,
                job=job.name,
                field_name="image",
                message=f"image must be set for job {job.name}",
                hint="Declare 'image' no job, no catálogo ou na base config.",
            )
        )

    if common.resources and common.resources not in resource_presets:
        out.append(
            E.job_violation(
                type=E.JOB_RESOURCE_UNKNOWN,
                source=source,
                job=job.name,
                field_name="resources",
                value=common.resources,
                message=f"job '{job.name}' has nonexistent resource '{common.resources}'",
                hint="Declare o preset em 'resources_presets'.",
            )
        )

    _check_choices(
        out, source=source, job=job, field_name="modifiers",
        values=common.modifiers or [], allowed=_MODIFIERS, type=E.JOB_MODIFIER_INVALID,
    )
    _check_choices(
        out, source=source, job=job, field_name="types",
        values=job.types, allowed=_TYPES, type=E.JOB_TYPE_INVALID,
    )
    _check_choices(
        out, source=source, job=job, field_name="architectures",
        values=job.architectures, allowed=_ARCHITECTURES, type=E.JOB_ARCHITECTURE_INVALID,
    )

    if JobType.PERIODIC.value in job.types:
        _check_periodic(out, source, job)

    if common.timeout and not is_valid_duration(common.timeout):
        out.append(
            E.job_violation(
                type=E.JOB_TIMEOUT_INVALID,
                source=source,
                job=job.name,
                field_name="timeout",
                value=common.timeout,
                message=f"cannot parse timeout {common.timeout} in job {job.name}",
            )
        )

    for repo in job.repos:
        if not EXTRA_REPO_PATTERN.match(repo):
            out.append(
                E.job_violation(
                    type=E.JOB_REPO_INVALID,
                    source=source,
                    job=job.name,
                    field_name="repos",
                    value=repo,
                    message=f"repo {repo} not valid, should take form org/repo[@branch]",
                )
            )

    for field_name in ("requirements", "excluded_requirements"):
        for req in getattr(common, field_name) or []:
            if req not in requirement_presets:
                out.append(
                    E.invalid_choice(
                        type=E.JOB_REQUIREMENT_UNKNOWN,
                        source=source,
                        job=job.name,
                        field_name=field_name,
                        value=req,
                        allowed=sorted(requirement_presets),
                    )
                )


def validate_jobs_config(catalog: JobsConfig) -> List[Violation]:
    """
    Valida um catálogo e retorna todas as violações encontradas.

    Nunca levanta exceção: lista vazia significa catálogo válido. Para
    transformar o resultado em erro fatal use
    `prowgen.core.exceptions.raise_for_violations`.

    Args:
        catalog (JobsConfig): Catálogo resolvido (herança aplicada) e expandido.

    Returns:
        List[Violation]: Violações na ordem de avaliação.
    """
    out: List[Violation] = []

    if not catalog.org:
        out.append(E.missing_identity(source=catalog.source, field_name="org"))
    if not catalog.repo:
        out.append(E.missing_identity(source=catalog.source, field_name="repo"))

    # o mesmo nome pode aparecer uma vez por tipo (ex.: presubmit e postsubmit separados)
    counts = Counter(
        (job.name, job_type)
        for job in catalog.jobs
        if job.name
        for job_type in (job.types or [JobType.PRESUBMIT.value, JobType.POSTSUBMIT.value])
    )
    reported = set()
    for (name, job_type), count in counts.items():
        if count > 1 and name not in reported:
            reported.add(name)
            out.append(
                E.job_violation(
                    type=E.JOB_NAME_DUPLICATED,
                    source=catalog.source,
                    job=name,
                    field_name="name",
                    value=job_type,
                    message=f"job name '{name}' is declared {count} times as {job_type}",
                )
            )

    for job in catalog.jobs:
        _check_job(out, catalog, job)

    return out
