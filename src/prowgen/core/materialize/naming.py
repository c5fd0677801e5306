"""
Nomes e branch matchers de jobs materializados.

Formato do nome:
    <job>_<repo>[_<branch>][_<arch>][_postsubmit | _periodic]

A branch só entra no nome quando difere da branch padrão; a arquitetura
só entra quando difere da arquitetura padrão. O nome final não pode
exceder o limite de identificadores da plataforma, salvo opt-in
explícito do chamador.
"""

from __future__ import annotations

from typing import Optional

from prowgen.core.config.schema import DEFAULT_ARCHITECTURE, DEFAULT_BRANCH, JobType
from prowgen.core.exceptions import JobNameTooLongError


MAX_JOB_NAME_LENGTH = 63

_SUFFIXES = {
    JobType.PRESUBMIT: "",
    JobType.POSTSUBMIT: "_postsubmit",
    JobType.PERIODIC: "_periodic",
}


def job_name(
    name: str,
    repo: str,
    branch: str,
    job_type: JobType,
    architecture: Optional[str] = None,
) -> str:
    out = f"{name}_{repo}"
    if branch != DEFAULT_BRANCH:
        out += f"_{branch}"
    if architecture and architecture != DEFAULT_ARCHITECTURE.value:
        out += f"_{architecture}"
    return out + _SUFFIXES[job_type]


def check_name_length(name: str, *, allow_long: bool, job: str = "", source: str = "") -> None:
    """
    Raises:
        JobNameTooLongError: Se `name` exceder o limite e `allow_long` for falso.
    """
    if allow_long or len(name) <= MAX_JOB_NAME_LENGTH:
        return
    raise JobNameTooLongError(
        message=f"job name exceeds {MAX_JOB_NAME_LENGTH} character limit '{name}'",
        details={"source": source, "job": job, "field": "name", "name": name, "length": len(name)},
        hint="Encurte o nome do job ou habilite nomes longos explicitamente.",
    )


def branch_matcher(branch: str) -> str:
    return f"^{branch}$"
