"""
Aplicação de requirement presets ao ambiente de execução de um job.

Cada requirement declarado e não excluído é resolvido na tabela de
presets e aplicado, na ordem de declaração, como mutação estrutural:

    - labels / annotations → adicionados ao job sem sobrescrever chaves
      já declaradas
    - env / volumeMounts → adicionados a todos os containers
    - volumes → adicionados ao pod (um volume por nome)
    - privileged → securityContext dos containers
    - max_concurrency → teto: o menor entre o valor atual e o do preset
    - cron → override de agenda (o último preset com cron aplicado vence)
"""

from __future__ import annotations

import copy
from typing import Dict, List, Optional

from prowgen.core.config.schema import RequirementPreset
from prowgen.core.exceptions import RequirementPresetNotFound
from prowgen.core.prow.types import JobBase


def select_presets(
    requirements: List[str],
    excluded: List[str],
    presets: Dict[str, RequirementPreset],
    *,
    job: str = "",
    source: str = "",
) -> List[RequirementPreset]:
    """
    Raises:
        RequirementPresetNotFound: Se algum requirement não existir na tabela.
    """
    for field_name, names in (("requirements", requirements), ("excluded_requirements", excluded)):
        for name in names:
            if name not in presets:
                raise RequirementPresetNotFound(
                    message=f"requirement preset '{name}' not found for job {job}",
                    details={"source": source, "job": job, "field": field_name, "value": name,
                             "allowed": sorted(presets)},
                    hint="Declare o preset em 'requirement_presets'.",
                )

    blocked = set(excluded)
    return [presets[name] for name in requirements if name not in blocked]


def _apply_preset(job: JobBase, preset: RequirementPreset) -> None:
    for key, value in preset.labels.items():
        job.labels.setdefault(key, value)
    for key, value in preset.annotations.items():
        job.annotations.setdefault(key, value)

    if preset.volumes:
        volumes = job.spec.setdefault("volumes", [])
        present = {v.get("name") for v in volumes}
        for volume in preset.volumes:
            if volume.get("name") not in present:
                volumes.append(copy.deepcopy(volume))
                present.add(volume.get("name"))

    for container in job.containers:
        if preset.env:
            container.setdefault("env", []).extend(copy.deepcopy(preset.env))
        if preset.volume_mounts:
            container.setdefault("volumeMounts", []).extend(copy.deepcopy(preset.volume_mounts))
        if preset.privileged is not None:
            container.setdefault("securityContext", {})["privileged"] = preset.privileged

    if preset.max_concurrency is not None:
        if job.max_concurrency:
            job.max_concurrency = min(job.max_concurrency, preset.max_concurrency)
        else:
            job.max_concurrency = preset.max_concurrency


def apply_requirements(
    job: JobBase,
    requirements: List[str],
    excluded: List[str],
    presets: Dict[str, RequirementPreset],
    *,
    job_name: str = "",
    source: str = "",
) -> Optional[str]:
    """
    Aplica os presets selecionados ao job (in place).

    Returns:
        Optional[str]: Cron do último preset aplicado que declara um, ou None.
    """
    cron: Optional[str] = None
    for preset in select_presets(requirements, excluded, presets, job=job_name, source=source):
        _apply_preset(job, preset)
        if preset.cron:
            cron = preset.cron
    return cron
