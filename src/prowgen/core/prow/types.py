# src/prowgen/core/prow/types.py
"""
Tipos do manifesto de jobs da plataforma de CI.

Este módulo define a forma de saída do compilador: presubmits,
postsubmits e periódicos totalmente resolvidos, e o documento que os
agrupa por `org/repo`.

A serialização (`to_dict`) segue os nomes de campo do manifesto nativo da
plataforma; campos vazios são omitidos, exceto `always_run` dos
presubmits, que a plataforma sempre emite.

Decisões arquiteturais:
    - O pod spec é mantido como dicionário no formato da plataforma
      (containers, volumes, nodeSelector, ...) em vez de um modelo tipado
    - Os tipos são mutáveis durante a materialização e tratados como
      imutáveis após `convert_jobs_config` devolver o documento

Limites explícitos:
    - Não valida o schema da plataforma
    - Não lê nem escreve arquivos (ver `prowgen.core.output`)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Refs:
    """Descritor de checkout de um repositório adicional."""

    org: str
    repo: str
    base_ref: str
    path_alias: Optional[str] = None
    clone_uri: Optional[str] = None
    workdir: bool = False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"org": self.org, "repo": self.repo, "base_ref": self.base_ref}
        if self.path_alias:
            out["path_alias"] = self.path_alias
        if self.clone_uri:
            out["clone_uri"] = self.clone_uri
        if self.workdir:
            out["workdir"] = True
        return out


@dataclass
class JobBase:
    """Campos comuns a todos os tipos de job materializados."""

    name: str
    spec: Dict[str, Any] = field(default_factory=dict)
    cluster: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    max_concurrency: int = 0
    decorate: bool = True
    decoration_config: Optional[Dict[str, Any]] = None
    path_alias: Optional[str] = None
    clone_uri: Optional[str] = None
    extra_refs: List[Refs] = field(default_factory=list)
    reporter_config: Optional[Dict[str, Any]] = None
    skip_report: bool = False

    @property
    def containers(self) -> List[Dict[str, Any]]:
        return self.spec.setdefault("containers", [])

    def base_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        if self.cluster:
            out["cluster"] = self.cluster
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.max_concurrency:
            out["max_concurrency"] = self.max_concurrency
        if self.spec:
            out["spec"] = copy.deepcopy(self.spec)
        if self.decorate:
            out["decorate"] = True
        if self.decoration_config:
            out["decoration_config"] = copy.deepcopy(self.decoration_config)
        if self.path_alias:
            out["path_alias"] = self.path_alias
        if self.clone_uri:
            out["clone_uri"] = self.clone_uri
        if self.extra_refs:
            out["extra_refs"] = [r.to_dict() for r in self.extra_refs]
        if self.reporter_config is not None:
            out["reporter_config"] = copy.deepcopy(self.reporter_config)
        if self.skip_report:
            out["skip_report"] = True
        return out


@dataclass
class Presubmit(JobBase):
    always_run: bool = True
    optional: bool = False
    run_if_changed: Optional[str] = None
    trigger: Optional[str] = None
    rerun_command: Optional[str] = None
    branches: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out = self.base_dict()
        out["always_run"] = self.always_run
        if self.optional:
            out["optional"] = True
        if self.run_if_changed:
            out["run_if_changed"] = self.run_if_changed
        if self.trigger:
            out["trigger"] = self.trigger
        if self.rerun_command:
            out["rerun_command"] = self.rerun_command
        if self.branches:
            out["branches"] = list(self.branches)
        return out


@dataclass
class Postsubmit(JobBase):
    run_if_changed: Optional[str] = None
    branches: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out = self.base_dict()
        if self.run_if_changed:
            out["run_if_changed"] = self.run_if_changed
        if self.branches:
            out["branches"] = list(self.branches)
        return out


@dataclass
class Periodic(JobBase):
    interval: Optional[str] = None
    cron: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out = self.base_dict()
        if self.interval:
            out["interval"] = self.interval
        if self.cron:
            out["cron"] = self.cron
        if self.tags:
            out["tags"] = list(self.tags)
        return out


@dataclass
class MaterializedJobs:
    """Resultado da materialização de um job expandido em uma branch."""

    presubmit: Optional[Presubmit] = None
    postsubmit: Optional[Postsubmit] = None
    periodic: Optional[Periodic] = None


@dataclass
class JobConfigOutput:
    """
    Documento final de jobs (MaterializedJobSet).

    Presubmits e postsubmits são agrupados por `org/repo` e preservam a
    ordem de declaração; periódicos formam uma única lista.
    """

    presubmits: Dict[str, List[Presubmit]] = field(default_factory=dict)
    postsubmits: Dict[str, List[Postsubmit]] = field(default_factory=dict)
    periodics: List[Periodic] = field(default_factory=list)

    def add(self, org_repo: str, jobs: MaterializedJobs) -> None:
        if jobs.presubmit is not None:
            self.presubmits.setdefault(org_repo, []).append(jobs.presubmit)
        if jobs.postsubmit is not None:
            self.postsubmits.setdefault(org_repo, []).append(jobs.postsubmit)
        if jobs.periodic is not None:
            self.periodics.append(jobs.periodic)

    def extend(self, other: "JobConfigOutput") -> None:
        for org_repo, jobs in other.presubmits.items():
            self.presubmits.setdefault(org_repo, []).extend(jobs)
        for org_repo, jobs in other.postsubmits.items():
            self.postsubmits.setdefault(org_repo, []).extend(jobs)
        self.periodics.extend(other.periodics)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.periodics:
            out["periodics"] = [p.to_dict() for p in self.periodics]
        if self.postsubmits:
            out["postsubmits"] = {k: [j.to_dict() for j in v] for k, v in self.postsubmits.items()}
        if self.presubmits:
            out["presubmits"] = {k: [j.to_dict() for j in v] for k, v in self.presubmits.items()}
        return out
