"""
Job Materializer.

Converte jobs resolvidos (herança aplicada) e expandidos (matrix
aplicada) nas definições concretas de presubmit, postsubmit e periódico
da plataforma de CI.

Uma chamada de `materialize` trata um job, uma branch alvo e uma
variante de arquitetura, e aplica em sequência:

    1. nome e limite de tamanho
    2. job base: pod spec, decoração, refs extras, labels, anotações
    3. branch matcher e trigger (presubmit)
    4. anotações de dashboard
    5. modificadores
    6. requirement presets

Invariantes:
    - O job recebido nunca é mutado
    - Falha de nome ou de preset aborta a materialização do job e
      identifica job e campo
    - A ordem de saída segue a ordem de declaração dos jobs
"""

from __future__ import annotations

import copy
from typing import Any, List, Optional

from prowgen.core.config.schema import BaseConfig, Job, JobsConfig, JobType
from prowgen.core.prow.types import (
    JobBase,
    JobConfigOutput,
    MaterializedJobs,
    Periodic,
    Postsubmit,
    Presubmit,
)

from .annotations import dashboard_annotations, merge_annotations
from .modifiers import apply_modifiers_postsubmit, apply_modifiers_presubmit
from .naming import branch_matcher, check_name_length, job_name
from .pod import build_pod_spec, collapse_env, decoration_config
from .refs import create_extra_refs
from .requirements import apply_requirements
from .triggers import presubmit_trigger, rerun_command


GERRIT_REPORT_LABEL = "prow.k8s.io/gerrit-report-label"


def filter_release_branching_jobs(jobs: List[Job]) -> List[Job]:
    """Jobs que participam do branching de release (sem `disable_release_branching`)."""
    return [j for j in jobs if not j.disable_release_branching]


class JobMaterializer:
    """
    Materializa catálogos resolvidos contra uma base config fixa.

    Args:
        base_config (BaseConfig): Base config (somente leitura).
        long_job_names_allowed (bool): Aceita nomes acima do limite da plataforma.
        ctx: `CompileContext` opcional para log estruturado.
    """

    def __init__(self, base_config: BaseConfig, *, long_job_names_allowed: bool = False, ctx: Any = None):
        self.base_config = base_config
        self.long_job_names_allowed = long_job_names_allowed
        self.ctx = ctx

    # -----------------------------
    # Job base
    # -----------------------------
    def _job_base(
        self,
        cls,
        job: Job,
        catalog: JobsConfig,
        branch: str,
        job_type: JobType,
        architecture: Optional[str],
        repos: List[str],
    ) -> JobBase:
        common = job.common
        name = job_name(job.name, catalog.repo, branch, job_type, architecture)
        check_name_length(name, allow_long=self.long_job_names_allowed, job=job.name, source=catalog.source)

        declared = dict(common.annotations or {})
        injected = dashboard_annotations(
            self.base_config.testgrid_config,
            org=catalog.org,
            repo=catalog.repo,
            branch=branch,
            job_type=job_type,
        )

        return cls(
            name=name,
            spec=build_pod_spec(common, architecture),
            cluster=common.cluster,
            labels=dict(common.labels or {}),
            annotations=merge_annotations(injected, declared),
            max_concurrency=common.max_concurrency or 0,
            decoration_config=decoration_config(common),
            extra_refs=create_extra_refs(repos, branch, self.base_config.path_aliases),
            reporter_config=copy.deepcopy(job.reporter_config),
        )

    def _org_path_alias(self, catalog: JobsConfig) -> Optional[str]:
        alias = self.base_config.path_aliases.get(catalog.org)
        return f"{alias}/{catalog.repo}" if alias else None

    def _finish(self, base: JobBase, job: Job, catalog: JobsConfig) -> Optional[str]:
        common = job.common
        cron = apply_requirements(
            base,
            common.requirements or [],
            common.excluded_requirements or [],
            common.requirement_presets or {},
            job_name=job.name,
            source=catalog.source,
        )
        for container in base.containers:
            if container.get("env"):
                container["env"] = collapse_env(container["env"])
        return cron

    # -----------------------------
    # Por tipo
    # -----------------------------
    def _presubmit(self, job: Job, catalog: JobsConfig, branch: str, architecture: Optional[str]) -> Presubmit:
        common = job.common
        presubmit = self._job_base(Presubmit, job, catalog, branch, JobType.PRESUBMIT, architecture, job.repos)
        presubmit.branches = [branch_matcher(branch)]
        presubmit.path_alias = self._org_path_alias(catalog)
        presubmit.clone_uri = catalog.clone_uri
        presubmit.trigger = presubmit_trigger(job.name, presubmit.name, common.trigger)
        presubmit.rerun_command = rerun_command(job.name)
        if job.gerrit_presubmit_label:
            presubmit.labels[GERRIT_REPORT_LABEL] = job.gerrit_presubmit_label
        if common.regex:
            presubmit.run_if_changed = common.regex
            presubmit.always_run = False

        apply_modifiers_presubmit(presubmit, common.modifiers or [])
        self._finish(presubmit, job, catalog)
        return presubmit

    def _postsubmit(self, job: Job, catalog: JobsConfig, branch: str, architecture: Optional[str]) -> Postsubmit:
        common = job.common
        postsubmit = self._job_base(Postsubmit, job, catalog, branch, JobType.POSTSUBMIT, architecture, job.repos)
        postsubmit.branches = [branch_matcher(branch)]
        postsubmit.path_alias = self._org_path_alias(catalog)
        postsubmit.clone_uri = catalog.clone_uri
        if job.gerrit_postsubmit_label:
            postsubmit.labels[GERRIT_REPORT_LABEL] = job.gerrit_postsubmit_label
        if common.regex:
            postsubmit.run_if_changed = common.regex

        apply_modifiers_postsubmit(postsubmit, common.modifiers or [])
        self._finish(postsubmit, job, catalog)
        return postsubmit

    def _periodic(self, job: Job, catalog: JobsConfig, branch: str, architecture: Optional[str]) -> Periodic:
        common = job.common
        # periódicos não partem de uma mudança: o próprio repositório é o primeiro checkout
        repos = [catalog.org_repo] + list(job.repos)
        periodic = self._job_base(Periodic, job, catalog, branch, JobType.PERIODIC, architecture, repos)
        periodic.extra_refs[0].workdir = True
        if catalog.clone_uri:
            periodic.extra_refs[0].clone_uri = catalog.clone_uri
        periodic.interval = common.interval
        periodic.cron = common.cron
        periodic.tags = list(job.tags)

        cron = self._finish(periodic, job, catalog)
        if cron:
            periodic.cron = cron
            periodic.interval = None
        return periodic

    # -----------------------------
    # API pública
    # -----------------------------
    def materialize(
        self, job: Job, catalog: JobsConfig, branch: str, architecture: Optional[str] = None
    ) -> MaterializedJobs:
        """
        Materializa um job expandido para uma branch e arquitetura.

        Args:
            job (Job): Job com `common` já resolvido.
            catalog (JobsConfig): Catálogo dono do job (org, repo, source).
            branch (str): Branch alvo.
            architecture (Optional[str]): Variante de arquitetura; None = padrão.

        Returns:
            MaterializedJobs: presubmit / postsubmit / periodic conforme os tipos do job.

        Raises:
            JobNameTooLongError: Nome acima do limite sem opt-in.
            RequirementPresetNotFound: Requirement ausente da tabela de presets.
        """
        out = MaterializedJobs()
        if job.has_type(JobType.PRESUBMIT):
            out.presubmit = self._presubmit(job, catalog, branch, architecture)
        if job.has_type(JobType.POSTSUBMIT):
            out.postsubmit = self._postsubmit(job, catalog, branch, architecture)
        if job.has_type(JobType.PERIODIC):
            out.periodic = self._periodic(job, catalog, branch, architecture)
        return out

    def convert_jobs_config(self, catalog: JobsConfig, branch: str) -> JobConfigOutput:
        """
        Materializa todos os jobs de um catálogo resolvido e expandido para uma branch.

        Jobs com várias arquiteturas geram uma variante por arquitetura,
        na ordem declarada.
        """
        output = JobConfigOutput()
        for job in catalog.jobs:
            for architecture in job.architectures or [None]:
                output.add(catalog.org_repo, self.materialize(job, catalog, branch, architecture))

        if self.ctx is not None:
            self.ctx.log(
                stage="materialize",
                level="INFO",
                message="jobs materialized",
                source=catalog.source,
                branch=branch,
                presubmits=len(output.presubmits.get(catalog.org_repo, [])),
                postsubmits=len(output.postsubmits.get(catalog.org_repo, [])),
                periodics=len(output.periodics),
            )
        return output
