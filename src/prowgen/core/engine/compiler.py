# src/prowgen/core/engine/compiler.py
"""
Compilador de catálogos de jobs.

Orquestra os estágios para um catálogo por vez:

    load → merge → expand → validate → materialize → (write | check | diff)

Cada estágio registra eventos estruturados no `CompileContext`. Falhas
são registradas como evento de erro (payload serializável) e propagadas
ao chamador sem estado parcial.

Invariantes:
    - A base config é somente leitura durante toda a compilação
    - Um catálogo é processado até o fim antes do próximo
    - Nenhuma materialização ocorre se o catálogo tiver violações
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from prowgen.core.compile_context import CompileContext
from prowgen.core.config.hashing import compute_jobs_config_hash
from prowgen.core.config.loader import load_jobs_config
from prowgen.core.config.merge import resolve_overwrites
from prowgen.core.config.schema import BaseConfig, JobsConfig
from prowgen.core.errors import Violation
from prowgen.core.exceptions import ProwgenException, raise_for_violations
from prowgen.core.materialize.materializer import JobMaterializer, filter_release_branching_jobs
from prowgen.core.output.diff import CREATED, MISSING, MODIFIED, diff_job_configs
from prowgen.core.output.render import check_job_config, read_job_manifest, write_job_config
from prowgen.core.prow.types import JobConfigOutput
from prowgen.core.validation.validator import validate_jobs_config

from .matrix import expand_jobs_config


PathLike = Union[str, Path]


@dataclass(frozen=True)
class CompileResult:
    """Resultado de um catálogo: um documento de jobs por branch."""

    source: str
    config_hash: str
    outputs: Dict[str, JobConfigOutput] = field(default_factory=dict)

    def merged(self) -> JobConfigOutput:
        """Documento único com as branches na ordem declarada no catálogo."""
        out = JobConfigOutput()
        for output in self.outputs.values():
            out.extend(output)
        return out


class Compiler:
    """Compilador canônico do prowgen (resolução + validação + materialização)."""

    def __init__(
        self,
        *,
        base_config: BaseConfig,
        ctx: Optional[CompileContext] = None,
        long_job_names_allowed: bool = False,
    ):
        self.base_config = base_config
        self.ctx = ctx if ctx is not None else CompileContext()
        self.materializer = JobMaterializer(
            base_config, long_job_names_allowed=long_job_names_allowed, ctx=self.ctx
        )

    @property
    def header(self) -> Optional[str]:
        return self.base_config.autogen_header

    # -----------------------------
    # Erros
    # -----------------------------
    def _exception_to_error(self, exc: ProwgenException) -> Violation:
        """Converte a exceção em payload serializável; o nome da classe é o código estável."""
        return Violation(
            type=exc.__class__.__name__,
            message=exc.message,
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    def _log_failure(self, stage: str, source: str, exc: ProwgenException) -> None:
        self.ctx.log(
            stage=stage,
            level="ERROR",
            message="stage failed",
            source=source,
            error=self._exception_to_error(exc).to_dict(),
        )

    # -----------------------------
    # Estágios
    # -----------------------------
    def resolve(self, catalog: JobsConfig) -> JobsConfig:
        """Aplica herança base → repositório → job e expande a matrix."""
        resolved = resolve_overwrites(self.base_config.common, catalog)
        self.ctx.log(stage="merge", level="INFO", message="overwrites resolved", source=catalog.source)

        try:
            expanded = expand_jobs_config(resolved)
        except ProwgenException as exc:
            self._log_failure("expand", catalog.source, exc)
            raise
        self.ctx.log(
            stage="expand",
            level="INFO",
            message="matrix expanded",
            source=catalog.source,
            templates=len(catalog.jobs),
            jobs=len(expanded.jobs),
        )
        return expanded

    def validate(self, catalog: JobsConfig) -> List[Violation]:
        violations = validate_jobs_config(catalog)
        self.ctx.log(
            stage="validate",
            level="ERROR" if violations else "INFO",
            message="catalog validated",
            source=catalog.source,
            violations=[v.to_dict() for v in violations],
        )
        return violations

    def compile(self, catalog: JobsConfig, *, branches: Optional[Sequence[str]] = None) -> CompileResult:
        """
        Compila um catálogo para as branches dadas (padrão: as do catálogo).

        Raises:
            MatrixDimensionNotFound: Dimensão da matrix não declarada.
            CatalogValidationError: Catálogo com uma ou mais violações.
            JobNameTooLongError / RequirementPresetNotFound: Falha de materialização.
        """
        expanded = self.resolve(catalog)

        violations = self.validate(expanded)
        try:
            raise_for_violations(catalog.source, violations)
        except ProwgenException as exc:
            self._log_failure("validate", catalog.source, exc)
            raise

        config_hash = compute_jobs_config_hash(expanded)
        outputs: Dict[str, JobConfigOutput] = {}
        for branch in branches or expanded.branches:
            try:
                outputs[branch] = self.materializer.convert_jobs_config(expanded, branch)
            except ProwgenException as exc:
                self._log_failure("materialize", catalog.source, exc)
                raise

        self.ctx.log(
            stage="compile",
            level="INFO",
            message="catalog compiled",
            source=catalog.source,
            config_hash=config_hash,
            branches=list(outputs),
        )
        return CompileResult(source=catalog.source, config_hash=config_hash, outputs=outputs)

    def compile_file(self, path: PathLike, *, branches: Optional[Sequence[str]] = None) -> CompileResult:
        return self.compile(load_jobs_config(path, ctx=self.ctx), branches=branches)

    def compile_release_branch(self, catalog: JobsConfig, branch: str) -> Optional[CompileResult]:
        """
        Compila os jobs de um catálogo para uma nova branch de release.

        Jobs com `disable_release_branching` são omitidos. Catálogos sem
        `support_release_branching` não geram saída (retorna None).
        """
        if not catalog.support_release_branching:
            self.ctx.add_warning(
                stage="compile",
                message=f"{catalog.source}: release branching not supported, skipping branch {branch}",
            )
            return None
        release = replace(catalog, branches=[branch], jobs=filter_release_branching_jobs(catalog.jobs))
        return self.compile(release)

    # -----------------------------
    # Saída
    # -----------------------------
    def write(self, result: CompileResult, path: PathLike) -> Path:
        file = write_job_config(result.merged(), path, self.header)
        self.ctx.log(stage="output", level="INFO", message="job config written", source=result.source, path=str(file))
        return file

    def check(self, result: CompileResult, path: PathLike) -> None:
        """
        Raises:
            ConfigDriftError: Se o arquivo persistido diferir do gerado.
        """
        try:
            check_job_config(result.merged(), path, self.header)
        except ProwgenException as exc:
            self._log_failure("output", result.source, exc)
            raise
        self.ctx.log(stage="output", level="INFO", message="job config up to date", source=result.source, path=str(path))

    def diff(self, result: CompileResult, path: PathLike) -> str:
        report = diff_job_configs(result.merged(), read_job_manifest(path))
        self.ctx.log(
            stage="output",
            level="INFO" if report.is_empty() else "WARNING",
            message="job config diff computed",
            source=result.source,
            path=str(path),
            created=len(report.by_status(CREATED)),
            modified=len(report.by_status(MODIFIED)),
            missing=len(report.by_status(MISSING)),
        )
        return report.render()
