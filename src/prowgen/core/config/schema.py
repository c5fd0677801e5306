"""
Schema tipado da configuração do prowgen.

Este módulo define as estruturas que representam a configuração
declarativa de jobs de CI:

    - BaseConfig   → defaults globais compartilhados por todos os repositórios
    - JobsConfig   → catálogo de jobs de um repositório
    - Job          → template de um job
    - CommonConfig → unidade de herança (campos sobrescrevíveis em todos os níveis)

Assim como no formato de origem, os campos de `CommonConfig` aparecem
**inline** no documento (no mesmo nível das chaves próprias de cada
estrutura). O parsing separa as chaves próprias das chaves herdáveis.

Decisões arquiteturais:
    - Campos de `CommonConfig` são opcionais e rastreiam presença
      (`None` = não declarado; valor vazio = declarado vazio)
    - Conjuntos fechados (tipos de job, modificadores, arquiteturas) são
      enums textuais; no catálogo os valores brutos são preservados para
      que o validator agregue todas as violações em vez de falhar no parse
    - O documento de base é estrito (campos desconhecidos são erro);
      catálogos são permissivos (campos desconhecidos viram warnings)

Limites explícitos:
    - Não aplica merge hierárquico (ver `merge.py`)
    - Não valida regras semânticas (ver `prowgen.core.validation`)
    - Não lê arquivos (ver `loader.py`)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigParseError, UnknownConfigFieldError


DEFAULT_BRANCH = "master"
DEFAULT_RESOURCE = "default"


class JobType(str, Enum):
    """Tipos de job materializáveis na plataforma de CI."""

    PRESUBMIT = "presubmit"
    POSTSUBMIT = "postsubmit"
    PERIODIC = "periodic"


class Modifier(str, Enum):
    """Modificadores de comportamento aplicáveis a um job."""

    HIDDEN = "hidden"
    PRESUBMIT_OPTIONAL = "presubmit_optional"
    PRESUBMIT_SKIPPED = "presubmit_skipped"


class Architecture(str, Enum):
    """Arquiteturas de nó suportadas. `amd64` é a arquitetura padrão."""

    AMD64 = "amd64"
    ARM64 = "arm64"


DEFAULT_ARCHITECTURE = Architecture.AMD64


# ---------------------------------------------------------------------------
# Tipos de campo (parsing + política de merge)
# ---------------------------------------------------------------------------

STR = "str"
INT = "int"
BOOL = "bool"
STR_LIST = "str_list"
ARGV = "argv"
STR_MAP = "str_map"
SELECTOR = "selector"
MAP = "map"
MAP_LIST = "map_list"
RESOURCE_PRESETS = "resource_presets"
REQUIREMENT_PRESETS = "requirement_presets"


@dataclass
class ResourceRequirements:
    """Requests/limits de CPU e memória de um preset de recursos."""

    requests: Dict[str, str] = field(default_factory=dict)
    limits: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.limits:
            out["limits"] = dict(self.limits)
        if self.requests:
            out["requests"] = dict(self.requests)
        return out


@dataclass
class RequirementPreset:
    """
    Mutação estrutural nomeada aplicada ao ambiente de execução de um job.

    Campos:
        - annotations / labels: metadados adicionados ao job
        - env: variáveis de ambiente adicionadas a todos os containers
        - volumes / volume_mounts: volumes do pod e montagens nos containers
        - privileged: eleva o privilégio de execução dos containers
        - max_concurrency: teto de concorrência do job
        - cron: override de agenda para jobs periódicos
    """

    annotations: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    env: List[Dict[str, Any]] = field(default_factory=list)
    volumes: List[Dict[str, Any]] = field(default_factory=list)
    volume_mounts: List[Dict[str, Any]] = field(default_factory=list)
    privileged: Optional[bool] = None
    max_concurrency: Optional[int] = None
    cron: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == {} or value == []:
                continue
            out[_PRESET_KEYS_OUT.get(f.name, f.name)] = copy.deepcopy(value)
        return out


_PRESET_FIELDS: Dict[str, str] = {
    "annotations": STR_MAP,
    "labels": STR_MAP,
    "env": MAP_LIST,
    "volumes": MAP_LIST,
    "volume_mounts": MAP_LIST,
    "privileged": BOOL,
    "max_concurrency": INT,
    "cron": STR,
}
# volumeMounts segue a grafia da plataforma; volume_mounts também é aceito.
_PRESET_KEYS_IN = {"volumeMounts": "volume_mounts"}
_PRESET_KEYS_OUT = {"volume_mounts": "volumeMounts"}


@dataclass
class CommonConfig:
    """
    Unidade de herança da configuração.

    Todo campo é independentemente sobrescrevível em base → repositório → job.
    `None` significa "não declarado" e nunca sobrescreve um valor herdado.
    """

    image: Optional[str] = None
    image_pull_policy: Optional[str] = None
    image_pull_secrets: Optional[List[str]] = None
    service_account_name: Optional[str] = None
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None
    env: Optional[List[Dict[str, Any]]] = None
    resources_presets: Optional[Dict[str, ResourceRequirements]] = None
    requirement_presets: Optional[Dict[str, RequirementPreset]] = None
    requirements: Optional[List[str]] = None
    excluded_requirements: Optional[List[str]] = None
    node_selector: Optional[Dict[str, str]] = None
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None
    cluster: Optional[str] = None
    timeout: Optional[str] = None
    max_concurrency: Optional[int] = None
    regex: Optional[str] = None
    trigger: Optional[str] = None
    interval: Optional[str] = None
    cron: Optional[str] = None
    resources: Optional[str] = None
    modifiers: Optional[List[str]] = None
    gcs_log_bucket: Optional[str] = None
    termination_grace_period_seconds: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name in ("resources_presets", "requirement_presets"):
                out[f.name] = {k: v.to_dict() for k, v in value.items()}
            else:
                out[f.name] = copy.deepcopy(value)
        return out


COMMON_FIELD_KINDS: Dict[str, str] = {
    "image": STR,
    "image_pull_policy": STR,
    "image_pull_secrets": STR_LIST,
    "service_account_name": STR,
    "command": ARGV,
    "args": ARGV,
    "env": MAP_LIST,
    "resources_presets": RESOURCE_PRESETS,
    "requirement_presets": REQUIREMENT_PRESETS,
    "requirements": STR_LIST,
    "excluded_requirements": STR_LIST,
    "node_selector": SELECTOR,
    "labels": STR_MAP,
    "annotations": STR_MAP,
    "cluster": STR,
    "timeout": STR,
    "max_concurrency": INT,
    "regex": STR,
    "trigger": STR,
    "interval": STR,
    "cron": STR,
    "resources": STR,
    "modifiers": STR_LIST,
    "gcs_log_bucket": STR,
    "termination_grace_period_seconds": INT,
}


@dataclass
class TestgridConfig:
    """Integração com o dashboard de CI."""

    __test__ = False

    enabled: bool = False
    alert_email: Optional[str] = None
    num_failures_to_alert: Optional[str] = None


_TESTGRID_FIELDS: Dict[str, str] = {
    "enabled": BOOL,
    "alert_email": STR,
    "num_failures_to_alert": STR,
}


@dataclass
class BaseConfig:
    """Defaults globais do processo, somente leitura após o carregamento."""

    common: CommonConfig = field(default_factory=CommonConfig)
    autogen_header: Optional[str] = None
    path_aliases: Dict[str, str] = field(default_factory=dict)
    testgrid_config: TestgridConfig = field(default_factory=TestgridConfig)


@dataclass
class Job:
    """Template de um job declarado em um catálogo."""

    name: str = ""
    types: List[str] = field(default_factory=list)
    architectures: List[str] = field(default_factory=list)
    repos: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    disable_release_branching: bool = False
    gerrit_presubmit_label: Optional[str] = None
    gerrit_postsubmit_label: Optional[str] = None
    reporter_config: Optional[Dict[str, Any]] = None
    common: CommonConfig = field(default_factory=CommonConfig)

    def job_types(self) -> List[JobType]:
        """Tipos efetivos do job. Lista vazia equivale a presubmit + postsubmit."""
        if not self.types:
            return [JobType.PRESUBMIT, JobType.POSTSUBMIT]
        return [JobType(t) for t in self.types]

    def has_type(self, job_type: JobType) -> bool:
        return job_type in self.job_types()

    def to_dict(self) -> Dict[str, Any]:
        """Serializa o job no formato inline do catálogo (round-trip com `parse_job`)."""
        out: Dict[str, Any] = {"name": self.name}
        for key in ("types", "architectures", "repos", "tags"):
            value = getattr(self, key)
            if value:
                out[key] = list(value)
        if self.disable_release_branching:
            out["disable_release_branching"] = True
        for key in ("gerrit_presubmit_label", "gerrit_postsubmit_label"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.reporter_config is not None:
            out["reporter_config"] = copy.deepcopy(self.reporter_config)
        out.update(self.common.to_dict())
        return out


_JOB_FIELDS: Dict[str, str] = {
    "name": STR,
    "types": STR_LIST,
    "architectures": STR_LIST,
    "repos": STR_LIST,
    "tags": STR_LIST,
    "disable_release_branching": BOOL,
    "gerrit_presubmit_label": STR,
    "gerrit_postsubmit_label": STR,
    "reporter_config": MAP,
}


@dataclass
class JobsConfig:
    """Catálogo de jobs de um repositório."""

    org: str = ""
    repo: str = ""
    clone_uri: Optional[str] = None
    branches: List[str] = field(default_factory=lambda: [DEFAULT_BRANCH])
    support_release_branching: bool = False
    matrix: Dict[str, List[str]] = field(default_factory=dict)
    jobs: List[Job] = field(default_factory=list)
    common: CommonConfig = field(default_factory=CommonConfig)
    source: str = "<memory>"

    @property
    def org_repo(self) -> str:
        return f"{self.org}/{self.repo}"


_JOBS_CONFIG_FIELDS: Dict[str, str] = {
    "org": STR,
    "repo": STR,
    "clone_uri": STR,
    "branches": STR_LIST,
    "support_release_branching": BOOL,
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _fail(source: str, path: str, message: str) -> ConfigParseError:
    return ConfigParseError(f"{source}: campo '{path}' {message}")


def _coerce_scalar_str(value: Any, source: str, path: str) -> str:
    # números são aceitos e normalizados para texto (ex.: num_failures_to_alert: 1)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise _fail(source, path, f"deve ser string, recebido: {type(value).__name__}")
    return str(value)


def _coerce(kind: str, value: Any, source: str, path: str, strict: bool, unknown: List[str]) -> Any:
    if kind == STR:
        return _coerce_scalar_str(value, source, path)

    if kind == INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _fail(source, path, f"deve ser inteiro, recebido: {type(value).__name__}")
        return value

    if kind == BOOL:
        if not isinstance(value, bool):
            raise _fail(source, path, f"deve ser booleano, recebido: {type(value).__name__}")
        return value

    if kind in (STR_LIST, ARGV):
        if not isinstance(value, list):
            raise _fail(source, path, f"deve ser lista, recebido: {type(value).__name__}")
        return [_coerce_scalar_str(v, source, f"{path}[{i}]") for i, v in enumerate(value)]

    if kind in (STR_MAP, SELECTOR):
        if not isinstance(value, dict):
            raise _fail(source, path, f"deve ser mapa, recebido: {type(value).__name__}")
        return {
            str(k): _coerce_scalar_str(v, source, f"{path}.{k}")
            for k, v in value.items()
        }

    if kind == MAP:
        if not isinstance(value, dict):
            raise _fail(source, path, f"deve ser mapa, recebido: {type(value).__name__}")
        return copy.deepcopy(value)

    if kind == MAP_LIST:
        if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
            raise _fail(source, path, "deve ser lista de mapas")
        return copy.deepcopy(value)

    if kind == RESOURCE_PRESETS:
        if not isinstance(value, dict):
            raise _fail(source, path, f"deve ser mapa, recebido: {type(value).__name__}")
        return {
            str(name): _parse_resources(spec, source, f"{path}.{name}", strict, unknown)
            for name, spec in value.items()
        }

    if kind == REQUIREMENT_PRESETS:
        if not isinstance(value, dict):
            raise _fail(source, path, f"deve ser mapa, recebido: {type(value).__name__}")
        return {
            str(name): _parse_requirement_preset(spec, source, f"{path}.{name}", strict, unknown)
            for name, spec in value.items()
        }

    raise ValueError(f"unknown field kind: {kind}")


def _unknown_key(source: str, path: str, strict: bool, unknown: List[str]) -> None:
    if strict:
        raise UnknownConfigFieldError(f"{source}: campo desconhecido '{path}'")
    unknown.append(path)


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _parse_resources(
    data: Any, source: str, path: str, strict: bool, unknown: List[str]
) -> ResourceRequirements:
    if data is None:
        return ResourceRequirements()
    if not isinstance(data, dict):
        raise _fail(source, path, "deve ser mapa com 'requests'/'limits'")
    out = ResourceRequirements()
    for key, value in data.items():
        if key in ("requests", "limits"):
            setattr(out, key, _coerce(STR_MAP, value or {}, source, _join(path, key), strict, unknown))
        else:
            _unknown_key(source, _join(path, key), strict, unknown)
    return out


def _parse_requirement_preset(
    data: Any, source: str, path: str, strict: bool, unknown: List[str]
) -> RequirementPreset:
    if data is None:
        return RequirementPreset()
    if not isinstance(data, dict):
        raise _fail(source, path, "deve ser mapa")
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        name = _PRESET_KEYS_IN.get(key, key)
        kind = _PRESET_FIELDS.get(name)
        if kind is None:
            _unknown_key(source, _join(path, key), strict, unknown)
            continue
        if value is None:
            continue
        kwargs[name] = _coerce(kind, value, source, _join(path, key), strict, unknown)
    return RequirementPreset(**kwargs)


def _split_fields(
    data: Dict[str, Any],
    own: Dict[str, str],
    source: str,
    prefix: str,
    strict: bool,
    unknown: List[str],
    passthrough: Tuple[str, ...] = (),
) -> Tuple[Dict[str, Any], CommonConfig]:
    """Separa chaves próprias e chaves inline de `CommonConfig`."""
    own_values: Dict[str, Any] = {}
    common_values: Dict[str, Any] = {}
    for key, value in data.items():
        key = str(key)
        path = _join(prefix, key)
        if key in passthrough:
            continue
        if key in own:
            if value is not None:
                own_values[key] = _coerce(own[key], value, source, path, strict, unknown)
        elif key in COMMON_FIELD_KINDS:
            if value is not None:
                common_values[key] = _coerce(COMMON_FIELD_KINDS[key], value, source, path, strict, unknown)
        else:
            _unknown_key(source, path, strict, unknown)
    return own_values, CommonConfig(**common_values)


def parse_common_config(
    data: Dict[str, Any], *, source: str = "<memory>", strict: bool = False
) -> CommonConfig:
    unknown: List[str] = []
    _, common = _split_fields(data, {}, source, "", strict, unknown)
    return common


def parse_job(
    data: Any,
    *,
    source: str = "<memory>",
    path: str = "",
    strict: bool = False,
    unknown: Optional[List[str]] = None,
) -> Job:
    """Materializa um `Job` a partir do formato inline do catálogo."""
    if not isinstance(data, dict):
        raise _fail(source, path or "job", "deve ser mapa")
    sink = unknown if unknown is not None else []
    own, common = _split_fields(data, _JOB_FIELDS, source, path, strict, sink)
    return Job(common=common, **own)


def _parse_matrix(data: Any, source: str) -> Dict[str, List[str]]:
    if not isinstance(data, dict):
        raise _fail(source, "matrix", "deve ser mapa de dimensão → lista de valores")
    matrix: Dict[str, List[str]] = {}
    for dim, values in data.items():
        matrix[str(dim)] = _coerce(STR_LIST, values, source, f"matrix.{dim}", False, [])
    return matrix


def parse_jobs_config(
    data: Dict[str, Any], *, source: str = "<memory>"
) -> Tuple[JobsConfig, List[str]]:
    """
    Materializa um catálogo de jobs (modo permissivo).

    Returns:
        Tuple[JobsConfig, List[str]]: catálogo tipado e caminhos de campos
        desconhecidos ignorados durante o parsing.
    """
    unknown: List[str] = []
    own, common = _split_fields(
        data, _JOBS_CONFIG_FIELDS, source, "", False, unknown, passthrough=("matrix", "jobs")
    )

    jobs_raw = data.get("jobs") or []
    if not isinstance(jobs_raw, list):
        raise _fail(source, "jobs", "deve ser lista")
    jobs = [
        parse_job(j, source=source, path=f"jobs[{i}]", unknown=unknown)
        for i, j in enumerate(jobs_raw)
    ]

    matrix = _parse_matrix(data["matrix"], source) if data.get("matrix") is not None else {}

    cfg = JobsConfig(common=common, matrix=matrix, jobs=jobs, source=source, **own)
    if not cfg.branches:
        cfg.branches = [DEFAULT_BRANCH]
    return cfg, unknown


def parse_base_config(data: Dict[str, Any], *, source: str = "<memory>") -> BaseConfig:
    """Materializa o documento de base config (modo estrito)."""
    unknown: List[str] = []
    own, common = _split_fields(
        data,
        {"autogen_header": STR, "path_aliases": STR_MAP},
        source,
        "",
        True,
        unknown,
        passthrough=("testgrid_config",),
    )

    testgrid = TestgridConfig()
    raw_tg = data.get("testgrid_config")
    if raw_tg is not None:
        if not isinstance(raw_tg, dict):
            raise _fail(source, "testgrid_config", "deve ser mapa")
        for key, value in raw_tg.items():
            kind = _TESTGRID_FIELDS.get(key)
            if kind is None:
                _unknown_key(source, f"testgrid_config.{key}", True, unknown)
                continue
            if value is not None:
                setattr(testgrid, key, _coerce(kind, value, source, f"testgrid_config.{key}", True, unknown))

    return BaseConfig(common=common, testgrid_config=testgrid, **own)
