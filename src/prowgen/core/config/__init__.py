# src/prowgen/core/config/__init__.py

"""
Camada de configuração do prowgen.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
tipar, mesclar hierarquicamente e identificar a configuração declarativa
de jobs de CI.

Responsabilidades do pacote:
    - Carregamento de base config (fragmentos compostos) e catálogos
    - Schema tipado com presença rastreada por campo
    - Merge hierárquico base → repositório → job
    - Hash canônico de catálogos resolvidos

Limites explícitos:
    - Não valida regras semânticas (ver `prowgen.core.validation`)
    - Não expande matrizes nem materializa jobs
"""

from .errors import (  # noqa: F401
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    UnknownConfigFieldError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash, compute_jobs_config_hash  # noqa: F401
from .loader import load_base_config, load_document, load_jobs_config  # noqa: F401
from .merge import deep_merge, merge_base_configs, merge_common_configs, resolve_overwrites  # noqa: F401
from .schema import (  # noqa: F401
    DEFAULT_BRANCH,
    DEFAULT_RESOURCE,
    Architecture,
    BaseConfig,
    CommonConfig,
    Job,
    JobsConfig,
    JobType,
    Modifier,
    RequirementPreset,
    ResourceRequirements,
    TestgridConfig,
    parse_base_config,
    parse_common_config,
    parse_job,
    parse_jobs_config,
)
