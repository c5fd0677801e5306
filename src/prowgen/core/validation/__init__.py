"""prowgen: validação de catálogos.

Regras estruturais e semânticas aplicadas antes da materialização;
todas as violações são coletadas em uma única passada.
"""

from .validator import EXTRA_REPO_PATTERN, is_valid_cron, validate_jobs_config  # noqa: F401
