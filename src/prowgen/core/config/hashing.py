"""
Hashing canônico de configuração resolvida.

O hash identifica estruturalmente um catálogo já resolvido (após o merge
hierárquico) e é registrado no log de compilação, permitindo relacionar
uma saída gerada às entradas que a produziram.

Política de hashing:
    - Serialização JSON canônica (sort_keys, separadores compactos)
    - Codificação UTF-8
    - SHA-256
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict

from .schema import JobsConfig


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico de uma configuração em forma de dicionário.

    Args:
        config (Dict[str, Any]): Configuração serializável.

    Returns:
        str: Hash SHA-256 hexadecimal (64 caracteres).

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """

    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_jobs_config_hash(jobs_config: JobsConfig) -> str:
    """Hash canônico de um catálogo (a identidade do arquivo de origem não participa)."""
    return compute_config_hash(
        {
            "org": jobs_config.org,
            "repo": jobs_config.repo,
            "clone_uri": jobs_config.clone_uri,
            "branches": list(jobs_config.branches),
            "support_release_branching": jobs_config.support_release_branching,
            "matrix": jobs_config.matrix,
            "common": jobs_config.common.to_dict(),
            "jobs": [job.to_dict() for job in jobs_config.jobs],
        }
    )
