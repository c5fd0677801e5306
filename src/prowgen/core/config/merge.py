"""
Merge hierárquico de configuração.

Este módulo implementa as duas políticas de merge do prowgen:

1. `merge_common_configs`: resolução da cadeia de herança
   base → repositório → job sobre `CommonConfig`:
        - escalar declarado → sobrescrita (o último declarado vence)
        - lista → concatenação na ordem dos inputs (cada lista copiada antes)
        - command/args → sobrescrita total (um argv é um valor atômico)
        - mapa → união por chave, chaves posteriores sobrescrevem
        - tabelas de presets → união por nome, o preset posterior substitui
          o anterior por inteiro
        - node_selector → substituição total pelo último seletor não vazio;
          um seletor declarado vazio (`{}`) limpa o acumulado

2. `deep_merge`: merge genérico de dicionários usado nas tabelas
   auxiliares da base config (path_aliases, testgrid_config):
        - dict → merge recursivo por chave
        - list → sobrescrita total
        - escalar → sobrescrita direta
        - conflito de tipos → erro estrutural explícito

Invariantes:
    - Nenhum input é mutado
    - O resultado nunca compartilha listas ou mapas com os inputs
    - A mesma sequência de inputs sempre produz o mesmo resultado
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import fields, replace
from typing import Any, Dict, Iterable

from .errors import ConfigTypeConflictError
from .schema import (
    ARGV,
    COMMON_FIELD_KINDS,
    MAP,
    MAP_LIST,
    REQUIREMENT_PRESETS,
    RESOURCE_PRESETS,
    SELECTOR,
    STR_LIST,
    STR_MAP,
    BaseConfig,
    CommonConfig,
    JobsConfig,
)


_LIST_KINDS = {STR_LIST, MAP_LIST}
_MAP_KINDS = {STR_MAP, MAP, RESOURCE_PRESETS, REQUIREMENT_PRESETS}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários.

    Args:
        base (Dict[str, Any]): Estrutura base.
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Nova estrutura resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        if base_value is not None and type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result


def _merge_field(kind: str, current: Any, incoming: Any) -> Any:
    if incoming is None:
        return current

    if kind == SELECTOR:
        # o job é agendado em nós dedicados que casam com um único conjunto de labels
        return deepcopy(incoming)

    if kind in _LIST_KINDS:
        merged = list(current or [])
        merged.extend(deepcopy(incoming))
        return merged

    if kind in _MAP_KINDS:
        merged = dict(current or {})
        for key, value in incoming.items():
            merged[key] = deepcopy(value)
        return merged

    if kind == ARGV:
        return list(incoming)

    return incoming


def merge_common_configs(configs: Iterable[CommonConfig]) -> CommonConfig:
    """
    Resolve uma cadeia ordenada de `CommonConfig` em uma única configuração.

    A precedência é da esquerda para a direita: entradas posteriores vencem.
    Cada input é copiado profundamente antes de contribuir para o resultado,
    de modo que o materializer possa mutar a configuração resolvida de um
    job sem afetar jobs irmãos nem a base config compartilhada.

    Args:
        configs (Iterable[CommonConfig]): Cadeia de configurações (base primeiro).

    Returns:
        CommonConfig: Nova configuração resolvida.
    """
    merged = CommonConfig()
    for cfg in configs:
        for f in fields(CommonConfig):
            kind = COMMON_FIELD_KINDS[f.name]
            value = _merge_field(kind, getattr(merged, f.name), getattr(cfg, f.name))
            setattr(merged, f.name, value)
    return merged


def resolve_overwrites(base_common: CommonConfig, jobs_config: JobsConfig) -> JobsConfig:
    """
    Aplica a cadeia base → repositório → job a todos os jobs de um catálogo.

    Retorna um novo `JobsConfig`; o catálogo recebido não é alterado.
    O `common` do catálogo resultante é a configuração do repositório já
    mesclada com a base, e o `common` de cada job é a configuração efetiva
    (ResolvedJob) daquele job.
    """
    repo_common = merge_common_configs([base_common, jobs_config.common])
    jobs = [
        replace(deepcopy(job), common=merge_common_configs([repo_common, job.common]))
        for job in jobs_config.jobs
    ]
    return replace(
        jobs_config,
        branches=list(jobs_config.branches),
        matrix=deepcopy(jobs_config.matrix),
        common=repo_common,
        jobs=jobs,
    )


def merge_base_configs(base: BaseConfig, fragment: BaseConfig) -> BaseConfig:
    """Compõe dois fragmentos de base config (o fragmento posterior vence)."""
    aliases = deep_merge(base.path_aliases, fragment.path_aliases)

    testgrid = deepcopy(base.testgrid_config)
    for f in fields(testgrid):
        value = getattr(fragment.testgrid_config, f.name)
        if f.name == "enabled":
            # enabled não rastreia presença: qualquer fragmento habilitando vence
            testgrid.enabled = testgrid.enabled or value
        elif value is not None:
            setattr(testgrid, f.name, value)

    return BaseConfig(
        common=merge_common_configs([base.common, fragment.common]),
        autogen_header=fragment.autogen_header if fragment.autogen_header is not None else base.autogen_header,
        path_aliases=aliases,
        testgrid_config=testgrid,
    )
