"""
Construção do pod spec de um job a partir da configuração resolvida.

O pod tem um único container de teste. Recursos vêm do preset nomeado
em `resources` ou, na ausência, do preset `default` quando existir.
Variantes de arquitetura diferentes da padrão são fixadas em nós da
arquitetura via node selector.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from prowgen.core.config.schema import DEFAULT_ARCHITECTURE, DEFAULT_RESOURCE, CommonConfig


ARCH_NODE_SELECTOR = "kubernetes.io/arch"


def collapse_env(env: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Remove variáveis repetidas por nome; o último valor vence e a posição da primeira é mantida."""
    by_name: Dict[Any, Dict[str, Any]] = {}
    unnamed: List[Dict[str, Any]] = []
    for entry in env:
        name = entry.get("name")
        if name is None:
            unnamed.append(entry)
        else:
            by_name[name] = entry
    return list(by_name.values()) + unnamed


def build_container(common: CommonConfig) -> Dict[str, Any]:
    container: Dict[str, Any] = {"image": common.image or ""}
    if common.image_pull_policy:
        container["imagePullPolicy"] = common.image_pull_policy
    if common.command:
        container["command"] = list(common.command)
    if common.args:
        container["args"] = list(common.args)
    if common.env:
        container["env"] = collapse_env(copy.deepcopy(common.env))

    presets = common.resources_presets or {}
    resource = common.resources or DEFAULT_RESOURCE
    if resource in presets:
        resources = presets[resource].to_dict()
        if resources:
            container["resources"] = resources
    return container


def build_pod_spec(common: CommonConfig, architecture: Optional[str] = None) -> Dict[str, Any]:
    spec: Dict[str, Any] = {"containers": [build_container(common)]}

    node_selector = dict(common.node_selector or {})
    if architecture and architecture != DEFAULT_ARCHITECTURE.value:
        node_selector[ARCH_NODE_SELECTOR] = architecture
    if node_selector:
        spec["nodeSelector"] = node_selector

    if common.image_pull_secrets:
        spec["imagePullSecrets"] = [{"name": s} for s in common.image_pull_secrets]
    if common.service_account_name:
        spec["serviceAccountName"] = common.service_account_name
    if common.termination_grace_period_seconds:
        spec["terminationGracePeriodSeconds"] = common.termination_grace_period_seconds
    return spec


def decoration_config(common: CommonConfig) -> Optional[Dict[str, Any]]:
    out: Dict[str, Any] = {}
    if common.timeout:
        out["timeout"] = common.timeout
    if common.gcs_log_bucket:
        out["gcs_configuration"] = {"bucket": common.gcs_log_bucket, "path_strategy": "explicit"}
    return out or None
