# tests/conftest.py
"""
Fixtures compartilhados para testes do prowgen.

Este módulo define fixtures reutilizáveis que fornecem:
- base config e catálogo mínimos, em YAML e já tipados
- contexto de compilação determinístico (CompileContext)
- um helper para gravar documentos em `tmp_path`

Decisões arquiteturais:
    - Documentos são fornecidos como string YAML e parseados pelo core,
      exercitando o mesmo caminho do loader
    - Fixtures tipadas retornam objetos novos a cada teste
    - Imports do core são realizados de forma lazy para melhorar a
      clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture compila catálogos
    - I/O acontece apenas em `tmp_path`, via `write_doc`

Limites explícitos:
    - Não substituir testes de integração do compilador
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml


# =====================================================
# Documentos
# =====================================================

@pytest.fixture
def base_config_yaml() -> str:
    """
    Base config semelhante ao uso real: imagem padrão, presets de recursos
    e de requirements, alias de caminho e integração com o dashboard.

    Returns:
        str: Conteúdo YAML da base config.
    """
    return """\
image: gcr.io/ci/build-tools:latest
image_pull_policy: Always
node_selector:
  testing: test-pool
resources_presets:
  default:
    requests:
      cpu: "1"
      memory: 2Gi
    limits:
      memory: 8Gi
  large:
    requests:
      cpu: "8"
      memory: 16Gi
requirement_presets:
  docker:
    volumes:
      - name: docker-root
        emptyDir: {}
    volumeMounts:
      - name: docker-root
        mountPath: /var/lib/docker
    privileged: true
  github:
    labels:
      preset-github: "true"
  serial:
    max_concurrency: 1
path_aliases:
  example.io: example.io
testgrid_config:
  enabled: true
  alert_email: ci-alerts@example.com
  num_failures_to_alert: "1"
"""


@pytest.fixture
def catalog_yaml() -> str:
    """
    Catálogo de um repositório com um presubmit simples, um job com
    matriz e um periódico.

    Returns:
        str: Conteúdo YAML do catálogo.
    """
    return """\
org: example
repo: sample
branches: [master]
matrix:
  suite: [unit, integ]
env:
  - name: BUILD_WITH_CONTAINER
    value: "0"
jobs:
  - name: lint
    types: [presubmit]
    command: [make, lint]
  - name: test-$(matrix.suite)
    command: [make, $(matrix.suite)]
    requirements: [docker]
  - name: nightly
    types: [periodic]
    cron: "0 3 * * *"
    command: [make, release]
    repos: [other/dep]
"""


@pytest.fixture
def write_doc(tmp_path):
    """
    Helper que grava um documento (str ou dict) em `tmp_path` e retorna o caminho.

    Dicionários são serializados em YAML; strings são gravadas como estão.
    """

    def _write(name: str, content) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if not isinstance(content, str):
            content = yaml.safe_dump(content, sort_keys=False)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


# =====================================================
# Objetos tipados
# =====================================================

@pytest.fixture
def base_config(base_config_yaml):
    from prowgen.core.config.schema import parse_base_config

    return parse_base_config(yaml.safe_load(base_config_yaml), source="base.yaml")


@pytest.fixture
def catalog(catalog_yaml):
    from prowgen.core.config.schema import parse_jobs_config

    cfg, _ = parse_jobs_config(yaml.safe_load(catalog_yaml), source="sample.yaml")
    return cfg


@pytest.fixture
def make_catalog():
    """
    Fixture factory: monta um `JobsConfig` a partir de um dicionário inline.

    Uso:
        make_catalog({"org": "org", "repo": "sample", "jobs": [...]})
    """
    from prowgen.core.config.schema import parse_jobs_config

    def _make(data: dict, source: str = "catalog.yaml"):
        cfg, _ = parse_jobs_config(data, source=source)
        return cfg

    return _make


@pytest.fixture
def dummy_ctx():
    """
    CompileContext determinístico para testes.

    `run_id` e `created_at` são fixos; o contexto inicia sem eventos.
    """
    from prowgen.core.compile_context import CompileContext

    return CompileContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc).isoformat(),
        meta={"source": "pytest"},
    )
