"""
Loader de configuração do prowgen.

Este módulo é responsável por ler do disco os documentos de entrada do
compilador e materializá-los nas estruturas tipadas de `schema.py`:

    - base config  → um ou mais fragmentos compostos em ordem (modo estrito)
    - catálogo     → um `JobsConfig` por repositório (modo permissivo)

Princípios fundamentais:
    - Fail-fast: documento malformado é erro fatal, sem estado parcial
    - Toda mensagem de erro identifica o arquivo de origem
    - O loader não aplica a herança base → repositório → job
      (responsabilidade de `merge.resolve_overwrites`)

Formatos suportados:
    - YAML (.yaml, .yml)
    - JSON (.json)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml  # PyYAML

from .errors import (
    ConfigNotFoundError,
    ConfigParseError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import merge_base_configs
from .schema import BaseConfig, JobsConfig, parse_base_config, parse_jobs_config


PathLike = Union[str, Path]


def load_document(path: Path) -> Dict[str, Any]:
    """
    Carrega um documento de configuração e valida sua estrutura básica.

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - O conteúdo raiz deve ser um dicionário (`dict`)
        - Arquivos vazios são interpretados como dicionários vazios
        - Formatos não suportados geram erro explícito

    Args:
        path (Path): Caminho para o documento.

    Returns:
        Dict[str, Any]: Conteúdo do arquivo carregado como dicionário.

    Raises:
        ConfigNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        ConfigParseError: Se o conteúdo não puder ser interpretado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise ConfigNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    try:
        if suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

        elif suffix == ".json":
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)

        else:
            raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigParseError(f"{path}: falha ao interpretar documento: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"{path}: raiz deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_base_config(paths: Union[PathLike, Iterable[PathLike]]) -> BaseConfig:
    """
    Carrega e compõe a base config a partir de um ou mais fragmentos.

    Os fragmentos são aplicados da esquerda para a direita: cada fragmento
    é mesclado sobre o acumulado (o posterior vence). O documento é estrito:
    campos desconhecidos são rejeitados.

    Args:
        paths: Caminho único ou sequência ordenada de caminhos.

    Returns:
        BaseConfig: Base config composta, somente leitura a partir daqui.

    Raises:
        ConfigError: Qualquer falha de carregamento ou parsing.
    """
    if isinstance(paths, (str, Path)):
        paths = [paths]

    merged: Optional[BaseConfig] = None
    for p in paths:
        file = Path(p)
        fragment = parse_base_config(load_document(file), source=str(file))
        merged = fragment if merged is None else merge_base_configs(merged, fragment)

    return merged if merged is not None else BaseConfig()


def load_jobs_config(path: PathLike, *, ctx: Any = None) -> JobsConfig:
    """
    Carrega o catálogo de jobs de um repositório.

    Campos desconhecidos são ignorados; quando um `CompileContext` é
    fornecido, cada campo ignorado é registrado como warning do estágio
    `load`.

    Args:
        path: Caminho do catálogo.
        ctx: Contexto de compilação opcional para warnings.

    Returns:
        JobsConfig: Catálogo tipado, ainda sem herança resolvida.
    """
    file = Path(path)
    jobs_config, unknown = parse_jobs_config(load_document(file), source=str(file))

    if ctx is not None:
        for field_path in unknown:
            ctx.add_warning(stage="load", message=f"{file}: campo desconhecido ignorado '{field_path}'")
        ctx.log(
            stage="load",
            level="INFO",
            message="catalog loaded",
            source=str(file),
            org_repo=jobs_config.org_repo,
            jobs=len(jobs_config.jobs),
        )

    return jobs_config
