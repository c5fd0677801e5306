"""
Serialização canônica, escrita e verificação (check) do documento de jobs.

Formato canônico:
    <header>\\n<YAML com chaves ordenadas>

O modo check compara byte a byte o documento recém-gerado com o arquivo
persistido e falha com um diff unificado quando diferem.
"""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from prowgen.core.config.loader import load_document
from prowgen.core.exceptions import ConfigDriftError
from prowgen.core.prow.types import JobConfigOutput


DEFAULT_AUTOGEN_HEADER = "# THIS FILE IS AUTOGENERATED, DO NOT EDIT IT MANUALLY."

PathLike = Union[str, Path]


def render_job_config(output: JobConfigOutput, header: Optional[str] = None) -> str:
    body = yaml.safe_dump(output.to_dict(), sort_keys=True, default_flow_style=False, allow_unicode=True)
    return f"{header or DEFAULT_AUTOGEN_HEADER}\n{body}"


def write_job_config(output: JobConfigOutput, path: PathLike, header: Optional[str] = None) -> Path:
    """Escreve o documento canônico em `path`, criando diretórios quando necessário."""
    file = Path(path)
    file.parent.mkdir(parents=True, exist_ok=True)
    file.write_text(render_job_config(output, header), encoding="utf-8")
    return file


def read_job_manifest(path: PathLike) -> Dict[str, Any]:
    """Lê um documento de jobs persistido (usado pelo diff)."""
    return load_document(Path(path))


def unified_diff(current: str, generated: str, current_label: str, generated_label: str = "generated") -> str:
    lines = difflib.unified_diff(
        current.splitlines(),
        generated.splitlines(),
        fromfile=current_label,
        tofile=generated_label,
        lineterm="",
    )
    return "\n".join(lines)


def check_job_config(output: JobConfigOutput, path: PathLike, header: Optional[str] = None) -> None:
    """
    Verifica se o arquivo persistido é idêntico ao documento gerado.

    Raises:
        ConfigDriftError: Se o arquivo não existir ou diferir do gerado.
    """
    file = Path(path)
    generated = render_job_config(output, header)

    if not file.exists():
        raise ConfigDriftError(
            message=f"failed to read current config for {file}: file does not exist",
            details={"path": str(file)},
            hint="Gere o arquivo antes de executar o check.",
        )

    current = file.read_text(encoding="utf-8")
    if current == generated:
        return

    raise ConfigDriftError(
        message=f"generated config is different from file {file}",
        details={"path": str(file), "diff": unified_diff(current, generated, str(file))},
        hint="Regenere os jobs e versione o resultado.",
    )
