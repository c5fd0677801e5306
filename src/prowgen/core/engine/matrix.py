# src/prowgen/core/engine/matrix.py
"""
Expansão de jobs por matriz de variantes.

Um template de job pode referenciar dimensões da matrix do catálogo com
expressões `$(matrix.<dimensão>)` em qualquer campo. A expansão produz um
job concreto por elemento do produto cartesiano das dimensões
referenciadas.

Algoritmo:
    1. O template é convertido na sua forma de documento (`Job.to_dict`)
    2. Expressões `$(...)` são extraídas de todas as strings do documento
       (chaves e valores); as de prefixo `matrix.` definem as dimensões, na
       ordem da primeira ocorrência e sem duplicatas
    3. O produto cartesiano é percorrido iterativamente na ordem fixa das
       dimensões; cada combinação substitui os placeholders dentro de cada
       string do documento
    4. Cada documento substituído é convertido em um `Job` concreto

Decisões arquiteturais:
    - A substituição é feita na estrutura, nunca em texto re-parseado:
      um valor como `1.10`, `yes` ou `null` permanece a string declarada

Invariantes:
    - Cardinalidade: n1 * n2 * ... * nk jobs para k dimensões referenciadas
    - Ordem: lexicográfica induzida pelas listas de valores declaradas,
      lidas da esquerda para a direita na ordem de primeira referência
    - Template sem placeholders produz exatamente um job (uma cópia)
    - Dimensão não declarada é erro fatal que nomeia a dimensão
"""

from __future__ import annotations

import copy
import itertools
import re
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from prowgen.core.config.schema import Job, JobsConfig, parse_job
from prowgen.core.exceptions import MatrixDimensionNotFound


VARIABLE_SUBSTITUTION_PATTERN = r"\$\([_a-zA-Z0-9.-]+(\.[_a-zA-Z0-9.-]+)*\)"
MATRIX_PREFIX = "matrix."

_VARIABLE_RE = re.compile(VARIABLE_SUBSTITUTION_PATTERN)


def substitution_expressions(text: str) -> List[str]:
    """Expressões `$(...)` distintas em `text`, sem o invólucro, na ordem de ocorrência."""
    seen: Dict[str, None] = {}
    for m in _VARIABLE_RE.finditer(text):
        expression = m.group(0)[2:-1]
        seen.setdefault(expression, None)
    return list(seen)


def referenced_dimensions(text: str, matrix: Dict[str, List[str]], *, job_name: str = "") -> List[str]:
    """
    Dimensões da matrix referenciadas em `text`.

    Raises:
        MatrixDimensionNotFound: Se alguma dimensão referenciada não existir.
    """
    dims: List[str] = []
    for expression in substitution_expressions(text):
        if not expression.startswith(MATRIX_PREFIX):
            continue
        dim = expression[len(MATRIX_PREFIX):]
        if dim not in matrix:
            raise MatrixDimensionNotFound(
                message=f"dimension '{dim}' is not configured in the matrix",
                details={"dimension": dim, "job": job_name, "declared": sorted(matrix)},
                hint="Declare a dimensão em `matrix` no catálogo ou remova a referência do job.",
            )
        dims.append(dim)
    return dims


def _placeholder(dim: str) -> str:
    return f"$({MATRIX_PREFIX}{dim})"


def iter_combinations(
    dims: Sequence[str], matrix: Dict[str, List[str]]
) -> Iterator[Tuple[Tuple[str, str], ...]]:
    """Combinações (dimensão, valor) na ordem fixa de `dims`."""
    axes = [[(dim, value) for value in matrix[dim]] for dim in dims]
    return itertools.product(*axes)


def iter_strings(node: Any) -> Iterator[str]:
    """Strings de um documento (chaves e valores) em ordem de declaração."""
    if isinstance(node, str):
        yield node
    elif isinstance(node, dict):
        for key, value in node.items():
            if isinstance(key, str):
                yield key
            yield from iter_strings(value)
    elif isinstance(node, (list, tuple)):
        for item in node:
            yield from iter_strings(item)


def substitute(node: Any, combination: Sequence[Tuple[str, str]]) -> Any:
    """Cópia de `node` com os placeholders da combinação substituídos em cada string."""
    if isinstance(node, str):
        for dim, value in combination:
            node = node.replace(_placeholder(dim), str(value))
        return node
    if isinstance(node, dict):
        return {substitute(k, combination): substitute(v, combination) for k, v in node.items()}
    if isinstance(node, (list, tuple)):
        return [substitute(item, combination) for item in node]
    return copy.deepcopy(node)


def expand_job(job: Job, matrix: Dict[str, List[str]]) -> List[Job]:
    """
    Expande um template de job em jobs concretos.

    Args:
        job (Job): Template (já resolvido ou não).
        matrix (Dict[str, List[str]]): Dimensão → valores de substituição.

    Returns:
        List[Job]: Jobs concretos em ordem determinística.

    Raises:
        MatrixDimensionNotFound: Se o job referenciar dimensão não declarada.
    """
    doc = job.to_dict()
    dims = referenced_dimensions("\n".join(iter_strings(doc)), matrix, job_name=job.name)
    if not dims:
        return [copy.deepcopy(job)]

    return [
        parse_job(substitute(doc, combination), source=f"matrix:{job.name}")
        for combination in iter_combinations(dims, matrix)
    ]


def expand_jobs_config(catalog: JobsConfig) -> JobsConfig:
    """Novo catálogo com todos os jobs expandidos, na ordem de declaração."""
    jobs: List[Job] = []
    for job in catalog.jobs:
        jobs.extend(expand_job(job, catalog.matrix))
    return replace(catalog, jobs=jobs)
