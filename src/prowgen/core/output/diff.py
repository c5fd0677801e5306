"""
Diff estrutural entre documentos de jobs gerados e persistidos.

Para cada coleção (presubmits, postsubmits, periódicos), de forma
independente:
    - job gerado sem correspondente persistido → "created"
    - job presente nos dois lados com diferenças de campo → "modified"
    - job persistido sem correspondente gerado → "missing"

A correspondência é feita por nome. As diferenças de campo são calculadas
com DeepDiff sobre a forma serializada dos jobs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union

from deepdiff import DeepDiff

from prowgen.core.prow.types import JobConfigOutput


CREATED = "created"
MODIFIED = "modified"
MISSING = "missing"

KINDS: Tuple[Tuple[str, str], ...] = (
    ("presubmits", "presubmit"),
    ("postsubmits", "postsubmit"),
    ("periodics", "periodic"),
)

Document = Union[JobConfigOutput, Dict[str, Any]]


@dataclass(frozen=True)
class JobDiff:
    kind: str
    name: str
    status: str
    changes: Tuple[str, ...] = ()


@dataclass
class DiffReport:
    """Resultado ordenado do diff; `render()` produz o relatório legível."""

    entries: List[JobDiff] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.entries

    def by_status(self, status: str, kind: str = "") -> List[JobDiff]:
        return [e for e in self.entries if e.status == status and (not kind or e.kind == kind)]

    def render(self) -> str:
        sections: List[str] = []
        for _, kind in KINDS:
            lines = [f"{kind.capitalize()} diff:"]
            for entry in self.entries:
                if entry.kind != kind:
                    continue
                if entry.status == CREATED:
                    lines.append(f"Created unknown {kind} job {entry.name}")
                elif entry.status == MODIFIED:
                    lines.append(f"Diff for {entry.name}")
                    lines.extend(f"  {c}" for c in entry.changes)
                else:
                    lines.append(f"Missing {entry.name}")
            sections.append("\n".join(lines))
        return "\n\n".join(sections) + "\n"


def _as_dict(doc: Document) -> Dict[str, Any]:
    if isinstance(doc, JobConfigOutput):
        return doc.to_dict()
    return doc or {}


def _iter_jobs(doc: Dict[str, Any], collection: str) -> Iterator[Dict[str, Any]]:
    jobs = doc.get(collection) or []
    if isinstance(jobs, dict):
        for per_repo in jobs.values():
            yield from per_repo or []
    else:
        yield from jobs


def _index(doc: Dict[str, Any], collection: str) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for job in _iter_jobs(doc, collection):
        out.setdefault(job.get("name", ""), job)
    return out


def field_changes(persisted: Dict[str, Any], generated: Dict[str, Any]) -> List[str]:
    delta = DeepDiff(persisted, generated, verbose_level=2)
    if not delta:
        return []
    return delta.pretty().splitlines()


def diff_job_configs(generated: Document, persisted: Document) -> DiffReport:
    """
    Compara o documento gerado com o persistido.

    Args:
        generated: Saída do compilador (objeto ou dicionário).
        persisted: Documento lido do disco (`read_job_manifest`).

    Returns:
        DiffReport: Entradas na ordem: por coleção, jobs gerados na ordem de
        declaração e depois os persistidos ausentes.
    """
    gen = _as_dict(generated)
    cur = _as_dict(persisted)
    report = DiffReport()

    for collection, kind in KINDS:
        known = _index(cur, collection)
        seen = set()
        for job in _iter_jobs(gen, collection):
            name = job.get("name", "")
            seen.add(name)
            current = known.get(name)
            if current is None:
                report.entries.append(JobDiff(kind=kind, name=name, status=CREATED))
                continue
            changes = field_changes(current, job)
            if changes:
                report.entries.append(JobDiff(kind=kind, name=name, status=MODIFIED, changes=tuple(changes)))

        for name in known:
            if name not in seen:
                report.entries.append(JobDiff(kind=kind, name=name, status=MISSING))

    return report


def diff(generated: Document, persisted: Document) -> str:
    return diff_job_configs(generated, persisted).render()
