"""
CompileContext: contexto canônico de uma invocação do compilador.

O CompileContext é o meio pelo qual os estágios do compilador
(load, merge, expand, validate, materialize, output) registram:
- logs estruturados de execução
- warnings não fatais agrupados por estágio

Princípios fundamentais:
- Isolamento por invocação (cada compilação possui seu próprio contexto)
- Nenhum estágio escreve em estado global para reportar progresso
- Eventos são dicionários simples, prontos para serialização
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List


@dataclass
class CompileContext:
    """
    Contexto de uma invocação do compilador.

    Campos canônicos:
    - run_id: identificador único da invocação
    - created_at: timestamp UTC de criação do contexto
    - meta: metadados livres (ex.: caminhos de entrada/saída)
    - events: log estruturado de eventos
    - warnings: warnings por estágio
    """

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list)
    warnings: Dict[str, List[str]] = field(default_factory=dict)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, stage: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "stage": stage,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, stage: str, message: str) -> None:
        if stage not in self.warnings:
            self.warnings[stage] = []
        self.warnings[stage].append(message)

    def events_for(self, stage: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("stage") == stage]
