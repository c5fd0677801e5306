"""Parsing de durações no formato usado pela plataforma de CI (`1h30m`, `90s`)."""

from __future__ import annotations

import re
from datetime import timedelta


_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """
    Converte uma duração textual em `timedelta`.

    Aceita sequências de componentes `<número><unidade>` opcionalmente
    precedidas de sinal (`-1h`, `2h45m`, `1.5h`, `300ms`). O valor `0`
    isolado também é aceito.

    Raises:
        ValueError: Se o texto não for uma duração válida.
    """
    if not isinstance(text, str) or not text:
        raise ValueError(f"invalid duration {text!r}")

    body = text
    sign = 1
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return timedelta(0)

    pos = 0
    total = 0.0
    while pos < len(body):
        m = _COMPONENT.match(body, pos)
        if m is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        pos = m.end()

    if pos == 0:
        raise ValueError(f"invalid duration {text!r}")

    return timedelta(seconds=sign * total)


def is_valid_duration(text: str) -> bool:
    try:
        parse_duration(text)
    except ValueError:
        return False
    return True
