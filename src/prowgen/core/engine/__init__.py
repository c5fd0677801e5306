# src/prowgen/core/engine/__init__.py
"""
Engine do prowgen.

Este pacote contém a expansão de matrizes e a orquestração dos estágios
de compilação de um catálogo.

Componentes principais:
    - matrix   → expansão de templates pelo produto cartesiano das dimensões
    - compiler → load → merge → expand → validate → materialize → output

Princípios fundamentais:
    - A mesma entrada sempre produz a mesma saída, na mesma ordem
    - Nenhuma decisão silenciosa: falhas são registradas e propagadas
    - Um catálogo por vez; a base config é somente leitura

Limites explícitos:
    - Não executa nem agenda jobs
    - Não interpreta argumentos de linha de comando
"""

from .compiler import CompileResult, Compiler  # noqa: F401
from .matrix import expand_job, expand_jobs_config  # noqa: F401
