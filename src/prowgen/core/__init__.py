# src/prowgen/core/__init__.py
"""
Core do prowgen.

Este pacote reúne todas as responsabilidades do compilador de templates
de jobs de CI:

    - config       → carregamento, schema, merge hierárquico e hashing
    - engine       → expansão de matrizes e orquestração da compilação
    - validation   → regras estruturais e semânticas de catálogos
    - materialize  → conversão em presubmits, postsubmits e periódicos
    - prow         → tipos do manifesto de jobs da plataforma
    - output       → serialização canônica, check e diff

Princípios fundamentais:
    - Funções puras sobre cópias: nenhum estágio muta suas entradas
    - Erros tipados com contexto (arquivo, job, campo)
    - Log estruturado por invocação via `CompileContext`

Limites explícitos:
    - Não executa, agenda nem monitora jobs
    - Não contém camada de CLI
"""
