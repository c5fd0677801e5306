# src/prowgen/__init__.py
"""
prowgen: compilador de templates de jobs de CI.

Transforma uma base config global e catálogos declarativos por
repositório em definições concretas de presubmit, postsubmit e
periódico, com herança hierárquica, expansão por matriz, validação
completa antes da materialização e verificação de drift contra a saída
versionada.
"""

from .core.compile_context import CompileContext
from .core.config import load_base_config, load_jobs_config
from .core.engine import CompileResult, Compiler

__all__ = ["CompileContext", "CompileResult", "Compiler", "load_base_config", "load_jobs_config"]
