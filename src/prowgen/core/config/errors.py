"""
Exceções canônicas da camada de configuração do prowgen.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento, parsing tipado e resolução hierárquica de configuração
(base config e catálogos de jobs por repositório).

As exceções aqui definidas representam **falhas fatais de carregamento**:
nenhum estado parcial é devolvido ao chamador quando uma delas é levantada.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Mensagens sempre identificam o arquivo e o caminho do campo
    - Erros de carregamento interrompem a execução imediatamente

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção deste módulo representa violação de regra de validação
      (essas são coletadas pelo validator, nunca levantadas uma a uma)
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração do prowgen.

    Todas as exceções levantadas durante carregamento, parsing e merge de
    configuração devem herdar desta classe, permitindo captura genérica
    de falhas de entrada pelo orquestrador.
    """


class ConfigNotFoundError(ConfigError):
    """Arquivo de configuração (base ou catálogo) não encontrado."""


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo de configuração não suportado.

    Formatos suportados:
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do documento não é um mapa chave-valor."""


class ConfigParseError(ConfigError):
    """
    Documento malformado ou campo com tipo incompatível.

    Cobre tanto erros de sintaxe YAML/JSON quanto campos cujo valor não
    pode ser convertido no tipo declarado pelo schema (ex.: `branches`
    declarado como string em vez de lista).
    """


class UnknownConfigFieldError(ConfigError):
    """
    Campo desconhecido em documento de modo estrito.

    O documento de base config é estrito: qualquer chave não declarada no
    schema é rejeitada com o caminho pontuado do campo ofensor.
    """


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge genérico.

    Exemplo de conflito:
        - base:     {"path_aliases": {"istio": "istio.io"}}
        - override: {"path_aliases": "istio.io"}
    """
