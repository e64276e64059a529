# src/datamethods/core/config/errors.py
"""
Exceções canônicas da camada de configuração do DataMethods.

Este módulo define a hierarquia de exceções utilizadas durante o
carregamento, o merge e a validação das opções de data methods.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais de configuração são falhas fatais
    - Mensagens de erro são claras e direcionadas ao usuário

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa erro de resolução de data method
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do DataMethods.

    Limites explícitos:
        - Não representa erro de source
        - Não representa falha de gate (que não é erro)
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base (defaults)
    não é encontrado no caminho especificado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório quando se carrega de disco
        - Não se tenta inferir ou criar defaults automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo de configuração
    não é suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"data_methods": {"preload": {"threads": 2}}}
        - override: {"data_methods": {"preload": "fast"}}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidOptionsError(ConfigError):
    """
    Exceção levantada quando a seção `data_methods` contém chaves
    desconhecidas ou valores de tipo inválido.
    """
