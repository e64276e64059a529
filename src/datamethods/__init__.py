# src/datamethods/__init__.py
"""
DataMethods: gerenciamento declarativo de dependências entre métodos de dados.

Uma classe dona declara "data methods": computações nomeadas cujo resultado
pode depender de outros data methods, de scopes de autorização e de
condições de runtime, e que podem ser satisfeitas por um de vários sources
alternativos tentados em ordem.

Princípios centrais:
    - Obter o máximo de dados com o mínimo de chamadas upstream
    - Respeitar a allow-list/prioridade de dependências fornecida pelo host
    - No máximo uma resolução em andamento por data method e por instância

Arquitetura em alto nível:
    - core.methods → specs, builder declarativo, registry e contexto por instância
    - core.engine  → grafo de dependências, ordenação, resolução e preload
    - core.config  → carregamento, merge e validação de opções
    - core.host    → mixin `DataMethods` usado pela classe dona

Limites explícitos:
    - Não implementa autenticação, transporte remoto nem checagem de scopes
    - Não persiste estado entre execuções do processo
    - Não é um agendador genérico de tarefas (sem retry/backoff próprios)
"""
from .core.config.loader import load_config
from .core.config.options import DataMethodsOptions
from .core.engine.graph import DependencyGraph
from .core.engine.ordering import Unmatched, order_against_reference
from .core.host import DataMethods, DataMethodAccessor
from .core.methods.builder import MethodSpecBuilder
from .core.methods.registry import MethodRegistry
from .core.methods.types import (
    STORAGE_DISABLED,
    Expression,
    Literal,
    MethodSpec,
    MethodTarget,
    ScopeMode,
    SourceBinding,
)

__all__ = [
    "DataMethods",
    "DataMethodAccessor",
    "DataMethodsOptions",
    "DependencyGraph",
    "Expression",
    "Literal",
    "MethodRegistry",
    "MethodSpec",
    "MethodSpecBuilder",
    "MethodTarget",
    "STORAGE_DISABLED",
    "ScopeMode",
    "SourceBinding",
    "Unmatched",
    "load_config",
    "order_against_reference",
]
