# src/datamethods/core/methods/types.py
"""
Tipos canônicos de declaração de data methods.

Este módulo define as estruturas imutáveis que descrevem um data method
depois de declarado pela classe dona: a especificação (`MethodSpec`),
os bindings de source (`SourceBinding`) e o conjunto fechado de variantes
de target.

Componentes principais:
    - ScopeMode        → lógica de combinação de scope queries (AND / OR)
    - MethodTarget     → accessor nomeado no host (data method ou método do host)
    - Literal          → valor fixo
    - Expression       → callable explícito avaliado contra o host
    - SourceBinding    → par (target, transform)
    - MethodSpec       → especificação imutável de um data method
    - STORAGE_DISABLED → marcador que desliga o cache de um data method

Princípios fundamentais:
    - Especificações são compartilhadas por todas as instâncias da classe dona
    - Nenhuma string é avaliada como código: targets são nomes, literais ou callables
    - A ordem de `sources` é a prioridade declarada pelo usuário

Invariantes:
    - `MethodSpec` nunca é alterado após `build()`
    - `storage_key` é `None` se e somente se o cache está desligado
    - Apenas `MethodTarget` participa do grafo de dependências

Limites explícitos:
    - Não resolve data methods
    - Não avalia conditions nem scopes
    - Não conhece instâncias do host
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union


class ScopeMode(str, Enum):
    """
    Lógica de combinação das scope queries de um data method.

    Os valores são strings para que possam ser repassados diretamente ao
    `has_scope` do host como opção `logic`.
    """
    AND = "and"
    OR = "or"


class _StorageDisabled:
    """Marcador singleton: cache desligado para o data method."""

    _instance: Optional["_StorageDisabled"] = None

    def __new__(cls) -> "_StorageDisabled":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "STORAGE_DISABLED"

    def __bool__(self) -> bool:
        return False


STORAGE_DISABLED = _StorageDisabled()


@dataclass(frozen=True)
class MethodTarget:
    """Target nomeado: accessor de zero argumentos no host."""

    name: str

    def evaluate(self, host: Any) -> Any:
        member = getattr(host, self.name)
        return member() if callable(member) else member


@dataclass(frozen=True)
class Literal:
    """Target literal: o próprio valor."""

    value: Any

    def evaluate(self, host: Any) -> Any:
        return self.value


@dataclass(frozen=True)
class Expression:
    """Target avaliado por um callable explícito `fn(host)`."""

    fn: Callable[[Any], Any]

    def evaluate(self, host: Any) -> Any:
        return self.fn(host)


Target = Union[MethodTarget, Literal, Expression, None]
Transform = Union[Callable[[Any], Any], Tuple[str, ...], None]


def read_member(obj: Any, step: str) -> Any:
    """Lê um passo de acesso: chave em mappings, atributo (chamado se invocável) nos demais."""
    if isinstance(obj, Mapping) and step in obj:
        return obj[step]
    member = getattr(obj, step)
    return member() if callable(member) else member


@dataclass(frozen=True)
class SourceBinding:
    """
    Uma forma de produzir o resultado de um data method.

    Campos:
        - target: variante de target (ou None → o próprio host é o resultado do target)
        - transform: None (identidade), callable, ou tupla de passos de acesso
        - options: opções livres declaradas junto ao source
    """
    target: Target = None
    transform: Transform = None
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def target_name(self) -> Optional[str]:
        if isinstance(self.target, MethodTarget):
            return self.target.name
        return None

    def evaluate_target(self, host: Any) -> Any:
        if self.target is None:
            return host
        return self.target.evaluate(host)

    def apply_transform(self, value: Any) -> Any:
        if self.transform is None:
            return value
        if callable(self.transform):
            return self.transform(value)
        result = value
        for step in self.transform:
            result = read_member(result, step)
        return result


@dataclass(frozen=True)
class MethodSpec:
    """
    Especificação imutável de um data method.

    Campos:
        - name: identificador único dentro da classe dona
        - scopes: scope queries (opacas; repassadas ao `has_scope` do host)
        - scope_mode: combinação das queries (default OR)
        - scope_options: opções adicionais repassadas ao `has_scope`
        - conditions: expressões booleanas (vazio → sempre verdadeiro)
        - sources: bindings em ordem de prioridade declarada
        - storage: chave de cache explícita, STORAGE_DISABLED, ou None (usa `name`)
        - default_value: valor usado quando nenhum source produz resultado
        - info_key: chave opcional usada por `apply_data_methods`
    """
    name: str
    scopes: Tuple[Any, ...] = ()
    scope_mode: ScopeMode = ScopeMode.OR
    scope_options: Dict[str, Any] = field(default_factory=dict)
    conditions: Tuple[Any, ...] = ()
    sources: Tuple[SourceBinding, ...] = ()
    storage: Union[str, _StorageDisabled, None] = None
    default_value: Any = None
    info_key: Optional[str] = None

    @property
    def caching_enabled(self) -> bool:
        return self.storage is not STORAGE_DISABLED

    @property
    def storage_key(self) -> Optional[str]:
        if not self.caching_enabled:
            return None
        return self.storage or self.name
