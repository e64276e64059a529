# src/datamethods/core/methods/builder.py
"""
Builder declarativo de data methods.

Este módulo implementa a superfície de declaração usada pela classe dona
para descrever um data method. O builder é mutável durante a declaração
e compilado uma única vez em um `MethodSpec` imutável via `build()`.

Superfície de declaração:
    - scope(query, options=None)       (repetível)
    - scope_opts(options)
    - source(target=None, transform=None, **options)  (repetível)
    - storage(key_or_false)
    - condition(expr)                  (repetível)
    - default_value(value)
    - info_key(key)

Decisões arquiteturais:
    - Setters retornam o próprio builder (encadeamento)
    - Strings passadas como target viram `MethodTarget`, nunca código
    - Callables passados como target viram `Expression`
    - Declarações inválidas falham no momento da declaração

Limites explícitos:
    - Não registra o spec (responsabilidade do registry)
    - Não resolve nem avalia nada contra o host
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from datamethods.core.exceptions import InvalidMethodSpecError

from .types import (
    STORAGE_DISABLED,
    Expression,
    Literal,
    MethodSpec,
    MethodTarget,
    ScopeMode,
    SourceBinding,
)


_FIELDS = ("scope", "scope_opts", "source", "storage", "condition", "default_value", "info_key")


def _coerce_scope_mode(value: Any, name: str) -> ScopeMode:
    if isinstance(value, ScopeMode):
        return value
    if isinstance(value, str) and value.lower() in (m.value for m in ScopeMode):
        return ScopeMode(value.lower())
    raise InvalidMethodSpecError(
        message=f"Invalid scope logic for data method '{name}': {value!r}",
        details={"data_method": name, "logic": repr(value)},
        hint="Use 'and' ou 'or'.",
    )


def _coerce_target(target: Any):
    if target is None or isinstance(target, (MethodTarget, Literal, Expression)):
        return target
    if isinstance(target, str):
        return MethodTarget(target)
    if callable(target):
        return Expression(target)
    return Literal(target)


def _coerce_transform(transform: Any, name: str):
    if transform is None or callable(transform):
        return transform
    if isinstance(transform, str):
        steps = tuple(s for s in transform.split(".") if s)
    elif isinstance(transform, (list, tuple)):
        steps = tuple(transform)
    else:
        steps = ()
    if not steps or not all(isinstance(s, str) and s for s in steps):
        raise InvalidMethodSpecError(
            message=f"Invalid transform for data method '{name}': {transform!r}",
            details={"data_method": name, "transform": repr(transform)},
            hint="Use um callable, um caminho 'a.b.c' ou uma lista de nomes de membros.",
        )
    return steps


class MethodSpecBuilder:
    """Acumula a declaração de um data method e compila um `MethodSpec`."""

    def __init__(self, name: str):
        if not isinstance(name, str) or not name.strip():
            raise InvalidMethodSpecError(
                message="data method name must be a non-empty string",
                details={"name": repr(name)},
            )
        self.name = name
        self._scopes: List[Any] = []
        self._scope_mode: ScopeMode = ScopeMode.OR
        self._scope_options: Dict[str, Any] = {}
        self._sources: List[SourceBinding] = []
        self._conditions: List[Any] = []
        self._storage: Any = None
        self._default_value: Any = None
        self._info_key: Optional[str] = None

    @classmethod
    def from_fields(cls, name: str, fields: Mapping) -> "MethodSpecBuilder":
        """Forma literal estruturada: cada chave corresponde a um setter.

        `source`, `scope` e `condition` aceitam lista ou tupla (uma declaração
        por item). Um item de `source` pode ser um target simples ou um dict
        com `target` e/ou `transform` e opções adicionais; valores fixos em
        forma de dict devem vir envolvidos em `Literal`.
        """
        unknown = sorted(set(fields) - set(_FIELDS))
        if unknown:
            raise InvalidMethodSpecError(
                message=f"Unknown fields for data method '{name}': {unknown}",
                details={"data_method": name, "unknown": unknown},
            )
        builder = cls(name)
        for query in _as_list(fields.get("scope")):
            builder.scope(query)
        if "scope_opts" in fields:
            builder.scope_opts(fields["scope_opts"])
        for src in _as_list(fields.get("source")):
            if isinstance(src, Mapping):
                builder.source(**_source_fields(name, src))
            else:
                builder.source(src)
        for cond in _as_list(fields.get("condition")):
            builder.condition(cond)
        if "storage" in fields:
            builder.storage(fields["storage"])
        if "default_value" in fields:
            builder.default_value(fields["default_value"])
        if "info_key" in fields:
            builder.info_key(fields["info_key"])
        return builder

    # -----------------------------
    # Scopes
    # -----------------------------
    def scope(self, query: Any, options: Optional[Mapping] = None) -> "MethodSpecBuilder":
        if isinstance(query, (list, tuple)):
            self._scopes.extend(query)
        else:
            self._scopes.append(query)
        if options:
            self.scope_opts(options)
        return self

    def scope_opts(self, options: Union[Mapping, ScopeMode, str]) -> "MethodSpecBuilder":
        if isinstance(options, (ScopeMode, str)):
            self._scope_mode = _coerce_scope_mode(options, self.name)
            return self
        opts = dict(options or {})
        if "logic" in opts:
            self._scope_mode = _coerce_scope_mode(opts.pop("logic"), self.name)
        self._scope_options.update(opts)
        return self

    # -----------------------------
    # Sources
    # -----------------------------
    def source(self, target: Any = None, transform: Any = None, **options: Any) -> "MethodSpecBuilder":
        self._sources.append(
            SourceBinding(
                target=_coerce_target(target),
                transform=_coerce_transform(transform, self.name),
                options=options,
            )
        )
        return self

    # -----------------------------
    # Cache, conditions, default
    # -----------------------------
    def storage(self, key: Union[str, bool, None]) -> "MethodSpecBuilder":
        if key is False or key is STORAGE_DISABLED:
            self._storage = STORAGE_DISABLED
        elif key is None or key is True:
            self._storage = None
        elif isinstance(key, str) and key.strip():
            self._storage = key
        else:
            raise InvalidMethodSpecError(
                message=f"Invalid storage key for data method '{self.name}': {key!r}",
                details={"data_method": self.name, "storage": repr(key)},
                hint="Use uma string não vazia, True (nome do método) ou False (sem cache).",
            )
        return self

    def condition(self, expr: Any) -> "MethodSpecBuilder":
        self._conditions.append(expr)
        return self

    def default_value(self, value: Any) -> "MethodSpecBuilder":
        self._default_value = value
        return self

    def info_key(self, key: Optional[str]) -> "MethodSpecBuilder":
        self._info_key = key
        return self

    def build(self) -> MethodSpec:
        return MethodSpec(
            name=self.name,
            scopes=tuple(self._scopes),
            scope_mode=self._scope_mode,
            scope_options=dict(self._scope_options),
            conditions=tuple(self._conditions),
            sources=tuple(self._sources),
            storage=self._storage,
            default_value=self._default_value,
            info_key=self._info_key,
        )


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _source_fields(name: str, item: Mapping) -> Dict[str, Any]:
    """Item dict de `source`: exige `target` ou `transform`; demais chaves são opções."""
    if "target" not in item and "transform" not in item:
        raise InvalidMethodSpecError(
            message=f"Source mapping for data method '{name}' has neither target nor transform",
            details={"data_method": name, "keys": sorted(map(str, item))},
            hint="Use {'target': ..., 'transform': ...} ou envolva valores fixos em Literal(...).",
        )
    return dict(item)
