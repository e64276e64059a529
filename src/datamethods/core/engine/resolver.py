# src/datamethods/core/engine/resolver.py
"""
Resolução de data methods.

Este módulo implementa a máquina de estados executada a cada chamada de
um data method:

    gate → select_sources → try_sources → fallback → done

seguida (ou precedida, em caso de cache hit) pelo cache single-slot.

Fases:
    - gate: scopes (via `has_scope` do host) e conditions. Falha no gate
      não é erro: a resolução segue direto para o fallback.
    - select_sources: filtra sources elegíveis pela allow-list ativa da
      instância e os reordena por ela.
    - try_sources: avalia target e transform de cada source elegível; o
      primeiro resultado truthy encerra o laço.
    - fallback: `default_value` quando nenhum source produziu resultado.

Política de falhas (fail-fast):
    - Exceções levantadas por target ou transform propagam inalteradas
    - Nenhum source seguinte, nem o default, é tentado após um erro
    - Nada é gravado no cache quando a resolução falha

Invariantes:
    - Um resultado falsy nunca é cacheado
    - Um cache hit não reentra na máquina de estados
    - Para um mesmo nome, a resolução ocorre sob o lock do data method

Limites explícitos:
    - Não captura nem re-tenta erros de sources
    - Não implementa checagem de scopes (capacidade externa do host)
"""

from __future__ import annotations

from typing import Any, Callable, List

from datamethods.core.exceptions import CyclicResolutionError, ScopeCheckUnavailableError
from datamethods.core.methods.context import ResolutionContext
from datamethods.core.methods.types import MethodSpec, SourceBinding

from .ordering import Unmatched, order_against_reference


# ----------------------------------------------------------------------
# Gate
# ----------------------------------------------------------------------

def resolve_scopes(host: Any, spec: MethodSpec) -> bool:
    if not spec.scopes:
        return True
    checker = getattr(host, "has_scope", None)
    if checker is None:
        raise ScopeCheckUnavailableError(
            message=f"Data method '{spec.name}' declares scopes but the host has no has_scope()",
            details={"data_method": spec.name, "host": type(host).__name__},
            hint="Implemente has_scope(queries, options) no host.",
        )
    options = dict(spec.scope_options)
    options["logic"] = spec.scope_mode.value
    return bool(checker(list(spec.scopes), options))


def resolve_conditions(host: Any, conditions: Any) -> bool:
    """Avalia conditions: sequência com >1 elemento é AND; com 1 elemento, recursão."""
    if isinstance(conditions, (list, tuple)):
        if not conditions:
            return True
        if len(conditions) > 1:
            return all(resolve_conditions(host, c) for c in conditions)
        return resolve_conditions(host, conditions[0])
    if isinstance(conditions, str):
        member = getattr(host, conditions)
        return bool(member() if callable(member) else member)
    if callable(conditions):
        return bool(conditions(host))
    return bool(conditions)


# ----------------------------------------------------------------------
# Sources
# ----------------------------------------------------------------------

def select_sources(host: Any, spec: MethodSpec) -> List[SourceBinding]:
    """
    Seleciona e ordena os sources elegíveis para a instância.

    Um source é elegível quando seu target está na allow-list ativa, ou
    quando não é um nome gerenciado (fora do conjunto mestre filtrado).
    Targets não nomeados (literal, expressão, host) são sempre elegíveis.
    """
    active = list(host.dependencies())
    managed = host.managed_dependencies()
    allowed = set(active)
    managed_set = set(managed)

    eligible = [
        src for src in spec.sources
        if src.target_name is None
        or src.target_name in allowed
        or src.target_name not in managed_set
    ]
    return order_against_reference(eligible, active, Unmatched.BEGINNING, key=lambda s: s.target_name)


def resolve_source(host: Any, src: SourceBinding) -> Any:
    target_result = src.evaluate_target(host)
    if not target_result:
        return None
    return src.apply_transform(target_result)


# ----------------------------------------------------------------------
# Cache
# ----------------------------------------------------------------------

def with_cache(ctx: ResolutionContext, spec: MethodSpec, compute: Callable[[], Any]) -> Any:
    key = spec.storage_key
    cached = ctx.get_cached(key)
    if cached:
        ctx.log(method=spec.name, level="debug", message="cache hit", storage_key=key)
        return cached
    result = compute()
    if result and key is not None:
        ctx.set_cached(key, result)
    return result


# ----------------------------------------------------------------------
# Chamada completa
# ----------------------------------------------------------------------

def _compute(host: Any, spec: MethodSpec, ctx: ResolutionContext) -> Any:
    ctx.log(method=spec.name, level="debug", message="resolving")

    if not (resolve_scopes(host, spec) and resolve_conditions(host, spec.conditions)):
        ctx.log(method=spec.name, level="debug", message="gate failed; using default value")
        return spec.default_value

    for src in select_sources(host, spec):
        result = resolve_source(host, src)
        if result:
            ctx.log(method=spec.name, level="debug", message="source resolved", source=src.target_name)
            return result

    ctx.log(method=spec.name, level="debug", message="no source produced a result; using default value")
    return spec.default_value


def resolve(host: Any, spec: MethodSpec, ctx: ResolutionContext) -> Any:
    """Resolve `spec` para `host` sob o lock do data method."""
    with ctx.lock_for(spec.name):
        stack = ctx.resolving()
        if spec.name in stack:
            raise CyclicResolutionError(
                message=f"Cyclic resolution of data method '{spec.name}'",
                details={"data_method": spec.name, "path": stack + [spec.name]},
                hint="Remova o ciclo entre os sources declarados.",
            )
        stack.append(spec.name)
        try:
            return with_cache(ctx, spec, lambda: _compute(host, spec, ctx))
        finally:
            stack.pop()

