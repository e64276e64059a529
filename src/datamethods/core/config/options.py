# src/datamethods/core/config/options.py
"""
Opções de data methods fornecidas pelo host.

Este módulo define `DataMethodsOptions`, a forma validada da seção
`data_methods` da configuração:

    data_methods:
      dependencies: [user_id, profile]   # lista ou string "user_id profile"
      dependency_filter: "^(user|team)"  # regex dos nomes gerenciados
      log_level: info                    # debug | info | warning | error | critical | fatal
      preload:
        threads: 2                       # workers default do preload

Decisões arquiteturais:
    - Chaves desconhecidas são rejeitadas (sem fallback silencioso)
    - `dependencies` em string é dividida por espaços/vírgulas, nunca avaliada
    - Em código, `dependencies` também aceita um callable `fn(host)`
    - Em código, `dependency_filter` também aceita um predicado

Invariantes:
    - `preload_threads` é um inteiro >= 0
    - `log_level` é um nível conhecido
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Union

from datamethods.core.methods.context import LOG_LEVELS

from .errors import InvalidOptionsError
from .loader import PathLike, load_config


SECTION = "data_methods"

_KEYS = {"dependencies", "dependency_filter", "log_level", "preload"}
_PRELOAD_KEYS = {"threads"}


Dependencies = Union[None, List[str], str, Callable[[Any], Any]]


@dataclass(frozen=True)
class DataMethodsOptions:
    """Opções efetivas de uma instância dona de data methods."""

    dependencies: Dependencies = None
    dependency_filter: Any = None
    log_level: str = "info"
    preload_threads: int = 1

    @classmethod
    def load(cls, defaults_path: PathLike, local_path: Optional[PathLike] = None) -> "DataMethodsOptions":
        """Carrega defaults + local, aplica o deep-merge e valida a seção `data_methods`."""
        return cls.from_config(load_config(defaults_path=defaults_path, local_path=local_path))

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "DataMethodsOptions":
        """Lê a seção `data_methods` de uma configuração resolvida."""
        section = (config or {}).get(SECTION) or {}
        return cls.from_dict(section)

    @classmethod
    def from_dict(cls, section: Mapping[str, Any]) -> "DataMethodsOptions":
        if not isinstance(section, Mapping):
            raise InvalidOptionsError(
                f"'{SECTION}' deve ser dict, recebido: {type(section).__name__}"
            )
        unknown = sorted(set(section) - _KEYS)
        if unknown:
            raise InvalidOptionsError(f"Chaves desconhecidas em '{SECTION}': {unknown}")

        deps = section.get("dependencies")
        if deps is not None and not isinstance(deps, (list, str)) and not callable(deps):
            raise InvalidOptionsError(
                f"'{SECTION}.dependencies' deve ser lista ou string, recebido: {type(deps).__name__}"
            )
        if isinstance(deps, list) and not all(isinstance(d, str) for d in deps):
            raise InvalidOptionsError(f"'{SECTION}.dependencies' deve conter apenas strings")

        level = section.get("log_level", "info")
        if level not in LOG_LEVELS:
            raise InvalidOptionsError(
                f"'{SECTION}.log_level' inválido: {level!r} (use {sorted(LOG_LEVELS)})"
            )

        preload = section.get("preload") or {}
        if not isinstance(preload, Mapping):
            raise InvalidOptionsError(f"'{SECTION}.preload' deve ser dict")
        unknown = sorted(set(preload) - _PRELOAD_KEYS)
        if unknown:
            raise InvalidOptionsError(f"Chaves desconhecidas em '{SECTION}.preload': {unknown}")
        threads = preload.get("threads", 1)
        if isinstance(threads, bool) or not isinstance(threads, int) or threads < 0:
            raise InvalidOptionsError(f"'{SECTION}.preload.threads' deve ser inteiro >= 0")

        return cls(
            dependencies=deps,
            dependency_filter=section.get("dependency_filter"),
            log_level=level,
            preload_threads=threads,
        )
