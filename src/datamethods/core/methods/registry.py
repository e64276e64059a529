# src/datamethods/core/methods/registry.py
"""
Registro de data methods por classe dona.

Este módulo define o `MethodRegistry`, o mapeamento ordenado de nome de
data method para `MethodSpec` mantido por cada classe que declara data
methods.

Responsabilidades do módulo:
    - Inserir ou substituir especificações preservando a ordem de declaração
    - Instalar o accessor correspondente na classe dona
    - Informar quais nomes não possuem accessor invocável (diagnóstico)
    - Expor uma versão monotônica para invalidar memos derivados (grafo)

Decisões arquiteturais:
    - O registry é append-only durante a montagem da classe
    - `freeze()` fecha o registry; registros posteriores são erro
    - Substituir um nome mantém sua posição original na ordem
    - `missing()` é diagnóstico, nunca controle de fluxo

Invariantes:
    - Cada nome aparece uma única vez
    - `version` cresce a cada mutação
    - O registry é compartilhado (somente leitura) por todas as instâncias da classe

Limites explícitos:
    - Não calcula o grafo de dependências
    - Não resolve data methods
    - Não mantém estado por instância
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, Iterator, List, Optional

from datamethods.core.exceptions import RegistryClosedError, UnknownDataMethodError

from .types import MethodSpec


class MethodRegistry:
    """Mapeamento ordenado nome → MethodSpec de uma classe dona."""

    def __init__(self, owner: Optional[type] = None, specs: Optional[Iterable[MethodSpec]] = None):
        self.owner = owner
        self._specs: Dict[str, MethodSpec] = {}
        self._version = 0
        self._closed = False
        self._lock = threading.Lock()
        for spec in specs or ():
            self.register(spec)

    @property
    def version(self) -> int:
        return self._version

    def register(self, spec: MethodSpec) -> MethodSpec:
        if not isinstance(spec, MethodSpec):
            raise TypeError("spec must be a MethodSpec")
        with self._lock:
            if self._closed:
                raise RegistryClosedError(
                    message=f"Registry is closed; cannot register data method '{spec.name}'",
                    details={"data_method": spec.name, "owner": self._owner_name()},
                    hint="Declare data methods durante a montagem da classe, antes de freeze().",
                )
            self._specs[spec.name] = spec
            self._version += 1
        if self.owner is not None:
            # import tardio: host depende de registry
            from datamethods.core.host import DataMethodAccessor

            setattr(self.owner, spec.name, DataMethodAccessor(spec.name))
        return spec

    def freeze(self) -> None:
        self._closed = True

    def get(self, name: str) -> MethodSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise UnknownDataMethodError(
                message=f"Unknown data method: {name}",
                details={"data_method": name, "owner": self._owner_name()},
            ) from None

    def all(self) -> Dict[str, MethodSpec]:
        return dict(self._specs)

    def names(self) -> List[str]:
        return list(self._specs)

    def missing(self, names: Iterable[str]) -> List[str]:
        """Nomes sem accessor invocável na classe dona (diagnóstico)."""
        return [n for n in names if not _has_accessor(self.owner, n)]

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def _owner_name(self) -> Optional[str]:
        return getattr(self.owner, "__name__", None)


def _has_accessor(owner: Any, name: str) -> bool:
    if owner is None:
        return False
    for klass in getattr(owner, "__mro__", (owner,)):
        if name in vars(klass):
            member = vars(klass)[name]
            return callable(member) or hasattr(member, "__get__")
    return False
