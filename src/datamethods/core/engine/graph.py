# src/datamethods/core/engine/graph.py
"""
Grafo de dependências de data methods.

Este módulo deriva, a partir de um `MethodRegistry`, a estrutura que
mapeia cada data method para os nomes que seus sources referenciam,
direta e transitivamente.

O grafo é puramente estrutural:
    - é calculado somente a partir do registry
    - é idêntico para todas as instâncias de uma mesma classe
    - é memoizado por versão do registry (mutações invalidam o memo)

Operações:
    - direct_dependencies(spec)     → nomes de target dos sources do spec
    - transitive_dependencies(spec) → fecho transitivo (tolerante a ciclos)
    - citation_counts()             → quantos sources do registry citam cada nome
    - dependency_tree()             → nome → {dependência: contagem de citações}
    - flattened(filter)             → tabela achatada, filtrada e ordenada

Decisões arquiteturais:
    - Ciclos não são erro estrutural aqui: uma visita repetida não contribui
    - Apenas targets nomeados (`MethodTarget`) são dependências
    - Nomes citados que não são data methods (accessors do host) também
      aparecem como dependências
    - As contagens servem apenas para ordenação e diagnóstico

Invariantes:
    - A mesma versão do registry sempre produz o mesmo grafo
    - O cálculo termina para qualquer registry, inclusive com ciclos

Limites explícitos:
    - Não resolve data methods
    - Não conhece a allow-list ativa de instâncias
"""

from __future__ import annotations

import re
import threading
from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Set, Union

from datamethods.core.methods.registry import MethodRegistry
from datamethods.core.methods.types import MethodSpec

from .ordering import Unmatched, order_against_reference


DependencyFilter = Union[None, str, "re.Pattern[str]", Callable[[str], bool]]


def compile_filter(filter: DependencyFilter) -> Callable[[str], bool]:
    """Normaliza um filtro (None, regex ou predicado) em predicado."""
    if filter is None:
        return lambda name: True
    if isinstance(filter, str):
        pattern = re.compile(filter)
        return lambda name: pattern.search(name) is not None
    if isinstance(filter, re.Pattern):
        return lambda name: filter.search(name) is not None
    if callable(filter):
        return lambda name: bool(filter(name))
    raise TypeError(f"dependency filter must be a regex or a predicate, got {type(filter).__name__}")


def _unique(names) -> List[str]:
    seen: Set[str] = set()
    out: List[str] = []
    for n in names:
        if n not in seen:
            seen.add(n)
            out.append(n)
    return out


class DependencyGraph:
    """Grafo de dependências derivado de um registry (memoizado por versão)."""

    def __init__(self, registry: MethodRegistry):
        self.registry = registry
        self._memo_version: Optional[int] = None
        self._memo: Dict[str, Any] = {}
        self._lock = threading.Lock()

    # -----------------------------
    # Dependências de um spec
    # -----------------------------
    def direct_dependencies(self, spec: MethodSpec) -> List[str]:
        return _unique(src.target_name for src in spec.sources if src.target_name is not None)

    def transitive_dependencies(self, spec: MethodSpec) -> List[str]:
        return self._transitive(spec, set())

    def _transitive(self, spec: MethodSpec, visited: Set[str]) -> List[str]:
        if spec.name in visited:
            return []
        visited.add(spec.name)
        out: List[str] = []
        for dep in self.direct_dependencies(spec):
            out.append(dep)
            if dep in self.registry:
                out.extend(self._transitive(self.registry.get(dep), visited))
        return _unique(out)

    # -----------------------------
    # Visões do registry inteiro
    # -----------------------------
    def citation_counts(self) -> Dict[str, int]:
        return dict(self._memoized("counts", self._build_counts))

    def dependency_tree(self) -> Dict[str, Dict[str, int]]:
        tree = self._memoized("tree", self._build_tree)
        return {name: dict(deps) for name, deps in tree.items()}

    def flattened(self, filter: DependencyFilter = None) -> Dict[str, int]:
        """
        Une todos os nomes de dependência e todos os nomes do registry.

        A ordem segue a ordem de declaração do registry; nomes que não são
        data methods vêm antes, na ordem em que aparecem na árvore.

        Returns:
            Dict[str, int]: nome → quantidade de sources que o citam.
        """
        accept = compile_filter(filter)
        counts = self._memoized("counts", self._build_counts)
        both = self._memoized("both", self._build_both)
        return {name: counts.get(name, 0) for name in both if accept(name)}

    # -----------------------------
    # Memo por versão
    # -----------------------------
    def _memoized(self, key: str, build: Callable[[], Any]) -> Any:
        with self._lock:
            if self._memo_version != self.registry.version:
                self._memo = {}
                self._memo_version = self.registry.version
            if key not in self._memo:
                self._memo[key] = build()
            return self._memo[key]

    def _build_counts(self) -> Counter:
        counts: Counter = Counter()
        for spec in self.registry.all().values():
            for src in spec.sources:
                if src.target_name is not None:
                    counts[src.target_name] += 1
        return counts

    def _build_tree(self) -> Dict[str, Dict[str, int]]:
        counts = self._build_counts()
        return {
            name: {dep: counts[dep] for dep in self.transitive_dependencies(spec)}
            for name, spec in self.registry.all().items()
        }

    def _build_both(self) -> List[str]:
        names = self.registry.names()
        deps = _unique(dep for deps in self._build_tree().values() for dep in deps)
        both = _unique(deps + names)
        return order_against_reference(both, names, Unmatched.BEGINNING)
