# src/datamethods/core/host.py
"""
Superfície da classe dona de data methods.

Este módulo define o mixin `DataMethods`, que dá a uma classe:
    - um registry próprio de data methods (herdado e copiado por subclasses)
    - um grafo de dependências memoizado por classe
    - accessors que resolvem data methods sob o lock de cada método
    - um contexto de resolução exclusivo por instância
    - preload concorrente e diagnósticos de configuração

Exemplo:

    class SlackStrategy(DataMethods):
        def has_scope(self, queries, options):
            ...

    SlackStrategy.data_method("user_id", default_value="U1")
    SlackStrategy.data_method(
        "profile",
        lambda m: m.source("user_id", transform=lambda uid: f"{uid}-profile"),
    )

    strategy = SlackStrategy(options={"dependencies": ["profile", "user_id"]})
    strategy.profile()  # "U1-profile"

Decisões arquiteturais:
    - Accessors são descritores (lookup-and-invoke), não métodos gerados
    - O host fornece `has_scope(queries, options)` quando declara scopes
    - O registry é compartilhado por instâncias; cache e locks não

Limites explícitos:
    - Não implementa checagem de scopes nem transporte remoto
    - Lê configuração de disco apenas via `from_config_files` (ver `core.config`)
"""

from __future__ import annotations

import functools
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from datamethods.core.config.loader import PathLike
from datamethods.core.config.options import DataMethodsOptions
from datamethods.core.errors import DataMethodsErrorPayload, missing_dependency
from datamethods.core.exceptions import InvalidMethodSpecError
from datamethods.core.methods.builder import MethodSpecBuilder
from datamethods.core.methods.context import ResolutionContext
from datamethods.core.methods.registry import MethodRegistry
from datamethods.core.methods.types import MethodSpec
from datamethods.core.engine.graph import DependencyFilter, DependencyGraph
from datamethods.core.engine.ordering import order_against_reference
from datamethods.core.engine.preload import normalize_names, preload
from datamethods.core.engine.resolver import resolve


_CONTEXT_LOCK = threading.Lock()


class DataMethodAccessor:
    """Descritor instalado na classe dona para cada data method."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        return functools.partial(instance.call_data_method, self.name)

    def __repr__(self) -> str:
        return f"<data method accessor {self.name!r}>"


class DataMethods:
    """Mixin que habilita a declaração e a resolução de data methods."""

    _data_methods: MethodRegistry
    _dependency_graph: DependencyGraph

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # cópia dos specs do pai sem reinstalar accessors: overrides da subclasse prevalecem
        registry = MethodRegistry(specs=cls._data_methods.all().values())
        registry.owner = cls
        cls._data_methods = registry
        cls._dependency_graph = DependencyGraph(registry)

    def __init__(self, options: Union[DataMethodsOptions, Mapping[str, Any], None] = None):
        self.data_options = options

    @classmethod
    def from_config_files(cls, defaults_path: PathLike, local_path: Optional[PathLike] = None, **kwargs: Any):
        """Instancia a classe dona com opções lidas de defaults + override local."""
        return cls(options=DataMethodsOptions.load(defaults_path, local_path), **kwargs)

    # ------------------------------------------------------------------
    # Declaração (nível de classe)
    # ------------------------------------------------------------------
    @classmethod
    def data_method(
        cls,
        name: str,
        setup: Optional[Callable[[MethodSpecBuilder], Any]] = None,
        **fields: Any,
    ) -> MethodSpec:
        """
        Declara (ou substitui) um data method na classe.

        Args:
            name: Nome do data method (e do accessor instalado na classe).
            setup: Callable que recebe o `MethodSpecBuilder` e declara o método.
            **fields: Forma literal (scope, scope_opts, source, storage,
                condition, default_value, info_key).

        Returns:
            MethodSpec: Especificação imutável registrada.
        """
        if name in _RESERVED:
            raise InvalidMethodSpecError(
                message=f"Data method name clashes with a DataMethods member: {name}",
                details={"data_method": name, "owner": cls.__name__},
                hint="Escolha outro nome para o data method.",
            )
        builder = MethodSpecBuilder.from_fields(name, fields)
        if setup is not None:
            setup(builder)
        return cls._data_methods.register(builder.build())

    @classmethod
    def freeze_data_methods(cls) -> None:
        cls._data_methods.freeze()

    @classmethod
    def data_methods(cls) -> Dict[str, MethodSpec]:
        return cls._data_methods.all()

    @classmethod
    def dependency_graph(cls) -> DependencyGraph:
        return cls._dependency_graph

    @classmethod
    def dependency_tree(cls) -> Dict[str, Dict[str, int]]:
        return cls._dependency_graph.dependency_tree()

    @classmethod
    def class_dependencies(cls, filter: DependencyFilter = None) -> Dict[str, int]:
        """Tabela mestre achatada: nome → citações, na ordem do registry."""
        return cls._dependency_graph.flattened(filter)

    @classmethod
    def missing_dependencies(cls) -> List[str]:
        return cls._data_methods.missing(cls.class_dependencies())

    order_against_reference = staticmethod(order_against_reference)

    # ------------------------------------------------------------------
    # Estado por instância
    # ------------------------------------------------------------------
    @property
    def data_options(self) -> DataMethodsOptions:
        return self.__dict__.get("_data_options") or DataMethodsOptions()

    @data_options.setter
    def data_options(self, value: Union[DataMethodsOptions, Mapping[str, Any], None]) -> None:
        value = _coerce_options(value)
        self.__dict__["_data_options"] = value
        self.__dict__.pop("_active_dependencies", None)
        ctx = self.__dict__.get("_data_context")
        if ctx is not None:
            # resultados cacheados dependem da allow-list anterior
            ctx.log_level = value.log_level
            ctx.clear_cache()

    @property
    def data_context(self) -> ResolutionContext:
        ctx = self.__dict__.get("_data_context")
        if ctx is None:
            with _CONTEXT_LOCK:
                ctx = self.__dict__.get("_data_context")
                if ctx is None:
                    ctx = ResolutionContext(
                        instance_id=f"{type(self).__name__}:{id(self):x}",
                        log_level=self.data_options.log_level,
                    )
                    self.__dict__["_data_context"] = ctx
        return ctx

    @property
    def dependency_filter(self) -> DependencyFilter:
        return self.data_options.dependency_filter

    def dependencies(self, filter: DependencyFilter = None) -> List[str]:
        """
        Allow-list ativa da instância.

        Com `filter`, retorna a lista mestre da classe filtrada. Sem filtro,
        retorna as dependências configuradas (lista, string ou callable) ou,
        na ausência delas, a lista da classe filtrada por `dependency_filter`.
        """
        if filter is not None:
            return list(self.class_dependencies(filter))

        raw = self.data_options.dependencies
        if raw is None:
            version = self._data_methods.version
            memo = self.__dict__.get("_active_dependencies")
            if memo is None or memo[0] != version:
                memo = (version, list(self.class_dependencies(self.dependency_filter)))
                self.__dict__["_active_dependencies"] = memo
            return list(memo[1])
        if callable(raw):
            raw = raw(self)
        return normalize_names(raw)

    def managed_dependencies(self) -> List[str]:
        """Nomes sob gerenciamento: lista mestre filtrada por `dependency_filter`."""
        return list(self.class_dependencies(self.dependency_filter))

    # ------------------------------------------------------------------
    # Resolução
    # ------------------------------------------------------------------
    def call_data_method(self, name: str) -> Any:
        return resolve(self, self._data_methods.get(name), self.data_context)

    def preload(self, method_names: Any = None, worker_count: Optional[int] = None) -> int:
        """Pré-carrega caches em paralelo (idempotente por instância)."""
        names = self.dependencies() if method_names is None else method_names
        workers = self.data_options.preload_threads if worker_count is None else int(worker_count)
        return preload(self, self.data_context, names, workers)

    def apply_data_methods(self, into: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Preenche `into[info_key]` com o resultado de cada data method que declara `info_key`."""
        result: Dict[str, Any] = {} if into is None else into
        for name, spec in self._data_methods.all().items():
            if not spec.info_key:
                continue
            if not result.get(spec.info_key):
                result[spec.info_key] = self.call_data_method(name)
        return result

    # ------------------------------------------------------------------
    # Diagnóstico & logging
    # ------------------------------------------------------------------
    def diagnostics(self) -> List[DataMethodsErrorPayload]:
        graph = self._dependency_graph
        specs = self._data_methods.all()
        payloads = []
        for dep in self.missing_dependencies():
            cited_by = [n for n, s in specs.items() if dep in graph.direct_dependencies(s)]
            payloads.append(missing_dependency(dependency=dep, owner=type(self).__name__, cited_by=cited_by))
        return payloads

    def log(self, level: str, message: str) -> None:
        self.data_context.log(method=None, level=level, message=message)


DataMethods._data_methods = MethodRegistry()
DataMethods._data_methods.owner = DataMethods
DataMethods._dependency_graph = DependencyGraph(DataMethods._data_methods)

_RESERVED = frozenset(name for name in vars(DataMethods) if not name.startswith("__"))


def _coerce_options(options: Union[DataMethodsOptions, Mapping[str, Any], None]) -> DataMethodsOptions:
    if options is None:
        return DataMethodsOptions()
    if isinstance(options, DataMethodsOptions):
        return options
    return DataMethodsOptions.from_dict(options)
