# tests/conftest.py
"""
Fixtures compartilhados para testes do DataMethods.

Este módulo define fixtures reutilizáveis que fornecem:
- YAMLs de configuração (defaults e override local)
- fábricas de classes donas isoladas (um registry novo por teste)
- sources instrumentados com contador de chamadas

Decisões arquiteturais:
    - Cada teste declara data methods em uma subclasse nova, nunca em
      uma classe compartilhada, porque o registry é estado de classe
    - Sources instrumentados são thread-safe para testes de concorrência

Invariantes:
    - Nenhuma fixture realiza I/O de rede
    - Nenhuma fixture depende de ordem de execução dos testes
"""

import threading

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def data_methods_defaults_yaml() -> str:
    """YAML de defaults com a seção `data_methods` completa."""
    return """\
data_methods:
  dependencies: null
  dependency_filter: "^(team|user)"
  log_level: info
  preload:
    threads: 2
"""


@pytest.fixture
def data_methods_local_yaml() -> str:
    """YAML de override local: allow-list explícita e mais threads."""
    return """\
data_methods:
  dependencies: [user_profile, user_id]
  log_level: debug
  preload:
    threads: 4
"""


# =====================================================
# Host fixtures
# =====================================================

@pytest.fixture
def make_host():
    """
    Fábrica de classes donas isoladas.

    Retorna uma função `make_host(name="Host", has_scope=None, **attrs)` que
    cria uma subclasse nova de `DataMethods`. `has_scope`, quando fornecido,
    vira o método `has_scope(queries, options)` da classe; `attrs` viram
    atributos/métodos adicionais do host.
    """
    from datamethods import DataMethods

    def _make(name: str = "Host", has_scope=None, **attrs):
        body = dict(attrs)
        if has_scope is not None:
            body["has_scope"] = lambda self, queries, options: has_scope(queries, options)
        return type(name, (DataMethods,), body)

    return _make


class CountingSource:
    """Source instrumentado: conta chamadas e devolve um valor fixo."""

    def __init__(self, value, delay: float = 0.0):
        self.value = value
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, host):
        with self._lock:
            self.calls += 1
        if self.delay:
            threading.Event().wait(self.delay)
        return self.value


@pytest.fixture
def counting_source():
    """Fábrica de `CountingSource(value, delay=0.0)`."""
    return CountingSource
