# src/datamethods/core/methods/context.py
"""
Contexto de resolução por instância.

Este módulo define o `ResolutionContext`, o estado exclusivo de cada
instância dona de data methods durante sua vida útil.

O ResolutionContext consolida:
    - o cache single-slot (storage_key → valor)
    - os locks de exclusão mútua por data method (criados sob demanda)
    - a pilha de resolução por thread (detecção de reentrada)
    - o flag de preload (idempotência)
    - o log estruturado de eventos

Princípios fundamentais:
    - Isolamento por instância (nunca compartilhado entre instâncias)
    - Nenhum estado global
    - Estrutura simples e testável

Invariantes:
    - Existe no máximo um lock por nome de data method
    - O cache nunca guarda valores falsy
    - Eventos sempre incluem `instance_id` e `method`

Limites explícitos:
    - Não resolve data methods
    - Não decide política de cache (responsabilidade do resolver)
    - Não persiste nada entre execuções do processo
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


LOG_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40, "critical": 50, "fatal": 50}


@dataclass
class ResolutionContext:
    """
    Estado de resolução de uma instância dona.

    Campos canônicos:
    - instance_id: identificador da instância dona (para eventos)
    - log_level: nível mínimo de eventos registrados
    - events: log estruturado de eventos
    - _cache: store single-slot (storage_key -> valor truthy)
    - _locks: locks por data method
    """

    instance_id: str
    log_level: str = "info"

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)

    _cache: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    _locks: Dict[str, threading.RLock] = field(default_factory=dict, init=False, repr=False)
    _guard: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _local: threading.local = field(default_factory=threading.local, init=False, repr=False)
    _preloaded: bool = field(default=False, init=False, repr=False)

    # -----------------------------
    # Cache store
    # -----------------------------
    def get_cached(self, key: Optional[str]) -> Any:
        if key is None:
            return None
        return self._cache.get(key)

    def set_cached(self, key: str, value: Any) -> None:
        self._cache[key] = value

    def clear_cache(self) -> None:
        self._cache.clear()

    # -----------------------------
    # Locks & reentrada
    # -----------------------------
    def lock_for(self, method: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(method)
            if lock is None:
                lock = threading.RLock()
                self._locks[method] = lock
            return lock

    def resolving(self) -> List[str]:
        """Pilha de data methods em resolução na thread corrente."""
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack

    # -----------------------------
    # Preload
    # -----------------------------
    def claim_preload(self) -> bool:
        """Marca o preload como iniciado; False se já havia sido iniciado."""
        with self._guard:
            if self._preloaded:
                return False
            self._preloaded = True
            return True

    # -----------------------------
    # Logging
    # -----------------------------
    def log(self, *, method: Optional[str], level: str, message: str, **extra: Any) -> None:
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level!r} (use {sorted(LOG_LEVELS)})")
        if LOG_LEVELS[level] < LOG_LEVELS.get(self.log_level, 0):
            return
        event = {
            "instance_id": self.instance_id,
            "method": method,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        with self._guard:
            self.events.append(event)
