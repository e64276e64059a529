# src/datamethods/core/engine/preload.py
"""
Preload concorrente de data methods.

Este módulo popula antecipadamente o cache de uma instância, resolvendo
vários data methods em paralelo com um pool de threads.

Política (v1):
    - Idempotente por instância: um segundo preload é no-op
    - `worker_count <= 0` torna o preload no-op
    - Os nomes são enfileirados em uma fila compartilhada
    - Cada worker consome a fila até encontrá-la vazia (término esperado)
    - A chamada bloqueia até que todos os workers terminem
    - Exceções de sources propagam após o término de todos os workers

Invariantes:
    - Cada data method é resolvido sob seu próprio lock (via accessor)
    - Nomes que não são data methods invocam o accessor homônimo do host
    - Nenhuma ordem é garantida entre data methods não relacionados
    - Não há timeout nem cancelamento

Limites explícitos:
    - Não decide quais métodos pré-carregar (responsabilidade do host)
    - Não captura erros de sources
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Union

from datamethods.core.methods.context import ResolutionContext
from datamethods.core.methods.types import MethodTarget


def normalize_names(method_names: Union[str, Iterable[str], None]) -> List[str]:
    """Aceita lista de nomes ou string separada por espaços/vírgulas."""
    if method_names is None:
        return []
    if isinstance(method_names, str):
        return [w for w in method_names.replace(",", " ").split() if w]
    return list(method_names)


def _drain(host: Any, work: "queue.Queue[str]", ctx: ResolutionContext) -> int:
    done = 0
    while True:
        try:
            name = work.get_nowait()
        except queue.Empty:
            return done
        ctx.log(method=name, level="debug", message="preloading", thread=threading.get_ident())
        MethodTarget(name).evaluate(host)
        done += 1


def preload(host: Any, ctx: ResolutionContext, method_names: Union[str, Iterable[str], None], worker_count: int) -> int:
    """
    Resolve `method_names` em paralelo com `worker_count` workers.

    Returns:
        int: Quantidade de data methods resolvidos (0 quando no-op).
    """
    if worker_count <= 0 or not ctx.claim_preload():
        return 0

    names = normalize_names(method_names)
    ctx.log(method=None, level="info", message=f"Preloading ({len(names)}) methods with ({worker_count}) threads")

    work: "queue.Queue[str]" = queue.Queue()
    for name in names:
        work.put(name)

    with ThreadPoolExecutor(max_workers=worker_count) as pool:
        futures = [pool.submit(_drain, host, work, ctx) for _ in range(worker_count)]
    return sum(f.result() for f in futures)
