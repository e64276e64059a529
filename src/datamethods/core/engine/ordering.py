# src/datamethods/core/engine/ordering.py
"""
Ordenação contra uma sequência de referência.

Este módulo implementa o algoritmo estável que posiciona elementos de
acordo com a primeira ocorrência de cada um em uma sequência de
referência, fixando os elementos sem correspondência em uma das pontas.

O algoritmo é usado para:
    - apresentar a tabela de dependências achatada na ordem de declaração
    - ordenar os sources candidatos de um data method pela prioridade
      ativa da instância

Política (v1):
    1. Particiona a entrada em `matched` (presentes na referência) e `unmatched`
    2. Ordena `matched` pelo índice da primeira ocorrência na referência,
       desempatando pela posição original
    3. BEGINNING → unmatched + matched;  END → matched + unmatched

Invariantes:
    - A ordem relativa de `unmatched` é preservada
    - A saída é uma permutação da entrada
    - A mesma entrada sempre produz a mesma saída
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union


T = TypeVar("T")


class Unmatched(str, Enum):
    """Ponta em que elementos ausentes da referência são fixados."""
    BEGINNING = "beginning"
    END = "end"


def order_against_reference(
    items: Iterable[T],
    reference: Iterable[Any],
    unmatched: Union[Unmatched, str] = Unmatched.BEGINNING,
    key: Optional[Callable[[T], Any]] = None,
) -> List[T]:
    """
    Ordena `items` pela posição de cada elemento (ou de `key(elemento)`) em `reference`.

    Args:
        items: Sequência a ordenar.
        reference: Sequência de referência (prioridade).
        unmatched: Onde fixar elementos ausentes da referência.
        key: Extrai o valor comparado com a referência (default: o próprio elemento).

    Returns:
        List: Nova lista ordenada.

    Raises:
        ValueError: Se `unmatched` não for 'beginning' ou 'end'.
    """
    placement = Unmatched(unmatched)
    index: Dict[Any, int] = {}
    for pos, ref in enumerate(reference):
        index.setdefault(ref, pos)

    extract = key or (lambda v: v)
    matched: List[tuple] = []
    rest: List[T] = []
    for pos, item in enumerate(items):
        k = extract(item)
        if k in index:
            matched.append((index[k], pos, item))
        else:
            rest.append(item)

    ordered = [item for _, _, item in sorted(matched, key=lambda t: (t[0], t[1]))]
    if placement is Unmatched.BEGINNING:
        return rest + ordered
    return ordered + rest
