"""
DataMethods: Canonical Exceptions (v1)

Este módulo define as exceções tipadas internas do DataMethods.

Objetivo:
- Permitir que registry, builder e resolver levantem exceções semânticas tipadas
- Carregar dados estruturados (`details`) para diagnóstico
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Erros levantados por sources (target ou transform) NÃO são encapsulados aqui;
  eles propagam inalterados para o chamador.
- Exceções devem carregar apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DataMethodsException(Exception):
    """Base class para exceções internas do DataMethods.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Declaração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvalidMethodSpecError(DataMethodsException):
    """Declaração de data method inválida (nome, scope logic, transform)."""


@dataclass(frozen=True)
class RegistryClosedError(DataMethodsException):
    """Tentativa de registrar data method após o registry ser fechado."""


# ---------------------------------------------------------------------------
# Resolução
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnknownDataMethodError(DataMethodsException):
    """Nome chamado não corresponde a nenhum data method registrado."""


@dataclass(frozen=True)
class ScopeCheckUnavailableError(DataMethodsException):
    """Data method declara scopes, mas o host não implementa `has_scope`."""


@dataclass(frozen=True)
class CyclicResolutionError(DataMethodsException):
    """Data method reentrou em si mesmo durante a resolução na mesma thread."""
