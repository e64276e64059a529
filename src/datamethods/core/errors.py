"""
DataMethods: Canonical Error Structures (v1)

Este módulo define o payload canônico de diagnósticos do DataMethods.

Diagnósticos não são exceções: representam condições de configuração
detectadas por inspeção (ex.: dependência declarada sem accessor) e são
entregues ao host como lista, nunca levantados.

Payloads devem ser:

- explícitos
- serializáveis
- acionáveis
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DataMethodsErrorPayload:
    """
    Payload canônico de diagnóstico do DataMethods.

    Campos:
    - type: código estável do diagnóstico (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao desenvolvedor do host (onde corrigir)
    - fatal: sempre False para warnings de configuração
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None
    fatal: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do diagnóstico."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos (v1)
# ---------------------------------------------------------------------------

CONFIGURATION_MISSING_DEPENDENCY = "CONFIGURATION_MISSING_DEPENDENCY"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def missing_dependency(
    *,
    dependency: str,
    owner: str,
    cited_by: List[str],
    hint: str = "Declare um data method ou um método no host com esse nome, ou remova o source que o referencia.",
) -> DataMethodsErrorPayload:
    return DataMethodsErrorPayload(
        type=CONFIGURATION_MISSING_DEPENDENCY,
        message="Dependência declarada sem accessor invocável",
        details={
            "dependency": dependency,
            "owner": owner,
            "cited_by": list(cited_by),
        },
        hint=hint,
        fatal=False,
    )
