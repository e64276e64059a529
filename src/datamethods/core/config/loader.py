# src/datamethods/core/config/loader.py
"""
Loader de configuração do DataMethods.

A configuração efetiva é uma pilha de camadas aplicadas em ordem:

    defaults (obrigatório) → local (opcional; ignorado se não existir)

Cada camada é lida por um reader escolhido pela extensão do arquivo e
combinada com a anterior via `deep_merge`.

Readers (v1):
    - .yaml / .yml → PyYAML `safe_load`
    - .json        → json

Invariantes:
    - Toda camada lida é um `dict` (arquivo vazio → `{}`)
    - Overrides nunca mutam as camadas anteriores

Limites explícitos:
    - Não valida a seção `data_methods` (ver `options`)
    - Não avalia expressões contidas na configuração
"""

from __future__ import annotations

import json
from functools import reduce
from pathlib import Path
from typing import IO, Any, Callable, Dict, List, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


PathLike = Union[str, Path]

_READERS: Dict[str, Callable[[IO[str]], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def read_config_file(path: PathLike) -> Dict[str, Any]:
    """Lê uma camada de configuração e garante que a raiz é um dict."""
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: {path.suffix or '<sem extensão>'} (use {sorted(_READERS)})"
        )
    with path.open("r", encoding="utf-8") as f:
        data = reader(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict em {path.name}, recebido: {type(data).__name__}"
        )
    return data


def load_config(*, defaults_path: PathLike, local_path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva (defaults + local).

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se a extensão de uma camada não tiver reader.
        InvalidConfigRootTypeError: Se uma camada não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """
    defaults = Path(defaults_path)
    if not defaults.exists():
        raise DefaultsNotFoundError(f"Arquivo de defaults não encontrado: {defaults}")

    layers: List[Dict[str, Any]] = [read_config_file(defaults)]
    if local_path is not None and Path(local_path).exists():
        layers.append(read_config_file(local_path))
    return reduce(deep_merge, layers)
