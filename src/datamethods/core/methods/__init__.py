# src/datamethods/core/methods/__init__.py
"""
# Methods Core (DataMethods)

Este pacote define as **estruturas de declaração** de data methods.

## Componentes

- **types**
  - `MethodSpec`: especificação imutável de um data method
  - `SourceBinding`: par (target, transform)
  - `MethodTarget` / `Literal` / `Expression`: variantes fechadas de target
  - `ScopeMode`: combinação de scope queries

- **builder**
  - `MethodSpecBuilder`: superfície declarativa (scope, source, storage, condition, ...)

- **registry**
  - `MethodRegistry`: mapeamento ordenado nome → spec por classe dona

- **context**
  - `ResolutionContext`: cache, locks e log por instância

## Invariantes

- Specs são imutáveis após `build()`
- O registry é compartilhado; o contexto é exclusivo da instância
"""
