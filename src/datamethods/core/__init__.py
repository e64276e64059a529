# src/datamethods/core/__init__.py
"""
Core do DataMethods.

Componentes principais:
    - methods → tipos de declaração, builder, registry e contexto de resolução
    - engine  → grafo de dependências, ordenação contra referência, resolver e preload
    - config  → loader YAML/JSON, deep-merge e opções validadas
    - host    → mixin da classe dona

Princípios fundamentais:
    - Nenhuma string é avaliada como código
    - Erros de sources propagam inalterados (fail-fast)
    - Falha de gate não é erro: leva ao default declarado

Limites explícitos:
    - Não depende de transporte remoto, sessão ou CLI
"""
