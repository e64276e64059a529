# src/datamethods/core/engine/__init__.py
"""
Engine do DataMethods.

Componentes principais:
    - ordering → ordenação estável contra sequência de referência
    - graph    → grafo de dependências (direto, transitivo, achatado)
    - resolver → gate → select_sources → try_sources → fallback, com cache
    - preload  → pré-carregamento concorrente com pool de threads

Invariantes:
    - O grafo depende apenas do registry
    - Cada data method resolve no máximo uma vez por vez, por instância
    - Resultados falsy nunca são cacheados
"""
