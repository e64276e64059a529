# src/datamethods/core/config/__init__.py
"""
Camada de configuração do DataMethods.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução via deep-merge determinístico
    - Validação da seção `data_methods` em `DataMethodsOptions`

Limites explícitos:
    - Não avalia expressões presentes na configuração
    - Não interage com o resolver diretamente
"""
