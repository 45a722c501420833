# apps/__init__.py

"""
Quadro Kanban - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models, autenticação JWT, usuários, cores e templates
- board: Boards, tarefas, ordem das tarefas, protocolo de movimentação e WebSockets
"""

__version__ = '0.1.0'
