# apps/board/__init__.py

"""
Board - Aplicação Kanban do Quadro Kanban

Funcionalidades:
- API de boards e tarefas (ordem, movimentação, checklist)
- Protocolo de movimentação do lado do cliente (cache otimista)
- WebSockets para atualizações em tempo real
"""
