# apps/core/__init__.py

"""
Core - Aplicação principal do Quadro Kanban

Contém:
- Models (Usuario, PaletaCor, TemplateBoard, Coluna, Board, Tarefa)
- Autenticação JWT e permissões por board
- Envelope JSON de erros da API
- Comando de seed de cores e templates
"""
