# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Boards
    path('boards', views.boards_view, name='boards'),
    path('boards/<int:board_id>', views.board_detalhe_view, name='board_detalhe'),
    path('boards/<int:board_id>/members', views.board_membros_view, name='board_membros'),

    # Tarefas de um board
    path('tasks/board/<int:board_id>', views.tarefas_board_view, name='tarefas_board'),
    path('tasks/board/<int:board_id>/orders', views.atualizar_ordens_view, name='atualizar_ordens'),

    # Tarefa individual
    path('tasks/<int:task_id>', views.tarefa_detalhe_view, name='tarefa_detalhe'),
    path('tasks/<int:task_id>/move', views.mover_tarefa_view, name='mover_tarefa'),

    # Checklist
    path('tasks/<int:task_id>/checklist/<int:item_id>', views.item_checklist_view, name='item_checklist'),
]
