# apps/board/views.py

import logging

from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.permissions import requer_acesso_board, requer_acesso_tarefa, requer_token
from apps.core.serializers import serializar_board, serializar_tarefa
from apps.core.utils import ler_json, resposta_sucesso, validar_form

from .board_service import board_service
from .consumers import notificar_board
from .forms import (
    AtualizacaoOrdemForm,
    BoardForm,
    ItemChecklistForm,
    MembrosBoardForm,
    MoverTarefaForm,
    TarefaForm,
)
from .task_service import task_service

logger = logging.getLogger(__name__)


def _autor(request):
    usuario = request.usuario
    return {
        'user_id': usuario.id,
        'usuario': usuario.get_full_name() or usuario.email,
    }


# === BOARDS ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
@requer_token
def boards_view(request):
    """
    GET: boards do usuário (criador ou membro)
    POST: cria board; o criador entra como membro
    """
    if request.method == 'GET':
        boards = board_service.listar_boards(request.usuario)
        return resposta_sucesso([serializar_board(board, request) for board in boards])

    dados = validar_form(BoardForm(ler_json(request)))
    board = board_service.criar_board(request.usuario, dados)
    return resposta_sucesso(serializar_board(board, request, com_membros=True), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
@requer_token
@requer_acesso_board
def board_detalhe_view(request, board_id):
    board = request.board  # Injetado pelo decorator

    if request.method == 'GET':
        return resposta_sucesso(serializar_board(board, request, com_membros=True))

    if request.method == 'DELETE':
        board_service.excluir_board(board)
        return resposta_sucesso({'message': 'Board excluído com sucesso'})

    form = BoardForm(ler_json(request), parcial=True)
    validar_form(form)
    membros = form.cleaned_data['members'] if 'members' in form.data else None
    board = board_service.atualizar_board(board, form.campos_enviados(), membros=membros)
    return resposta_sucesso(serializar_board(board, request, com_membros=True))


@csrf_exempt
@require_http_methods(["PATCH"])
@requer_token
@requer_acesso_board
def board_membros_view(request, board_id):
    """Adiciona membros ao board (sem duplicar os existentes)"""
    dados = validar_form(MembrosBoardForm(ler_json(request)))
    board = board_service.adicionar_membros(request.board, dados['members'])
    return resposta_sucesso(serializar_board(board, request, com_membros=True))


# === TAREFAS DO BOARD ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
@requer_token
@requer_acesso_board
def tarefas_board_view(request, board_id):
    """
    GET: tarefas do board por ordem
    POST: cria tarefa (sem ordem explícita vai para o fim da coluna)
    """
    board = request.board

    if request.method == 'GET':
        tarefas = task_service.listar_por_board(board)
        return resposta_sucesso([serializar_tarefa(tarefa, request) for tarefa in tarefas])

    dados = validar_form(TarefaForm(ler_json(request)))
    campos = {
        'titulo': dados['title'],
        'descricao': dados.get('description'),
        'status': dados['status'],
        'prioridade': dados.get('priority'),
        'cor': dados.get('color'),
        'responsavel': dados.get('owner'),
        'ordem': dados.get('order'),
        'checklist': dados.get('checklist'),
    }
    tarefa = task_service.criar_tarefa(board, campos)
    payload = serializar_tarefa(tarefa, request)

    notificar_board(board.id, 'task_created', {'task': payload, **_autor(request)})
    return resposta_sucesso(payload, status=201)


@csrf_exempt
@require_http_methods(["PATCH"])
@requer_token
@requer_acesso_board
def atualizar_ordens_view(request, board_id):
    """
    Reordenação em lote: {'updates': [{'id': 1, 'order': 0}, ...]}
    """
    dados = validar_form(AtualizacaoOrdemForm(ler_json(request)))
    total = task_service.atualizar_ordens(request.board, dados['updates'])

    notificar_board(board_id, 'orders_updated', {
        'updates': [{'id': tarefa_id, 'order': ordem} for tarefa_id, ordem in dados['updates']],
        **_autor(request),
    })
    return resposta_sucesso({'message': 'Ordens atualizadas com sucesso', 'updated': total})


# === TAREFA INDIVIDUAL ===

@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
@requer_token
@requer_acesso_tarefa
def tarefa_detalhe_view(request, task_id):
    tarefa = request.tarefa  # Injetado pelo decorator

    if request.method == 'GET':
        return resposta_sucesso(serializar_tarefa(task_service.obter_tarefa(task_id), request))

    if request.method == 'DELETE':
        board_id = tarefa.board_id
        task_service.excluir_tarefa(tarefa)
        notificar_board(board_id, 'task_deleted', {'task_id': task_id, **_autor(request)})
        return resposta_sucesso({'message': 'Tarefa excluída com sucesso'})

    form = TarefaForm(ler_json(request), parcial=True)
    validar_form(form)
    tarefa = task_service.atualizar_tarefa(tarefa, form.campos_enviados())
    payload = serializar_tarefa(tarefa, request)

    notificar_board(tarefa.board_id, 'task_updated', {'task': payload, **_autor(request)})
    return resposta_sucesso(payload)


@csrf_exempt
@require_http_methods(["PATCH"])
@requer_token
@requer_acesso_tarefa
def mover_tarefa_view(request, task_id):
    """
    Move tarefa de coluna e/ou posição: {'status': '<coluna>', 'order': 3}
    """
    dados = validar_form(MoverTarefaForm(ler_json(request)))
    status_anterior = request.tarefa.status

    tarefa = task_service.mover_tarefa(task_id, dados['status'], dados['order'])
    payload = serializar_tarefa(tarefa, request)

    notificar_board(tarefa.board_id, 'task_moved', {
        'task': payload,
        'from_status': status_anterior,
        **_autor(request),
    })
    return resposta_sucesso(payload)


@csrf_exempt
@require_http_methods(["PATCH", "DELETE"])
@requer_token
@requer_acesso_tarefa
def item_checklist_view(request, task_id, item_id):
    tarefa = request.tarefa

    if request.method == 'DELETE':
        tarefa = task_service.excluir_item_checklist(tarefa, item_id)
    else:
        form = ItemChecklistForm(ler_json(request), parcial=True)
        validar_form(form)
        tarefa = task_service.atualizar_item_checklist(tarefa, item_id, form.campos_enviados())

    payload = serializar_tarefa(tarefa, request)
    notificar_board(tarefa.board_id, 'task_updated', {'task': payload, **_autor(request)})
    return resposta_sucesso(payload)
