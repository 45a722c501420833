# apps/core/permissions.py

from functools import wraps

from .auth_service import auth_service
from .exceptions import AcessoNegado, NaoEncontrado


class QuadroPermissions:
    """
    Sistema de permissões do Quadro Kanban

    Regra única: só criador ou membros acessam um board
    (e, por consequência, as tarefas dele).
    """

    @staticmethod
    def tem_acesso_board(usuario, board):
        """Verifica se tem acesso ao board"""
        if usuario is None:
            return False
        return usuario.pode_acessar_board(board)

    @staticmethod
    def tem_acesso_tarefa(usuario, tarefa):
        """Verifica se tem acesso à tarefa (via board)"""
        return QuadroPermissions.tem_acesso_board(usuario, tarefa.board)

    @staticmethod
    def pode_editar_perfil(usuario, usuario_alvo_id):
        """Usuário só edita o próprio perfil"""
        return usuario is not None and usuario.id == usuario_alvo_id


def extrair_token(request):
    """Lê o token do cabeçalho 'Authorization: Bearer <token>'"""
    cabecalho = request.headers.get('Authorization', '')
    if cabecalho.startswith('Bearer '):
        return cabecalho[len('Bearer '):].strip() or None
    return None


# Decoradores para views

def requer_token(view_func):
    """
    Decorador que exige token válido
    Adiciona o usuário autenticado em request.usuario
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        request.usuario = auth_service.validar_token(extrair_token(request))
        return view_func(request, *args, **kwargs)

    return wrapped_view


def requer_acesso_board(view_func):
    """
    Decorador que verifica acesso ao board
    Espera que a view receba board_id como parâmetro
    e que requer_token já tenha rodado
    """

    @wraps(view_func)
    def wrapped_view(request, board_id, *args, **kwargs):
        from .models import Board

        board = Board.objects.select_related('template', 'cor', 'criado_por').filter(id=board_id).first()
        if board is None:
            raise NaoEncontrado('Board não encontrado')

        if not QuadroPermissions.tem_acesso_board(request.usuario, board):
            raise AcessoNegado('Você não tem acesso a este board')

        # Adiciona o board ao request para uso na view
        request.board = board
        return view_func(request, board_id, *args, **kwargs)

    return wrapped_view


def requer_acesso_tarefa(view_func):
    """
    Decorador que verifica acesso à tarefa
    Espera que a view receba task_id como parâmetro
    """

    @wraps(view_func)
    def wrapped_view(request, task_id, *args, **kwargs):
        from .models import Tarefa

        tarefa = Tarefa.objects.select_related('board').filter(id=task_id).first()
        if tarefa is None:
            raise NaoEncontrado('Tarefa não encontrada')

        if not QuadroPermissions.tem_acesso_tarefa(request.usuario, tarefa):
            raise AcessoNegado('Você não tem acesso a esta tarefa')

        # Adiciona a tarefa ao request para uso na view
        request.tarefa = tarefa
        return view_func(request, task_id, *args, **kwargs)

    return wrapped_view
