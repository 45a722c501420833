# apps/board/board_service.py

"""
Serviço de Boards - CRUD, membros e estatísticas do dashboard
"""

import logging
from typing import Dict, Iterable

from django.db import transaction

from apps.core.models import Board, Tarefa, Usuario

logger = logging.getLogger(__name__)


class ServicoBoards:
    """
    Serviço encapsulado para boards

    O criador sempre faz parte dos membros do board.
    """

    def _queryset(self):
        return Board.objects.select_related('cor', 'template', 'criado_por')

    def listar_boards(self, usuario: Usuario):
        """Boards em que o usuário é criador ou membro, mais recentes primeiro"""
        ids = usuario.get_boards_acessiveis().values_list('id', flat=True)
        return self._queryset().filter(id__in=ids).order_by('-atualizado_em')

    def criar_board(self, usuario: Usuario, dados: Dict) -> Board:
        with transaction.atomic():
            board = Board.objects.create(
                titulo=dados['title'],
                descricao=dados.get('description') or '',
                cor=dados.get('color'),
                template=dados.get('template'),
                criado_por=usuario,
            )
            membros = list(dados.get('members') or [])
            board.membros.add(usuario, *membros)

        logger.info(f"📋 Board criado: '{board.titulo}' por {usuario.email}")
        return board

    def atualizar_board(self, board: Board, campos: Dict, membros=None) -> Board:
        """
        Atualização parcial

        membros, se enviado, substitui a lista (o criador é mantido)
        """
        with transaction.atomic():
            for atributo, valor in campos.items():
                if atributo == 'descricao' and valor is None:
                    valor = ''
                setattr(board, atributo, valor)
            board.save()

            if membros is not None:
                board.membros.set(list(membros))
                board.membros.add(board.criado_por)

        return board

    def excluir_board(self, board: Board):
        """Exclui o board e, em cascata, as tarefas dele"""
        total_tarefas = board.tarefas.count()
        titulo = board.titulo
        board.delete()
        logger.info(f"🗑️  Board excluído: '{titulo}' ({total_tarefas} tarefa(s) removida(s))")

    def adicionar_membros(self, board: Board, membros: Iterable[Usuario]) -> Board:
        """Adiciona membros como conjunto (sem duplicar)"""
        membros = list(membros)
        board.membros.add(*membros)
        board.save(update_fields=['atualizado_em'])
        logger.info(f"👥 {len(membros)} membro(s) adicionado(s) ao board {board.id}")
        return board

    def membros_do_board(self, board: Board):
        return board.membros.all().order_by('first_name', 'last_name')

    def estatisticas_dashboard(self, usuario: Usuario) -> Dict:
        """
        Estatísticas agregadas dos boards acessíveis ao usuário

        totalMembers conta criadores e membros distintos.
        """
        boards = list(self.listar_boards(usuario))

        ids_membros = set()
        for board in boards:
            ids_membros.update(board.ids_membros())

        total_tarefas = Tarefa.objects.filter(board__in=boards).count()

        progresso_medio = 0
        if boards:
            soma = sum(board.calcular_progresso() for board in boards)
            progresso_medio = round(soma / len(boards))

        return {
            'totalBoards': len(boards),
            'totalMembers': len(ids_membros),
            'totalTasks': total_tarefas,
            'avgProgress': progresso_medio,
        }


# Instância global do serviço (Singleton pattern)
board_service = ServicoBoards()
