# apps/board/task_service.py

"""
Serviço de Tarefas - persistência de coluna (status) e ordem das tarefas

A ordem é um inteiro livre dentro de cada par board+status: não há
checagem de contiguidade nem de unicidade. Empates são resolvidos
pela sequência de atualização e depois pelo id.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from apps.core.exceptions import ErroValidacao, NaoEncontrado
from apps.core.models import Board, ItemChecklist, Tarefa

logger = logging.getLogger(__name__)


class ServicoTarefas:
    """
    Serviço encapsulado para leitura e escrita de tarefas

    - mover_tarefa: muda status + ordem de uma tarefa
    - atualizar_ordens: reordenação em lote dentro de um board
    """

    def __init__(self):
        self._relacionados = ('cor', 'responsavel', 'board')

    # =================== CONSULTAS ===================

    def _queryset(self):
        return Tarefa.objects.select_related(*self._relacionados).prefetch_related('checklist')

    def listar_por_board(self, board: Board):
        """Tarefas do board por ordem, atualização e id"""
        return self._queryset().filter(board=board).order_by('ordem', 'atualizado_em', 'id')

    def obter_tarefa(self, tarefa_id) -> Tarefa:
        tarefa = self._queryset().filter(id=tarefa_id).first()
        if tarefa is None:
            raise NaoEncontrado('Tarefa não encontrada')
        return tarefa

    def proxima_ordem(self, board: Board, status: str) -> int:
        """Maior ordem da coluna + 1, ou 0 se a coluna está vazia"""
        maior = Tarefa.objects.filter(board=board, status=status).aggregate(maior=Max('ordem'))['maior']
        return 0 if maior is None else maior + 1

    # =================== ORDEM ===================

    def mover_tarefa(self, tarefa_id, novo_status: str, nova_ordem: int) -> Tarefa:
        """
        Atualiza status e ordem de uma única tarefa

        Returns:
            Tarefa atualizada com cor/responsável carregados
        """
        tarefa = Tarefa.objects.filter(id=tarefa_id).first()
        if tarefa is None:
            raise NaoEncontrado('Tarefa não encontrada')

        status_anterior = tarefa.status
        tarefa.status = novo_status
        tarefa.ordem = nova_ordem
        tarefa.save(update_fields=['status', 'ordem', 'atualizado_em'])

        logger.info(
            f"🔀 Tarefa {tarefa.id} movida: {status_anterior} → {novo_status} (ordem {nova_ordem})"
        )
        return self.obter_tarefa(tarefa.id)

    def atualizar_ordens(self, board: Board, atualizacoes: Iterable[Tuple[int, int]]) -> int:
        """
        Grava a ordem de várias tarefas do board

        Ids desconhecidos ou de outros boards são ignorados. Sem
        QUADRO_ORDENS_ATOMICAS cada atualização é uma escrita independente.

        Returns:
            Quantidade de tarefas atualizadas
        """
        atualizacoes = list(atualizacoes)

        if settings.QUADRO_ORDENS_ATOMICAS:
            with transaction.atomic():
                total = self._aplicar_ordens(board, atualizacoes)
        else:
            total = self._aplicar_ordens(board, atualizacoes)

        ignoradas = len(atualizacoes) - total
        if ignoradas:
            logger.warning(f"⚠️  {ignoradas} atualização(ões) de ordem ignorada(s) no board {board.id}")

        logger.info(f"🔢 Ordens atualizadas no board {board.id}: {total} tarefa(s)")
        return total

    def _aplicar_ordens(self, board: Board, atualizacoes: List[Tuple[int, int]]) -> int:
        total = 0
        for tarefa_id, ordem in atualizacoes:
            total += Tarefa.objects.filter(id=tarefa_id, board=board).update(
                ordem=ordem,
                atualizado_em=timezone.now()
            )
        return total

    # =================== CRUD ===================

    def criar_tarefa(self, board: Board, dados: Dict) -> Tarefa:
        """
        Cria tarefa no board

        Sem ordem explícita a tarefa vai para o fim da coluna.
        """
        self._validar_responsavel(board, dados.get('responsavel'))

        ordem = dados.get('ordem')
        if ordem is None:
            ordem = self.proxima_ordem(board, dados['status'])

        with transaction.atomic():
            tarefa = Tarefa.objects.create(
                board=board,
                titulo=dados['titulo'],
                descricao=dados.get('descricao') or '',
                status=dados['status'],
                prioridade=dados.get('prioridade') or 'medium',
                cor=dados.get('cor'),
                responsavel=dados.get('responsavel'),
                ordem=ordem,
            )
            self._substituir_checklist(tarefa, dados.get('checklist') or [])

        logger.info(f"📝 Tarefa criada: '{tarefa.titulo}' no board {board.id}")
        return self.obter_tarefa(tarefa.id)

    def atualizar_tarefa(self, tarefa: Tarefa, dados: Dict) -> Tarefa:
        """Atualização parcial; checklist, se enviado, substitui o atual"""
        if 'responsavel' in dados:
            self._validar_responsavel(tarefa.board, dados['responsavel'])

        checklist = dados.pop('checklist', None)

        with transaction.atomic():
            for atributo, valor in dados.items():
                if atributo == 'descricao' and valor is None:
                    valor = ''
                setattr(tarefa, atributo, valor)
            tarefa.save()

            if checklist is not None:
                self._substituir_checklist(tarefa, checklist)

        return self.obter_tarefa(tarefa.id)

    def excluir_tarefa(self, tarefa: Tarefa):
        logger.info(f"🗑️  Tarefa excluída: '{tarefa.titulo}' ({tarefa.id})")
        tarefa.delete()

    # =================== CHECKLIST ===================

    def atualizar_item_checklist(self, tarefa: Tarefa, item_id, dados: Dict) -> Tarefa:
        item = self._obter_item(tarefa, item_id)
        for atributo, valor in dados.items():
            setattr(item, atributo, valor)
        item.save()

        # Marca a tarefa como atualizada
        tarefa.save(update_fields=['atualizado_em'])
        return self.obter_tarefa(tarefa.id)

    def excluir_item_checklist(self, tarefa: Tarefa, item_id) -> Tarefa:
        """Remove o item; item inexistente não é erro"""
        removidos, _ = ItemChecklist.objects.filter(tarefa=tarefa, id=item_id).delete()
        if removidos:
            tarefa.save(update_fields=['atualizado_em'])
        return self.obter_tarefa(tarefa.id)

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _obter_item(self, tarefa: Tarefa, item_id) -> ItemChecklist:
        item = ItemChecklist.objects.filter(tarefa=tarefa, id=item_id).first()
        if item is None:
            raise NaoEncontrado('Item do checklist não encontrado')
        return item

    def _validar_responsavel(self, board: Board, responsavel):
        """O responsável precisa ser o criador ou membro do board"""
        if responsavel is None:
            return
        if responsavel.id not in board.ids_membros():
            raise ErroValidacao('O responsável deve ser membro do board')

    def _substituir_checklist(self, tarefa: Tarefa, itens: List[Dict]):
        """
        Sincroniza o checklist com a lista recebida

        Itens com id existente são atualizados, os demais criados e
        os que ficaram de fora removidos. A posição segue a lista.
        """
        existentes = {item.id: item for item in ItemChecklist.objects.filter(tarefa=tarefa)}
        mantidos = set()

        for posicao, dados_item in enumerate(itens):
            item = existentes.get(self._id_inteiro(dados_item.get('id')))
            if item is None:
                item = ItemChecklist(tarefa=tarefa)
            item.texto = dados_item['texto']
            item.concluido = dados_item['concluido']
            item.posicao = posicao
            item.save()
            mantidos.add(item.id)

        ItemChecklist.objects.filter(tarefa=tarefa).exclude(id__in=mantidos).delete()

    @staticmethod
    def _id_inteiro(valor):
        try:
            return int(valor)
        except (TypeError, ValueError):
            return None


# Instância global do serviço (Singleton pattern)
task_service = ServicoTarefas()
