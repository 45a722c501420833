# apps/board/consumers.py

import json
import logging
from urllib.parse import parse_qs

from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.layers import get_channel_layer
from django.utils import timezone

from apps.core.auth_service import auth_service
from apps.core.exceptions import NaoAutenticado
from apps.core.models import Board
from apps.core.permissions import QuadroPermissions

logger = logging.getLogger(__name__)

# Eventos repassados aos clientes conectados ao board
EVENTOS_BOARD = (
    'task_moved',
    'orders_updated',
    'task_created',
    'task_updated',
    'task_deleted',
)


def nome_grupo_board(board_id):
    return f'board_{board_id}'


def notificar_board(board_id, tipo, mensagem):
    """
    Envia evento para todos os clientes do board

    Usado pelas views depois de uma escrita bem-sucedida. Sem channel
    layer configurado, ou com o layer fora do ar, a notificação é
    descartada e a escrita continua valendo.
    """
    if tipo not in EVENTOS_BOARD:
        raise ValueError(f"Evento de board desconhecido: {tipo}")

    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.debug(f"🔕 Sem channel layer; evento {tipo} do board {board_id} descartado")
        return

    try:
        async_to_sync(channel_layer.group_send)(
            nome_grupo_board(board_id),
            {
                'type': tipo,
                'message': {
                    **mensagem,
                    'timestamp': timezone.now().isoformat(),
                }
            }
        )
    except Exception:
        logger.exception(f"❌ Erro ao notificar evento {tipo} do board {board_id}")


class BoardConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket para atualizações em tempo real do board Kanban

    A autenticação usa o mesmo JWT da API, enviado na query string:
    ws/board/<id>/?token=<jwt>
    """

    async def connect(self):
        """
        Conecta usuário ao grupo do board
        Verifica token e permissões antes de aceitar conexão
        """
        self.board_id = self.scope['url_route']['kwargs']['board_id']
        self.board_group_name = nome_grupo_board(self.board_id)
        self.usuario = await self.autenticar()

        if self.usuario is None:
            logger.warning(f"❌ Conexão WebSocket rejeitada - token inválido (board {self.board_id})")
            await self.close()
            return

        has_access = await self.check_board_access()
        if not has_access:
            logger.warning(
                f"❌ Conexão WebSocket rejeitada - {self.usuario.email} sem acesso ao board {self.board_id}"
            )
            await self.close()
            return

        await self.channel_layer.group_add(
            self.board_group_name,
            self.channel_name
        )
        await self.accept()

        logger.info(f"✅ WebSocket conectado - {self.usuario.email} no board {self.board_id}")

    async def disconnect(self, close_code):
        """
        Desconecta usuário do grupo
        """
        if getattr(self, 'usuario', None) is not None:
            await self.channel_layer.group_discard(
                self.board_group_name,
                self.channel_name
            )
            logger.info(f"🔌 WebSocket desconectado - {self.usuario.email} do board {self.board_id}")

    async def receive(self, text_data):
        """
        Recebe mensagens do cliente WebSocket
        Suporta ping (heartbeat) e sync_board (estado atual das tarefas)
        """
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.usuario.email}")
            return

        message_type = data.get('type')

        if message_type == 'ping':
            await self.send(text_data=json.dumps({
                'type': 'pong',
                'timestamp': self.get_timestamp()
            }))

        elif message_type == 'sync_board':
            tarefas = await self.get_board_state()
            await self.send(text_data=json.dumps({
                'type': 'board_sync',
                'tasks': tarefas,
                'timestamp': self.get_timestamp()
            }))

    # === Handlers para os eventos do board ===

    async def _repassar(self, event):
        await self.send(text_data=json.dumps({
            'type': event['type'],
            'message': event['message']
        }))

    async def task_moved(self, event):
        """Tarefa mudou de coluna/ordem"""
        await self._repassar(event)

    async def orders_updated(self, event):
        """Reordenação em lote"""
        await self._repassar(event)

    async def task_created(self, event):
        await self._repassar(event)

    async def task_updated(self, event):
        await self._repassar(event)

    async def task_deleted(self, event):
        await self._repassar(event)

    # === Métodos auxiliares ===

    @database_sync_to_async
    def autenticar(self):
        """
        Valida o token da query string; None se ausente/inválido
        """
        query = parse_qs(self.scope.get('query_string', b'').decode())
        token = (query.get('token') or [None])[0]
        try:
            return auth_service.validar_token(token)
        except NaoAutenticado:
            return None

    @database_sync_to_async
    def check_board_access(self):
        """
        Verifica se usuário tem acesso ao board
        """
        board = Board.objects.filter(id=self.board_id).first()
        if board is None:
            return False
        return QuadroPermissions.tem_acesso_board(self.usuario, board)

    @database_sync_to_async
    def get_board_state(self):
        """
        Tarefas do board na ordem persistida
        """
        from apps.core.serializers import serializar_tarefa
        from .task_service import task_service

        board = Board.objects.get(id=self.board_id)
        return [serializar_tarefa(tarefa) for tarefa in task_service.listar_por_board(board)]

    def get_timestamp(self):
        """
        Retorna timestamp atual em formato ISO
        """
        return timezone.now().isoformat()
