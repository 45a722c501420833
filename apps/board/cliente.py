# apps/board/cliente.py

"""
Cliente HTTP da API e sessão de drag-and-drop de um board

SessaoKanban aplica cada movimento no cache antes da chamada de rede
(atualização otimista) e reconcilia com o servidor:
    - mudança de coluna que falha: só a tarefa movida é revertida
    - reordenação em lote que falha: o board é recarregado do servidor
Falhas de movimento são registradas no log e nunca propagadas.
"""

import logging
from typing import Callable, Dict, List, Optional

import requests

from . import protocolo
from .protocolo import ColunaLocal, MudancaColuna, Reordenacao, Snapshot, TarefaLocal

logger = logging.getLogger(__name__)


class FalhaRede(Exception):
    """Falha de transporte (conexão, timeout)"""


class ErroApi(Exception):
    """Resposta não-2xx ou corpo inválido da API"""

    def __init__(self, status: int, mensagem: str, errors=None):
        self.status = status
        self.mensagem = mensagem
        self.errors = errors
        super().__init__(f"{status}: {mensagem}")


class ClienteApi:
    """Cliente da API REST do Quadro Kanban"""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 30,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self._session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def _requisitar(self, metodo: str, caminho: str, payload=None, params=None):
        """
        Executa a requisição e desembrulha o envelope {'success', 'data'}

        Raises:
            FalhaRede: erro de transporte
            ErroApi: status não-2xx ou resposta 2xx fora do envelope
        """
        url = f'{self.base_url}{caminho}'
        try:
            response = self._session.request(
                metodo,
                url,
                json=payload,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise FalhaRede(f'{metodo} {caminho}: {e}') from e

        try:
            corpo = response.json()
        except ValueError:
            corpo = None

        if not response.ok:
            mensagem = corpo.get('message') if isinstance(corpo, dict) else None
            errors = corpo.get('errors') if isinstance(corpo, dict) else None
            if mensagem is None:
                mensagem = response.reason or response.text
            raise ErroApi(response.status_code, mensagem, errors)

        if not isinstance(corpo, dict) or 'data' not in corpo:
            raise ErroApi(response.status_code, 'Resposta inválida')
        return corpo['data']

    # === AUTENTICAÇÃO ===

    def login(self, email: str, password: str) -> Dict:
        """Autentica e guarda o token para as próximas chamadas"""
        dados = self._requisitar('POST', '/auth/login', {'email': email, 'password': password})
        self.token = dados['token']
        return dados['user']

    # === BOARDS ===

    def obter_board(self, board_id) -> Dict:
        return self._requisitar('GET', f'/boards/{board_id}')

    # === TAREFAS ===

    def listar_tarefas(self, board_id) -> List[Dict]:
        return self._requisitar('GET', f'/tasks/board/{board_id}')

    def criar_tarefa(self, board_id, dados: Dict) -> Dict:
        return self._requisitar('POST', f'/tasks/board/{board_id}', dados)

    def atualizar_tarefa(self, tarefa_id, dados: Dict) -> Dict:
        return self._requisitar('PUT', f'/tasks/{tarefa_id}', dados)

    def mover_tarefa(self, tarefa_id, status: str, ordem: int) -> Dict:
        return self._requisitar('PATCH', f'/tasks/{tarefa_id}/move', {'status': status, 'order': ordem})

    def atualizar_ordens(self, board_id, updates: List[Dict]) -> Dict:
        return self._requisitar('PATCH', f'/tasks/board/{board_id}/orders', {'updates': updates})

    def atualizar_item_checklist(self, tarefa_id, item_id, dados: Dict) -> Dict:
        return self._requisitar('PATCH', f'/tasks/{tarefa_id}/checklist/{item_id}', dados)


class CacheBoards:
    """
    Cache de tarefas por board

    Cada entrada é um snapshot imutável; atualizar troca a entrada
    inteira pelo resultado da função.
    """

    def __init__(self):
        self._snapshots: Dict[object, Snapshot] = {}

    def obter(self, board_id) -> Snapshot:
        return self._snapshots.get(board_id, ())

    def substituir(self, board_id, tarefas) -> Snapshot:
        snapshot = tuple(tarefas)
        self._snapshots[board_id] = snapshot
        return snapshot

    def atualizar(self, board_id, funcao: Callable[[Snapshot], Snapshot]) -> Snapshot:
        return self.substituir(board_id, funcao(self.obter(board_id)))

    def limpar(self, board_id=None):
        if board_id is None:
            self._snapshots.clear()
        else:
            self._snapshots.pop(board_id, None)


class SessaoKanban:
    """
    Estado de um board aberto no cliente

    Uso:
        sessao = SessaoKanban(cliente, board_id)
        sessao.carregar()
        sessao.iniciar_arraste(tarefa_id)
        sessao.finalizar_arraste(over_id)
    """

    def __init__(self, cliente: ClienteApi, board_id, cache: Optional[CacheBoards] = None):
        self.cliente = cliente
        self.board_id = board_id
        self.cache = cache or CacheBoards()
        self.colunas: tuple = ()
        self.tarefa_ativa: Optional[TarefaLocal] = None

    # === ESTADO ===

    @property
    def tarefas(self) -> Snapshot:
        return self.cache.obter(self.board_id)

    def tarefas_da_coluna(self, status: str) -> List[TarefaLocal]:
        return protocolo.tarefas_da_coluna(self.tarefas, status)

    def carregar(self) -> Snapshot:
        """Busca colunas (via template do board) e tarefas"""
        board = self.cliente.obter_board(self.board_id)
        template = board.get('template') or {}
        self.colunas = tuple(
            sorted((ColunaLocal.do_json(c) for c in template.get('columns') or []), key=lambda c: c.ordem)
        )
        return self.recarregar_tarefas()

    def recarregar_tarefas(self) -> Snapshot:
        dados = self.cliente.listar_tarefas(self.board_id)
        return self.cache.substituir(self.board_id, (TarefaLocal.do_json(t) for t in dados))

    # === DRAG AND DROP ===

    def iniciar_arraste(self, tarefa_id) -> Optional[TarefaLocal]:
        self.tarefa_ativa = protocolo.buscar_tarefa(self.tarefas, tarefa_id)
        return self.tarefa_ativa

    def finalizar_arraste(self, over_id):
        """
        Resolve o drop e executa o movimento

        Returns:
            O movimento executado (MudancaColuna/Reordenacao) ou None
        """
        try:
            if self.tarefa_ativa is None:
                return None

            movimento = protocolo.calcular_movimento(
                self.tarefas, self.colunas, self.tarefa_ativa.id, over_id
            )
            if isinstance(movimento, MudancaColuna):
                self._executar_mudanca_coluna(movimento)
            elif isinstance(movimento, Reordenacao):
                self._executar_reordenacao(movimento)
            return movimento
        finally:
            self.tarefa_ativa = None

    def mover_para_coluna(self, tarefa_id, status: str) -> Optional[MudancaColuna]:
        """Mudança de coluna sem drag (para o fim da coluna de destino)"""
        tarefa = protocolo.buscar_tarefa(self.tarefas, tarefa_id)
        if tarefa is None or tarefa.status == status:
            return None

        mudanca = MudancaColuna(
            tarefa_id=tarefa.id,
            status_anterior=tarefa.status,
            ordem_anterior=tarefa.ordem,
            novo_status=status,
            nova_ordem=protocolo.proxima_ordem(self.tarefas, status),
        )
        self._executar_mudanca_coluna(mudanca)
        return mudanca

    def _executar_mudanca_coluna(self, mudanca: MudancaColuna):
        self.cache.atualizar(self.board_id, lambda t: protocolo.aplicar_mudanca_coluna(t, mudanca))
        try:
            self.cliente.mover_tarefa(mudanca.tarefa_id, mudanca.novo_status, mudanca.nova_ordem)
        except (FalhaRede, ErroApi) as e:
            logger.error(f"❌ Erro ao mover tarefa {mudanca.tarefa_id}: {e}")
            self.cache.atualizar(self.board_id, lambda t: protocolo.reverter_mudanca_coluna(t, mudanca))

    def _executar_reordenacao(self, reordenacao: Reordenacao):
        self.cache.atualizar(self.board_id, lambda t: protocolo.aplicar_reordenacao(t, reordenacao))
        try:
            self.cliente.atualizar_ordens(self.board_id, reordenacao.como_updates())
        except (FalhaRede, ErroApi) as e:
            logger.error(f"❌ Erro ao atualizar ordens do board {self.board_id}: {e}")
            self._recarregar_apos_falha()

    def _recarregar_apos_falha(self):
        try:
            self.recarregar_tarefas()
        except (FalhaRede, ErroApi) as e:
            logger.error(f"❌ Erro ao recarregar tarefas do board {self.board_id}: {e}")

    # === EDIÇÃO ===

    def salvar_tarefa(self, dados: Dict, tarefa_id=None) -> Optional[TarefaLocal]:
        """
        Cria (sem tarefa_id) ou atualiza a tarefa e aplica a auto-transição

        Erros da API são registrados no log; nesse caso devolve None.
        """
        try:
            if tarefa_id is None:
                resposta = self.cliente.criar_tarefa(self.board_id, dados)
            else:
                resposta = self.cliente.atualizar_tarefa(tarefa_id, dados)
        except (FalhaRede, ErroApi) as e:
            logger.error(f"❌ Erro ao salvar tarefa: {e}")
            return None

        tarefa = TarefaLocal.do_json(resposta)
        self.cache.atualizar(self.board_id, lambda t: protocolo.substituir_tarefa(t, tarefa))
        self._auto_transicao(tarefa.id)
        return protocolo.buscar_tarefa(self.tarefas, tarefa.id)

    def alternar_item_checklist(self, tarefa_id, item_id) -> Optional[TarefaLocal]:
        """Marca/desmarca um item e aplica a auto-transição"""
        tarefa = protocolo.buscar_tarefa(self.tarefas, tarefa_id)
        item = next((i for i in tarefa.checklist if i.id == item_id), None) if tarefa else None
        if item is None:
            return None

        try:
            resposta = self.cliente.atualizar_item_checklist(
                tarefa_id, item_id, {'completed': not item.concluido}
            )
        except (FalhaRede, ErroApi) as e:
            logger.error(f"❌ Erro ao atualizar checklist da tarefa {tarefa_id}: {e}")
            return None

        atualizada = TarefaLocal.do_json(resposta)
        self.cache.atualizar(self.board_id, lambda t: protocolo.substituir_tarefa(t, atualizada))
        self._auto_transicao(tarefa_id)
        return protocolo.buscar_tarefa(self.tarefas, tarefa_id)

    def _auto_transicao(self, tarefa_id):
        mudanca = protocolo.calcular_auto_transicao(self.tarefas, self.colunas, tarefa_id)
        if mudanca is not None:
            logger.info(f"🏁 Checklist concluído; tarefa {tarefa_id} indo para {mudanca.novo_status}")
            self._executar_mudanca_coluna(mudanca)
