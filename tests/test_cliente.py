# tests/test_cliente.py

import json
import logging

import pytest
import requests
import responses

from apps.board.cliente import CacheBoards, ClienteApi, ErroApi, FalhaRede, SessaoKanban
from apps.board.protocolo import MudancaColuna, Reordenacao, TarefaLocal


BASE = 'http://quadro.teste/api'

BOARD = {
    'id': 1,
    'title': 'Sprint',
    'template': {
        'id': 1,
        'name': 'Kanban',
        'columns': [
            {'id': '30', 'title': 'Done', 'order': 2},
            {'id': '10', 'title': 'Backlog', 'order': 0},
            {'id': '20', 'title': 'Doing', 'order': 1},
        ],
    },
}


def _tarefa_json(id, status, order, checklist=None):
    return {
        'id': id,
        'title': f'T{id}',
        'description': '',
        'status': status,
        'priority': 'medium',
        'color': None,
        'owner': None,
        'boardId': 1,
        'checklist': checklist or [],
        'order': order,
    }


def _envelope(data):
    return {'success': True, 'data': data}


def _corpo(chamada):
    return json.loads(chamada.request.body)


@pytest.fixture
def rsps():
    with responses.RequestsMock() as mock:
        yield mock


@pytest.fixture
def cliente():
    return ClienteApi(BASE, token='tok')


def _carregar(rsps, cliente, tarefas):
    rsps.add(responses.GET, f'{BASE}/boards/1', json=_envelope(BOARD))
    rsps.add(responses.GET, f'{BASE}/tasks/board/1', json=_envelope(tarefas))
    sessao = SessaoKanban(cliente, 1)
    sessao.carregar()
    return sessao


def _estado(sessao):
    return {t.id: (t.status, t.ordem) for t in sessao.tarefas}


class TestClienteApi:

    def test_envia_token_e_desembrulha_envelope(self, rsps, cliente):
        rsps.add(responses.PATCH, f'{BASE}/tasks/5/move', json=_envelope(_tarefa_json(5, '30', 0)))

        dados = cliente.mover_tarefa(5, '30', 0)

        assert dados['status'] == '30'
        chamada = rsps.calls[0]
        assert chamada.request.headers['Authorization'] == 'Bearer tok'
        assert _corpo(chamada) == {'status': '30', 'order': 0}

    def test_login_guarda_token(self, rsps):
        rsps.add(
            responses.POST,
            f'{BASE}/auth/login',
            json=_envelope({'token': 'novo', 'user': {'id': 1, 'email': 'ana@example.com'}}),
        )
        cliente = ClienteApi(BASE + '/')

        usuario = cliente.login('ana@example.com', 'senha123')

        assert usuario['id'] == 1
        assert cliente.token == 'novo'
        assert 'Authorization' not in rsps.calls[0].request.headers

    def test_erro_da_api(self, rsps, cliente):
        rsps.add(
            responses.PATCH,
            f'{BASE}/tasks/board/1/orders',
            status=400,
            json={'success': False, 'message': 'Erro de validação', 'errors': ['updates: inválido']},
        )

        with pytest.raises(ErroApi) as excinfo:
            cliente.atualizar_ordens(1, [])

        assert excinfo.value.status == 400
        assert excinfo.value.mensagem == 'Erro de validação'
        assert excinfo.value.errors == ['updates: inválido']

    def test_erro_sem_envelope(self, rsps, cliente):
        rsps.add(responses.GET, f'{BASE}/tasks/board/1', status=502, body='gateway')

        with pytest.raises(ErroApi) as excinfo:
            cliente.listar_tarefas(1)

        assert excinfo.value.status == 502
        assert excinfo.value.mensagem

    @pytest.mark.parametrize('corpo', ['<html>proxy</html>', '[1, 2]', '{"ok": true}'])
    def test_resposta_2xx_fora_do_envelope(self, rsps, cliente, corpo):
        rsps.add(responses.GET, f'{BASE}/tasks/board/1', body=corpo)

        with pytest.raises(ErroApi) as excinfo:
            cliente.listar_tarefas(1)

        assert excinfo.value.status == 200
        assert excinfo.value.mensagem == 'Resposta inválida'

    def test_falha_de_rede(self, rsps, cliente):
        rsps.add(responses.GET, f'{BASE}/boards/1', body=requests.ConnectionError('recusada'))

        with pytest.raises(FalhaRede):
            cliente.obter_board(1)


class TestCacheBoards:

    def test_snapshot_por_board(self):
        cache = CacheBoards()
        tarefa = TarefaLocal(id=1, titulo='T', status='10', ordem=0)

        assert cache.obter(1) == ()
        cache.substituir(1, [tarefa])
        cache.atualizar(2, lambda tarefas: tarefas + (tarefa,))

        assert cache.obter(1) == (tarefa,)
        assert cache.obter(2) == (tarefa,)

        cache.limpar(1)
        assert cache.obter(1) == ()
        cache.limpar()
        assert cache.obter(2) == ()


class TestCarregar:

    def test_colunas_por_ordem_e_tarefas_no_cache(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '20', 0)])

        assert [c.titulo for c in sessao.colunas] == ['Backlog', 'Doing', 'Done']
        assert _estado(sessao) == {1: ('10', 0), 2: ('20', 0)}
        assert sessao.cache.obter(1) == sessao.tarefas


class TestMudancaDeColuna:

    def test_soltar_em_coluna_vazia(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '10', 1)])
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/move', json=_envelope(_tarefa_json(1, '30', 0)))

        sessao.iniciar_arraste(1)
        movimento = sessao.finalizar_arraste('30')

        assert isinstance(movimento, MudancaColuna)
        assert _corpo(rsps.calls[-1]) == {'status': '30', 'order': 0}
        assert _estado(sessao) == {1: ('30', 0), 2: ('10', 1)}
        assert sessao.tarefa_ativa is None

    def test_soltar_sobre_tarefa_de_outra_coluna(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '20', 3)])
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/move', json=_envelope(_tarefa_json(1, '20', 4)))

        sessao.iniciar_arraste(1)
        sessao.finalizar_arraste(2)

        assert _corpo(rsps.calls[-1]) == {'status': '20', 'order': 4}
        assert _estado(sessao)[1] == ('20', 4)

    def test_falha_reverte_apenas_a_tarefa_movida(self, rsps, cliente, caplog):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '10', 1)])
        rsps.add(
            responses.PATCH,
            f'{BASE}/tasks/1/move',
            status=500,
            json={'success': False, 'message': 'Erro interno do servidor'},
        )

        with caplog.at_level(logging.ERROR, logger='apps.board.cliente'):
            sessao.iniciar_arraste(1)
            sessao.finalizar_arraste('30')

        assert _estado(sessao) == {1: ('10', 0), 2: ('10', 1)}
        assert 'Erro ao mover tarefa 1' in caplog.text

    def test_falha_de_rede_tambem_reverte(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 2)])
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/move', body=requests.Timeout('lento'))

        sessao.iniciar_arraste(1)
        sessao.finalizar_arraste('20')

        assert _estado(sessao) == {1: ('10', 2)}

    def test_mover_para_coluna(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '20', 0)])
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/move', json=_envelope(_tarefa_json(1, '20', 1)))

        mudanca = sessao.mover_para_coluna(1, '20')

        assert mudanca.nova_ordem == 1
        assert _estado(sessao)[1] == ('20', 1)
        assert sessao.mover_para_coluna(1, '20') is None


class TestReordenacao:

    def test_a_sobre_c(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [
            _tarefa_json(1, '10', 0),
            _tarefa_json(2, '10', 1),
            _tarefa_json(3, '10', 2),
        ])
        rsps.add(
            responses.PATCH,
            f'{BASE}/tasks/board/1/orders',
            json=_envelope({'message': 'Ordens atualizadas com sucesso', 'updated': 3}),
        )

        sessao.iniciar_arraste(1)
        movimento = sessao.finalizar_arraste(3)

        assert isinstance(movimento, Reordenacao)
        assert _corpo(rsps.calls[-1]) == {
            'updates': [{'id': 2, 'order': 0}, {'id': 3, 'order': 1}, {'id': 1, 'order': 2}],
        }
        assert [t.id for t in sessao.tarefas_da_coluna('10')] == [2, 3, 1]

    def test_falha_recarrega_estado_do_servidor(self, rsps, cliente, caplog):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '10', 1)])
        rsps.add(responses.PATCH, f'{BASE}/tasks/board/1/orders', status=500, json={'success': False})
        estado_servidor = [_tarefa_json(1, '10', 0), _tarefa_json(2, '10', 1), _tarefa_json(3, '20', 0)]
        rsps.add(responses.GET, f'{BASE}/tasks/board/1', json=_envelope(estado_servidor))

        sessao.iniciar_arraste(2)
        sessao.finalizar_arraste(1)

        assert sessao.tarefas == tuple(TarefaLocal.do_json(t) for t in estado_servidor)
        assert 'Erro ao atualizar ordens do board 1' in caplog.text

    def test_falha_tambem_no_recarregamento(self, rsps, cliente, caplog):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '10', 1)])
        rsps.add(responses.PATCH, f'{BASE}/tasks/board/1/orders', body=requests.ConnectionError('off'))
        rsps.add(responses.GET, f'{BASE}/tasks/board/1', body=requests.ConnectionError('off'))

        sessao.iniciar_arraste(2)
        sessao.finalizar_arraste(1)

        assert 'Erro ao recarregar tarefas do board 1' in caplog.text

    def test_recarregamento_com_corpo_invalido(self, rsps, cliente, caplog):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '10', 1)])
        rsps.add(responses.PATCH, f'{BASE}/tasks/board/1/orders', status=503, body='indisponível')
        rsps.add(responses.GET, f'{BASE}/tasks/board/1', body='<html>proxy</html>')

        sessao.iniciar_arraste(2)
        movimento = sessao.finalizar_arraste(1)

        assert isinstance(movimento, Reordenacao)
        assert sessao.tarefa_ativa is None
        assert 'Erro ao recarregar tarefas do board 1' in caplog.text


class TestDropsInvalidos:

    def test_sem_arraste_ativo(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0)])

        assert sessao.finalizar_arraste('30') is None
        assert len(rsps.calls) == 2

    @pytest.mark.parametrize('over_id', [None, 'nao-existe', 1, '10'])
    def test_nao_chama_a_api(self, rsps, cliente, over_id):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0)])

        sessao.iniciar_arraste(1)

        assert sessao.finalizar_arraste(over_id) is None
        assert sessao.tarefa_ativa is None
        assert len(rsps.calls) == 2
        assert _estado(sessao) == {1: ('10', 0)}


class TestAutoTransicao:

    def test_salvar_com_checklist_concluido_move_para_ultima_coluna(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0), _tarefa_json(2, '30', 0)])
        checklist = [{'id': 1, 'text': 'a', 'completed': True}]
        rsps.add(responses.PUT, f'{BASE}/tasks/1', json=_envelope(_tarefa_json(1, '20', 0, checklist)))
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/move', json=_envelope(_tarefa_json(1, '30', 1, checklist)))

        tarefa = sessao.salvar_tarefa({'status': '20', 'checklist': checklist}, tarefa_id=1)

        assert (tarefa.status, tarefa.ordem) == ('30', 1)
        assert _corpo(rsps.calls[-1]) == {'status': '30', 'order': 1}

    def test_criar_sem_checklist_nao_move(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [])
        rsps.add(responses.POST, f'{BASE}/tasks/board/1', status=201, json=_envelope(_tarefa_json(9, '10', 0)))

        tarefa = sessao.salvar_tarefa({'title': 'T9', 'status': '10'})

        assert tarefa.id == 9
        assert len(rsps.calls) == 3
        assert _estado(sessao) == {9: ('10', 0)}

    def test_erro_ao_salvar_e_registrado(self, rsps, cliente, caplog):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0)])
        rsps.add(responses.PUT, f'{BASE}/tasks/1', status=400, json={'success': False, 'message': 'Erro de validação'})

        assert sessao.salvar_tarefa({'title': ''}, tarefa_id=1) is None
        assert 'Erro ao salvar tarefa' in caplog.text
        assert _estado(sessao) == {1: ('10', 0)}

    def test_resposta_invalida_ao_salvar(self, rsps, cliente, caplog):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '10', 0)])
        rsps.add(responses.PUT, f'{BASE}/tasks/1', body='<html>proxy</html>')

        assert sessao.salvar_tarefa({'title': 'Novo'}, tarefa_id=1) is None
        assert 'Erro ao salvar tarefa' in caplog.text

    def test_resposta_invalida_no_checklist(self, rsps, cliente, caplog):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '20', 0, [{'id': 2, 'text': 'b', 'completed': False}])])
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/checklist/2', body='')

        assert sessao.alternar_item_checklist(1, 2) is None
        assert 'Erro ao atualizar checklist da tarefa 1' in caplog.text
        assert _estado(sessao) == {1: ('20', 0)}

    def test_marcar_ultimo_item_do_checklist(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [
            _tarefa_json(1, '20', 0, [{'id': 1, 'text': 'a', 'completed': True}, {'id': 2, 'text': 'b', 'completed': False}]),
        ])
        concluido = [{'id': 1, 'text': 'a', 'completed': True}, {'id': 2, 'text': 'b', 'completed': True}]
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/checklist/2', json=_envelope(_tarefa_json(1, '20', 0, concluido)))
        rsps.add(responses.PATCH, f'{BASE}/tasks/1/move', json=_envelope(_tarefa_json(1, '30', 0, concluido)))

        tarefa = sessao.alternar_item_checklist(1, 2)

        assert _corpo(rsps.calls[2]) == {'completed': True}
        assert _corpo(rsps.calls[3]) == {'status': '30', 'order': 0}
        assert tarefa.status == '30'

    def test_item_inexistente(self, rsps, cliente):
        sessao = _carregar(rsps, cliente, [_tarefa_json(1, '20', 0)])

        assert sessao.alternar_item_checklist(1, 99) is None
        assert sessao.alternar_item_checklist(42, 1) is None
