# tests/test_tarefas.py

import pytest

from apps.core.models import Board, ItemChecklist, Tarefa


pytestmark = pytest.mark.django_db


def _json(client, metodo, url, dados):
    return getattr(client, metodo)(url, dados, content_type='application/json')


class TestCriarTarefa:

    def test_sem_ordem_vai_para_o_fim_da_coluna(self, api, board, colunas, criar_tarefa, eventos):
        criar_tarefa('A', colunas['backlog'], ordem=0)
        criar_tarefa('B', colunas['backlog'], ordem=4)
        criar_tarefa('Outra coluna', colunas['done'], ordem=10)

        response = _json(api, 'post', f'/api/tasks/board/{board.id}', {
            'title': 'Nova',
            'status': colunas['backlog'],
        })

        assert response.status_code == 201
        dados = response.json()['data']
        assert dados['order'] == 5
        assert dados['priority'] == 'medium'
        assert dados['boardId'] == board.id
        assert dados['owner'] is None
        assert dados['checklist'] == []

        assert [tipo for _, tipo, _ in eventos] == ['task_created']

    def test_primeira_tarefa_da_coluna(self, api, board, colunas, eventos):
        response = _json(api, 'post', f'/api/tasks/board/{board.id}', {
            'title': 'Nova',
            'status': colunas['doing'],
        })

        assert response.json()['data']['order'] == 0

    def test_campos_completos(self, api, board, colunas, cores, outro_usuario, eventos):
        response = _json(api, 'post', f'/api/tasks/board/{board.id}', {
            'title': 'Completa',
            'description': 'Com tudo',
            'status': colunas['doing'],
            'priority': 'high',
            'color': cores['task'].id,
            'owner': outro_usuario.id,
            'order': 7,
            'checklist': [{'text': 'passo 1'}, {'text': 'passo 2', 'completed': True}],
        })

        assert response.status_code == 201
        dados = response.json()['data']
        assert dados['order'] == 7
        assert dados['priority'] == 'high'
        assert dados['color']['name'] == 'Coral'
        assert dados['owner']['firstName'] == 'Bruno'
        assert [(i['text'], i['completed']) for i in dados['checklist']] == [
            ('passo 1', False),
            ('passo 2', True),
        ]

    def test_responsavel_precisa_ser_membro(self, api, board, colunas, estranho, eventos):
        response = _json(api, 'post', f'/api/tasks/board/{board.id}', {
            'title': 'X',
            'status': colunas['backlog'],
            'owner': estranho.id,
        })

        assert response.status_code == 400
        assert response.json()['message'] == 'O responsável deve ser membro do board'
        assert not Tarefa.objects.exists()
        assert eventos == []

    def test_prioridade_invalida(self, api, board, colunas, eventos):
        response = _json(api, 'post', f'/api/tasks/board/{board.id}', {
            'title': 'X',
            'status': colunas['backlog'],
            'priority': 'urgent',
        })

        assert response.status_code == 400

    def test_checklist_sem_texto(self, api, board, colunas, eventos):
        response = _json(api, 'post', f'/api/tasks/board/{board.id}', {
            'title': 'X',
            'status': colunas['backlog'],
            'checklist': [{'completed': True}],
        })

        assert response.status_code == 400

    def test_sem_acesso_ao_board(self, api_estranho, board, colunas):
        response = _json(api_estranho, 'post', f'/api/tasks/board/{board.id}', {
            'title': 'X',
            'status': colunas['backlog'],
        })

        assert response.status_code == 403


class TestListarTarefas:

    def test_ordenadas_por_ordem(self, api, board, colunas, criar_tarefa):
        criar_tarefa('C', colunas['backlog'], ordem=2)
        criar_tarefa('A', colunas['backlog'], ordem=0)
        criar_tarefa('B', colunas['done'], ordem=1)

        response = api.get(f'/api/tasks/board/{board.id}')

        assert [t['title'] for t in response.json()['data']] == ['A', 'B', 'C']

    def test_empate_desfeito_pela_atualizacao(self, api, board, colunas, criar_tarefa):
        primeira = criar_tarefa('Primeira', colunas['backlog'], ordem=1)
        criar_tarefa('Segunda', colunas['backlog'], ordem=1)
        primeira.save()

        response = api.get(f'/api/tasks/board/{board.id}')

        assert [t['title'] for t in response.json()['data']] == ['Segunda', 'Primeira']

    def test_apenas_do_board(self, api, board, colunas, criar_tarefa, estranho):
        outro_board = Board.objects.create(titulo='Outro', criado_por=estranho)
        criar_tarefa('Minha', colunas['backlog'])
        criar_tarefa('Alheia', 'qualquer', board=outro_board)

        response = api.get(f'/api/tasks/board/{board.id}')

        assert [t['title'] for t in response.json()['data']] == ['Minha']


class TestDetalheTarefa:

    def test_obter(self, api, colunas, criar_tarefa):
        tarefa = criar_tarefa('A', colunas['backlog'])

        response = api.get(f'/api/tasks/{tarefa.id}')

        assert response.json()['data']['title'] == 'A'
        assert response.json()['data']['status'] == colunas['backlog']

    def test_inexistente(self, api):
        response = api.get('/api/tasks/9999')

        assert response.status_code == 404
        assert response.json()['message'] == 'Tarefa não encontrada'

    def test_sem_acesso(self, api_estranho, colunas, criar_tarefa):
        tarefa = criar_tarefa('A', colunas['backlog'])

        response = api_estranho.get(f'/api/tasks/{tarefa.id}')

        assert response.status_code == 403
        assert response.json()['message'] == 'Você não tem acesso a esta tarefa'

    def test_atualizacao_parcial(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'], ordem=3, descricao='manter')

        response = _json(api, 'put', f'/api/tasks/{tarefa.id}', {'title': 'A editada', 'priority': 'low'})

        dados = response.json()['data']
        assert dados['title'] == 'A editada'
        assert dados['priority'] == 'low'
        assert dados['description'] == 'manter'
        assert dados['order'] == 3
        assert [tipo for _, tipo, _ in eventos] == ['task_updated']

    def test_remover_responsavel(self, api, colunas, criar_tarefa, outro_usuario, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'], responsavel=outro_usuario)

        response = _json(api, 'put', f'/api/tasks/{tarefa.id}', {'owner': None})

        assert response.json()['data']['owner'] is None

    def test_checklist_substituido(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])
        mantido = ItemChecklist.objects.create(tarefa=tarefa, texto='manter', posicao=0)
        ItemChecklist.objects.create(tarefa=tarefa, texto='remover', posicao=1)

        response = _json(api, 'put', f'/api/tasks/{tarefa.id}', {
            'checklist': [
                {'text': 'novo'},
                {'id': mantido.id, 'text': 'manter', 'completed': True},
            ],
        })

        checklist = response.json()['data']['checklist']
        assert [(i['text'], i['completed']) for i in checklist] == [('novo', False), ('manter', True)]
        assert checklist[1]['id'] == mantido.id
        assert ItemChecklist.objects.filter(tarefa=tarefa).count() == 2

    def test_status_vazio(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])

        response = _json(api, 'put', f'/api/tasks/{tarefa.id}', {'status': ''})

        assert response.status_code == 400

    def test_excluir(self, api, board, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])

        response = api.delete(f'/api/tasks/{tarefa.id}')

        assert response.json()['data']['message'] == 'Tarefa excluída com sucesso'
        assert api.get(f'/api/tasks/{tarefa.id}').status_code == 404
        board_id, tipo, mensagem = eventos[0]
        assert (board_id, tipo, mensagem['task_id']) == (board.id, 'task_deleted', tarefa.id)


class TestItemChecklist:

    def test_marcar_item(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])
        item = ItemChecklist.objects.create(tarefa=tarefa, texto='passo')

        response = _json(api, 'patch', f'/api/tasks/{tarefa.id}/checklist/{item.id}', {'completed': True})

        assert response.status_code == 200
        assert response.json()['data']['checklist'] == [{'id': item.id, 'text': 'passo', 'completed': True}]
        assert [tipo for _, tipo, _ in eventos] == ['task_updated']

    def test_editar_texto_mantem_conclusao(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])
        item = ItemChecklist.objects.create(tarefa=tarefa, texto='passo', concluido=True)

        response = _json(api, 'patch', f'/api/tasks/{tarefa.id}/checklist/{item.id}', {'text': 'passo 1'})

        assert response.json()['data']['checklist'][0] == {'id': item.id, 'text': 'passo 1', 'completed': True}

    def test_item_inexistente(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])

        response = _json(api, 'patch', f'/api/tasks/{tarefa.id}/checklist/9999', {'completed': True})

        assert response.status_code == 404
        assert response.json()['message'] == 'Item do checklist não encontrado'

    def test_item_de_outra_tarefa(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])
        outra = criar_tarefa('B', colunas['backlog'])
        item = ItemChecklist.objects.create(tarefa=outra, texto='passo')

        response = _json(api, 'patch', f'/api/tasks/{tarefa.id}/checklist/{item.id}', {'completed': True})

        assert response.status_code == 404

    def test_excluir_item(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])
        item = ItemChecklist.objects.create(tarefa=tarefa, texto='passo')

        response = api.delete(f'/api/tasks/{tarefa.id}/checklist/{item.id}')

        assert response.status_code == 200
        assert response.json()['data']['checklist'] == []

    def test_excluir_item_inexistente(self, api, colunas, criar_tarefa, eventos):
        tarefa = criar_tarefa('A', colunas['backlog'])

        response = api.delete(f'/api/tasks/{tarefa.id}/checklist/9999')

        assert response.status_code == 200
