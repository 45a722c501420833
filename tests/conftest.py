# tests/conftest.py

import pytest
from django.test import Client

from apps.core.auth_service import auth_service
from apps.core.models import Board, Coluna, PaletaCor, Tarefa, TemplateBoard, Usuario


def cliente_autenticado(usuario):
    """Client do Django com 'Authorization: Bearer <jwt>' em todas as requisições"""
    return Client(HTTP_AUTHORIZATION=f'Bearer {auth_service.gerar_token(usuario)}')


@pytest.fixture
def criar_usuario(db):
    def _criar(email, password='senha123', **extra):
        extra.setdefault('first_name', 'Ana')
        extra.setdefault('last_name', 'Silva')
        return Usuario.objects.create_user(email=email, password=password, **extra)
    return _criar


@pytest.fixture
def usuario(criar_usuario):
    return criar_usuario('ana@example.com', first_name='ana', last_name='silva')


@pytest.fixture
def outro_usuario(criar_usuario):
    return criar_usuario('bruno@example.com', first_name='Bruno', last_name='Costa', cargo='Designer')


@pytest.fixture
def estranho(criar_usuario):
    """Usuário sem acesso aos boards dos fixtures"""
    return criar_usuario('carla@example.com', first_name='Carla', last_name='Souza')


@pytest.fixture
def token(usuario):
    return auth_service.gerar_token(usuario)


@pytest.fixture
def api(usuario):
    return cliente_autenticado(usuario)


@pytest.fixture
def api_de(db):
    return cliente_autenticado


@pytest.fixture
def api_estranho(estranho):
    return cliente_autenticado(estranho)


@pytest.fixture
def cores(db):
    return {
        'board': PaletaCor.objects.create(nome='Royal Blue', valor='#0052CC', tipo='board'),
        'task': PaletaCor.objects.create(nome='Coral', valor='#FF6B6B', tipo='task'),
        'column': PaletaCor.objects.create(nome='Slate', valor='#64748B', tipo='column'),
    }


@pytest.fixture
def template(cores):
    template = TemplateBoard.objects.create(nome='Kanban Board', descricao='Fluxo simples', icone='Folder')
    for ordem, titulo in enumerate(['Backlog', 'Doing', 'Done']):
        Coluna.objects.create(template=template, titulo=titulo, ordem=ordem, cor=cores['column'])
    return template


@pytest.fixture
def colunas(template):
    """{'backlog': '<id>', 'doing': '<id>', 'done': '<id>'}"""
    return {coluna.titulo.lower(): coluna.chave for coluna in template.colunas.order_by('ordem')}


@pytest.fixture
def board(usuario, outro_usuario, template, cores):
    board = Board.objects.create(
        titulo='Sprint 1',
        descricao='Primeira sprint',
        cor=cores['board'],
        template=template,
        criado_por=usuario,
    )
    board.membros.add(usuario, outro_usuario)
    return board


@pytest.fixture
def criar_tarefa(board):
    def _criar(titulo, status, ordem=0, **extra):
        return Tarefa.objects.create(board=extra.pop('board', board), titulo=titulo, status=status, ordem=ordem, **extra)
    return _criar


@pytest.fixture
def eventos(monkeypatch):
    """Captura as notificações enviadas pelas views de board"""
    registrados = []

    def _registrar(board_id, tipo, mensagem):
        registrados.append((board_id, tipo, mensagem))

    monkeypatch.setattr('apps.board.views.notificar_board', _registrar)
    return registrados
