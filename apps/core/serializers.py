# apps/core/serializers.py

"""
Conversão dos models para o JSON da API

As chaves seguem o formato consumido pelo front (camelCase).
Ids de tarefas/boards/usuários são inteiros; ids de colunas são
strings, pois são o valor do campo status das tarefas.
"""

from .utils import url_absoluta


def _data(valor):
    return valor.isoformat() if valor else None


def serializar_cor(cor):
    if cor is None:
        return None
    return {
        'id': cor.id,
        'name': cor.nome,
        'value': cor.valor,
        'type': cor.tipo,
    }


def serializar_usuario_resumo(usuario, request=None):
    """Versão curta usada em owner/createdBy"""
    if usuario is None:
        return None
    return {
        'id': usuario.id,
        'firstName': usuario.first_name,
        'lastName': usuario.last_name,
        'avatar': url_absoluta(request, usuario.avatar.url if usuario.avatar else ''),
    }


def serializar_usuario(usuario, request=None):
    """Perfil público completo (nunca inclui a senha)"""
    dados = serializar_usuario_resumo(usuario, request)
    dados.update({
        'email': usuario.email,
        'role': usuario.cargo,
        'department': usuario.departamento,
        'location': usuario.localizacao,
        'createdAt': _data(usuario.criado_em),
        'updatedAt': _data(usuario.atualizado_em),
    })
    return dados


def serializar_coluna(coluna):
    return {
        'id': coluna.chave,
        'title': coluna.titulo,
        'color': serializar_cor(coluna.cor),
        'order': coluna.ordem,
    }


def serializar_template(template, com_colunas=True):
    if template is None:
        return None
    dados = {
        'id': template.id,
        'name': template.nome,
        'description': template.descricao,
        'iconName': template.icone,
    }
    if com_colunas:
        colunas = template.colunas.select_related('cor').order_by('ordem')
        dados['columns'] = [serializar_coluna(coluna) for coluna in colunas]
    return dados


def serializar_board(board, request=None, com_membros=False):
    """
    Board com cor, template (e colunas), criador e estatísticas
    """
    dados = {
        'id': board.id,
        'title': board.titulo,
        'description': board.descricao,
        'color': serializar_cor(board.cor),
        'template': serializar_template(board.template),
        'createdBy': serializar_usuario_resumo(board.criado_por, request),
        'taskCount': board.tarefas.count(),
        'memberCount': board.membros.count(),
        'progress': board.calcular_progresso(),
        'createdAt': _data(board.criado_em),
        'updatedAt': _data(board.atualizado_em),
    }

    if com_membros:
        dados['members'] = [
            serializar_usuario(membro, request) for membro in board.membros.all()
        ]
    else:
        dados['members'] = list(board.membros.values_list('id', flat=True))

    return dados


def serializar_item_checklist(item):
    return {
        'id': item.id,
        'text': item.texto,
        'completed': item.concluido,
    }


def serializar_tarefa(tarefa, request=None):
    """Tarefa com cor e responsável populados"""
    return {
        'id': tarefa.id,
        'title': tarefa.titulo,
        'description': tarefa.descricao,
        'status': tarefa.status,
        'priority': tarefa.prioridade,
        'color': serializar_cor(tarefa.cor),
        'owner': serializar_usuario_resumo(tarefa.responsavel, request),
        'boardId': tarefa.board_id,
        'checklist': [serializar_item_checklist(item) for item in tarefa.checklist.all()],
        'order': tarefa.ordem,
        'createdAt': _data(tarefa.criado_em),
        'updatedAt': _data(tarefa.atualizado_em),
    }
