# apps/core/views.py

import logging

from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .auth_service import auth_service  # Importando nosso serviço encapsulado
from .exceptions import AcessoNegado, NaoEncontrado
from .forms import AvatarForm, LoginForm, PerfilForm, RegistroForm
from .models import Board, PaletaCor, TemplateBoard, Usuario
from .permissions import QuadroPermissions, requer_token
from .serializers import serializar_cor, serializar_template, serializar_usuario
from .utils import ler_json, nome_arquivo_avatar, resposta_sucesso, url_absoluta, validar_form

logger = logging.getLogger(__name__)


# === AUTENTICAÇÃO ===

@csrf_exempt
@require_http_methods(["POST"])
def registro_view(request):
    """
    Registro de usuário

    A view só valida o formato; regras (email único, senha) ficam no serviço
    """
    dados = validar_form(RegistroForm(ler_json(request)))
    token, usuario = auth_service.registrar_usuario(dados)
    return resposta_sucesso({'token': token, 'user': serializar_usuario(usuario, request)}, status=201)


@csrf_exempt
@require_http_methods(["POST"])
def login_view(request):
    """Login por email/senha; devolve token + usuário"""
    dados = validar_form(LoginForm(ler_json(request)))
    token, usuario = auth_service.autenticar(dados['email'], dados['password'])
    return resposta_sucesso({'token': token, 'user': serializar_usuario(usuario, request)})


@require_http_methods(["GET"])
@requer_token
def validar_token_view(request):
    """Se chegou aqui o token já foi validado pelo decorator"""
    return resposta_sucesso({'valid': True})


# === USUÁRIOS ===

@require_http_methods(["GET"])
@requer_token
def buscar_usuarios_view(request):
    """
    Busca usuários por nome, sobrenome, email, cargo ou departamento

    Exclui o próprio usuário e, com excludeBoardId, o criador e os
    membros daquele board.
    """
    termo = request.GET.get('q', '').strip()
    board_id = request.GET.get('excludeBoardId')

    excluir = {request.usuario.id}
    if board_id:
        board = Board.objects.filter(id=board_id).first() if board_id.isdigit() else None
        if board is not None:
            excluir.update(board.ids_membros())

    usuarios = Usuario.objects.filter(is_active=True).exclude(id__in=excluir)
    if termo:
        usuarios = usuarios.filter(
            Q(first_name__icontains=termo) |
            Q(last_name__icontains=termo) |
            Q(email__icontains=termo) |
            Q(cargo__icontains=termo) |
            Q(departamento__icontains=termo)
        )

    usuarios = usuarios[:settings.QUADRO_BUSCA_USUARIOS_LIMITE]
    return resposta_sucesso([serializar_usuario(usuario, request) for usuario in usuarios])


@require_http_methods(["GET"])
@requer_token
def membros_board_view(request):
    """Membros de um board (?boardId=); sem boardId devolve lista vazia"""
    from apps.board.board_service import board_service

    board_id = request.GET.get('boardId')
    if not board_id:
        return resposta_sucesso([])

    board = Board.objects.filter(id=board_id).first() if board_id.isdigit() else None
    if board is None:
        raise NaoEncontrado('Board não encontrado')

    if not QuadroPermissions.tem_acesso_board(request.usuario, board):
        raise AcessoNegado('Você não tem acesso a este board')

    membros = board_service.membros_do_board(board)
    return resposta_sucesso([serializar_usuario(membro, request) for membro in membros])


@csrf_exempt
@require_http_methods(["GET", "PUT"])
@requer_token
def usuario_detalhe_view(request, usuario_id):
    """
    GET: perfil público
    PUT: atualiza o próprio perfil (403 para outros usuários)
    """
    usuario = Usuario.objects.filter(id=usuario_id).first()
    if usuario is None:
        raise NaoEncontrado('Usuário não encontrado')

    if request.method == 'GET':
        return resposta_sucesso(serializar_usuario(usuario, request))

    if not QuadroPermissions.pode_editar_perfil(request.usuario, usuario.id):
        raise AcessoNegado('Você só pode editar o seu próprio perfil')

    form = PerfilForm(ler_json(request))
    validar_form(form)
    for atributo, valor in form.campos_enviados().items():
        setattr(usuario, atributo, valor)
    usuario.save()

    logger.info(f"👤 Perfil atualizado: {usuario.email}")
    return resposta_sucesso(serializar_usuario(usuario, request))


@csrf_exempt
@require_http_methods(["POST"])
@requer_token
def avatar_view(request, usuario_id):
    """
    Upload de avatar (multipart, campo 'avatar')

    A imagem é redimensionada no save do model.
    """
    if not QuadroPermissions.pode_editar_perfil(request.usuario, usuario_id):
        raise AcessoNegado('Você só pode alterar o seu próprio avatar')

    dados = validar_form(AvatarForm(request.POST, request.FILES))
    arquivo = dados['avatar']

    usuario = request.usuario
    avatar_antigo = usuario.avatar.name if usuario.avatar else None

    usuario.avatar.save(nome_arquivo_avatar(arquivo.name), arquivo, save=False)
    usuario.save()

    if avatar_antigo and avatar_antigo != usuario.avatar.name:
        usuario.avatar.storage.delete(avatar_antigo)

    logger.info(f"🖼️  Avatar atualizado: {usuario.email}")
    return resposta_sucesso({'avatar': url_absoluta(request, usuario.avatar.url)})


# === CORES E TEMPLATES ===

@require_http_methods(["GET"])
@requer_token
def cores_view(request):
    """Paleta de cores, opcionalmente filtrada por ?type="""
    cores = PaletaCor.objects.all()
    tipo = request.GET.get('type')
    if tipo:
        cores = cores.filter(tipo=tipo)
    return resposta_sucesso([serializar_cor(cor) for cor in cores])


@require_http_methods(["GET"])
@requer_token
def cor_detalhe_view(request, cor_id):
    cor = PaletaCor.objects.filter(id=cor_id).first()
    if cor is None:
        raise NaoEncontrado('Cor não encontrada')
    return resposta_sucesso(serializar_cor(cor))


@require_http_methods(["GET"])
@requer_token
def templates_view(request):
    """Templates (mais antigos primeiro) com suas colunas"""
    templates = TemplateBoard.objects.order_by('criado_em', 'id')
    return resposta_sucesso([serializar_template(template) for template in templates])


# === DASHBOARD ===

@require_http_methods(["GET"])
@requer_token
def dashboard_stats_view(request):
    from apps.board.board_service import board_service

    return resposta_sucesso(board_service.estatisticas_dashboard(request.usuario))


# === HEALTH CHECK ===

@require_http_methods(["GET"])
def health_view(request):
    """Sem autenticação; usado por load balancers"""
    return resposta_sucesso({
        'status': 'ok',
        'message': 'Servidor em execução',
        'timestamp': timezone.now().isoformat(),
    })
