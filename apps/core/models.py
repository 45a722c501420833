# apps/core/models.py

import logging

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.conf import settings
from django.db import models
from PIL import Image

logger = logging.getLogger(__name__)


class UsuarioManager(BaseUserManager):
    """Manager com login por email (o modelo não possui username)"""

    use_in_migrations = True

    def _criar_usuario(self, email, password, **extra_fields):
        if not email:
            raise ValueError('O email é obrigatório')

        email = self.normalize_email(email).lower()
        usuario = self.model(email=email, **extra_fields)
        usuario.set_password(password)
        usuario.save(using=self._db)
        return usuario

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._criar_usuario(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('cargo', 'Admin')
        return self._criar_usuario(email, password, **extra_fields)


class Usuario(AbstractUser):
    """
    Modelo de usuário customizado

    O login é feito por email. Nome e sobrenome são armazenados
    capitalizados (ver signals.capitalizar_nomes_usuario).
    """

    username = None
    email = models.EmailField('email', unique=True)

    # === PERFIL ===
    avatar = models.ImageField(upload_to='avatars/', blank=True, null=True)
    cargo = models.CharField(max_length=100, default='Member')
    departamento = models.CharField(max_length=100, default='General')
    localizacao = models.CharField(max_length=100, blank=True)

    # === METADADOS ===
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    objects = UsuarioManager()

    class Meta:
        db_table = 'usuario'
        ordering = ['first_name', 'last_name']

    def save(self, *args, **kwargs):
        """
        Override do save para redimensionar o avatar automaticamente
        """
        super().save(*args, **kwargs)

        if self.avatar:
            tamanho = settings.QUADRO_AVATAR_TAMANHO
            try:
                img = Image.open(self.avatar.path)
                if img.height > tamanho or img.width > tamanho:
                    img.thumbnail((tamanho, tamanho))
                    img.save(self.avatar.path)
            except (OSError, ValueError) as e:
                logger.warning(f"⚠️  Não foi possível redimensionar avatar de {self.email}: {e}")

    def get_boards_acessiveis(self):
        """
        Retorna boards que o usuário pode acessar (criador ou membro)
        """
        return Board.objects.filter(
            models.Q(criado_por=self) | models.Q(membros=self)
        ).distinct()

    def pode_acessar_board(self, board):
        """
        Verifica se usuário pode acessar um board específico

        Regra: deve ser o criador do board OU um dos membros
        """
        if board.criado_por_id == self.id:
            return True
        return board.membros.filter(id=self.id).exists()

    def __str__(self):
        nome_completo = self.get_full_name()
        if nome_completo:
            return f"{nome_completo} <{self.email}>"
        return self.email


class PaletaCor(models.Model):
    """Cor pré-definida usada por boards, colunas e tarefas"""

    TIPO_CHOICES = [
        ('board', 'Board'),
        ('task', 'Tarefa'),
        ('column', 'Coluna'),
    ]

    nome = models.CharField(max_length=50)
    valor = models.CharField(max_length=7, unique=True)
    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES, default='board')
    criado_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'paleta_cor'
        ordering = ['tipo', 'nome']

    def __str__(self):
        return f"{self.nome} ({self.valor})"


class TemplateBoard(models.Model):
    """Template que define as colunas de um board"""

    nome = models.CharField(max_length=100, unique=True)
    descricao = models.TextField(blank=True)
    icone = models.CharField(max_length=50, blank=True)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'template_board'
        ordering = ['criado_em', 'id']

    def __str__(self):
        return self.nome

    def coluna_final(self):
        """Coluna de maior ordem - convenção de 'concluído'"""
        return self.colunas.order_by('-ordem').first()


class Coluna(models.Model):
    """Coluna (status) definida por um template"""

    titulo = models.CharField(max_length=100)
    template = models.ForeignKey(
        TemplateBoard,
        on_delete=models.CASCADE,
        related_name='colunas'
    )
    cor = models.ForeignKey(
        PaletaCor,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='colunas'
    )
    ordem = models.IntegerField(default=0)

    class Meta:
        db_table = 'coluna'
        ordering = ['ordem', 'id']
        unique_together = ['template', 'ordem']

    def __str__(self):
        return f"{self.titulo} - {self.template.nome}"

    @property
    def chave(self):
        """Identificador usado no campo status das tarefas"""
        return str(self.id)


class Board(models.Model):
    """Quadro Kanban; as colunas vêm do template"""

    titulo = models.CharField(max_length=200)
    descricao = models.TextField(blank=True)
    cor = models.ForeignKey(
        PaletaCor,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='boards'
    )
    template = models.ForeignKey(
        TemplateBoard,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='boards'
    )
    criado_por = models.ForeignKey(
        Usuario,
        on_delete=models.PROTECT,
        related_name='boards_criados'
    )
    membros = models.ManyToManyField(
        Usuario,
        related_name='boards_membro',
        blank=True
    )
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'board'
        ordering = ['-atualizado_em']

    def __str__(self):
        return self.titulo

    def get_colunas(self):
        """Colunas do board em ordem (vazio se não há template)"""
        if not self.template_id:
            return Coluna.objects.none()
        return self.template.colunas.select_related('cor').order_by('ordem')

    def coluna_final(self):
        if not self.template_id:
            return None
        return self.template.coluna_final()

    def ids_membros(self):
        """Criador + membros, sem duplicatas"""
        ids = {self.criado_por_id}
        ids.update(self.membros.values_list('id', flat=True))
        return ids

    def calcular_progresso(self):
        """
        Percentual de tarefas concluídas

        Uma tarefa conta como concluída se está na última coluna
        ou se tem checklist não vazio com todos os itens marcados.
        """
        tarefas = list(self.tarefas.prefetch_related('checklist'))
        if not tarefas:
            return 0

        coluna_final = self.coluna_final()
        status_final = coluna_final.chave if coluna_final else None

        concluidas = sum(
            1 for tarefa in tarefas
            if tarefa.status == status_final or tarefa.checklist_concluido()
        )
        return round(concluidas / len(tarefas) * 100)


class Tarefa(models.Model):
    """Tarefa (card) de um board"""

    PRIORIDADE_CHOICES = [
        ('low', 'Baixa'),
        ('medium', 'Média'),
        ('high', 'Alta'),
    ]

    titulo = models.CharField(max_length=200)
    descricao = models.TextField(blank=True)
    status = models.CharField(
        max_length=64,
        help_text="Identificador da coluna em que a tarefa está"
    )
    prioridade = models.CharField(
        max_length=10,
        choices=PRIORIDADE_CHOICES,
        default='medium'
    )
    cor = models.ForeignKey(
        PaletaCor,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas'
    )
    responsavel = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas_responsavel'
    )
    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='tarefas'
    )
    ordem = models.IntegerField(default=0)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tarefa'
        # Empates de ordem resolvidos pela sequência de atualização
        ordering = ['ordem', 'atualizado_em', 'id']
        indexes = [
            models.Index(fields=['board', 'status', 'ordem']),
        ]

    def __str__(self):
        return self.titulo

    def checklist_concluido(self):
        """Checklist não vazio com todos os itens concluídos"""
        itens = list(self.checklist.all())
        return bool(itens) and all(item.concluido for item in itens)


class ItemChecklist(models.Model):
    """Item do checklist de uma tarefa"""

    tarefa = models.ForeignKey(
        Tarefa,
        on_delete=models.CASCADE,
        related_name='checklist'
    )
    texto = models.CharField(max_length=500)
    concluido = models.BooleanField(default=False)
    posicao = models.IntegerField(default=0)

    class Meta:
        db_table = 'item_checklist'
        ordering = ['posicao', 'id']

    def __str__(self):
        marcador = '✅' if self.concluido else '⬜'
        return f"{marcador} {self.texto}"
