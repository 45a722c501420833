# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserChangeForm, UserCreationForm
from django.utils.html import format_html

from .models import (
    Usuario, PaletaCor, TemplateBoard, Coluna, Board, Tarefa, ItemChecklist
)


class UsuarioCreationForm(UserCreationForm):
    class Meta:
        model = Usuario
        fields = ('email', 'first_name', 'last_name')


class UsuarioChangeForm(UserChangeForm):
    class Meta:
        model = Usuario
        fields = '__all__'


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Admin customizado para o modelo Usuario (login por email)"""

    form = UsuarioChangeForm
    add_form = UsuarioCreationForm

    list_display = [
        'email', 'get_full_name', 'cargo', 'departamento',
        'is_active', 'date_joined'
    ]
    list_filter = ['is_staff', 'is_active', 'departamento', 'date_joined']
    search_fields = ['email', 'first_name', 'last_name', 'cargo', 'departamento']
    ordering = ['-date_joined']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Informações Pessoais', {
            'fields': ('first_name', 'last_name', 'avatar')
        }),
        ('Perfil', {
            'fields': ('cargo', 'departamento', 'localizacao')
        }),
        ('Permissões', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',)
        }),
        ('Datas', {
            'fields': ('last_login', 'date_joined'),
            'classes': ('collapse',)
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'password1', 'password2'),
        }),
    )


@admin.register(PaletaCor)
class PaletaCorAdmin(admin.ModelAdmin):
    """Admin da paleta de cores"""

    list_display = ['nome', 'amostra', 'valor', 'tipo']
    list_filter = ['tipo']
    search_fields = ['nome', 'valor']

    def amostra(self, obj):
        """Quadradinho com a cor"""
        return format_html(
            '<span style="background-color: {}; display: inline-block; '
            'width: 16px; height: 16px; border-radius: 3px;"></span>',
            obj.valor
        )

    amostra.short_description = 'Cor'


class ColunaInline(admin.TabularInline):
    """Colunas editadas dentro do template"""
    model = Coluna
    extra = 0
    fields = ['titulo', 'cor', 'ordem']
    ordering = ['ordem']


@admin.register(TemplateBoard)
class TemplateBoardAdmin(admin.ModelAdmin):
    """Admin para templates de board"""

    list_display = ['nome', 'icone', 'colunas_count', 'criado_em']
    search_fields = ['nome', 'descricao']
    inlines = [ColunaInline]

    def colunas_count(self, obj):
        """Conta colunas do template"""
        return obj.colunas.count()

    colunas_count.short_description = 'Colunas'


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Admin para boards Kanban"""

    list_display = [
        'titulo', 'criado_por', 'template', 'membros_count',
        'tarefas_count', 'progresso', 'atualizado_em'
    ]
    list_filter = ['template', 'criado_em']
    search_fields = ['titulo', 'descricao', 'criado_por__email']
    filter_horizontal = ['membros']
    readonly_fields = ['criado_em', 'atualizado_em']

    def membros_count(self, obj):
        return obj.membros.count()

    membros_count.short_description = 'Membros'

    def tarefas_count(self, obj):
        return obj.tarefas.count()

    tarefas_count.short_description = 'Tarefas'

    def progresso(self, obj):
        return f"{obj.calcular_progresso()}%"

    progresso.short_description = 'Progresso'


class ItemChecklistInline(admin.TabularInline):
    model = ItemChecklist
    extra = 0
    fields = ['texto', 'concluido', 'posicao']
    ordering = ['posicao']


@admin.register(Tarefa)
class TarefaAdmin(admin.ModelAdmin):
    """Admin para tarefas"""

    list_display = ['titulo', 'board', 'status', 'ordem', 'prioridade_badge', 'responsavel']
    list_filter = ['prioridade', 'board']
    search_fields = ['titulo', 'descricao']
    readonly_fields = ['criado_em', 'atualizado_em']
    ordering = ['board', 'status', 'ordem']
    inlines = [ItemChecklistInline]

    def prioridade_badge(self, obj):
        """Exibe a prioridade com badge colorido"""
        cores = {
            'high': '#EF4444',  # vermelho
            'medium': '#F59E0B',  # amarelo
            'low': '#3B82F6'  # azul
        }
        cor = cores.get(obj.prioridade, '#6B7280')
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            cor, obj.get_prioridade_display()
        )

    prioridade_badge.short_description = 'Prioridade'
