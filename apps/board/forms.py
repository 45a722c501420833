# apps/board/forms.py

"""
Forms de validação dos payloads JSON de boards e tarefas

Os forms com parcial=True (PUT) tornam todos os campos opcionais e
só aplicam as chaves que vieram no corpo.
"""

from django import forms
from django.core.exceptions import ValidationError

from apps.core.forms import FormParcialMixin
from apps.core.models import PaletaCor, TemplateBoard, Tarefa, Usuario


class BoardForm(FormParcialMixin, forms.Form):
    """Criação/edição de board"""

    MAPA_CAMPOS = {
        'title': 'titulo',
        'description': 'descricao',
        'color': 'cor',
        'template': 'template',
    }

    title = forms.CharField(max_length=200)
    description = forms.CharField(required=False)
    color = forms.ModelChoiceField(queryset=PaletaCor.objects.all(), required=False)
    template = forms.ModelChoiceField(queryset=TemplateBoard.objects.all(), required=False)
    members = forms.ModelMultipleChoiceField(queryset=Usuario.objects.all(), required=False)

    def clean(self):
        cleaned_data = super().clean()
        if self.parcial and 'title' in self.data and not cleaned_data.get('title'):
            self.add_error('title', 'O título não pode ficar vazio.')
        return cleaned_data


class MembrosBoardForm(forms.Form):
    """PATCH /boards/<id>/members"""

    members = forms.ModelMultipleChoiceField(queryset=Usuario.objects.all())


class ChecklistField(forms.JSONField):
    """
    Lista de itens {id?, text, completed?}
    Normaliza para dicts com as chaves id, texto e concluido
    """

    def to_python(self, value):
        value = super().to_python(value)
        if value in self.empty_values:
            return []
        if not isinstance(value, list):
            raise ValidationError('O checklist deve ser uma lista.')

        itens = []
        for item in value:
            if not isinstance(item, dict):
                raise ValidationError('Cada item do checklist deve ser um objeto.')
            texto = item.get('text')
            if not isinstance(texto, str) or not texto.strip():
                raise ValidationError('Cada item do checklist precisa de texto.')
            itens.append({
                'id': item.get('id'),
                'texto': texto.strip(),
                'concluido': bool(item.get('completed', False)),
            })
        return itens


class TarefaForm(FormParcialMixin, forms.Form):
    """Criação/edição de tarefa"""

    MAPA_CAMPOS = {
        'title': 'titulo',
        'description': 'descricao',
        'status': 'status',
        'priority': 'prioridade',
        'color': 'cor',
        'owner': 'responsavel',
        'order': 'ordem',
        'checklist': 'checklist',
    }

    title = forms.CharField(max_length=200)
    description = forms.CharField(required=False)
    status = forms.CharField(max_length=64)
    priority = forms.ChoiceField(choices=Tarefa.PRIORIDADE_CHOICES, required=False)
    color = forms.ModelChoiceField(queryset=PaletaCor.objects.all(), required=False)
    owner = forms.ModelChoiceField(queryset=Usuario.objects.all(), required=False)
    order = forms.IntegerField(required=False)
    checklist = ChecklistField(required=False)

    def clean_priority(self):
        return self.cleaned_data.get('priority') or 'medium'

    def clean(self):
        cleaned_data = super().clean()
        if self.parcial:
            for campo in ('title', 'status'):
                if campo in self.data and not cleaned_data.get(campo):
                    self.add_error(campo, 'Este campo não pode ficar vazio.')
            if 'order' in self.data and cleaned_data.get('order') is None:
                self.add_error('order', 'Informe um número inteiro.')
        return cleaned_data


class MoverTarefaForm(forms.Form):
    """PATCH /tasks/<id>/move"""

    status = forms.CharField(max_length=64)
    order = forms.IntegerField()


class AtualizacaoOrdemForm(forms.Form):
    """
    PATCH /tasks/board/<id>/orders

    Corpo: {'updates': [{'id': 1, 'order': 0}, ...]}
    """

    updates = forms.JSONField(required=False)

    def clean_updates(self):
        if 'updates' not in self.data:
            raise ValidationError('Informe a lista updates.')

        valor = self.cleaned_data.get('updates') or []
        if not isinstance(valor, list):
            raise ValidationError('updates deve ser uma lista.')

        atualizacoes = []
        for item in valor:
            if not isinstance(item, dict):
                raise ValidationError('Cada update deve ser um objeto {id, order}.')
            try:
                atualizacoes.append((int(item['id']), int(item['order'])))
            except (KeyError, TypeError, ValueError):
                raise ValidationError('Cada update deve ter id e order inteiros.')
        return atualizacoes


class ItemChecklistForm(FormParcialMixin, forms.Form):
    """PATCH /tasks/<id>/checklist/<item_id>"""

    MAPA_CAMPOS = {
        'text': 'texto',
        'completed': 'concluido',
    }

    text = forms.CharField(max_length=500)
    completed = forms.BooleanField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        if 'text' in self.data and not cleaned_data.get('text'):
            self.add_error('text', 'O texto não pode ficar vazio.')
        return cleaned_data
