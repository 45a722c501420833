# apps/core/forms.py

"""
Forms de validação dos payloads JSON da API de usuários

Os nomes dos campos seguem as chaves do JSON (camelCase), assim o
form recebe o dicionário do corpo da requisição diretamente.
"""

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError


class FormParcialMixin:
    """Suporte a atualização parcial (apenas chaves enviadas)"""

    MAPA_CAMPOS = {}

    def __init__(self, *args, parcial=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.parcial = parcial
        if parcial:
            for campo in self.fields.values():
                campo.required = False

    def campos_enviados(self):
        """Dict {campo_do_model: valor} só com o que veio no corpo"""
        return {
            atributo: self.cleaned_data[campo]
            for campo, atributo in self.MAPA_CAMPOS.items()
            if campo in self.data
        }


class RegistroForm(forms.Form):
    """Registro de novo usuário"""

    firstName = forms.CharField(label='Nome', max_length=150)
    lastName = forms.CharField(label='Sobrenome', max_length=150)
    email = forms.EmailField(label='Email')
    password = forms.CharField(label='Senha')

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()


class LoginForm(forms.Form):
    """Login por email e senha"""

    email = forms.EmailField(label='Email')
    password = forms.CharField(label='Senha')


class PerfilForm(FormParcialMixin, forms.Form):
    """
    Atualização parcial do perfil

    Apenas as chaves presentes no corpo são aplicadas (ver campos_enviados).
    """

    MAPA_CAMPOS = {
        'firstName': 'first_name',
        'lastName': 'last_name',
        'role': 'cargo',
        'department': 'departamento',
        'location': 'localizacao',
    }

    firstName = forms.CharField(max_length=150, required=False)
    lastName = forms.CharField(max_length=150, required=False)
    role = forms.CharField(max_length=100, required=False)
    department = forms.CharField(max_length=100, required=False)
    location = forms.CharField(max_length=100, required=False)

    def clean(self):
        cleaned_data = super().clean()
        for campo in ('firstName', 'lastName'):
            if campo in self.data and not cleaned_data.get(campo):
                self.add_error(campo, 'Este campo não pode ficar vazio.')
        return cleaned_data


class AvatarForm(forms.Form):
    """Upload de avatar (multipart, campo 'avatar')"""

    avatar = forms.ImageField()

    def clean_avatar(self):
        avatar = self.cleaned_data['avatar']

        tipo = getattr(avatar, 'content_type', None)
        if tipo not in settings.QUADRO_AVATAR_TIPOS:
            raise ValidationError('Tipo de arquivo inválido. Apenas imagens são permitidas.')

        limite = settings.QUADRO_AVATAR_MAX_MB * 1024 * 1024
        if avatar.size > limite:
            raise ValidationError(
                f'Arquivo muito grande. Máximo de {settings.QUADRO_AVATAR_MAX_MB}MB.'
            )

        return avatar
