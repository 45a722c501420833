# apps/core/auth_service.py

"""
Serviço de Autenticação - Encapsula toda lógica de auth da API

Os tokens são JWT (HS256) assinados com QUADRO_JWT_SECRET e carregam
apenas o id do usuário.
"""

import logging
from datetime import timedelta
from typing import Dict, Optional, Tuple

import jwt
from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.utils import timezone

from .exceptions import ErroValidacao, NaoAutenticado
from .models import Usuario

logger = logging.getLogger(__name__)


class ServicoAutenticacao:
    """
    Serviço encapsulado para gerenciar autenticação

    - registrar_usuario / autenticar devolvem (token, usuario)
    - validar_token devolve o usuário dono do token ou levanta NaoAutenticado
    """

    def __init__(self):
        # Atributos privados - encapsulados
        self._algoritmo = settings.QUADRO_JWT_ALGORITMO
        self._expiracao_horas = settings.QUADRO_JWT_EXPIRACAO_HORAS

    def registrar_usuario(self, dados: Dict) -> Tuple[str, Usuario]:
        """
        Cria novo usuário e já devolve um token de acesso

        Args:
            dados: firstName, lastName, email e password já validados

        Returns:
            Tuple[token, usuario_criado]
        """
        email = dados['email'].strip().lower()

        if Usuario.objects.filter(email__iexact=email).exists():
            raise ErroValidacao('Email já cadastrado')

        self._validar_senha(dados['password'])

        usuario = Usuario.objects.create_user(
            email=email,
            password=dados['password'],  # Django já faz hash automaticamente
            first_name=dados['firstName'],
            last_name=dados['lastName'],
        )

        logger.info(f"👤 Usuário registrado: {usuario.email}")
        return self.gerar_token(usuario), usuario

    def autenticar(self, email: str, password: str) -> Tuple[str, Usuario]:
        """
        Realiza login por email/senha

        Returns:
            Tuple[token, usuario]
        """
        usuario = authenticate(username=email.strip().lower(), password=password)

        if usuario is None:
            logger.warning(f"⚠️  Tentativa de login falhada para: {email}")
            raise NaoAutenticado('Credenciais inválidas')

        self._atualizar_ultimo_acesso(usuario)
        return self.gerar_token(usuario), usuario

    def gerar_token(self, usuario: Usuario) -> str:
        """Gera JWT com o id do usuário"""
        agora = timezone.now()
        payload = {
            'id': usuario.id,
            'iat': agora,
            'exp': agora + timedelta(hours=self._expiracao_horas),
        }
        return jwt.encode(payload, settings.QUADRO_JWT_SECRET, algorithm=self._algoritmo)

    def validar_token(self, token: Optional[str]) -> Usuario:
        """
        Decodifica o token e carrega o usuário

        Levanta NaoAutenticado se o token estiver ausente, inválido,
        expirado ou apontar para um usuário inexistente/inativo.
        """
        if not token:
            raise NaoAutenticado('Não autorizado, token ausente')

        try:
            payload = jwt.decode(
                token,
                settings.QUADRO_JWT_SECRET,
                algorithms=[self._algoritmo]
            )
        except jwt.ExpiredSignatureError:
            raise NaoAutenticado('Token expirado')
        except jwt.InvalidTokenError:
            raise NaoAutenticado('Não autorizado, token inválido')

        usuario = Usuario.objects.filter(id=payload.get('id'), is_active=True).first()
        if usuario is None:
            raise NaoAutenticado('Não autorizado, usuário não encontrado')

        return usuario

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _validar_senha(self, password: str):
        """Aplica os AUTH_PASSWORD_VALIDATORS do settings"""
        try:
            validate_password(password)
        except ValidationError as e:
            raise ErroValidacao('Senha inválida', errors=list(e.messages))

    def _atualizar_ultimo_acesso(self, usuario: Usuario):
        """Atualiza timestamp do último acesso"""
        usuario.last_login = timezone.now()
        usuario.save(update_fields=['last_login'])


# Instância global do serviço (Singleton pattern)
auth_service = ServicoAutenticacao()
