# apps/core/utils.py

import json
import os
import re
import time
from typing import Dict, List, Optional

from django.http import JsonResponse

from .exceptions import ErroValidacao


def resposta_sucesso(data, status: int = 200) -> JsonResponse:
    """
    Envelope padrão de sucesso da API
    Ex: {'success': True, 'data': {...}}
    """
    return JsonResponse({'success': True, 'data': data}, status=status, safe=False)


def ler_json(request) -> Dict:
    """
    Lê o corpo JSON da requisição

    Corpo vazio vira {}; qualquer coisa que não seja um objeto JSON
    levanta ErroValidacao.
    """
    if not request.body:
        return {}

    try:
        dados = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ErroValidacao('JSON inválido')

    if not isinstance(dados, dict):
        raise ErroValidacao('O corpo da requisição deve ser um objeto JSON')

    return dados


def erros_do_form(form) -> List[str]:
    """
    Achata os erros de um form Django numa lista de mensagens
    Ex: ['title: Este campo é obrigatório.']
    """
    erros = []
    for campo, mensagens in form.errors.items():
        for mensagem in mensagens:
            if campo == '__all__':
                erros.append(mensagem)
            else:
                erros.append(f"{campo}: {mensagem}")
    return erros


def validar_form(form):
    """Retorna cleaned_data ou levanta ErroValidacao com os erros do form"""
    if not form.is_valid():
        raise ErroValidacao('Erro de validação', errors=erros_do_form(form))
    return form.cleaned_data


def capitalizar(texto: Optional[str]) -> str:
    """
    Primeira letra maiúscula, resto minúsculo
    Ex: 'mARIA' -> 'Maria'
    """
    if not texto or not isinstance(texto, str):
        return ''
    texto = texto.strip()
    return texto[:1].upper() + texto[1:].lower()


def url_absoluta(request, url: Optional[str]) -> str:
    """
    Converte URL relativa de mídia em absoluta

    URLs já absolutas (http/https) são devolvidas como estão;
    sem request não há como montar o host, então devolve a relativa.
    """
    if not url:
        return ''
    if url.startswith('http://') or url.startswith('https://'):
        return url
    if request is None:
        return url
    return request.build_absolute_uri(url)


def nome_arquivo_avatar(nome_original: str) -> str:
    """
    Gera nome único e seguro para o avatar mantendo a extensão
    Ex: 'Minha Foto!.PNG' -> '1712345678901-Minha-Foto.png'
    """
    base, extensao = os.path.splitext(os.path.basename(nome_original))
    base_segura = re.sub(r'[^\w-]', '', re.sub(r'\s+', '-', base))
    return f"{int(time.time() * 1000)}-{base_segura}{extensao.lower()}"
