# apps/core/middleware.py

import json
import logging

from django.http import Http404, JsonResponse

from .exceptions import ApiError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """
    Middleware que converte exceções da API no envelope JSON

    Atua apenas em rotas /api/; o admin continua com as páginas
    de erro padrão do Django.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith('/api/'):
            return None  # Deixar o Django lidar com isso

        if isinstance(exception, ApiError):
            logger.warning(
                f"⚠️  {request.method} {request.path} → {exception.status_code}: {exception.mensagem}"
            )
            return JsonResponse(exception.como_dict(), status=exception.status_code)

        if isinstance(exception, Http404):
            return JsonResponse(
                {'success': False, 'message': 'Recurso não encontrado'},
                status=404
            )

        if isinstance(exception, json.JSONDecodeError):
            return JsonResponse(
                {'success': False, 'message': 'JSON inválido'},
                status=400
            )

        logger.exception(f"❌ Erro inesperado em {request.method} {request.path}")
        return JsonResponse(
            {'success': False, 'message': 'Erro interno do servidor'},
            status=500
        )
