# apps/core/exceptions.py

"""
Erros da API do Quadro Kanban

Cada erro carrega o status HTTP e é convertido no envelope
{'success': False, 'message': ..., 'errors': ...} pelo ApiErrorMiddleware.
"""


class ApiError(Exception):
    """Erro operacional com status HTTP"""

    status_code = 500
    mensagem_padrao = 'Erro interno do servidor'

    def __init__(self, mensagem=None, errors=None, status_code=None):
        self.mensagem = mensagem or self.mensagem_padrao
        self.errors = errors
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.mensagem)

    def como_dict(self):
        dados = {'success': False, 'message': self.mensagem}
        if self.errors:
            dados['errors'] = self.errors
        return dados


class ErroValidacao(ApiError):
    status_code = 400
    mensagem_padrao = 'Erro de validação'


class NaoAutenticado(ApiError):
    status_code = 401
    mensagem_padrao = 'Não autorizado'


class AcessoNegado(ApiError):
    status_code = 403
    mensagem_padrao = 'Acesso negado'


class NaoEncontrado(ApiError):
    status_code = 404
    mensagem_padrao = 'Recurso não encontrado'
