# apps/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuração da app Core"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core - Usuários, Boards e Tarefas'

    def ready(self):
        """
        Conecta os sinais (capitalização de nomes, log de conclusão)
        """
        from . import signals  # noqa: F401
