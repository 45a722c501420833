# apps/core/signals.py

import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import Usuario, Tarefa
from .utils import capitalizar

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Usuario)
def capitalizar_nomes_usuario(sender, instance, **kwargs):
    """
    Nome, sobrenome e localização sempre capitalizados
    Ex: 'mARIA' -> 'Maria'
    """
    instance.first_name = capitalizar(instance.first_name)
    instance.last_name = capitalizar(instance.last_name)
    instance.localizacao = capitalizar(instance.localizacao)


@receiver(pre_save, sender=Tarefa)
def registrar_conclusao_tarefa(sender, instance, **kwargs):
    """
    Registra quando a tarefa entra na última coluna do board
    """
    if not instance.pk:
        return

    anterior = sender.objects.filter(pk=instance.pk).values_list('status', flat=True).first()
    if anterior is None or anterior == instance.status:
        return

    coluna_final = instance.board.coluna_final()
    if coluna_final is not None and instance.status == coluna_final.chave:
        logger.info(f"🏁 Tarefa '{instance.titulo}' foi concluída no board {instance.board_id}")
