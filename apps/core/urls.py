# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTENTICAÇÃO ===
    path('auth/register', views.registro_view, name='registro'),
    path('auth/login', views.login_view, name='login'),
    path('auth/validate-token', views.validar_token_view, name='validar_token'),

    # === USUÁRIOS ===
    path('users/search', views.buscar_usuarios_view, name='buscar_usuarios'),
    path('users/board-members', views.membros_board_view, name='membros_board'),
    path('users/<int:usuario_id>', views.usuario_detalhe_view, name='usuario_detalhe'),
    path('users/<int:usuario_id>/avatar', views.avatar_view, name='avatar'),

    # === CORES E TEMPLATES ===
    path('colors', views.cores_view, name='cores'),
    path('colors/<int:cor_id>', views.cor_detalhe_view, name='cor_detalhe'),
    path('templates', views.templates_view, name='templates'),

    # === DASHBOARD ===
    path('dashboard/stats', views.dashboard_stats_view, name='dashboard_stats'),

    # === MONITORAMENTO ===
    path('health', views.health_view, name='health'),
]
