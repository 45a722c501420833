# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API REST consumida pelo SPA
    path('api/', include('apps.core.urls')),
    path('api/', include('apps.board.urls')),
]

# Servir avatares enviados em desenvolvimento
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# Customizar títulos do admin
admin.site.site_header = 'Quadro Kanban Admin'
admin.site.site_title = 'Quadro Kanban'
admin.site.index_title = 'Administração do Sistema'
