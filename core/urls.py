"""
URLs do app core.

Localização: core/urls.py

Rotas de usuários. São montadas sob /api/ pelo app api; a barra final é
opcional em todas elas.
"""
from django.urls import re_path
from . import views

app_name = 'core'

urlpatterns = [
    re_path(r'^usuarios/registro/?$', views.registro_view, name='registro'),
    re_path(r'^usuarios/login/?$', views.login_view, name='login'),
    re_path(r'^usuarios/?$', views.usuarios_view, name='usuarios'),
    re_path(r'^usuarios/(?P<user_id>[^/]+)/?$', views.usuario_detail_view, name='usuario-detail'),
]
