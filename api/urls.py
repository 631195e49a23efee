"""
URLs da API.

Localização: api/urls.py

Centraliza todas as rotas da API REST (montadas em /api/ pelo projeto).
"""
from django.urls import re_path
from core import urls as core_urls
from finance import urls as finance_urls
from . import views

urlpatterns = [
    re_path(r'^api-docs/?$', views.api_docs_view, name='api-docs'),
] + core_urls.urlpatterns + finance_urls.urlpatterns
