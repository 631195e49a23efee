"""
URLs raiz do projeto.

Localização: financeiro/urls.py
"""
from django.urls import include, path

urlpatterns = [
    path('api/', include('api.urls')),
]
