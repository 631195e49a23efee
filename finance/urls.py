"""
URLs do app finance.

Localização: finance/urls.py

Montadas sob /api/ pelo app api; a barra final é opcional.
As rotas de receitas por tipo e por categoria vêm antes da rota por id.
"""
from django.urls import re_path
from . import views

app_name = 'finance'

urlpatterns = [
    re_path(r'^categorias/?$', views.categorias_view, name='categorias'),
    re_path(r'^categorias/(?P<categoria_id>[^/]+)/?$', views.categoria_detail_view, name='categoria-detail'),

    re_path(r'^cartoes/?$', views.cartoes_view, name='cartoes'),
    re_path(r'^cartoes/(?P<cartao_id>[^/]+)/?$', views.cartao_detail_view, name='cartao-detail'),

    re_path(r'^contas/?$', views.contas_view, name='contas'),
    re_path(r'^contas/(?P<conta_id>[^/]+)/?$', views.conta_detail_view, name='conta-detail'),

    re_path(r'^compras/?$', views.compras_view, name='compras'),
    re_path(r'^compras/(?P<compra_id>[^/]+)/?$', views.compra_detail_view, name='compra-detail'),

    re_path(r'^receitas/?$', views.receitas_view, name='receitas'),
    re_path(r'^receitas/(?P<tipo>entrada|saida)/?$', views.receitas_por_tipo_view, name='receitas-tipo'),
    re_path(r'^receitas/categoria/(?P<categoria_id>[^/]+)/?$', views.receitas_por_categoria_view,
            name='receitas-categoria'),
    re_path(r'^receitas/(?P<receita_id>[^/]+)/?$', views.receita_detail_view, name='receita-detail'),
]
