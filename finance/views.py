"""
Views do app finance.

Localização: finance/views.py

Views do módulo finance. Elas validam a entrada com os schemas, chamam
services para executar a lógica de negócio e retornam JSON.

SEGURANÇA: o user_id vem sempre do token (SecurityMiddleware), nunca do
corpo ou da query string.
"""
import logging
from django.http import JsonResponse
from core.decorators import api_view, audit_log
from core.exceptions import ValidationError
from core.middleware.security_middleware import require_user_id
from core.serializers import parse_json_body, serialize_document, serialize_many
from finance.schemas import (
    CategoriaInput, CategoriaUpdate,
    CartaoInput, CartaoUpdate,
    ContaInput, ContaUpdate,
    CompraInput, CompraUpdate,
    ReceitaInput, ReceitaUpdate,
)
from finance.services.cartao_service import CartaoService
from finance.services.categoria_service import CategoriaService
from finance.services.compra_service import CompraService
from finance.services.conta_service import ContaService
from finance.services.receita_service import ReceitaService

logger = logging.getLogger(__name__)


def _json(data, status=200):
    if isinstance(data, list):
        data = serialize_many(data)
    else:
        data = serialize_document(data)
    return JsonResponse(data, status=status, safe=False,
                        json_dumps_params={'ensure_ascii': False})


def _paginacao(request):
    """Lê ?limit= e ?skip= (padrão 500 e 0)."""
    try:
        limit = int(request.GET.get('limit', 500))
        skip = int(request.GET.get('skip', 0))
    except ValueError:
        raise ValidationError("limit e skip devem ser inteiros")
    if limit < 1 or limit > 1000 or skip < 0:
        raise ValidationError("limit deve estar entre 1 e 1000 e skip não pode ser negativo")
    return limit, skip


# Categorias

@api_view(['GET', 'POST'])
def categorias_view(request):
    """
    GET  /api/categorias -> categorias do usuário com revenueValue e categoryBalance
    POST /api/categorias -> cria (400 se o nome já existe)
    """
    user_id = require_user_id(request)
    service = CategoriaService()

    if request.method == 'POST':
        dados = CategoriaInput.model_validate(parse_json_body(request))
        return _json(service.create_categoria(user_id, dados), status=201)

    return _json(service.list_categorias(user_id))


@api_view(['GET', 'PUT', 'DELETE'])
def categoria_detail_view(request, categoria_id):
    user_id = require_user_id(request)
    service = CategoriaService()

    if request.method == 'GET':
        return _json(service.get_categoria(user_id, categoria_id))

    if request.method == 'PUT':
        dados = CategoriaUpdate.model_validate(parse_json_body(request))
        return _json(service.update_categoria(user_id, categoria_id, dados))

    service.delete_categoria(user_id, categoria_id)
    return JsonResponse({'message': 'Categoria deletada com sucesso'})


# Cartões

@api_view(['GET', 'POST'])
def cartoes_view(request):
    user_id = require_user_id(request)
    service = CartaoService()

    if request.method == 'POST':
        dados = CartaoInput.model_validate(parse_json_body(request))
        return _json(service.create_cartao(user_id, dados), status=201)

    return _json(service.list_cartoes(user_id))


@api_view(['GET', 'PUT', 'DELETE'])
def cartao_detail_view(request, cartao_id):
    user_id = require_user_id(request)
    service = CartaoService()

    if request.method == 'GET':
        return _json(service.get_cartao(user_id, cartao_id))

    if request.method == 'PUT':
        dados = CartaoUpdate.model_validate(parse_json_body(request))
        return _json(service.update_cartao(user_id, cartao_id, dados))

    service.delete_cartao(user_id, cartao_id)
    return JsonResponse({'message': 'Cartão deletado com sucesso'})


# Contas bancárias

@api_view(['GET', 'POST'])
def contas_view(request):
    user_id = require_user_id(request)
    service = ContaService()

    if request.method == 'POST':
        dados = ContaInput.model_validate(parse_json_body(request))
        return _json(service.create_conta(user_id, dados), status=201)

    return _json(service.list_contas(user_id))


@api_view(['GET', 'PUT', 'DELETE'])
def conta_detail_view(request, conta_id):
    user_id = require_user_id(request)
    service = ContaService()

    if request.method == 'GET':
        return _json(service.get_conta(user_id, conta_id))

    if request.method == 'PUT':
        dados = ContaUpdate.model_validate(parse_json_body(request))
        return _json(service.update_conta(user_id, conta_id, dados))

    service.delete_conta(user_id, conta_id)
    return JsonResponse({'message': 'Conta deletada com sucesso'})


# Compras

@audit_log(action='create_compra', entity='compra')
@api_view(['GET', 'POST'])
def compras_view(request):
    """
    GET  /api/compras -> compras do usuário (mais recentes primeiro)
    POST /api/compras -> registra a compra e debita cartão (crédito) ou conta (débito/pix)

    Respostas do POST:
    - 201: compra criada
    - 400: dados inválidos ou saldo/limite insuficiente
    - 404: cartão, categoria ou conta não encontrados para o usuário
    - 500: falha após o débito (saldo estornado quando possível)
    """
    user_id = require_user_id(request)
    service = CompraService()

    if request.method == 'POST':
        dados = CompraInput.model_validate(parse_json_body(request))
        return _json(service.create_compra(user_id, dados), status=201)

    limit, skip = _paginacao(request)
    return _json(service.list_compras(user_id, limit=limit, skip=skip))


@audit_log(action='modify_compra', entity='compra', id_kwarg='compra_id')
@api_view(['GET', 'PUT', 'DELETE'])
def compra_detail_view(request, compra_id):
    """
    GET    /api/compras/<id>
    PUT    /api/compras/<id> -> só store, date e categoria
    DELETE /api/compras/<id> -> exclui e estorna o valor na fonte
    """
    user_id = require_user_id(request)
    service = CompraService()

    if request.method == 'GET':
        return _json(service.get_compra(user_id, compra_id))

    if request.method == 'PUT':
        dados = CompraUpdate.model_validate(parse_json_body(request))
        return _json(service.update_compra(user_id, compra_id, dados))

    service.delete_compra(user_id, compra_id)
    return JsonResponse({'message': 'Compra deletada com sucesso'})


# Receitas

@audit_log(action='create_receita', entity='receita')
@api_view(['GET', 'POST'])
def receitas_view(request):
    """
    GET  /api/receitas -> receitas do usuário
    POST /api/receitas -> registra; com conta, 'entrada' credita e 'saida' debita
    """
    user_id = require_user_id(request)
    service = ReceitaService()

    if request.method == 'POST':
        dados = ReceitaInput.model_validate(parse_json_body(request))
        return _json(service.create_receita(user_id, dados), status=201)

    limit, skip = _paginacao(request)
    return _json(service.list_receitas(user_id, limit=limit, skip=skip))


@api_view(['GET'])
def receitas_por_tipo_view(request, tipo):
    """GET /api/receitas/entrada | /api/receitas/saida"""
    user_id = require_user_id(request)
    return _json(ReceitaService().list_por_tipo(user_id, tipo))


@api_view(['GET'])
def receitas_por_categoria_view(request, categoria_id):
    """
    GET /api/receitas/categoria/<categoryId>

    Totais de entradas e saídas da categoria e as receitas vinculadas.
    """
    user_id = require_user_id(request)
    return _json(ReceitaService().resumo_categoria(user_id, categoria_id))


@audit_log(action='modify_receita', entity='receita', id_kwarg='receita_id')
@api_view(['GET', 'PUT', 'DELETE'])
def receita_detail_view(request, receita_id):
    user_id = require_user_id(request)
    service = ReceitaService()

    if request.method == 'GET':
        return _json(service.get_receita(user_id, receita_id))

    if request.method == 'PUT':
        dados = ReceitaUpdate.model_validate(parse_json_body(request))
        return _json(service.update_receita(user_id, receita_id, dados))

    service.delete_receita(user_id, receita_id)
    return JsonResponse({'message': 'Receita deletada com sucesso'})
