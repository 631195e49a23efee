"""
Documentação da API.

Localização: api/views.py

GET /api/api-docs devolve um documento OpenAPI 3 montado a partir dos
schemas pydantic de entrada. Não exige autenticação.
"""
from django.http import JsonResponse
from core.decorators import api_view
from core.schemas import RegistroInput, LoginInput, UsuarioCreateInput, UsuarioUpdateInput
from finance.schemas import (
    CategoriaInput, CategoriaUpdate,
    CartaoInput, CartaoUpdate,
    ContaInput, ContaUpdate,
    CompraInput, CompraUpdate,
    ReceitaInput, ReceitaUpdate,
)

API_TITLE = 'API Financeiro'
API_VERSION = '1.0.0'

SCHEMAS = [
    RegistroInput, LoginInput, UsuarioCreateInput, UsuarioUpdateInput,
    CategoriaInput, CategoriaUpdate,
    CartaoInput, CartaoUpdate,
    ContaInput, ContaUpdate,
    CompraInput, CompraUpdate,
    ReceitaInput, ReceitaUpdate,
]

# (prefixo, tag, schema de criação, schema de atualização)
RECURSOS = [
    ('/api/categorias', 'Categorias', 'CategoriaInput', 'CategoriaUpdate'),
    ('/api/cartoes', 'Cartões', 'CartaoInput', 'CartaoUpdate'),
    ('/api/contas', 'Contas', 'ContaInput', 'ContaUpdate'),
    ('/api/compras', 'Compras', 'CompraInput', 'CompraUpdate'),
    ('/api/receitas', 'Receitas', 'ReceitaInput', 'ReceitaUpdate'),
    ('/api/usuarios', 'Usuários', 'UsuarioCreateInput', 'UsuarioUpdateInput'),
]

ERROR_SCHEMA = {
    'type': 'object',
    'properties': {
        'error': {'type': 'string', 'example': 'Saldo insuficiente'},
        'message': {'type': 'string', 'example': 'Saldo insuficiente na conta.'},
        'code': {'type': 'string', 'example': 'saldo_insuficiente'},
    },
}


def _ref(nome):
    return {'$ref': f'#/components/schemas/{nome}'}


def _body(nome):
    return {'required': True, 'content': {'application/json': {'schema': _ref(nome)}}}


def _respostas(sucesso, *erros):
    descricoes = {
        '400': 'Dados inválidos ou regra de negócio violada',
        '401': 'Token ausente ou inválido',
        '403': 'Acesso negado',
        '404': 'Não encontrado',
        '500': 'Erro interno',
    }
    respostas = {code: {'description': desc} for code, desc in sucesso.items()}
    for code in erros:
        respostas[code] = {
            'description': descricoes[code],
            'content': {'application/json': {'schema': _ref('Error')}},
        }
    return respostas


def _recurso_paths(prefixo, tag, criar, atualizar):
    id_param = {'name': 'id', 'in': 'path', 'required': True, 'schema': {'type': 'string'}}
    return {
        prefixo: {
            'get': {'tags': [tag], 'summary': f'Lista {tag.lower()} do usuário',
                    'responses': _respostas({'200': 'Lista'}, '401', '500')},
            'post': {'tags': [tag], 'summary': 'Cria', 'requestBody': _body(criar),
                     'responses': _respostas({'201': 'Criado'}, '400', '401', '404', '500')},
        },
        f'{prefixo}/{{id}}': {
            'parameters': [id_param],
            'get': {'tags': [tag], 'summary': 'Busca por id',
                    'responses': _respostas({'200': 'Encontrado'}, '401', '404', '500')},
            'put': {'tags': [tag], 'summary': 'Atualiza', 'requestBody': _body(atualizar),
                    'responses': _respostas({'200': 'Atualizado'}, '400', '401', '404', '500')},
            'delete': {'tags': [tag], 'summary': 'Exclui',
                       'responses': _respostas({'200': 'Excluído'}, '400', '401', '404', '500')},
        },
    }


def build_openapi():
    """Monta o documento OpenAPI 3 da API."""
    schemas = {'Error': ERROR_SCHEMA}
    for schema in SCHEMAS:
        json_schema = schema.model_json_schema(ref_template='#/components/schemas/{model}')
        schemas.update(json_schema.pop('$defs', {}))
        schemas[schema.__name__] = json_schema

    paths = {
        '/api/usuarios/registro': {
            'post': {'tags': ['Usuários'], 'summary': 'Registra um usuário e emite o token',
                     'security': [], 'requestBody': _body('RegistroInput'),
                     'responses': _respostas({'201': 'Usuário registrado'}, '400', '500')},
        },
        '/api/usuarios/login': {
            'post': {'tags': ['Usuários'], 'summary': 'Autentica e emite o token',
                     'security': [], 'requestBody': _body('LoginInput'),
                     'responses': _respostas({'200': 'Token emitido'}, '400', '401', '500')},
        },
        '/api/receitas/{tipo}': {
            'get': {'tags': ['Receitas'], 'summary': 'Receitas por direção',
                    'parameters': [{'name': 'tipo', 'in': 'path', 'required': True,
                                    'schema': {'type': 'string', 'enum': ['entrada', 'saida']}}],
                    'responses': _respostas({'200': 'Lista'}, '401', '500')},
        },
        '/api/receitas/categoria/{categoryId}': {
            'get': {'tags': ['Receitas'], 'summary': 'Totais de entradas e saídas da categoria',
                    'parameters': [{'name': 'categoryId', 'in': 'path', 'required': True,
                                    'schema': {'type': 'string'}}],
                    'responses': _respostas({'200': 'Resumo da categoria'}, '401', '404', '500')},
        },
    }
    for prefixo, tag, criar, atualizar in RECURSOS:
        paths.update(_recurso_paths(prefixo, tag, criar, atualizar))

    return {
        'openapi': '3.0.3',
        'info': {'title': API_TITLE, 'version': API_VERSION},
        'servers': [{'url': '/'}],
        'components': {
            'schemas': schemas,
            'securitySchemes': {'bearerAuth': {'type': 'http', 'scheme': 'bearer', 'bearerFormat': 'JWT'}},
        },
        'security': [{'bearerAuth': []}],
        'paths': paths,
    }


@api_view(['GET'])
def api_docs_view(request):
    """GET /api/api-docs"""
    return JsonResponse(build_openapi(), json_dumps_params={'ensure_ascii': False})
