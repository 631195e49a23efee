"""
Views do app core.

Localização: core/views.py

Views são os controllers da aplicação. Elas:
- Recebem requisições HTTP
- Validam a entrada com os schemas
- Chamam services para lógica de negócio
- Retornam respostas JSON

NÃO devem conter lógica de negócio, apenas orquestração.
"""
from django.http import JsonResponse
from core.decorators import api_view
from core.exceptions import UnauthorizedError
from core.schemas import RegistroInput, LoginInput, UsuarioCreateInput, UsuarioUpdateInput
from core.serializers import parse_json_body, serialize_document, serialize_many
from core.services.auth_service import AuthService
from core.services.audit_log_service import AuditLogService
from core.services.user_service import UserService


def _resposta(message, response, status=200):
    return JsonResponse({'message': message, 'response': response}, status=status,
                        json_dumps_params={'ensure_ascii': False})


@api_view(['POST'])
def registro_view(request):
    """
    POST /api/usuarios/registro

    201 com o token emitido; 400 se o email já existe ou as senhas não conferem.
    """
    dados = RegistroInput.model_validate(parse_json_body(request))
    user, token = AuthService().register(dados)

    AuditLogService().log_action(
        user_id=str(user['_id']),
        action='register',
        entity='user',
        entity_id=str(user['_id'])
    )
    return _resposta("Usuário registrado com sucesso", {
        'token': token,
        'id': str(user['_id']),
    }, status=201)


@api_view(['POST'])
def login_view(request):
    """
    POST /api/usuarios/login

    200 com token, id, email e nome; 401 se as credenciais não conferem.
    """
    dados = LoginInput.model_validate(parse_json_body(request))
    audit = AuditLogService()
    try:
        user, token = AuthService().authenticate(dados.email, dados.password)
    except UnauthorizedError as e:
        audit.log_login(user_id=None, status='error', error=f"{e.message}: {dados.email}")
        raise

    audit.log_login(user_id=str(user['_id']))
    return _resposta("Login realizado com sucesso", {
        'token': token,
        'id': str(user['_id']),
        'email': user['email'],
        'name': user.get('name'),
    })


@api_view(['GET', 'POST'])
def usuarios_view(request):
    """
    GET  /api/usuarios -> o próprio usuário (admin: todos)
    POST /api/usuarios -> criação administrativa
    """
    service = UserService()

    if request.method == 'POST':
        dados = UsuarioCreateInput.model_validate(parse_json_body(request))
        user = service.create_user(request.user_mongo, dados)
        return _resposta("Usuário criado com sucesso", serialize_document(user), status=201)

    usuarios = service.list_users(request.user_mongo)
    return _resposta("Usuários encontrados com sucesso", serialize_many(usuarios))


@api_view(['GET', 'PUT', 'DELETE'])
def usuario_detail_view(request, user_id):
    """
    GET/PUT/DELETE /api/usuarios/<id>

    SEGURANÇA: apenas o próprio usuário (ou admin). O hash da senha nunca
    é devolvido.
    """
    service = UserService()

    if request.method == 'GET':
        user = service.get_user(request.user_mongo, user_id)
        return _resposta("Usuário encontrado com sucesso", serialize_document(user))

    if request.method == 'PUT':
        dados = UsuarioUpdateInput.model_validate(parse_json_body(request))
        user = service.update_user(request.user_mongo, user_id, dados.to_document())
        return _resposta("Usuário atualizado com sucesso", serialize_document(user))

    service.delete_user(request.user_mongo, user_id)
    return _resposta("Usuário deletado com sucesso", {'id': user_id})
