"""
Criação de dados de teste direto pelos repositories.

Valores em dinheiro em centavos, como ficam gravados.
"""
from core.repositories.user_repository import UserRepository
from core.services.token_service import TokenService
from finance.repositories.cartao_repository import CartaoRepository
from finance.repositories.categoria_repository import CategoriaRepository
from finance.repositories.conta_repository import ContaRepository
from finance.models.categoria_model import CategoriaModel


def criar_usuario(email='ana@email.com', password='senha123', name='Ana', role='user'):
    return UserRepository().create(email, password, name, role=role)


def token_para(user):
    return TokenService().issue(user)


def criar_categoria(user_id, nome='Mercado', cor='#00ff00', limite=None):
    return CategoriaRepository().create(
        CategoriaModel.create_categoria_data(user_id, nome, cor, spendingLimit=limite)
    )


def criar_cartao(user_id, numero='5555444433332222', limite=10000, tipo='credito'):
    return CartaoRepository().create({
        'userId': user_id,
        'cardNumber': numero,
        'cardCVC': '123',
        'cardDateValidity': '12/29',
        'cardName': 'ANA SILVA',
        'cardDateClose': 5,
        'cardDateMaturity': 15,
        'cardBalance': 0,
        'cardLimited': limite,
        'cardType': tipo,
    })


def criar_conta(user_id, nome='Nubank', saldo=20000):
    return ContaRepository().create({
        'userId': user_id,
        'accountBankingName': nome,
        'accountBalance': saldo,
    })
