import unittest

from bson import ObjectId

from core.exceptions import NotFoundError
from finance.services.lookup_service import LookupService
from tests.helpers import criar_cartao, criar_categoria, criar_conta, criar_usuario


class TestLookupService(unittest.TestCase):
    def setUp(self):
        self.user = criar_usuario()
        self.user_id = str(self.user['_id'])
        self.outro = criar_usuario(email='bia@email.com', name='Bia')
        self.lookup = LookupService()

    def test_resolve_cartao_por_numero_e_idempotente(self):
        cartao = criar_cartao(self.user['_id'], numero='1111222233334444')
        primeiro = self.lookup.resolve_cartao(self.user_id, numero='1111222233334444')
        segundo = self.lookup.resolve_cartao(self.user_id, numero='1111222233334444')
        self.assertEqual(primeiro['_id'], cartao['_id'])
        self.assertEqual(primeiro['_id'], segundo['_id'])

    def test_resolve_cartao_por_id(self):
        cartao = criar_cartao(self.user['_id'])
        self.assertEqual(self.lookup.resolve_cartao(self.user_id, cartao_id=str(cartao['_id']))['_id'],
                         cartao['_id'])

    def test_cartao_de_outro_usuario_nao_e_resolvido(self):
        criar_cartao(self.outro['_id'], numero='9999888877776666')
        with self.assertRaises(NotFoundError) as ctx:
            self.lookup.resolve_cartao(self.user_id, numero='9999888877776666')
        self.assertEqual(ctx.exception.key, 'cardNumber')

    def test_mesmo_numero_em_usuarios_diferentes(self):
        meu = criar_cartao(self.user['_id'], numero='1234123412341234')
        criar_cartao(self.outro['_id'], numero='1234123412341234')
        self.assertEqual(self.lookup.resolve_cartao(self.user_id, numero='1234123412341234')['_id'],
                         meu['_id'])

    def test_categoria_por_nome_sem_diferenciar_maiusculas(self):
        categoria = criar_categoria(self.user['_id'], nome='Mercado')
        self.assertEqual(self.lookup.resolve_categoria(self.user_id, nome='mercado')['_id'],
                         categoria['_id'])

    def test_categoria_de_outro_usuario_por_id(self):
        categoria = criar_categoria(self.outro['_id'])
        with self.assertRaises(NotFoundError) as ctx:
            self.lookup.resolve_categoria(self.user_id, categoria_id=str(categoria['_id']))
        self.assertEqual(ctx.exception.key, 'categoryId')

    def test_conta_por_nome(self):
        conta = criar_conta(self.user['_id'], nome='Itaú')
        self.assertEqual(self.lookup.resolve_conta(self.user_id, nome='Itaú')['_id'], conta['_id'])
        with self.assertRaises(NotFoundError) as ctx:
            self.lookup.resolve_conta(self.user_id, nome='Bradesco')
        self.assertEqual(ctx.exception.key, 'accountName')

    def test_id_invalido_ou_inexistente(self):
        for valor in ('nao-e-um-id', str(ObjectId())):
            with self.subTest(valor=valor):
                with self.assertRaises(NotFoundError) as ctx:
                    self.lookup.resolve_conta(self.user_id, conta_id=valor)
                self.assertEqual(ctx.exception.key, 'accountId')
