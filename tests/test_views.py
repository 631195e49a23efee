import json
import unittest
from unittest.mock import patch

from django.test import Client
from pymongo.errors import ExecutionTimeout

from core.repositories.user_repository import UserRepository
from finance.repositories.cartao_repository import CartaoRepository
from finance.repositories.conta_repository import ContaRepository
from tests.helpers import (
    criar_cartao, criar_categoria, criar_conta, criar_usuario, token_para,
)


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.client = Client()
        self.user = criar_usuario()
        self.user_id = str(self.user['_id'])
        self.auth = {'HTTP_AUTHORIZATION': f'Bearer {token_para(self.user)}'}

    def post(self, url, data, **extra):
        return self.client.post(url, data=json.dumps(data), content_type='application/json',
                                **{**self.auth, **extra})

    def put(self, url, data):
        return self.client.put(url, data=json.dumps(data), content_type='application/json', **self.auth)

    def get(self, url):
        return self.client.get(url, **self.auth)

    def delete(self, url):
        return self.client.delete(url, **self.auth)


class TestAutenticacao(ApiTestCase):
    def test_rotas_protegidas_exigem_token(self):
        for url in ('/api/compras', '/api/categorias/', '/api/receitas/entrada', '/api/usuarios'):
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()['code'], 'nao_autenticado')

    def test_token_invalido(self):
        response = self.client.get('/api/compras', HTTP_AUTHORIZATION='Bearer abc.def.ghi')
        self.assertEqual(response.status_code, 401)

    def test_registro(self):
        response = self.client.post('/api/usuarios/registro', data=json.dumps({
            'email': 'nova@email.com', 'password': 'senha123', 'confirmPassword': 'senha123',
            'name': 'Nova', 'age': 30,
        }), content_type='application/json')

        self.assertEqual(response.status_code, 201)
        corpo = response.json()['response']
        self.assertTrue(corpo['token'])
        self.assertTrue(corpo['id'])

    def test_registro_com_senhas_diferentes(self):
        antes = UserRepository().count()
        response = self.client.post('/api/usuarios/registro/', data=json.dumps({
            'email': 'nova@email.com', 'password': 'senha123', 'confirmPassword': 'senha124',
            'name': 'Nova',
        }), content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertNotIn('token', json.dumps(response.json()))
        self.assertIn('senhas não conferem', response.json()['message'])
        self.assertEqual(UserRepository().count(), antes)

    def test_login_com_senha_errada(self):
        response = self.client.post('/api/usuarios/login', data=json.dumps({
            'email': 'ana@email.com', 'password': 'errada',
        }), content_type='application/json')
        self.assertEqual(response.status_code, 401)
        self.assertNotIn('token', json.dumps(response.json()))

    def test_login(self):
        response = self.client.post('/api/usuarios/login', data=json.dumps({
            'email': 'ana@email.com', 'password': 'senha123',
        }), content_type='application/json')
        self.assertEqual(response.status_code, 200)
        corpo = response.json()['response']
        self.assertEqual(corpo['id'], self.user_id)
        self.assertEqual(corpo['email'], 'ana@email.com')
        self.assertEqual(corpo['name'], 'Ana')

    def test_usuario_nao_retorna_senha(self):
        response = self.get(f'/api/usuarios/{self.user_id}')
        self.assertEqual(response.status_code, 200)
        self.assertNotIn('password_hash', response.json()['response'])

    def test_usuario_de_outro(self):
        outro = criar_usuario(email='bia@email.com')
        self.assertEqual(self.get(f"/api/usuarios/{outro['_id']}").status_code, 403)
        self.assertEqual(self.post('/api/usuarios', {
            'email': 'x@email.com', 'password': 'senha123', 'name': 'X',
        }).status_code, 403)

    def test_put_aceita_os_nomes_do_cadastro(self):
        response = self.put(f'/api/usuarios/{self.user_id}', {
            'nome': 'Ana Maria', 'idade': 34, 'genero': 'f', 'dateBirthday': '1990-05-10',
            'senha': 'nova-senha',
        })
        self.assertEqual(response.status_code, 200)
        corpo = response.json()['response']
        self.assertEqual(corpo['name'], 'Ana Maria')
        self.assertEqual(corpo['age'], 34)
        self.assertEqual(corpo['gender'], 'F')
        self.assertTrue(UserRepository().verify_password('ana@email.com', 'nova-senha'))

    def test_api_docs_e_publica(self):
        response = self.client.get('/api/api-docs')
        self.assertEqual(response.status_code, 200)
        doc = response.json()
        self.assertEqual(doc['openapi'], '3.0.3')
        self.assertIn('CompraInput', doc['components']['schemas'])
        self.assertIn('/api/compras/{id}', doc['paths'])


class TestCompras(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.categoria = criar_categoria(self.user['_id'], nome='Mercado')
        self.conta = criar_conta(self.user['_id'], nome='Nubank', saldo=20000)
        self.cartao = criar_cartao(self.user['_id'], numero='5555444433332222', limite=10000)

    def test_compra_no_debito(self):
        response = self.post('/api/compras', {
            'store': 'Padaria', 'value': 50.0, 'paymentMethod': 'debito',
            'categoryName': 'Mercado', 'accountName': 'Nubank',
        })

        self.assertEqual(response.status_code, 201)
        compra = response.json()
        self.assertEqual(compra['accountId'], str(self.conta['_id']))
        self.assertEqual(compra['value'], 50.0)
        self.assertIn('id', compra)

        conta = ContaRepository().find_by_id(self.conta['_id'], self.user_id)
        self.assertEqual(conta['accountBalance'], 15000)

        detalhe = self.get(f"/api/compras/{compra['id']}")
        self.assertEqual(detalhe.status_code, 200)

        saidas = self.get('/api/receitas/saida').json()
        self.assertEqual(len(saidas), 1)
        self.assertEqual(saidas[0]['purchaseId'], compra['id'])

    def test_limite_insuficiente(self):
        response = self.post('/api/compras', {
            'store': 'Loja', 'value': 150, 'paymentMethod': 'credito',
            'cardNumber': '5555444433332222', 'categoryName': 'Mercado',
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'saldo_insuficiente')
        cartao = CartaoRepository().find_by_id(self.cartao['_id'], self.user_id)
        self.assertEqual(cartao['cardLimited'], 10000)

    def test_cartao_de_outro_usuario(self):
        outro = criar_usuario(email='bia@email.com')
        criar_cartao(outro['_id'], numero='9999000011112222')

        response = self.post('/api/compras', {
            'store': 'Loja', 'value': 10, 'paymentMethod': 'credito',
            'cardNumber': '9999000011112222', 'categoryName': 'Mercado',
        })
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['key'], 'cardNumber')

    def test_put_nao_altera_valor(self):
        compra = self.post('/api/compras', {
            'store': 'Padaria', 'value': 50.0, 'paymentMethod': 'pix',
            'categoryName': 'Mercado', 'accountName': 'Nubank',
        }).json()

        response = self.put(f"/api/compras/{compra['id']}", {'value': 1})
        self.assertEqual(response.status_code, 400)
        self.assertIn('value', response.json()['message'])

        response = self.put(f"/api/compras/{compra['id']}", {'store': 'Outra padaria'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['store'], 'Outra padaria')

    def test_delete_estorna(self):
        compra = self.post('/api/compras', {
            'store': 'Padaria', 'value': 50.0, 'paymentMethod': 'pix',
            'categoryName': 'Mercado', 'accountName': 'Nubank',
        }).json()

        response = self.delete(f"/api/compras/{compra['id']}")
        self.assertEqual(response.status_code, 200)
        conta = ContaRepository().find_by_id(self.conta['_id'], self.user_id)
        self.assertEqual(conta['accountBalance'], 20000)
        self.assertEqual(self.get(f"/api/compras/{compra['id']}").status_code, 404)

    def test_erro_inesperado_vira_500_generico(self):
        with patch('finance.views.CompraService.create_compra', side_effect=RuntimeError('segredo interno')):
            response = self.post('/api/compras', {
                'store': 'Padaria', 'value': 50.0, 'paymentMethod': 'pix',
                'categoryName': 'Mercado', 'accountName': 'Nubank',
            })
        self.assertEqual(response.status_code, 500)
        self.assertNotIn('segredo interno', response.content.decode())

    def test_timeout_do_banco(self):
        with patch('finance.views.CompraService.create_compra', side_effect=ExecutionTimeout('lento')):
            response = self.post('/api/compras', {
                'store': 'Padaria', 'value': 50.0, 'paymentMethod': 'pix',
                'categoryName': 'Mercado', 'accountName': 'Nubank',
            })
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['code'], 'timeout')

    def test_json_invalido(self):
        response = self.client.post('/api/compras', data='{nao json', content_type='application/json',
                                    **self.auth)
        self.assertEqual(response.status_code, 400)

    def test_metodo_nao_permitido(self):
        response = self.client.patch('/api/compras', **self.auth)
        self.assertEqual(response.status_code, 405)


class TestCadastros(ApiTestCase):
    def test_categoria_round_trip(self):
        criada = self.post('/api/categorias', {
            'categoryName': 'Lazer', 'categoryColor': '#123456', 'spendingLimit': 300,
        })
        self.assertEqual(criada.status_code, 201)

        buscada = self.get(f"/api/categorias/{criada.json()['id']}").json()
        self.assertEqual(buscada['categoryName'], 'Lazer')
        self.assertEqual(buscada['revenueValue'], 0)

        duplicada = self.post('/api/categorias', {'categoryName': 'lazer', 'categoryColor': '#000'})
        self.assertEqual(duplicada.status_code, 400)

    def test_cartao_duplicado(self):
        payload = {
            'cardNumber': '1111', 'cardCVC': '123', 'cardDateValidity': '12/29', 'cardName': 'ANA',
            'cardDateClose': 1, 'cardDateMaturity': 10, 'cardLimited': 500, 'cardType': 'credito',
        }
        self.assertEqual(self.post('/api/cartoes', payload).status_code, 201)
        self.assertEqual(self.post('/api/cartoes', payload).status_code, 400)

    def test_conta_listada_so_para_o_dono(self):
        self.post('/api/contas', {'accountBankingName': 'Itaú', 'accountBalance': 10})
        outro = criar_usuario(email='bia@email.com')
        response = self.client.get('/api/contas', HTTP_AUTHORIZATION=f'Bearer {token_para(outro)}')
        self.assertEqual(response.json(), [])
        self.assertEqual(len(self.get('/api/contas').json()), 1)

    def test_resumo_da_categoria(self):
        categoria = criar_categoria(self.user['_id'], nome='Salário')
        criar_conta(self.user['_id'], nome='Nubank', saldo=0)
        self.post('/api/receitas', {
            'expenseValue': 1000, 'expenseType': 'entrada', 'expenseName': 'Salário',
            'categoryId': str(categoria['_id']), 'accountName': 'Nubank',
        })

        resumo = self.get(f"/api/receitas/categoria/{categoria['_id']}").json()
        self.assertEqual(resumo['entradas'], 1000)
        self.assertEqual(resumo['categoryBalance'], 1000)
        self.assertEqual(len(resumo['receitas']), 1)

    def test_valores_saem_em_reais(self):
        criada = self.post('/api/categorias', {
            'categoryName': 'Feira', 'categoryColor': '#123456', 'spendingLimit': 250.75,
        }).json()
        self.assertEqual(criada['spendingLimit'], 250.75)
        self.assertNotIn('categoryNameLower', criada)

        conta = self.post('/api/contas', {'accountBankingName': 'Inter', 'accountBalance': 1.00}).json()
        self.assertEqual(ContaRepository().find_by_id(conta['id'], self.user_id)['accountBalance'], 100)

        self.post('/api/compras', {
            'store': 'Padaria', 'value': 0.90, 'paymentMethod': 'pix',
            'categoryName': 'Feira', 'accountName': 'Inter',
        })
        segunda = self.post('/api/compras', {
            'store': 'Padaria', 'value': 0.10, 'paymentMethod': 'pix',
            'categoryName': 'Feira', 'accountName': 'Inter',
        })
        self.assertEqual(segunda.status_code, 201)
        self.assertEqual(segunda.json()['value'], 0.1)

        contas = self.get('/api/contas').json()
        self.assertEqual(contas[0]['accountBalance'], 0)

    def test_fracao_de_centavo_e_recusada(self):
        response = self.post('/api/contas', {'accountBankingName': 'Inter', 'accountBalance': 10.005})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(ContaRepository().count(), 0)
