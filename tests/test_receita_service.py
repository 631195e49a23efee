import unittest
from unittest.mock import patch

from pymongo.errors import AutoReconnect

from core.exceptions import (
    InconsistentStateError, InsufficientFundsError, NotFoundError, ValidationError,
)
from finance.repositories.conta_repository import ContaRepository
from finance.repositories.receita_repository import ReceitaRepository
from finance.schemas import CompraInput, ReceitaInput, ReceitaUpdate
from finance.services.compra_service import CompraService
from finance.services.receita_service import ReceitaService
from tests.helpers import criar_categoria, criar_conta, criar_usuario


class TestReceitaService(unittest.TestCase):
    def setUp(self):
        self.user = criar_usuario()
        self.user_id = str(self.user['_id'])
        self.categoria = criar_categoria(self.user['_id'], nome='Salário')
        self.conta = criar_conta(self.user['_id'], nome='Nubank', saldo=10000)
        self.service = ReceitaService()

    def _receita(self, **overrides):
        payload = {
            'valor': 300.0,
            'tipo': 'entrada',
            'nome': 'Salário',
            'categoryName': 'Salário',
            'accountName': 'Nubank',
        }
        payload.update(overrides)
        return ReceitaInput.model_validate(payload)

    def _saldo(self):
        return ContaRepository().find_by_id(self.conta['_id'], self.user_id)['accountBalance']

    def test_entrada_credita_conta(self):
        receita = self.service.create_receita(self.user_id, self._receita())
        self.assertEqual(self._saldo(), 40000)
        self.assertEqual(receita['accountId'], self.conta['_id'])
        self.assertEqual(receita['origin'], 'manual')

    def test_saida_debita_conta(self):
        self.service.create_receita(self.user_id, self._receita(tipo='saida', valor=60.0))
        self.assertEqual(self._saldo(), 4000)

    def test_saida_maior_que_saldo(self):
        with self.assertRaises(InsufficientFundsError):
            self.service.create_receita(self.user_id, self._receita(tipo='saida', valor=100.5))
        self.assertEqual(self._saldo(), 10000)
        self.assertEqual(ReceitaRepository().count(), 0)

    def test_sem_conta_nao_altera_saldo(self):
        receita = self.service.create_receita(self.user_id, self._receita(accountName=None))
        self.assertNotIn('accountId', receita)
        self.assertEqual(self._saldo(), 10000)

    def test_falha_ao_gravar_desfaz_credito(self):
        with patch.object(self.service.recorder, 'record_receita',
                          side_effect=AutoReconnect('conexão perdida')):
            with self.assertRaises(InconsistentStateError) as ctx:
                self.service.create_receita(self.user_id, self._receita())
        self.assertTrue(ctx.exception.compensated)
        self.assertEqual(self._saldo(), 10000)

    def test_lista_por_tipo(self):
        self.service.create_receita(self.user_id, self._receita())
        self.service.create_receita(self.user_id, self._receita(tipo='saida', valor=10.0))
        self.assertEqual(len(self.service.list_por_tipo(self.user_id, 'entrada')), 1)
        self.assertEqual(len(self.service.list_por_tipo(self.user_id, 'saida')), 1)
        with self.assertRaises(ValidationError):
            self.service.list_por_tipo(self.user_id, 'outro')

    def test_resumo_categoria(self):
        self.service.create_receita(self.user_id, self._receita(valor=300.0))
        self.service.create_receita(self.user_id, self._receita(tipo='saida', valor=50.0))
        self.service.create_receita(self.user_id, self._receita(valor=999.0, categoryName=None))

        resumo = self.service.resumo_categoria(self.user_id, str(self.categoria['_id']))

        self.assertEqual(resumo['entradas'], 30000)
        self.assertEqual(resumo['saidas'], 5000)
        self.assertEqual(resumo['revenueValue'], 35000)
        self.assertEqual(resumo['categoryBalance'], 25000)
        self.assertEqual(len(resumo['receitas']), 2)

    def test_resumo_de_categoria_de_outro_usuario(self):
        outro = criar_usuario(email='bia@email.com')
        with self.assertRaises(NotFoundError):
            self.service.resumo_categoria(str(outro['_id']), str(self.categoria['_id']))

    def test_update_altera_so_descricao(self):
        receita = self.service.create_receita(self.user_id, self._receita())
        atualizada = self.service.update_receita(
            self.user_id, str(receita['_id']),
            ReceitaUpdate.model_validate({'expenseName': 'Salário março', 'estabelecimento': 'Empresa'})
        )
        self.assertEqual(atualizada['expenseName'], 'Salário março')
        self.assertEqual(atualizada['expenseEstablishment'], 'Empresa')
        self.assertEqual(atualizada['expenseValue'], 30000)

    def test_delete_desfaz_efeito_no_saldo(self):
        receita = self.service.create_receita(self.user_id, self._receita(tipo='saida', valor=60.0))
        self.service.delete_receita(self.user_id, str(receita['_id']))
        self.assertEqual(self._saldo(), 10000)
        self.assertEqual(ReceitaRepository().count(), 0)

    def test_delete_de_entrada_ja_gasta_e_recusado(self):
        receita = self.service.create_receita(self.user_id, self._receita(valor=300.0))
        self.service.create_receita(self.user_id, self._receita(tipo='saida', valor=350.0))

        with self.assertRaises(InsufficientFundsError):
            self.service.delete_receita(self.user_id, str(receita['_id']))
        self.assertEqual(ReceitaRepository().count(), 2)
        self.assertEqual(self._saldo(), 5000)

    def test_espelho_de_compra_e_somente_leitura(self):
        compra = CompraService().create_compra(self.user_id, CompraInput.model_validate({
            'store': 'Padaria', 'value': 20.0, 'paymentMethod': 'pix',
            'categoryName': 'Salário', 'accountName': 'Nubank',
        }))
        espelho = ReceitaRepository().find_by_purchase(self.user_id, compra['_id'])

        with self.assertRaises(ValidationError):
            self.service.delete_receita(self.user_id, str(espelho['_id']))
        with self.assertRaises(ValidationError):
            self.service.update_receita(self.user_id, str(espelho['_id']),
                                        ReceitaUpdate.model_validate({'expenseName': 'x'}))
        self.assertEqual(self._saldo(), 8000)
