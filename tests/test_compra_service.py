import unittest
from unittest.mock import MagicMock, patch

from pymongo.errors import AutoReconnect
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import InconsistentStateError, InsufficientFundsError, NotFoundError
from core.repositories.audit_log_repository import AuditLogRepository
from finance.repositories.cartao_repository import CartaoRepository
from finance.repositories.compra_repository import CompraRepository
from finance.repositories.conta_repository import ContaRepository
from finance.repositories.receita_repository import ReceitaRepository
from finance.schemas import CompraInput, CompraUpdate
from finance.services.compra_service import CompraService
from tests.helpers import criar_cartao, criar_categoria, criar_conta, criar_usuario


class TestCompraService(unittest.TestCase):
    def setUp(self):
        self.user = criar_usuario()
        self.user_id = str(self.user['_id'])
        self.categoria = criar_categoria(self.user['_id'], nome='Mercado')
        self.conta = criar_conta(self.user['_id'], nome='Nubank', saldo=20000)
        self.cartao = criar_cartao(self.user['_id'], numero='5555444433332222', limite=10000)
        self.service = CompraService()

    def _compra(self, **overrides):
        payload = {
            'store': 'Padaria',
            'value': 50.0,
            'paymentMethod': 'debito',
            'categoryName': 'Mercado',
            'accountName': 'Nubank',
        }
        payload.update(overrides)
        return CompraInput.model_validate(payload)

    def _saldo_conta(self):
        return ContaRepository().find_by_id(self.conta['_id'], self.user_id)['accountBalance']

    def _limite_cartao(self):
        return CartaoRepository().find_by_id(self.cartao['_id'], self.user_id)['cardLimited']

    def test_compra_no_debito_debita_conta_e_cria_espelho(self):
        compra = self.service.create_compra(self.user_id, self._compra())

        self.assertEqual(self._saldo_conta(), 15000)
        self.assertEqual(compra['accountId'], self.conta['_id'])
        self.assertEqual(compra['categoryId'], self.categoria['_id'])
        self.assertEqual(compra['userId'], self.user['_id'])
        self.assertNotIn('cardId', compra)

        espelho = ReceitaRepository().find_by_purchase(self.user_id, compra['_id'])
        self.assertEqual(espelho['expenseType'], 'saida')
        self.assertEqual(espelho['expenseValue'], 5000)
        self.assertEqual(espelho['origin'], 'compra')
        self.assertEqual(espelho['accountId'], self.conta['_id'])
        self.assertEqual(espelho['categoryId'], self.categoria['_id'])

    def test_compra_no_credito_debita_limite_do_cartao(self):
        compra = self.service.create_compra(self.user_id, self._compra(
            paymentMethod='credito', cardNumber='5555444433332222', accountName=None, value=30.0
        ))
        self.assertEqual(self._limite_cartao(), 7000)
        self.assertEqual(self._saldo_conta(), 20000)
        self.assertEqual(compra['cardId'], self.cartao['_id'])

    def test_pix_com_cartao_informado_nao_mexe_no_cartao(self):
        compra = self.service.create_compra(self.user_id, self._compra(
            paymentMethod='pix', cardNumber='5555444433332222'
        ))
        self.assertEqual(self._saldo_conta(), 15000)
        self.assertEqual(self._limite_cartao(), 10000)
        self.assertEqual(compra['cardId'], self.cartao['_id'])

    def test_compras_com_centavos_zeram_o_saldo_exatamente(self):
        conta = criar_conta(self.user['_id'], nome='Inter', saldo=100)

        self.service.create_compra(self.user_id, self._compra(value=0.90, accountName='Inter'))
        self.service.create_compra(self.user_id, self._compra(value=0.10, accountName='Inter'))

        saldo = ContaRepository().find_by_id(conta['_id'], self.user_id)['accountBalance']
        self.assertEqual(saldo, 0)
        self.assertEqual(CompraRepository().count(), 2)

    def test_limite_insuficiente_nao_grava_nada(self):
        with self.assertRaises(InsufficientFundsError):
            self.service.create_compra(self.user_id, self._compra(
                paymentMethod='credito', cardNumber='5555444433332222', value=150.0
            ))
        self.assertEqual(self._limite_cartao(), 10000)
        self.assertEqual(CompraRepository().count(), 0)
        self.assertEqual(ReceitaRepository().count(), 0)

    def test_referencia_inexistente_rejeita_antes_do_debito(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.create_compra(self.user_id, self._compra(categoryName='Viagem'))
        self.assertEqual(ctx.exception.key, 'categoryName')
        self.assertEqual(self._saldo_conta(), 20000)

    def test_conta_de_outro_usuario_nao_e_debitada(self):
        outro = criar_usuario(email='bia@email.com')
        with self.assertRaises(NotFoundError):
            self.service.create_compra(str(outro['_id']), self._compra(accountId=str(self.conta['_id'])))
        self.assertEqual(self._saldo_conta(), 20000)

    def test_falha_no_espelho_estorna_e_remove_compra(self):
        with patch.object(self.service.recorder, 'record_espelho',
                          side_effect=AutoReconnect('conexão perdida')):
            with self.assertRaises(InconsistentStateError) as ctx:
                self.service.create_compra(self.user_id, self._compra())

        self.assertTrue(ctx.exception.compensated)
        self.assertTrue(ctx.exception.retryable)
        self.assertEqual(self._saldo_conta(), 20000)
        self.assertEqual(CompraRepository().count(), 0)

        logs = AuditLogRepository().find_errors(self.user_id)
        self.assertEqual(logs[0]['action'], 'inconsistency')
        self.assertEqual(logs[0]['severity'], 'error')
        self.assertTrue(logs[0]['payload']['compensated'])

    def test_falha_ao_gravar_compra_estorna_saldo(self):
        with patch.object(self.service.recorder, 'record_compra',
                          side_effect=AutoReconnect('conexão perdida')):
            with self.assertRaises(InconsistentStateError) as ctx:
                self.service.create_compra(self.user_id, self._compra())

        self.assertTrue(ctx.exception.compensated)
        self.assertIsNone(ctx.exception.entity_id)
        self.assertEqual(self._saldo_conta(), 20000)

    def test_estorno_que_falha_gera_inconsistencia_critica(self):
        with patch.object(self.service.recorder, 'record_compra',
                          side_effect=AutoReconnect('conexão perdida')), \
                patch.object(self.service.balance, 'credit', side_effect=AutoReconnect('de novo')):
            with self.assertRaises(InconsistentStateError) as ctx:
                self.service.create_compra(self.user_id, self._compra())

        self.assertFalse(ctx.exception.compensated)
        self.assertFalse(ctx.exception.retryable)
        self.assertEqual(self._saldo_conta(), 15000)

        criticos = AuditLogRepository().find_errors(self.user_id, severity='critical')
        self.assertEqual(len(criticos), 1)
        self.assertEqual(criticos[0]['entity'], 'compra')

    def test_update_altera_descricao_e_espelho(self):
        compra = self.service.create_compra(self.user_id, self._compra())
        criar_categoria(self.user['_id'], nome='Lazer')

        atualizada = self.service.update_compra(
            self.user_id, str(compra['_id']),
            CompraUpdate.model_validate({'estabelecimento': 'Cinema', 'categoryName': 'lazer'})
        )

        self.assertEqual(atualizada['store'], 'Cinema')
        self.assertEqual(atualizada['value'], 5000)
        espelho = ReceitaRepository().find_by_purchase(self.user_id, compra['_id'])
        self.assertEqual(espelho['expenseEstablishment'], 'Cinema')
        self.assertEqual(espelho['categoryId'], atualizada['categoryId'])
        self.assertEqual(self._saldo_conta(), 15000)

    def test_update_nao_aceita_valor_nem_fonte(self):
        for campo, valor in (('value', 10), ('valor', 10), ('paymentMethod', 'pix'), ('accountId', 'x')):
            with self.subTest(campo=campo):
                with self.assertRaises(PydanticValidationError):
                    CompraUpdate.model_validate({campo: valor})

    def test_delete_estorna_e_remove_espelho(self):
        compra = self.service.create_compra(self.user_id, self._compra())
        self.service.delete_compra(self.user_id, str(compra['_id']))

        self.assertEqual(self._saldo_conta(), 20000)
        self.assertEqual(CompraRepository().count(), 0)
        self.assertIsNone(ReceitaRepository().find_by_purchase(self.user_id, compra['_id']))

    def test_delete_de_outro_usuario(self):
        compra = self.service.create_compra(self.user_id, self._compra())
        outro = criar_usuario(email='bia@email.com')
        with self.assertRaises(NotFoundError):
            self.service.delete_compra(str(outro['_id']), str(compra['_id']))
        self.assertEqual(self._saldo_conta(), 15000)

    def test_delete_que_falha_debita_de_novo(self):
        compra = self.service.create_compra(self.user_id, self._compra())
        with patch.object(self.service.recorder, 'discard_compra',
                          side_effect=AutoReconnect('conexão perdida')):
            with self.assertRaises(InconsistentStateError) as ctx:
                self.service.delete_compra(self.user_id, str(compra['_id']))

        self.assertTrue(ctx.exception.compensated)
        self.assertEqual(self._saldo_conta(), 15000)
        self.assertEqual(CompraRepository().count(), 1)

    def test_estados_do_fluxo_sao_logados(self):
        with self.assertLogs('finance.services.compra_service', level='INFO') as logs:
            self.service.create_compra(self.user_id, self._compra())
        estados = ' '.join(logs.output)
        for estado in ('received', 'resolving', 'balance_updated', 'record_persisted',
                       'mirror_persisted', 'completed'):
            self.assertIn(estado, estados)

    def test_dependencias_injetadas(self):
        recorder = MagicMock()
        recorder.record_compra.side_effect = lambda data: {**data, '_id': 'c1'}
        service = CompraService(recorder=recorder)

        service.create_compra(self.user_id, self._compra())

        recorder.record_compra.assert_called_once()
        recorder.record_espelho.assert_called_once()
        self.assertEqual(self._saldo_conta(), 15000)
