import math
import unittest
from unittest.mock import MagicMock

from bson import ObjectId

from core.exceptions import InsufficientFundsError, InvalidAmountError, NotFoundError
from finance.repositories.conta_repository import ContaRepository
from finance.services.balance_service import BalanceService
from tests.helpers import criar_cartao, criar_conta, criar_usuario


class TestBalanceService(unittest.TestCase):
    def setUp(self):
        self.user = criar_usuario()
        self.user_id = str(self.user['_id'])
        self.conta = criar_conta(self.user['_id'], saldo=20000)
        self.cartao = criar_cartao(self.user['_id'], limite=10000)
        self.service = BalanceService()

    def _saldo_conta(self, conta=None):
        conta = conta or self.conta
        return ContaRepository().find_by_id(conta['_id'], self.user_id)['accountBalance']

    def test_debit_subtrai_valor(self):
        conta = self.service.debit(BalanceService.CONTA, self.conta['_id'], self.user_id, 5000)
        self.assertEqual(conta['accountBalance'], 15000)
        self.assertEqual(self._saldo_conta(), 15000)

    def test_debit_do_saldo_inteiro_e_permitido(self):
        conta = self.service.debit(BalanceService.CONTA, self.conta['_id'], self.user_id, 20000)
        self.assertEqual(conta['accountBalance'], 0)

    def test_debit_maior_que_saldo_nao_altera_nada(self):
        with self.assertRaises(InsufficientFundsError):
            self.service.debit(BalanceService.CONTA, self.conta['_id'], self.user_id, 20001)
        self.assertEqual(self._saldo_conta(), 20000)

    def test_centavos_nao_se_perdem_em_debitos_seguidos(self):
        conta = criar_conta(self.user['_id'], nome='Inter', saldo=100)

        self.service.debit(BalanceService.CONTA, conta['_id'], self.user_id, 90)
        self.assertEqual(self._saldo_conta(conta), 10)

        self.service.debit(BalanceService.CONTA, conta['_id'], self.user_id, 10)
        self.assertEqual(self._saldo_conta(conta), 0)

    def test_debit_no_cartao_usa_limite_disponivel(self):
        with self.assertRaises(InsufficientFundsError) as ctx:
            self.service.debit(BalanceService.CARTAO, self.cartao['_id'], self.user_id, 15000)
        self.assertIn('Limite insuficiente', ctx.exception.message)

        cartao = self.service.debit(BalanceService.CARTAO, self.cartao['_id'], self.user_id, 4000)
        self.assertEqual(cartao['cardLimited'], 6000)

    def test_credit_soma_sem_teto(self):
        conta = self.service.credit(BalanceService.CONTA, self.conta['_id'], self.user_id, 100_000_000)
        self.assertEqual(conta['accountBalance'], 100_020_000)

    def test_valores_invalidos_sao_rejeitados_antes_da_escrita(self):
        for valor in (0, -10, 10.5, 50.0, math.nan, math.inf, True, '10', None):
            with self.subTest(valor=valor):
                with self.assertRaises(InvalidAmountError):
                    self.service.debit(BalanceService.CONTA, self.conta['_id'], self.user_id, valor)
                with self.assertRaises(InvalidAmountError):
                    self.service.credit(BalanceService.CONTA, self.conta['_id'], self.user_id, valor)
        self.assertEqual(self._saldo_conta(), 20000)

    def test_conta_de_outro_usuario_e_nao_encontrada(self):
        outro = criar_usuario(email='bia@email.com')
        with self.assertRaises(NotFoundError):
            self.service.debit(BalanceService.CONTA, self.conta['_id'], str(outro['_id']), 1000)
        with self.assertRaises(NotFoundError):
            self.service.credit(BalanceService.CONTA, self.conta['_id'], str(outro['_id']), 1000)
        self.assertEqual(self._saldo_conta(), 20000)

    def test_conta_inexistente(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.debit(BalanceService.CONTA, ObjectId(), self.user_id, 1000)
        self.assertEqual(ctx.exception.key, 'accountId')

    def test_segundo_debito_sem_saldo_e_recusado(self):
        conta = criar_conta(self.user['_id'], nome='Inter', saldo=10000)
        resultados = []
        for _ in range(2):
            try:
                self.service.debit(BalanceService.CONTA, conta['_id'], self.user_id, 8000)
                resultados.append('ok')
            except InsufficientFundsError:
                resultados.append('insuficiente')

        self.assertEqual(resultados, ['ok', 'insuficiente'])
        self.assertEqual(self._saldo_conta(conta), 2000)

    def test_debito_e_uma_unica_atualizacao_condicional(self):
        conta_repo = MagicMock()
        conta_repo.increment_field.return_value = {'_id': self.conta['_id'], 'accountBalance': 12000}
        service = BalanceService(cartao_repo=MagicMock(), conta_repo=conta_repo)

        service.debit(BalanceService.CONTA, self.conta['_id'], self.user_id, 8000)

        conta_repo.increment_field.assert_called_once_with(
            self.conta['_id'], self.user_id, 'accountBalance', -8000, minimum=8000
        )
        conta_repo.find_by_id.assert_not_called()

    def test_increment_field_filtra_por_saldo_minimo(self):
        conta_repo = ContaRepository()
        conta_repo.collection = MagicMock()
        conta_repo.collection.find_one_and_update.return_value = None

        resultado = conta_repo.increment_field(self.conta['_id'], self.user_id,
                                               'accountBalance', -8000, minimum=8000)

        self.assertIsNone(resultado)
        filtro, update = conta_repo.collection.find_one_and_update.call_args[0][:2]
        self.assertEqual(filtro['accountBalance'], {'$gte': 8000})
        self.assertEqual(filtro['userId'], self.user['_id'])
        self.assertEqual(update['$inc'], {'accountBalance': -8000})

    def test_apply_delta(self):
        self.service.apply_delta(BalanceService.CONTA, self.conta['_id'], self.user_id, 3000)
        self.assertEqual(self._saldo_conta(), 23000)
        self.service.apply_delta(BalanceService.CONTA, self.conta['_id'], self.user_id, -13000)
        self.assertEqual(self._saldo_conta(), 10000)
        with self.assertRaises(InsufficientFundsError):
            self.service.apply_delta(BalanceService.CONTA, self.conta['_id'], self.user_id, -10050)
