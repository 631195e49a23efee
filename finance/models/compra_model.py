"""
Modelo de Compra.

Localização: finance/models/compra_model.py

Schema no MongoDB:
{
  _id: ObjectId,
  userId: ObjectId,
  store: String,            # estabelecimento
  value: Int,               # centavos, sempre positivo
  date: ISODate,
  paymentMethod: String,    # 'credito' | 'debito' | 'pix'
  cardId: ObjectId,         # opcional em débito/pix
  categoryId: ObjectId,
  accountId: ObjectId,      # opcional no crédito
  created_at: ISODate,
  updated_at: ISODate
}

Toda compra gera uma receita espelho do tipo 'saida' (purchaseId aponta
de volta para a compra).
"""
from typing import Dict, Any, Optional
from datetime import datetime


class CompraModel:

    CREDITO = 'credito'
    DEBITO = 'debito'
    PIX = 'pix'
    METODOS_PAGAMENTO = [CREDITO, DEBITO, PIX]

    # Estados do fluxo de criação (usados nos logs)
    RECEBIDA = 'received'
    RESOLVENDO = 'resolving'
    SALDO_VERIFICADO = 'funds_checked'
    SALDO_ATUALIZADO = 'balance_updated'
    REGISTRO_GRAVADO = 'record_persisted'
    ESPELHO_GRAVADO = 'mirror_persisted'
    CONCLUIDA = 'completed'
    REJEITADA = 'rejected'
    INCONSISTENTE = 'inconsistent'

    # Campos que a atualização nunca altera (afetam saldo)
    CAMPOS_FINANCEIROS = ('value', 'paymentMethod', 'cardId', 'accountId')

    @classmethod
    def usa_cartao(cls, payment_method: str) -> bool:
        """Crédito consome o limite do cartão; débito e pix, o saldo da conta."""
        return payment_method == cls.CREDITO

    @staticmethod
    def create_compra_data(user_id, store: str, value: int, payment_method: str,
                           categoria: Dict[str, Any],
                           cartao: Optional[Dict[str, Any]] = None,
                           conta: Optional[Dict[str, Any]] = None,
                           date: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Monta o documento da compra a partir das entidades já resolvidas.

        Returns:
            Dict pronto para inserção (sem _id)
        """
        data = {
            'userId': user_id,
            'store': store,
            'value': value,
            'date': date or datetime.utcnow(),
            'paymentMethod': payment_method,
            'categoryId': categoria['_id'],
        }
        if cartao is not None:
            data['cardId'] = cartao['_id']
        if conta is not None:
            data['accountId'] = conta['_id']
        return data
