"""
Modelo de Cartão.

Localização: finance/models/cartao_model.py

Schema no MongoDB:
{
  _id: ObjectId,
  userId: ObjectId,
  cardNumber: String,        # único por usuário
  cardCVC: String,
  cardDateValidity: String,  # ex.: "12/29"
  cardName: String,          # nome impresso no cartão
  cardDateClose: Number,     # dia de fechamento da fatura
  cardDateMaturity: Number,  # dia de vencimento da fatura
  cardBalance: Int,          # saldo informado pelo usuário, em centavos
  cardLimited: Int,          # limite disponível em centavos (debitado pelas compras no crédito)
  cardType: String,          # 'credito' | 'debito'
  created_at: ISODate,
  updated_at: ISODate
}
"""


class CartaoModel:

    TIPO_CREDITO = 'credito'
    TIPO_DEBITO = 'debito'
    TIPOS = [TIPO_CREDITO, TIPO_DEBITO]

    # Campo monetário alterado pelas compras
    BALANCE_FIELD = 'cardLimited'
