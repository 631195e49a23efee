"""
Modelo de Conta Bancária.

Localização: finance/models/conta_model.py

Schema no MongoDB:
{
  _id: ObjectId,
  userId: ObjectId,
  accountBankingName: String,  # único por usuário
  accountBalance: Int,         # centavos; nunca fica negativo por débito
  created_at: ISODate,
  updated_at: ISODate
}
"""


class ContaModel:

    # Campo monetário alterado pelas compras e receitas
    BALANCE_FIELD = 'accountBalance'
