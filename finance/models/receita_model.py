"""
Modelo de Receita (lançamento de entrada ou saída).

Localização: finance/models/receita_model.py

Schema no MongoDB:
{
  _id: ObjectId,
  userId: ObjectId,
  expenseValue: Int,             # centavos, sempre positivo
  expenseType: String,           # 'entrada' | 'saida'
  expenseName: String,
  expenseEstablishment: String,
  date: ISODate,
  accountId: ObjectId,           # opcional; se presente, o saldo da conta é alterado
  categoryId: ObjectId,          # opcional
  purchaseId: ObjectId,          # só nos espelhos de compra
  origin: String,                # 'manual' | 'compra'
  created_at: ISODate,
  updated_at: ISODate
}
"""
from typing import Dict, Any, Optional
from datetime import datetime


class ReceitaModel:

    ENTRADA = 'entrada'
    SAIDA = 'saida'
    TIPOS = [ENTRADA, SAIDA]

    ORIGEM_MANUAL = 'manual'
    ORIGEM_COMPRA = 'compra'

    @classmethod
    def delta(cls, tipo: str, valor: int) -> int:
        """Efeito do lançamento no saldo da conta."""
        return valor if tipo == cls.ENTRADA else -valor

    @classmethod
    def is_espelho(cls, receita: Dict[str, Any]) -> bool:
        return receita.get('origin') == cls.ORIGEM_COMPRA or 'purchaseId' in receita

    @classmethod
    def create_receita_data(cls, user_id, expenseValue: int, expenseType: str,
                            expenseName: str, date: Optional[datetime] = None,
                            expenseEstablishment: Optional[str] = None,
                            accountId=None, categoryId=None) -> Dict[str, Any]:
        data = {
            'userId': user_id,
            'expenseValue': expenseValue,
            'expenseType': expenseType,
            'expenseName': expenseName,
            'date': date or datetime.utcnow(),
            'origin': cls.ORIGEM_MANUAL,
        }
        if expenseEstablishment:
            data['expenseEstablishment'] = expenseEstablishment
        if accountId is not None:
            data['accountId'] = accountId
        if categoryId is not None:
            data['categoryId'] = categoryId
        return data

    @classmethod
    def create_espelho_data(cls, compra: Dict[str, Any]) -> Dict[str, Any]:
        """
        Receita 'saida' que espelha uma compra.

        Mantém as agregações feitas só sobre receitas completas.
        """
        data = {
            'userId': compra['userId'],
            'expenseValue': compra['value'],
            'expenseType': cls.SAIDA,
            'expenseName': f"Compra em {compra['store']}",
            'expenseEstablishment': compra['store'],
            'date': compra['date'],
            'categoryId': compra['categoryId'],
            'purchaseId': compra['_id'],
            'origin': cls.ORIGEM_COMPRA,
        }
        if compra.get('accountId') is not None:
            data['accountId'] = compra['accountId']
        return data
