"""
Collection audit_logs.

Localização: core/repositories/audit_log_repository.py

Documento:
{
  _id: ObjectId,
  user_id: ObjectId | null,
  action: 'login' | 'create_compra' | 'modify_compra' | 'create_receita' | 'modify_receita' | 'inconsistency' | 'error',
  entity: 'user' | 'compra' | 'receita' | 'system',
  entity_id: String,
  payload: Object,
  source: 'api',
  status: 'success' | 'error',
  severity: 'info' | 'error' | 'critical',
  error: String,               // fim do traceback, truncado
  created_at: ISODate
}

Entradas são só inseridas, nunca alteradas.
"""
from typing import Optional, List, Dict, Any
from core.repositories.base_repository import BaseRepository, as_object_id
from datetime import datetime


class AuditLogRepository(BaseRepository):

    def __init__(self):
        super().__init__('audit_logs')

    def _ensure_indexes(self):
        self.collection.create_index([('user_id', 1), ('created_at', -1)])
        # inconsistências críticas são buscadas por status + severity
        self.collection.create_index([('status', 1), ('severity', 1)])
        self.collection.create_index('action')

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data.setdefault('created_at', datetime.utcnow())
        # user_id que não é ObjectId fica como veio (eventos do sistema)
        if isinstance(data.get('user_id'), str):
            data['user_id'] = as_object_id(data['user_id']) or data['user_id']
        data['_id'] = self.collection.insert_one(data).inserted_id
        return data

    def find_by_user(self, user_id: str, limit: int = 100,
                     skip: int = 0) -> List[Dict[str, Any]]:
        """Entradas do usuário, mais recentes primeiro."""
        return self.find_many({'user_id': as_object_id(user_id)}, limit, skip,
                              sort=('created_at', -1))

    def find_errors(self, user_id: Optional[str] = None, severity: Optional[str] = None,
                    limit: int = 100, skip: int = 0) -> List[Dict[str, Any]]:
        """
        Entradas com status 'error', mais recentes primeiro.

        Sem user_id a busca cobre todos os usuários; severity='critical'
        isola as inconsistências que ficaram sem estorno.
        """
        filtro = {'status': 'error'}
        if user_id:
            filtro['user_id'] = as_object_id(user_id)
        if severity:
            filtro['severity'] = severity
        return self.find_many(filtro, limit, skip, sort=('created_at', -1))
