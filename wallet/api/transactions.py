# wallet/api/transactions.py
# Pay periods and the transactions attributed to them.

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from wallet.api.base import DateParam, Resource, date_param, payload
from wallet.models import (
    Created,
    CreateTransactionInput,
    Deleted,
    PayPeriod,
    Transaction,
    UpdateTransactionInput,
    Updated,
    UpsertPayPeriodInput,
    parse_record,
    parse_records,
)


class PayPeriodsApi(Resource):
    def list_by_user(self, user_id: int) -> List[PayPeriod]:
        return parse_records(PayPeriod, self.client.get(f"/pay-periods/user/{user_id}"))

    def upsert(self, data: Union[UpsertPayPeriodInput, Mapping[str, Any]]) -> Created:
        """Create the period for (user, pay_date) or update the existing one."""
        body = payload(UpsertPayPeriodInput, data)
        return parse_record(Created, self.client.post("/pay-periods", body))


class TransactionsApi(Resource):
    def list(
        self,
        user_id: int,
        *,
        date_from: DateParam = None,
        date_to: DateParam = None,
        pay_period_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Transaction]:
        params = {
            "from": date_param(date_from),
            "to": date_param(date_to),
            "pay_period_id": pay_period_id or None,
            "limit": limit or None,
            "offset": offset or None,
        }
        data = self.client.get(f"/transactions/user/{user_id}", params=params)
        return parse_records(Transaction, data)

    def create(self, data: Union[CreateTransactionInput, Mapping[str, Any]]) -> Created:
        body = payload(CreateTransactionInput, data)
        return parse_record(Created, self.client.post("/transactions", body))

    def update(
        self, txn_id: int, data: Union[UpdateTransactionInput, Mapping[str, Any]]
    ) -> Updated:
        body = payload(UpdateTransactionInput, data)
        return parse_record(Updated, self.client.put(f"/transactions/{txn_id}", body))

    def delete(self, txn_id: int) -> Deleted:
        return parse_record(Deleted, self.client.delete(f"/transactions/{txn_id}"))
