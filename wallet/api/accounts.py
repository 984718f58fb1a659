# wallet/api/accounts.py
# Accounts and categories: the reference data transactions point at.

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from wallet.api.base import Resource, payload
from wallet.models import (
    Account,
    Category,
    CreateAccountInput,
    CreateCategoryInput,
    Created,
    UpdateAccountInput,
    Updated,
    parse_record,
    parse_records,
)


class AccountsApi(Resource):
    def list_by_user(self, user_id: int) -> List[Account]:
        return parse_records(Account, self.client.get(f"/accounts/user/{user_id}"))

    def create(self, data: Union[CreateAccountInput, Mapping[str, Any]]) -> Created:
        body = payload(CreateAccountInput, data)
        return parse_record(Created, self.client.post("/accounts", body))

    def update(
        self, account_id: int, data: Union[UpdateAccountInput, Mapping[str, Any]]
    ) -> Updated:
        """PATCH: rename, change currency, or (de)activate."""
        body = payload(UpdateAccountInput, data)
        return parse_record(Updated, self.client.patch(f"/accounts/{account_id}", body))


class CategoriesApi(Resource):
    def list(self, user_id: Optional[int] = None) -> List[Category]:
        """Global categories plus the user's own ones."""
        data = self.client.get("/categories", params={"user_id": user_id})
        return parse_records(Category, data)

    def create(self, data: Union[CreateCategoryInput, Mapping[str, Any]]) -> Created:
        body = payload(CreateCategoryInput, data)
        return parse_record(Created, self.client.post("/categories", body))
