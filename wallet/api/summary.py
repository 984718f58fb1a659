# wallet/api/summary.py
from __future__ import annotations

from wallet.api.base import Resource
from wallet.models import (
    Account,
    Category,
    PayPeriod,
    PayPeriodSummary,
    SavingEntry,
    Transaction,
    parse_record,
    parse_records,
)
from wallet.services.summary import find_pay_period, summarize_pay_period


class SummaryApi(Resource):
    def get_pay_period_summary(self, pay_period_id: int) -> PayPeriodSummary:
        """GET /summary/pay-period/{id} - the backend's own numbers."""
        data = self.client.get(f"/summary/pay-period/{pay_period_id}")
        return parse_record(PayPeriodSummary, data)

    def compute_pay_period_summary(
        self,
        user_id: int,
        pay_period_id: int,
        reserved_planned_cents: int = 0,
    ) -> PayPeriodSummary:
        """
        Fetch the period's records, then compute the summary locally.
        Everything is fetched before computing, so the calculation never
        sees a half-loaded set. Unknown ids raise UnresolvableReference.
        """
        c = self.client
        by_period = {"pay_period_id": pay_period_id}
        pay_periods = parse_records(PayPeriod, c.get(f"/pay-periods/user/{user_id}"))
        transactions = parse_records(
            Transaction, c.get(f"/transactions/user/{user_id}", params=by_period)
        )
        entries = parse_records(
            SavingEntry, c.get(f"/savings/entries/user/{user_id}", params=by_period)
        )
        accounts = parse_records(Account, c.get(f"/accounts/user/{user_id}"))
        categories = parse_records(
            Category, c.get("/categories", params={"user_id": user_id})
        )

        return summarize_pay_period(
            find_pay_period(pay_periods, pay_period_id),
            transactions,
            entries,
            reserved_planned_cents,
            accounts=accounts,
            categories=categories,
        )
