# wallet/main.py
from __future__ import annotations

import logging
from typing import Optional

import httpx

from wallet.api.accounts import AccountsApi, CategoriesApi
from wallet.api.auth import AuthApi, UsersApi
from wallet.api.savings import GoalsApi, SavingsApi
from wallet.api.summary import SummaryApi
from wallet.api.system import HealthApi
from wallet.api.transactions import PayPeriodsApi, TransactionsApi
from wallet.client import ApiClient, build_http_client
from wallet.config import Settings, get_settings
from wallet.security import AuthSession


class WalletApi:
    """
    Container for every resource client, sharing one ApiClient and session.

    Pass `http` to inject a ready-made httpx.Client (tests use FastAPI's
    TestClient); otherwise one is built from settings.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[httpx.Client] = None,
        session: Optional[AuthSession] = None,
    ):
        self.settings = settings or get_settings()
        self.session = session or AuthSession()
        self.client = ApiClient(http or build_http_client(self.settings), self.session)

        self.health = HealthApi(self.client)
        self.auth = AuthApi(self.client)
        self.users = UsersApi(self.client)
        self.accounts = AccountsApi(self.client)
        self.categories = CategoriesApi(self.client)
        self.pay_periods = PayPeriodsApi(self.client)
        self.transactions = TransactionsApi(self.client)
        self.savings = SavingsApi(self.client)
        self.goals = GoalsApi(self.client, period_days=self.settings.pay_period_days)
        self.summary = SummaryApi(self.client)

    def close(self) -> None:
        self.client.close()


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Console logging for the "wallet" logger tree at the configured level."""
    settings = settings or get_settings()
    logger = logging.getLogger("wallet")
    logger.setLevel(settings.log_level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
    return logger


def create_api(settings: Optional[Settings] = None) -> WalletApi:
    settings = settings or get_settings()
    configure_logging(settings)
    return WalletApi(settings)
