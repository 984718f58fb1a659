import os  # lets us read environment variables (from the OS)
from functools import (
    lru_cache,  # tiny built-in cache; we use it to reuse one Settings object
)

from dotenv import load_dotenv  # loads variables from a local .env file
from pydantic import BaseModel  # Pydantic gives us a typed, validated settings class

load_dotenv()  # read .env and put those key=value pairs into environment variables


class Settings(BaseModel):  # our typed container for config values
    # base URL of the wallet REST API (all endpoints hang below it)
    # change effect: talk to a different backend (local, staging, prod)
    api_base: str = os.getenv("WALLET_API_BASE", "http://localhost:3000/api")

    # seconds to wait for the backend before giving up with a NetworkError
    api_timeout: float = float(os.getenv("WALLET_API_TIMEOUT", "10"))

    # currency used when an account doesn't say otherwise, and for display
    default_currency: str = os.getenv("WALLET_DEFAULT_CURRENCY", "AUD")

    # assumed pay period length for goal contribution suggestions
    # change effect: 7 for weekly pay, 30 for monthly; 15 = twice a month
    pay_period_days: int = int(os.getenv("WALLET_PAY_PERIOD_DAYS", "15"))

    # logging verbosity for the "wallet.*" loggers
    log_level: str = os.getenv("WALLET_LOG_LEVEL", "INFO")


@lru_cache  # make sure Settings() is created once and reused (fast + consistent)
def get_settings() -> Settings:
    return Settings()  # build from env (already loaded by load_dotenv())
