# wallet/api/base.py
from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from wallet.client import ApiClient
from wallet.models import Input, parse_record

I = TypeVar("I", bound=Input)

DateParam = Union[date, str, None]


class Resource:
    """Base for one group of endpoints; all share the same ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client


def payload(model: Type[I], data: Union[I, Mapping[str, Any]]) -> dict:
    """Validate outbound data with the same schemas used for forms."""
    return parse_record(model, data).to_payload()


def date_param(value: DateParam) -> Optional[str]:
    """Query-string date: date -> 'YYYY-MM-DD'; strings pass through; '' -> omitted."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
