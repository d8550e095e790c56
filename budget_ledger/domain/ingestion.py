"""Validation of raw transaction records arriving from the feed"""

from datetime import date, datetime
from typing import Any, Mapping, Union

from budget_ledger.domain.exceptions import InvalidTransactionDataError
from budget_ledger.domain.models import RawTransaction


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Feeds may send full ISO timestamps; only the calendar date matters
        return date.fromisoformat(value[:10])
    raise TypeError(f"unsupported date value {value!r}")


def parse_raw_transaction(record: Union[RawTransaction, Mapping[str, Any]]) -> RawTransaction:
    """
    Coerce a feed record into a RawTransaction.

    Raises:
        InvalidTransactionDataError: missing/unparsable date, a non-integer amount
            or non-text description/memo
    """
    try:
        if isinstance(record, RawTransaction):
            raw_date, amount = record.date, record.amount
            description, memo = record.description, record.memo
        else:
            raw_date, amount = record["date"], record["amount"]
            description, memo = record.get("description"), record.get("memo")

        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"amount must be integer minor units, got {amount!r}")
        for name, text in (("description", description), ("memo", memo)):
            if text is not None and not isinstance(text, str):
                raise TypeError(f"{name} must be text, got {text!r}")

        return RawTransaction(
            date=_parse_date(raw_date),
            amount=amount,
            description=description or "",
            memo=memo or "",
        )
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidTransactionDataError(f"Invalid transaction record: {e}") from e
