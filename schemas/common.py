from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field

CENTS = Decimal("0.01")


def _quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS)


def _quantize_rating(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.1"))


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Fixed-point money, serialized as a string such as "8.00"
Money = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2), AfterValidator(_quantize_money)]

Rating = Annotated[Decimal, Field(ge=0, le=5, max_digits=2, decimal_places=1), AfterValidator(_quantize_rating)]

NaiveUtcDatetime = Annotated[datetime, AfterValidator(_to_naive_utc)]
