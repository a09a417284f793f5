from typing import Annotated, Literal

from pydantic import AfterValidator

from app.services.fixed_point import MAX_AMOUNT


def _non_negative(v: int) -> int:
    if v < 0:
        raise ValueError("amount must be non-negative")
    return v


def _resolve_max(v):
    if v == "max":
        return MAX_AMOUNT
    return _non_negative(v)


Units = Annotated[int, AfterValidator(_non_negative)]

# "max" means the caller's whole live balance at execution time
UnitsOrMax = Annotated[int | Literal["max"], AfterValidator(_resolve_max)]
