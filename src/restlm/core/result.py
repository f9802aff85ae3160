from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T
    success: bool = True


@dataclass(frozen=True)
class Failure:
    message: str
    success: bool = False


# Expected failures (HTTP status errors) travel as values, not exceptions.
Result = Union[Success[T], Failure]


def success(data: T) -> Success[T]:
    return Success(data)


def error(message: str) -> Failure:
    return Failure(message)
