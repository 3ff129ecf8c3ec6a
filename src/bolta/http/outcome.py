r"""Classified outcomes of a single request attempt."""

from __future__ import annotations

__all__ = ["ApiFailure", "DecodeFailure", "EmptyBody", "NetworkFailure", "Outcome", "Success"]

from dataclasses import dataclass
from typing import Any, Union

from bolta.exceptions import DecodeError
from bolta.http.response import HttpResponse


@dataclass(frozen=True)
class Success:
    """The attempt produced the expected value."""

    value: Any


@dataclass(frozen=True)
class ApiFailure:
    """The API answered with a non-2xx status code."""

    response: HttpResponse

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def body(self) -> str:
        return self.response.text


@dataclass(frozen=True)
class NetworkFailure:
    """The transport could not complete the exchange."""

    cause: BaseException


@dataclass(frozen=True)
class EmptyBody:
    """A 2xx response without body, while a payload was expected."""

    response: HttpResponse


@dataclass(frozen=True)
class DecodeFailure:
    """A 2xx response whose body could not be decoded."""

    error: DecodeError
    response: HttpResponse


Outcome = Union[Success, ApiFailure, NetworkFailure, EmptyBody, DecodeFailure]
