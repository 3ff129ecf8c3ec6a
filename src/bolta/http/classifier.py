r"""Classification of raw transport results into attempt outcomes."""

from __future__ import annotations

__all__ = ["classify_exception", "classify_response"]

from typing import TYPE_CHECKING, Any

from bolta.exceptions import DecodeError
from bolta.http.outcome import (
    ApiFailure,
    DecodeFailure,
    EmptyBody,
    NetworkFailure,
    Outcome,
    Success,
)

if TYPE_CHECKING:
    from bolta.http.codec import JsonCodec
    from bolta.http.response import HttpResponse


def classify_response(response: HttpResponse, response_type: Any, codec: JsonCodec) -> Outcome:
    """Classify a completed HTTP exchange.

    Args:
        response: The received response.
        response_type: The type the body is decoded into, or ``None`` when
            the call expects no payload.
        codec: The codec used to decode the body.

    Returns:
        ``ApiFailure`` for a non-2xx status, ``Success(None)`` for a 2xx
        without body when no payload is expected, ``EmptyBody`` for a 2xx
        without body otherwise, ``Success`` with the decoded value or
        ``DecodeFailure`` for a 2xx with body.

    Example:
        ```pycon
        >>> from bolta.http import HttpResponse, JsonCodec
        >>> from bolta.http.classifier import classify_response
        >>> classify_response(HttpResponse(201, body=b'{"id": 1}'), dict, JsonCodec())
        Success(value={'id': 1})
        >>> classify_response(HttpResponse(204), None, JsonCodec())
        Success(value=None)
        >>> classify_response(HttpResponse(503, body=b"busy"), dict, JsonCodec()).status_code
        503

        ```
    """
    if not response.is_successful:
        return ApiFailure(response)
    if not response.body:
        if response_type is None:
            return Success(None)
        return EmptyBody(response)
    if response_type is None:
        return Success(None)
    try:
        return Success(codec.decode(response.body, response_type))
    except DecodeError as exc:
        return DecodeFailure(exc, response)


def classify_exception(exc: BaseException) -> NetworkFailure:
    """Classify a transport-level failure.

    Args:
        exc: The exception raised by the transport.

    Returns:
        The network failure wrapping the exception.
    """
    return NetworkFailure(exc)
