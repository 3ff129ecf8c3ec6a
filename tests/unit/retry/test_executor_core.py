r"""Unit tests for the attempt state machine shared by the executors."""

from __future__ import annotations

import asyncio
import json

import pytest

from bolta.backoff import ExponentialBackoff, FixedBackoff
from bolta.exceptions import (
    ApiError,
    DecodeError,
    EmptyResponseError,
    NetworkError,
    RequestCancelledError,
    TransportError,
)
from bolta.http import HttpMethod, HttpRequest, HttpResponse
from bolta.http.outcome import ApiFailure, DecodeFailure, EmptyBody, NetworkFailure, Success
from bolta.retry import CancellationToken, RangeStatusCodeMatcher, RetryPolicy
from bolta.retry.executor_core import (
    NETWORK_EXCEPTIONS,
    AttemptState,
    Fail,
    Finish,
    Retry,
    check_cancelled,
    next_step,
)


@pytest.fixture
def request_post() -> HttpRequest:
    return HttpRequest(HttpMethod.POST, "https://xapi.bolta.io/v1/payments", body=b"{}")


@pytest.fixture
def policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=3,
        backoff=ExponentialBackoff(base_delay_ms=100, multiplier=2.0, max_delay_ms=1000),
        status_matcher=RangeStatusCodeMatcher(500, 599),
    )


##################################
#     Tests for AttemptState     #
##################################


def test_attempt_state_defaults() -> None:
    state = AttemptState()
    assert state.attempt == 1
    assert state.last_failure is None


def test_attempt_state_advance() -> None:
    state = AttemptState()
    state.advance()
    state.advance()
    assert state.attempt == 3


###############################
#     Tests for next_step     #
###############################


def test_next_step_success(policy: RetryPolicy, request_post: HttpRequest) -> None:
    state = AttemptState()
    assert next_step(policy, state, Success({"id": 1}), request_post) == Finish({"id": 1})
    assert state.last_failure is None


def test_next_step_success_after_retries(policy: RetryPolicy, request_post: HttpRequest) -> None:
    state = AttemptState(attempt=3)
    assert next_step(policy, state, Success(None), request_post) == Finish(None)


def test_next_step_retryable_api_failure(policy: RetryPolicy, request_post: HttpRequest) -> None:
    state = AttemptState()
    outcome = ApiFailure(HttpResponse(503))
    assert next_step(policy, state, outcome, request_post) == Retry(100)
    assert state.last_failure is outcome


def test_next_step_retry_delay_follows_backoff(
    policy: RetryPolicy, request_post: HttpRequest
) -> None:
    state = AttemptState(attempt=2)
    assert next_step(policy, state, ApiFailure(HttpResponse(500)), request_post) == Retry(200)


def test_next_step_non_retryable_api_failure(
    policy: RetryPolicy, request_post: HttpRequest
) -> None:
    state = AttemptState()
    response = HttpResponse(404, headers={"X-Request-Id": "r1"}, body=b'{"code": "NOT_FOUND"}')
    step = next_step(policy, state, ApiFailure(response), request_post)

    assert isinstance(step, Fail)
    assert isinstance(step.error, ApiError)
    assert step.error.status_code == 404
    assert step.error.body == '{"code": "NOT_FOUND"}'
    assert step.error.method == "POST"
    assert step.error.url == "https://xapi.bolta.io/v1/payments"
    assert step.error.headers == {"X-Request-Id": "r1"}
    assert step.cause is None


def test_next_step_api_failure_exhausted(policy: RetryPolicy, request_post: HttpRequest) -> None:
    state = AttemptState(attempt=3)
    step = next_step(policy, state, ApiFailure(HttpResponse(503, body=b"busy")), request_post)

    assert isinstance(step, Fail)
    assert isinstance(step.error, ApiError)
    assert step.error.status_code == 503
    assert step.error.body == "busy"


def test_next_step_retryable_network_failure(
    policy: RetryPolicy, request_post: HttpRequest
) -> None:
    state = AttemptState()
    outcome = NetworkFailure(TransportError("connection refused"))
    assert next_step(policy, state, outcome, request_post) == Retry(100)
    assert state.last_failure is outcome


def test_next_step_network_failure_exhausted(
    policy: RetryPolicy, request_post: HttpRequest
) -> None:
    cause = TransportError("connection refused")
    step = next_step(policy, AttemptState(attempt=3), NetworkFailure(cause), request_post)

    assert isinstance(step, Fail)
    assert isinstance(step.error, NetworkError)
    assert not isinstance(step.error, EmptyResponseError)
    assert step.error.attempts == 3
    assert step.error.cause is cause
    assert step.cause is cause
    assert "failed after 3 attempt(s)" in str(step.error)


def test_next_step_network_failure_not_retried(request_post: HttpRequest) -> None:
    policy = RetryPolicy(max_attempts=3, backoff=FixedBackoff(10), retry_on_network_error=False)
    step = next_step(policy, AttemptState(), NetworkFailure(OSError("reset")), request_post)

    assert isinstance(step, Fail)
    assert isinstance(step.error, NetworkError)
    assert step.error.attempts == 1


def test_next_step_empty_body_is_terminal(policy: RetryPolicy, request_post: HttpRequest) -> None:
    state = AttemptState()
    step = next_step(policy, state, EmptyBody(HttpResponse(200)), request_post)

    assert isinstance(step, Fail)
    assert isinstance(step.error, EmptyResponseError)
    assert step.error.attempts == 1
    assert state.last_failure is None


def test_next_step_decode_failure_is_terminal(
    policy: RetryPolicy, request_post: HttpRequest
) -> None:
    cause = json.JSONDecodeError("Expecting value", "oops", 0)
    error = DecodeError("Failed to parse response", body=b"oops")
    error.__cause__ = cause
    step = next_step(
        policy, AttemptState(), DecodeFailure(error, HttpResponse(200, body=b"oops")), request_post
    )

    assert step == Fail(error, cause=cause)


def test_next_step_unknown_outcome(policy: RetryPolicy, request_post: HttpRequest) -> None:
    with pytest.raises(TypeError, match=r"Unknown outcome"):
        next_step(policy, AttemptState(), "boom", request_post)  # type: ignore[arg-type]


def test_next_step_single_attempt_policy(request_post: HttpRequest) -> None:
    policy = RetryPolicy.no_retry()
    for outcome in (ApiFailure(HttpResponse(503)), NetworkFailure(TransportError("down"))):
        assert isinstance(next_step(policy, AttemptState(), outcome, request_post), Fail)


#####################################
#     Tests for check_cancelled     #
#####################################


def test_check_cancelled_without_token(request_post: HttpRequest) -> None:
    check_cancelled(None, 0, request_post)


def test_check_cancelled_active_token(request_post: HttpRequest) -> None:
    check_cancelled(CancellationToken(), 1, request_post)


def test_check_cancelled_cancelled_token(request_post: HttpRequest) -> None:
    token = CancellationToken()
    token.cancel()
    with pytest.raises(RequestCancelledError, match=r"was cancelled after 2 attempt\(s\)") as exc:
        check_cancelled(token, 2, request_post)
    assert exc.value.attempts == 2


########################################
#     Tests for NETWORK_EXCEPTIONS     #
########################################


@pytest.mark.parametrize(
    "exc",
    [
        TransportError("connection reset"),
        ConnectionRefusedError(),
        TimeoutError(),
        asyncio.TimeoutError(),
    ],
)
def test_network_exceptions_cover_transport_failures(exc: BaseException) -> None:
    assert isinstance(exc, NETWORK_EXCEPTIONS)


@pytest.mark.parametrize("exc", [ValueError("bad"), KeyError("key"), asyncio.CancelledError()])
def test_network_exceptions_exclude_other_errors(exc: BaseException) -> None:
    assert not isinstance(exc, NETWORK_EXCEPTIONS)
