r"""HTTP header names and values used by the Bolta API."""

from __future__ import annotations

__all__ = [
    "APPLICATION_JSON",
    "APPLICATION_JSON_UTF8",
    "AUTHORIZATION",
    "BOLTA_CLIENT_REFERENCE_ID",
    "CONTENT_TYPE",
    "CUSTOMER_KEY",
]

AUTHORIZATION = "Authorization"
CONTENT_TYPE = "Content-Type"

# Identifies the customer a request acts on behalf of
CUSTOMER_KEY = "Customer-Key"

# Caller-provided reference echoed back by the API
BOLTA_CLIENT_REFERENCE_ID = "Bolta-Client-Reference-Id"

APPLICATION_JSON = "application/json"
APPLICATION_JSON_UTF8 = "application/json; charset=utf-8"
