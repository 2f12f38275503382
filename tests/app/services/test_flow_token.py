"""Testes do flow token."""

from __future__ import annotations

import base64
from datetime import UTC, datetime

import pytest

from app.services.flow_token import (
    UNKNOWN_PHONE,
    decode_flow_token,
    encode_flow_token,
    phone_from_flow_token,
)


def test_encode_and_decode() -> None:
    issued_at = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)

    token = encode_flow_token("+911234567890", "survey", "hi", issued_at=issued_at)

    assert decode_flow_token(token) == {
        "phone": "+911234567890",
        "flowType": "survey",
        "language": "hi",
        "issuedAt": "2026-03-01T09:00:00+00:00",
    }
    assert phone_from_flow_token(token) == "+911234567890"


@pytest.mark.parametrize(
    "token",
    [
        None,
        "",
        "not base64!",
        base64.b64encode(b"not json").decode(),
        base64.b64encode(b"[1, 2]").decode(),
    ],
)
def test_undecodable_tokens(token: str | None) -> None:
    assert decode_flow_token(token) is None
    assert phone_from_flow_token(token) == UNKNOWN_PHONE


def test_token_without_phone_is_unknown() -> None:
    token = base64.b64encode(b'{"flowType": "survey"}').decode()

    assert phone_from_flow_token(token) == UNKNOWN_PHONE
