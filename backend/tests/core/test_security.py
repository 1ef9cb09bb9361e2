"""Pruebas de los helpers de secreto compartido."""

import pytest

from order_intake.core.security import SignatureError, mask_secret, verify_shared_secret


def test_verify_shared_secret_accepts_matching_value() -> None:
    verify_shared_secret("s3cret-value", "s3cret-value")


@pytest.mark.parametrize("received", [None, "", "other"])
def test_verify_shared_secret_rejects_mismatch(received: str | None) -> None:
    with pytest.raises(SignatureError):
        verify_shared_secret("s3cret-value", received)


def test_mask_secret_hides_middle_characters() -> None:
    assert mask_secret("abcdefgh") == "ab***gh"
    assert mask_secret("abc") == "***"
    assert mask_secret(None) is None
