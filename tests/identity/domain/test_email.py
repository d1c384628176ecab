"""Tests for email normalization and validation."""

import pytest
from identity.shared.email import normalize_email
from shared.errors import ValidationError


class TestNormalizeEmail:
    def test_lowercases_and_trims(self):
        assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"

    @pytest.mark.parametrize(
        "email",
        [
            "",
            "plainaddress",
            "two@@example.com",
            "a@b@example.com",
            ".jane@example.com",
            "jane.@example.com",
            "jane@example",
            "jane@-example.com",
            "jane@example-.com",
            "jane..doe@example.com",
            "jane@example..com",
            "jane doe@example.com",
            "jane;doe@example.com",
            "<jane>@example.com",
        ],
    )
    def test_invalid_addresses(self, email):
        with pytest.raises(ValidationError):
            normalize_email(email)
