"""Tests for the error taxonomy and its HTTP mapping."""

import pytest
from shared.errors import (
    HTTP_STATUS_BY_KIND,
    Conflict,
    EmptyOrder,
    ErrorKind,
    ExternalServiceError,
    Forbidden,
    InsufficientStock,
    InvalidSignature,
    LockTimeout,
    OrderNotFound,
    ProductNotFound,
    Unauthenticated,
    ValidationError,
)


class TestErrorKinds:
    @pytest.mark.parametrize(
        "error_class, kind",
        [
            (ValidationError, ErrorKind.VALIDATION),
            (EmptyOrder, ErrorKind.VALIDATION),
            (InvalidSignature, ErrorKind.VALIDATION),
            (Unauthenticated, ErrorKind.UNAUTHENTICATED),
            (Forbidden, ErrorKind.FORBIDDEN),
            (ProductNotFound, ErrorKind.NOT_FOUND),
            (OrderNotFound, ErrorKind.NOT_FOUND),
            (Conflict, ErrorKind.CONFLICT),
            (InsufficientStock, ErrorKind.INSUFFICIENT_STOCK),
            (LockTimeout, ErrorKind.TIMEOUT),
            (ExternalServiceError, ErrorKind.EXTERNAL_SERVICE),
        ],
    )
    def test_each_error_has_a_fixed_kind(self, error_class, kind):
        assert error_class().kind == kind

    def test_every_kind_maps_to_a_status(self):
        assert set(HTTP_STATUS_BY_KIND) == set(ErrorKind)

    def test_status_mapping(self):
        assert HTTP_STATUS_BY_KIND[ErrorKind.VALIDATION] == 400
        assert HTTP_STATUS_BY_KIND[ErrorKind.FORBIDDEN] == 403
        assert HTTP_STATUS_BY_KIND[ErrorKind.NOT_FOUND] == 404
        assert HTTP_STATUS_BY_KIND[ErrorKind.INSUFFICIENT_STOCK] == 409
        assert HTTP_STATUS_BY_KIND[ErrorKind.TIMEOUT] == 503
        assert HTTP_STATUS_BY_KIND[ErrorKind.EXTERNAL_SERVICE] == 502


class TestErrorPayload:
    def test_default_message(self):
        assert InsufficientStock().message == "Insufficient stock"

    def test_to_dict(self):
        error = Conflict("Duplicate payment", {"provider_payment_id": ["pi_1"]})
        assert error.to_dict() == {
            "kind": "conflict",
            "message": "Duplicate payment",
            "details": {"provider_payment_id": ["pi_1"]},
        }
