"""
Tests for token normalization.

These tests verify:
    - All supported spellings fold to one canonical tag
    - Normalization is idempotent
    - Non-tag input is rejected at the boundary
"""

import pytest
from cqlm.expressions import BooleanOperator
from cqlm.tokens import InvalidTokenError, is_token, normalize, normalize_token


class TestNormalizeToken:
    """Test canonical tag spelling."""

    def test_screaming_snake_case(self):
        """SCREAMING_SNAKE_CASE should become lisp-case."""
        assert normalize_token("FIELD_ID") == "field-id"

    def test_mixed_case(self):
        """Mixed case with underscores should become lisp-case."""
        assert normalize_token("Field_Id") == "field-id"

    def test_already_canonical(self):
        """Canonical tags should be returned unchanged."""
        assert normalize_token("field-id") == "field-id"

    def test_all_spellings_agree(self):
        """Every spelling of the same tag should normalize identically."""
        assert normalize_token("FIELD_ID") == normalize_token("field-id") == normalize_token("Field_Id")

    def test_idempotent(self):
        """Normalizing twice should equal normalizing once."""
        for token in ["FIELD_ID", "datetime_field", "Source-Table", "and"]:
            once = normalize_token(token)
            assert normalize_token(once) == once

    def test_namespaced_token(self):
        """Namespaced tokens should keep both parts."""
        assert normalize_token("MBQL/Field_ID") == "mbql/field-id"

    def test_enum_token(self):
        """Enum members should normalize to their value."""
        assert normalize_token(BooleanOperator.AND) == "and"

    def test_result_is_interned(self):
        """Canonical tags should be interned strings."""
        assert normalize_token("SUM") is normalize_token("sum")

    def test_normalize_alias(self):
        """`normalize` should be the same function."""
        assert normalize is normalize_token


class TestInvalidTokens:
    """Test rejection of non-tag input."""

    @pytest.mark.parametrize("bad", [10, 1.5, None, ["and"], {"a": 1}, "", "   "])
    def test_rejects_non_tag(self, bad):
        """Numbers, containers and empty strings are not tags."""
        with pytest.raises(InvalidTokenError):
            normalize_token(bad)

    def test_invalid_token_is_value_error(self):
        """InvalidTokenError should be catchable as ValueError."""
        with pytest.raises(ValueError):
            normalize_token(42)


def test_is_token():
    assert is_token("count")
    assert is_token(BooleanOperator.NOT)
    assert not is_token("")
    assert not is_token(3)
    assert not is_token(("count",))
