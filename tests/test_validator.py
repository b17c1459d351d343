"""Tests for the two postal code validators."""

import pytest

from cep_weather.validator import is_valid_cep, is_valid_input_cep


class TestStrictValidator:
    """Test the enrichment service's validator."""

    @pytest.mark.parametrize("cep", ["12345678", "00000000", "89053300"])
    def test_accepts_eight_digits(self, cep):
        assert is_valid_cep(cep) is True

    @pytest.mark.parametrize(
        "cep",
        [
            "1234567",
            "123456789",
            "abcdefgh",
            "1234567a",
            "",
            "12345-678",
            "12345 678",
            "12345678\n",
            " 12345678",
            "１２３４５６７８",
        ],
    )
    def test_rejects_everything_else(self, cep):
        assert is_valid_cep(cep) is False


class TestInputValidator:
    """Test the input service's normalising validator."""

    @pytest.mark.parametrize(
        "cep", ["12345678", "12345-678", "123-456 78", " 12345678 ", "1-2-3-4-5-6-7-8"]
    )
    def test_accepts_digits_after_removing_separators(self, cep):
        assert is_valid_input_cep(cep) is True

    @pytest.mark.parametrize(
        "cep", ["1234567", "123456789", "12345.678", "1234567a", "", "--------", "12345678\n"]
    )
    def test_rejects_invalid(self, cep):
        assert is_valid_input_cep(cep) is False

    def test_input_validator_is_more_lenient(self):
        """A separated code passes the input check but not the strict one."""
        assert is_valid_input_cep("123-456 78") is True
        assert is_valid_cep("123-456 78") is False

    @pytest.mark.parametrize("cep", ["12345678", "1234567", "abcdefgh", ""])
    def test_strict_acceptance_implies_input_acceptance(self, cep):
        if is_valid_cep(cep):
            assert is_valid_input_cep(cep)
