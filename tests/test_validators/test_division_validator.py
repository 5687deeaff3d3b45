"""Tests for card bill division checks."""

from decimal import Decimal

from fintrack.core.models import PersonDivision
from fintrack.validators import DivisionValidator, ValidationResult


class TestDivisionValidator:
    """Test cases for DivisionValidator."""

    def setup_method(self):
        """Setup test fixtures."""
        self.validator = DivisionValidator()

    def test_excess_divisions_flagged(self, sample_card_bill):
        """Test that divisions above the total are reported with the difference."""
        result = self.validator.validate(sample_card_bill)

        assert not result.is_valid
        assert result.errors == []
        assert result.warnings == [
            "Person divisions (520.00) exceed the bill total (500.00) by 20.00"
        ]

    def test_short_divisions_flagged(self, sample_card_bill):
        bill = sample_card_bill.model_copy(
            update={"divisions": [PersonDivision(person_name="Eu", amount=Decimal("450.00"))]}
        )
        bill = type(bill).model_validate(bill.model_dump())

        result = self.validator.validate(bill)

        assert bill.imbalance == Decimal("-50.00")
        assert "fall short of" in result.warnings[0]

    def test_balanced_bill_passes(self, sample_card_bill):
        sample_card_bill.divisions[1].amount = Decimal("180.00")
        bill = type(sample_card_bill).model_validate(sample_card_bill.model_dump())

        result = self.validator.validate(bill)

        assert result.is_valid
        assert result.warnings == []

    def test_no_divisions_passes(self, sample_card_bill):
        bill = type(sample_card_bill).model_validate(
            sample_card_bill.model_dump() | {"divisions": []}
        )

        assert bill.imbalance is None
        assert self.validator.validate(bill).is_valid

    def test_items_within_one_cent_tolerated(self, sample_card_bill):
        data = sample_card_bill.model_dump() | {"divisions": [], "total_amount": Decimal("500.01")}
        bill = type(sample_card_bill).model_validate(data)

        assert self.validator.validate(bill).warnings == []

    def test_items_mismatch_warns_but_stays_valid(self, sample_card_bill):
        data = sample_card_bill.model_dump() | {"divisions": [], "total_amount": Decimal("600.00")}
        bill = type(sample_card_bill).model_validate(data)

        result = self.validator.validate(bill)

        assert result.is_valid
        assert len(result.warnings) == 1


class TestValidationResult:
    def test_merge(self):
        merged = ValidationResult(is_valid=True, warnings=["a"]).merge(
            ValidationResult(is_valid=False, errors=["b"])
        )

        assert not merged.is_valid
        assert merged.warnings == ["a"]
        assert merged.errors == ["b"]
