"""Reconciliation of card-bill totals with items and person divisions."""

from decimal import Decimal

from ..core.models import NormalizedCardBill
from .result import ValidationResult


class DivisionValidator:
    """
    Check that a card bill's parts add up to its total.

    An imbalance is reported as a warning, never as an error: the bill is kept
    as extracted and the caller decides whether to reconcile or ask the user.
    """

    # Items come from OCR lines; allow one cent of rounding drift
    ITEMS_TOLERANCE = Decimal("0.01")

    def validate(self, bill: NormalizedCardBill) -> ValidationResult:
        """
        Args:
            bill: NormalizedCardBill to check

        Returns:
            ValidationResult; ``is_valid`` is False only when divisions are unbalanced
        """
        return self._validate_divisions(bill).merge(self._validate_items(bill))

    def _validate_divisions(self, bill: NormalizedCardBill) -> ValidationResult:
        if bill.imbalance is None:
            return ValidationResult(is_valid=True)

        direction = "exceed" if bill.imbalance > 0 else "fall short of"
        return ValidationResult(
            is_valid=False,
            warnings=[
                f"Person divisions ({bill.divisions_total:.2f}) {direction} the bill total "
                f"({bill.total_amount:.2f}) by {abs(bill.imbalance):.2f}"
            ],
        )

    def _validate_items(self, bill: NormalizedCardBill) -> ValidationResult:
        if not bill.items:
            return ValidationResult(is_valid=True)

        difference = abs(bill.items_total - bill.total_amount)
        if difference <= self.ITEMS_TOLERANCE:
            return ValidationResult(is_valid=True)

        return ValidationResult(
            is_valid=True,
            warnings=[
                f"Bill total ({bill.total_amount:.2f}) differs from the sum of its items "
                f"({bill.items_total:.2f})"
            ],
        )
