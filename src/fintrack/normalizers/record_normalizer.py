"""Normalization of validated OCR results into application records."""

import logging
import re
from datetime import date
from decimal import Decimal

from pydantic import ValidationError as SchemaError

from ..config import Settings, get_settings
from ..core.errors import NormalizationError
from ..core.models import (
    CardBillItem,
    ExpenseCategory,
    NormalizedCardBill,
    NormalizedExpense,
    PersonDivision,
    RawExtractionData,
    RawExtractionResult,
    RecordType,
)
from ..validators.division_validator import DivisionValidator
from .amounts import parse_amount
from .categories import CATEGORY_ALIASES, fold, map_card, map_category
from .dates import parse_date, parse_optional_date, previous_month
from .raw_text import document_year, parse_statement_lines

logger = logging.getLogger(__name__)

CARD_BILL_TYPES = {
    "fatura",
    "fatura_cartao",
    "card_bill",
    "credit_card_bill",
    "credit_card_statement",
    "statement",
}

_DESCRIPTION_NOISE = re.compile(r"[^\w\sÀ-ÿ\-/*]")
MAX_DESCRIPTION = 200


def normalize_description(text: str) -> str:
    """Collapse whitespace and drop special characters (accents, - / * kept)."""
    collapsed = re.sub(r"\s+", " ", text.strip())
    return _DESCRIPTION_NOISE.sub("", collapsed)[:MAX_DESCRIPTION].strip()


class RecordNormalizer:
    """
    Turn a RawExtractionResult into a NormalizedExpense or NormalizedCardBill.

    The input must already be schema-validated. Every value is parsed into its
    strict type here; a value that cannot be parsed raises NormalizationError
    naming the raw field. Data-quality issues that do not prevent a record
    (unknown labels, low confidence, unbalanced divisions) become warnings.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        division_validator: DivisionValidator | None = None,
    ):
        self.settings = settings or get_settings()
        self.division_validator = division_validator or DivisionValidator()

    def normalize(
        self,
        raw: RawExtractionResult,
        user_id: str,
        source_file: str | None = None,
    ) -> NormalizedExpense | NormalizedCardBill:
        """
        Normalize a successful OCR result.

        Args:
            raw: Validated OCR result with ``success`` set and ``data`` present
            user_id: Owner identity attached to the record
            source_file: Uploaded filename, kept for traceability

        Returns:
            The normalized record, tagged with ``user_id``

        Raises:
            NormalizationError: If a field cannot be coerced to its type
        """
        if raw.data is None:
            raise NormalizationError("OCR result has no data", field="data")

        warnings = self._confidence_warnings(raw.confidence)
        record_type = self.detect_record_type(raw)
        logger.debug(f"Normalizing OCR result as {record_type.value}")
        if (
            record_type == RecordType.CARD_BILL
            and raw.document_type
            and raw.document_type.strip()
            and not self._is_card_type(raw.document_type)
        ):
            warnings.append(
                f"Document type {raw.document_type!r} carries person divisions; "
                "imported as a card bill"
            )

        try:
            if record_type == RecordType.CARD_BILL:
                return self._to_card_bill(raw, user_id, source_file, warnings)
            return self._to_expense(raw.data, raw.confidence, user_id, source_file, warnings)
        except SchemaError as e:
            # A parsed value fell outside the record constraints (e.g. too many digits)
            first = e.errors()[0]
            raise NormalizationError(
                f"Normalized record is invalid: {first['msg']}",
                field=".".join(str(part) for part in first["loc"]),
            ) from None

    def detect_record_type(self, raw: RawExtractionResult) -> RecordType:
        """
        Card bill for statement document types, or for untyped results with items/divisions.

        Per-person divisions only exist on card bills, so any result carrying
        them is a card bill whatever ``document_type`` says.
        """
        data = raw.data
        if data is not None and data.divisoes:
            return RecordType.CARD_BILL
        if raw.document_type and raw.document_type.strip():
            if self._is_card_type(raw.document_type):
                return RecordType.CARD_BILL
            return RecordType.EXPENSE
        if data is not None and data.itens:
            return RecordType.CARD_BILL
        return RecordType.EXPENSE

    @staticmethod
    def _is_card_type(document_type: str) -> bool:
        return fold(document_type).replace(" ", "_") in CARD_BILL_TYPES

    def _confidence_warnings(self, confidence: float | None) -> list[str]:
        threshold = self.settings.ocr_min_confidence
        if confidence is not None and confidence < threshold:
            return [
                f"Low OCR confidence ({confidence:.0%}). Review the extracted data before saving."
            ]
        return []

    def _category(
        self, label: str | None, description: str | None, field: str, warnings: list[str]
    ) -> ExpenseCategory:
        if label and label.strip() and fold(label) not in CATEGORY_ALIASES:
            warnings.append(
                f"Unknown category {label!r} at {field} mapped to {ExpenseCategory.OTHER.value}"
            )
        return map_category(label, description)

    # -------------------------------------------------------------------------
    # Expense
    # -------------------------------------------------------------------------

    def _to_expense(
        self,
        data: RawExtractionData,
        confidence: float | None,
        user_id: str,
        source_file: str | None,
        warnings: list[str],
    ) -> NormalizedExpense:
        issue_date = parse_optional_date(data.data_emissao, "data.data_emissao")
        due_date = parse_optional_date(data.data_vencimento, "data.data_vencimento")

        item_dates = [
            parse_date(item.data, f"data.itens[{i}].data") for i, item in enumerate(data.itens)
        ]
        expense_date = issue_date or due_date or (item_dates[0] if item_dates else None)
        if expense_date is None:
            raise NormalizationError("Document has no usable date", field="data.data_emissao")

        if data.valor_total is not None:
            amount = parse_amount(data.valor_total, "data.valor_total")
        elif data.itens:
            amount = sum(
                (
                    abs(parse_amount(item.valor, f"data.itens[{i}].valor", allow_negative=True))
                    for i, item in enumerate(data.itens)
                ),
                Decimal("0.00"),
            )
        else:
            raise NormalizationError("Document has no total amount", field="data.valor_total")

        description = normalize_description(
            data.descricao
            or (data.itens[0].descricao if len(data.itens) == 1 else "")
            or data.empresa
            or ""
        ) or "Despesa importada"

        return NormalizedExpense(
            user_id=user_id,
            description=description,
            amount=amount,
            category=self._category(data.categoria, description, "data.categoria", warnings),
            date=expense_date,
            due_date=due_date,
            issuer=data.empresa,
            tax_id=data.cnpj,
            currency=self._currency(data.moeda),
            confidence=confidence,
            source_file=source_file,
            warnings=warnings,
        )

    # -------------------------------------------------------------------------
    # Card bill
    # -------------------------------------------------------------------------

    def _to_card_bill(
        self,
        raw: RawExtractionResult,
        user_id: str,
        source_file: str | None,
        warnings: list[str],
    ) -> NormalizedCardBill:
        data = raw.data
        issue_date = parse_optional_date(data.data_emissao, "data.data_emissao")
        due_date = parse_optional_date(data.data_vencimento, "data.data_vencimento")

        items = self._card_items(data, warnings)
        if not items and raw.raw_text:
            fallback_year = (issue_date or due_date or date.today()).year
            year = document_year(raw.raw_text, fallback_year)
            items = [
                CardBillItem(
                    description=normalize_description(line.description) or "Transação",
                    amount=line.amount,
                    category=map_category(None, line.description),
                    date=line.date,
                )
                for line in parse_statement_lines(raw.raw_text, year)
            ]
            if items:
                warnings.append(
                    f"Recovered {len(items)} transactions from raw text; review before saving"
                )

        if data.valor_total is not None:
            total = parse_amount(data.valor_total, "data.valor_total")
        elif items:
            total = sum((item.amount for item in items), Decimal("0.00"))
        else:
            raise NormalizationError("Card bill has no total amount", field="data.valor_total")

        dated_items = [item.date for item in items if item.date is not None]
        bill_date = issue_date or due_date or (max(dated_items) if dated_items else None)
        if bill_date is None:
            raise NormalizationError("Card bill has no usable date", field="data.data_emissao")

        if issue_date is not None:
            reference_month, reference_year = issue_date.month, issue_date.year
        elif due_date is not None:
            reference_month, reference_year = previous_month(due_date)
        else:
            reference_month = reference_year = None

        divisions = []
        for i, division in enumerate(data.divisoes):
            if not division.pessoa.strip():
                raise NormalizationError(
                    "Division has no person name", field=f"data.divisoes[{i}].pessoa"
                )
            divisions.append(
                PersonDivision(
                    person_name=division.pessoa,
                    amount=parse_amount(division.valor, f"data.divisoes[{i}].valor"),
                    description=division.descricao,
                )
            )

        card = map_card(data.cartao, data.empresa)
        description = normalize_description(data.descricao or f"Fatura {card.value}")

        bill = NormalizedCardBill(
            user_id=user_id,
            card_name=card,
            total_amount=total,
            date=bill_date,
            due_date=due_date,
            description=description,
            reference_month=reference_month,
            reference_year=reference_year,
            divisions=divisions,
            items=items,
            currency=self._currency(data.moeda),
            confidence=raw.confidence,
            source_file=source_file,
            warnings=warnings,
        )

        check = self.division_validator.validate(bill)
        if check.warnings:
            bill.warnings.extend(check.warnings)
        if bill.imbalance is not None:
            logger.info(f"Card bill divisions unbalanced by {bill.imbalance}")
        return bill

    def _card_items(self, data: RawExtractionData, warnings: list[str]) -> list[CardBillItem]:
        items = []
        for i, raw_item in enumerate(data.itens):
            field = f"data.itens[{i}]"
            # Statement credits come back negative; items are kept as spending amounts
            amount = abs(parse_amount(raw_item.valor, f"{field}.valor", allow_negative=True))
            description = normalize_description(raw_item.descricao) or "Transação"
            items.append(
                CardBillItem(
                    description=description,
                    amount=amount,
                    category=self._category(
                        raw_item.categoria, description, f"{field}.categoria", warnings
                    ),
                    person_name=(raw_item.pessoa or "").strip() or "Eu",
                    date=parse_date(raw_item.data, f"{field}.data"),
                )
            )
        return items

    def _currency(self, value: str | None) -> str:
        currency = (value or "").strip().upper()
        if len(currency) == 3 and currency.isalpha():
            return currency
        return self.settings.default_currency
