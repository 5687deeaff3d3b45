"""Pydantic models for uploads, the OCR API contract and normalized records."""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class RecordType(str, Enum):
    """Shape of a normalized record."""

    EXPENSE = "expense"
    CARD_BILL = "card_bill"


class ExpenseCategory(str, Enum):
    """Spending categories known to the application."""

    FOOD = "Alimentação"
    TRANSPORT = "Transporte"
    LEISURE = "Lazer"
    BILLS = "Contas"
    HEALTH = "Saúde"
    SHOPPING = "Compras"
    EDUCATION = "Estudos"
    SUBSCRIPTIONS = "Assinaturas"
    OTHER = "Outros"


class CardOption(str, Enum):
    """Card issuers known to the application."""

    NUBANK = "Nubank"
    INTER = "Inter"
    PICPAY = "PicPay"
    ITAU = "Itaú"
    BRADESCO = "Bradesco"
    SANTANDER = "Santander"
    C6_BANK = "C6 Bank"
    BTG_PACTUAL = "BTG Pactual"
    OTHER = "Outros"


class ExpenseStatus(str, Enum):
    """Payment status of an expense."""

    PAID = "paid"
    PENDING = "pending"


# =============================================================================
# Upload boundary
# =============================================================================


class SourceDocument(BaseModel):
    """Uploaded document as received at the upload boundary."""

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(..., repr=False)
    media_type: str = Field(..., description="Declared media type (e.g. application/pdf)")
    filename: str = Field(..., description="Declared filename")

    @property
    def size(self) -> int:
        return len(self.content)


class ExtractionHints(BaseModel):
    """Optional processing hints forwarded to the OCR API."""

    model_config = ConfigDict(frozen=True)

    document_type_hint: str | None = None
    language_hint: str | None = None

    def as_form_fields(self) -> dict[str, str]:
        """Hints that are set, as multipart form fields."""
        return {key: value for key, value in self.model_dump().items() if value}


class ExtractionRequest(BaseModel):
    """A document plus the identity of the user who owns the resulting record."""

    model_config = ConfigDict(frozen=True)

    document: SourceDocument
    user_id: str
    hints: ExtractionHints = Field(default_factory=ExtractionHints)


# =============================================================================
# OCR API contract (untrusted input)
# =============================================================================

RawAmount = Union[StrictInt, StrictFloat, StrictStr]


class RawItem(BaseModel):
    """Transaction line as returned by the OCR API."""

    descricao: StrictStr
    valor: RawAmount
    data: StrictStr
    categoria: StrictStr | None = None
    pessoa: StrictStr | None = None


class RawDivision(BaseModel):
    """Per-person split as returned by the OCR API."""

    pessoa: StrictStr
    valor: RawAmount
    descricao: StrictStr | None = None


class RawExtractionData(BaseModel):
    """Extracted financial fields."""

    empresa: StrictStr | None = None
    cnpj: StrictStr | None = None
    cartao: StrictStr | None = None
    categoria: StrictStr | None = None
    descricao: StrictStr | None = None
    data_emissao: StrictStr | None = None
    data_vencimento: StrictStr | None = None
    valor_total: RawAmount | None = None
    moeda: StrictStr = "BRL"
    itens: list[RawItem] = Field(default_factory=list)
    divisoes: list[RawDivision] = Field(default_factory=list)

    @field_validator("itens", "divisoes", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("moeda", mode="before")
    @classmethod
    def null_currency(cls, value: Any) -> Any:
        return "BRL" if value is None else value


class RawExtractionResult(BaseModel):
    """Top-level body of an OCR API response."""

    success: StrictBool
    document_type: StrictStr | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0, strict=True)
    raw_text: StrictStr | None = None
    data: RawExtractionData | None = None
    error: StrictStr | None = None
    message: StrictStr | None = None

    @model_validator(mode="after")
    def data_required_on_success(self) -> "RawExtractionResult":
        if self.success and self.data is None:
            raise ValueError("data is required when success is true")
        return self

    @property
    def remote_error(self) -> str:
        return self.error or self.message or "OCR failed without an error message"


# =============================================================================
# Normalized records
# =============================================================================

Money = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class _Record(_CamelModel):
    """Fields shared by every normalized record."""

    user_id: str = Field(..., min_length=1, description="Owner of the record")
    currency: str = Field(default="BRL", min_length=3, max_length=3)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    source_file: str | None = None
    warnings: list[str] = Field(default_factory=list)


class NormalizedExpense(_Record):
    """Single expense extracted from an invoice or receipt."""

    record_type: Literal["expense"] = RecordType.EXPENSE.value
    description: str = Field(..., min_length=1, max_length=200)
    amount: Money
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: dt.date
    due_date: dt.date | None = None
    status: ExpenseStatus = ExpenseStatus.PENDING
    issuer: str | None = None
    tax_id: str | None = None


class CardBillItem(_CamelModel):
    """Categorized transaction on a card bill."""

    description: str = Field(..., min_length=1, max_length=200)
    amount: Money
    category: ExpenseCategory = ExpenseCategory.OTHER
    person_name: str = Field(default="Eu", min_length=1)
    date: dt.date | None = None


class PersonDivision(_CamelModel):
    """Part of a card bill attributed to a named person."""

    person_name: str = Field(..., min_length=1, max_length=100)
    amount: Money
    description: str | None = None


class NormalizedCardBill(_Record):
    """Credit-card bill with optional per-person divisions."""

    record_type: Literal["card_bill"] = RecordType.CARD_BILL.value
    card_name: CardOption = CardOption.OTHER
    total_amount: Money
    date: dt.date
    due_date: dt.date | None = None
    description: str = Field(default="", max_length=200)
    reference_month: int | None = Field(default=None, ge=1, le=12)
    reference_year: int | None = Field(default=None, ge=2000, le=2100)
    divisions: list[PersonDivision] = Field(default_factory=list)
    items: list[CardBillItem] = Field(default_factory=list)
    imbalance: Decimal | None = Field(
        default=None,
        description="sum(divisions) - total_amount when they differ",
    )

    @property
    def divisions_total(self) -> Decimal:
        return sum((d.amount for d in self.divisions), Decimal("0.00"))

    @property
    def items_total(self) -> Decimal:
        return sum((i.amount for i in self.items), Decimal("0.00"))

    @property
    def is_balanced(self) -> bool:
        return self.imbalance is None

    @model_validator(mode="after")
    def compute_imbalance(self) -> "NormalizedCardBill":
        """Flag, never correct, divisions that do not add up to the total."""
        if not self.divisions:
            self.imbalance = None
            return self
        difference = self.divisions_total - self.total_amount
        self.imbalance = difference if difference != 0 else None
        return self


NormalizedRecord = Annotated[
    Union[NormalizedExpense, NormalizedCardBill],
    Field(discriminator="record_type"),
]
