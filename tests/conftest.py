"""Pytest configuration and fixtures."""

import pytest
from datetime import date
from decimal import Decimal

from fintrack.config import Settings
from fintrack.core.models import (
    CardBillItem,
    CardOption,
    ExpenseCategory,
    ExtractionRequest,
    NormalizedCardBill,
    NormalizedExpense,
    PersonDivision,
    SourceDocument,
)
from fintrack.extractors import MockExtractionClient

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        ocr_api_base_url="https://ocr.test",
        ocr_request_timeout_seconds=2.0,
        max_file_size_mb=1,
        allowed_media_types=["application/pdf"],
        ocr_min_confidence=0.7,
    )


@pytest.fixture
def pdf_document() -> SourceDocument:
    return SourceDocument(content=PDF_BYTES, media_type="application/pdf", filename="conta_luz.pdf")


@pytest.fixture
def extraction_request(pdf_document) -> ExtractionRequest:
    return ExtractionRequest(document=pdf_document, user_id="user-123")


@pytest.fixture
def expense_payload() -> dict:
    """OCR API answer for a utility bill."""
    return {
        "success": True,
        "document_type": "boleto",
        "confidence": 0.93,
        "raw_text": "ENEL DISTRIBUICAO SAO PAULO ...",
        "data": {
            "empresa": "Enel Distribuição São Paulo",
            "cnpj": "61.695.227/0001-93",
            "data_emissao": "2024-03-05",
            "data_vencimento": "20/03/2024",
            "valor_total": "1.234,56",
            "moeda": "BRL",
            "categoria": "Contas",
            "descricao": "Conta de energia março",
            "itens": [],
        },
    }


@pytest.fixture
def card_bill_payload() -> dict:
    """OCR API answer for a card bill whose divisions exceed the total by 20.00."""
    return {
        "success": True,
        "document_type": "fatura_cartao",
        "confidence": 0.88,
        "data": {
            "empresa": "Nu Pagamentos S.A.",
            "data_vencimento": "2024-04-10",
            "valor_total": 500,
            "itens": [
                {"descricao": "iFood *Restaurante", "valor": "120,00", "data": "2024-03-02"},
                {"descricao": "Uber Trip", "valor": 80.0, "data": "05/03/2024"},
                {"descricao": "Netflix.com", "valor": "300.00", "data": "2024-03-15",
                 "categoria": "Assinaturas", "pessoa": "Ana"},
            ],
            "divisoes": [
                {"pessoa": "Eu", "valor": "320,00"},
                {"pessoa": "Ana", "valor": 200},
            ],
        },
    }


@pytest.fixture
def mock_client(expense_payload) -> MockExtractionClient:
    return MockExtractionClient(payload=expense_payload)


@pytest.fixture
def sample_expense() -> NormalizedExpense:
    return NormalizedExpense(
        user_id="user-123",
        description="Conta de energia março",
        amount=Decimal("1234.56"),
        category=ExpenseCategory.BILLS,
        date=date(2024, 3, 5),
        due_date=date(2024, 3, 20),
        issuer="Enel Distribuição São Paulo",
        tax_id="61.695.227/0001-93",
    )


@pytest.fixture
def sample_card_bill() -> NormalizedCardBill:
    return NormalizedCardBill(
        user_id="user-123",
        card_name=CardOption.NUBANK,
        total_amount=Decimal("500.00"),
        date=date(2024, 4, 10),
        due_date=date(2024, 4, 10),
        description="Fatura Nubank",
        reference_month=3,
        reference_year=2024,
        items=[
            CardBillItem(
                description="iFood Restaurante",
                amount=Decimal("120.00"),
                category=ExpenseCategory.FOOD,
                date=date(2024, 3, 2),
            ),
            CardBillItem(
                description="Netflixcom",
                amount=Decimal("380.00"),
                category=ExpenseCategory.SUBSCRIPTIONS,
                person_name="Ana",
                date=date(2024, 3, 15),
            ),
        ],
        divisions=[
            PersonDivision(person_name="Eu", amount=Decimal("320.00")),
            PersonDivision(person_name="Ana", amount=Decimal("200.00")),
        ],
    )
