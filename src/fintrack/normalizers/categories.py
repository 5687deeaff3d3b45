"""Mapping of free-text labels onto the known category and card sets."""

import re
import unicodedata

from ..core.models import CardOption, ExpenseCategory


def fold(text: str) -> str:
    """Lower-case, strip accents and collapse whitespace for label comparison."""
    decomposed = unicodedata.normalize("NFKD", text)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", without_marks).strip().lower()


# Folded label -> category. Includes the category names themselves plus
# aliases seen in OCR output (English labels, singular forms, synonyms).
CATEGORY_ALIASES: dict[str, ExpenseCategory] = {
    "alimentacao": ExpenseCategory.FOOD,
    "comida": ExpenseCategory.FOOD,
    "restaurante": ExpenseCategory.FOOD,
    "supermercado": ExpenseCategory.FOOD,
    "mercado": ExpenseCategory.FOOD,
    "food": ExpenseCategory.FOOD,
    "groceries": ExpenseCategory.FOOD,
    "transporte": ExpenseCategory.TRANSPORT,
    "combustivel": ExpenseCategory.TRANSPORT,
    "transport": ExpenseCategory.TRANSPORT,
    "transportation": ExpenseCategory.TRANSPORT,
    "fuel": ExpenseCategory.TRANSPORT,
    "lazer": ExpenseCategory.LEISURE,
    "entretenimento": ExpenseCategory.LEISURE,
    "leisure": ExpenseCategory.LEISURE,
    "entertainment": ExpenseCategory.LEISURE,
    "contas": ExpenseCategory.BILLS,
    "conta": ExpenseCategory.BILLS,
    "moradia": ExpenseCategory.BILLS,
    "impostos e taxas": ExpenseCategory.BILLS,
    "utilities": ExpenseCategory.BILLS,
    "bills": ExpenseCategory.BILLS,
    "saude": ExpenseCategory.HEALTH,
    "health": ExpenseCategory.HEALTH,
    "compras": ExpenseCategory.SHOPPING,
    "vestuario": ExpenseCategory.SHOPPING,
    "shopping": ExpenseCategory.SHOPPING,
    "estudos": ExpenseCategory.EDUCATION,
    "educacao": ExpenseCategory.EDUCATION,
    "education": ExpenseCategory.EDUCATION,
    "assinaturas": ExpenseCategory.SUBSCRIPTIONS,
    "assinatura": ExpenseCategory.SUBSCRIPTIONS,
    "subscriptions": ExpenseCategory.SUBSCRIPTIONS,
    "subscription": ExpenseCategory.SUBSCRIPTIONS,
    "outros": ExpenseCategory.OTHER,
    "other": ExpenseCategory.OTHER,
}

# Keyword patterns applied to transaction descriptions when no label is given.
# Checked in order; first match wins.
DESCRIPTION_PATTERNS: list[tuple[re.Pattern[str], ExpenseCategory]] = [
    (
        re.compile(r"netflix|spotify|disney|hbo|prime video|youtube premium|deezer|icloud|google one"),
        ExpenseCategory.SUBSCRIPTIONS,
    ),
    (
        re.compile(r"amazon|mercadolivre|mercado livre|shopee|magalu|americanas|shein|loja"),
        ExpenseCategory.SHOPPING,
    ),
    (
        re.compile(
            r"restaurante|lanchonete|padaria|cafe|coffee|\bbar\b|pizzaria|hamburg|ifood|"
            r"uber\s*eats|rappi|supermercado|mercado|hortifruti|acougue|pao de acucar|carrefour"
        ),
        ExpenseCategory.FOOD,
    ),
    (
        re.compile(r"uber|\b99\b|taxi|combustivel|posto|gasolina|etanol|diesel|estacionamento|pedagio"),
        ExpenseCategory.TRANSPORT,
    ),
    (
        re.compile(r"farmacia|drogaria|drogasil|medic|hospital|clinica|laboratorio|consulta"),
        ExpenseCategory.HEALTH,
    ),
    (
        re.compile(r"livraria|faculdade|escola|curso|udemy|coursera|alura"),
        ExpenseCategory.EDUCATION,
    ),
    (
        re.compile(r"cinema|teatro|show|ingresso|steam|playstation|xbox"),
        ExpenseCategory.LEISURE,
    ),
    (
        re.compile(r"energia|enel|cemig|sabesp|agua|internet|vivo|claro|\btim\b|aluguel|condominio"),
        ExpenseCategory.BILLS,
    ),
]

CARD_PATTERNS: list[tuple[re.Pattern[str], CardOption]] = [
    (re.compile(r"nubank|nu pagamentos|\bnu\b"), CardOption.NUBANK),
    (re.compile(r"\binter\b|banco inter"), CardOption.INTER),
    (re.compile(r"picpay"), CardOption.PICPAY),
    (re.compile(r"itau"), CardOption.ITAU),
    (re.compile(r"bradesco"), CardOption.BRADESCO),
    (re.compile(r"santander"), CardOption.SANTANDER),
    (re.compile(r"\bc6\b|c6 bank"), CardOption.C6_BANK),
    (re.compile(r"\bbtg\b|btg pactual"), CardOption.BTG_PACTUAL),
]


def categorize_description(description: str) -> ExpenseCategory:
    """Keyword-based category for a transaction description."""
    folded = fold(description)
    for pattern, category in DESCRIPTION_PATTERNS:
        if pattern.search(folded):
            return category
    return ExpenseCategory.OTHER


def map_category(label: str | None, description: str | None = None) -> ExpenseCategory:
    """
    Map an OCR category label onto ExpenseCategory.

    A present label is looked up among the known names and aliases; an unknown
    label maps to ExpenseCategory.OTHER. Without a label the description is
    keyword-categorized.
    """
    if label and label.strip():
        return CATEGORY_ALIASES.get(fold(label), ExpenseCategory.OTHER)
    if description:
        return categorize_description(description)
    return ExpenseCategory.OTHER


def map_card(*labels: str | None) -> CardOption:
    """First card issuer recognized among ``labels``, else CardOption.OTHER."""
    for label in labels:
        if not label:
            continue
        folded = fold(label)
        for pattern, card in CARD_PATTERNS:
            if pattern.search(folded):
                return card
    return CardOption.OTHER
