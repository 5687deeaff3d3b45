"""Tests for category and card mapping."""

import pytest

from fintrack.core.models import CardOption, ExpenseCategory
from fintrack.normalizers import categorize_description, map_card, map_category
from fintrack.normalizers.categories import fold


class TestMapCategory:
    """Test cases for map_category."""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Alimentação", ExpenseCategory.FOOD),
            ("alimentacao", ExpenseCategory.FOOD),
            ("  SAÚDE ", ExpenseCategory.HEALTH),
            ("Transport", ExpenseCategory.TRANSPORT),
            ("Assinaturas", ExpenseCategory.SUBSCRIPTIONS),
            ("Outros", ExpenseCategory.OTHER),
        ],
    )
    def test_known_labels(self, label, expected):
        assert map_category(label) == expected

    def test_unknown_label_falls_back_to_other(self):
        """Test that an unrecognized label is never guessed from the description."""
        assert map_category("Pets", "Farmácia São João") == ExpenseCategory.OTHER

    def test_no_label_uses_description(self):
        assert map_category(None, "Farmácia São João") == ExpenseCategory.HEALTH
        assert map_category("", "NETFLIX.COM") == ExpenseCategory.SUBSCRIPTIONS

    def test_nothing_known_is_other(self):
        assert map_category(None, None) == ExpenseCategory.OTHER
        assert map_category(None, "XPTO 123") == ExpenseCategory.OTHER


class TestCategorizeDescription:
    @pytest.mark.parametrize(
        "description, expected",
        [
            ("iFood *Restaurante", ExpenseCategory.FOOD),
            ("Supermercado Extra", ExpenseCategory.FOOD),
            ("Mercado Livre", ExpenseCategory.SHOPPING),
            ("Uber Trip", ExpenseCategory.TRANSPORT),
            ("Posto Shell", ExpenseCategory.TRANSPORT),
            ("Drogasil", ExpenseCategory.HEALTH),
            ("Udemy Curso Python", ExpenseCategory.EDUCATION),
            ("Cinemark Ingresso", ExpenseCategory.LEISURE),
            ("Sabesp Conta de Água", ExpenseCategory.BILLS),
        ],
    )
    def test_keywords(self, description, expected):
        assert categorize_description(description) == expected


class TestMapCard:
    def test_first_recognized_label_wins(self):
        assert map_card(None, "Nu Pagamentos S.A.") == CardOption.NUBANK
        assert map_card("Itaú Personnalité", "Nubank") == CardOption.ITAU

    def test_unknown_card(self):
        assert map_card("Banco XYZ", None) == CardOption.OTHER
        assert map_card() == CardOption.OTHER


def test_fold_strips_accents_and_case():
    assert fold("  Educação   Física ") == "educacao fisica"
