"""CSV exporter for normalized records."""

import csv
import io
from datetime import date
from decimal import Decimal

from ..core.models import NormalizedCardBill, NormalizedExpense


class CSVExporter:
    """Export a normalized record to CSV format."""

    @property
    def format_name(self) -> str:
        return "CSV"

    @property
    def file_extension(self) -> str:
        return ".csv"

    @property
    def mime_type(self) -> str:
        return "text/csv"

    def export(self, record: NormalizedExpense | NormalizedCardBill) -> str:
        """
        Export record to CSV string.

        Expenses produce a header section and a single transaction row.
        Card bills produce:
        - Bill section (card, total, dates, reference period)
        - Item rows
        - Person divisions, with the imbalance when one is flagged

        Args:
            record: Record to export

        Returns:
            CSV content as string
        """
        output = io.StringIO()
        writer = csv.writer(output)

        if isinstance(record, NormalizedCardBill):
            self._write_card_bill(writer, record)
        else:
            self._write_expense(writer, record)

        if record.warnings:
            writer.writerow([])
            writer.writerow(["Avisos"])
            for warning in record.warnings:
                writer.writerow([warning])

        return output.getvalue()

    def _write_expense(self, writer, expense: NormalizedExpense) -> None:
        writer.writerow(["Despesa"])
        writer.writerow(["Usuário", expense.user_id])
        writer.writerow(["Emitente", expense.issuer or ""])
        writer.writerow(["CNPJ", expense.tax_id or ""])
        writer.writerow(["Vencimento", self._format_date(expense.due_date)])
        writer.writerow(["Status", expense.status.value])
        writer.writerow(["Moeda", expense.currency])
        writer.writerow([])

        writer.writerow(["Data", "Categoria", "Descrição", "Valor"])
        writer.writerow([
            self._format_date(expense.date),
            expense.category.value,
            expense.description,
            self._format_decimal(expense.amount),
        ])

    def _write_card_bill(self, writer, bill: NormalizedCardBill) -> None:
        writer.writerow(["Fatura"])
        writer.writerow(["Usuário", bill.user_id])
        writer.writerow(["Cartão", bill.card_name.value])
        writer.writerow(["Descrição", bill.description])
        writer.writerow(["Total", self._format_decimal(bill.total_amount)])
        writer.writerow(["Data", self._format_date(bill.date)])
        writer.writerow(["Vencimento", self._format_date(bill.due_date)])
        if bill.reference_month and bill.reference_year:
            writer.writerow(["Referência", f"{bill.reference_month:02d}/{bill.reference_year}"])
        writer.writerow(["Moeda", bill.currency])
        writer.writerow([])

        if bill.items:
            writer.writerow(["Data", "Categoria", "Pessoa", "Descrição", "Valor"])
            for item in bill.items:
                writer.writerow([
                    self._format_date(item.date),
                    item.category.value,
                    item.person_name,
                    item.description,
                    self._format_decimal(item.amount),
                ])
            writer.writerow([])

        if bill.divisions:
            writer.writerow(["Pessoa", "Valor"])
            for division in bill.divisions:
                writer.writerow([division.person_name, self._format_decimal(division.amount)])
            writer.writerow(["Total divisões", self._format_decimal(bill.divisions_total)])
            if bill.imbalance is not None:
                writer.writerow(["Diferença", self._format_decimal(bill.imbalance)])

    def _format_decimal(self, value: Decimal | None) -> str:
        """Format decimal for CSV output."""
        if value is None:
            return ""
        return f"{value:.2f}"

    def _format_date(self, value: date | None) -> str:
        return value.isoformat() if value else ""
