import logging

from django.conf import settings
from django.core.exceptions import ValidationError

from ..models import FinancialStatement, JournalEntry
from ..models.statement import LEDGER_STATEMENT_TYPES, STATEMENT_TYPES
from . import statements, tax_returns
from .audit_helper import log_action
from .depreciate import depreciation_schedule
from .export import format_currency
from .periods import resolve_period

logger = logging.getLogger(__name__)


def period_label(period=None):
    """Normalise a period label, falling back to BOOKS_DEFAULT_PERIOD."""
    label = (period or settings.BOOKS_DEFAULT_PERIOD or "all").strip()
    bounds = resolve_period(label)  # raises ValidationError on junk
    return bounds.label if bounds else "all"


def ledger_entries(company, period=None):
    return (
        JournalEntry.objects.for_company(company)
        .in_period(period)
        .order_by("date", "id")
    )


# ---------- Ledger statements ----------
def _trial_balance(company, period):
    result = statements.trial_balance(ledger_entries(company, period))
    data = result.to_dict()
    # text forms for display, numbers stay alongside
    data["totalDebitsText"] = format_currency(result.total_debits)
    data["totalCreditsText"] = format_currency(result.total_credits)
    for row, row_data in zip(result.entries, data["entries"]):
        row_data["debitBalanceText"] = format_currency(row.debit_balance)
        row_data["creditBalanceText"] = format_currency(row.credit_balance)
    return data, result.is_balanced


def _profit_loss(company, period):
    result = statements.profit_and_loss(ledger_entries(company, period))
    return result.to_dict(), True


def _balance_sheet(company, period):
    result = statements.balance_sheet(ledger_entries(company, period))
    return result.to_dict(), result.is_balanced


def _document_report(builder):
    def build(company, period):
        return builder(company, period), True
    return build


# statement_type -> callable(company, period) -> (data, is_valid)
BUILDERS = {
    "trial_balance": _trial_balance,
    "profit_loss": _profit_loss,
    "balance_sheet": _balance_sheet,
    "gstr_2a": _document_report(tax_returns.gstr_2a),
    "gstr_3b": _document_report(tax_returns.gstr_3b),
    "form_26q": _document_report(tax_returns.form_26q),
    "depreciation_schedule": _document_report(depreciation_schedule),
}


def generate_statement(company, statement_type, period=None, user=None) -> FinancialStatement:
    """
    Compute a statement from current data and store it as a new row.
    An unbalanced trial balance or balance sheet is stored with is_valid=False.
    """
    builder = BUILDERS.get(statement_type)
    if builder is None:
        valid = ", ".join(value for value, _ in STATEMENT_TYPES)
        raise ValidationError(f"Unknown statement type '{statement_type}'. Expected one of: {valid}")

    label = period_label(period)
    data, is_valid = builder(company, label)

    statement = FinancialStatement.objects.create(
        company=company,
        statement_type=statement_type,
        period=label,
        data=data,
        is_valid=is_valid,
        generated_by=user if getattr(user, "is_authenticated", False) else None,
    )
    logger.info(
        "Generated %s for company %s period %s (valid=%s)",
        statement_type, company.pk, label, is_valid,
    )
    if not is_valid:
        logger.warning("%s for company %s period %s does not balance", statement_type, company.pk, label)
    return statement


def ensure_core_statements(company, period=None, user=None):
    """
    Generate trial balance, P&L and balance sheet for a period that has
    journal entries but no stored ledger statements yet.
    """
    label = period_label(period)
    existing = FinancialStatement.objects.for_company(company).filter(
        period=label, statement_type__in=LEDGER_STATEMENT_TYPES
    )
    if existing.exists() or not ledger_entries(company, label).exists():
        return []
    return [
        generate_statement(company, statement_type, label, user)
        for statement_type in LEDGER_STATEMENT_TYPES
    ]


def statement_to_dict(statement):
    return {
        "id": statement.pk,
        "statementType": statement.statement_type,
        "period": statement.period,
        "data": statement.data,
        "isValid": statement.is_valid,
        "generatedAt": statement.generated_at.isoformat() if statement.generated_at else None,
        "generatedBy": statement.generated_by_id,
    }


def delete_statement(statement, user=None):
    snapshot = {
        "statementType": statement.statement_type,
        "period": statement.period,
        "isValid": statement.is_valid,
    }
    company = statement.company
    statement_pk = statement.pk
    statement.delete()
    log_action(
        action="statement_deleted",
        object_type="FinancialStatement",
        object_id=statement_pk,
        company=company,
        user=user,
        changes=snapshot,
    )
