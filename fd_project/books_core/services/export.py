import csv
import io
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

ZERO = Decimal("0.00")

JOURNAL_CSV_HEADER = [
    "Date", "Account Code", "Account Name", "Description",
    "Debit Amount", "Credit Amount", "Entity", "Document",
]
TRIAL_BALANCE_CSV_HEADER = [
    "Account Code", "Account Name", "Debit Balance", "Credit Balance", "Entity",
]


# ---------- Currency text ----------
def group_indian(digits: str) -> str:
    """'12500000' -> '1,25,00,000' (last three digits, then pairs)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount, prefix=None) -> str:
    """Rupee text with Indian grouping: 125000 -> 'Rs 1,25,000', 0 -> 'Rs 0'."""
    prefix = prefix or settings.BOOKS_CURRENCY_PREFIX
    try:
        value = Decimal(str(amount if amount is not None else 0))
    except (InvalidOperation, ValueError):
        value = Decimal("0")
    if not value.is_finite() or value == 0:
        return f"{prefix} 0"

    sign = "-" if value < 0 else ""
    # at most three fraction digits, trailing zeros dropped
    value = abs(value).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    integer, _, fraction = f"{value:f}".partition(".")
    fraction = fraction.rstrip("0")
    text = group_indian(integer) + (f".{fraction}" if fraction else "")
    return f"{prefix} {sign}{text}"


# ---------- CSV ----------
def _amount(value):
    return ZERO if value is None else value


def journal_entries_csv(entries) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(JOURNAL_CSV_HEADER)
    for entry in entries:
        writer.writerow([
            entry.date.isoformat(),
            entry.account_code,
            entry.account_name,
            entry.narration,
            _amount(entry.debit_amount),
            _amount(entry.credit_amount),
            entry.entity or "",
            entry.document_id or "",
        ])
    return buffer.getvalue()


def trial_balance_csv(trial_balance, entity="") -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(TRIAL_BALANCE_CSV_HEADER)
    for row in trial_balance.entries:
        writer.writerow([
            row.account_code,
            row.account_name,
            row.debit_balance,
            row.credit_balance,
            entity,
        ])
    writer.writerow([])
    writer.writerow(["Total Debits", trial_balance.total_debits])
    writer.writerow(["Total Credits", trial_balance.total_credits])
    writer.writerow(["Is Balanced", "true" if trial_balance.is_balanced else "false"])
    return buffer.getvalue()
