"""
Journal entry generation.

Maps one document's extracted payload to balanced debit/credit rows.
Pure: no database access, and never raises on bad source data. Missing or
unreadable fields fall back to defaults (zero amount, processing date,
"Unknown ..." names); unknown document types give an empty list.
"""
import datetime
import logging
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import ClassVar, Iterator, NamedTuple, Optional

from .. import taxonomy

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
# journal columns: account_name and entity are varchar(200), amounts numeric(18, 2)
NAME_MAX_LENGTH = 200
MAX_AMOUNT = Decimal("1e16")

_DATE_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d", "%d.%m.%Y")


# ----------------------------
# Field coercion
# ----------------------------
def to_amount(value) -> Decimal:
    """Read a money value; anything unreadable or negative becomes 0.00."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, str):
        value = value.strip().replace(",", "").replace("Rs", "").replace("₹", "").strip()
        if not value:
            return ZERO
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.debug("Unreadable amount %r treated as zero", value)
        return ZERO
    if not amount.is_finite():
        return ZERO
    if amount < 0:
        logger.warning("Negative amount %s treated as zero", amount)
        return ZERO
    if amount >= MAX_AMOUNT:
        logger.warning("Amount %s out of range treated as zero", amount)
        return ZERO
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def first_amount(record, *keys) -> Decimal:
    """First non-zero amount among `keys`, in order."""
    for key in keys:
        amount = to_amount(record.get(key))
        if amount:
            return amount
    return ZERO


def to_date(value, today) -> datetime.date:
    """Read a transaction date; unreadable or missing dates become `today`."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str) or not value.strip():
        return today
    text = value.strip()
    try:
        # 2025-04-01 and 2025-04-01T10:30:00Z
        return datetime.date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    logger.debug("Unreadable date %r replaced by %s", value, today)
    return today


def _text(record, key, default):
    value = record.get(key)
    if value is None:
        return default
    value = str(value).strip()
    return (value or default)[:NAME_MAX_LENGTH]


# ----------------------------
# Output rows
# ----------------------------
@dataclass(frozen=True)
class JournalDraft:
    """A journal row before it is attached to a company and document."""

    journal_id: str
    date: datetime.date
    account_code: str
    account_name: str
    debit_amount: Decimal
    credit_amount: Decimal
    narration: str
    entity: str

    def as_fields(self):
        # keyword arguments for JournalEntry(...)
        return asdict(self)

    def to_dict(self):
        return {
            "journalId": self.journal_id,
            "date": self.date.isoformat(),
            "accountCode": self.account_code,
            "accountName": self.account_name,
            "debitAmount": float(self.debit_amount),
            "creditAmount": float(self.credit_amount),
            "narration": self.narration,
            "entity": self.entity,
        }


class Posting(NamedTuple):
    """One balanced movement: `amount` from credit_account to debit_account."""

    debit_account: taxonomy.ChartAccount
    credit_account: taxonomy.ChartAccount
    amount: Decimal
    date: datetime.date
    narration: str
    entity: str


# ----------------------------
# Payloads, one variant per document type
# ----------------------------
@dataclass(frozen=True)
class VendorInvoice:
    amount: Decimal
    date: datetime.date
    invoice_number: str
    vendor_name: str

    @classmethod
    def from_raw(cls, raw, today):
        return cls(
            amount=first_amount(raw, "amount", "totalAmount"),
            date=to_date(raw.get("invoiceDate"), today),
            invoice_number=_text(raw, "invoiceNumber", "N/A"),
            vendor_name=_text(raw, "vendorName", "Unknown Vendor"),
        )


@dataclass(frozen=True)
class SalesLine:
    amount: Decimal
    date: datetime.date
    invoice_number: str
    customer_name: str

    @classmethod
    def from_raw(cls, raw, today):
        return cls(
            amount=first_amount(raw, "totalAmount", "amount"),
            date=to_date(raw.get("saleDate") or raw.get("invoiceDate"), today),
            invoice_number=_text(raw, "invoiceNumber", "N/A"),
            customer_name=_text(raw, "customerName", "Unknown Customer"),
        )


@dataclass(frozen=True)
class PurchaseLine:
    amount: Decimal
    date: datetime.date
    purchase_order: str
    vendor_name: str

    @classmethod
    def from_raw(cls, raw, today):
        return cls(
            amount=first_amount(raw, "amount", "totalAmount"),
            date=to_date(raw.get("purchaseDate"), today),
            purchase_order=_text(raw, "purchaseOrder", "N/A"),
            vendor_name=_text(raw, "vendorName", "Unknown Vendor"),
        )


@dataclass(frozen=True)
class BankTransaction:
    debit: Decimal
    credit: Decimal
    date: datetime.date
    description: str

    @classmethod
    def from_raw(cls, raw, today):
        return cls(
            debit=to_amount(raw.get("debit")),
            credit=to_amount(raw.get("credit")),
            date=to_date(raw.get("date"), today),
            description=_text(raw, "description", ""),
        )


@dataclass(frozen=True)
class VendorInvoicePayload:
    document_type: ClassVar[str] = "vendor_invoice"
    records_key: ClassVar[str] = "invoices"
    record_type: ClassVar[type] = VendorInvoice

    records: tuple

    def postings(self) -> Iterator[Posting]:
        for inv in self.records:
            yield Posting(
                taxonomy.VENDOR_EXPENSES,
                taxonomy.ACCOUNTS_PAYABLE,
                inv.amount,
                inv.date,
                f"Vendor Invoice - {inv.invoice_number} - {inv.vendor_name}",
                inv.vendor_name,
            )


@dataclass(frozen=True)
class SalesRegisterPayload:
    document_type: ClassVar[str] = "sales_register"
    records_key: ClassVar[str] = "sales"
    record_type: ClassVar[type] = SalesLine

    records: tuple

    def postings(self) -> Iterator[Posting]:
        for sale in self.records:
            yield Posting(
                taxonomy.ACCOUNTS_RECEIVABLE,
                taxonomy.SALES_REVENUE,
                sale.amount,
                sale.date,
                f"Sales Invoice - {sale.invoice_number} - {sale.customer_name}",
                sale.customer_name,
            )


@dataclass(frozen=True)
class PurchaseRegisterPayload:
    document_type: ClassVar[str] = "purchase_register"
    records_key: ClassVar[str] = "purchases"
    record_type: ClassVar[type] = PurchaseLine

    records: tuple

    def postings(self) -> Iterator[Posting]:
        for purchase in self.records:
            yield Posting(
                taxonomy.INVENTORY_PURCHASES,
                taxonomy.ACCOUNTS_PAYABLE,
                purchase.amount,
                purchase.date,
                f"Purchase - {purchase.purchase_order} - {purchase.vendor_name}",
                purchase.vendor_name,
            )


@dataclass(frozen=True)
class BankStatementPayload:
    document_type: ClassVar[str] = "bank_statement"
    records_key: ClassVar[str] = "transactions"
    record_type: ClassVar[type] = BankTransaction

    records: tuple

    def postings(self) -> Iterator[Posting]:
        # a transaction with both sides yields two pairs, debit side first
        for txn in self.records:
            if txn.debit > 0:
                yield Posting(
                    taxonomy.BANK_CHARGES,
                    taxonomy.BANK_ACCOUNT,
                    txn.debit,
                    txn.date,
                    f"Bank Transaction - {txn.description or 'Bank Debit'}",
                    "Bank",
                )
            if txn.credit > 0:
                yield Posting(
                    taxonomy.BANK_ACCOUNT,
                    taxonomy.OTHER_INCOME,
                    txn.credit,
                    txn.date,
                    f"Bank Transaction - {txn.description or 'Bank Credit'}",
                    "Bank",
                )


PAYLOAD_TYPES = {
    payload.document_type: payload
    for payload in (
        VendorInvoicePayload,
        SalesRegisterPayload,
        PurchaseRegisterPayload,
        BankStatementPayload,
    )
}


def parse_payload(document_type, extracted_data, today=None):
    """Build the typed payload for a document, or None when there is nothing to read."""
    payload_type = PAYLOAD_TYPES.get(document_type)
    if payload_type is None or not isinstance(extracted_data, dict):
        return None
    raw_records = extracted_data.get(payload_type.records_key)
    if not isinstance(raw_records, list):
        return None
    today = today or datetime.date.today()
    records = tuple(
        payload_type.record_type.from_raw(raw, today)
        for raw in raw_records
        if isinstance(raw, dict)
    )
    return payload_type(records=records)


# ----------------------------
# Generator
# ----------------------------
def generate_journal_drafts(document_type, extracted_data, *, journal_prefix="JE", today=None):
    """
    Return the ordered journal rows for one document.

    Every posting becomes a `{prefix}_{n}_DR` / `{prefix}_{n}_CR` pair, with n
    counting pairs from 0 in emission order, so the same input always gives
    the same output.
    """
    payload = parse_payload(document_type, extracted_data, today=today)
    if payload is None:
        return []

    drafts = []
    for index, posting in enumerate(payload.postings()):
        root = f"{journal_prefix}_{index}"
        drafts.append(
            JournalDraft(
                journal_id=f"{root}_DR",
                date=posting.date,
                account_code=posting.debit_account.code,
                account_name=posting.debit_account.name,
                debit_amount=posting.amount,
                credit_amount=ZERO,
                narration=posting.narration,
                entity=posting.entity,
            )
        )
        drafts.append(
            JournalDraft(
                journal_id=f"{root}_CR",
                date=posting.date,
                account_code=posting.credit_account.code,
                account_name=posting.credit_account.name,
                debit_amount=ZERO,
                credit_amount=posting.amount,
                narration=posting.narration,
                entity=posting.entity,
            )
        )
    return drafts


def drafts_are_balanced(drafts):
    total_debit = sum((d.debit_amount for d in drafts), ZERO)
    total_credit = sum((d.credit_amount for d in drafts), ZERO)
    return total_debit == total_credit
