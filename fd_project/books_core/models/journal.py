from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

from ..managers import JournalEntryManager
from ..services.generation import NAME_MAX_LENGTH
from ..taxonomy import classify
from .document import Document
from .entitymembership import Company


# ---------- Journal entry (one debit or credit row) ----------
class JournalEntry(models.Model):
    """
    One side of a double-entry pair.
    Generated pairs share a journal_id root and end in _DR / _CR.
    Rows are written once and never updated; they are only deleted.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="journal_entries"
    )
    # Source document; NULL for manually keyed entries
    document = models.ForeignKey(
        Document,
        null=True,
        blank=True,
        # removing a document removes what was derived from it
        on_delete=models.CASCADE,
        related_name="journal_entries",
    )

    journal_id = models.CharField(max_length=64)
    date = models.DateField()

    account_code = models.CharField(
        max_length=4,
        validators=[RegexValidator(r"^\d{4}$", "Account code must be 4 digits")],
    )
    account_name = models.CharField(max_length=NAME_MAX_LENGTH)

    debit_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    credit_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    narration = models.TextField(blank=True)
    # counterparty (vendor, customer, "Bank")
    entity = models.CharField(max_length=NAME_MAX_LENGTH, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = JournalEntryManager()

    class Meta:
        ordering = ["date", "id"]
        indexes = [
            models.Index(fields=["company", "date"], name="je_company_date_idx"),
            models.Index(fields=["company", "account_code"], name="je_company_account_idx"),
            models.Index(fields=["company", "document"], name="je_company_document_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(debit_amount__gte=0) & models.Q(credit_amount__gte=0),
                name="je_amounts_non_negative",
            ),
            # each row carries one side only
            models.CheckConstraint(
                condition=models.Q(debit_amount=0) | models.Q(credit_amount=0),
                name="je_single_side",
            ),
        ]
        verbose_name_plural = "journal entries"

    def __str__(self):
        return f"{self.journal_id} {self.account_code} Dr {self.debit_amount} Cr {self.credit_amount}"

    @property
    def account_class(self):
        return classify(self.account_code)

    @property
    def is_generated(self):
        return self.document_id is not None

    def clean(self):
        if self.debit_amount and self.credit_amount:
            raise ValidationError("A journal row carries either a debit or a credit, not both.")
        if self.document_id and self.document.company_id != self.company_id:
            raise ValidationError("Journal entry and source document must belong to the same company.")

    def save(self, *args, **kwargs):
        # Ledger rows are immutable once written
        if self.pk is not None and not kwargs.get("force_insert"):
            raise ValidationError("Journal entries cannot be modified; delete and regenerate instead.")
        self.full_clean()
        return super().save(*args, **kwargs)
