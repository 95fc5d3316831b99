from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from ..managers import TenantManager
from .entitymembership import Company

DOCUMENT_TYPES = [
    ("vendor_invoice", "Vendor Invoice"),
    ("sales_register", "Sales Register"),
    ("salary_register", "Salary Register"),
    ("bank_statement", "Bank Statement"),
    ("purchase_register", "Purchase Register"),
    ("journal", "Journal"),
    ("trial_balance", "Trial Balance"),
    ("fixed_asset_register", "Fixed Asset Register"),
    ("other", "Other"),
]

# Types the journal generator reads from
SOURCE_DOCUMENT_TYPES = (
    "vendor_invoice",
    "sales_register",
    "bank_statement",
    "purchase_register",
)

DOCUMENT_STATUS = [
    ("uploaded", "Uploaded"),      # file stored, type unknown
    ("classified", "Classified"),  # type assigned
    ("extracted", "Extracted"),    # structured payload available
]

# status -> statuses it may move to
ALLOWED_TRANSITIONS = {
    "uploaded": {"classified", "extracted"},
    "classified": {"extracted"},
    "extracted": set(),
}


# ---------- Uploaded source document ----------
class Document(models.Model):
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="documents"
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )

    # File metadata (the bytes live elsewhere)
    file_name = models.CharField(max_length=255)
    original_name = models.CharField(max_length=255, blank=True)
    mime_type = models.CharField(max_length=100, blank=True)
    file_size = models.PositiveBigIntegerField(default=0)

    document_type = models.CharField(
        max_length=30, choices=DOCUMENT_TYPES, default="other"
    )
    status = models.CharField(
        max_length=20, choices=DOCUMENT_STATUS, default="uploaded"
    )

    # Type-specific payload, e.g. {"invoices": [...]} or {"transactions": [...]}
    extracted_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "document_type"], name="document_company_type_idx"),
            models.Index(fields=["company", "created_at"], name="document_company_created_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.original_name or self.file_name} [{self.document_type}]"

    @property
    def display_name(self):
        return self.original_name or self.file_name

    @property
    def has_journal_entries(self):
        if self.pk is None:
            return False
        return self.journal_entries.exists()

    """ Lifecycle: uploaded -> classified -> extracted """
    def transition_to(self, new_status):
        if new_status == self.status:
            return
        if new_status not in ALLOWED_TRANSITIONS.get(self.status, set()):
            raise ValidationError(
                f"Invalid status transition {self.status} -> {new_status}"
            )
        self.status = new_status

    def mark_classified(self, document_type):
        valid_types = {value for value, _ in DOCUMENT_TYPES}
        if document_type not in valid_types:
            raise ValidationError(f"Unknown document type '{document_type}'")
        self.transition_to("classified")
        self.document_type = document_type
        self.save(update_fields=["status", "document_type", "updated_at"])

    def mark_extracted(self, extracted_data):
        self.transition_to("extracted")
        self.extracted_data = extracted_data
        self.save(update_fields=["status", "extracted_data", "updated_at"])
