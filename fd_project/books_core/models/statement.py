from django.conf import settings
from django.db import models

from ..encoders import AmountJSONEncoder
from ..managers import TenantManager
from .entitymembership import Company

STATEMENT_TYPES = [
    ("trial_balance", "Trial Balance"),
    ("profit_loss", "Profit & Loss"),
    ("balance_sheet", "Balance Sheet"),
    ("gstr_2a", "GSTR-2A"),
    ("gstr_3b", "GSTR-3B"),
    ("form_26q", "Form 26Q"),
    ("depreciation_schedule", "Depreciation Schedule"),
]

# Statements computed from journal entries (the rest read documents)
LEDGER_STATEMENT_TYPES = ("trial_balance", "profit_loss", "balance_sheet")


# ---------- Generated statement snapshot ----------
class FinancialStatement(models.Model):
    """
    A report computed at one point in time.
    Each generation writes a new row; rows are never recomputed in place.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="financial_statements"
    )
    statement_type = models.CharField(max_length=30, choices=STATEMENT_TYPES)
    # period label, e.g. "2025", "Q1_2025", "all"
    period = models.CharField(max_length=20)
    data = models.JSONField(encoder=AmountJSONEncoder)
    # False when a trial balance / balance sheet does not balance
    is_valid = models.BooleanField(default=True)
    generated_at = models.DateTimeField(auto_now_add=True)
    generated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )

    objects = TenantManager()

    class Meta:
        ordering = ["-generated_at", "-id"]
        indexes = [
            models.Index(fields=["company", "statement_type", "period"], name="statement_company_type_idx"),
        ]

    def __str__(self):
        return f"{self.get_statement_type_display()} {self.period}"
