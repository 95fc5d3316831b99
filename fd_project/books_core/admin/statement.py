from django.contrib import admin

from books_core.models import FinancialStatement

from .ReadOnly import ReadOnlyAdmin
from .mixins import TenantAdminMixin


@admin.register(FinancialStatement)
class FinancialStatementAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = (
        "id",
        "company",
        "statement_type",
        "period",
        "is_valid",
        "generated_at",
        "generated_by",
    )
    ordering = ("-generated_at",)
