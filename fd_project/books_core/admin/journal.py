from django.contrib import admin

from books_core.models import JournalEntry

from .ReadOnly import ReadOnlyAdmin
from .mixins import TenantAdminMixin


@admin.register(JournalEntry)
class JournalEntryAdmin(TenantAdminMixin, ReadOnlyAdmin):
    """Journal rows are produced by generation; admin can only inspect and delete them."""

    list_display = (
        "journal_id",
        "company",
        "date",
        "account_code",
        "account_name",
        "debit_amount",
        "credit_amount",
        "entity",
        "document",
    )
    list_filter = ("company", "account_code", "date")
    search_fields = ("journal_id", "narration", "entity", "account_name")
    date_hierarchy = "date"

    def has_delete_permission(self, request, obj=None):
        return request.user.has_perm("books_core.delete_journalentry")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company", "document")

