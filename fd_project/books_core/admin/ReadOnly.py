from django.contrib import admin
from django.core.exceptions import PermissionDenied

"""Base admin for ledger rows that are written by services, never by hand."""
class ReadOnlyAdmin(admin.ModelAdmin):
    list_per_page = 50

    # make every model field readonly
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    # Viewing is allowed; fields are readonly so nothing can change
    def has_change_permission(self, request, obj=None):
        return True

    def save_model(self, request, obj, form, change):
        raise PermissionDenied("Rows cannot be changed via the admin.")

    # Common useful filters if present
    def get_list_filter(self, request):
        if self.list_filter:
            return self.list_filter
        possible = {f.name for f in self.model._meta.fields}
        return tuple(
            candidate
            for candidate in ("company", "statement_type", "account_code", "is_valid")
            if candidate in possible
        )

    # Useful searchable text fields if present
    def get_search_fields(self, request):
        if self.search_fields:
            return self.search_fields
        possible = {f.name for f in self.model._meta.fields}
        return tuple(
            candidate
            for candidate in ("account_code", "account_name", "journal_id", "narration", "period")
            if candidate in possible
        )
