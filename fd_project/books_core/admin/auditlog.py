from django.contrib import admin

from books_core.models import AuditLog

from .ReadOnly import ReadOnlyAdmin
from .mixins import TenantAdminMixin


@admin.register(AuditLog)
class AuditLogAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = (
        "id",
        "company",
        "user",
        "action",
        "object_type",
        "object_id",
        "created_at",
    )
    search_fields = ("object_type", "object_id", "user__username")
    list_filter = ("company", "action", "created_at")

    def has_delete_permission(self, request, obj=None):
        return False

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company", "user")
