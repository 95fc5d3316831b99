from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from books_core.models import Document
from books_core.services.classification import classify_document
from books_core.services.journals import generate_for_document

from .mixins import TenantAdminMixin


@admin.action(description="Generate journal entries for selected documents")
def generate_journal_entries(modeladmin, request, queryset):
    created = skipped = 0
    for document in queryset:
        result = generate_for_document(document, user=request.user)
        if result.created:
            created += len(result.entries)
        else:
            skipped += 1
    modeladmin.message_user(
        request,
        f"{created} journal entries created, {skipped} documents skipped.",
        messages.SUCCESS,
    )


@admin.action(description="Classify selected documents from their file names")
def classify_documents(modeladmin, request, queryset):
    classified = 0
    for document in queryset.filter(status="uploaded"):
        try:
            classify_document(document)
        except ValidationError as e:
            modeladmin.message_user(request, f"{document}: {'; '.join(e.messages)}", messages.ERROR)
            continue
        classified += 1
    modeladmin.message_user(request, f"{classified} documents classified.", messages.SUCCESS)


@admin.register(Document)
class DocumentAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "company",
        "original_name",
        "document_type",
        "status",
        "has_entries",
        "created_at",
    )
    list_filter = ("company", "document_type", "status")
    search_fields = ("file_name", "original_name")
    readonly_fields = ("created_at", "updated_at")
    actions = [classify_documents, generate_journal_entries]

    @admin.display(boolean=True, description="Journalled")
    def has_entries(self, obj):
        return obj.has_journal_entries
