from django.db.models.signals import pre_save
from django.dispatch import receiver

from .exceptions import DocumentLockedError
from .models import Document

""" Freeze a document's type and payload once journal entries exist."""


# pre_save fires just before Django writes a Document row
@receiver(pre_save, sender=Document)
def prevent_rewrite_of_journalled_document(sender, instance, **kwargs):
    if instance.pk is None:
        return
    try:
        stored = Document.objects.only("document_type", "extracted_data").get(pk=instance.pk)
    except Document.DoesNotExist:
        return

    changed = (
        stored.document_type != instance.document_type
        or stored.extracted_data != instance.extracted_data
    )
    if changed and stored.journal_entries.exists():
        raise DocumentLockedError(
            "Document already has journal entries; delete them before changing its type or extracted data."
        )
