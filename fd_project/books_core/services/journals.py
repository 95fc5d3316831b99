import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils import timezone

from ..models import Document, JournalEntry
from ..models.document import SOURCE_DOCUMENT_TYPES
from .audit_helper import log_action
from .generation import generate_journal_drafts

logger = logging.getLogger(__name__)


class GenerationOutcome(str, Enum):
    CREATED = "created"
    ALREADY_GENERATED = "already_generated"
    NO_ENTRIES = "no_entries"   # payload present, nothing to post
    NO_DATA = "no_data"         # nothing extracted yet


_MESSAGES = {
    GenerationOutcome.NO_DATA: "Document must be processed and have extracted data before generating journal entries",
    GenerationOutcome.ALREADY_GENERATED: "Journal entries already exist for this document",
    GenerationOutcome.NO_ENTRIES: "No journal entries could be generated from this document",
}


@dataclass
class GenerationResult:
    document: Document
    outcome: GenerationOutcome
    entries: list = field(default_factory=list)
    existing_count: int = 0

    @property
    def created(self):
        return self.outcome is GenerationOutcome.CREATED

    @property
    def message(self):
        if self.created:
            return f"Successfully generated {len(self.entries)} journal entries"
        return _MESSAGES[self.outcome]


@dataclass
class GenerationSummary:
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    entries: list = field(default_factory=list)
    sources: list = field(default_factory=list)
    journal_document: Document | None = None

    @property
    def message(self):
        if self.processed:
            return (
                f"Successfully generated {len(self.entries)} journal entries "
                f"from {self.processed} documents"
            )
        return (
            f"No new journal entries generated. {self.skipped} documents "
            f"already have journal entries"
        )


def journal_prefix_for(document):
    # e.g. JE42 -> JE42_0_DR, JE42_0_CR, JE42_1_DR ...
    return f"JE{document.pk}"


def entry_to_dict(entry):
    return {
        "id": entry.pk,
        "journalId": entry.journal_id,
        "date": entry.date.isoformat() if entry.date else None,
        "accountCode": entry.account_code,
        "accountName": entry.account_name,
        "debitAmount": float(entry.debit_amount or 0),
        "creditAmount": float(entry.credit_amount or 0),
        "narration": entry.narration,
        "entity": entry.entity,
        "documentId": entry.document_id,
    }


# ----------------------------
# Single document
# ----------------------------
def generate_for_document(document, user=None, today=None) -> GenerationResult:
    """
    Derive and store journal entries for one document, at most once.

    Duplicates are an outcome, not an error: a document that already has
    entries returns ALREADY_GENERATED and nothing is written.
    """
    if not document.extracted_data:
        return GenerationResult(document, GenerationOutcome.NO_DATA)

    existing = JournalEntry.objects.for_document(document).count()
    if existing:
        logger.info(
            "Skipping document %s - already has %s journal entries", document.pk, existing
        )
        return GenerationResult(
            document, GenerationOutcome.ALREADY_GENERATED, existing_count=existing
        )

    drafts = generate_journal_drafts(
        document.document_type,
        document.extracted_data,
        journal_prefix=journal_prefix_for(document),
        today=today,
    )
    if not drafts:
        return GenerationResult(document, GenerationOutcome.NO_ENTRIES)

    # re-checked under a row lock; a concurrent request may have won
    created, inserted = JournalEntry.objects.insert_if_absent_for_document(
        document, drafts, user=user
    )
    if not inserted:
        existing = JournalEntry.objects.for_document(document).count()
        return GenerationResult(
            document, GenerationOutcome.ALREADY_GENERATED, existing_count=existing
        )

    logger.info(
        "Generated %s journal entries for document %s (%s)",
        len(created), document.pk, document.document_type,
    )
    log_action(
        action="journal_generated",
        instance=document,
        user=user,
        changes={"entries": len(created)},
    )
    return GenerationResult(document, GenerationOutcome.CREATED, entries=created)


# ----------------------------
# Whole company
# ----------------------------
def clean_document_ids(value):
    """Optional list of document primary keys from a request; None means every document."""
    if value in (None, "", []):
        return None
    if not isinstance(value, list) or not all(
        isinstance(pk, int) and not isinstance(pk, bool) for pk in value
    ):
        raise ValidationError("documentIds must be a list of integer document ids")
    return value


def source_documents(company, document_ids=None):
    qs = (
        Document.objects.for_company(company)
        .filter(document_type__in=SOURCE_DOCUMENT_TYPES)
        .order_by("created_at", "id")
    )
    if document_ids:
        qs = qs.filter(pk__in=document_ids)
    return qs


def generate_for_company(company, user=None, document_ids=None, today=None) -> GenerationSummary:
    """
    Run generation over every source document of a company.

    Documents that already have entries are skipped and counted. A failure
    on one document is logged and counted; the rest of the batch carries on.
    """
    summary = GenerationSummary()
    docs = list(source_documents(company, document_ids))
    logger.info("Found %s source documents for journal entry generation", len(docs))

    for doc in docs:
        try:
            # savepoint per document so one failure cannot poison the batch
            with transaction.atomic():
                result = generate_for_document(doc, user=user, today=today)
        except Exception:
            logger.exception("Journal entry generation failed for document %s", doc.pk)
            summary.failed += 1
            continue

        if result.outcome is GenerationOutcome.ALREADY_GENERATED:
            summary.skipped += 1
            continue

        summary.processed += 1
        summary.entries.extend(result.entries)
        summary.sources.append(
            {
                "documentId": doc.pk,
                "documentName": doc.display_name,
                "documentType": doc.document_type,
                "entriesGenerated": len(result.entries),
            }
        )

    logger.info(
        "Journal entry generation completed: %s processed, %s skipped, %s failed, %s entries created",
        summary.processed, summary.skipped, summary.failed, len(summary.entries),
    )

    if summary.entries:
        summary.journal_document = _store_journal_document(company, summary, user, today)
        log_action(
            action="journal_batch_generated",
            instance=summary.journal_document,
            user=user,
            changes={
                "processed": summary.processed,
                "skipped": summary.skipped,
                "failed": summary.failed,
                "entries": len(summary.entries),
            },
        )
    return summary


def _store_journal_document(company, summary, user, today=None):
    """Keep a 'journal' document describing what a batch run produced."""
    now = timezone.now()
    today = today or now.date()
    entries = [entry_to_dict(entry) for entry in summary.entries]

    total_debits = sum((e.debit_amount for e in summary.entries), Decimal("0.00"))
    total_credits = sum((e.credit_amount for e in summary.entries), Decimal("0.00"))
    file_name = f"journal_entries_{today.isoformat()}_{int(now.timestamp() * 1000)}.json"

    extracted = {
        "documentType": "journal",
        "generatedFrom": "source_documents",
        "sourceDocuments": summary.sources,
        "totalEntries": len(entries),
        "processedDocuments": summary.processed,
        "skippedDocuments": summary.skipped,
        "failedDocuments": summary.failed,
        "entries": entries,
        "summary": {
            "totalDebits": total_debits,
            "totalCredits": total_credits,
            "uniqueAccounts": len({e.account_code for e in summary.entries}),
            "balanceCheck": abs(total_debits - total_credits) < Decimal("0.01"),
        },
    }
    uploader = user if getattr(user, "is_authenticated", False) else None

    return Document.objects.create(
        company=company,
        uploaded_by=uploader,
        file_name=file_name,
        original_name=f"Journal Entries - Generated from {len(summary.sources)} Documents",
        mime_type="application/json",
        file_size=len(json.dumps(entries, cls=DjangoJSONEncoder)),
        document_type="journal",
        status="extracted",
        extracted_data=extracted,
        metadata={
            "generated": True,
            "generatedAt": now.isoformat(),
            "reportType": "journal_entries",
            "sourceDocuments": [
                {
                    "id": src["documentId"],
                    "name": src["documentName"],
                    "type": src["documentType"],
                    "entriesGenerated": src["entriesGenerated"],
                }
                for src in summary.sources
            ],
        },
    )


# ----------------------------
# Deletes
# ----------------------------
def delete_document_entries(document, user=None) -> int:
    """Remove every entry derived from `document` so it can be regenerated."""
    deleted, _ = JournalEntry.objects.for_document(document).delete()
    logger.info("Deleted %s journal entries for document %s", deleted, document.pk)
    log_action(
        action="journal_entries_deleted",
        instance=document,
        user=user,
        changes={"deleted": deleted},
    )
    return deleted


def delete_generated_entries(company, user=None) -> int:
    """Remove all document-derived entries of a company; manual entries stay."""
    deleted, _ = JournalEntry.objects.for_company(company).generated().delete()
    logger.info("Deleted %s generated journal entries for company %s", deleted, company.pk)
    log_action(
        action="generated_entries_deleted",
        object_type="JournalEntry",
        object_id="*",
        company=company,
        user=user,
        changes={"deleted": deleted},
    )
    return deleted


def delete_entry(entry, user=None):
    snapshot = entry_to_dict(entry)
    company = entry.company
    entry_pk = entry.pk
    entry.delete()
    log_action(
        action="journal_entry_deleted",
        object_type="JournalEntry",
        object_id=entry_pk,
        company=company,
        user=user,
        changes=snapshot,
    )
