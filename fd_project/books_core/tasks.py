import logging

from celery import shared_task

logger = logging.getLogger(__name__)


def _load(company_id, user_id):
    # import models lazily to avoid circular imports at module import time
    from django.contrib.auth import get_user_model

    from .models import Company

    company = Company.objects.get(pk=company_id)
    user = get_user_model().objects.filter(pk=user_id).first() if user_id else None
    return company, user


@shared_task  # register this function as a Celery task
def generate_company_journals(company_id, user_id=None, document_ids=None):
    """Batch journal generation for one company, off the request cycle."""
    from .services.journals import generate_for_company

    company, user = _load(company_id, user_id)
    summary = generate_for_company(company, user=user, document_ids=document_ids)
    return {
        "processedDocuments": summary.processed,
        "skippedDocuments": summary.skipped,
        "failedDocuments": summary.failed,
        "createdEntries": len(summary.entries),
        "documentId": summary.journal_document.pk if summary.journal_document else None,
    }


@shared_task
def generate_company_statements(company_id, period=None, user_id=None):
    """Fresh trial balance, P&L and balance sheet for a period."""
    from .models.statement import LEDGER_STATEMENT_TYPES
    from .services.reporting import generate_statement

    company, user = _load(company_id, user_id)
    created = [
        generate_statement(company, statement_type, period, user)
        for statement_type in LEDGER_STATEMENT_TYPES
    ]
    logger.info("Generated %s statements for company %s", len(created), company_id)
    return [statement.pk for statement in created]
