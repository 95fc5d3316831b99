import json
from functools import wraps

from django.core.exceptions import ValidationError
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .encoders import AmountJSONEncoder
from .models import Document, FinancialStatement, JournalEntry
from .services import journals, reporting
from .services.export import journal_entries_csv, trial_balance_csv
from .services.statements import trial_balance
from .tasks import generate_company_journals

READ_ONLY_MESSAGE = "Access denied: read-only membership"


def _json(data, **kwargs):
    return JsonResponse(data, encoder=AmountJSONEncoder, **kwargs)


def _message(status, message, **extra):
    return _json({"message": message, **extra}, status=status)


def _read_only(request):
    principal = getattr(request, "principal", None)
    return principal is not None and not principal.can_write


def company_required(write=False):
    """
    Resolve the tenant from request.company (set by CurrentCompanyMiddleware)
    and turn the usual failures into JSON responses.
    """
    def decorator(view):
        @wraps(view)
        def wrapped(request, *args, **kwargs):
            if getattr(request, "company", None) is None:
                return _message(403, "Access denied: User not assigned to any tenant")
            if write and _read_only(request):
                return _message(403, READ_ONLY_MESSAGE)
            try:
                return view(request, *args, **kwargs)
            except Http404:
                return _message(404, "Not found")
            except ValidationError as e:
                return _message(400, "; ".join(e.messages))
        return wrapped
    return decorator


def _json_body(request):
    # form posts and bodiless posts carry their fields in request.POST
    if request.content_type != "application/json":
        return request.POST.dict()
    if not request.body:
        return {}
    try:
        body = json.loads(request.body)
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _user(request):
    user = getattr(request, "user", None)
    return user if getattr(user, "is_authenticated", False) else None


def _entries_for_request(request):
    company = request.company
    period = request.GET.get("period")
    qs = reporting.ledger_entries(company, reporting.period_label(period))

    document_id = request.GET.get("document")
    if document_id:
        document = get_object_or_404(Document.objects.for_company(company), pk=document_id)
        qs = qs.for_document(document)

    generated = request.GET.get("generated")
    if generated is not None:
        qs = qs.generated() if generated.lower() in ("1", "true", "yes") else qs.manual()
    return qs


# ---------- Document journal generation ----------
@require_POST
@company_required(write=True)
def document_generate_journal(request, document_id):
    document = get_object_or_404(Document.objects.for_company(request.company), pk=document_id)
    result = journals.generate_for_document(document, user=_user(request))

    if not result.created:
        extra = {}
        if result.existing_count:
            extra["existingEntries"] = result.existing_count
        return _message(400, result.message, outcome=result.outcome.value, **extra)

    return _json(
        {
            "message": result.message,
            "outcome": result.outcome.value,
            "entries": [journals.entry_to_dict(e) for e in result.entries],
        },
        status=201,
    )


@require_http_methods(["GET", "DELETE"])
@company_required()
def document_journal_entries(request, document_id):
    document = get_object_or_404(Document.objects.for_company(request.company), pk=document_id)
    if request.method == "GET":
        entries = JournalEntry.objects.for_company(request.company).for_document(document)
        return _json([journals.entry_to_dict(e) for e in entries], safe=False)

    if _read_only(request):
        return _message(403, READ_ONLY_MESSAGE)
    deleted = journals.delete_document_entries(document, user=_user(request))
    return _json({"message": f"Deleted {deleted} journal entries", "deletedCount": deleted})


# ---------- Journal entries ----------
@require_http_methods(["GET", "DELETE"])
@company_required()
def journal_entry_list(request):
    if request.method == "GET":
        entries = _entries_for_request(request)
        return _json([journals.entry_to_dict(e) for e in entries], safe=False)

    if _read_only(request):
        return _message(403, READ_ONLY_MESSAGE)
    deleted = journals.delete_generated_entries(request.company, user=_user(request))
    return _json({"message": f"Deleted {deleted} generated journal entries", "deletedCount": deleted})


@require_POST
@company_required(write=True)
def journal_entries_generate(request):
    body = _json_body(request)
    document_ids = journals.clean_document_ids(body.get("documentIds"))
    user = _user(request)

    if body.get("background"):
        task = generate_company_journals.delay(
            request.company.pk, user.pk if user else None, document_ids
        )
        return _json({"message": "Journal entry generation queued", "taskId": task.id}, status=202)

    summary = journals.generate_for_company(request.company, user=user, document_ids=document_ids)
    return _json(
        {
            "message": summary.message,
            "processedDocuments": summary.processed,
            "skippedDocuments": summary.skipped,
            "failedDocuments": summary.failed,
            "createdEntries": len(summary.entries),
            "entries": [journals.entry_to_dict(e) for e in summary.entries],
            "documentId": summary.journal_document.pk if summary.journal_document else None,
        }
    )


@require_http_methods(["GET", "DELETE"])
@company_required()
def journal_entry_detail(request, entry_id):
    entry = get_object_or_404(JournalEntry.objects.for_company(request.company), pk=entry_id)
    if request.method == "GET":
        return _json(journals.entry_to_dict(entry))

    if _read_only(request):
        return _message(403, READ_ONLY_MESSAGE)
    journals.delete_entry(entry, user=_user(request))
    return _json({"message": "Journal entry deleted"})


# ---------- Downloads ----------
def _attachment(response, filename):
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


@require_GET
@company_required()
def journal_entries_download(request):
    period = reporting.period_label(request.GET.get("period"))
    entries = list(reporting.ledger_entries(request.company, period))

    if request.GET.get("format", "csv") == "csv":
        response = HttpResponse(journal_entries_csv(entries), content_type="text/csv")
        return _attachment(response, f"journal_entries_{period}.csv")

    response = _json(
        {
            "title": f"Journal Entries - {period}",
            "period": period,
            "generated": timezone.now().isoformat(),
            "totalEntries": len(entries),
            "entries": [journals.entry_to_dict(e) for e in entries],
        }
    )
    return _attachment(response, f"journal_entries_{period}.json")


@require_GET
@company_required()
def trial_balance_download(request):
    period = reporting.period_label(request.GET.get("period"))
    result = trial_balance(reporting.ledger_entries(request.company, period))

    if request.GET.get("format", "csv") == "csv":
        content = trial_balance_csv(result, entity=request.company.name)
        response = HttpResponse(content, content_type="text/csv")
        return _attachment(response, f"trial_balance_{period}.csv")

    response = _json(
        {
            "title": f"Trial Balance - {period}",
            "period": period,
            "generated": timezone.now().isoformat(),
            **result.to_dict(),
        }
    )
    return _attachment(response, f"trial_balance_{period}.json")


# ---------- Statements ----------
@require_POST
@company_required(write=True)
def report_generate(request, statement_type):
    body = _json_body(request)
    period = body.get("period") or request.GET.get("period")
    statement = reporting.generate_statement(
        request.company, statement_type, period, user=_user(request)
    )
    return _json(reporting.statement_to_dict(statement), status=201)


@require_GET
@company_required()
def financial_statement_list(request):
    period = request.GET.get("period")
    reporting.ensure_core_statements(request.company, period, user=_user(request))

    qs = FinancialStatement.objects.for_company(request.company)
    if period:
        qs = qs.filter(period=reporting.period_label(period))
    statement_type = request.GET.get("type")
    if statement_type:
        qs = qs.filter(statement_type=statement_type)
    return _json([reporting.statement_to_dict(s) for s in qs], safe=False)


@require_http_methods(["GET", "DELETE"])
@company_required()
def financial_statement_detail(request, statement_id):
    statement = get_object_or_404(
        FinancialStatement.objects.for_company(request.company), pk=statement_id
    )
    if request.method == "GET":
        return _json(reporting.statement_to_dict(statement))

    if _read_only(request):
        return _message(403, READ_ONLY_MESSAGE)
    reporting.delete_statement(statement, user=_user(request))
    return _json({"message": "Financial statement deleted"})
