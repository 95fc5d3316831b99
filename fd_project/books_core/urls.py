from django.urls import path

from . import views

urlpatterns = [
    # Journal generation per document
    path(
        "documents/<int:document_id>/generate-journal/",
        views.document_generate_journal,
        name="document-generate-journal",
    ),
    path(
        "documents/<int:document_id>/journal-entries/",
        views.document_journal_entries,
        name="document-journal-entries",
    ),
    # Journal entries
    path("journal-entries/", views.journal_entry_list, name="journal-entry-list"),
    path("journal-entries/generate/", views.journal_entries_generate, name="journal-entries-generate"),
    path("journal-entries/download/", views.journal_entries_download, name="journal-entries-download"),
    path("journal-entries/<int:entry_id>/", views.journal_entry_detail, name="journal-entry-detail"),
    # Reports
    path("trial-balance/download/", views.trial_balance_download, name="trial-balance-download"),
    path("reports/<slug:statement_type>/", views.report_generate, name="report-generate"),
    path("financial-statements/", views.financial_statement_list, name="financial-statement-list"),
    path(
        "financial-statements/<int:statement_id>/",
        views.financial_statement_detail,
        name="financial-statement-detail",
    ),
]
