import datetime
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase

from books_core.exceptions import DocumentLockedError, UnbalancedJournalError
from books_core.models import AuditLog, Document, JournalEntry
from books_core.services.generation import JournalDraft, generate_journal_drafts
from books_core.services.journals import (
    GenerationOutcome,
    clean_document_ids,
    delete_document_entries,
    delete_entry,
    delete_generated_entries,
    generate_for_company,
    generate_for_document,
    journal_prefix_for,
)

from .utils import make_document, make_tenant

TODAY = datetime.date(2025, 7, 1)

VENDOR_PAYLOAD = {
    "invoices": [
        {"amount": 125000, "invoiceNumber": "ABC-001", "vendorName": "ABC Corp", "invoiceDate": "2025-04-12"}
    ]
}


def draft(journal_id, code, debit="0", credit="0"):
    return JournalDraft(
        journal_id=journal_id,
        date=TODAY,
        account_code=code,
        account_name="Account",
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
        narration="",
        entity="",
    )


""" Insert-if-absent """
class InsertIfAbsentTests(TestCase):

    def setUp(self):
        self.company, self.user = make_tenant()
        self.doc = make_document(self.company, "vendor_invoice", VENDOR_PAYLOAD)
        self.drafts = generate_journal_drafts(
            "vendor_invoice", VENDOR_PAYLOAD, journal_prefix=journal_prefix_for(self.doc), today=TODAY
        )

    def test_first_call_inserts_rows(self):
        created, inserted = JournalEntry.objects.insert_if_absent_for_document(
            self.doc, self.drafts, user=self.user
        )

        self.assertTrue(inserted)
        self.assertEqual(len(created), 2)
        self.assertEqual(JournalEntry.objects.for_document(self.doc).count(), 2)
        row = JournalEntry.objects.for_document(self.doc).get(journal_id=f"JE{self.doc.pk}_0_DR")
        self.assertEqual(row.company, self.company)
        self.assertEqual(row.created_by, self.user)
        self.assertEqual(row.debit_amount, Decimal("125000.00"))

    def test_second_call_is_a_no_op(self):
        JournalEntry.objects.insert_if_absent_for_document(self.doc, self.drafts)
        created, inserted = JournalEntry.objects.insert_if_absent_for_document(self.doc, self.drafts)

        self.assertFalse(inserted)
        self.assertEqual(created, [])
        self.assertEqual(JournalEntry.objects.for_document(self.doc).count(), 2)

    def test_unbalanced_batch_is_refused(self):
        drafts = [draft("X_0_DR", "5100", debit="10"), draft("X_0_CR", "2100", credit="9")]
        with self.assertRaises(UnbalancedJournalError):
            JournalEntry.objects.insert_if_absent_for_document(self.doc, drafts)
        self.assertFalse(JournalEntry.objects.exists())


""" Row rules """
class JournalEntryRowTests(TestCase):

    def setUp(self):
        self.company, self.user = make_tenant()

    def _manual(self, **kwargs):
        fields = {
            "company": self.company,
            "journal_id": "MAN_1",
            "date": TODAY,
            "account_code": "1000",
            "account_name": "Bank Account",
            "debit_amount": Decimal("10.00"),
        }
        fields.update(kwargs)
        return JournalEntry.objects.create(**fields)

    def test_rows_cannot_be_updated(self):
        entry = self._manual()
        entry.narration = "changed"
        with self.assertRaises(ValidationError):
            entry.save()

    def test_row_carries_one_side_only(self):
        with self.assertRaises(ValidationError):
            self._manual(credit_amount=Decimal("5.00"))

    def test_negative_amounts_rejected(self):
        with self.assertRaises(ValidationError):
            self._manual(debit_amount=Decimal("-1.00"))

    def test_account_code_must_be_four_digits(self):
        with self.assertRaises(ValidationError):
            self._manual(account_code="10A")

    def test_document_must_belong_to_same_company(self):
        other_company, _ = make_tenant(name="Other Co", username="bob")
        other_doc = make_document(other_company, "vendor_invoice", VENDOR_PAYLOAD)
        with self.assertRaises(ValidationError):
            self._manual(document=other_doc)

    def test_class_and_origin(self):
        entry = self._manual()
        self.assertEqual(entry.account_class.value, "asset")
        self.assertFalse(entry.is_generated)

    def test_totals_and_period_filter(self):
        self._manual(date=datetime.date(2025, 4, 10))
        self._manual(journal_id="MAN_2", account_code="4200", debit_amount=Decimal("0"),
                     credit_amount=Decimal("10.00"), date=datetime.date(2025, 4, 10))
        self._manual(journal_id="MAN_3", date=datetime.date(2024, 12, 31))

        qs = JournalEntry.objects.for_company(self.company)
        self.assertEqual(qs.totals(), (Decimal("20.00"), Decimal("10.00")))
        self.assertEqual(qs.in_period("Q1_2025").totals(), (Decimal("10.00"), Decimal("10.00")))
        self.assertEqual(qs.in_period("2024").count(), 1)
        self.assertEqual(qs.in_period("all").count(), 3)
        self.assertEqual(JournalEntry.objects.none().totals(), (Decimal("0.00"), Decimal("0.00")))


""" Generation for one document """
class GenerateForDocumentTests(TestCase):

    def setUp(self):
        self.company, self.user = make_tenant()

    def test_created_then_already_generated(self):
        doc = make_document(self.company, "vendor_invoice", VENDOR_PAYLOAD)

        result = generate_for_document(doc, user=self.user, today=TODAY)
        self.assertEqual(result.outcome, GenerationOutcome.CREATED)
        self.assertEqual(len(result.entries), 2)
        self.assertEqual(result.message, "Successfully generated 2 journal entries")
        self.assertTrue(doc.has_journal_entries)
        self.assertTrue(
            AuditLog.objects.filter(action="journal_generated", object_id=str(doc.pk), user=self.user).exists()
        )

        again = generate_for_document(doc, user=self.user, today=TODAY)
        self.assertEqual(again.outcome, GenerationOutcome.ALREADY_GENERATED)
        self.assertEqual(again.existing_count, 2)
        self.assertEqual(again.message, "Journal entries already exist for this document")
        self.assertEqual(JournalEntry.objects.for_document(doc).count(), 2)

    def test_document_without_data(self):
        doc = make_document(self.company, "vendor_invoice", None, status="uploaded")
        result = generate_for_document(doc)
        self.assertEqual(result.outcome, GenerationOutcome.NO_DATA)
        self.assertFalse(JournalEntry.objects.exists())

    def test_unsupported_type_yields_no_entries(self):
        doc = make_document(self.company, "salary_register", {"employees": [{"basicSalary": 10}]})
        result = generate_for_document(doc)
        self.assertEqual(result.outcome, GenerationOutcome.NO_ENTRIES)
        self.assertEqual(result.message, "No journal entries could be generated from this document")

    def test_long_customer_name_fits_the_entity_column(self):
        doc = make_document(
            self.company, "sales_register", {"sales": [{"totalAmount": 100, "customerName": "C" * 250}]}
        )
        result = generate_for_document(doc, today=TODAY)

        self.assertEqual(result.outcome, GenerationOutcome.CREATED)
        for entry in JournalEntry.objects.for_document(doc):
            self.assertEqual(len(entry.entity), JournalEntry._meta.get_field("entity").max_length)

    def test_bank_deposit(self):
        doc = make_document(
            self.company, "bank_statement",
            {"transactions": [{"debit": 0, "credit": 50000, "description": "Deposit"}]},
        )
        result = generate_for_document(doc, today=TODAY)
        codes = [(e.account_code, e.debit_amount, e.credit_amount) for e in result.entries]
        self.assertEqual(
            codes,
            [("1000", Decimal("50000.00"), Decimal("0.00")), ("4200", Decimal("0.00"), Decimal("50000.00"))],
        )


""" Generation for a company """
class GenerateForCompanyTests(TestCase):

    def setUp(self):
        self.company, self.user = make_tenant()
        self.vendor = make_document(self.company, "vendor_invoice", VENDOR_PAYLOAD)
        self.sales = make_document(self.company, "sales_register", {"sales": [{"totalAmount": 2360}]})
        self.salary = make_document(self.company, "salary_register", {"employees": []})

    def test_batch_processes_source_documents_and_stores_summary(self):
        summary = generate_for_company(self.company, user=self.user, today=TODAY)

        self.assertEqual(summary.processed, 2)
        self.assertEqual(summary.skipped, 0)
        self.assertEqual(summary.failed, 0)
        self.assertEqual(len(summary.entries), 4)
        self.assertEqual(summary.message, "Successfully generated 4 journal entries from 2 documents")

        journal_doc = summary.journal_document
        self.assertIsNotNone(journal_doc)
        self.assertEqual(journal_doc.document_type, "journal")
        self.assertEqual(journal_doc.extracted_data["totalEntries"], 4)
        self.assertTrue(journal_doc.extracted_data["summary"]["balanceCheck"])
        self.assertEqual(
            [src["documentId"] for src in journal_doc.extracted_data["sourceDocuments"]],
            [self.vendor.pk, self.sales.pk],
        )
        self.assertTrue(AuditLog.objects.filter(action="journal_batch_generated").exists())

    def test_second_run_skips_everything(self):
        generate_for_company(self.company, today=TODAY)
        documents_before = Document.objects.count()

        summary = generate_for_company(self.company, today=TODAY)

        self.assertEqual(summary.processed, 0)
        self.assertEqual(summary.skipped, 2)
        self.assertEqual(summary.entries, [])
        self.assertIsNone(summary.journal_document)
        self.assertEqual(Document.objects.count(), documents_before)
        self.assertEqual(
            summary.message, "No new journal entries generated. 2 documents already have journal entries"
        )

    def test_document_ids_limit_the_batch(self):
        summary = generate_for_company(self.company, document_ids=[self.sales.pk], today=TODAY)
        self.assertEqual(summary.processed, 1)
        self.assertFalse(JournalEntry.objects.for_document(self.vendor).exists())

    def test_document_ids_are_checked(self):
        self.assertIsNone(clean_document_ids(None))
        self.assertIsNone(clean_document_ids([]))
        self.assertEqual(clean_document_ids([3, 4]), [3, 4])
        for bad in (5, "7", ["abc"], [1.5], [False], {"id": 1}):
            with self.assertRaises(ValidationError):
                clean_document_ids(bad)

    def test_other_company_documents_are_ignored(self):
        other_company, _ = make_tenant(name="Other Co", username="bob")
        other_doc = make_document(other_company, "vendor_invoice", VENDOR_PAYLOAD)

        generate_for_company(self.company, document_ids=[other_doc.pk], today=TODAY)

        self.assertFalse(JournalEntry.objects.for_document(other_doc).exists())

    def test_failure_on_one_document_does_not_stop_the_batch(self):
        broken = make_document(self.company, "bank_statement", {"transactions": [{"credit": 5}]})

        def generate(document_type, extracted_data, **kwargs):
            if document_type == "bank_statement":
                raise RuntimeError("boom")
            return generate_journal_drafts(document_type, extracted_data, **kwargs)

        with mock.patch("books_core.services.journals.generate_journal_drafts", side_effect=generate):
            summary = generate_for_company(self.company, today=TODAY)

        self.assertEqual(summary.failed, 1)
        self.assertEqual(summary.processed, 2)
        self.assertFalse(JournalEntry.objects.for_document(broken).exists())
        self.assertTrue(JournalEntry.objects.for_document(self.vendor).exists())


""" Deletes """
class DeleteEntriesTests(TestCase):

    def setUp(self):
        self.company, self.user = make_tenant()
        self.doc = make_document(self.company, "vendor_invoice", VENDOR_PAYLOAD)
        generate_for_document(self.doc, today=TODAY)
        self.manual = JournalEntry.objects.create(
            company=self.company,
            journal_id="MAN_1",
            date=TODAY,
            account_code="3000",
            account_name="Owner Capital",
            credit_amount=Decimal("100.00"),
        )

    def test_delete_document_entries_allows_regeneration(self):
        deleted = delete_document_entries(self.doc, user=self.user)

        self.assertEqual(deleted, 2)
        self.assertFalse(self.doc.has_journal_entries)
        self.assertTrue(AuditLog.objects.filter(action="journal_entries_deleted").exists())
        self.assertEqual(generate_for_document(self.doc, today=TODAY).outcome, GenerationOutcome.CREATED)

    def test_delete_generated_keeps_manual_rows(self):
        deleted = delete_generated_entries(self.company, user=self.user)

        self.assertEqual(deleted, 2)
        self.assertEqual(list(JournalEntry.objects.for_company(self.company)), [self.manual])
        log = AuditLog.objects.get(action="generated_entries_deleted")
        self.assertEqual(log.object_id, "*")
        self.assertEqual(log.changes, {"deleted": 2})

    def test_delete_single_entry(self):
        delete_entry(self.manual, user=self.user)
        self.assertFalse(JournalEntry.objects.filter(journal_id="MAN_1").exists())
        log = AuditLog.objects.get(action="journal_entry_deleted")
        self.assertEqual(log.changes["journalId"], "MAN_1")

    def test_deleting_document_removes_its_entries(self):
        self.doc.delete()
        self.assertEqual(JournalEntry.objects.for_company(self.company).count(), 1)


""" Document lock """
class DocumentLockTests(TestCase):

    def setUp(self):
        self.company, _ = make_tenant()
        self.doc = make_document(self.company, "vendor_invoice", VENDOR_PAYLOAD)

    def test_payload_editable_before_generation(self):
        self.doc.extracted_data = {"invoices": [{"amount": 1}]}
        self.doc.save()
        self.doc.refresh_from_db()
        self.assertEqual(self.doc.extracted_data, {"invoices": [{"amount": 1}]})

    def test_type_and_payload_frozen_after_generation(self):
        generate_for_document(self.doc, today=TODAY)

        self.doc.document_type = "purchase_register"
        with self.assertRaises(DocumentLockedError):
            self.doc.save()

        self.doc.refresh_from_db()
        self.doc.extracted_data = {"invoices": []}
        with self.assertRaises(DocumentLockedError):
            self.doc.save()

    def test_other_fields_stay_editable(self):
        generate_for_document(self.doc, today=TODAY)
        self.doc.original_name = "renamed.xlsx"
        self.doc.save()
        self.doc.refresh_from_db()
        self.assertEqual(self.doc.original_name, "renamed.xlsx")

    def test_status_transitions(self):
        doc = make_document(self.company, "other", None, status="uploaded")
        doc.mark_classified("bank_statement")
        self.assertEqual(doc.status, "classified")
        doc.mark_extracted({"transactions": []})
        self.assertEqual(doc.status, "extracted")
        with self.assertRaises(ValidationError):
            doc.transition_to("classified")
        with self.assertRaises(ValidationError):
            make_document(self.company, "other", None, status="uploaded").mark_classified("nonsense")
