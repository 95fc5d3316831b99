import datetime
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from books_core.models import FinancialStatement, JournalEntry
from books_core.services.depreciate import asset_depreciation, depreciation_schedule
from books_core.services.journals import generate_for_company
from books_core.services.reporting import ensure_core_statements, generate_statement, period_label
from books_core.services.tax_returns import form_26q, gstr_2a, gstr_3b
from books_core.tasks import generate_company_journals, generate_company_statements

from .utils import make_document, make_tenant

TODAY = datetime.date(2025, 7, 1)


""" Ledger statements """
class GenerateStatementTests(TestCase):

    def setUp(self):
        self.company, self.user = make_tenant()
        make_document(
            self.company, "vendor_invoice",
            {"invoices": [{"amount": 1000, "invoiceDate": "2025-04-10"}]},
        )
        make_document(
            self.company, "sales_register",
            {"sales": [{"totalAmount": 2500, "saleDate": "2025-05-02"}]},
        )
        generate_for_company(self.company, today=TODAY)

    def test_trial_balance_carries_text_fields(self):
        statement = generate_statement(self.company, "trial_balance", "Q1_2025", user=self.user)

        self.assertEqual(statement.period, "Q1_2025")
        self.assertTrue(statement.is_valid)
        self.assertEqual(statement.generated_by, self.user)
        data = statement.data
        self.assertEqual(data["totalDebits"], Decimal("3500.00"))
        self.assertEqual(data["totalDebitsText"], "Rs 3,500")
        self.assertEqual(data["entries"][0]["accountCode"], "5100")
        self.assertEqual(data["entries"][0]["debitBalanceText"], "Rs 1,000")

    def test_profit_and_loss(self):
        data = generate_statement(self.company, "profit_loss").data
        self.assertEqual(data["totalRevenue"], Decimal("2500.00"))
        self.assertEqual(data["totalExpenses"], Decimal("1000.00"))
        self.assertEqual(data["netProfit"], Decimal("1500.00"))

    def test_balance_sheet_from_generated_entries(self):
        statement = generate_statement(self.company, "balance_sheet")
        data = statement.data
        self.assertEqual([line["accountCode"] for line in data["assets"]], ["1200"])
        self.assertEqual([line["accountCode"] for line in data["liabilities"]], ["2100"])
        # revenue and expense stay off the balance sheet, so it does not balance here
        self.assertFalse(statement.is_valid)

    def test_period_outside_entries_gives_empty_statement(self):
        data = generate_statement(self.company, "trial_balance", "2023").data
        self.assertEqual(data["entries"], [])
        self.assertTrue(data["isBalanced"])

    def test_each_call_stores_a_new_row(self):
        generate_statement(self.company, "trial_balance")
        generate_statement(self.company, "trial_balance")
        self.assertEqual(FinancialStatement.objects.for_company(self.company).count(), 2)

    def test_unknown_type_and_bad_period(self):
        with self.assertRaises(ValidationError):
            generate_statement(self.company, "cash_flow")
        with self.assertRaises(ValidationError):
            generate_statement(self.company, "trial_balance", "Q5_2025")

    def test_ensure_core_statements_runs_once_per_period(self):
        created = ensure_core_statements(self.company, "2025")
        self.assertEqual(
            [s.statement_type for s in created], ["trial_balance", "profit_loss", "balance_sheet"]
        )
        self.assertEqual(ensure_core_statements(self.company, "2025"), [])
        # no entries in 2023, nothing to build
        self.assertEqual(ensure_core_statements(self.company, "2023"), [])


@override_settings(BOOKS_DEFAULT_PERIOD="FY2025-26")
def test_period_label_uses_default_setting():
    assert period_label(None) == "FY2025-26"
    assert period_label("all") == "all"
    assert period_label(" q2_2025 ") == "Q2_2025"


""" Tax returns """
class TaxReturnTests(TestCase):

    def setUp(self):
        self.company, _ = make_tenant()
        self.company.gstin = "27AABCT1234F1Z5"
        self.company.tan = "MUMT12345A"
        self.company.save()

    def test_empty_company_returns_zero_summaries(self):
        self.assertEqual(gstr_2a(self.company)["summary"]["totalInvoices"], 0)
        self.assertEqual(gstr_3b(self.company)["netTaxLiability"], Decimal("0.00"))
        self.assertEqual(form_26q(self.company)["deductions"], [])
        self.assertEqual(depreciation_schedule(self.company)["assets"], [])

    def test_gstr_2a_reads_vendor_invoices(self):
        make_document(self.company, "vendor_invoice", {"invoices": [
            {"invoiceNumber": "A-1", "vendorName": "ABC", "taxableValue": 1000, "cgst": 90, "sgst": 90,
             "totalTax": 180, "invoiceValue": 1180, "gstin": "29AAA"},
            {"invoiceNumber": "A-2", "taxableValue": 500, "igst": 90, "totalTax": 90, "amount": 590},
        ]})
        make_document(self.company, "sales_register", {"invoices": [{"taxableValue": 99999}]})

        result = gstr_2a(self.company, "Q1_2025")

        self.assertEqual(result["gstin"], "27AABCT1234F1Z5")
        self.assertEqual(result["period"], "Q1_2025")
        self.assertEqual([inv["invoiceNumber"] for inv in result["invoices"]], ["A-1", "A-2"])
        self.assertEqual(result["invoices"][1]["supplierName"], "Unknown Vendor")
        self.assertEqual(result["invoices"][1]["invoiceValue"], Decimal("590.00"))
        summary = result["summary"]
        self.assertEqual(summary["totalInvoices"], 2)
        self.assertEqual(summary["totalTaxableValue"], Decimal("1500.00"))
        self.assertEqual(summary["totalCgst"], Decimal("90.00"))
        self.assertEqual(summary["totalIgst"], Decimal("90.00"))
        self.assertEqual(summary["totalTax"], Decimal("270.00"))

    def test_gstr_3b_splits_inclusive_totals(self):
        make_document(self.company, "sales_register", {"sales": [{"totalAmount": 236000}]})
        make_document(self.company, "vendor_invoice", {"invoices": [{"invoiceValue": 118000}]})

        result = gstr_3b(self.company)

        self.assertEqual(result["outwardSupplies"]["taxableValue"], Decimal("200000.00"))
        self.assertEqual(result["outwardSupplies"]["totalTax"], Decimal("36000.00"))
        self.assertEqual(result["inwardSupplies"]["inputTaxCredit"], Decimal("18000.00"))
        self.assertEqual(result["netTaxLiability"], Decimal("18000.00"))

    def test_gstr_3b_liability_never_negative(self):
        make_document(self.company, "vendor_invoice", {"invoices": [{"amount": 1180}]})
        self.assertEqual(gstr_3b(self.company)["netTaxLiability"], Decimal("0.00"))

    def test_form_26q_lists_employees_with_tds(self):
        make_document(self.company, "salary_register", {"employees": [
            {"employeeId": "E001", "employeeName": "Asha", "basicSalary": 85000, "tdsDeducted": 8500},
            {"employeeId": "E002", "employeeName": "Ravi", "basicSalary": 30000, "tdsDeducted": 0},
            {"employeeId": "E003", "employeeName": "Meera", "grossSalary": 70000, "basicSalary": 50000,
             "tdsDeducted": 4200, "sectionCode": "192"},
        ]})

        result = form_26q(self.company)

        self.assertEqual(result["tan"], "MUMT12345A")
        self.assertEqual([d["deducteeName"] for d in result["deductions"]], ["Asha", "Meera"])
        self.assertEqual(result["deductions"][0]["sectionCode"], "194A")
        self.assertEqual(result["deductions"][1]["sectionCode"], "192")
        self.assertEqual(result["deductions"][1]["amountPaid"], Decimal("70000.00"))
        self.assertEqual(result["summary"]["totalTDS"], Decimal("12700.00"))
        self.assertEqual(result["summary"]["totalAmountPaid"], Decimal("155000.00"))
        self.assertEqual(result["summary"]["totalDeductees"], 2)

    def test_depreciation_schedule(self):
        make_document(self.company, "fixed_asset_register", {"assets": [
            {"assetCode": "FA-01", "cost": 950000, "depreciationRate": 15, "yearsInUse": 2},
            {"assetCode": "FA-02", "cost": 240000, "depreciationRate": 40, "yearsInUse": 3},
        ]})

        result = depreciation_schedule(self.company)

        van, laptops = result["assets"]
        self.assertEqual(van["yearlyDepreciation"], Decimal("142500.00"))
        self.assertEqual(van["accumulatedDepreciation"], Decimal("285000.00"))
        self.assertEqual(van["netBookValue"], Decimal("665000.00"))
        # 3 years at 40% would exceed cost
        self.assertEqual(laptops["accumulatedDepreciation"], Decimal("240000.00"))
        self.assertEqual(laptops["netBookValue"], Decimal("0.00"))
        self.assertEqual(result["summary"]["totalCost"], Decimal("1190000.00"))
        self.assertEqual(result["summary"]["netBookValue"], Decimal("665000.00"))

    def test_scalar_payload_values_are_skipped(self):
        make_document(self.company, "sales_register", {"sales": 5})
        make_document(self.company, "vendor_invoice", {"invoices": "n/a"})
        make_document(self.company, "salary_register", {"employees": {"tdsDeducted": 10}})
        make_document(self.company, "fixed_asset_register", {"assets": 3})

        statement = generate_statement(self.company, "gstr_3b")

        self.assertEqual(statement.data["netTaxLiability"], Decimal("0.00"))
        self.assertEqual(gstr_2a(self.company)["invoices"], [])
        self.assertEqual(form_26q(self.company)["deductions"], [])
        self.assertEqual(depreciation_schedule(self.company)["assets"], [])

    def test_statement_rows_for_documents(self):
        make_document(self.company, "salary_register", {"employees": [{"tdsDeducted": 10, "basicSalary": 100}]})
        statement = generate_statement(self.company, "form_26q", "Q1_2025")
        self.assertTrue(statement.is_valid)
        self.assertEqual(statement.data["summary"]["totalDeductions"], 1)


def test_asset_defaults():
    row = asset_depreciation({"cost": "1,00,000"})
    assert row["depreciationRate"] == Decimal("10")
    assert row["yearsInUse"] == Decimal("1")
    assert row["accumulatedDepreciation"] == Decimal("10000.00")
    assert row["assetCode"] == "N/A"
    assert row["category"] == "Others"
    assert row["method"] == "SLM"


""" Celery tasks """
@pytest.mark.django_db
def test_tasks_run_generation_and_statements():
    company, user = make_tenant()
    make_document(company, "bank_statement", {"transactions": [{"date": "2025-04-02", "credit": 500}]})

    result = generate_company_journals.delay(company.pk, user.pk).get()
    assert result["processedDocuments"] == 1
    assert result["createdEntries"] == 2
    assert JournalEntry.objects.for_company(company).count() == 2

    pks = generate_company_statements.delay(company.pk, "2025").get()
    assert len(pks) == 3
    assert set(
        FinancialStatement.objects.filter(pk__in=pks).values_list("statement_type", flat=True)
    ) == {"trial_balance", "profit_loss", "balance_sheet"}
