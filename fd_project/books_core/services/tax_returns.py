"""
GST and TDS returns built from extracted documents.

Only what the documents contain is reported; nothing is invented when a
company has no matching documents (the summaries are simply zero).
"""
from decimal import ROUND_HALF_UP, Decimal

from ..models import Document
from .generation import first_amount, to_amount

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
GST_RATE = Decimal("0.18")
DEFAULT_TDS_SECTION = "194A"


def _q(value):
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _records(company, document_types, key):
    """Every dict under `key` in the company's extracted documents of the given types."""
    docs = (
        Document.objects.for_company(company)
        .filter(document_type__in=document_types)
        .exclude(extracted_data__isnull=True)
        .order_by("created_at", "id")
    )
    for doc in docs:
        data = doc.extracted_data
        if not isinstance(data, dict):
            continue
        records = data.get(key)
        if not isinstance(records, list):
            continue
        for record in records:
            if isinstance(record, dict):
                yield doc, record


# ---------- GSTR-2A (inward supplies) ----------
def gstr_2a(company, period=None):
    invoices = []
    totals = {"taxableValue": ZERO, "cgst": ZERO, "sgst": ZERO, "igst": ZERO, "totalTax": ZERO}

    for doc, inv in _records(company, ("vendor_invoice", "purchase_register"), "invoices"):
        row = {
            "gstin": inv.get("gstin") or "",
            "supplierName": inv.get("vendorName") or "Unknown Vendor",
            "invoiceNumber": inv.get("invoiceNumber") or "N/A",
            "invoiceDate": inv.get("invoiceDate") or "",
            "invoiceValue": first_amount(inv, "invoiceValue", "totalAmount", "amount"),
            "taxableValue": to_amount(inv.get("taxableValue")),
            "cgst": to_amount(inv.get("cgst")),
            "sgst": to_amount(inv.get("sgst")),
            "igst": to_amount(inv.get("igst")),
            "totalTax": to_amount(inv.get("totalTax")),
            "documentId": doc.pk,
        }
        invoices.append(row)
        for key in totals:
            totals[key] += row[key]

    return {
        "gstin": company.gstin,
        "period": period,
        "invoices": invoices,
        "summary": {
            "totalInvoices": len(invoices),
            "totalTaxableValue": totals["taxableValue"],
            "totalCgst": totals["cgst"],
            "totalSgst": totals["sgst"],
            "totalIgst": totals["igst"],
            "totalTax": totals["totalTax"],
        },
    }


# ---------- GSTR-3B (monthly summary) ----------
def _split_gst(total):
    # amounts are tax-inclusive at 18%
    taxable = _q(total / (1 + GST_RATE))
    return taxable, total - taxable


def gstr_3b(company, period=None):
    outward_total = sum(
        (first_amount(sale, "totalAmount", "amount")
         for _, sale in _records(company, ("sales_register",), "sales")),
        ZERO,
    )
    inward_total = sum(
        (first_amount(inv, "invoiceValue", "amount")
         for _, inv in _records(company, ("vendor_invoice", "purchase_register"), "invoices")),
        ZERO,
    )

    outward_taxable, outward_tax = _split_gst(outward_total)
    inward_taxable, inward_tax = _split_gst(inward_total)

    return {
        "gstin": company.gstin,
        "period": period,
        "outwardSupplies": {
            "totalValue": outward_total,
            "taxableValue": outward_taxable,
            "totalTax": outward_tax,
        },
        "inwardSupplies": {
            "totalValue": inward_total,
            "taxableValue": inward_taxable,
            "inputTaxCredit": inward_tax,
        },
        "netTaxLiability": max(ZERO, outward_tax - inward_tax),
    }


# ---------- Form 26Q (TDS on non-salary payments) ----------
def form_26q(company, period=None):
    deductions = []
    total_tds = ZERO
    total_amount = ZERO

    for index, (doc, emp) in enumerate(
        _records(company, ("salary_register",), "employees"), start=1
    ):
        tds = to_amount(emp.get("tdsDeducted"))
        if tds <= 0:
            continue
        gross = first_amount(emp, "grossSalary", "basicSalary")
        deductions.append(
            {
                "deducteeName": emp.get("employeeName") or "Unknown",
                "deducteeId": emp.get("employeeId") or "",
                "pan": emp.get("pan") or "",
                "deducteeType": emp.get("deducteeType") or "Individual",
                "sectionCode": emp.get("sectionCode") or DEFAULT_TDS_SECTION,
                "amountPaid": gross,
                "tdsAmount": tds,
                "challanNumber": emp.get("challanNumber") or f"BSR{index:03d}",
                "documentId": doc.pk,
            }
        )
        total_tds += tds
        total_amount += gross

    return {
        "tan": company.tan,
        "period": period,
        "deductions": deductions,
        "summary": {
            "totalDeductions": len(deductions),
            "totalDeductees": len({d["deducteeId"] or d["deducteeName"] for d in deductions}),
            "totalAmountPaid": total_amount,
            "totalTDS": total_tds,
        },
    }

