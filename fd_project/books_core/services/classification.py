import os

# first keyword found in the file name wins; generic ones come last
FILENAME_KEYWORDS = (
    (("salary", "payroll"), "salary_register"),
    (("purchase", "procurement"), "purchase_register"),
    (("fixed_asset", "fixed-asset", "asset_register", "depreciation"), "fixed_asset_register"),
    (("bank", "statement"), "bank_statement"),
    (("vendor", "invoice"), "vendor_invoice"),
    (("sales", "register"), "sales_register"),
)


def infer_document_type(filename) -> str:
    """Guess a document type from its file name; 'other' when nothing matches."""
    name = os.path.basename(filename or "").lower()
    for keywords, document_type in FILENAME_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return document_type
    return "other"


def classify_document(document):
    """Assign the inferred type to an uploaded document and move it to 'classified'."""
    document_type = infer_document_type(document.original_name or document.file_name)
    document.mark_classified(document_type)
    return document_type
