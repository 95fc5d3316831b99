from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.crypto import get_random_string
from django.utils.text import slugify

from books_core.models import Company, Document, EntityMembership

User = get_user_model()

# One extracted document per type the books understand
SAMPLE_DOCUMENTS = [
    (
        "vendor_invoices_q1.xlsx",
        "vendor_invoice",
        {
            "invoices": [
                {"invoiceNumber": "ABC-001", "vendorName": "ABC Corp", "invoiceDate": "2025-04-12",
                 "amount": 125000, "taxableValue": 105932.20, "totalTax": 19067.80,
                 "invoiceValue": 125000, "gstin": "27AABCA1234F1Z5"},
                {"invoiceNumber": "XYZ-114", "vendorName": "XYZ Supplies", "invoiceDate": "2025-05-03",
                 "amount": 47200, "taxableValue": 40000, "totalTax": 7200,
                 "invoiceValue": 47200, "gstin": "29AAFCX9876K1Z2"},
            ]
        },
    ),
    (
        "sales_register_q1.xlsx",
        "sales_register",
        {
            "sales": [
                {"invoiceNumber": "INV-1001", "customerName": "Acme Retail", "saleDate": "2025-04-20",
                 "totalAmount": 236000},
                {"invoiceNumber": "INV-1002", "customerName": "Globex Traders", "saleDate": "2025-06-02",
                 "totalAmount": 94400},
            ]
        },
    ),
    (
        "purchase_register_q1.xlsx",
        "purchase_register",
        {
            "purchases": [
                {"purchaseOrder": "PO-7781", "vendorName": "Steel Mart", "purchaseDate": "2025-04-28",
                 "amount": 88500},
            ]
        },
    ),
    (
        "bank_statement_apr.pdf",
        "bank_statement",
        {
            "transactions": [
                {"date": "2025-04-05", "description": "Bank charges", "debit": 1180, "credit": 0},
                {"date": "2025-04-18", "description": "Interest credit", "debit": 0, "credit": 5400},
            ]
        },
    ),
    (
        "salary_register_apr.xlsx",
        "salary_register",
        {
            "employees": [
                {"employeeId": "E001", "employeeName": "Asha Rao", "department": "Finance",
                 "basicSalary": 85000, "tdsDeducted": 8500, "netSalary": 76500},
                {"employeeId": "E002", "employeeName": "Vikram Shah", "department": "Sales",
                 "basicSalary": 62000, "tdsDeducted": 4200, "netSalary": 57800},
            ]
        },
    ),
    (
        "fixed_asset_register.xlsx",
        "fixed_asset_register",
        {
            "assets": [
                {"assetCode": "FA-01", "assetName": "Delivery Van", "category": "Vehicles",
                 "cost": 950000, "depreciationRate": 15, "yearsInUse": 2},
                {"assetCode": "FA-02", "assetName": "Laptops", "category": "Computers",
                 "cost": 240000, "depreciationRate": 40, "yearsInUse": 1},
            ]
        },
    ),
]


class Command(BaseCommand):
    help = "Create a demo tenant (company), user, membership and sample extracted documents."

    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",
            default="Demo Company",
            help="Name of the demo company to create.",
        )
        parser.add_argument(
            "--username", default="demo", help="Username for the demo user."
        )
        parser.add_argument(
            "--password",
            default=None,
            help="Password for the demo user (random when omitted).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        company_name = options["company_name"]
        username = options["username"]

        # 1. Company, with a unique slug ("demo-company", "demo-company-1", ...)
        company = Company.objects.filter(name=company_name).first()
        if company is None:
            company = Company.objects.create(
                name=company_name, slug=self.unique_slug_for_company(company_name)
            )
        self.stdout.write(self.style.SUCCESS(f"Company: {company} ({company.slug})"))

        # 2. User
        user, created = User.objects.get_or_create(
            username=username, defaults={"email": f"{username}@example.com"}
        )
        if created:
            password = options["password"] or get_random_string(16)
            user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f"Created user: {user.username} (pw={password})"))
        else:
            self.stdout.write(self.style.WARNING(f"Reusing user: {user.username}"))

        # 3. Membership, then make it the default company
        EntityMembership.objects.get_or_create(
            user=user, company=company, defaults={"role": "owner"}
        )
        if user.default_company_id != company.pk:
            user.default_company = company
            user.save(update_fields=["default_company"])
        if company.owner_id is None:
            company.owner = user
            company.save(update_fields=["owner"])

        # 4. Sample documents, already extracted
        added = 0
        for file_name, document_type, payload in SAMPLE_DOCUMENTS:
            _, doc_created = Document.objects.get_or_create(
                company=company,
                file_name=file_name,
                defaults={
                    "original_name": file_name,
                    "document_type": document_type,
                    "status": "extracted",
                    "extracted_data": payload,
                    "uploaded_by": user,
                },
            )
            added += int(doc_created)
        self.stdout.write(self.style.SUCCESS(f"Created {added} sample documents"))
        self.stdout.write(self.style.SUCCESS("Demo tenant setup complete!"))

    def unique_slug_for_company(self, name, max_tries=100):
        base = slugify(name) or "company"
        slug = base
        i = 1
        while Company.objects.filter(slug=slug).exists():
            slug = f"{base}-{i}"
            i += 1
            if i > max_tries:
                raise CommandError("Couldn't generate unique slug")
        return slug
