from django.core.management import call_command
from django.core.management.base import BaseCommand

from books_core.models import Company
from books_core.services.journals import generate_for_company
from books_core.services.reporting import ensure_core_statements


class Command(BaseCommand):
    help = "Seeds the database with demo data (wraps create_demo_tenant)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--company",
            type=str,
            default="Demo Ltd",
            help="Name of the demo company (default: Demo Ltd)",
        )
        parser.add_argument(
            "--generate",
            action="store_true",
            help="Also generate journal entries and core statements.",
        )

    def handle(self, *args, **options):
        com_name = options["company"]

        self.stdout.write(self.style.NOTICE(f"Seeding demo data for {com_name}..."))
        call_command("create_demo_tenant", company_name=com_name, stdout=self.stdout)

        if options["generate"]:
            company = Company.objects.get(name=com_name)
            summary = generate_for_company(company)
            self.stdout.write(summary.message)
            statements = ensure_core_statements(company)
            self.stdout.write(f"Generated {len(statements)} statements")

        self.stdout.write(self.style.SUCCESS("Demo data seeded successfully!"))
