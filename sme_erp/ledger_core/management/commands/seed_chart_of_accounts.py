from django.core.management.base import BaseCommand, CommandError

from ledger_core.models import Company
from ledger_core.services.chart_tt133 import install_tt133_chart


class Command(BaseCommand):
    help = "Install the TT133 chart of accounts for a company (idempotent)."

    # Define command-line argument
    def add_arguments(self, parser):
        parser.add_argument(
            "--company",  # Define flag
            required=True,
            help="Slug of the company to seed.",
        )

    def handle(self, *args, **options):
        slug = options["company"]  # Read argument from add_arguments()
        company = Company.objects.filter(slug=slug).first()
        if company is None:
            raise CommandError(f"Company '{slug}' not found")

        self.stdout.write(self.style.NOTICE(
            f"Seeding chart of accounts for {company.name}..."))
        created = install_tt133_chart(company)
        self.stdout.write(self.style.SUCCESS(
            f"{len(created)} accounts created."))
