from io import StringIO

from django.core.management import call_command
from django.db.migrations.loader import MigrationLoader
from django.test import TestCase, override_settings


# Test settings build tables straight from the models; read the real
# migration package here
@override_settings(MIGRATION_MODULES={})
class MigrationTests(TestCase):

    def test_initial_migration_is_on_disk(self):
        loader = MigrationLoader(None, ignore_no_migrations=True)
        self.assertIn(("ledger_core", "0001_initial"), loader.disk_migrations)
        self.assertNotIn("ledger_core", loader.unmigrated_apps)

    def test_models_have_no_unmigrated_changes(self):
        out = StringIO()
        # --check exits non-zero when a model change lacks a migration
        call_command(
            "makemigrations", "ledger_core", check=True, dry_run=True, stdout=out)
        self.assertIn("No changes detected", out.getvalue())
