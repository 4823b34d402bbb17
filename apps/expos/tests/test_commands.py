from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from ..models import Expo
from .base import create_booth, create_exhibitor, create_expo, create_user


class ReconcileExpoCountersCommandTests(TestCase):
    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer)
        self.other = create_expo(self.organizer, title="Other Expo")
        exhibitor = create_exhibitor(create_user("acme", role="exhibitor"), self.expo)
        create_booth(self.expo).book(exhibitor)

    def run_command(self, *args):
        out = StringIO()
        call_command("reconcile_expo_counters", *args, stdout=out)
        return out.getvalue()

    def test_reports_nothing_when_in_sync(self):
        """Test a consistent database needs no repairs."""
        output = self.run_command()

        self.assertIn("0 expos repaired", output)

    def test_repairs_drifted_expos(self):
        """Test drifted counters are rebuilt and listed."""
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=3)
        Expo.objects.filter(pk=self.other.pk).update(attendees_count=2)

        output = self.run_command()

        self.assertIn("booked_booths: stored=3 actual=1", output)
        self.assertIn("2 expos repaired", output)
        self.assertEqual(Expo.objects.get(pk=self.expo.pk).booked_booths, 1)
        self.assertEqual(Expo.objects.get(pk=self.other.pk).attendees_count, 0)

    def test_dry_run(self):
        """Test --dry-run reports without writing."""
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=3)

        output = self.run_command("--dry-run")

        self.assertIn("DRY RUN MODE", output)
        self.assertIn("1 expos would be repaired", output)
        self.assertEqual(Expo.objects.get(pk=self.expo.pk).booked_booths, 3)

    def test_single_expo(self):
        """Test --expo limits reconciliation to one expo."""
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=3)
        Expo.objects.filter(pk=self.other.pk).update(attendees_count=2)

        self.run_command("--expo", str(self.other.pk))

        self.assertEqual(Expo.objects.get(pk=self.expo.pk).booked_booths, 3)
        self.assertEqual(Expo.objects.get(pk=self.other.pk).attendees_count, 0)

    def test_unknown_expo(self):
        """Test an unknown or malformed expo id is a command error."""
        with self.assertRaises(CommandError):
            self.run_command("--expo", "not-a-uuid")
        with self.assertRaises(CommandError):
            self.run_command("--expo", "00000000-0000-0000-0000-000000000000")
