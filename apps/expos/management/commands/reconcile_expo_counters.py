import logging
import uuid

from django.core.management.base import BaseCommand, CommandError

from apps.expos.models import Expo

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Recompute expo and session counters from the per-entity states"

    def add_arguments(self, parser):
        parser.add_argument(
            "--expo",
            help="Only reconcile the expo with this id",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report the drift without repairing it",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No changes will be made"))

        expos = Expo.objects.order_by("created_at")
        if options["expo"]:
            try:
                expo_id = uuid.UUID(options["expo"])
            except ValueError:
                raise CommandError(f"Invalid expo id: {options['expo']}")
            expos = expos.filter(pk=expo_id)
            if not expos.exists():
                raise CommandError(f"Expo {options['expo']} does not exist")

        drifted = 0
        for expo in expos.iterator():
            report = expo.recompute_counters(commit=not dry_run)
            if not (report["drift"] or report["sessions"] or report["links"]):
                continue

            drifted += 1
            self.stdout.write(f"Expo {expo.pk} ({expo.title}):")
            for field, values in report["drift"].items():
                self.stdout.write(
                    f"  {field}: stored={values['stored']} actual={values['actual']}"
                )
            for session in report["sessions"]:
                self.stdout.write(
                    f"  session {session['session']}: "
                    f"stored={session['stored']} actual={session['actual']}"
                )
            for link in report["links"]:
                self.stdout.write(
                    f"  booth {link['booth']} / exhibitor {link['exhibitor']}: {link['fix']}"
                )

        action = "would be repaired" if dry_run else "repaired"
        logger.info(f"Counter reconciliation finished: {drifted} expos {action}")
        self.stdout.write(self.style.SUCCESS(f"{drifted} expos {action}"))
