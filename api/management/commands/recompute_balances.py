from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from backend.ledger.models import Account
from backend.services.account_service import AccountService


class Command(BaseCommand):
    help = "Compare every cached account balance with the sum of its transactions and optionally repair drift"

    def add_arguments(self, parser):
        parser.add_argument(
            '--user',
            help='Only check accounts of this username'
        )
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Apply the drift to inconsistent balances instead of only reporting it'
        )

    def handle(self, *args, **options):
        user = None
        if options.get('user'):
            try:
                user = get_user_model().objects.get(username=options['user'])
            except get_user_model().DoesNotExist:
                raise CommandError(f"User '{options['user']}' does not exist")

        service = AccountService()
        audits = service.audit_balances(user)
        inconsistent = [a for a in audits if not a.consistent]

        for audit in inconsistent:
            self.stdout.write(self.style.WARNING(
                f"Account id={audit.account_id} ({audit.name}) stores {audit.stored}, "
                f"transactions sum to {audit.expected} (drift {audit.drift})"
            ))
            if options.get('fix'):
                applied = service.repair_balance(Account.objects.get(pk=audit.account_id))
                self.stdout.write(f"  applied {applied}")

        self.stdout.write(self.style.SUCCESS(
            f"Checked {len(audits)} accounts. Found {len(inconsistent)} inconsistent balances."
        ))
