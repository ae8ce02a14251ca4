from django.core.management.base import BaseCommand, CommandError

from apps.pricing.application.tasks import SyncStage, run_sync_cycle, sync_dollar_rate


class Command(BaseCommand):
    help = 'Fetch the dollar rate and cascade it into variant and order prices'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force-cascade',
            action='store_true',
            help='Cascade prices even if the dollar rate did not change'
        )
        parser.add_argument(
            '--async',
            dest='async_mode',
            action='store_true',
            help='Dispatch a Celery task instead of running synchronously'
        )

    def handle(self, **options):
        force_cascade = options['force_cascade']

        if options['async_mode']:
            self.stdout.write('Dispatching Celery task...')
            task = sync_dollar_rate.delay(force_cascade=force_cascade)

            self.stdout.write(
                self.style.SUCCESS(
                    f'Task dispatched with ID: {task.id}'
                )
            )
            self.stdout.write(
                'Use "celery -A core inspect active" to check task status'
            )
            return

        self.stdout.write('Synchronizing dollar rate...')
        result = run_sync_cycle(force_cascade=force_cascade)

        if result.stage == SyncStage.ERROR.value and result.effective_value is None:
            raise CommandError(f"Failed: {result.message}: {'; '.join(result.errors)}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Dollar rate {result.effective_value} ({'changed' if result.changed else 'unchanged'})"
            )
        )

        if result.variants_updated is not None or result.orders_updated is not None:
            self.stdout.write(
                f"Repriced {result.variants_updated} variants and {result.orders_updated} orders"
            )

        if result.errors:
            self.stdout.write(
                self.style.WARNING(
                    f"Errors: {'; '.join(result.errors)}"
                )
            )
