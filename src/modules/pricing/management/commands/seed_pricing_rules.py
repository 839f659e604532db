from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.pricing.repositories import PricingRuleDjangoRepository
from modules.pricing.services import PricingRuleService


class Command(BaseCommand):
    help = "Replace the pricing rule catalog with the default rules."

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-users",
            action="store_true",
            help="Also create development users (admin / requester).",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding pricing rules...")

        service = PricingRuleService(repository=PricingRuleDjangoRepository())
        rules = service.seed_defaults()

        users_created = self._seed_users() if options["with_users"] else 0

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: rules={len(rules)}, users={users_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="student").exists():
            User.objects.create_user("student", password="student123")
            created += 1
        return created
