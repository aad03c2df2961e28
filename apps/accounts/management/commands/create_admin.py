from decouple import config
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Create or promote a staff superuser for the admin site (ADMIN_EMAIL / ADMIN_PASSWORD)."

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, default=None, help='Defaults to ADMIN_EMAIL')
        parser.add_argument('--password', type=str, default=None, help='Defaults to ADMIN_PASSWORD')

    def handle(self, *args, **options):
        if not settings.DEBUG and not config("ALLOW_CREATE_ADMIN_IN_PROD", default=False, cast=bool):
            raise CommandError("Production Lock: set ALLOW_CREATE_ADMIN_IN_PROD=True to run this.")

        email = options['email'] or config("ADMIN_EMAIL", default="")
        password = options['password'] or config("ADMIN_PASSWORD", default="")
        if not email or not password:
            raise CommandError("Missing admin email or password (ADMIN_EMAIL / ADMIN_PASSWORD).")

        User = get_user_model()
        email = User.objects.normalize_email(email)

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            User.objects.create_superuser(email=email, password=password)
            self.stdout.write(self.style.SUCCESS(f"Created Superuser: {email}"))
            return

        # Existing shopper account gets promoted and its password reset
        user.is_staff = True
        user.is_superuser = True
        user.is_active = True
        user.set_password(password)
        user.save(update_fields=["is_staff", "is_superuser", "is_active", "password"])
        self.stdout.write(self.style.WARNING(f"Promoted Superuser: {email}"))
