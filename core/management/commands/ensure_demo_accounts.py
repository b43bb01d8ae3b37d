# core/management/commands/ensure_demo_accounts.py
from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from core.models import User, Profile, BloodRequest

DEMO_ACCOUNTS = [
    # email, type, name, contact, address, blood type
    ("donor@bloodconnect.local", "donor", "Demo Donor", "+1 555 0100", "12 Elm Street", "O-"),
    ("hospital@bloodconnect.local", "hospital", "Demo General Hospital", "+1 555 0199", "1 Hospital Road", None),
]

DEMO_REQUESTS = [
    ("O-", 3, "critical", "Trauma ward shortage"),
    ("A+", 2, "medium", "Scheduled surgeries"),
    ("B-", 1, "low", ""),
]


class Command(BaseCommand):
    help = "Ensure demo donor/hospital accounts and sample requests exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=None, help="Password for demo accounts (default: DEMO_PASSWORD setting)")
        parser.add_argument("--no-requests", action="store_true", help="Skip sample blood requests")

    @transaction.atomic
    def handle(self, *args, **opts):
        password = opts["password"] or settings.DEMO_PASSWORD
        hospital_profile = None
        for email, ptype, name, contact, address, blood_type in DEMO_ACCOUNTS:
            user, created = User.objects.get_or_create(email=email, defaults={"username": email})
            # always reset password and activation so the demo login works
            user.set_password(password)
            user.is_active = True
            user.save()
            profile, _ = Profile.objects.update_or_create(
                user=user,
                defaults={"type": ptype, "name": name, "contact": contact, "address": address, "blood_type": blood_type},
            )
            if ptype == "hospital":
                hospital_profile = profile
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email} ({ptype})"))

        if hospital_profile is not None and not opts["no_requests"]:
            for blood_type, units, urgency, description in DEMO_REQUESTS:
                _, created = BloodRequest.objects.get_or_create(
                    hospital=hospital_profile,
                    blood_type=blood_type,
                    urgency_level=urgency,
                    status="active",
                    defaults={"units_needed": units, "description": description},
                )
                if created:
                    self.stdout.write(f"request: {blood_type} x{units} ({urgency})")
        self.stdout.write(self.style.SUCCESS("All demo accounts ensured."))
