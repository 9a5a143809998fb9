# core/management/commands/seed.py
import logging
import os
import secrets
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import DatabaseError
from django.utils import timezone

from core.models import (
    AgentCommissionOverride,
    B2BAgent,
    B2BBookingRequest,
    Guest,
    PaymentConfig,
    PropertyType,
    ServiceRequest,
    SpecialOffer,
)

logger = logging.getLogger(__name__)


def get_user():
    from django.contrib.auth import get_user_model

    return get_user_model()


class Command(BaseCommand):
    help = "Seeds the database with initial testing data."

    def handle(self, *args, **options):
        self.stdout.write("Starting database seeding...")

        # 1. Create Superuser (Admin)
        User = get_user()
        try:
            u, created = User.objects.get_or_create(
                username="admin",
                defaults={
                    "email": "admin@example.com",
                    "is_staff": True,
                    "is_superuser": True,
                },
            )
            if created:
                # Use env var or generate secure random password
                password = os.environ.get(
                    "SEED_ADMIN_PASSWORD", secrets.token_urlsafe(16)
                )
                u.set_password(password)
                u.save()
                self.stdout.write(
                    self.style.SUCCESS(
                        f'Superuser "admin" created. Password: {password}'
                    )
                )
                self.stdout.write(
                    self.style.WARNING(
                        "⚠️  Save this password now! It won't be shown again."
                    )
                )
            else:
                self.stdout.write('Superuser "admin" already exists.')
        except DatabaseError as e:
            self.stdout.write(self.style.ERROR(f"Error creating user: {e}"))
            return

        today = timezone.localdate()

        # 2. Property types (rooms are generated on creation)
        cottage, _ = PropertyType.objects.get_or_create(
            property_name="Lake View Cottage",
            defaults={
                "number_of_rooms": 4,
                "room_prefix": "C",
                "cost": Decimal("4500.00"),
                "extra_person_cost": Decimal("800.00"),
            },
        )
        PropertyType.objects.get_or_create(
            property_name="Forest Tent",
            defaults={
                "number_of_rooms": 6,
                "room_prefix": "T",
                "cost": Decimal("2500.00"),
                "extra_person_cost": Decimal("500.00"),
            },
        )

        # 3. Agents
        approved_agent, _ = B2BAgent.objects.get_or_create(
            email="sunrise@example.com",
            defaults={
                "agent_name": "Ravi Kumar",
                "phone": "+91 98450 12345",
                "whatsapp_number": "+91 98450 12345",
                "company_name": "Sunrise Holidays",
                "status": "approved",
                "approved_at": timezone.now(),
                "approved_by": u.get_username(),
            },
        )
        B2BAgent.objects.get_or_create(
            email="trailblazers@example.com",
            defaults={
                "agent_name": "Meera Nair",
                "phone": "+91 99000 67890",
                "company_name": "Trailblazers Travel",
            },
        )

        AgentCommissionOverride.objects.get_or_create(
            agent=approved_agent,
            property_type=cottage,
            defaults={
                "start_date": today,
                "end_date": today + timedelta(days=90),
                "commission_percentage": Decimal("15.00"),
                "description": "Monsoon season push",
            },
        )

        # 4. Booking requests waiting for review
        if not B2BBookingRequest.objects.exists():
            B2BBookingRequest.objects.create(
                agent=approved_agent,
                property_type=cottage,
                guest_name="Anita Sharma",
                guest_phone="9812345678",
                guest_city="Bengaluru",
                number_of_adults=2,
                check_in_date=today + timedelta(days=7),
                check_out_date=today + timedelta(days=9),
                total_cost=Decimal("9000.00"),
                agent_rate=Decimal("7650.00"),
                advance_amount=Decimal("3000.00"),
            )

        # 5. Offers (approved agents are notified on creation)
        if not SpecialOffer.objects.exists():
            SpecialOffer.objects.create(
                offer_title="Weekday Escape",
                offer_description="Mid-week stays at the cottages.",
                discount_percentage=Decimal("12.50"),
                valid_from=today,
                valid_to=today + timedelta(days=30),
                property_type=cottage,
            )

        # 6. A walk-in guest with an open service request
        guest, _ = Guest.objects.get_or_create(
            guest_name="Walk-in Guest",
            phone="9900112233",
            defaults={
                "property_type": cottage,
                "check_in_date": today,
                "check_out_date": today + timedelta(days=1),
                "booking_status": "checked-in",
            },
        )
        ServiceRequest.objects.get_or_create(
            guest=guest,
            service_category="housekeeping",
            defaults={"request_details": "Extra towels", "priority": "low"},
        )

        # 7. Payment configuration
        if PaymentConfig.load() is None:
            PaymentConfig.objects.create(
                cash_contact_name="Front Desk",
                cash_contact_phone="+91 80 1234 5678",
                upi_id="resort@upi",
            )

        self.stdout.write(
            self.style.SUCCESS(
                "Database seeding complete. Go to http://localhost:8000/admin"
            )
        )
