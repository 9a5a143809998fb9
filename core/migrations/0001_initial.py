import datetime
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


def money(verbose_name=None):
    return models.DecimalField(
        decimal_places=2,
        default=Decimal("0.00"),
        max_digits=12,
        validators=[django.core.validators.MinValueValidator(0)],
        verbose_name=verbose_name,
    )


def percentage(verbose_name, default):
    return models.DecimalField(
        decimal_places=2,
        default=default,
        max_digits=5,
        validators=[
            django.core.validators.MinValueValidator(0),
            django.core.validators.MaxValueValidator(100),
        ],
        verbose_name=verbose_name,
    )


def history_fields():
    return [
        ("history_id", models.AutoField(primary_key=True, serialize=False)),
        ("history_date", models.DateTimeField(db_index=True)),
        ("history_change_reason", models.CharField(max_length=100, null=True)),
        (
            "history_type",
            models.CharField(
                choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                max_length=1,
            ),
        ),
        (
            "history_user",
            models.ForeignKey(
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


def history_options(verbose_name):
    return {
        "verbose_name": f"historical {verbose_name}",
        "verbose_name_plural": f"historical {verbose_name}s",
        "ordering": ("-history_date", "-history_id"),
        "get_latest_by": ("history_date", "history_id"),
    }


def untracked_fk(to, help_text=""):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        help_text=help_text,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name="+",
        to=to,
    )


AGENT_STATUSES = [
    ("pending", "⏳ Pending"),
    ("approved", "✅ Approved"),
    ("rejected", "🚫 Rejected"),
]
PAYMENT_STATUSES = [
    ("pending", "Pending Payment"),
    ("partial", "Partial / Advance"),
    ("paid", "Fully Paid"),
]
PAYMENT_METHODS = [
    ("pay_at_property", "Pay at Property"),
    ("upi", "UPI"),
    ("online_booking", "Online Booking"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PropertyType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("property_name", models.CharField(max_length=200)),
                ("number_of_rooms", models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ("room_prefix", models.CharField(help_text="Rooms are numbered PREFIX1..PREFIXn (upper-cased).", max_length=10)),
                ("cost", money("Cost / Night")),
                ("extra_person_cost", money("Extra Person Cost")),
                ("check_in_time", models.TimeField(default=datetime.time(14, 0))),
                ("check_out_time", models.TimeField(default=datetime.time(11, 0))),
                ("map_link", models.URLField(blank=True, max_length=500)),
                ("rules_and_regulations", models.TextField(blank=True)),
                ("wifi_details", models.TextField(blank=True)),
                ("is_available", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["property_name"]},
        ),
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("room_number", models.CharField(max_length=20)),
                ("is_available", models.BooleanField(default=True)),
                ("property_type", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="rooms", to="core.propertytype")),
            ],
            options={"ordering": ["property_type", "id"]},
        ),
        migrations.AddConstraint(
            model_name="room",
            constraint=models.UniqueConstraint(fields=("property_type", "room_number"), name="unique_room_number"),
        ),
        migrations.CreateModel(
            name="B2BAgent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("agent_name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("phone", models.CharField(max_length=40)),
                ("whatsapp_number", models.CharField(blank=True, max_length=40)),
                ("company_name", models.CharField(max_length=200)),
                ("status", models.CharField(choices=AGENT_STATUSES, db_index=True, default="pending", max_length=20)),
                ("commission_percentage", percentage("Commission %", Decimal("10"))),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("approved_by", models.CharField(blank=True, max_length=150)),
            ],
            options={
                "verbose_name": "B2B Agent",
                "verbose_name_plural": "B2B Agents",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="AgentCommissionOverride",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("commission_percentage", percentage("Commission %", Decimal("15.00"))),
                ("description", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("agent", models.ForeignKey(blank=True, help_text="Leave empty to apply to all agents", null=True, on_delete=django.db.models.deletion.CASCADE, related_name="commission_overrides", to="core.b2bagent")),
                ("property_type", models.ForeignKey(blank=True, help_text="Leave empty to apply to all properties", null=True, on_delete=django.db.models.deletion.CASCADE, related_name="commission_overrides", to="core.propertytype")),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="Guest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guest_name", models.CharField(max_length=200)),
                ("country_code", models.CharField(default="+91", max_length=6)),
                ("phone", models.CharField(max_length=40)),
                ("number_of_packs", models.PositiveIntegerField(default=1, verbose_name="Adults")),
                ("number_of_kids", models.PositiveIntegerField(default=0)),
                ("check_in_date", models.DateField()),
                ("check_out_date", models.DateField()),
                ("meal_preference", models.CharField(choices=[("veg", "Veg"), ("non-veg", "Non-Veg"), ("other", "Other")], default="veg", max_length=10)),
                ("food_remarks", models.TextField(blank=True)),
                ("final_remarks", models.TextField(blank=True)),
                ("booking_status", models.CharField(choices=[("pending", "Pending"), ("confirmed", "✅ Confirmed"), ("checked-in", "🏕️ Checked In"), ("checked-out", "👋 Checked Out"), ("cancelled", "🚫 Cancelled")], default="pending", max_length=20)),
                ("booking_type", models.CharField(choices=[("normal", "Direct"), ("airbnb", "Airbnb"), ("mmt", "MakeMyTrip"), ("b2b", "B2B Agent"), ("promotion", "Promotion"), ("other", "Other")], default="normal", max_length=20)),
                ("manual_cost", money()),
                ("confirmation_number", models.CharField(blank=True, db_index=True, max_length=40)),
                ("check_in_link", models.URLField(blank=True, max_length=500)),
                ("is_deleted", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("agent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="guests", to="core.b2bagent")),
                ("property_type", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="guests", to="core.propertytype")),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="BookingRoom",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number_of_rooms", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("guest", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="booking_rooms", to="core.guest")),
                ("property_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="booking_rooms", to="core.propertytype")),
            ],
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total_amount", money()),
                ("paid_amount", money()),
                ("balance_due", money()),
                ("payment_status", models.CharField(choices=PAYMENT_STATUSES, db_index=True, default="pending", max_length=20)),
                ("payment_method", models.CharField(blank=True, choices=PAYMENT_METHODS, max_length=20)),
                ("payment_notes", models.TextField(blank=True)),
                ("refund_amount", money()),
                ("transaction_id", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("guest", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="core.guest")),
            ],
            options={
                "ordering": ["-created_at"],
                "permissions": [("manage_financials", "Can view payments and edit payment configuration")],
            },
        ),
        migrations.CreateModel(
            name="B2BBookingRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guest_name", models.CharField(max_length=200)),
                ("guest_phone", models.CharField(max_length=40)),
                ("guest_city", models.CharField(blank=True, max_length=100)),
                ("number_of_adults", models.PositiveIntegerField(default=1)),
                ("number_of_kids", models.PositiveIntegerField(default=0)),
                ("check_in_date", models.DateField()),
                ("check_out_date", models.DateField()),
                ("number_of_rooms", models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ("total_cost", money("List Price")),
                ("agent_rate", money("Agent Rate")),
                ("advance_amount", money("Advance Paid")),
                ("payment_screenshot_url", models.URLField(blank=True, max_length=500)),
                ("status", models.CharField(choices=AGENT_STATUSES, db_index=True, default="pending", max_length=20)),
                ("admin_notes", models.TextField(blank=True)),
                ("confirmation_number", models.CharField(blank=True, max_length=40, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("approved_by", models.CharField(blank=True, max_length=150)),
                ("agent", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="booking_requests", to="core.b2bagent")),
                ("guest", models.OneToOneField(blank=True, help_text="Guest booking created when this request was approved", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="b2b_request", to="core.guest")),
                ("property_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="booking_requests", to="core.propertytype")),
            ],
            options={
                "verbose_name": "B2B Booking Request",
                "verbose_name_plural": "B2B Booking Requests",
                "ordering": ["-created_at"],
                "permissions": [("review_b2bbookingrequest", "Can approve or reject B2B requests and agents")],
            },
        ),
        migrations.CreateModel(
            name="PaymentConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("config_type", models.CharField(default="general", editable=False, max_length=20, unique=True)),
                ("cash_contact_name", models.CharField(blank=True, max_length=200)),
                ("cash_contact_phone", models.CharField(blank=True, max_length=40)),
                ("upi_id", models.CharField(blank=True, max_length=100, verbose_name="UPI ID")),
                ("upi_number", models.CharField(blank=True, max_length=40, verbose_name="UPI Number")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Payment Configuration",
                "verbose_name_plural": "Payment Configuration",
            },
        ),
        migrations.CreateModel(
            name="WhatsAppSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(default="Configuration", max_length=50)),
                ("api_url", models.URLField(blank=True, help_text="Optional push API, e.g. https://api.ultramsg.com/...")),
                ("api_token", models.CharField(blank=True, max_length=200)),
                ("default_country_code", models.CharField(default="+91", max_length=6)),
            ],
            options={"verbose_name_plural": "WhatsApp Settings"},
        ),
        migrations.CreateModel(
            name="ServiceRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("service_category", models.CharField(choices=[("housekeeping", "🧹 Housekeeping"), ("room_service", "🍽️ Room Service"), ("maintenance", "🔧 Maintenance"), ("concierge", "🛎️ Concierge")], max_length=20)),
                ("request_details", models.TextField()),
                ("priority", models.CharField(choices=[("low", "ℹ️ Low"), ("medium", "⚠️ Medium"), ("high", "🚨 High")], default="medium", max_length=10)),
                ("status", models.CharField(choices=[("received", "📥 Received"), ("in_progress", "🔄 In Progress"), ("completed", "✅ Completed"), ("cancelled", "🚫 Cancelled")], db_index=True, default="received", max_length=20)),
                ("requested_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("guest", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="service_requests", to="core.guest")),
            ],
            options={"ordering": ["-requested_at"]},
        ),
        migrations.CreateModel(
            name="GuestPhoto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("photo", models.ImageField(upload_to="guests/photos/")),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                ("guest", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="photos", to="core.guest")),
            ],
            options={"ordering": ["-uploaded_at"]},
        ),
        migrations.CreateModel(
            name="SpecialOffer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("offer_title", models.CharField(max_length=200)),
                ("offer_description", models.TextField(blank=True)),
                ("discount_percentage", percentage("Discount %", Decimal("0.00"))),
                ("valid_from", models.DateField()),
                ("valid_to", models.DateField()),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("property_type", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="special_offers", to="core.propertytype")),
                ("target_agent", models.ForeignKey(blank=True, help_text="Leave empty to offer to every approved agent", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="targeted_offers", to="core.b2bagent")),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="AgentNotification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("notification_type", models.CharField(choices=[("offer", "Special Offer"), ("booking_status", "Booking Status"), ("announcement", "Announcement")], max_length=20)),
                ("title", models.CharField(max_length=200)),
                ("message", models.TextField()),
                ("related_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("agent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="core.b2bagent")),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="StaffUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("password_hash", models.CharField(editable=False, max_length=255)),
                ("full_name", models.CharField(max_length=200)),
                ("phone", models.CharField(blank=True, max_length=40)),
                ("role", models.CharField(choices=[("receptionist", "Receptionist"), ("manager", "Manager"), ("supervisor", "Supervisor")], default="receptionist", max_length=20)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Staff Member",
                "verbose_name_plural": "Staff Members",
                "ordering": ["-created_at"],
            },
        ),
        # --- audit history ---
        migrations.CreateModel(
            name="HistoricalB2BAgent",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("agent_name", models.CharField(max_length=200)),
                ("email", models.EmailField(db_index=True, max_length=254)),
                ("phone", models.CharField(max_length=40)),
                ("whatsapp_number", models.CharField(blank=True, max_length=40)),
                ("company_name", models.CharField(max_length=200)),
                ("status", models.CharField(choices=AGENT_STATUSES, db_index=True, default="pending", max_length=20)),
                ("commission_percentage", percentage("Commission %", Decimal("10"))),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("approved_by", models.CharField(blank=True, max_length=150)),
                *history_fields(),
            ],
            options=history_options("B2B Agent"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalPayment",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("total_amount", money()),
                ("paid_amount", money()),
                ("balance_due", money()),
                ("payment_status", models.CharField(choices=PAYMENT_STATUSES, db_index=True, default="pending", max_length=20)),
                ("payment_method", models.CharField(blank=True, choices=PAYMENT_METHODS, max_length=20)),
                ("payment_notes", models.TextField(blank=True)),
                ("refund_amount", money()),
                ("transaction_id", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("guest", untracked_fk("core.guest")),
                *history_fields(),
            ],
            options=history_options("payment"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalB2BBookingRequest",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("guest_name", models.CharField(max_length=200)),
                ("guest_phone", models.CharField(max_length=40)),
                ("guest_city", models.CharField(blank=True, max_length=100)),
                ("number_of_adults", models.PositiveIntegerField(default=1)),
                ("number_of_kids", models.PositiveIntegerField(default=0)),
                ("check_in_date", models.DateField()),
                ("check_out_date", models.DateField()),
                ("number_of_rooms", models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ("total_cost", money("List Price")),
                ("agent_rate", money("Agent Rate")),
                ("advance_amount", money("Advance Paid")),
                ("payment_screenshot_url", models.URLField(blank=True, max_length=500)),
                ("status", models.CharField(choices=AGENT_STATUSES, db_index=True, default="pending", max_length=20)),
                ("admin_notes", models.TextField(blank=True)),
                ("confirmation_number", models.CharField(blank=True, db_index=True, max_length=40)),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("approved_by", models.CharField(blank=True, max_length=150)),
                ("agent", untracked_fk("core.b2bagent")),
                ("guest", untracked_fk("core.guest", "Guest booking created when this request was approved")),
                ("property_type", untracked_fk("core.propertytype")),
                *history_fields(),
            ],
            options=history_options("B2B Booking Request"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
