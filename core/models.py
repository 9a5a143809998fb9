# core/models.py
import secrets
import string
from datetime import time
from decimal import Decimal

from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords

from .constants import (
    AGENT_STATUSES,
    BOOKING_REQUEST_STATUSES,
    BOOKING_STATUSES,
    BOOKING_TYPES,
    DEFAULT_COMMISSION_PERCENTAGE,
    DEFAULT_COUNTRY_CODE,
    MEAL_PREFERENCES,
    NOTIFICATION_TYPES,
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    PRIORITY_CHOICES,
    SERVICE_CATEGORIES,
    SERVICE_STATUSES,
    STAFF_ROLES,
)

PERCENTAGE_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]
AMOUNT_VALIDATORS = [MinValueValidator(0)]


def money_field(verbose_name=None, **kwargs):
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(
        verbose_name,
        max_digits=12,
        decimal_places=2,
        validators=AMOUNT_VALIDATORS,
        **kwargs,
    )


def percentage_field(verbose_name=None, **kwargs):
    return models.DecimalField(
        verbose_name,
        max_digits=5,
        decimal_places=2,
        validators=PERCENTAGE_VALIDATORS,
        **kwargs,
    )


# --- PROPERTY INVENTORY ---
class PropertyType(models.Model):
    property_name = models.CharField(max_length=200)
    number_of_rooms = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)]
    )
    room_prefix = models.CharField(
        max_length=10, help_text="Rooms are numbered PREFIX1..PREFIXn (upper-cased)."
    )
    cost = money_field("Cost / Night")
    extra_person_cost = money_field("Extra Person Cost")
    check_in_time = models.TimeField(default=time(14, 0))
    check_out_time = models.TimeField(default=time(11, 0))
    map_link = models.URLField(max_length=500, blank=True)
    rules_and_regulations = models.TextField(blank=True)
    wifi_details = models.TextField(blank=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["property_name"]

    def save(self, *args, **kwargs):
        self.room_prefix = (self.room_prefix or "").strip().upper()
        super().save(*args, **kwargs)

    def room_numbers(self):
        """PREFIX1 .. PREFIXn for the configured room count."""
        prefix = (self.room_prefix or "").strip().upper()
        return [f"{prefix}{i}" for i in range(1, self.number_of_rooms + 1)]

    def generate_rooms(self):
        """Bulk-creates the room set. Only called once, on creation."""
        rooms = [
            Room(property_type=self, room_number=number, is_available=True)
            for number in self.room_numbers()
        ]
        return Room.objects.bulk_create(rooms)

    def __str__(self):
        return self.property_name


class Room(models.Model):
    property_type = models.ForeignKey(
        PropertyType, on_delete=models.CASCADE, related_name="rooms"
    )
    room_number = models.CharField(max_length=20)
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ["property_type", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["property_type", "room_number"], name="unique_room_number"
            )
        ]

    def __str__(self):
        return self.room_number


# --- B2B AGENTS ---
class B2BAgent(models.Model):
    agent_name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=40)
    whatsapp_number = models.CharField(max_length=40, blank=True)
    company_name = models.CharField(max_length=200)
    status = models.CharField(
        max_length=20, choices=AGENT_STATUSES, default="pending", db_index=True
    )
    commission_percentage = percentage_field(
        "Commission %", default=Decimal(DEFAULT_COMMISSION_PERCENTAGE)
    )
    created_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.CharField(max_length=150, blank=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "B2B Agent"
        verbose_name_plural = "B2B Agents"

    def __str__(self):
        return f"{self.agent_name} ({self.company_name})"


class AgentCommissionOverride(models.Model):
    """Time-bounded exception to an agent's default commission.

    Leaving agent or property empty means the override applies to all of them.
    """

    agent = models.ForeignKey(
        B2BAgent,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="commission_overrides",
        help_text="Leave empty to apply to all agents",
    )
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="commission_overrides",
        help_text="Leave empty to apply to all properties",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    commission_percentage = percentage_field(
        "Commission %", default=Decimal("15.00")
    )
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date must be on or after start date."})

    def __str__(self):
        agent = self.agent.agent_name if self.agent else "All agents"
        prop = self.property_type.property_name if self.property_type else "All properties"
        return f"{agent} / {prop}: {self.commission_percentage}%"


# --- GUEST BOOKINGS (derived from approvals) ---
class Guest(models.Model):
    guest_name = models.CharField(max_length=200)
    country_code = models.CharField(max_length=6, default=DEFAULT_COUNTRY_CODE)
    phone = models.CharField(max_length=40)
    number_of_packs = models.PositiveIntegerField("Adults", default=1)
    number_of_kids = models.PositiveIntegerField(default=0)
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="guests",
    )
    agent = models.ForeignKey(
        B2BAgent,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="guests",
    )
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    meal_preference = models.CharField(
        max_length=10, choices=MEAL_PREFERENCES, default="veg"
    )
    food_remarks = models.TextField(blank=True)
    final_remarks = models.TextField(blank=True)
    booking_status = models.CharField(
        max_length=20, choices=BOOKING_STATUSES, default="pending"
    )
    booking_type = models.CharField(max_length=20, choices=BOOKING_TYPES, default="normal")
    manual_cost = money_field()
    confirmation_number = models.CharField(max_length=40, blank=True, db_index=True)
    check_in_link = models.URLField(max_length=500, blank=True)
    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.guest_name} ({self.confirmation_number or 'no ref'})"


class BookingRoom(models.Model):
    guest = models.ForeignKey(Guest, on_delete=models.CASCADE, related_name="booking_rooms")
    property_type = models.ForeignKey(
        PropertyType, on_delete=models.PROTECT, related_name="booking_rooms"
    )
    number_of_rooms = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.number_of_rooms} x {self.property_type}"


class Payment(models.Model):
    guest = models.ForeignKey(Guest, on_delete=models.CASCADE, related_name="payments")
    total_amount = money_field()
    paid_amount = money_field()
    balance_due = money_field()
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUSES, default="pending", db_index=True
    )
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHODS, blank=True)
    payment_notes = models.TextField(blank=True)
    refund_amount = money_field()
    transaction_id = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ["-created_at"]
        permissions = [
            ("manage_financials", "Can view payments and edit payment configuration"),
        ]

    @staticmethod
    def settle(total, paid):
        """Returns (balance_due, payment_status) for a total and an amount paid."""
        total = Decimal(total)
        paid = Decimal(paid)
        return total - paid, "paid" if paid >= total else "partial"

    def __str__(self):
        return f"{self.guest.guest_name}: {self.paid_amount}/{self.total_amount}"


# --- B2B BOOKING REQUESTS ---
class B2BBookingRequest(models.Model):
    agent = models.ForeignKey(
        B2BAgent, on_delete=models.PROTECT, related_name="booking_requests"
    )
    property_type = models.ForeignKey(
        PropertyType, on_delete=models.PROTECT, related_name="booking_requests"
    )
    guest_name = models.CharField(max_length=200)
    guest_phone = models.CharField(max_length=40)
    guest_city = models.CharField(max_length=100, blank=True)
    number_of_adults = models.PositiveIntegerField(default=1)
    number_of_kids = models.PositiveIntegerField(default=0)
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    number_of_rooms = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    total_cost = money_field("List Price")
    agent_rate = money_field("Agent Rate")
    advance_amount = money_field("Advance Paid")
    payment_screenshot_url = models.URLField(max_length=500, blank=True)
    status = models.CharField(
        max_length=20,
        choices=BOOKING_REQUEST_STATUSES,
        default="pending",
        db_index=True,
    )
    admin_notes = models.TextField(blank=True)
    confirmation_number = models.CharField(max_length=40, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.CharField(max_length=150, blank=True)
    guest = models.OneToOneField(
        Guest,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="b2b_request",
        help_text="Guest booking created when this request was approved",
    )

    history = HistoricalRecords()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "B2B Booking Request"
        verbose_name_plural = "B2B Booking Requests"
        permissions = [
            ("review_b2bbookingrequest", "Can approve or reject B2B requests and agents"),
        ]

    @staticmethod
    def generate_confirmation_number():
        stamp = str(int(timezone.now().timestamp() * 1000))[-6:]
        suffix = "".join(
            secrets.choice(string.ascii_uppercase + string.digits) for _ in range(3)
        )
        return f"B2BREQ{stamp}{suffix}"

    def clean(self):
        if (
            self.check_in_date
            and self.check_out_date
            and self.check_out_date <= self.check_in_date
        ):
            raise ValidationError(
                {"check_out_date": "Check-out must be after check-in."}
            )

    def save(self, *args, **kwargs):
        if not self.confirmation_number:
            new_ref = self.generate_confirmation_number()
            while B2BBookingRequest.objects.filter(confirmation_number=new_ref).exists():
                new_ref = self.generate_confirmation_number()
            self.confirmation_number = new_ref
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.confirmation_number} - {self.guest_name}"


# --- SETTINGS MODELS ---
class PaymentConfig(models.Model):
    """Singleton: the one row with config_type='general'."""

    config_type = models.CharField(max_length=20, unique=True, default="general", editable=False)
    cash_contact_name = models.CharField(max_length=200, blank=True)
    cash_contact_phone = models.CharField(max_length=40, blank=True)
    upi_id = models.CharField("UPI ID", max_length=100, blank=True)
    upi_number = models.CharField("UPI Number", max_length=40, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Payment Configuration"
        verbose_name_plural = "Payment Configuration"

    @classmethod
    def load(cls):
        return cls.objects.filter(config_type="general").first()

    def save(self, *args, **kwargs):
        # The unique config_type keeps this table at one row
        self.config_type = "general"
        super().save(*args, **kwargs)

    def __str__(self):
        return "Payment Configuration"


class WhatsAppSettings(models.Model):
    name = models.CharField(max_length=50, default="Configuration")
    api_url = models.URLField(
        blank=True, help_text="Optional push API, e.g. https://api.ultramsg.com/..."
    )
    api_token = models.CharField(max_length=200, blank=True)
    default_country_code = models.CharField(max_length=6, default=DEFAULT_COUNTRY_CODE)

    class Meta:
        verbose_name_plural = "WhatsApp Settings"

    @property
    def can_push(self):
        return bool(self.api_url and self.api_token)

    def __str__(self):
        return self.name


# --- GUEST SERVICES ---
class ServiceRequest(models.Model):
    guest = models.ForeignKey(
        Guest, on_delete=models.CASCADE, related_name="service_requests"
    )
    service_category = models.CharField(max_length=20, choices=SERVICE_CATEGORIES)
    request_details = models.TextField()
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="medium")
    status = models.CharField(
        max_length=20, choices=SERVICE_STATUSES, default="received", db_index=True
    )
    requested_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-requested_at"]

    def __str__(self):
        return f"{self.get_service_category_display()} for {self.guest.guest_name}"


class GuestPhoto(models.Model):
    guest = models.ForeignKey(Guest, on_delete=models.CASCADE, related_name="photos")
    photo = models.ImageField(upload_to="guests/photos/")
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-uploaded_at"]

    def __str__(self):
        return f"Photo: {self.guest.guest_name}"


# --- OFFERS & AGENT INBOX ---
class SpecialOffer(models.Model):
    offer_title = models.CharField(max_length=200)
    offer_description = models.TextField(blank=True)
    discount_percentage = percentage_field("Discount %", default=Decimal("0.00"))
    valid_from = models.DateField()
    valid_to = models.DateField()
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="special_offers",
    )
    target_agent = models.ForeignKey(
        B2BAgent,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="targeted_offers",
        help_text="Leave empty to offer to every approved agent",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.valid_from and self.valid_to and self.valid_to < self.valid_from:
            raise ValidationError({"valid_to": "Offer must end on or after its start."})

    def __str__(self):
        return self.offer_title


class AgentNotification(models.Model):
    agent = models.ForeignKey(
        B2BAgent,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    notification_type = models.CharField(max_length=20, choices=NOTIFICATION_TYPES)
    title = models.CharField(max_length=200)
    message = models.TextField()
    related_id = models.PositiveBigIntegerField(null=True, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


# --- STAFF ACCOUNTS ---
class StaffUser(models.Model):
    email = models.EmailField(unique=True)
    password_hash = models.CharField(max_length=255, editable=False)
    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=40, blank=True)
    role = models.CharField(max_length=20, choices=STAFF_ROLES, default="receptionist")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Staff Member"
        verbose_name_plural = "Staff Members"

    def set_password(self, raw_password):
        self.password_hash = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password_hash)

    def __str__(self):
        return f"{self.full_name} <{self.email}>"
