# core/admin.py
import logging

from django.contrib import admin, messages
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from django.utils.html import format_html, format_html_join
from unfold.admin import ModelAdmin
from unfold.contrib.filters.admin import RangeDateFilter

from .approvals import (
    approve_booking_request,
    transition_agent,
    transition_service_request,
)
from .commission import calculate_b2b_price, get_agent_commission_percentage
from .finance import PaymentStats
from .forms import PropertyTypeForm, RoomForm, StaffUserForm
from .models import (
    AgentCommissionOverride,
    AgentNotification,
    B2BAgent,
    B2BBookingRequest,
    BookingRoom,
    Guest,
    GuestPhoto,
    Payment,
    PaymentConfig,
    PropertyType,
    Room,
    ServiceRequest,
    SpecialOffer,
    StaffUser,
    WhatsAppSettings,
)
from .permissions import can_manage_financials, can_manage_staff, can_review_b2b
from .utils import format_amount, format_percentage, related_or_default
from .workflow import (
    ACTION_LABELS,
    AGENT_WORKFLOW,
    BOOKING_REQUEST_WORKFLOW,
    SERVICE_REQUEST_WORKFLOW,
    TransitionError,
    filter_by_status,
    toggle_active,
)

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    "pending": "orange",
    "received": "orange",
    "in_progress": "#0275d8",
    "approved": "green",
    "completed": "green",
    "paid": "green",
    "partial": "orange",
    "rejected": "red",
    "cancelled": "gray",
}


def status_dot(value, label):
    color = STATUS_COLORS.get(value, "gray")
    return format_html('<span style="color:{}; font-weight:bold;">● {}</span>', color, label)


def next_steps(workflow, status):
    """Labels of the actions an operator may still take."""
    actions = workflow.allowed_actions(status)
    if not actions:
        return "—"
    return format_html_join(" ", "<span>{}</span>", ((ACTION_LABELS[a],) for a in actions))


def run_transition(request, rows, workflow, action, apply):
    """
    Applies one workflow action to each row that allows it. Rows in any
    other status are skipped and reported.
    """
    done, skipped = 0, []
    for obj in rows:
        if not workflow.can(obj.status, action):
            skipped.append(str(obj))
            continue
        try:
            apply(obj)
            done += 1
        except TransitionError as e:
            skipped.append(f"{obj} ({e})")
        except DatabaseError:
            logger.exception("Failed to %s %s %s", action, workflow.name, obj.pk)
            messages.error(request, f"❌ Failed to {action} {obj}. Please try again.")

    if done:
        messages.success(request, f"✅ {done} {workflow.name}(s) updated.")
    if skipped:
        messages.warning(
            request, f"⚠️ Skipped {len(skipped)}: {', '.join(skipped)}"
        )


def run_toggle(request, queryset, field, noun):
    for obj in queryset:
        toggle_active(obj, field)
    messages.success(request, f"🔁 Toggled {queryset.count()} {noun}(s).")


# --- 1. PROPERTY INVENTORY ---


class RoomInline(admin.TabularInline):
    model = Room
    form = RoomForm
    extra = 0
    can_delete = False
    fields = ("room_number", "is_available")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(PropertyType)
class PropertyTypeAdmin(ModelAdmin):
    form = PropertyTypeForm
    list_display = (
        "property_name",
        "room_prefix",
        "number_of_rooms",
        "room_count",
        "cost",
        "extra_person_cost",
        "is_available",
    )
    list_filter = ("is_available",)
    search_fields = ("property_name", "room_prefix")
    inlines = [RoomInline]
    actions = ["toggle_availability"]

    @admin.display(description="Rooms Created")
    def room_count(self, obj):
        return obj.rooms.count()

    @admin.action(description="🔁 Toggle availability")
    def toggle_availability(self, request, queryset):
        run_toggle(request, queryset, "is_available", "property type")


# --- 2. B2B AGENTS & COMMISSION ---


@admin.register(B2BAgent)
class B2BAgentAdmin(ModelAdmin):
    list_display = (
        "agent_name",
        "company_name",
        "email",
        "phone",
        "status_badge",
        "commission_percentage",
        "effective_commission",
        "next_actions",
        "created_at",
    )
    list_display_links = ("agent_name",)
    list_editable = ("commission_percentage",)
    list_filter = ("status", ("created_at", RangeDateFilter))
    search_fields = ("agent_name", "company_name", "email", "phone")
    readonly_fields = ("status", "created_at", "approved_at", "approved_by")
    actions = ["approve_agents", "reject_agents"]

    @admin.display(description="Status")
    def status_badge(self, obj):
        return status_dot(obj.status, obj.get_status_display())

    @admin.display(description="Today's Rate")
    def effective_commission(self, obj):
        pct = get_agent_commission_percentage(obj, None, timezone.localdate())
        if pct is None:
            return "—"
        return f"{format_percentage(pct)}%"

    @admin.display(description="Next Steps")
    def next_actions(self, obj):
        return next_steps(AGENT_WORKFLOW, obj.status)

    def _decide(self, request, queryset, action):
        pending = filter_by_status(queryset, "pending")
        skipped = queryset.count() - len(pending)
        run_transition(
            request,
            pending,
            AGENT_WORKFLOW,
            action,
            lambda agent: transition_agent(agent, action, actor=request.user),
        )
        if skipped:
            messages.warning(
                request, f"⚠️ {skipped} agent(s) were already decided and were left as is."
            )

    @admin.action(description="✅ Approve selected agents")
    def approve_agents(self, request, queryset):
        self._decide(request, queryset, "approve")

    @admin.action(description="🚫 Reject selected agents")
    def reject_agents(self, request, queryset):
        self._decide(request, queryset, "reject")

    def get_actions(self, request):
        actions = super().get_actions(request)
        if not can_review_b2b(request.user):
            actions.pop("approve_agents", None)
            actions.pop("reject_agents", None)
        return actions


@admin.register(AgentCommissionOverride)
class AgentCommissionOverrideAdmin(ModelAdmin):
    list_display = (
        "agent_display",
        "property_display",
        "start_date",
        "end_date",
        "commission_percentage",
        "is_active",
    )
    list_filter = ("is_active", "property_type", ("start_date", RangeDateFilter))
    search_fields = ("agent__agent_name", "property_type__property_name", "description")
    autocomplete_fields = ["agent"]
    actions = ["toggle_overrides"]

    @admin.display(description="Agent")
    def agent_display(self, obj):
        return related_or_default(obj, "agent.agent_name", "All agents")

    @admin.display(description="Property")
    def property_display(self, obj):
        return related_or_default(obj, "property_type.property_name", "All properties")

    @admin.action(description="🔁 Toggle active")
    def toggle_overrides(self, request, queryset):
        run_toggle(request, queryset, "is_active", "override")


# --- 3. B2B BOOKING REQUESTS ---


@admin.register(B2BBookingRequest)
class B2BBookingRequestAdmin(ModelAdmin):
    list_display = (
        "confirmation_number",
        "agent",
        "property_type",
        "guest_name",
        "check_in_date",
        "check_out_date",
        "number_of_rooms",
        "pricing_display",
        "status_badge",
        "review_link",
    )
    list_filter = (
        "status",
        "property_type",
        ("check_in_date", RangeDateFilter),
        ("created_at", RangeDateFilter),
    )
    search_fields = (
        "confirmation_number",
        "guest_name",
        "guest_phone",
        "agent__agent_name",
        "agent__company_name",
    )
    list_select_related = ("agent", "property_type")
    readonly_fields = (
        "confirmation_number",
        "status",
        "admin_notes",
        "created_at",
        "approved_at",
        "approved_by",
        "guest",
        "expected_rate",
        "review_link",
    )
    actions = ["approve_selected"]

    @admin.display(description="Status")
    def status_badge(self, obj):
        return status_dot(obj.status, obj.get_status_display())

    @admin.display(description="Expected Agent Rate")
    def expected_rate(self, obj):
        if not obj.pk:
            return "—"
        pct = get_agent_commission_percentage(
            obj.agent, obj.property_type, obj.check_in_date
        )
        if pct is None:
            return "— (agent not approved)"
        return f"{format_amount(calculate_b2b_price(obj.total_cost, pct))} ({format_percentage(pct)}% commission)"

    @admin.display(description="Pricing")
    def pricing_display(self, obj):
        return format_html(
            "{}<br><small>Agent: {} · Advance: {}</small>",
            format_amount(obj.total_cost),
            format_amount(obj.agent_rate),
            format_amount(obj.advance_amount),
        )

    @admin.display(description="Review")
    def review_link(self, obj):
        if not obj.pk:
            return "—"
        url = reverse("review_booking_request", args=[obj.pk])
        if BOOKING_REQUEST_WORKFLOW.allowed_actions(obj.status):
            return format_html('<a href="{}" class="button">📝 Review</a>', url)
        return format_html('<a href="{}">View decision</a>', url)

    @admin.action(description="✅ Approve selected requests")
    def approve_selected(self, request, queryset):
        site_url = request.build_absolute_uri("/")
        run_transition(
            request,
            filter_by_status(queryset.select_related("agent", "property_type"), "pending"),
            BOOKING_REQUEST_WORKFLOW,
            "approve",
            lambda r: approve_booking_request(r, actor=request.user, site_url=site_url),
        )
        messages.info(
            request,
            "Open each request's review page to send the WhatsApp confirmation.",
        )

    def get_actions(self, request):
        actions = super().get_actions(request)
        if not can_review_b2b(request.user):
            actions.pop("approve_selected", None)
        return actions

    def has_change_permission(self, request, obj=None):
        """Decided requests are kept as a read-only record."""
        base = super().has_change_permission(request, obj)
        if not base or obj is None:
            return base
        return obj.status == "pending"


# --- 4. GUESTS ---


class BookingRoomInline(admin.TabularInline):
    model = BookingRoom
    extra = 0
    fields = ("property_type", "number_of_rooms", "created_at")
    readonly_fields = ("created_at",)


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False
    fields = (
        "total_amount",
        "paid_amount",
        "balance_due",
        "payment_status",
        "payment_method",
        "created_at",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class GuestPhotoInline(admin.TabularInline):
    model = GuestPhoto
    extra = 0
    fields = ("photo", "uploaded_at")
    readonly_fields = ("uploaded_at",)


@admin.register(Guest)
class GuestAdmin(ModelAdmin):
    list_display = (
        "guest_name",
        "phone",
        "property_type",
        "agent",
        "check_in_date",
        "check_out_date",
        "booking_status",
        "booking_type",
        "photos_link",
    )
    list_filter = (
        "booking_status",
        "booking_type",
        "property_type",
        "is_deleted",
        ("check_in_date", RangeDateFilter),
    )
    search_fields = ("guest_name", "phone", "confirmation_number")
    list_select_related = ("property_type", "agent")
    readonly_fields = ("created_at", "updated_at", "photos_link")
    inlines = [BookingRoomInline, PaymentInline, GuestPhotoInline]

    @admin.display(description="Photo Upload Link")
    def photos_link(self, obj):
        if not obj or not obj.pk:
            return "—"
        url = reverse("guest_photos", args=[obj.pk])
        return format_html('<a href="{}" target="_blank">📷 Open</a>', url)


@admin.register(ServiceRequest)
class ServiceRequestAdmin(ModelAdmin):
    list_display = (
        "guest",
        "service_category",
        "priority",
        "status_badge",
        "requested_at",
        "completed_at",
        "next_actions",
    )
    list_filter = ("status", "service_category", "priority", ("requested_at", RangeDateFilter))
    search_fields = ("guest__guest_name", "request_details")
    list_select_related = ("guest",)
    readonly_fields = ("status", "requested_at", "completed_at")
    actions = ["start_requests", "complete_requests", "cancel_requests"]

    @admin.display(description="Status")
    def status_badge(self, obj):
        return status_dot(obj.status, obj.get_status_display())

    @admin.display(description="Next Steps")
    def next_actions(self, obj):
        return next_steps(SERVICE_REQUEST_WORKFLOW, obj.status)

    def _apply(self, request, queryset, action):
        run_transition(
            request,
            queryset,
            SERVICE_REQUEST_WORKFLOW,
            action,
            lambda sr: transition_service_request(sr, action),
        )

    @admin.action(description="▶️ Start selected requests")
    def start_requests(self, request, queryset):
        self._apply(request, queryset, "start")

    @admin.action(description="✔ Complete selected requests")
    def complete_requests(self, request, queryset):
        self._apply(request, queryset, "complete")

    @admin.action(description="✖ Cancel selected requests")
    def cancel_requests(self, request, queryset):
        self._apply(request, queryset, "cancel")


# --- 5. FINANCE ---


class FinancialsOnlyMixin:
    def has_module_permission(self, request):
        """Only managers can access finance modules."""
        return super().has_module_permission(request) and can_manage_financials(
            request.user
        )

    def has_view_permission(self, request, obj=None):
        return super().has_view_permission(request, obj) and can_manage_financials(
            request.user
        )

    def has_change_permission(self, request, obj=None):
        return super().has_change_permission(request, obj) and can_manage_financials(
            request.user
        )


@admin.register(Payment)
class PaymentAdmin(FinancialsOnlyMixin, ModelAdmin):
    change_list_template = "admin/core/payment/change_list.html"
    list_display = (
        "guest",
        "formatted_total",
        "formatted_paid",
        "formatted_balance",
        "status_badge",
        "payment_method",
        "created_at",
    )
    list_filter = ("payment_method", "payment_status", ("created_at", RangeDateFilter))
    search_fields = ("guest__guest_name", "guest__confirmation_number", "transaction_id")
    list_select_related = ("guest",)

    @admin.display(description="Total")
    def formatted_total(self, obj):
        return format_amount(obj.total_amount)

    @admin.display(description="Paid")
    def formatted_paid(self, obj):
        return format_amount(obj.paid_amount)

    @admin.display(description="Balance Due")
    def formatted_balance(self, obj):
        if obj.balance_due > 0:
            return format_html('<b style="color:#d9534f;">{}</b>', format_amount(obj.balance_due))
        return format_html('<b style="color:#5cb85c;">{}</b>', "✔ Settled")

    @admin.display(description="Status")
    def status_badge(self, obj):
        return status_dot(obj.payment_status, obj.get_payment_status_display())

    def changelist_view(self, request, extra_context=None):
        response = super().changelist_view(request, extra_context)

        try:
            qs = response.context_data["cl"].queryset
        except (AttributeError, KeyError):
            return response

        # Totals of the rows currently displayed
        response.context_data["summary"] = PaymentStats.summary(qs)
        return response

    # Payments come from approvals; this view is an audit list
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PaymentConfig)
class PaymentConfigAdmin(FinancialsOnlyMixin, ModelAdmin):
    list_display = ("__str__", "cash_contact_name", "cash_contact_phone", "upi_id", "upi_number", "updated_at")
    readonly_fields = ("created_at", "updated_at")

    def has_add_permission(self, request):
        # Single row: first save inserts, later saves edit it
        if PaymentConfig.objects.exists():
            return False
        return super().has_add_permission(request) and can_manage_financials(request.user)

    def has_delete_permission(self, request, obj=None):
        return False


# --- 6. OFFERS & NOTIFICATIONS ---


@admin.register(SpecialOffer)
class SpecialOfferAdmin(ModelAdmin):
    list_display = (
        "offer_title",
        "discount_display",
        "valid_from",
        "valid_to",
        "property_display",
        "audience",
        "is_active",
    )
    list_filter = ("is_active", "property_type", ("valid_from", RangeDateFilter))
    search_fields = ("offer_title", "offer_description")
    autocomplete_fields = ["target_agent"]
    actions = ["toggle_offers"]

    @admin.display(description="Discount")
    def discount_display(self, obj):
        return f"{format_percentage(obj.discount_percentage)}%"

    @admin.display(description="Property")
    def property_display(self, obj):
        return related_or_default(obj, "property_type.property_name", "All properties")

    @admin.display(description="Audience")
    def audience(self, obj):
        return related_or_default(obj, "target_agent.agent_name", "All approved agents")

    @admin.action(description="🔁 Toggle active")
    def toggle_offers(self, request, queryset):
        run_toggle(request, queryset, "is_active", "offer")

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if not change:
            count = AgentNotification.objects.filter(
                notification_type="offer", related_id=obj.pk
            ).count()
            messages.info(request, f"📣 Offer sent to {count} agent(s).")


@admin.register(AgentNotification)
class AgentNotificationAdmin(ModelAdmin):
    list_display = ("title", "agent_display", "notification_type", "is_read", "created_at")
    list_filter = ("notification_type", "is_read", ("created_at", RangeDateFilter))
    search_fields = ("title", "message", "agent__agent_name")
    list_select_related = ("agent",)

    @admin.display(description="Agent")
    def agent_display(self, obj):
        return related_or_default(obj, "agent.agent_name", "All agents")


# --- 7. STAFF & SETTINGS ---


@admin.register(StaffUser)
class StaffUserAdmin(ModelAdmin):
    form = StaffUserForm
    list_display = ("full_name", "email", "phone", "role", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("full_name", "email", "phone")
    actions = ["toggle_staff"]

    @admin.action(description="🔁 Toggle active")
    def toggle_staff(self, request, queryset):
        run_toggle(request, queryset, "is_active", "staff member")

    def has_module_permission(self, request):
        """Staff accounts are managed by managers only."""
        return super().has_module_permission(request) and can_manage_staff(request.user)

    def has_view_permission(self, request, obj=None):
        return super().has_view_permission(request, obj) and can_manage_staff(request.user)

    def has_add_permission(self, request):
        return super().has_add_permission(request) and can_manage_staff(request.user)

    def has_change_permission(self, request, obj=None):
        return super().has_change_permission(request, obj) and can_manage_staff(request.user)

    def has_delete_permission(self, request, obj=None):
        return super().has_delete_permission(request, obj) and can_manage_staff(request.user)


@admin.register(WhatsAppSettings)
class WhatsAppSettingsAdmin(ModelAdmin):
    list_display = ("name", "api_url", "default_country_code")
