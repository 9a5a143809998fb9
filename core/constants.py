# core/constants.py

# B2B agent account lifecycle
AGENT_STATUSES = [
    ("pending", "⏳ Pending"),
    ("approved", "✅ Approved"),
    ("rejected", "🚫 Rejected"),
]

# B2B booking request lifecycle (same shape as agents)
BOOKING_REQUEST_STATUSES = [
    ("pending", "⏳ Pending"),
    ("approved", "✅ Approved"),
    ("rejected", "🚫 Rejected"),
]

# Guest booking state
BOOKING_STATUSES = [
    ("pending", "Pending"),
    ("confirmed", "✅ Confirmed"),
    ("checked-in", "🏕️ Checked In"),
    ("checked-out", "👋 Checked Out"),
    ("cancelled", "🚫 Cancelled"),
]

BOOKING_TYPES = [
    ("normal", "Direct"),
    ("airbnb", "Airbnb"),
    ("mmt", "MakeMyTrip"),
    ("b2b", "B2B Agent"),
    ("promotion", "Promotion"),
    ("other", "Other"),
]

MEAL_PREFERENCES = [
    ("veg", "Veg"),
    ("non-veg", "Non-Veg"),
    ("other", "Other"),
]

# Financial state
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

# Guest services
SERVICE_CATEGORIES = [
    ("housekeeping", "🧹 Housekeeping"),
    ("room_service", "🍽️ Room Service"),
    ("maintenance", "🔧 Maintenance"),
    ("concierge", "🛎️ Concierge"),
]

SERVICE_STATUSES = [
    ("received", "📥 Received"),
    ("in_progress", "🔄 In Progress"),
    ("completed", "✅ Completed"),
    ("cancelled", "🚫 Cancelled"),
]

PRIORITY_CHOICES = [
    ("low", "ℹ️ Low"),
    ("medium", "⚠️ Medium"),
    ("high", "🚨 High"),
]

# Agent inbox
NOTIFICATION_TYPES = [
    ("offer", "Special Offer"),
    ("booking_status", "Booking Status"),
    ("announcement", "Announcement"),
]

STAFF_ROLES = [
    ("receptionist", "Receptionist"),
    ("manager", "Manager"),
    ("supervisor", "Supervisor"),
]

DEFAULT_COMMISSION_PERCENTAGE = 10
DEFAULT_COUNTRY_CODE = "+91"
