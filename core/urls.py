# core/urls.py
from django.urls import path

from . import views

urlpatterns = [
    # --- Healthcheck ---
    path("healthz/", views.healthz, name="healthz"),
    # --- Admin Features ---
    path("dashboard/", views.operations_dashboard, name="operations_dashboard"),
    path(
        "operations/booking-requests/<int:pk>/review/",
        views.review_booking_request,
        name="review_booking_request",
    ),
    # --- Guest Features (Public) ---
    # Link shared with the guest after check-in
    path("guests/<int:guest_id>/photos/", views.guest_photos, name="guest_photos"),
]
