# core/finance.py
from decimal import Decimal

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from .models import Payment


class PaymentStats:
    @staticmethod
    def _safe_sum(queryset, field_name):
        """Helper to safely sum decimals."""
        return queryset.aggregate(
            total=Coalesce(
                Sum(field_name), Value(Decimal("0.00")), output_field=DecimalField()
            )
        )["total"]

    @staticmethod
    def summary(queryset=None):
        """Totals for the rows currently displayed."""
        qs = Payment.objects.all() if queryset is None else queryset
        return {
            "count": qs.count(),
            "total_amount": PaymentStats._safe_sum(qs, "total_amount"),
            "paid_amount": PaymentStats._safe_sum(qs, "paid_amount"),
            "balance_due": PaymentStats._safe_sum(qs, "balance_due"),
            "refund_amount": PaymentStats._safe_sum(qs, "refund_amount"),
        }

    @staticmethod
    def count_by_status(queryset=None):
        qs = Payment.objects.all() if queryset is None else queryset
        rows = qs.values("payment_status").annotate(n=Count("id"))
        return {row["payment_status"]: row["n"] for row in rows}
