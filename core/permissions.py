# core/permissions.py
"""
RBAC helpers for Managers vs front-desk staff.
"""


def is_manager(user):
    """Check if user is a Manager (superuser or in Managers group)."""
    if not user or not user.is_authenticated:
        return False
    return user.is_superuser or user.groups.filter(name="Managers").exists()


def can_review_b2b(user):
    """Check if user can approve/reject agents and booking requests."""
    return is_manager(user) or user.has_perm("core.review_b2bbookingrequest")


def can_manage_financials(user):
    """Check if user can see payments and edit payment configuration."""
    return is_manager(user) or user.has_perm("core.manage_financials")


def can_manage_staff(user):
    """Staff accounts are managed by managers only."""
    return is_manager(user)
