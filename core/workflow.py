# core/workflow.py
"""
Status transition tables and the small pure helpers built on them.

Each workflow maps a current status to the operator actions that are legal
from it, and each action to the status it produces. Statuses missing from a
table are terminal.
"""


class TransitionError(Exception):
    """Raised when an action is not legal for an entity's current status."""


class Workflow:
    def __init__(self, name, transitions):
        self.name = name
        self.transitions = transitions

    def allowed_actions(self, status):
        return tuple(self.transitions.get(status, {}))

    def can(self, status, action):
        return action in self.transitions.get(status, {})

    def is_terminal(self, status):
        return not self.transitions.get(status)

    def next_status(self, status, action):
        try:
            return self.transitions[status][action]
        except KeyError:
            raise TransitionError(
                f"Cannot {action} a {self.name} that is {status or 'unset'}."
            ) from None

    def __repr__(self):
        return f"<Workflow {self.name}>"


AGENT_WORKFLOW = Workflow(
    "B2B agent",
    {"pending": {"approve": "approved", "reject": "rejected"}},
)

BOOKING_REQUEST_WORKFLOW = Workflow(
    "booking request",
    {"pending": {"approve": "approved", "reject": "rejected"}},
)

SERVICE_REQUEST_WORKFLOW = Workflow(
    "service request",
    {
        "received": {"start": "in_progress", "cancel": "cancelled"},
        "in_progress": {"complete": "completed", "cancel": "cancelled"},
    },
)

ACTION_LABELS = {
    "approve": "✅ Approve",
    "reject": "🚫 Reject",
    "start": "▶️ Start",
    "complete": "✔ Complete",
    "cancel": "✖ Cancel",
}


def filter_by_status(rows, status, field="status"):
    """Subset of rows whose status field equals `status`; 'all' keeps everything."""
    if not status or status == "all":
        return list(rows)
    return [row for row in rows if _get(row, field) == status]


def toggle_active(obj, field="is_active"):
    """Flips a boolean flag and writes only that column."""
    setattr(obj, field, not getattr(obj, field))
    obj.save(update_fields=[field])
    return getattr(obj, field)


def _get(row, field):
    if isinstance(row, dict):
        return row.get(field)
    return getattr(row, field, None)
