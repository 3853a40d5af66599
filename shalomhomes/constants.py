USER_ROLES = ("client", "owner", "caretaker", "contractor", "handyman")

DEFAULT_USER_ROLE = "client"

# Roles allowed to manage properties, users and payments
STAFF_ROLES = ("owner", "caretaker")

TASK_STATUSES = ("open", "in_progress", "completed")

TASK_PRIORITIES = ("low", "medium", "high")

ACTIVITY_CREATED = "created"
ACTIVITY_UPDATED = "updated"
