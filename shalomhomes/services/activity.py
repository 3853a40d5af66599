from decimal import Decimal
import logging
from typing import Optional

from ..models.models import Activity
from ..storage import Storage

logger = logging.getLogger(__name__)


def record_activity(
    storage: Storage,
    actor_user_id: int,
    action: str,
    entity_type: str,
    entity_id: int,
    details: Optional[str] = None,
) -> Activity:
    entry = storage.create_activity(
        {
            "user_id": actor_user_id,
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "details": details,
        }
    )
    logger.info("user %s %s %s %s", actor_user_id, action, entity_type, entity_id)
    return entry


def format_amount(cents: int) -> str:
    """Dollars without trailing zeros: 1500 -> $15, 1550 -> $15.5."""
    return f"${Decimal(cents) / 100}"
