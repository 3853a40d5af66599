import logging
from datetime import timedelta

from ..models.models import utcnow
from ..storage import Storage

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    {
        "username": "admin",
        "email": "admin@shalomhomes.com",
        "name": "Administrator",
        "password": "admin123",
        "role": "owner",
        "phone": "+1234567890",
    },
    {
        "username": "familyadmin",
        "email": "family@shalomhomes.com",
        "name": "Family Admin",
        "password": "Family1400",
        "role": "owner",
        "phone": None,
    },
]

SAMPLE_PROPERTIES = [
    {
        "name": "Shalom Heights",
        "address": "123 Shalom St",
        "city": "Jerusalem",
        "district": "Central District",
        "status": "active",
        "type": "apartment",
        "price": 1200,
        "bedrooms": 2,
        "bathrooms": 1,
        "size": 75,
        "latitude": 31.768319,
        "longitude": 35.213710,
        "apartment": {"number": "302", "status": "occupied", "price": 1200},
    },
    {
        "name": "Garden Villas",
        "address": "456 Garden Ave",
        "city": "Tel Aviv",
        "district": "Central District",
        "status": "active",
        "type": "apartment",
        "price": 1450,
        "bedrooms": 3,
        "bathrooms": 2,
        "size": 95,
        "latitude": 32.0853,
        "longitude": 34.7818,
        "apartment": {"number": "105", "status": "maintenance", "price": 1450},
    },
    {
        "name": "Shalom Towers",
        "address": "789 Tower Rd",
        "city": "Haifa",
        "district": "Northern District",
        "status": "active",
        "type": "apartment",
        "price": 980,
        "bedrooms": 1,
        "bathrooms": 1,
        "size": 55,
        "latitude": 32.7940,
        "longitude": 34.9896,
        "apartment": {"number": "501", "status": "vacant", "price": 980},
    },
]


def seed_sample_data(storage: Storage) -> bool:
    """Populate an empty store with demo accounts and properties.

    Returns True when data was written. Failures are logged, not raised.
    """
    try:
        if storage.count_users() > 0:
            return False

        logger.info("Seeding %s storage with sample data...", storage.name)
        users = [storage.create_user(dict(user)) for user in SAMPLE_USERS]
        admin = users[0]

        first_apartment = None
        for entry in SAMPLE_PROPERTIES:
            fields = dict(entry)
            apartment_fields = fields.pop("apartment")
            prop = storage.create_property(fields)
            apartment = storage.create_apartment({**apartment_fields, "property_id": prop.id, "tenant_id": None})
            first_apartment = first_apartment or apartment

        storage.create_task(
            {
                "title": "Fix leaking faucet",
                "description": f"The faucet in apartment {first_apartment.number} is leaking and needs to be fixed.",
                "status": "open",
                "priority": "medium",
                "type": "maintenance",
                "property_id": first_apartment.property_id,
                "apartment_id": first_apartment.id,
                "assigned_to_id": admin.id,
                "reported_by_id": admin.id,
                "due_date": utcnow() + timedelta(days=7),
            }
        )
        logger.warning("Created demo accounts %s; change their passwords.", ", ".join(u.username for u in users))
        return True
    except Exception:
        logger.exception("Error seeding sample data.")
        return False
