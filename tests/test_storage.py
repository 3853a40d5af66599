import pytest

from shalomhomes.auth.passwords import verify_password
from shalomhomes.storage import DuplicateUserError, MemStorage, StorageProxy
from shalomhomes.services.seed import seed_sample_data


def _user(username="alice", email=None, **extra):
    data = {
        "username": username,
        "email": email or f"{username}@example.com",
        "name": username.title(),
        "password": "secret123",
        "role": "client",
    }
    data.update(extra)
    return data


def _property(storage, name="Garden Villas"):
    return storage.create_property(
        {
            "name": name,
            "address": "456 Garden Ave",
            "city": "Tel Aviv",
            "status": "active",
            "type": "apartment",
            "price": 1450,
        }
    )


def _task(storage, property_id, **extra):
    data = {
        "title": "Fix leaking faucet",
        "description": "Kitchen faucet drips",
        "status": "open",
        "priority": "medium",
        "type": "maintenance",
        "property_id": property_id,
    }
    data.update(extra)
    return storage.create_task(data)


def test_create_user_hashes_password(storage):
    user = storage.create_user(_user())

    assert user.id is not None
    assert user.hashed_password != "secret123"
    assert verify_password("secret123", user.hashed_password)
    assert user.created_at is not None

    fetched = storage.get_user(user.id)
    assert fetched.username == "alice"
    assert storage.get_user_by_email("alice@example.com").id == user.id
    assert storage.get_user_by_username("alice").id == user.id


def test_user_without_password_stores_none(storage):
    user = storage.create_user(_user("gina", password=None, google_id="g-1"))

    assert user.hashed_password is None
    assert storage.get_user_by_google_id("g-1").id == user.id


@pytest.mark.parametrize(
    "duplicate",
    [
        {"username": "alice", "email": "other@example.com"},
        {"username": "other", "email": "alice@example.com"},
    ],
)
def test_duplicate_user_rejected_without_new_row(storage, duplicate):
    storage.create_user(_user())

    with pytest.raises(DuplicateUserError):
        storage.create_user(_user(**duplicate))

    assert storage.count_users() == 1
    assert len(storage.get_users()) == 1


def test_duplicate_google_id_rejected(storage):
    storage.create_user(_user("first", password=None, google_id="g-7"))

    with pytest.raises(DuplicateUserError):
        storage.create_user(_user("second", password=None, google_id="g-7"))

    assert storage.count_users() == 1


def test_unknown_ids_return_none(storage):
    assert storage.get_user(999) is None
    assert storage.get_user_by_email("nobody@example.com") is None
    assert storage.get_property(999) is None
    assert storage.get_apartment(999) is None
    assert storage.get_task(999) is None
    assert storage.get_transaction(999) is None
    assert storage.update_task_status(999, "completed") is None


def test_ids_increase_per_entity(storage):
    first = _property(storage, "One")
    second = _property(storage, "Two")
    apartment = storage.create_apartment({"property_id": first.id, "number": "1A", "status": "vacant", "price": 900})

    assert second.id == first.id + 1
    assert apartment.id == 1


def test_apartments_and_tasks_filter_by_property(storage):
    first = _property(storage, "One")
    second = _property(storage, "Two")
    storage.create_apartment({"property_id": first.id, "number": "101", "status": "vacant", "price": 900})
    storage.create_apartment({"property_id": second.id, "number": "201", "status": "vacant", "price": 950})
    _task(storage, first.id, assigned_to_id=7)
    _task(storage, second.id)

    assert [a.number for a in storage.get_apartments_by_property(first.id)] == ["101"]
    assert len(storage.get_apartments()) == 2
    assert len(storage.get_tasks_by_property(second.id)) == 1
    assert [t.assigned_to_id for t in storage.get_tasks_by_assignee(7)] == [7]


def test_completing_task_sets_completed_at(storage):
    prop = _property(storage)
    task = _task(storage, prop.id)
    assert task.completed_at is None

    in_progress = storage.update_task_status(task.id, "in_progress")
    assert in_progress.status == "in_progress"
    assert in_progress.completed_at is None

    completed = storage.update_task_status(task.id, "completed")
    assert completed.status == "completed"
    assert completed.completed_at is not None


def test_reopening_task_keeps_completed_at(storage):
    prop = _property(storage)
    task = _task(storage, prop.id)
    completed = storage.update_task_status(task.id, "completed")

    reopened = storage.update_task_status(task.id, "open")

    assert reopened.status == "open"
    # SQLite hands back naive datetimes
    assert reopened.completed_at.replace(tzinfo=None) == completed.completed_at.replace(tzinfo=None)
    assert storage.get_task(task.id).completed_at is not None


def test_transactions_filter_by_tenant(storage):
    prop = _property(storage)
    for tenant_id, amount in ((1, 120000), (2, 5000), (1, 2500)):
        storage.create_transaction(
            {
                "tenant_id": tenant_id,
                "property_id": prop.id,
                "type": "rent",
                "amount": amount,
                "payment_method": "cash",
                "processed_by_id": 1,
            }
        )

    assert [t.amount for t in storage.get_transactions_by_tenant(1)] == [120000, 2500]
    assert len(storage.get_transactions()) == 3


def test_activities_newest_first_with_limit(storage):
    for entity_id in range(1, 5):
        storage.create_activity(
            {"user_id": 1, "action": "created", "entity_type": "task", "entity_id": entity_id, "details": None}
        )

    activities = storage.get_activities()
    assert [a.entity_id for a in activities] == [4, 3, 2, 1]

    latest = storage.get_activities(limit=2)
    assert [a.entity_id for a in latest] == [4, 3]


def test_proxy_delegates_to_swapped_backend(storage):
    placeholder = MemStorage()
    proxy = StorageProxy(placeholder)
    proxy.use(storage)

    user = proxy.create_user(_user("proxied"))

    assert proxy.name == storage.name
    assert storage.get_user(user.id).username == "proxied"
    assert placeholder.count_users() == 0


def test_seed_runs_once_on_empty_store(storage):
    assert seed_sample_data(storage) is True
    users = storage.count_users()
    properties = len(storage.get_properties())

    assert users == 2
    assert properties == 3
    assert len(storage.get_tasks()) == 1

    assert seed_sample_data(storage) is False
    assert storage.count_users() == users
    assert len(storage.get_properties()) == properties


def test_email_lookup_ignores_case(storage):
    user = storage.create_user(_user("mixed", email="  Mixed.Case@Example.COM "))

    assert user.email == "mixed.case@example.com"
    assert storage.get_user_by_email("Mixed.Case@Example.COM").id == user.id
    assert storage.get_user_by_email("MIXED.CASE@EXAMPLE.COM").id == user.id


def test_duplicate_email_differing_in_case_rejected(storage):
    storage.create_user(_user("first", email="shared@example.com"))

    with pytest.raises(DuplicateUserError):
        storage.create_user(_user("second", email="Shared@Example.com"))

    assert storage.count_users() == 1
