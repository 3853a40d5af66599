from shalomhomes.services.activity import format_amount


def test_each_mutation_writes_one_activity(client, create_user, login, memory_storage):
    """Create and status-change endpoints each append exactly one activity row."""
    owner = create_user(role="owner")
    login(owner)

    prop = client.post(
        "/api/properties",
        json={"name": "Garden Villas", "address": "456 Garden Ave", "city": "Tel Aviv", "type": "villa", "price": 1800},
    ).json()
    assert len(memory_storage.get_activities()) == 1

    client.post("/api/apartments", json={"propertyId": prop["id"], "number": "2B", "price": 700})
    assert len(memory_storage.get_activities()) == 2

    task = client.post(
        "/api/tasks", json={"title": "Fix faucet", "type": "maintenance", "propertyId": prop["id"]}
    ).json()
    assert len(memory_storage.get_activities()) == 3

    client.patch(f"/api/tasks/{task['id']}/status", json={"status": "completed"})
    assert len(memory_storage.get_activities()) == 4

    client.post(
        "/api/transactions",
        json={"tenantId": 3, "propertyId": prop["id"], "type": "rent", "amount": 1500, "paymentMethod": "card"},
    )

    activities = memory_storage.get_activities()
    assert len(activities) == 5
    assert all(entry.user_id == owner.id for entry in activities)
    assert [(entry.action, entry.entity_type, entry.details) for entry in activities] == [
        ("created", "transaction", "Created transaction: rent for $15"),
        ("updated", "task", "Updated task status to: completed"),
        ("created", "task", "Created task: Fix faucet"),
        ("created", "apartment", "Created apartment 2B in Garden Villas"),
        ("created", "property", "Created property: Garden Villas"),
    ]


def test_failed_mutations_write_no_activity(client, create_user, login, memory_storage):
    login(create_user(role="owner"))

    client.patch("/api/tasks/999/status", json={"status": "completed"})
    client.post("/api/apartments", json={"propertyId": 999, "number": "1", "price": 1})

    assert memory_storage.get_activities() == []


def test_list_activities_newest_first_with_limit(client, create_user, login):
    assert client.get("/api/activities").status_code == 401

    login(create_user(role="owner"))
    for name in ("First", "Second", "Third"):
        client.post(
            "/api/properties",
            json={"name": name, "address": "1 Road", "city": "Haifa", "type": "apartment", "price": 1},
        )

    everything = client.get("/api/activities").json()
    assert [entry["details"] for entry in everything] == [
        "Created property: Third",
        "Created property: Second",
        "Created property: First",
    ]
    assert {"userId", "entityType", "entityId", "createdAt"} <= set(everything[0])

    latest = client.get("/api/activities", params={"limit": 1}).json()
    assert [entry["details"] for entry in latest] == ["Created property: Third"]

    assert client.get("/api/activities", params={"limit": 0}).status_code == 400


def test_format_amount_renders_cents_as_dollars():
    assert format_amount(1500) == "$15"
    assert format_amount(1550) == "$15.5"
    assert format_amount(120005) == "$1200.05"
    assert format_amount(1) == "$0.01"
