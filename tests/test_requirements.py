from datetime import date

import pytest

from services.requirement_service import (
    ContactService,
    RequirementService,
    admin_alert,
    requirement_fields,
)
from tests.conftest import DONOR_ID, OTHER_DONOR_ID
from utils.errors import InvalidInput, NotFound, PersistenceFailure

ADMIN_ID = 900


@pytest.fixture
def requirements(db):
    return RequirementService(store_factory=db.unit_of_work)


@pytest.fixture
def contact(db):
    return ContactService(store_factory=db.unit_of_work)


def test_create_requirement_is_audited(requirements, store):
    requirement = requirements.create(ADMIN_ID, "School Kits", "25000", "2026-12-01",
                                      "2026-12-31", "Stationery for 200 children")

    saved = store.requirements.get_by_id(requirement.id)
    assert saved.budget_amount == 25000.0
    assert saved.tentative_start == date(2026, 12, 1)
    assert saved.created_by == ADMIN_ID
    assert store.audit.recent()[0]["action"] == "create_requirement"
    assert "School Kits" in store.audit.recent()[0]["details"]


def test_requirement_validation_collects_errors(requirements, store):
    with pytest.raises(InvalidInput) as exc:
        requirements.create(ADMIN_ID, "X", "-1", "2026-12-31", "2026-12-01")
    assert exc.value.errors == [
        "Requirement title must be at least 3 characters long.",
        "Budget must be greater than zero.",
        "End date must be on or after the start date.",
    ]
    assert store.requirements.list() == []
    assert store.audit.recent() == []


def test_update_replaces_fields(requirements, store):
    requirement = requirements.create(ADMIN_ID, "School Kits", 25000)

    updated = requirements.update(ADMIN_ID, requirement.id, "School Kits 2027", 30000,
                                  None, "2027-03-31", "Second batch")

    assert updated.title == "School Kits 2027"
    assert updated.budget_amount == 30000.0
    assert updated.tentative_end == date(2027, 3, 31)
    assert updated.created_by == ADMIN_ID
    assert [a["action"] for a in store.audit.recent()] == ["update_requirement", "create_requirement"]


def test_update_failure_keeps_old_values(db, requirements, store):
    requirement = requirements.create(ADMIN_ID, "School Kits", 25000)
    db.failures["requirements.update"] = PersistenceFailure("connection lost")

    with pytest.raises(PersistenceFailure):
        requirements.update(ADMIN_ID, requirement.id, "Renamed", 1)

    assert store.requirements.get_by_id(requirement.id).title == "School Kits"
    assert len(store.audit.recent()) == 1


def test_delete_requirement(requirements, store):
    requirement = requirements.create(ADMIN_ID, "School Kits", 25000)

    requirements.delete(ADMIN_ID, requirement.id)

    assert store.requirements.get_by_id(requirement.id) is None
    assert store.audit.recent()[0]["action"] == "delete_requirement"


@pytest.mark.parametrize("action", ["update", "delete"])
def test_missing_requirement(requirements, store, action):
    args = (ADMIN_ID, 404, "Anything", 10) if action == "update" else (ADMIN_ID, 404)
    with pytest.raises(NotFound, match="Requirement not found."):
        getattr(requirements, action)(*args)
    assert store.audit.recent() == []


def test_list_text_is_newest_first(requirements):
    requirements.create(ADMIN_ID, "First need", 100)
    requirements.create(ADMIN_ID, "Second need", 200)

    text = requirements.list_text()
    assert text.index("Second need") < text.index("First need")


def test_requirement_fields_from_pipes():
    assert requirement_fields(["Roof repair", "1,20,000", "", "2026-06-30"]) == {
        "title": "Roof repair", "budget_amount": "120000", "tentative_start": None,
        "tentative_end": "2026-06-30", "description": "",
    }
    assert requirement_fields(["Roof repair"]) is None


def test_contact_message_uses_profile(contact, store, donor):
    message = contact.send(DONOR_ID, "Tax receipt", "Can I get an 80G certificate?")

    saved = store.messages.recent()[0]
    assert saved.id == message.id
    assert saved.name == "Asha Verma"
    assert saved.email == "asha@example.com"
    assert "Tax receipt" in admin_alert(saved)


def test_contact_message_validation(contact, store, donor):
    with pytest.raises(InvalidInput) as exc:
        contact.send(DONOR_ID, " ", "x" * 2001)
    assert exc.value.errors == ["Subject is required.", "Message must be at most 2000 characters."]
    assert store.messages.recent() == []


def test_contact_requires_registration(contact):
    with pytest.raises(NotFound, match="User not found."):
        contact.send(OTHER_DONOR_ID, "Hello", "Hi there")


def test_recent_messages_text(contact, donor):
    assert contact.recent_text() == "📭 No messages from donors."
    contact.send(DONOR_ID, "Visit", "Can I visit the shelter?")
    assert "Asha Verma <asha@example.com>" in contact.recent_text()
