from __future__ import annotations

from datetime import date, timedelta


def _member_payload(church_id: int, name: str, **overrides) -> dict:
    payload = {
        "name": name,
        "sex": "Male",
        "church_id": church_id,
        "admission_date": "2024-02-04",
        "admission_method": "Profession of faith",
        "cpf": None,
    }
    payload.update(overrides)
    return payload


def test_member_create_allocates_number(client, authorize, registry_user, sample_church):
    authorize(registry_user)
    first = client.post("/members", json=_member_payload(sample_church.id, "Rafael Gomes"))
    assert first.status_code == 201, first.text
    assert first.json()["membership_number"] == "20240002"
    assert first.json()["church"]["name"] == "Igreja Presbiteriana Central"

    second = client.post("/members", json=_member_payload(sample_church.id, "Sérgio Gomes"))
    assert second.json()["membership_number"] == "20240004"

    audit = client.get(f"/members/{first.json()['id']}/audit")
    assert audit.status_code == 200
    assert [entry["field"] for entry in audit.json()] == ["membership_number"]


def test_member_create_with_manual_number(client, authorize, registry_user, sample_church, sample_member):
    authorize(registry_user)
    resp = client.post(
        "/members",
        json=_member_payload(sample_church.id, "Tomás Leal", membership_number="20240003"),
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["membership_number"] == "20240003"

    taken = client.post(
        "/members",
        json=_member_payload(sample_church.id, "Ulisses Leal", membership_number=sample_member.membership_number),
    )
    assert taken.status_code == 409
    assert taken.json()["code"] == "constraint_violation"

    malformed = client.post(
        "/members",
        json=_member_payload(sample_church.id, "Ulisses Leal", membership_number="2024-3"),
    )
    assert malformed.status_code == 422


def test_member_create_rejects_unknown_church(client, authorize, registry_user, sample_church):
    authorize(registry_user)
    resp = client.post("/members", json=_member_payload(999, "Vicente Prado"))
    assert resp.status_code == 404


def test_member_admission_date_cannot_be_in_future(client, authorize, registry_user, sample_church):
    authorize(registry_user)
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    resp = client.post("/members", json=_member_payload(sample_church.id, "Wagner Reis", admission_date=tomorrow))
    assert resp.status_code == 422


def test_member_discipline_requires_date(client, authorize, registry_user, sample_member):
    authorize(registry_user)
    resp = client.patch(f"/members/{sample_member.id}", json={"disciplined": True})
    assert resp.status_code == 400

    ok = client.patch(
        f"/members/{sample_member.id}",
        json={"disciplined": True, "discipline_date": "2024-06-01"},
    )
    assert ok.status_code == 200, ok.text
    assert ok.json()["disciplined"] is True


def test_member_update_keeps_number_and_records_audit(client, authorize, registry_user, sample_member):
    authorize(registry_user)
    resp = client.patch(
        f"/members/{sample_member.id}",
        json={"admission_date": "2020-01-05", "situation": "Inactive"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["membership_number"] == "20240002"
    assert resp.json()["situation"] == "Inactive"

    audit = client.get(f"/members/{sample_member.id}/audit").json()
    assert {entry["field"] for entry in audit} == {"admission_date", "situation"}
    situation = next(entry for entry in audit if entry["field"] == "situation")
    assert situation["old_value"] == "Active"
    assert situation["new_value"] == "Inactive"
    assert situation["changed_by_id"] == registry_user.id


def test_membership_number_overwrite_is_admin_only(client, authorize, registry_user, admin_user, sample_member):
    authorize(registry_user)
    denied = client.patch(f"/members/{sample_member.id}", json={"membership_number": "20240100"})
    assert denied.status_code == 400
    assert denied.json()["code"] == "invalid_operation"

    authorize(admin_user)
    allowed = client.patch(f"/members/{sample_member.id}", json={"membership_number": "20240100"})
    assert allowed.status_code == 200, allowed.text
    assert allowed.json()["membership_number"] == "20240100"


def test_member_list_filters(client, authorize, registry_user, sample_member, make_member):
    make_member("Xavier Antunes", membership_number="20240004", situation="Attends")
    authorize(registry_user)

    everyone = client.get("/members").json()
    assert everyone["total"] == 2

    attends = client.get("/members", params={"situation": "Attends"}).json()
    assert [item["name"] for item in attends["items"]] == ["Xavier Antunes"]

    by_number = client.get("/members", params={"q": "20240002"}).json()
    assert [item["id"] for item in by_number["items"]] == [sample_member.id]


def test_member_family_endpoints(client, authorize, registry_user, admin_user, make_member):
    son = make_member("Caio Ferreira", membership_number="20240010")
    mother = make_member("Denise Ferreira", sex="Female", membership_number="20240012")
    authorize(registry_user)

    added = client.post(
        f"/members/{son.id}/family",
        json={"related_member_id": mother.id, "relationship_type": "Mother"},
    )
    assert added.status_code == 201, added.text
    body = added.json()
    assert body["edge"]["relationship_type"] == "Mother"
    assert body["mirror"] == {
        "id": body["mirror"]["id"],
        "member_id": mother.id,
        "related_member_id": son.id,
        "relationship_type": "Child",
    }

    duplicate = client.post(
        f"/members/{son.id}/family",
        json={"related_member_id": mother.id, "relationship_type": "Mother"},
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "duplicate_edge"

    own = client.post(
        f"/members/{son.id}/family",
        json={"related_member_id": son.id, "relationship_type": "Sibling"},
    )
    assert own.status_code == 400

    family = client.get(f"/members/{mother.id}/family").json()
    assert [(entry["relationship_type"], entry["member"]["name"]) for entry in family] == [("Child", "Caio Ferreira")]

    denied = client.delete(f"/family-relationships/{body['edge']['id']}")
    assert denied.status_code == 403

    authorize(admin_user)
    removed = client.delete(f"/family-relationships/{body['edge']['id']}")
    assert removed.status_code == 204
    assert client.get(f"/members/{son.id}/family").json() == []
    assert len(client.get(f"/members/{mother.id}/family").json()) == 1


def test_relationship_import_is_admin_only(client, authorize, registry_user, admin_user, make_member):
    son = make_member("Caio Ferreira", membership_number="20240010")
    father = make_member("Eliseu Ferreira", membership_number="20240012")
    payload = {"edges": [{"member_id": son.id, "related_member_id": father.id, "relationship_type": "Father"}]}

    authorize(registry_user)
    assert client.post("/family-relationships/import", json=payload).status_code == 403

    authorize(admin_user)
    resp = client.post("/family-relationships/import", json=payload)
    assert resp.status_code == 201, resp.text
    assert len(resp.json()) == 1
    assert client.get(f"/members/{father.id}/family").json() == []

    again = client.post("/family-relationships/import", json=payload)
    assert again.status_code == 409


def test_member_delete_requires_administrator(client, authorize, registry_user, admin_user, sample_member):
    authorize(registry_user)
    assert client.delete(f"/members/{sample_member.id}").status_code == 403

    authorize(admin_user)
    assert client.delete(f"/members/{sample_member.id}").status_code == 204
    assert client.get(f"/members/{sample_member.id}").status_code == 404
