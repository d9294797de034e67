"""End-to-end flows across registration, onboarding and authorization."""

from churchapp.core.tenant_resolver import resolve_tenant_context
from churchapp.models.church import Church
from churchapp.models.role import Role
from tests.conftest import bearer


def register(client, email, first_name="Ana"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": "secret123", "first_name": first_name},
    )
    assert response.status_code == 201
    return response.json()["token"]


def login(client, email):
    response = client.post("/api/auth/login", json={"email": email, "password": "secret123"})
    assert response.status_code == 200
    return response.json()["token"]


def found_church(client, email, name):
    user_token = register(client, email)
    response = client.post("/api/churches/", json={"name": name}, headers=bearer(user_token))
    assert response.status_code == 201
    return response.json()


def test_user_becomes_general_admin_on_church_creation(client):
    """User token has no tenant; the church-creation token carries it"""
    user_token = register(client, "pastor@example.com")
    before = resolve_tenant_context(user_token)
    assert not before.is_complete
    assert before.member_id is None

    data = client.post("/api/churches/", json={"name": "Igreja Viva"}, headers=bearer(user_token)).json()
    after = resolve_tenant_context(data["token"])

    assert after.is_complete
    assert after.role is Role.ADMINGERAL
    assert after.member_id is not None
    assert after.branch_id is not None
    assert after.church_id == data["church"]["id"]


def test_church_creation_twice_keeps_one_church(client, db_session):
    user_token = register(client, "pastor@example.com")

    ids = [
        client.post("/api/churches/", json={"name": "Igreja Viva"}, headers=bearer(user_token)).json()["church"]["id"]
        for _ in range(2)
    ]

    assert ids[0] == ids[1]
    assert db_session.query(Church).filter(Church.id == ids[0]).count() == 1
    assert db_session.query(Church).count() == 1


def test_restricted_permission_after_promotion(client):
    """MEMBER is refused finances_manage; after promotion to COORDINATOR the grant succeeds"""
    founder = found_church(client, "pastor@example.com", "Igreja Viva")
    admin_headers = bearer(founder["token"])

    created = client.post(
        "/api/members/",
        json={
            "email": "joao@example.com",
            "password": "secret123",
            "first_name": "João",
            "branch_id": founder["branch"]["id"],
        },
        headers=admin_headers,
    ).json()
    member_id = created["id"]

    rejected = client.post(
        f"/api/permissions/{member_id}", json={"permissions": ["finances_manage"]}, headers=admin_headers
    )
    assert rejected.status_code == 403
    assert "Membros com role MEMBER não podem receber as permissões: finances_manage" in rejected.json()["detail"]

    promoted = client.patch(f"/api/members/{member_id}/role", json={"role": "COORDINATOR"}, headers=admin_headers)
    assert promoted.status_code == 200

    granted = client.post(
        f"/api/permissions/{member_id}", json={"permissions": ["finances_manage"]}, headers=admin_headers
    )
    assert granted.status_code == 200

    # The member's next token carries the grant and unlocks finances
    member_token = login(client, "joao@example.com")
    context = resolve_tenant_context(member_token)
    assert context.role is Role.COORDINATOR
    assert "finances_manage" in context.permissions

    entry = client.post(
        "/api/finances/",
        json={"title": "Oferta", "amount": 50, "type": "ENTRY"},
        headers=bearer(member_token),
    )
    assert entry.status_code == 201


def test_two_churches_are_isolated(client):
    church_a = found_church(client, "a@example.com", "Igreja A")
    church_b = found_church(client, "b@example.com", "Igreja B")
    headers_a = bearer(church_a["token"])
    headers_b = bearer(church_b["token"])

    client.post("/api/finances/", json={"title": "Dízimo A", "amount": 10, "type": "ENTRY"}, headers=headers_a)
    member_b = client.post(
        "/api/members/",
        json={
            "email": "mb@example.com",
            "password": "secret123",
            "first_name": "Maria",
            "branch_id": church_b["branch"]["id"],
        },
        headers=headers_b,
    ).json()

    assert client.get("/api/finances/", headers=headers_b).json()["entries"] == []
    assert {m["email"] for m in client.get("/api/members/", headers=headers_a).json()["members"]} == {
        "a@example.com"
    }
    assert client.get(f"/api/members/{member_b['id']}", headers=headers_a).status_code == 403
    assert client.get(f"/api/churches/{church_b['church']['id']}", headers=headers_a).status_code == 403
    assert (
        client.post(
            f"/api/permissions/{member_b['id']}", json={"permissions": ["events_manage"]}, headers=headers_a
        ).status_code
        == 403
    )


def test_onboarding_lifecycle(client):
    user_token = register(client, "pastor@example.com")
    headers = bearer(user_token)

    assert client.get("/api/onboarding/state", headers=headers).json()["status"] == "NEW"
    client.post("/api/churches/", json={"name": "Igreja Viva"}, headers=headers)
    assert client.get("/api/onboarding/state", headers=headers).json()["status"] == "PENDING"

    token = client.post("/api/onboarding/complete", headers=headers).json()["token"]

    assert client.get("/api/onboarding/state", headers=bearer(token)).json()["status"] == "COMPLETE"
    assert resolve_tenant_context(token).onboarding_completed is True
