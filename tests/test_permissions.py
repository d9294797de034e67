from churchapp.core.role_policy import PermissionType
from churchapp.models.permission import Permission
from churchapp.models.role import Role
from churchapp.services.permission_service import restricted_rejection_message
from tests.conftest import headers_for, make_branch, make_member
from tests.conftest import create_test_token, bearer


def stored_types(db_session, member_id):
    db_session.expire_all()
    rows = db_session.query(Permission).filter(Permission.member_id == member_id).all()
    return sorted(p.type for p in rows)


class TestPermissionCatalogEndpoint:
    def test_lists_every_type_with_restricted_flag(self, client, admin_a_headers):
        response = client.get("/api/permissions/", headers=admin_a_headers)

        assert response.status_code == 200
        catalog = {entry["type"]: entry["restricted"] for entry in response.json()}
        assert catalog == {
            "members_view": False,
            "members_manage": True,
            "events_manage": False,
            "devotional_manage": False,
            "finances_manage": True,
            "contributions_manage": True,
            "church_manage": True,
        }


class TestAssignPermissions:
    """Tests for POST /api/permissions/{member_id}"""

    def test_member_receives_unrestricted_permission(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")

        response = client.post(
            f"/api/permissions/{member.id}",
            json={"permissions": ["events_manage"]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["permissions"] == ["events_manage", "members_view"]
        assert data["token"] is None
        assert stored_types(db_session, member.id) == ["events_manage", "members_view"]

    def test_member_cannot_receive_restricted_permissions(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")

        response = client.post(
            f"/api/permissions/{member.id}",
            json={"permissions": ["finances_manage", "events_manage", "church_manage"]},
            headers=admin_a_headers,
        )

        assert response.status_code == 403
        assert response.json()["detail"] == (
            "Membros com role MEMBER não podem receber as permissões: church_manage, finances_manage"
        )
        # Rejection leaves the stored grants untouched
        assert stored_types(db_session, member.id) == ["members_view"]

    def test_coordinator_can_receive_restricted(self, client, db_session, church_a, admin_a_headers):
        coordinator = make_member(db_session, church_a.branch, "c@example.com", role=Role.COORDINATOR)

        response = client.post(
            f"/api/permissions/{coordinator.id}",
            json={"permissions": ["finances_manage"]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert response.json()["permissions"] == ["finances_manage", "members_view"]

    def test_full_replace_removes_omitted_grants(self, client, db_session, church_a, admin_a_headers):
        member = make_member(
            db_session, church_a.branch, "m@example.com", permissions=("events_manage", "devotional_manage")
        )

        response = client.post(
            f"/api/permissions/{member.id}",
            json={"permissions": ["devotional_manage"]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert stored_types(db_session, member.id) == ["devotional_manage", "members_view"]

    def test_empty_set_keeps_members_view(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com", permissions=("events_manage",))

        response = client.post(
            f"/api/permissions/{member.id}", json={"permissions": []}, headers=admin_a_headers
        )

        assert response.status_code == 200
        assert stored_types(db_session, member.id) == ["members_view"]

    def test_unknown_permission_type(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")

        response = client.post(
            f"/api/permissions/{member.id}",
            json={"permissions": ["launch_rockets"]},
            headers=admin_a_headers,
        )

        assert response.status_code == 400
        assert "launch_rockets" in response.json()["detail"]

    def test_unknown_member(self, client, admin_a_headers):
        response = client.post(
            "/api/permissions/no-such-member", json={"permissions": []}, headers=admin_a_headers
        )
        assert response.status_code == 404

    def test_cross_tenant_target_forbidden(self, client, db_session, church_a, church_b, admin_b_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")

        response = client.post(
            f"/api/permissions/{member.id}",
            json={"permissions": ["events_manage"]},
            headers=admin_b_headers,
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied"
        assert stored_types(db_session, member.id) == ["members_view"]

    def test_coordinator_cannot_assign(self, client, db_session, church_a):
        coordinator = make_member(
            db_session, church_a.branch, "c@example.com", role=Role.COORDINATOR, permissions=("members_manage",)
        )
        member = make_member(db_session, church_a.branch, "m@example.com")

        response = client.post(
            f"/api/permissions/{member.id}",
            json={"permissions": ["events_manage"]},
            headers=headers_for(db_session, coordinator),
        )

        assert response.status_code == 403

    def test_branch_admin_limited_to_own_branch(self, client, db_session, church_a):
        other_branch = make_branch(db_session, church_a.church_id, "Filial Norte")
        branch_admin = make_member(db_session, church_a.branch, "fa@example.com", role=Role.ADMINFILIAL)
        own = make_member(db_session, church_a.branch, "own@example.com")
        foreign = make_member(db_session, other_branch, "far@example.com")
        headers = headers_for(db_session, branch_admin)

        ok = client.post(f"/api/permissions/{own.id}", json={"permissions": ["events_manage"]}, headers=headers)
        denied = client.post(
            f"/api/permissions/{foreign.id}", json={"permissions": ["events_manage"]}, headers=headers
        )

        assert ok.status_code == 200
        assert denied.status_code == 403

    def test_stale_admin_token_uses_stored_role(self, client, db_session, church_a):
        """A demoted admin's old token no longer grants assignment rights"""
        branch_admin = make_member(db_session, church_a.branch, "fa@example.com", role=Role.ADMINFILIAL)
        stale_headers = headers_for(db_session, branch_admin)
        member = make_member(db_session, church_a.branch, "m@example.com")

        branch_admin.role = Role.MEMBER
        db_session.commit()

        response = client.post(
            f"/api/permissions/{member.id}", json={"permissions": ["events_manage"]}, headers=stale_headers
        )

        assert response.status_code == 403

    def test_self_assignment_returns_fresh_token(self, client, db_session, church_a, admin_a_headers):
        response = client.post(
            f"/api/permissions/{church_a.id}",
            json={"permissions": ["finances_manage"]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        token = response.json()["token"]
        assert token is not None
        me = client.get("/api/auth/me", headers=bearer(token)).json()
        assert me["permissions"] == ["finances_manage", "members_view"]
        # ADMINGERAL still holds the full catalog through the role
        assert PermissionType.CHURCH_MANAGE.value in me["effective_permissions"]

    def test_incomplete_context_forbidden(self, client, db_session, church_a):
        member = make_member(db_session, church_a.branch, "m@example.com")
        headers = bearer(create_test_token(user_id="onboarding-user"))

        response = client.post(f"/api/permissions/{member.id}", json={"permissions": []}, headers=headers)

        assert response.status_code == 403

    def test_target_refresh_picks_up_new_grants(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")
        member_headers = headers_for(db_session, member)

        client.post(
            f"/api/permissions/{member.id}", json={"permissions": ["events_manage"]}, headers=admin_a_headers
        )
        refreshed = client.post("/api/auth/refresh", headers=member_headers).json()

        me = client.get("/api/auth/me", headers=bearer(refreshed["token"])).json()
        assert me["permissions"] == ["events_manage", "members_view"]


def test_rejection_message_format():
    message = restricted_rejection_message("MEMBER", ["finances_manage", "members_manage"])
    assert message == "Membros com role MEMBER não podem receber as permissões: finances_manage, members_manage"
