from churchapp.models.audit_log import AuditAction, AuditLog
from churchapp.models.role import Role
from churchapp.services.permission_service import PermissionService
from churchapp.core.tenant_resolver import resolve_tenant_context
from tests.conftest import headers_for, make_member, token_for


def stored_logs(db_session, entity_id):
    db_session.expire_all()
    return db_session.query(AuditLog).filter(AuditLog.entity_id == entity_id).all()


class TestAuditTrail:
    """Audit rows written by role and permission changes"""

    def test_role_change_recorded(self, client, db_session, church_a, admin_a_headers):
        coordinator = make_member(
            db_session, church_a.branch, "c@example.com", role=Role.COORDINATOR, permissions=("finances_manage",)
        )

        client.patch(f"/api/members/{coordinator.id}/role", json={"role": "MEMBER"}, headers=admin_a_headers)

        [log] = stored_logs(db_session, coordinator.id)
        assert log.action == AuditAction.MEMBER_ROLE_CHANGED
        assert log.church_id == church_a.church_id
        assert log.branch_id == coordinator.branch_id
        assert log.entity_type == "Member"
        assert log.user_id == church_a.user_id
        assert log.user_email == "founder-a@example.com"
        assert log.user_role == "ADMINGERAL"
        assert log.description == "Role alterado de COORDINATOR para MEMBER"
        assert log.details == {
            "oldRole": "COORDINATOR",
            "newRole": "MEMBER",
            "added": [],
            "removed": ["finances_manage"],
        }

    def test_permission_change_recorded(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com", permissions=("events_manage",))

        response = client.post(
            f"/api/permissions/{member.id}", json={"permissions": ["devotional_manage"]}, headers=admin_a_headers
        )
        assert response.status_code == 200

        [log] = stored_logs(db_session, member.id)
        assert log.action == AuditAction.MEMBER_PERMISSIONS_CHANGED
        assert log.description == f"Permissões alteradas para membro {member.id}"
        assert log.details == {
            "permissions": ["devotional_manage", "members_view"],
            "added": ["devotional_manage"],
            "removed": ["events_manage"],
        }

    def test_same_role_writes_nothing(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")

        client.patch(f"/api/members/{member.id}/role", json={"role": "MEMBER"}, headers=admin_a_headers)

        assert stored_logs(db_session, member.id) == []

    def test_rejected_assignment_writes_nothing(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")

        response = client.post(
            f"/api/permissions/{member.id}", json={"permissions": ["finances_manage"]}, headers=admin_a_headers
        )

        assert response.status_code == 403
        assert stored_logs(db_session, member.id) == []

    def test_forbidden_role_change_writes_nothing(self, client, db_session, church_a):
        branch_admin = make_member(db_session, church_a.branch, "fa@example.com", role=Role.ADMINFILIAL)
        member = make_member(db_session, church_a.branch, "m@example.com")

        client.patch(
            f"/api/members/{member.id}/role",
            json={"role": "ADMINFILIAL"},
            headers=headers_for(db_session, branch_admin),
        )

        assert stored_logs(db_session, member.id) == []

    def test_entry_committed_with_grants(self, db_session, church_a):
        member = make_member(db_session, church_a.branch, "m@example.com")
        context = resolve_tenant_context(token_for(db_session, church_a))

        PermissionService(db_session).assign_permissions(member.id, ["events_manage"], context)
        db_session.rollback()

        [log] = stored_logs(db_session, member.id)
        assert log.details["added"] == ["events_manage"]


class TestListAuditLogs:
    """Tests for GET /api/audit"""

    def test_general_admin_lists_church_logs(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")
        client.patch(f"/api/members/{member.id}/role", json={"role": "COORDINATOR"}, headers=admin_a_headers)
        client.post(f"/api/permissions/{member.id}", json={"permissions": ["events_manage"]}, headers=admin_a_headers)

        response = client.get("/api/audit/", headers=admin_a_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {log["action"] for log in data["logs"]} == {
            "MEMBER_ROLE_CHANGED",
            "MEMBER_PERMISSIONS_CHANGED",
        }
        assert all(log["entity_id"] == member.id for log in data["logs"])

    def test_filter_by_action(self, client, db_session, church_a, admin_a_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")
        client.patch(f"/api/members/{member.id}/role", json={"role": "COORDINATOR"}, headers=admin_a_headers)
        client.post(f"/api/permissions/{member.id}", json={"permissions": ["events_manage"]}, headers=admin_a_headers)

        response = client.get(
            "/api/audit/", params={"action": "MEMBER_ROLE_CHANGED"}, headers=admin_a_headers
        )

        data = response.json()
        assert data["total"] == 1
        assert data["logs"][0]["details"]["newRole"] == "COORDINATOR"

    def test_other_church_logs_hidden(self, client, db_session, church_a, church_b, admin_a_headers, admin_b_headers):
        member = make_member(db_session, church_a.branch, "m@example.com")
        client.patch(f"/api/members/{member.id}/role", json={"role": "COORDINATOR"}, headers=admin_a_headers)

        response = client.get("/api/audit/", headers=admin_b_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_branch_admin_forbidden(self, client, db_session, church_a):
        branch_admin = make_member(db_session, church_a.branch, "fa@example.com", role=Role.ADMINFILIAL)

        response = client.get("/api/audit/", headers=headers_for(db_session, branch_admin))

        assert response.status_code == 403

    def test_requires_authentication(self, client):
        response = client.get("/api/audit/")
        assert response.status_code == 401
