import pytest

from app.models.role import UserRole
from app.models.session import UserSession
from app.models.user import User
from tests.conftest import register


def _user_id(db_session, email: str) -> str:
    return db_session.query(User).filter(User.email == email).one().id


class TestListMembers:
    """Tests for GET /api/admin/users"""

    def test_admin_lists_tenant_members(self, admin_client, member_client, other_tenant_client):
        response = admin_client.get("/api/admin/users")

        assert response.status_code == 200
        emails = [u["email"] for u in response.json()]
        assert emails == ["alice@x.com", "bob@x.com"]
        assert all("password_hash" not in u for u in response.json())

    def test_member_forbidden(self, member_client):
        response = member_client.get("/api/admin/users")

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_other_tenant_admin_sees_only_own_members(self, admin_client, other_tenant_client):
        emails = [u["email"] for u in other_tenant_client.get("/api/admin/users").json()]
        assert emails == ["carol@y.com"]


class TestUpdateRole:
    """Tests for PUT /api/admin/users/{user_id}/role"""

    def test_promote_member(self, admin_client, member_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")

        response = admin_client.put(f"/api/admin/users/{bob_id}/role", json={"role": "admin"})

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        # Takes effect on bob's next request
        assert member_client.get("/api/admin/users").status_code == 200

    def test_demote_other_admin(self, admin_client, member_client, db_session):
        bob = db_session.query(User).filter(User.email == "bob@x.com").one()
        bob.role = UserRole.ADMIN
        db_session.commit()

        response = admin_client.put(f"/api/admin/users/{bob.id}/role", json={"role": "user"})

        assert response.status_code == 200
        assert member_client.get("/api/admin/users").status_code == 403

    def test_self_demotion_blocked(self, admin_client, db_session):
        alice_id = _user_id(db_session, "alice@x.com")

        response = admin_client.put(f"/api/admin/users/{alice_id}/role", json={"role": "user"})

        assert response.status_code == 400
        assert "demote yourself" in response.json()["detail"]
        db_session.expire_all()
        assert db_session.query(User).filter(User.id == alice_id).one().role == UserRole.ADMIN

    def test_self_demotion_allowed_by_another_admin(self, admin_client, member_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")
        alice_id = _user_id(db_session, "alice@x.com")
        admin_client.put(f"/api/admin/users/{bob_id}/role", json={"role": "admin"})

        response = member_client.put(f"/api/admin/users/{alice_id}/role", json={"role": "user"})

        assert response.status_code == 200
        assert response.json()["role"] == "user"

    @pytest.mark.parametrize("role", ["owner", "superuser", "ADMIN", ""])
    def test_invalid_role_rejected(self, admin_client, member_client, db_session, role):
        bob_id = _user_id(db_session, "bob@x.com")

        response = admin_client.put(f"/api/admin/users/{bob_id}/role", json={"role": role})

        assert response.status_code == 400
        assert response.json()["field"] == "role"

    def test_member_cannot_change_roles(self, admin_client, member_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")

        response = member_client.put(f"/api/admin/users/{bob_id}/role", json={"role": "admin"})

        assert response.status_code == 403

    def test_cross_tenant_user_not_found(self, admin_client, other_tenant_client, db_session):
        carol_id = _user_id(db_session, "carol@y.com")

        response = admin_client.put(f"/api/admin/users/{carol_id}/role", json={"role": "user"})

        assert response.status_code == 404
        db_session.expire_all()
        assert db_session.query(User).filter(User.id == carol_id).one().role == UserRole.ADMIN

    def test_unknown_user_not_found(self, admin_client):
        response = admin_client.put("/api/admin/users/does-not-exist/role", json={"role": "admin"})
        assert response.status_code == 404


class TestRemoveMember:
    """Tests for DELETE /api/admin/users/{user_id}"""

    def test_remove_member(self, admin_client, member_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")

        response = admin_client.delete(f"/api/admin/users/{bob_id}")

        assert response.status_code == 204
        db_session.expire_all()
        bob = db_session.query(User).filter(User.id == bob_id).one()
        assert bob.tenant_id is None
        assert bob.role == UserRole.USER
        # Removed, not deleted; sessions are gone
        assert all(s.user_id != bob_id for s in db_session.query(UserSession).all())
        assert member_client.get("/api/policies").status_code == 401

    def test_removed_member_logs_in_without_data_access(self, admin_client, member_client, make_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")
        admin_client.delete(f"/api/admin/users/{bob_id}")

        c = make_client()
        login = c.post("/api/auth/login", json={"email": "bob@x.com", "password": "secret123"})
        assert login.status_code == 200
        assert c.get("/api/policies").status_code == 403

    def test_cannot_remove_self(self, admin_client, db_session):
        alice_id = _user_id(db_session, "alice@x.com")

        response = admin_client.delete(f"/api/admin/users/{alice_id}")

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot remove yourself"

    def test_removing_an_admin_promotes_nobody(self, admin_client, member_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")
        alice_id = _user_id(db_session, "alice@x.com")
        admin_client.put(f"/api/admin/users/{bob_id}/role", json={"role": "admin"})

        assert member_client.delete(f"/api/admin/users/{alice_id}").status_code == 204
        assert member_client.put(f"/api/admin/users/{bob_id}/role", json={"role": "user"}).status_code == 400

        db_session.expire_all()
        roles = {u.email: u.role for u in db_session.query(User).all()}
        assert roles == {"alice@x.com": UserRole.USER, "bob@x.com": UserRole.ADMIN}

    def test_cross_tenant_removal_not_found(self, admin_client, other_tenant_client, db_session):
        carol_id = _user_id(db_session, "carol@y.com")

        response = admin_client.delete(f"/api/admin/users/{carol_id}")

        assert response.status_code == 404
        assert other_tenant_client.get("/api/policies").status_code == 200

    def test_member_cannot_remove(self, admin_client, member_client, db_session):
        alice_id = _user_id(db_session, "alice@x.com")
        assert member_client.delete(f"/api/admin/users/{alice_id}").status_code == 403


class TestResetPassword:
    """Tests for PUT /api/admin/users/{user_id}/reset-password"""

    def test_reset_member_password(self, admin_client, member_client, make_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")

        response = admin_client.put(
            f"/api/admin/users/{bob_id}/reset-password", json={"new_password": "fresh-pass"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password reset successfully"
        c = make_client()
        assert c.post("/api/auth/login", json={"email": "bob@x.com", "password": "fresh-pass"}).status_code == 200

    def test_short_password_rejected(self, admin_client, member_client, db_session):
        bob_id = _user_id(db_session, "bob@x.com")
        response = admin_client.put(
            f"/api/admin/users/{bob_id}/reset-password", json={"new_password": "abc"}
        )
        assert response.status_code == 400

    def test_cross_tenant_not_found(self, admin_client, other_tenant_client, db_session):
        carol_id = _user_id(db_session, "carol@y.com")
        response = admin_client.put(
            f"/api/admin/users/{carol_id}/reset-password", json={"new_password": "hijacked"}
        )
        assert response.status_code == 404

    def test_member_forbidden(self, admin_client, member_client, db_session):
        alice_id = _user_id(db_session, "alice@x.com")
        response = member_client.put(
            f"/api/admin/users/{alice_id}/reset-password", json={"new_password": "hijacked"}
        )
        assert response.status_code == 403
