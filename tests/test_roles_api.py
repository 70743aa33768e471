# tests/test_roles_api.py

"""
Tests for the role registry endpoints and the permission/page catalogs.
"""

from fastapi.testclient import TestClient

from catalog_admin.models import AuditLog, Role, User, VerificationStatus
from catalog_admin.services.role_service import role_service


def test_roles_listing_requires_roles_page(client: TestClient, make_user, auth_headers):
    viewer = make_user("Viewer")
    response = client.get("/api/admin/roles", headers=auth_headers(viewer))
    assert response.status_code == 403


def test_admin_lists_roles(client: TestClient, make_user, auth_headers):
    admin = make_user("Admin")
    response = client.get("/api/admin/roles", headers=auth_headers(admin))
    assert response.status_code == 200
    assert [r["level"] for r in response.json()] == [100, 80, 60, 50, 40, 20, 10]


def test_get_role(client: TestClient, make_user, roles, auth_headers):
    admin = make_user("Admin")
    response = client.get(f"/api/admin/roles/{roles['Viewer'].id}", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["name"] == "Viewer"
    assert response.json()["is_system"] is True


def test_get_missing_role(client: TestClient, make_user, auth_headers):
    admin = make_user("Admin")
    assert client.get("/api/admin/roles/999", headers=auth_headers(admin)).status_code == 404


def test_update_role_pages(client: TestClient, db, make_user, roles, auth_headers):
    admin = make_user("Admin")
    viewer = make_user("Viewer")
    response = client.patch(
        f"/api/admin/roles/{roles['Viewer'].id}/pages",
        json={"allowed_pages": ["/", "/products"]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["allowed_pages"] == ["/", "/products"]

    pages = client.get("/api/auth/pages", headers=auth_headers(viewer)).json()
    assert [p["path"] for p in pages] == ["/", "/products"]
    assert db.query(AuditLog).filter(AuditLog.action == "role.pages_updated").count() == 1


def test_update_role_pages_rejects_unknown_page(client: TestClient, make_user, roles, auth_headers):
    admin = make_user("Admin")
    response = client.patch(
        f"/api/admin/roles/{roles['Viewer'].id}/pages",
        json={"allowed_pages": ["/", "/secret-reports"]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 422
    assert "/secret-reports" in response.json()["detail"]


def test_update_pages_of_own_tier_forbidden(client: TestClient, make_user, roles, auth_headers):
    admin = make_user("Admin")
    response = client.patch(
        f"/api/admin/roles/{roles['Admin'].id}/pages",
        json={"allowed_pages": ["/"]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 403


def test_update_pages_requires_manage_users(client: TestClient, make_user, roles, auth_headers):
    manager = make_user("Product Manager")
    response = client.patch(
        f"/api/admin/roles/{roles['Viewer'].id}/pages",
        json={"allowed_pages": ["/"]},
        headers=auth_headers(manager),
    )
    assert response.status_code == 403


def test_create_and_delete_custom_role(client: TestClient, db, make_user, auth_headers):
    apex = make_user("Super Admin")
    response = client.post(
        "/api/admin/roles",
        json={
            "name": "Brand Editor",
            "level": 45,
            "permissions": ["manage_brands"],
            "allowed_pages": ["/", "/company-infos"],
        },
        headers=auth_headers(apex),
    )
    assert response.status_code == 201
    role_id = response.json()["id"]
    assert response.json()["is_system"] is False

    response = client.delete(f"/api/admin/roles/{role_id}", headers=auth_headers(apex))
    assert response.status_code == 200
    actions = [log.action for log in db.query(AuditLog).order_by(AuditLog.id).all()]
    assert actions == ["role.created", "role.deleted"]


def test_create_role_requires_manage_roles(client: TestClient, make_user, auth_headers):
    admin = make_user("Admin")
    response = client.post(
        "/api/admin/roles",
        json={"name": "Sneaky", "level": 10},
        headers=auth_headers(admin),
    )
    assert response.status_code == 403


def test_create_role_above_custom_ceiling(client: TestClient, make_user, auth_headers):
    apex = make_user("Super Admin")
    response = client.post(
        "/api/admin/roles",
        json={"name": "Shadow Admin", "level": 95},
        headers=auth_headers(apex),
    )
    assert response.status_code == 422


def test_delete_system_role_forbidden(client: TestClient, make_user, roles, auth_headers):
    apex = make_user("Super Admin")
    response = client.delete(f"/api/admin/roles/{roles['Viewer'].id}", headers=auth_headers(apex))
    assert response.status_code == 403


def test_permission_catalog_grouped(client: TestClient, make_user, auth_headers):
    viewer = make_user("Viewer")
    response = client.get("/api/admin/permissions", headers=auth_headers(viewer))
    assert response.status_code == 200
    keys = {p["key"] for group in response.json().values() for p in group}
    assert {"manage_users", "view_products", "all_access"} <= keys


def test_page_catalog_grouped(client: TestClient, make_user, auth_headers):
    viewer = make_user("Viewer")
    response = client.get("/api/admin/pages", headers=auth_headers(viewer))
    paths = {p["path"] for group in response.json().values() for p in group}
    assert "/roles" in paths
    assert "/profile" in paths


def _custom_role_user(db, permissions):
    role = role_service.create_role(db, "Regional Lead", 50, permissions, ["/", "/roles", "/users"])
    user = User(email="lead@example.com", role_id=role.id,
                verification_status=VerificationStatus.verified)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def test_non_apex_cannot_grant_all_access(client: TestClient, db, auth_headers):
    lead = _custom_role_user(db, ["manage_roles", "manage_users"])
    response = client.post(
        "/api/admin/roles",
        json={"name": "Everything", "level": 40, "permissions": ["all_access"]},
        headers=auth_headers(lead),
    )
    assert response.status_code == 403
    db.expire_all()
    assert db.query(Role).filter(Role.name == "Everything").count() == 0


def test_non_apex_cannot_grant_permissions_it_lacks(client: TestClient, db, auth_headers):
    lead = _custom_role_user(db, ["manage_roles", "manage_users"])
    response = client.post(
        "/api/admin/roles",
        json={"name": "Merchandiser", "level": 40, "permissions": ["manage_users", "manage_products"]},
        headers=auth_headers(lead),
    )
    assert response.status_code == 403
    assert "manage_products" in response.json()["detail"]


def test_non_apex_grants_subset_of_own_permissions(client: TestClient, db, auth_headers):
    lead = _custom_role_user(db, ["manage_roles", "manage_users"])
    response = client.post(
        "/api/admin/roles",
        json={"name": "Onboarding", "level": 40, "permissions": ["manage_users"]},
        headers=auth_headers(lead),
    )
    assert response.status_code == 201
    assert response.json()["permissions"] == ["manage_users"]


def test_apex_may_grant_all_access(client: TestClient, make_user, auth_headers):
    apex = make_user("Super Admin")
    response = client.post(
        "/api/admin/roles",
        json={"name": "Deputy", "level": 90, "permissions": ["all_access"]},
        headers=auth_headers(apex),
    )
    assert response.status_code == 201
