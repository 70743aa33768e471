# tests/test_products_api.py

"""
Tests for company-scoped product and company endpoints.
"""

from fastapi.testclient import TestClient

from catalog_admin.models import Product


def test_scoped_listing(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3, 7])
    response = client.get("/api/admin/products", headers=auth_headers(manager))
    assert response.status_code == 200
    assert sorted(p["company_id"] for p in response.json()) == [3, 7]


def test_unscoped_listing_sees_everything(client: TestClient, catalog, make_user, auth_headers):
    viewer = make_user("Viewer")
    response = client.get("/api/admin/products", headers=auth_headers(viewer))
    assert sorted(p["company_id"] for p in response.json()) == [3, 7, 9]


def test_listing_requires_product_permission(client: TestClient, catalog, make_user, auth_headers):
    staff = make_user("Support Staff")
    assert client.get("/api/admin/products", headers=auth_headers(staff)).status_code == 403


def test_out_of_scope_read_is_not_found(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3, 7])
    other = catalog["products"][9].id
    own = catalog["products"][7].id
    assert client.get(f"/api/admin/products/{other}", headers=auth_headers(manager)).status_code == 404
    assert client.get(f"/api/admin/products/{own}", headers=auth_headers(manager)).status_code == 200


def test_create_in_scope(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3])
    response = client.post(
        "/api/admin/products",
        json={"name": "Widget", "company_id": 3},
        headers=auth_headers(manager),
    )
    assert response.status_code == 201
    assert response.json()["company_id"] == 3


def test_create_out_of_scope_forbidden(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3])
    response = client.post(
        "/api/admin/products",
        json={"name": "Widget", "company_id": 9},
        headers=auth_headers(manager),
    )
    assert response.status_code == 403


def test_scoped_user_cannot_create_unowned_product(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3])
    response = client.post("/api/admin/products", json={"name": "Orphan"}, headers=auth_headers(manager))
    assert response.status_code == 403


def test_create_for_missing_company(client: TestClient, catalog, make_user, auth_headers):
    admin = make_user("Admin")
    response = client.post(
        "/api/admin/products",
        json={"name": "Ghost", "company_id": 404},
        headers=auth_headers(admin),
    )
    assert response.status_code == 404


def test_viewer_cannot_create(client: TestClient, catalog, make_user, auth_headers):
    viewer = make_user("Viewer")
    response = client.post("/api/admin/products", json={"name": "Nope"}, headers=auth_headers(viewer))
    assert response.status_code == 403


def test_update_and_move_within_scope(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3, 7])
    product_id = catalog["products"][3].id
    response = client.patch(
        f"/api/admin/products/{product_id}",
        json={"name": "Renamed", "company_id": 7},
        headers=auth_headers(manager),
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["company_id"] == 7


def test_move_out_of_scope_forbidden(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3, 7])
    product_id = catalog["products"][3].id
    response = client.patch(
        f"/api/admin/products/{product_id}",
        json={"company_id": 9},
        headers=auth_headers(manager),
    )
    assert response.status_code == 403


def test_update_out_of_scope_forbidden(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[3])
    product_id = catalog["products"][9].id
    response = client.patch(
        f"/api/admin/products/{product_id}",
        json={"name": "Hijacked"},
        headers=auth_headers(manager),
    )
    assert response.status_code == 403


def test_delete_product(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[9])
    product_id = catalog["products"][9].id
    assert client.delete(f"/api/admin/products/{product_id}", headers=auth_headers(manager)).status_code == 200
    assert client.get(f"/api/admin/products/{product_id}", headers=auth_headers(manager)).status_code == 404


def test_companies_filtered_by_scope(client: TestClient, catalog, make_user, auth_headers):
    manager = make_user("Product Manager", company_ids=[7])
    response = client.get("/api/admin/companies", headers=auth_headers(manager))
    assert [c["id"] for c in response.json()] == [7]


def test_create_company(client: TestClient, catalog, make_user, auth_headers):
    admin = make_user("Admin")
    response = client.post("/api/admin/companies", json={"name": "Acme"}, headers=auth_headers(admin))
    assert response.status_code == 201
    duplicate = client.post("/api/admin/companies", json={"name": "Acme"}, headers=auth_headers(admin))
    assert duplicate.status_code == 409


def test_update_rejects_null_required_fields(client: TestClient, db, catalog, make_user, auth_headers):
    admin = make_user("Admin")
    product_id = catalog["products"][3].id
    for field in ("name", "is_active"):
        response = client.patch(
            f"/api/admin/products/{product_id}",
            json={field: None},
            headers=auth_headers(admin),
        )
        assert response.status_code == 422
        assert field in response.json()["detail"]

    db.expire_all()
    product = db.get(Product, product_id)
    assert product.name == "Product of 3"
    assert product.is_active is True


def test_update_may_clear_optional_fields(client: TestClient, catalog, make_user, auth_headers):
    admin = make_user("Admin")
    product_id = catalog["products"][3].id
    response = client.patch(
        f"/api/admin/products/{product_id}",
        json={"description": None, "company_id": None},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["company_id"] is None
