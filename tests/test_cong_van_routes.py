"""Tests for the official document API."""

from datetime import date

import pytest

from ward_admin.features.cong_van.models import CongVan
from ward_admin.features.cong_van.schemas import normalize_groups
from conftest import grant


def document(so_hieu, loai="CV Đến", ngay=date(2024, 5, 1), created_by="u1", **fields):
    return CongVan(
        loai_cong_van=loai,
        so_hieu=so_hieu,
        ten_cong_van=fields.pop("ten_cong_van", f"Công văn {so_hieu}"),
        ngay_ban_hanh=ngay,
        created_by=created_by,
        **fields,
    )


PAYLOAD = {
    "loai_cong_van": "CV Đi",
    "so_hieu": "12/BV-KHTH",
    "ten_cong_van": "Kế hoạch trực tết",
    "ngay_ban_hanh": "2024-02-01",
    "co_quan_ban_hanh": "Phòng KHTH",
    "phan_nhom": " Trực ,, Tết ",
}


@pytest.fixture
def user_grants(seed):
    """``user`` may view, add and edit documents but not delete them."""
    seed(grant("user", "cong-van", view=True, add=True, edit=True))


class TestNormalizeGroups:
    """Test cases for normalize_groups."""

    def test_trims_and_drops_empty(self):
        assert normalize_groups(" a , ,b,") == "a, b"

    def test_blank(self):
        assert normalize_groups(" , ") is None
        assert normalize_groups(None) is None


class TestCongVanRoutes:
    """Test cases for /cong-van."""

    def test_requires_authentication(self, client):
        assert client.get("/cong-van").status_code == 401

    def test_requires_view_permission(self, client, auth):
        auth.login("u1", "user")
        response = client.get("/cong-van")
        assert response.status_code == 403
        assert response.json()["detail"] == "Permission denied: view on cong-van"

    def test_create_stamps_owner(self, client, auth, user_grants):
        auth.login("u1", "user")
        response = client.post("/cong-van", json={**PAYLOAD, "created_by": "someone-else"})

        assert response.status_code == 201
        body = response.json()
        assert body["created_by"] == "u1"
        assert body["phan_nhom"] == "Trực, Tết"

    def test_create_rejects_unknown_direction(self, client, auth, user_grants):
        auth.login("u1", "user")
        response = client.post("/cong-van", json={**PAYLOAD, "loai_cong_van": "Nội bộ"})
        assert response.status_code == 400
        assert "loai_cong_van" in response.json()

    def test_list_newest_first(self, client, auth, user_grants, seed):
        seed(
            document("1", ngay=date(2024, 1, 1)),
            document("2", ngay=date(2024, 3, 1)),
            document("3", ngay=date(2024, 2, 1)),
        )
        auth.login("u1", "user")
        assert [d["so_hieu"] for d in client.get("/cong-van").json()] == ["2", "3", "1"]

    def test_list_filters_direction(self, client, auth, user_grants, seed):
        seed(document("in-1", loai="CV Đến"), document("out-1", loai="CV Đi"))
        auth.login("u1", "user")

        outgoing = client.get("/cong-van", params={"loai_cong_van": "CV Đi"}).json()
        assert [d["so_hieu"] for d in outgoing] == ["out-1"]
        assert len(client.get("/cong-van", params={"loai_cong_van": "All"}).json()) == 2

    def test_list_search_is_case_insensitive(self, client, auth, user_grants, seed):
        seed(
            document("A1", co_quan_ban_hanh="Sở Y tế"),
            document("A2", noi_dung="Lịch TRUC thang 5"),
            document("A3"),
        )
        auth.login("u1", "user")

        assert [d["so_hieu"] for d in client.get("/cong-van", params={"search": "sở y"}).json()] == ["A1"]
        assert [d["so_hieu"] for d in client.get("/cong-van", params={"search": "truc"}).json()] == ["A2"]

    def test_suggestions_are_distinct(self, client, auth, user_grants, seed):
        seed(
            document("1", co_quan_ban_hanh="Sở Y tế", phan_nhom="Trực, Tết"),
            document("2", co_quan_ban_hanh="Sở Y tế", phan_nhom="Tết, Khám"),
            document("3", co_quan_ban_hanh=None, phan_nhom=None),
        )
        auth.login("u1", "user")

        body = client.get("/cong-van/suggestions").json()
        assert body["co_quan_ban_hanh"] == ["Sở Y tế"]
        assert sorted(body["phan_nhom"]) == ["Khám", "Trực", "Tết"]

    def test_get_missing(self, client, auth, user_grants):
        auth.login("u1", "user")
        assert client.get("/cong-van/404").status_code == 404

    def test_owner_can_edit(self, client, auth, user_grants, seed):
        (doc_id,) = seed(document("1", created_by="u1"))
        auth.login("u1", "user")

        response = client.put(f"/cong-van/{doc_id}", json={"ghi_chu": "đã xử lý"})
        assert response.status_code == 200
        assert response.json()["ghi_chu"] == "đã xử lý"
        assert response.json()["created_by"] == "u1"

    def test_other_user_cannot_edit(self, client, auth, user_grants, seed):
        (doc_id,) = seed(document("1", created_by="u1"))
        auth.login("u2", "user")

        response = client.put(f"/cong-van/{doc_id}", json={"ghi_chu": "x"})
        assert response.status_code == 403
        assert response.json()["detail"] == "You can only modify records you created"

    def test_unattributed_record_is_admin_only(self, client, auth, user_grants, seed):
        (doc_id,) = seed(document("legacy", created_by=None))

        auth.login("u1", "user")
        assert client.put(f"/cong-van/{doc_id}", json={"ghi_chu": "x"}).status_code == 403

        auth.login("a1", "admin")
        assert client.put(f"/cong-van/{doc_id}", json={"ghi_chu": "x"}).status_code == 200

    def test_delete_needs_module_flag(self, client, auth, user_grants, seed):
        (doc_id,) = seed(document("1", created_by="u1"))
        auth.login("u1", "user")
        assert client.delete(f"/cong-van/{doc_id}").status_code == 403

    def test_admin_deletes_any(self, client, auth, seed):
        (doc_id,) = seed(document("1", created_by="u1"))
        auth.login("a1", "admin")

        assert client.delete(f"/cong-van/{doc_id}").status_code == 204
        assert client.get(f"/cong-van/{doc_id}").status_code == 404

    def test_upload_returns_url(self, client, auth, user_grants, uploaders):
        auth.login("u1", "user")
        response = client.post(
            "/cong-van/upload",
            files={"file": ("scan.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 201
        assert response.json()["url"] == "https://files.test/cong_van_file/scan.pdf"
        assert uploaders["cong_van"].uploads == [("scan.pdf", b"%PDF-1.4")]

    def test_upload_rejects_empty_file(self, client, auth, user_grants):
        auth.login("u1", "user")
        response = client.post("/cong-van/upload", files={"file": ("empty.pdf", b"", "application/pdf")})
        assert response.status_code == 400

    def test_upload_needs_add_or_edit(self, client, auth, seed):
        seed(grant("user", "cong-van", view=True))
        auth.login("u1", "user")
        response = client.post("/cong-van/upload", files={"file": ("a.pdf", b"x", "application/pdf")})
        assert response.status_code == 403

    @pytest.mark.parametrize("field", ["loai_cong_van", "so_hieu", "ten_cong_van", "ngay_ban_hanh"])
    def test_update_rejects_null_required_field(self, client, auth, user_grants, seed, field):
        (doc_id,) = seed(document("1", created_by="u1"))
        auth.login("u1", "user")

        response = client.put(f"/cong-van/{doc_id}", json={field: None})
        assert response.status_code == 400
        assert field in response.json()
        assert client.get(f"/cong-van/{doc_id}").json()["so_hieu"] == "1"
