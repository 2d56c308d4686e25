"""
Import API Tests
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from api.database import _importer_for, _store_for, get_importer, get_settings
from api.main import app
from importer import ImportSettings

HEADERS = {"X-User-ID": "user-1"}


@pytest.fixture
def client(importer, settings):
    app.dependency_overrides[get_importer] = lambda: importer
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestServiceEndpoints:
    """Tests for informational endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_api_info(self, client):
        assert "detect" in client.get("/api").json()["endpoints"]


class TestImportEndpoint:
    """Tests for POST /api/import/{account_id}."""

    def test_import_csv(self, client, account, tinkoff_csv):
        response = client.post(
            f"/api/import/{account.id}",
            files={"file": ("operations.csv", tinkoff_csv.encode("utf-8"), "text/csv")},
            headers=HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["imported"] == 3
        assert data["skipped"] == 0
        assert data["bank_name"] == "Тинькофф"
        assert data["categorization"]["by_default"] == 1

    def test_unknown_account(self, client, tinkoff_csv):
        response = client.post(
            "/api/import/missing",
            files={"file": ("operations.csv", tinkoff_csv.encode("utf-8"), "text/csv")},
            headers=HEADERS,
        )
        assert response.status_code == 404

    def test_unsupported_format(self, client, account):
        response = client.post(
            f"/api/import/{account.id}",
            files={"file": ("export.csv", b"Date,Amount\n2026-01-09,10.00\n", "text/csv")},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert "Supported banks" in response.json()["detail"]

    def test_unsupported_file_type(self, client, account):
        response = client.post(
            f"/api/import/{account.id}",
            files={"file": ("export.txt", b"hello", "text/plain")},
            headers=HEADERS,
        )
        assert response.status_code == 400

    def test_file_too_large(self, client, account, config_dir):
        app.dependency_overrides[get_settings] = lambda: ImportSettings(
            config_dir=config_dir, max_upload_size=16
        )

        response = client.post(
            f"/api/import/{account.id}",
            files={"file": ("operations.csv", b"x" * 17, "text/csv")},
            headers=HEADERS,
        )
        assert response.status_code == 413

    def test_dev_user_without_header(self, client, account, tinkoff_csv):
        """Development mode resolves a missing header to the dev user, who owns nothing."""
        response = client.post(
            f"/api/import/{account.id}",
            files={"file": ("operations.csv", tinkoff_csv.encode("utf-8"), "text/csv")},
        )
        assert response.status_code == 404

    def test_missing_header_in_production(self, client, account, tinkoff_csv, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        response = client.post(
            f"/api/import/{account.id}",
            files={"file": ("operations.csv", tinkoff_csv.encode("utf-8"), "text/csv")},
        )
        assert response.status_code == 401


class TestDetectEndpoint:
    """Tests for POST /api/import/detect."""

    def test_detect_pdf(self, client, account, sber_pdf_text):
        response = client.post(
            "/api/import/detect",
            files={"file": ("statement.pdf", sber_pdf_text.encode("utf-8"), "application/pdf")},
            headers=HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bank_name"] == "Сбербанк"
        assert data["account_number"] == "40817810938000012345"
        assert data["matched_account_id"] == account.id
        assert data["requisites"] is None

    def test_detect_unknown(self, client):
        response = client.post(
            "/api/import/detect",
            files={"file": ("statement.pdf", "АО «Альфа-Банк»".encode("utf-8"), "application/pdf")},
            headers=HEADERS,
        )
        assert response.status_code == 400


class TestDependencies:
    """Tests for FastAPI dependency providers."""

    @pytest.fixture
    def fresh_caches(self, monkeypatch, config_dir):
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        monkeypatch.setenv("CONFIG_DIR", str(config_dir))
        for cached in (get_settings, _store_for, _importer_for):
            cached.cache_clear()
        yield
        for cached in (get_settings, _store_for, _importer_for):
            cached.cache_clear()

    def test_importer_reused_across_requests(self, fresh_caches):
        settings = get_settings()

        first = get_importer(settings)
        second = get_importer(settings)

        assert first is second
        assert first.store is _store_for("sqlite://")
        assert first.settings is settings
