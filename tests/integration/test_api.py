"""
Integration tests for API endpoints (api/main.py)
"""
import pytest

from config.constants import SANITIZER_RULESET_VERSION

RAW_ARABIC = "الشهود في النظام القضائي الجزائري"


class TestPurifyEndpoint:
    """POST /api/v1/purify"""

    def test_purify_success(self, api_client, scripted_providers):
        response = api_client.post("/api/v1/purify", json={
            "text": RAW_ARABIC,
            "target_language": "fr",
            "source_language": "ar",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["text"] == "Les témoins ont été entendus"
        assert data["purity_score"] == 100.0
        assert data["path"] == "provider_accepted"
        # Primary provider failed and the secondary answered
        assert len(scripted_providers[0].calls) == 1
        assert len(scripted_providers[1].calls) == 1

    def test_purify_pass_through(self, api_client):
        response = api_client.post("/api/v1/purify", json={
            "text": "Bonjour",
            "target_language": "fr",
            "source_language": "fr",
        })
        assert response.status_code == 200
        assert response.json()["path"] == "pass_through"

    @pytest.mark.parametrize("target", [None, "", "de"])
    def test_purify_invalid_target(self, api_client, target):
        response = api_client.post("/api/v1/purify", json={
            "text": "Bonjour",
            "target_language": target,
        })
        assert response.status_code == 400
        assert "target_language" in response.json()["detail"]

    def test_purify_unknown_content_type_uses_default(self, api_client):
        response = api_client.post("/api/v1/purify", json={
            "text": RAW_ARABIC,
            "target_language": "fr",
            "content_type": "tooltip",
        })
        assert response.status_code == 200


class TestAuditEndpoint:
    """POST /api/v1/audit"""

    def test_audit_fixes_fragments(self, api_client):
        response = api_client.post("/api/v1/audit", json={
            "fragments": {
                "title": "لوحة التحكم",
                "badge": "محاميProتحليل",
            },
            "target_language": "ar",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["scanned"] == 2
        assert data["changed"] == 1
        assert data["fragments"] == {
            "title": "لوحة التحكم",
            "badge": "محامي تحليل",
        }

    def test_audit_requires_target(self, api_client):
        response = api_client.post("/api/v1/audit", json={"fragments": {"a": "b"}})
        assert response.status_code == 400

    def test_audit_unknown_content_type(self, api_client):
        response = api_client.post("/api/v1/audit", json={
            "fragments": {"a": "b"},
            "target_language": "fr",
            "content_type": "tooltip",
        })
        assert response.status_code == 400


class TestClassifyEndpoint:
    """POST /api/v1/classify"""

    def test_classify_profile(self, api_client):
        response = api_client.post("/api/v1/classify", json={
            "text": "Les témoins ont été entendus par le juge ش",
            "target_language": "fr",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["purity"] == 97.06
        assert data["dominant_script"] == "latin"
        assert data["script_counts"] == {"latin": 33, "arabic": 1}
        assert data["neutral_count"] == 8
        assert data["accepted"] == {
            "chat_message": True,
            "legal_document": True,
            "ui_label": False,
        }

    def test_classify_requires_target(self, api_client):
        response = api_client.post("/api/v1/classify", json={"text": "Bonjour"})
        assert response.status_code == 400


class TestHealthEndpoint:
    """GET /api/v1/health"""

    def test_health(self, api_client):
        response = api_client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["providers"] == ["openai", "gemini"]
        assert data["ruleset_version"] == SANITIZER_RULESET_VERSION
        assert data["thresholds"]["ui_label"] == 100.0
        assert "pipeline" in data["stats"]

    def test_health_reflects_requests(self, api_client):
        api_client.post("/api/v1/purify", json={
            "text": "Bonjour", "target_language": "fr", "source_language": "fr",
        })
        stats = api_client.get("/api/v1/health").json()["stats"]
        assert stats["pipeline"]["requests"] == 1
