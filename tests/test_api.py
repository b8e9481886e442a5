"""
Tests for FastAPI endpoints
"""
import pytest
from fastapi.testclient import TestClient

from api import app


@pytest.fixture
def client():
    """Test client with the startup event run, so the sample catalog is seeded"""
    with TestClient(app) as test_client:
        yield test_client


class TestAPIEndpoints:
    """Test class for API endpoints"""

    def test_root_endpoint(self, client):
        """Test root endpoint"""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Keyword Engine API"
        assert data["version"] == "1.0.0"

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["keywords"] == 10
        assert "catalog" in data["components"]

    def test_priorities(self, client):
        response = client.get("/priorities")
        tiers = response.json()["data"]["tiers"]
        assert [t["level"] for t in tiers] == ["P0", "P1", "P2", "P3", "P4", "P5"]
        assert tiers[0]["max_volume"] is None

    def test_classify(self, client):
        response = client.post("/classify", json={"volumes": [120000, 3000]})
        assert response.status_code == 200
        results = response.json()["data"]["results"]
        assert [r["priority"] for r in results] == ["P0", "P5"]

    def test_classify_rejects_negative(self, client):
        response = client.post("/classify", json={"volumes": [-1]})
        assert response.status_code == 422

    def test_classify_rejects_empty(self, client):
        response = client.post("/classify", json={"volumes": []})
        assert response.status_code == 422

    def test_score(self, client):
        response = client.post("/score", json={"text": "what is eufy smart home"})
        assert response.status_code == 200
        analysis = response.json()["data"]["analysis"]
        assert analysis["score"] == 79
        assert analysis["predicted_performance"] == "HIGH"

    def test_score_empty_text(self, client):
        """Empty text is scored, not rejected"""
        response = client.post("/score", json={"text": ""})
        assert response.status_code == 200
        assert response.json()["data"]["analysis"]["score"] == 0

    def test_score_with_competitor(self, client):
        response = client.post("/score", json={
            "text": "eufy doorbell vs ring",
            "competitor": {"has_ai_overview": True}
        })
        factors = response.json()["data"]["analysis"]["factors"]
        assert factors["competitive_environment"] == 0


class TestKeywordEndpoints:
    """Tests for keyword CRUD endpoints"""

    def test_list_keywords(self, client):
        response = client.get("/keywords", params={"limit": 5})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 10
        assert len(data["items"]) == 5
        assert data["items"][0]["aio_analysis"] is None

    def test_list_keywords_filters(self, client):
        response = client.get("/keywords", params={"priority": "P1", "include_analysis": True})
        items = response.json()["data"]["items"]
        assert len(items) == 2
        assert all(item["priority_info"]["level"] == "P1" for item in items)

    def test_list_keywords_invalid_limit(self, client):
        response = client.get("/keywords", params={"limit": 500})
        assert response.status_code == 422

    def test_get_keyword(self, client):
        response = client.get("/keywords/keyword-1")
        assert response.status_code == 200
        assert response.json()["data"]["priority"] == "P0"

    def test_get_keyword_not_found(self, client):
        response = client.get("/keywords/keyword-999")
        assert response.status_code == 404

    def test_create_keyword(self, client):
        response = client.post("/keywords", json={
            "text": "eufy doorbell vs ring",
            "search_volume": 65000,
            "cpc": 2.8,
            "status": "ACTIVE"
        })
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] == "keyword-11"
        assert data["priority"] == "P1"
        assert data["status"] == "ACTIVE"

    def test_create_keyword_empty_text(self, client):
        response = client.post("/keywords", json={"text": "  "})
        assert response.status_code == 422

    def test_create_keyword_negative_volume(self, client):
        response = client.post("/keywords", json={"text": "eufy", "search_volume": -5})
        assert response.status_code == 422

    def test_update_keyword(self, client):
        response = client.patch("/keywords/keyword-10", json={"search_volume": 130000})
        assert response.status_code == 200
        assert response.json()["data"]["priority"] == "P0"

    def test_update_keyword_not_found(self, client):
        response = client.patch("/keywords/keyword-999", json={"cpc": 1.0})
        assert response.status_code == 404

    def test_update_keyword_empty_text(self, client):
        response = client.patch("/keywords/keyword-1", json={"text": ""})
        assert response.status_code == 422

    def test_delete_keyword(self, client):
        assert client.delete("/keywords/keyword-3").status_code == 200
        assert client.delete("/keywords/keyword-3").status_code == 404


class TestBatchAndDistribution:
    """Tests for batch and aggregate endpoints"""

    def test_distribution(self, client):
        response = client.get("/distribution")
        data = response.json()["data"]
        assert data["total"] == 10
        assert sum(data["counts"].values()) == 10
        assert data["percentages"]["P1"] == "20.00%"

    def test_aio_distribution(self, client):
        response = client.get("/distribution/aio")
        tiers = response.json()["data"]["tiers"]
        assert tiers["P0"]["count"] == 1

    def test_recompute_reports_skipped_ids(self, client):
        response = client.post("/keywords/recompute", json={
            "keyword_ids": ["keyword-1", "missing-id"],
            "rescore": True
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert [r["id"] for r in data["updated"]] == ["keyword-1"]
        assert data["skipped_ids"] == ["missing-id"]

    def test_recompute_only_missing(self, client):
        response = client.post("/keywords/recompute", json={"keyword_ids": ["missing-id"]})
        assert response.status_code == 200
        assert response.json()["data"]["updated"] == []

    def test_analyze(self, client):
        response = client.post("/keywords/analyze", json={"keyword_ids": ["keyword-4", "missing"]})
        results = response.json()["data"]["results"]
        assert len(results) == 1
        assert results[0]["aio_score"] == 79

    def test_metrics(self, client):
        client.post("/score", json={"text": "eufy"})
        metrics = client.get("/metrics").json()["data"]["metrics"]
        assert metrics["keywords_created"] == 10
        assert metrics["scores_computed"] >= 11
        assert "memory_mb" in metrics
