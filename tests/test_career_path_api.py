import os
import unittest
import uuid
from unittest.mock import patch

# Keep API tests deterministic and local by default.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("OPENAI_API_KEY", "")

from fastapi.testclient import TestClient

from app.analytics import db as analytics_db
from app.analytics.db import SqliteTelemetrySink
from app.api.v1.career_path import get_generator
from app.career_path.orchestrator import CareerPathGenerator
from app.career_path.telemetry import TelemetryEmitter
from app.core import security
from app.core.career_path_store import SqliteCareerPathStore
from app.main import app
from career_path_fakes import FakeModelClient, model_payload, product_manager_nodes


class CareerPathApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        analytics_db.init_db()
        cls.client = TestClient(app)

    def setUp(self):
        self.user_id = f"user-{uuid.uuid4().hex[:8]}"
        self.responses = [model_payload(product_manager_nodes())]
        app.dependency_overrides[get_generator] = lambda: CareerPathGenerator(
            FakeModelClient(self.responses),
            telemetry=TelemetryEmitter(SqliteTelemetrySink()),
            store=SqliteCareerPathStore(),
        )

    def tearDown(self):
        app.dependency_overrides.clear()

    def _generate(self, body):
        return self.client.post("/v1/career-path/generate", json=body, headers={"X-User-Id": self.user_id})

    def test_generate_returns_career_path(self):
        response = self._generate({"targetRole": "Product Manager"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["kind"], "career_path")
        self.assertEqual(body["targetRole"], "Product Manager")
        self.assertEqual(body["usedModel"], "fake-model")
        self.assertEqual(body["promptVariant"], "targeted")
        self.assertEqual(len(body["nodes"]), 5)
        last = body["nodes"][-1]
        self.assertEqual(last["title"], "Senior Product Manager")
        self.assertEqual(last["yearsExperience"], 7)
        self.assertEqual(last["salaryLow"], 150000)

    def test_generate_falls_back_to_profile_guidance(self):
        nodes = product_manager_nodes()
        for node in nodes:
            node["yearsExperience"] = "15 minutes"
        self.responses[:] = [model_payload(nodes)]

        response = self._generate({"targetRole": "Product Manager"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["kind"], "profile_guidance")
        self.assertTrue(body["message"])
        self.assertGreaterEqual(len(body["tasks"]), 4)
        self.assertIn("estimatedDurationMinutes", body["tasks"][0])
        self.assertNotIn("nodes", body)

        latest = self.client.get("/v1/analytics/career-path/latest", params={"limit": 1}).json()
        self.assertEqual(latest[0]["event_type"], "fallback")
        self.assertEqual(latest[0]["reason"], "invalid_experience")

    def test_blank_target_role_is_bad_request(self):
        response = self._generate({"targetRole": "   "})
        self.assertEqual(response.status_code, 400)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "Invalid input")
        self.assertTrue(detail["details"])

    def test_non_object_body_is_bad_request(self):
        response = self._generate(["Product Manager"])
        self.assertEqual(response.status_code, 400)

    def test_results_are_listed_per_owner(self):
        self._generate({"targetRole": "Product Manager"})
        self._generate({"targetRole": "Product Manager", "region": "Canada"})

        response = self.client.get("/v1/career-path", headers={"X-User-Id": self.user_id})
        self.assertEqual(response.status_code, 200)
        stored = response.json()
        self.assertEqual(len(stored), 2)
        self.assertEqual({item["ownerId"] for item in stored}, {self.user_id})
        self.assertEqual(stored[0]["record"]["kind"], "career_path")
        self.assertEqual(len(stored[0]["record"]["nodes"]), 5)

        other = self.client.get("/v1/career-path", headers={"X-User-Id": "someone-else"}).json()
        self.assertFalse(any(item["ownerId"] == self.user_id for item in other))

    def test_analytics_summary_counts_outcomes(self):
        self._generate({"targetRole": "Product Manager"})
        response = self.client.get("/v1/analytics/career-path/summary")
        self.assertEqual(response.status_code, 200)
        summary = response.json()
        self.assertTrue(summary["enabled"])
        self.assertGreaterEqual(summary["by_type"].get("success", 0), 1)

    def test_api_key_is_enforced_when_configured(self):
        protected = type(security.settings)(**{**security.settings.__dict__, "api_key": "secret-key"})
        with patch.object(security, "settings", protected):
            denied = self._generate({"targetRole": "Product Manager"})
            self.assertEqual(denied.status_code, 401)
            allowed = self.client.post(
                "/v1/career-path/generate",
                json={"targetRole": "Product Manager"},
                headers={"X-API-Key": "secret-key", "X-User-Id": self.user_id},
            )
            self.assertEqual(allowed.status_code, 200)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")
        self.assertEqual(response.json()["config_version"], 3)


if __name__ == "__main__":
    unittest.main()
