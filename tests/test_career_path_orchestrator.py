import json
import unittest

from app.ai.types import ModelError
from app.career_path.errors import ValidationError
from app.career_path.orchestrator import FALLBACK_MODEL, CareerPathGenerator
from app.career_path.prompts import PROMPT_VARIANTS
from app.career_path.telemetry import InMemoryTelemetrySink, TelemetryEmitter
from app.schemas.career_path import CareerPathResult, GuidanceResult
from career_path_fakes import FakeModelClient, RecordingStore, model_payload, product_manager_nodes, stage


def _invalid_experience_nodes():
    nodes = product_manager_nodes()
    for node in nodes:
        node["yearsExperience"] = "15 minutes"
    return nodes


class CareerPathGeneratorTests(unittest.TestCase):
    def setUp(self):
        self.sink = InMemoryTelemetrySink()
        self.store = RecordingStore()

    def _generator(self, client):
        return CareerPathGenerator(client, telemetry=TelemetryEmitter(self.sink), store=self.store)

    def _event_types(self):
        return [event.type for event in self.sink.events]

    def test_product_manager_happy_path(self):
        client = FakeModelClient([model_payload(product_manager_nodes())])
        result = self._generator(client).generate({"targetRole": "Product Manager"}, user_id="user-42")

        self.assertIsInstance(result, CareerPathResult)
        self.assertEqual(result.kind, "career_path")
        self.assertEqual(len(result.nodes), 5)
        self.assertEqual(result.nodes[-1].title, "Senior Product Manager")
        self.assertEqual(result.used_model, "fake-model")
        self.assertEqual(result.prompt_variant, "targeted")
        self.assertEqual(len(client.prompts), 1)
        self.assertIn('Target role: "Product Manager"', client.prompts[0])

        self.assertEqual(self._event_types(), ["success"])
        self.assertNotIn("quality_failure", self._event_types())
        self.assertEqual(self.sink.events[0].user_id, "user-42")
        self.assertEqual(self.store.records, [(result, "user-42")])

        titles = [" ".join(node.title.lower().split()) for node in result.nodes]
        self.assertEqual(len(titles), len(set(titles)))

    def test_sub_day_experience_on_every_variant_falls_back(self):
        client = FakeModelClient([model_payload(_invalid_experience_nodes())])
        result = self._generator(client).generate({"targetRole": "Product Manager"})

        self.assertIsInstance(result, GuidanceResult)
        self.assertEqual(result.kind, "profile_guidance")
        self.assertEqual(len(client.prompts), len(PROMPT_VARIANTS))
        self.assertEqual(self._event_types(), ["quality_failure"] * len(PROMPT_VARIANTS) + ["fallback"])

        fallback = self.sink.events[-1]
        self.assertEqual(fallback.reason, "invalid_experience")
        self.assertIn("Invalid experience unit", fallback.details)
        self.assertEqual(fallback.model, FALLBACK_MODEL)
        self.assertEqual(self.store.records[0][1], "anonymous")

    def test_every_variant_failing_never_raises(self):
        scenarios = {
            "model_error": [ModelError("timeout", code="APITimeoutError")],
            "empty_response": ["   "],
            "parse_error": ["Sure! Here is a career path for you."],
            "schema_invalid": [json.dumps({"paths": [{"nodes": [{"title": "Analyst"}]}]})],
        }
        for reason, responses in scenarios.items():
            with self.subTest(reason=reason):
                sink = InMemoryTelemetrySink()
                generator = CareerPathGenerator(FakeModelClient(responses), telemetry=TelemetryEmitter(sink))
                result = generator.generate({"targetRole": "Data Scientist"})
                self.assertEqual(result.kind, "profile_guidance")
                types = [event.type for event in sink.events]
                self.assertEqual(types, ["error"] * len(PROMPT_VARIANTS) + ["fallback"])
                self.assertEqual(sink.events[-1].reason, reason)

    def test_unexpected_client_exception_is_contained(self):
        client = FakeModelClient([ConnectionResetError("socket closed")])
        result = self._generator(client).generate({"targetRole": "Data Scientist"})
        self.assertIsInstance(result, GuidanceResult)
        self.assertEqual(self.sink.events[0].reason, "model_error")
        self.assertIn("ConnectionResetError", self.sink.events[0].details)

    def test_later_variant_recovers_after_rejection(self):
        mismatched = product_manager_nodes()
        mismatched[-1]["title"] = "Barista"
        client = FakeModelClient(
            [
                model_payload(mismatched),
                "```json\n" + model_payload(product_manager_nodes()) + "\n```",
            ]
        )
        result = self._generator(client).generate({"targetRole": "Product Manager"})
        self.assertIsInstance(result, CareerPathResult)
        self.assertEqual(result.prompt_variant, "base")
        self.assertEqual(self._event_types(), ["quality_failure", "success"])
        self.assertEqual(self.sink.events[0].reason, "target_mismatch")

    def test_next_model_is_tried_before_the_next_variant(self):
        primary = FakeModelClient(["not json at all"], model_name="gpt-4o")
        backup = FakeModelClient([model_payload(product_manager_nodes())], model_name="gpt-4o-mini")
        result = self._generator([primary, backup]).generate({"targetRole": "Product Manager"})

        self.assertIsInstance(result, CareerPathResult)
        self.assertEqual(result.used_model, "gpt-4o-mini")
        self.assertEqual(result.prompt_variant, "targeted")
        self.assertEqual(len(primary.prompts), 1)
        self.assertEqual(self._event_types(), ["error", "success"])
        self.assertEqual(self.sink.events[0].model, "gpt-4o")
        self.assertEqual(self.sink.events[0].reason, "parse_error")
        self.assertEqual(self.sink.events[1].model, "gpt-4o-mini")

    def test_every_model_and_variant_is_attempted_before_fallback(self):
        clients = [
            FakeModelClient([ModelError("overloaded", code="RateLimitError")], model_name="gpt-5"),
            FakeModelClient(["   "], model_name="gpt-4o"),
        ]
        result = self._generator(clients).generate({"targetRole": "Data Scientist"})

        self.assertIsInstance(result, GuidanceResult)
        self.assertEqual(len(clients[0].prompts), len(PROMPT_VARIANTS))
        self.assertEqual(len(clients[1].prompts), len(PROMPT_VARIANTS))
        attempts = [(event.prompt_variant, event.model) for event in self.sink.events[:-1]]
        expected = [(variant.name, model) for variant in PROMPT_VARIANTS for model in ("gpt-5", "gpt-4o")]
        self.assertEqual(attempts, expected)
        self.assertEqual(self.sink.events[-1].reason, "empty_response")

    def test_malformed_certification_url_still_generates(self):
        nodes = product_manager_nodes()
        nodes[0]["certifications"] = ["Cert (https://[broken"]
        client = FakeModelClient([model_payload(nodes)])
        result = self._generator(client).generate({"targetRole": "Product Manager"})

        self.assertIsInstance(result, CareerPathResult)
        self.assertEqual(result.nodes[0].certifications, [])
        self.assertEqual(self._event_types(), ["success"])

    def test_quality_failure_is_preferred_over_later_errors(self):
        short = [stage("Product Analyst", "entry", "1 year", "Analyzes product usage and the roadmap.")]
        client = FakeModelClient([model_payload(short), ModelError("rate limited", code="RateLimitError")])
        result = self._generator(client).generate({"targetRole": "Product Analyst"})
        self.assertIsInstance(result, GuidanceResult)
        self.assertEqual(self.sink.events[-1].type, "fallback")
        self.assertEqual(self.sink.events[-1].reason, "insufficient_stages")

    def test_whitespace_target_role_raises_validation_error(self):
        client = FakeModelClient([model_payload(product_manager_nodes())])
        with self.assertRaises(ValidationError):
            self._generator(client).generate({"targetRole": "   "})
        self.assertEqual(client.prompts, [])
        self.assertEqual(self.sink.events, ())

    def test_missing_client_degrades_to_guidance(self):
        result = self._generator(None).generate({"targetRole": "UX Designer"})
        self.assertIsInstance(result, GuidanceResult)
        self.assertEqual(self._event_types(), ["fallback"])
        self.assertEqual(self.sink.events[0].details, "Model client not configured")

    def test_profile_in_body_shapes_guidance(self):
        body = {
            "targetRole": "Product Manager",
            "profile": {
                "skills": ["Product Strategy", "Roadmapping", "SQL", "User Research", "Analytics"],
                "workHistory": [{"title": "Associate Product Manager"}],
                "summary": "Shipping B2B software for six years.",
                "careerGoal": "Own a product line.",
                "industry": "SaaS",
            },
        }
        result = self._generator(None).generate(body)
        self.assertEqual([task.category for task in result.tasks[:3]], ["Profile Enhancement"] * 3)

    def test_persistence_failure_does_not_fail_generation(self):
        client = FakeModelClient([model_payload(product_manager_nodes())])
        generator = CareerPathGenerator(
            client,
            telemetry=TelemetryEmitter(self.sink),
            store=RecordingStore(fail=True),
        )
        with self.assertLogs("app.career_path", level="ERROR"):
            result = generator.generate({"targetRole": "Product Manager"})
        self.assertIsInstance(result, CareerPathResult)


if __name__ == "__main__":
    unittest.main()
