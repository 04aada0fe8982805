import json
import os
import tempfile
import unittest
from unittest.mock import patch

import app as app_module
from app import app


def _payload(**overrides):
    payload = {
        "currentDate": "2025-01-15",
        "yourBirthdate": "1960-06-01",
        "spouseBirthdate": "1962-03-10",
        "retirementAge": 65,
        "maxAge": 95,
        "taxableAccounts": 800000,
        "retirementAccounts": 1200000,
        "annualExpenses": 90000,
        "yourSSAge": 67,
        "yourSSBenefitAtFRA": 36000,
        "spouseSSAge": 67,
        "spouseOwnBenefit": 12000,
        "inflationRate": 3,
        "returnRate": 6,
        "taxRate": 20,
        "stdDev": 12,
        "simulations": 40,
        "seed": 42,
    }
    payload.update(overrides)
    return payload


class TestHealth(unittest.TestCase):

    def setUp(self):
        self.client = app.test_client()

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["ok"])
        self.assertIn("defaults_loaded", body)
        self.assertIn("defaults_advisory", body)


class TestProjectEndpoint(unittest.TestCase):
    """Tests for POST /retirement/api/v1/project."""

    def setUp(self):
        self.client = app.test_client()

    def test_projection(self):
        response = self.client.post("/retirement/api/v1/project", json=_payload())
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["summary"]["money_lasts_until_age"], 95)
        self.assertTrue(body["summary"]["survived"])
        self.assertAlmostEqual(body["summary"]["final_balance"], 3935436.95, places=2)
        self.assertEqual(len(body["details"]["yearly_snapshots"]), 32)
        self.assertEqual(body["details"]["inputs"]["reference_date"], "2025-01-15")

    def test_missing_field(self):
        payload = _payload()
        del payload["taxRate"]
        response = self.client.post("/retirement/api/v1/project", json=payload)
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertIn("tax_rate", body["error"])

    def test_invalid_value(self):
        response = self.client.post("/retirement/api/v1/project",
                                    json=_payload(taxableAccounts=-5))
        self.assertEqual(response.status_code, 400)

    def test_birthdate_after_reference_date(self):
        response = self.client.post("/retirement/api/v1/project",
                                    json=_payload(yourBirthdate="2026-01-01"))
        self.assertEqual(response.status_code, 400)

    def test_body_required(self):
        response = self.client.post("/retirement/api/v1/project", data="not json",
                                    content_type="text/plain")
        self.assertEqual(response.status_code, 400)

    def test_body_must_be_object(self):
        response = self.client.post("/retirement/api/v1/project", json=[1, 2, 3])
        self.assertEqual(response.status_code, 400)
        self.assertIn("object", response.get_json()["error"])

    def test_defaults_fill_missing_fields(self):
        """Test that service defaults supply fields absent from the payload."""
        payload = _payload()
        del payload["taxRate"]
        with patch.dict(app_module.DEFAULTS, {"tax_rate": 20.0}):
            response = self.client.post("/retirement/api/v1/project", json=payload)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["details"]["inputs"]["tax_rate"], 20.0)

    def test_payload_overrides_defaults(self):
        with patch.dict(app_module.DEFAULTS, {"tax_rate": 35.0}):
            response = self.client.post("/retirement/api/v1/project", json=_payload())
        self.assertEqual(response.get_json()["details"]["inputs"]["tax_rate"], 20.0)


class TestSimulateEndpoint(unittest.TestCase):
    """Tests for POST /retirement/api/v1/simulate."""

    def setUp(self):
        self.client = app.test_client()

    def test_simulation(self):
        response = self.client.post("/retirement/api/v1/simulate", json=_payload())
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["summary"]["num_simulations"], 40)
        self.assertEqual(body["summary"]["seed"], 42)
        self.assertGreaterEqual(body["summary"]["success_probability"], 0.0)
        self.assertLessEqual(body["summary"]["success_probability"], 1.0)
        self.assertAlmostEqual(body["summary"]["deterministic_final_balance"], 3935436.95, places=2)
        self.assertEqual(sum(body["details"]["histogram"]["counts"]), 40)
        self.assertEqual(set(body["details"]["percentiles"]), {"p10", "p25", "p50", "p75", "p90"})

    def test_seeded_simulation_is_reproducible(self):
        first = self.client.post("/retirement/api/v1/simulate", json=_payload()).get_json()
        second = self.client.post("/retirement/api/v1/simulate", json=_payload()).get_json()
        self.assertEqual(first, second)

    def test_bin_width(self):
        response = self.client.post("/retirement/api/v1/simulate",
                                    json=_payload(bin_width=1000000))
        self.assertEqual(response.get_json()["details"]["histogram"]["bin_width"], 1000000.0)

    def test_invalid_bin_width(self):
        response = self.client.post("/retirement/api/v1/simulate", json=_payload(bin_width=0))
        self.assertEqual(response.status_code, 400)

    def test_non_finite_bin_width(self):
        for width in ("nan", "inf", "-inf"):
            with self.subTest(width=width):
                response = self.client.post("/retirement/api/v1/simulate",
                                            json=_payload(bin_width=width))
                self.assertEqual(response.status_code, 400)
                self.assertFalse(response.get_json()["success"])
                self.assertIn("bin_width", response.get_json()["error"])

    def test_invalid_simulations(self):
        response = self.client.post("/retirement/api/v1/simulate", json=_payload(simulations=0))
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["success"])


class TestServiceDefaults(unittest.TestCase):
    """Tests for loading the defaults file at startup."""

    def test_no_path(self):
        self.assertEqual(app_module._load_service_defaults(None), ({}, None))

    def test_missing_file_gives_advisory(self):
        with tempfile.TemporaryDirectory() as tmp:
            defaults, advisory = app_module._load_service_defaults(os.path.join(tmp, "nope.json"))
        self.assertEqual(defaults, {})
        self.assertIsNotNone(advisory)

    def test_file_is_parsed(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "defaults.json")
            with open(path, "w", encoding="utf-8") as fh:
                json.dump({"taxRate": "22", "maxAge": 90, "unknown": 1}, fh)
            defaults, advisory = app_module._load_service_defaults(path)
        self.assertEqual(defaults, {"tax_rate": 22.0, "max_age": 90.0})
        self.assertIsNone(advisory)


if __name__ == "__main__":
    unittest.main()
