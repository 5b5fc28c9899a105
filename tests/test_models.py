import unittest
from datetime import timedelta

from pydantic import ValidationError

from uptime_checker.api_schemas import JobResponse
from uptime_checker.models import JobConfig, JobSpec
from uptime_checker.query import JqQuery


def _payload(**overrides) -> dict:
    data = {
        "url": "https://example.test",
        "method": "GET",
        "expected_status": 200,
        "frequency": "2m",
    }
    data.update(overrides)
    return data


class JobConfigTests(unittest.TestCase):
    def test_valid_payload_builds_spec(self) -> None:
        spec = JobConfig.model_validate(_payload()).to_spec()

        self.assertEqual(spec.url, "https://example.test")
        self.assertEqual(spec.method, "GET")
        self.assertEqual(spec.expected_status, 200)
        self.assertEqual(spec.frequency, timedelta(minutes=2))
        self.assertIsNone(spec.query)
        self.assertIsNone(spec.id)

    def test_jq_query_payload(self) -> None:
        spec = JobConfig.model_validate(
            _payload(jq_query={"query": "keys[0]", "expectation": "fact"})
        ).to_spec()

        self.assertEqual(spec.query, JqQuery("keys[0]", "fact"))

    def test_query_alias_accepted(self) -> None:
        cfg = JobConfig.model_validate(_payload(query={"query": ".status", "expectation": "ok"}))

        self.assertEqual(cfg.jq_query.query, ".status")

    def test_method_defaults_to_get(self) -> None:
        data = _payload()
        del data["method"]

        self.assertEqual(JobConfig.model_validate(data).method, "GET")

    def test_unsupported_method_accepted_at_admission(self) -> None:
        # Rejected when the check runs, not here.
        self.assertEqual(JobConfig.model_validate(_payload(method="POST")).method, "POST")

    def test_admission_errors(self) -> None:
        bad_payloads = {
            "invalid duration": _payload(frequency="soon"),
            "unitless duration": _payload(frequency="30"),
            "numeric duration": _payload(frequency=30),
            "zero duration": _payload(frequency="0s"),
            "negative duration": _payload(frequency="-5s"),
            "invalid jq": _payload(jq_query={"query": ".a[", "expectation": "x"}),
            "missing expectation": _payload(jq_query={"query": ".a"}),
            "missing url": {k: v for k, v in _payload().items() if k != "url"},
            "non-http url": _payload(url="ftp://example.test/file"),
            "status out of range": _payload(expected_status=42),
        }
        for name, data in bad_payloads.items():
            with self.subTest(name):
                with self.assertRaises(ValidationError):
                    JobConfig.model_validate(data)


class JobSpecTests(unittest.TestCase):
    def test_frequency_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            JobSpec(url="http://x.local", method="GET", expected_status=200, frequency=timedelta(0))

    def test_with_id_returns_new_spec(self) -> None:
        spec = JobSpec(url="http://x.local", method="GET", expected_status=200, frequency=timedelta(seconds=5))
        numbered = spec.with_id(3)

        self.assertIsNone(spec.id)
        self.assertEqual(numbered.id, 3)
        self.assertEqual(numbered.url, spec.url)


class JobResponseTests(unittest.TestCase):
    def test_from_spec_normalizes_frequency(self) -> None:
        spec = JobConfig.model_validate(_payload()).to_spec().with_id(1)

        body = JobResponse.from_spec(spec).model_dump(exclude_none=True)

        self.assertEqual(
            body,
            {
                "id": 1,
                "url": "https://example.test",
                "method": "GET",
                "expected_status": 200,
                "frequency": "2m0s",
            },
        )

    def test_from_spec_includes_query(self) -> None:
        spec = JobConfig.model_validate(
            _payload(frequency="90s", jq_query={"query": "keys[0]", "expectation": "fact"})
        ).to_spec().with_id(2)

        body = JobResponse.from_spec(spec).model_dump()

        self.assertEqual(body["frequency"], "1m30s")
        self.assertEqual(body["jq_query"], {"query": "keys[0]", "expectation": "fact"})


if __name__ == "__main__":
    unittest.main()
