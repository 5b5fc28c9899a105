import tempfile
import unittest
from pathlib import Path

from fakes import FakeClock, RecordingSink
from pydantic import ValidationError

from uptime_checker.checks.results import CheckResult
from uptime_checker.jobs_file import load_jobs_file, register_jobs
from uptime_checker.registry import JobRegistry

JOBS_YAML = """\
jobs:
  - url: https://status.example.test/api/v2/summary.json
    expected_status: 200
    frequency: 1m
    jq_query:
      query: .components[0].status
      expectation: operational
  - url: https://catfact.example.test/fact
    method: GET
    expected_status: 200
    frequency: 30s
"""


class JobsFileTests(unittest.TestCase):
    def _write(self, td: str, text: str) -> Path:
        path = Path(td) / "jobs.yml"
        path.write_text(text)
        return path

    def test_load_and_register(self) -> None:
        registry = JobRegistry(
            check=lambda spec: CheckResult(ok=True, latency_ms=1),
            on_result=RecordingSink(),
            clock=FakeClock(),
        )
        try:
            with tempfile.TemporaryDirectory() as td:
                jobs_file = load_jobs_file(self._write(td, JOBS_YAML))

            ids = register_jobs(registry, jobs_file)

            self.assertEqual(ids, [1, 2])
            first, second = registry.list()
            self.assertEqual(first.query.expectation, "operational")
            self.assertEqual(second.frequency.total_seconds(), 30)
        finally:
            registry.close()

    def test_empty_file_has_no_jobs(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            jobs_file = load_jobs_file(self._write(td, ""))

        self.assertEqual(jobs_file.jobs, [])

    def test_invalid_entry_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write(td, "jobs:\n  - url: https://x.test\n    expected_status: 200\n    frequency: often\n")
            with self.assertRaises(ValidationError):
                load_jobs_file(path)

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_jobs_file(Path(td) / "nope.yml")


if __name__ == "__main__":
    unittest.main()
