from __future__ import annotations

from pathlib import Path

import yaml

from uptime_checker.models import JobsFile
from uptime_checker.registry import JobRegistry


def load_jobs_file(path: Path) -> JobsFile:
    if not path.exists():
        raise FileNotFoundError(f"Missing jobs file at {path}")

    data = yaml.safe_load(path.read_text()) or {}
    return JobsFile.model_validate(data)


def register_jobs(registry: JobRegistry, jobs_file: JobsFile) -> list[int]:
    """
    Add every job from a validated jobs file to the registry.
    Nothing is written back; the file only seeds the in-memory registry.
    """
    return [registry.add(job.to_spec()) for job in jobs_file.jobs]
