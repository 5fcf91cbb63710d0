import os
from dataclasses import dataclass
from typing import Optional

EXECUTORS = ("process", "thread", "inline")


@dataclass
class HostConfig:
    executor: str = "process"
    max_workers: Optional[int] = None
    default_iterations: int = 2000
    log_level: str = "INFO"


def load_config() -> HostConfig:
    """Read host settings from CLAIMSIM_* env vars."""
    executor = os.environ.get("CLAIMSIM_EXECUTOR", "process").strip().lower()
    if executor not in EXECUTORS:
        raise ValueError(f"Unsupported CLAIMSIM_EXECUTOR: {executor!r} (expected one of {EXECUTORS})")

    max_workers = os.environ.get("CLAIMSIM_MAX_WORKERS")

    return HostConfig(
        executor=executor,
        max_workers=int(max_workers) if max_workers else None,
        default_iterations=int(os.environ.get("CLAIMSIM_ITERATIONS", "2000")),
        log_level=os.environ.get("CLAIMSIM_LOG_LEVEL", "INFO").upper(),
    )
