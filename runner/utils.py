from __future__ import annotations

from dataclasses import asdict

from runner.types import CheckResult


def summarize(results: list[CheckResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from check results."""
    failures = [r.name for r in results if not r.ok]
    groups: list[str] = []
    for r in results:
        if r.name == "category_groups":
            groups = list(r.detail.get("groups", []))
    summary = {
        "component": "runner",
        "event": "summary",
        "checks": [asdict(r) for r in results],
        "passed": len(results) - len(failures),
        "failed": failures,
        "groups": groups,
    }
    exit_code = 0 if results and not failures else 1
    return summary, exit_code
