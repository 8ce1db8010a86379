from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

Severity = Literal["error", "warning"]


@dataclass(slots=True)
class ValidationIssue:
    """Single finding about a graph document entry."""

    severity: Severity
    message: str
    path: Optional[str] = None  # e.g. "nodes[2]", "edges[0]", "$" for the root
    code: Optional[str] = None


@dataclass(slots=True)
class ValidationResult:
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    @property
    def is_ok(self) -> bool:
        return not self.errors

    def codes(self) -> list[str]:
        return [issue.code or "" for issue in self.issues]

    def add_issue(
        self,
        severity: Severity,
        message: str,
        path: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        self.issues.append(ValidationIssue(severity=severity, message=message, path=path, code=code))
