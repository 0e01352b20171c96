"""Validation functions for platform specs submitted for simulation."""

from typing import List, Tuple

from app.models.simulation_models import PlatformSpec


class SimulationValidationError(ValueError):
    """Raised when a platform spec is rejected before the pipeline runs."""

    def __init__(self, issues: List[str]):
        self.issues = issues
        super().__init__("; ".join(issues))


def validate_platform_name(spec: PlatformSpec) -> Tuple[bool, List[str]]:
    """
    Validate that the platform has a usable name
    Returns (is_valid, list_of_issues)
    """
    if not spec.name or not spec.name.strip():
        return False, ["Platform name is required"]
    return True, []


def validate_unique_ids(spec: PlatformSpec) -> Tuple[bool, List[str]]:
    """
    Validate that feature ids and integration ids are unique within the spec
    Returns (is_valid, list_of_issues)
    """
    issues = []

    seen = set()
    for feature in spec.features:
        if feature.id in seen:
            issues.append(f"Duplicate feature id '{feature.id}'")
        seen.add(feature.id)

    seen = set()
    for integration in spec.integrations:
        if integration.id in seen:
            issues.append(f"Duplicate integration id '{integration.id}'")
        seen.add(integration.id)

    return len(issues) == 0, issues


def validate_platform_spec(spec: PlatformSpec) -> None:
    """Run every check and raise SimulationValidationError listing all issues."""
    issues: List[str] = []
    for check in (validate_platform_name, validate_unique_ids):
        _, check_issues = check(spec)
        issues.extend(check_issues)
    if issues:
        raise SimulationValidationError(issues)
