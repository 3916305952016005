"""SELinux constraint strategies."""

from __future__ import annotations

import abc

from . import field
from .api import (
    Container,
    Pod,
    SELinuxContextStrategyOptions,
    SELinuxOptions,
    to_internal_selinux_options,
)


def _child(path: field.Path | None, name: str) -> field.Path:
    return field.Path(name) if path is None else path.child(name)


class SELinuxStrategy(abc.ABC):
    """Generates and validates SELinux options for pods and containers."""

    @abc.abstractmethod
    def generate(
        self, pod: Pod | None, container: Container | None
    ) -> SELinuxOptions | None:
        """Return the SELinux options to apply, or None."""

    @abc.abstractmethod
    def validate(
        self,
        path: field.Path | None,
        pod: Pod | None,
        container: Container | None,
        options: SELinuxOptions | None,
    ) -> list[field.FieldError]:
        """Return the problems with the given options."""


class MustRunAs(SELinuxStrategy):
    """Requires the exact SELinux options configured in the constraint."""

    def __init__(self, options: SELinuxContextStrategyOptions | None) -> None:
        if options is None:
            raise ValueError("MustRunAs requires SELinuxContextStrategyOptions")
        if options.selinux_options is None:
            raise ValueError("MustRunAs requires SELinuxOptions")
        self.options = options

    def generate(self, pod, container):
        return to_internal_selinux_options(self.options.selinux_options)

    def validate(self, path, pod, container, options):
        if options is None:
            return [field.required(path, "")]
        want = self.options.selinux_options
        errors = []
        if not equal_levels(want.level, options.level):
            errors.append(
                field.invalid(_child(path, "level"), options.level, f"must be {want.level}")
            )
        for name in ("role", "type", "user"):
            actual = getattr(options, name)
            expected = getattr(want, name)
            if actual != expected:
                errors.append(
                    field.invalid(_child(path, name), actual, f"must be {expected}")
                )
        return errors


class RunAsAny(SELinuxStrategy):
    """Accepts any SELinux options and generates none."""

    def __init__(self, options: SELinuxContextStrategyOptions | None = None) -> None:
        self.options = options

    def generate(self, pod, container):
        return None

    def validate(self, path, pod, container, options):
        return []


def equal_levels(expected: str, actual: str) -> bool:
    """Compare SELinux levels, ignoring the order of categories."""
    if expected == actual:
        return True
    expected_parts = expected.split(":", 1)
    actual_parts = actual.split(":", 1)
    if len(expected_parts) != 2 or len(actual_parts) != 2:
        return False
    if expected_parts[0] != actual_parts[0]:
        return False
    return sorted(expected_parts[1].split(",")) == sorted(actual_parts[1].split(","))