"""Sysctl constraint strategy."""

from __future__ import annotations

from collections.abc import Iterable

from . import field
from .api import Pod


def safe_sysctl_allowlist() -> list[str]:
    """Return the sysctls that are namespaced and isolated, hence safe."""
    return [
        "kernel.shm_rmid_forced",
        "net.ipv4.ip_local_port_range",
        "net.ipv4.tcp_syncookies",
        "net.ipv4.ping_group_range",
        "net.ipv4.ip_unprivileged_port_start",
    ]


def _matches_any(name: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        if pattern.endswith("*"):
            if name.startswith(pattern[:-1]):
                return True
        elif name == pattern:
            return True
    return False


class MustMatchPatterns:
    """Allows safe sysctls and explicitly allowed unsafe ones, minus forbidden ones."""

    def __init__(
        self,
        safe_allowlist: Iterable[str] | None = None,
        allowed_unsafe_sysctls: Iterable[str] | None = None,
        forbidden_sysctls: Iterable[str] | None = None,
    ) -> None:
        self.safe_allowlist = list(safe_allowlist or [])
        self.allowed_unsafe_sysctls = list(allowed_unsafe_sysctls or [])
        self.forbidden_sysctls = list(forbidden_sysctls or [])

    def validate(self, pod: Pod) -> list[field.FieldError]:
        """Return an error for each sysctl on the pod that is not allowed."""
        sc = pod.spec.security_context
        sysctls = sc.sysctls if sc is not None else []
        path = field.Path("pod", "spec", "securityContext").child("sysctls")
        errors = []
        for i, sysctl in enumerate(sysctls):
            name = sysctl.name
            if _matches_any(name, self.forbidden_sysctls):
                errors.append(
                    field.forbidden(path.index(i), f'sysctl "{name}" is not allowed')
                )
            elif name in self.safe_allowlist or _matches_any(
                name, self.allowed_unsafe_sysctls
            ):
                continue
            else:
                errors.append(
                    field.forbidden(
                        path.index(i), f'unsafe sysctl "{name}" is not allowed'
                    )
                )
        return errors