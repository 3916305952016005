"""Seccomp profile constraint strategy."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from . import field
from .api import (
    DEPRECATED_SECCOMP_PROFILE_DOCKER_DEFAULT,
    SECCOMP_CONTAINER_ANNOTATION_KEY_PREFIX,
    SECCOMP_LOCALHOST_PROFILE_NAME_PREFIX,
    SECCOMP_POD_ANNOTATION_KEY,
    SECCOMP_PROFILE_NAME_UNCONFINED,
    SECCOMP_PROFILE_RUNTIME_DEFAULT,
    Container,
    Pod,
    SeccompProfile,
    SeccompProfileType,
)

ALLOW_ANY_PROFILE = "*"

# docker/default and runtime/default name the same profile; allowing one allows both.
_RUNTIME_DEFAULTS = frozenset(
    {DEPRECATED_SECCOMP_PROFILE_DOCKER_DEFAULT, SECCOMP_PROFILE_RUNTIME_DEFAULT}
)


class SeccompStrategy:
    """Generates and validates seccomp profiles against a list of allowed ones."""

    def __init__(self, allowed_profiles: Iterable[str] | None = None) -> None:
        profiles = list(allowed_profiles or [])
        self.allow_any_profile = ALLOW_ANY_PROFILE in profiles
        self.allowed_profiles = [p for p in profiles if p != ALLOW_ANY_PROFILE]
        self.runtime_default_allowed = any(
            p in _RUNTIME_DEFAULTS for p in self.allowed_profiles
        )

    def generate(self, annotations: Mapping[str, str] | None, pod: Pod) -> str:
        """Return the profile a pod should use, or an empty string for none."""
        existing = (annotations or {}).get(SECCOMP_POD_ANNOTATION_KEY, "")
        if existing:
            return existing
        sc = pod.spec.security_context
        if sc is not None and sc.seccomp_profile is not None:
            return seccomp_annotation_for_field(sc.seccomp_profile)
        if self.allowed_profiles:
            return self.allowed_profiles[0]
        return ""

    def validate_pod(self, pod: Pod) -> list[field.FieldError]:
        """Check the pod-level profile against the allowed profiles."""
        path = field.Path("pod", "metadata", "annotations").key(
            SECCOMP_POD_ANNOTATION_KEY
        )
        profile = pod.annotations.get(SECCOMP_POD_ANNOTATION_KEY, "")
        sc = pod.spec.security_context
        if not profile and sc is not None and sc.seccomp_profile is not None:
            profile = seccomp_annotation_for_field(sc.seccomp_profile)
        return self._errors(path, profile)

    def validate_container(
        self, pod: Pod, container: Container
    ) -> list[field.FieldError]:
        """Check the profile that applies to a container."""
        path = field.Path("pod", "metadata", "annotations").key(
            SECCOMP_CONTAINER_ANNOTATION_KEY_PREFIX + container.name
        )
        return self._errors(path, profile_for_container(pod, container))

    def _errors(self, path: field.Path, profile: str) -> list[field.FieldError]:
        error = self._validate_profile(path, profile)
        return [] if error is None else [error]

    def _validate_profile(
        self, path: field.Path, profile: str
    ) -> field.FieldError | None:
        if not self.allow_any_profile and not self.allowed_profiles and profile:
            return field.forbidden(path, "seccomp may not be set")
        if not self.allowed_profiles and not profile:
            return None
        if self.allow_any_profile:
            return None
        if profile in self.allowed_profiles:
            return None
        if self.runtime_default_allowed and profile in _RUNTIME_DEFAULTS:
            return None
        valid = " ".join(self.allowed_profiles)
        return field.forbidden(
            path,
            f"{profile} is not an allowed seccomp profile. Valid values are [{valid}]",
        )


def profile_for_container(pod: Pod, container: Container) -> str:
    """Return the container's profile if set, otherwise the pod's."""
    csc = container.security_context
    if csc is not None and csc.seccomp_profile is not None:
        return seccomp_annotation_for_field(csc.seccomp_profile)
    key = SECCOMP_CONTAINER_ANNOTATION_KEY_PREFIX + container.name
    if key in pod.annotations:
        return pod.annotations[key]
    psc = pod.spec.security_context
    if psc is not None and psc.seccomp_profile is not None:
        return seccomp_annotation_for_field(psc.seccomp_profile)
    return pod.annotations.get(SECCOMP_POD_ANNOTATION_KEY, "")


def seccomp_annotation_for_field(profile: SeccompProfile) -> str:
    """Convert a seccomp profile field to its annotation value."""
    if profile.type == SeccompProfileType.UNCONFINED:
        return SECCOMP_PROFILE_NAME_UNCONFINED
    if profile.type == SeccompProfileType.RUNTIME_DEFAULT:
        return SECCOMP_PROFILE_RUNTIME_DEFAULT
    if profile.type == SeccompProfileType.LOCALHOST and profile.localhost_profile is not None:
        return SECCOMP_LOCALHOST_PROFILE_NAME_PREFIX + profile.localhost_profile
    return ""


def seccomp_field_for_annotation(annotation: str) -> SeccompProfile | None:
    """Convert a seccomp annotation value to a profile field, or None."""
    if annotation == SECCOMP_PROFILE_NAME_UNCONFINED:
        return SeccompProfile(SeccompProfileType.UNCONFINED)
    if annotation in _RUNTIME_DEFAULTS:
        return SeccompProfile(SeccompProfileType.RUNTIME_DEFAULT)
    if annotation.startswith(SECCOMP_LOCALHOST_PROFILE_NAME_PREFIX):
        name = annotation[len(SECCOMP_LOCALHOST_PROFILE_NAME_PREFIX):]
        if name:
            return SeccompProfile(SeccompProfileType.LOCALHOST, name)
    return None