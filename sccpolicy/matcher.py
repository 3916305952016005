"""Matching users to constraints and resolving namespace pre-allocated values."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .api import (
    FS_GROUP_MUST_RUN_AS,
    MCS_ANNOTATION,
    RUN_AS_USER_MUST_RUN_AS_RANGE,
    SELINUX_MUST_RUN_AS,
    SUPPLEMENTAL_GROUPS_ANNOTATION,
    SUPPLEMENTAL_GROUPS_MUST_RUN_AS,
    UID_RANGE_ANNOTATION,
    IDRange,
    Namespace,
    SecurityContextConstraints,
    SELinuxOptions,
    UserInfo,
)

logger = logging.getLogger(__name__)

SECURITY_API_GROUP = "security.openshift.io"
SCC_RESOURCE = "securitycontextconstraints"

_MAX_UINT32 = 2**32 - 1
_SIZE_FORMAT = re.compile(r"^\s*(\d+)/(\d+)\s*$")
_RANGE_FORMAT = re.compile(r"^\s*(\d+)-(\d+)\s*$")

Authorizer = Callable[[Mapping[str, Any]], bool]


class AnnotationError(ValueError):
    """A namespace annotation is missing, empty or malformed."""


@dataclass(frozen=True)
class Block:
    """An inclusive range of ids."""

    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start + 1


def parse_block(text: str) -> Block:
    """Parse ``start/size`` or ``start-end`` into a block."""
    match = _SIZE_FORMAT.match(text)
    if match:
        start, size = (int(g) for g in match.groups())
        if size == 0:
            raise ValueError(f"block size must be a positive integer: {text!r}")
        end = start + size - 1
    else:
        match = _RANGE_FORMAT.match(text)
        if not match:
            raise ValueError(
                f"block not in the format \"<start>/<size>\" or \"<start>-<end>\": {text!r}"
            )
        start, end = (int(g) for g in match.groups())
    if start > _MAX_UINT32 or end > _MAX_UINT32:
        raise ValueError(f"block is out of range: {text!r}")
    return Block(start, end)


def _authorized_for_scc(
    scc_name: str, user_info: UserInfo, namespace: str, authorizer: Authorizer
) -> bool:
    attributes = {
        "user": user_info,
        "verb": "use",
        "namespace": namespace,
        "name": scc_name,
        "api_group": SECURITY_API_GROUP,
        "resource": SCC_RESOURCE,
        "resource_request": True,
    }
    try:
        return bool(authorizer(attributes))
    except Exception as exc:  # an authorizer failure denies access
        logger.debug("cannot authorize for SCC %s: %s", scc_name, exc)
        return False


def constraint_applies_to(
    scc_name: str,
    scc_users: Iterable[str],
    scc_groups: Iterable[str],
    user_info: UserInfo,
    namespace: str,
    authorizer: Authorizer | None,
) -> bool:
    """Whether the user may use the constraint, by name, group or authorization."""
    if user_info.name in scc_users:
        return True
    groups = set(scc_groups)
    if any(g in groups for g in user_info.groups):
        return True
    if authorizer is not None:
        return _authorized_for_scc(scc_name, user_info, namespace, authorizer)
    return False


def parse_supplemental_group_annotation(groups: str) -> list[Block]:
    """Parse a comma-separated list of blocks."""
    blocks = [parse_block(segment) for segment in groups.split(",")]
    if not blocks:
        raise AnnotationError(f"no blocks parsed from annotation {groups}")
    return blocks


def get_preallocated_uid_range(namespace: Namespace) -> tuple[int, int]:
    """Return the (min, max) uids allocated to the namespace."""
    value = namespace.annotations.get(UID_RANGE_ANNOTATION)
    if value is None:
        raise AnnotationError(f"unable to find annotation {UID_RANGE_ANNOTATION}")
    if not value:
        raise AnnotationError(
            f"found annotation {UID_RANGE_ANNOTATION} but it was empty"
        )
    try:
        block = parse_block(value)
    except ValueError as exc:
        raise AnnotationError(str(exc)) from exc
    logger.debug(
        "got preallocated values for min: %d, max: %d for uid range in namespace %s",
        block.start,
        block.end,
        namespace.name,
    )
    return block.start, block.end


def get_preallocated_level(namespace: Namespace) -> str:
    """Return the MCS level allocated to the namespace."""
    level = namespace.annotations.get(MCS_ANNOTATION)
    if level is None:
        raise AnnotationError(f"unable to find annotation {MCS_ANNOTATION}")
    if not level:
        raise AnnotationError(f"found annotation {MCS_ANNOTATION} but it was empty")
    logger.debug(
        "got preallocated value for level: %s for selinux options in namespace %s",
        level,
        namespace.name,
    )
    return level


def get_supplemental_groups_annotation(namespace: Namespace) -> str:
    """Return the supplemental groups annotation, falling back to the uid range."""
    groups = namespace.annotations.get(SUPPLEMENTAL_GROUPS_ANNOTATION)
    if groups is None:
        logger.debug(
            "unable to find supplemental group annotation %s falling back to %s",
            SUPPLEMENTAL_GROUPS_ANNOTATION,
            UID_RANGE_ANNOTATION,
        )
        groups = namespace.annotations.get(UID_RANGE_ANNOTATION)
        if groups is None:
            raise AnnotationError(
                "unable to find supplemental group or uid annotation "
                f"for namespace {namespace.name}"
            )
    if not groups:
        raise AnnotationError(
            f"unable to find groups using {SUPPLEMENTAL_GROUPS_ANNOTATION} "
            f"and {UID_RANGE_ANNOTATION} annotations"
        )
    return groups


def _preallocated_blocks(namespace: Namespace) -> list[Block]:
    groups = get_supplemental_groups_annotation(namespace)
    logger.debug(
        "got preallocated value for groups: %s in namespace %s", groups, namespace.name
    )
    try:
        return parse_supplemental_group_annotation(groups)
    except AnnotationError:
        raise
    except ValueError as exc:
        raise AnnotationError(str(exc)) from exc


def get_preallocated_fs_group(namespace: Namespace) -> list[IDRange]:
    """Return the single fs group allocated to the namespace, as a range."""
    first = _preallocated_blocks(namespace)[0]
    return [IDRange(min=first.start, max=first.start)]


def get_preallocated_supplemental_groups(namespace: Namespace) -> list[IDRange]:
    """Return the supplemental group ranges allocated to the namespace."""
    return [IDRange(min=b.start, max=b.end) for b in _preallocated_blocks(namespace)]


def requires_preallocated_uid_range(constraint: SecurityContextConstraints) -> bool:
    """A must-run-as-range strategy with neither bound set needs the namespace range."""
    opts = constraint.run_as_user
    if opts.type != RUN_AS_USER_MUST_RUN_AS_RANGE:
        return False
    return opts.uid_range_min is None and opts.uid_range_max is None


def requires_preallocated_selinux_level(constraint: SecurityContextConstraints) -> bool:
    """A must-run-as SELinux strategy without a level needs the namespace level."""
    opts = constraint.selinux_context
    if opts.type != SELINUX_MUST_RUN_AS:
        return False
    return opts.selinux_options is None or opts.selinux_options.level == ""


def requires_preallocated_supplemental_groups(
    constraint: SecurityContextConstraints,
) -> bool:
    """A must-run-as supplemental groups strategy without ranges needs the namespace's."""
    opts = constraint.supplemental_groups
    return opts.type == SUPPLEMENTAL_GROUPS_MUST_RUN_AS and not opts.ranges


def requires_preallocated_fs_group(constraint: SecurityContextConstraints) -> bool:
    """A must-run-as fs group strategy without ranges needs the namespace's."""
    opts = constraint.fs_group
    return opts.type == FS_GROUP_MUST_RUN_AS and not opts.ranges


def resolve_preallocated_values(
    namespace: Namespace, constraint: SecurityContextConstraints
) -> SecurityContextConstraints:
    """Return a copy of the constraint with values it leaves open taken from the namespace."""
    constraint = constraint.deep_copy()

    def fail(kind: str, exc: Exception) -> AnnotationError:
        return AnnotationError(
            f"unable to find pre-allocated {kind} annotation for namespace "
            f"{namespace.name} while trying to configure SCC {constraint.name}: {exc}"
        )

    if requires_preallocated_uid_range(constraint):
        try:
            low, high = get_preallocated_uid_range(namespace)
        except AnnotationError as exc:
            raise fail("uid", exc) from exc
        constraint.run_as_user.uid_range_min = low
        constraint.run_as_user.uid_range_max = high

    if requires_preallocated_selinux_level(constraint):
        try:
            level = get_preallocated_level(namespace)
        except AnnotationError as exc:
            raise fail("mcs", exc) from exc
        if constraint.selinux_context.selinux_options is None:
            constraint.selinux_context.selinux_options = SELinuxOptions()
        constraint.selinux_context.selinux_options.level = level

    if requires_preallocated_fs_group(constraint):
        try:
            constraint.fs_group.ranges = get_preallocated_fs_group(namespace)
        except AnnotationError as exc:
            raise fail("group", exc) from exc

    if requires_preallocated_supplemental_groups(constraint):
        try:
            constraint.supplemental_groups.ranges = (
                get_preallocated_supplemental_groups(namespace)
            )
        except AnnotationError as exc:
            raise fail("group", exc) from exc

    return constraint