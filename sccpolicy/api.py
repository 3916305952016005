"""Pod, namespace and security context constraint data types."""

from __future__ import annotations

import copy
import dataclasses
import enum
from dataclasses import dataclass, field

SECCOMP_POD_ANNOTATION_KEY = "seccomp.security.alpha.kubernetes.io/pod"
SECCOMP_CONTAINER_ANNOTATION_KEY_PREFIX = "container.seccomp.security.alpha.kubernetes.io/"
SECCOMP_PROFILE_RUNTIME_DEFAULT = "runtime/default"
DEPRECATED_SECCOMP_PROFILE_DOCKER_DEFAULT = "docker/default"
SECCOMP_PROFILE_NAME_UNCONFINED = "unconfined"
SECCOMP_LOCALHOST_PROFILE_NAME_PREFIX = "localhost/"

UID_RANGE_ANNOTATION = "openshift.io/sa.scc.uid-range"
MCS_ANNOTATION = "openshift.io/sa.scc.mcs"
SUPPLEMENTAL_GROUPS_ANNOTATION = "openshift.io/sa.scc.supplemental-groups"

DEFAULT_PROC_MOUNT = "Default"
UNMASKED_PROC_MOUNT = "Unmasked"

RUN_AS_USER_MUST_RUN_AS = "MustRunAs"
RUN_AS_USER_MUST_RUN_AS_RANGE = "MustRunAsRange"
RUN_AS_USER_MUST_RUN_AS_NON_ROOT = "MustRunAsNonRoot"
RUN_AS_USER_RUN_AS_ANY = "RunAsAny"

SELINUX_MUST_RUN_AS = "MustRunAs"
SELINUX_RUN_AS_ANY = "RunAsAny"

FS_GROUP_MUST_RUN_AS = "MustRunAs"
FS_GROUP_RUN_AS_ANY = "RunAsAny"

SUPPLEMENTAL_GROUPS_MUST_RUN_AS = "MustRunAs"
SUPPLEMENTAL_GROUPS_RUN_AS_ANY = "RunAsAny"


class SeccompProfileType(str, enum.Enum):
    """The kind of seccomp profile applied to a pod or container."""

    UNCONFINED = "Unconfined"
    RUNTIME_DEFAULT = "RuntimeDefault"
    LOCALHOST = "Localhost"


@dataclass
class SELinuxOptions:
    user: str = ""
    role: str = ""
    type: str = ""
    level: str = ""


@dataclass
class SeccompProfile:
    type: SeccompProfileType
    localhost_profile: str | None = None


@dataclass
class Capabilities:
    add: list[str] = field(default_factory=list)
    drop: list[str] = field(default_factory=list)


@dataclass
class Sysctl:
    name: str
    value: str = ""


@dataclass
class PodSecurityContext:
    host_network: bool = False
    host_pid: bool = False
    host_ipc: bool = False
    selinux_options: SELinuxOptions | None = None
    run_as_user: int | None = None
    run_as_group: int | None = None
    run_as_non_root: bool | None = None
    supplemental_groups: list[int] | None = None
    fs_group: int | None = None
    sysctls: list[Sysctl] = field(default_factory=list)
    seccomp_profile: SeccompProfile | None = None


@dataclass
class SecurityContext:
    capabilities: Capabilities | None = None
    privileged: bool | None = None
    selinux_options: SELinuxOptions | None = None
    run_as_user: int | None = None
    run_as_group: int | None = None
    run_as_non_root: bool | None = None
    read_only_root_filesystem: bool | None = None
    allow_privilege_escalation: bool | None = None
    proc_mount: str | None = None
    seccomp_profile: SeccompProfile | None = None


@dataclass
class ContainerPort:
    container_port: int = 0
    host_port: int = 0
    name: str = ""
    protocol: str = "TCP"


@dataclass
class Container:
    name: str = ""
    security_context: SecurityContext | None = None
    ports: list[ContainerPort] = field(default_factory=list)


@dataclass
class PodSpec:
    containers: list[Container] = field(default_factory=list)
    init_containers: list[Container] = field(default_factory=list)
    ephemeral_containers: list[Container] = field(default_factory=list)
    security_context: PodSecurityContext | None = None


@dataclass
class Pod:
    name: str = ""
    namespace: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    spec: PodSpec = field(default_factory=PodSpec)


@dataclass
class Namespace:
    name: str = ""
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class IDRange:
    min: int = 0
    max: int = 0


@dataclass
class RunAsUserStrategyOptions:
    type: str = ""
    uid: int | None = None
    uid_range_min: int | None = None
    uid_range_max: int | None = None


@dataclass
class SELinuxContextStrategyOptions:
    type: str = ""
    selinux_options: SELinuxOptions | None = None


@dataclass
class FSGroupStrategyOptions:
    type: str = ""
    ranges: list[IDRange] = field(default_factory=list)


@dataclass
class SupplementalGroupsStrategyOptions:
    type: str = ""
    ranges: list[IDRange] = field(default_factory=list)


@dataclass
class SecurityContextConstraints:
    """A named set of constraints that pods must satisfy to be admitted."""

    name: str = ""
    priority: int | None = None
    allow_privileged_container: bool = False
    default_add_capabilities: list[str] = field(default_factory=list)
    required_drop_capabilities: list[str] = field(default_factory=list)
    allowed_capabilities: list[str] = field(default_factory=list)
    allow_host_network: bool = False
    allow_host_ports: bool = False
    allow_host_pid: bool = False
    allow_host_ipc: bool = False
    default_allow_privilege_escalation: bool | None = None
    allow_privilege_escalation: bool | None = None
    selinux_context: SELinuxContextStrategyOptions = field(
        default_factory=SELinuxContextStrategyOptions
    )
    run_as_user: RunAsUserStrategyOptions = field(
        default_factory=RunAsUserStrategyOptions
    )
    supplemental_groups: SupplementalGroupsStrategyOptions = field(
        default_factory=SupplementalGroupsStrategyOptions
    )
    fs_group: FSGroupStrategyOptions = field(default_factory=FSGroupStrategyOptions)
    read_only_root_filesystem: bool = False
    volumes: list[str] = field(default_factory=list)
    users: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    seccomp_profiles: list[str] = field(default_factory=list)
    allowed_unsafe_sysctls: list[str] = field(default_factory=list)
    forbidden_sysctls: list[str] = field(default_factory=list)

    def deep_copy(self) -> SecurityContextConstraints:
        """Return an independent copy that shares no mutable state."""
        return copy.deepcopy(self)


@dataclass
class UserInfo:
    """The identity of a requesting user."""

    name: str = ""
    uid: str = ""
    groups: list[str] = field(default_factory=list)
    extra: dict[str, list[str]] = field(default_factory=dict)


def to_internal_selinux_options(external: SELinuxOptions | None) -> SELinuxOptions | None:
    """Return a copy of the options, or None when none are given."""
    if external is None:
        return None
    return dataclasses.replace(external)