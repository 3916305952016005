"""Views over pod and container security contexts that create them on demand."""

from __future__ import annotations

from typing import Any

from .api import (
    DEFAULT_PROC_MOUNT,
    PodSecurityContext,
    SecurityContext,
)


class _Delegated:
    """A field read from the wrapped context, which is created only when a
    non-empty value is written."""

    def __init__(self, empty: Any = None) -> None:
        self.empty = empty
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        target = obj._target
        return self.empty if target is None else getattr(target, self.name)

    def __set__(self, obj: Any, value: Any) -> None:
        if obj._target is None and value is self.empty:
            return
        setattr(obj._ensure(), self.name, value)


class _Wrapper:
    _factory: type

    def __init__(self, context: Any = None) -> None:
        self._target = context

    def _ensure(self) -> Any:
        if self._target is None:
            self._target = self._factory()
        return self._target


class PodSecurityContextWrapper(_Wrapper):
    """Reads and writes a pod security context that may not exist yet."""

    _factory = PodSecurityContext

    host_network = _Delegated(False)
    host_pid = _Delegated(False)
    host_ipc = _Delegated(False)
    selinux_options = _Delegated()
    run_as_user = _Delegated()
    run_as_group = _Delegated()
    run_as_non_root = _Delegated()
    seccomp_profile = _Delegated()
    fs_group = _Delegated()

    def __init__(self, pod_sc: PodSecurityContext | None = None) -> None:
        super().__init__(pod_sc)

    @property
    def pod_security_context(self) -> PodSecurityContext | None:
        return self._target

    @property
    def supplemental_groups(self) -> list[int] | None:
        return None if self._target is None else self._target.supplemental_groups

    @supplemental_groups.setter
    def supplemental_groups(self, value: list[int] | None) -> None:
        if self._target is None and not value:
            return
        target = self._ensure()
        if not value and not target.supplemental_groups:
            return
        target.supplemental_groups = value


class ContainerSecurityContextWrapper(_Wrapper):
    """Reads and writes a container security context that may not exist yet."""

    _factory = SecurityContext

    capabilities = _Delegated()
    privileged = _Delegated()
    selinux_options = _Delegated()
    run_as_user = _Delegated()
    run_as_group = _Delegated()
    run_as_non_root = _Delegated()
    read_only_root_filesystem = _Delegated()
    seccomp_profile = _Delegated()
    allow_privilege_escalation = _Delegated()

    def __init__(self, container_sc: SecurityContext | None = None) -> None:
        super().__init__(container_sc)

    @property
    def container_security_context(self) -> SecurityContext | None:
        return self._target

    @property
    def proc_mount(self) -> str:
        if self._target is None or self._target.proc_mount is None:
            return DEFAULT_PROC_MOUNT
        return self._target.proc_mount


class _Effective:
    """A container field that writes through only when the effective value
    changes; inherited fields fall back to the pod's value when unset."""

    def __init__(self, inherited: bool = False) -> None:
        self.inherited = inherited
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        value = getattr(obj.container_sc, self.name)
        if value is None and self.inherited:
            return getattr(obj.pod_sc, self.name)
        return value

    def __set__(self, obj: Any, value: Any) -> None:
        if self.__get__(obj) != value:
            setattr(obj.container_sc, self.name, value)


class EffectiveContainerSecurityContextWrapper:
    """The settings that apply to a container once pod-level defaults are
    taken into account. Writes go to the container's own context."""

    capabilities = _Effective()
    privileged = _Effective()
    selinux_options = _Effective(inherited=True)
    run_as_user = _Effective(inherited=True)
    run_as_group = _Effective(inherited=True)
    run_as_non_root = _Effective(inherited=True)
    read_only_root_filesystem = _Effective()
    seccomp_profile = _Effective()
    allow_privilege_escalation = _Effective()

    def __init__(
        self,
        pod_sc: PodSecurityContextWrapper,
        container_sc: ContainerSecurityContextWrapper,
    ) -> None:
        self.pod_sc = pod_sc
        self.container_sc = container_sc

    @property
    def container_security_context(self) -> SecurityContext | None:
        return self.container_sc.container_security_context

    @property
    def proc_mount(self) -> str:
        return self.container_sc.proc_mount