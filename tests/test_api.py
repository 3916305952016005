from sccpolicy.api import (
    SECCOMP_POD_ANNOTATION_KEY,
    FSGroupStrategyOptions,
    IDRange,
    Pod,
    RunAsUserStrategyOptions,
    SecurityContextConstraints,
    SeccompProfileType,
    SELinuxContextStrategyOptions,
    SELinuxOptions,
    to_internal_selinux_options,
)


def test_to_internal_selinux_options_none():
    assert to_internal_selinux_options(None) is None


def test_to_internal_selinux_options_copies():
    external = SELinuxOptions(user="user", role="role", type="type", level="level")
    internal = to_internal_selinux_options(external)
    assert internal == external
    assert internal is not external
    internal.level = "other"
    assert external.level == "level"


def test_deep_copy_is_independent():
    scc = SecurityContextConstraints(
        name="test scc",
        users=["alice"],
        run_as_user=RunAsUserStrategyOptions(type="MustRunAsRange"),
        selinux_context=SELinuxContextStrategyOptions(
            type="MustRunAs", selinux_options=SELinuxOptions(level="s0")
        ),
        fs_group=FSGroupStrategyOptions(type="MustRunAs", ranges=[IDRange(1, 1)]),
    )
    clone = scc.deep_copy()
    assert clone == scc
    clone.run_as_user.uid_range_min = 10
    clone.selinux_context.selinux_options.level = "s1"
    clone.fs_group.ranges.append(IDRange(2, 2))
    clone.users.append("bob")
    assert scc.run_as_user.uid_range_min is None
    assert scc.selinux_context.selinux_options.level == "s0"
    assert scc.fs_group.ranges == [IDRange(1, 1)]
    assert scc.users == ["alice"]


def test_default_scc_has_no_preallocated_ranges():
    scc = SecurityContextConstraints()
    assert scc.fs_group.ranges == []
    assert scc.supplemental_groups.ranges == []
    assert scc.selinux_context.selinux_options is None


def test_pod_defaults_are_not_shared():
    first, second = Pod(), Pod()
    first.annotations[SECCOMP_POD_ANNOTATION_KEY] = "runtime/default"
    first.spec.containers.append(object())
    assert second.annotations == {}
    assert second.spec.containers == []


def test_seccomp_profile_type_is_string_valued():
    assert SeccompProfileType("RuntimeDefault") is SeccompProfileType.RUNTIME_DEFAULT