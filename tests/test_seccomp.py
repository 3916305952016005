import pytest

from sccpolicy.api import (
    SECCOMP_CONTAINER_ANNOTATION_KEY_PREFIX,
    SECCOMP_POD_ANNOTATION_KEY,
    Container,
    Pod,
    PodSecurityContext,
    PodSpec,
    SeccompProfile,
    SeccompProfileType,
    SecurityContext,
)
from sccpolicy.seccomp import (
    SeccompStrategy,
    profile_for_container,
    seccomp_annotation_for_field,
    seccomp_field_for_annotation,
)


@pytest.mark.parametrize(
    "allowed, allow_any, profiles",
    [
        (None, False, []),
        (["*"], True, []),
        (["*", "foo"], True, ["foo"]),
        (["foo", "*", "bar"], True, ["foo", "bar"]),
        (["bar", "foo"], False, ["bar", "foo"]),
    ],
)
def test_new_strategy(allowed, allow_any, profiles):
    s = SeccompStrategy(allowed)
    assert s.allow_any_profile is allow_any
    assert s.allowed_profiles == profiles


@pytest.mark.parametrize(
    "annotations, pod_profile, allowed, expected",
    [
        (None, None, [], ""),
        (None, None, None, ""),
        (None, None, ["*"], ""),
        (None, None, ["foo", "bar"], "foo"),
        (None, None, ["*", "foo", "bar"], "foo"),
        (None, SeccompProfile(SeccompProfileType.RUNTIME_DEFAULT), ["foo", "bar"], "runtime/default"),
        ({SECCOMP_POD_ANNOTATION_KEY: "baz"}, None, ["foo", "bar"], "baz"),
        (
            {SECCOMP_POD_ANNOTATION_KEY: "baz"},
            SeccompProfile(SeccompProfileType.RUNTIME_DEFAULT),
            ["foo", "bar"],
            "baz",
        ),
    ],
)
def test_generate(annotations, pod_profile, allowed, expected):
    pod = Pod(spec=PodSpec(security_context=PodSecurityContext(seccomp_profile=pod_profile)))
    assert SeccompStrategy(allowed).generate(annotations, pod) == expected


def _pod(annotation="", profile=None):
    pod = Pod()
    if annotation:
        pod.annotations = {SECCOMP_POD_ANNOTATION_KEY: annotation}
    if profile is not None:
        pod.spec.security_context = PodSecurityContext(seccomp_profile=profile)
    return pod


def _localhost(name):
    return SeccompProfile(SeccompProfileType.LOCALHOST, name)


@pytest.mark.parametrize(
    "allowed, pod, expected",
    [
        (None, _pod(), ""),
        (None, _pod("foo"), "seccomp may not be set"),
        (["foo"], _pod("foo"), ""),
        (["foo"], _pod("bar"), "Forbidden: bar is not an allowed seccomp profile. Valid values are [foo]"),
        (["*"], _pod("foo"), ""),
        (["*"], _pod(), ""),
        (["localhost/foo"], _pod("localhost/foo", _localhost("foo")), ""),
        (
            ["foo"],
            _pod("", _localhost("foo")),
            "Forbidden: localhost/foo is not an allowed seccomp profile. Valid values are [foo]",
        ),
        (["localhost/foo"], _pod("", _localhost("foo")), ""),
        (["docker/default"], _pod("runtime/default"), ""),
        (["docker/default"], _pod("", SeccompProfile(SeccompProfileType.RUNTIME_DEFAULT)), ""),
        (["runtime/default"], _pod("docker/default"), ""),
        (
            ["runtime/default"],
            _pod("", SeccompProfile(SeccompProfileType.UNCONFINED)),
            "unconfined is not an allowed seccomp profile. Valid values are [runtime/default]",
        ),
    ],
)
def test_validate_pod(allowed, pod, expected):
    errs = SeccompStrategy(allowed).validate_pod(pod)
    if not expected:
        assert errs == []
    else:
        assert len(errs) == 1
        assert expected in str(errs[0])


def _container_pod(annotation="", profile=None):
    pod = Pod(spec=PodSpec(containers=[Container(name="test")]))
    if annotation:
        pod.annotations = {SECCOMP_CONTAINER_ANNOTATION_KEY_PREFIX + "test": annotation}
    if profile is not None:
        pod.spec.containers[0].security_context = SecurityContext(seccomp_profile=profile)
    return pod


@pytest.mark.parametrize(
    "allowed, pod, expected",
    [
        (None, _container_pod(), ""),
        (None, _container_pod("foo"), "seccomp may not be set"),
        (["foo"], _container_pod("foo"), ""),
        (["foo"], _container_pod("bar"), "Forbidden: bar is not an allowed seccomp profile. Valid values are [foo]"),
        (["*"], _container_pod("foo"), ""),
        (["*"], _container_pod(), ""),
        (["localhost/foo"], _container_pod("", _localhost("foo")), ""),
        (
            ["localhost/foo"],
            _container_pod("", _localhost("bar")),
            "Forbidden: localhost/bar is not an allowed seccomp profile. Valid values are [localhost/foo]",
        ),
        (["runtime/default"], _container_pod("", SeccompProfile(SeccompProfileType.RUNTIME_DEFAULT)), ""),
        (
            ["runtime/default"],
            _container_pod("", SeccompProfile(SeccompProfileType.UNCONFINED)),
            "unconfined is not an allowed seccomp profile. Valid values are [runtime/default]",
        ),
    ],
)
def test_validate_container(allowed, pod, expected):
    errs = SeccompStrategy(allowed).validate_container(pod, pod.spec.containers[0])
    if not expected:
        assert errs == []
    else:
        assert len(errs) == 1
        assert expected in str(errs[0])


def test_container_error_path_names_container():
    pod = _container_pod("bar")
    errs = SeccompStrategy(["foo"]).validate_container(pod, pod.spec.containers[0])
    assert errs[0].field == (
        "pod.metadata.annotations[container.seccomp.security.alpha.kubernetes.io/test]"
    )


def test_profile_for_container_falls_back_to_pod():
    pod = Pod(
        annotations={SECCOMP_POD_ANNOTATION_KEY: "podprofile"},
        spec=PodSpec(containers=[Container(name="c")]),
    )
    assert profile_for_container(pod, pod.spec.containers[0]) == "podprofile"
    pod.spec.security_context = PodSecurityContext(
        seccomp_profile=SeccompProfile(SeccompProfileType.UNCONFINED)
    )
    assert profile_for_container(pod, pod.spec.containers[0]) == "unconfined"
    pod.annotations[SECCOMP_CONTAINER_ANNOTATION_KEY_PREFIX + "c"] = "own"
    assert profile_for_container(pod, pod.spec.containers[0]) == "own"


@pytest.mark.parametrize(
    "profile, annotation",
    [
        (SeccompProfile(SeccompProfileType.UNCONFINED), "unconfined"),
        (SeccompProfile(SeccompProfileType.RUNTIME_DEFAULT), "runtime/default"),
        (SeccompProfile(SeccompProfileType.LOCALHOST, "foo"), "localhost/foo"),
    ],
)
def test_annotation_field_round_trip(profile, annotation):
    assert seccomp_annotation_for_field(profile) == annotation
    assert seccomp_field_for_annotation(annotation) == profile


def test_annotation_for_localhost_without_name_is_empty():
    assert seccomp_annotation_for_field(SeccompProfile(SeccompProfileType.LOCALHOST)) == ""


@pytest.mark.parametrize("annotation", ["localhost/", "bogus", ""])
def test_field_for_unrecognised_annotation(annotation):
    assert seccomp_field_for_annotation(annotation) is None


def test_docker_default_maps_to_runtime_default():
    assert seccomp_field_for_annotation("docker/default") == SeccompProfile(
        SeccompProfileType.RUNTIME_DEFAULT
    )