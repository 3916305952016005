# sccpolicy

`sccpolicy` holds the building blocks for checking pods against security context
constraints (SCCs): a data model for pods, namespaces and constraints, views over
security contexts, seccomp, SELinux and sysctl strategies, and helpers that decide
whether a user may use a constraint and fill in values a constraint leaves to the
namespace. It uses only the Python standard library.

## Modules

### `sccpolicy.field`

- `Path("spec", "containers")` builds a field path; `child(*names)`, `index(i)` and
  `key(k)` return longer paths. `str(path)` gives forms such as
  `spec.containers[0].name`.
- `invalid(path, value, detail)`, `required(path, detail)` and
  `forbidden(path, detail)` create `FieldError` values with an `ErrorType`.
  `str(error)` reads like `spec.hostPID: Invalid value: true: not allowed`;
  `error.body()` gives the same text without the field name.
- Validators in this package return lists of `FieldError`; they do not raise them.

### `sccpolicy.api`

Dataclasses: `Pod`, `PodSpec`, `Container`, `ContainerPort`, `PodSecurityContext`,
`SecurityContext`, `SELinuxOptions`, `SeccompProfile` (with the `SeccompProfileType`
enum), `Capabilities`, `Sysctl`, `Namespace`, `IDRange`, the strategy option classes
(`RunAsUserStrategyOptions`, `SELinuxContextStrategyOptions`,
`FSGroupStrategyOptions`, `SupplementalGroupsStrategyOptions`),
`SecurityContextConstraints` (with `deep_copy()`) and `UserInfo`. The module also
defines the annotation keys and strategy type names as constants, for example
`SECCOMP_POD_ANNOTATION_KEY`, `UID_RANGE_ANNOTATION`, `MCS_ANNOTATION` and
`SUPPLEMENTAL_GROUPS_ANNOTATION`. `to_internal_selinux_options(options)` returns a
copy of the options, or `None`.

### `sccpolicy.accessors`

- `PodSecurityContextWrapper` and `ContainerSecurityContextWrapper` expose the fields
  of a context that may be `None` as attributes. Reading from a missing context gives
  the empty value. Writing a non-empty value creates the context, which is then
  available as `pod_security_context` / `container_security_context`.
  `ContainerSecurityContextWrapper.proc_mount` is `"Default"` when unset.
- `EffectiveContainerSecurityContextWrapper(pod_wrapper, container_wrapper)` gives the
  values that apply to a container. SELinux options, run-as-user, run-as-group and
  run-as-non-root fall back to the pod when the container leaves them unset. A write
  reaches the container context only when it changes the effective value.

### `sccpolicy.seccomp`

- `SeccompStrategy(allowed_profiles)` takes an allow-list that may contain the
  wildcard `*`.
  - `generate(annotations, pod)` returns the profile that is already set, or else the
    first allowed profile, or else `""`.
  - `validate_pod(pod)` and `validate_container(pod, container)` return forbidden
    errors for profiles that are not allowed.
  - `docker/default` and `runtime/default` count as the same profile.
- `seccomp_annotation_for_field`, `seccomp_field_for_annotation` and
  `profile_for_container` convert between profile fields and annotation values.

### `sccpolicy.selinux`

- `MustRunAs(options)` raises `ValueError` if the options or their `selinux_options`
  are missing. `generate` returns a copy of the configured options. `validate`
  reports a missing value or mismatched level, role, type and user.
- `RunAsAny()` generates `None` and accepts anything.
- `equal_levels("s0:c0,c6", "s0:c6,c0")` is `True`: categories are compared without
  regard to order.

### `sccpolicy.sysctl`

- `safe_sysctl_allowlist()` lists the sysctls treated as safe.
- `MustMatchPatterns(safe_allowlist, allowed_unsafe_sysctls, forbidden_sysctls)`
  checks a pod's sysctls:
  - forbidden patterns win;
  - safe names and allowed unsafe patterns pass;
  - everything else is rejected.
  - A pattern ending in `*` matches by prefix.

### `sccpolicy.matcher`

- `constraint_applies_to(scc_name, scc_users, scc_groups, user_info, namespace,
  authorizer)` is true if the user is listed by name or by one of its groups.
  Otherwise it asks `authorizer`, a callable that receives a mapping with the keys
  `user`, `verb` (`"use"`), `namespace`, `name`, `api_group`, `resource` and
  `resource_request`, and returns a bool. An exception from the authorizer counts as
  a denial. With `authorizer=None` it returns false.
- `parse_block` reads `start/size` or `start-end` into a `Block`.
  `parse_supplemental_group_annotation` reads a comma-separated list of blocks.
- The `get_preallocated_*` functions and `get_supplemental_groups_annotation` read
  namespace annotations. The supplemental groups annotation falls back to the UID
  range annotation. They raise `AnnotationError` (a `ValueError`) when an annotation
  is missing, empty or malformed.
- The `requires_preallocated_*` predicates tell whether a constraint leaves a value to
  the namespace.
- `resolve_preallocated_values(namespace, constraint)` returns a filled-in copy of the
  constraint and leaves the original unchanged.

## Examples

```python
from sccpolicy.api import Pod, PodSpec, PodSecurityContext, Sysctl
from sccpolicy.sysctl import MustMatchPatterns, safe_sysctl_allowlist

strategy = MustMatchPatterns(safe_sysctl_allowlist(), ["net.core.*"], ["kernel.msg*"])
pod = Pod(spec=PodSpec(security_context=PodSecurityContext(
    sysctls=[Sysctl(name="kernel.msgmax", value="65536")],
)))
for error in strategy.validate(pod):
    print(error)
# pod.spec.securityContext.sysctls[0]: Forbidden: sysctl "kernel.msgmax" is not allowed
```

```python
from sccpolicy.api import (
    UID_RANGE_ANNOTATION, Namespace, RunAsUserStrategyOptions,
    SecurityContextConstraints,
)
from sccpolicy.matcher import resolve_preallocated_values

ns = Namespace(name="demo", annotations={UID_RANGE_ANNOTATION: "1000/10000"})
scc = SecurityContextConstraints(
    name="restricted",
    run_as_user=RunAsUserStrategyOptions(type="MustRunAsRange"),
)
resolved = resolve_preallocated_values(ns, scc)
print(resolved.run_as_user.uid_range_min, resolved.run_as_user.uid_range_max)
# 1000 10999
```

## What it does not do

The package has no run-as-user, fs-group, supplemental-group or capabilities
strategies. It has no single provider that defaults and validates a whole pod
against a constraint, and no volume-type checks. It does not list constraints from a
store or sort them by priority. It has no command-line tool or server. Callers put
these pieces together themselves.

## Testing

```
pip install -e .[test]
pytest
```