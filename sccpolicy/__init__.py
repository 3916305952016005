"""Security context constraint building blocks: field errors, pod and constraint
data types, security context accessors, seccomp, SELinux and sysctl strategies,
and constraint matching with namespace pre-allocated values."""

__version__ = "0.1.0"
__all__ = ["accessors", "api", "field", "matcher", "seccomp", "selinux", "sysctl"]