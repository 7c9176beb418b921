"""
Credential resolution for packagers and announcers.

A credential is taken from explicit configuration when it is non-blank,
otherwise from a fixed process environment variable. Resolved values are
wrapped in Secret so they never leak through logging or repr().
"""

import os
from typing import Mapping, Optional

from . import config


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def resolve_credential(
    explicit_value: Optional[str],
    env_var_name: str,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Resolve a credential from configuration, falling back to the environment.

    Args:
        explicit_value: Value set in configuration (may be None or blank)
        env_var_name: Environment variable consulted when no explicit value
        environ: Environment mapping (defaults to os.environ)

    Returns:
        The explicit value, the environment value, or None when neither is set
    """
    if not _is_blank(explicit_value):
        return explicit_value

    env = os.environ if environ is None else environ
    value = env.get(env_var_name)
    if _is_blank(value):
        return None
    return value


class Secret:
    """
    Holds a resolved credential without exposing it.

    str() and repr() only report whether the value is set; the raw value
    is available through reveal() for the client that sends it.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Optional[str]):
        self._value = None if _is_blank(value) else value

    def is_set(self) -> bool:
        return self._value is not None

    def reveal(self) -> Optional[str]:
        return self._value

    def masked(self) -> str:
        return config.MASKED_VALUE if self.is_set() else config.UNSET_VALUE

    def __str__(self) -> str:
        return self.masked()

    def __repr__(self) -> str:
        return f"Secret({self.masked()})"

    def __bool__(self) -> bool:
        return self.is_set()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)


def resolve_secret(
    explicit_value: Optional[str],
    env_var_name: str,
    environ: Optional[Mapping[str, str]] = None,
) -> Secret:
    """Resolve a credential and wrap it in a Secret."""
    return Secret(resolve_credential(explicit_value, env_var_name, environ))
