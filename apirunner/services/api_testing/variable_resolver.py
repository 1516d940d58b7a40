"""Variable resolution across Global, Environment, Collection and Local scopes."""

import re
from enum import Enum
from typing import Any


class VariableScope(str, Enum):
    """Variable namespaces, highest precedence first."""
    LOCAL = "local"  # Request or workflow captures
    COLLECTION = "collection"
    ENVIRONMENT = "environment"
    GLOBAL = "global"


# Ascending precedence: each later scope overwrites the ones before it
SCOPE_PRECEDENCE = (
    VariableScope.GLOBAL,
    VariableScope.ENVIRONMENT,
    VariableScope.COLLECTION,
    VariableScope.LOCAL,
)

VARIABLE_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}", re.ASCII)
VARIABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def interpolate(text: str, variables: dict[str, str]) -> str:
    """Replace {{name}} tokens found in ``variables``; leave the rest verbatim."""

    def replacer(match: re.Match) -> str:
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        return variables[name]

    return VARIABLE_PATTERN.sub(replacer, text)


def extract_variable_names(text: str | None) -> list[str]:
    """Extract all variable names from a template."""
    if not text or not isinstance(text, str):
        return []
    return [match.group(1) for match in VARIABLE_PATTERN.finditer(text)]


def has_variables(text: str | None) -> bool:
    """Check if a string contains any {{variable}} patterns."""
    if not text or not isinstance(text, str):
        return False
    return bool(VARIABLE_PATTERN.search(text))


def is_valid_variable_name(name: str) -> bool:
    return bool(VARIABLE_NAME_PATTERN.match(name))


class VariableResolver:
    """
    Resolves {{variable}} patterns from layered scopes.

    Precedence: Local > Collection > Environment > Global. Each instance owns
    its scope table; build one per request rather than sharing it.

    Unknown variables are left as the literal placeholder, so resolving the
    same text twice gives the same result.
    """

    def __init__(self):
        self._scopes: dict[VariableScope, dict[str, str]] = {}

    def set_scope(self, scope: VariableScope, variables: dict[str, str]) -> None:
        """Replace the whole variable map of one scope."""
        self._scopes[VariableScope(scope)] = dict(variables)

    def clear_scope(self, scope: VariableScope) -> None:
        self._scopes.pop(VariableScope(scope), None)

    def clear_all(self) -> None:
        self._scopes.clear()

    def get_scope_variables(self, scope: VariableScope) -> dict[str, str]:
        """Variables of a single scope (a copy)."""
        return dict(self._scopes.get(VariableScope(scope), {}))

    def get_merged_variables(self) -> dict[str, str]:
        """
        Flatten all scopes into one mapping.

        Scopes are applied lowest precedence first so a name defined in a
        higher scope overwrites it.
        """
        merged: dict[str, str] = {}
        for scope in SCOPE_PRECEDENCE:
            variables = self._scopes.get(scope)
            if variables:
                merged.update(variables)
        return merged

    def get_variable(self, name: str) -> str | None:
        """Value of ``name`` after precedence is applied, or None."""
        return self.get_merged_variables().get(name)

    def has_variable(self, name: str) -> bool:
        return self.get_variable(name) is not None

    def resolve(self, text: str | None) -> str:
        """
        Resolve variables in a string template.

        Args:
            text: String containing {{variable}} patterns

        Returns:
            String with known variables replaced by their values
        """
        if not text:
            return text or ""

        if not isinstance(text, str):
            return str(text)

        return interpolate(text, self.get_merged_variables())

    def resolve_object(self, value: Any) -> Any:
        """
        Resolve variables in any JSON-like value.

        Strings are interpolated, dicts and lists are walked recursively
        (dict keys included), other scalars are returned unchanged.
        """
        return self._resolve_value(value, self.get_merged_variables())

    def resolve_dict(self, obj: dict | None) -> dict:
        """Resolve keys and values of a string mapping such as headers or params."""
        if not obj:
            return {}
        return self._resolve_value(obj, self.get_merged_variables())

    def _resolve_value(self, value: Any, variables: dict[str, str]) -> Any:
        if isinstance(value, str):
            return interpolate(value, variables)
        elif isinstance(value, dict):
            result = {}
            for key, item in value.items():
                # Resolve the key too (in case it has variables)
                resolved_key = interpolate(key, variables) if isinstance(key, str) else key
                result[resolved_key] = self._resolve_value(item, variables)
            return result
        elif isinstance(value, list):
            return [self._resolve_value(item, variables) for item in value]
        else:
            # int, float, bool, None
            return value
