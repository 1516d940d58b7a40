"""In-memory environment lookup."""

from apirunner.schemas.api_environment import Environment


class StaticEnvironmentLookup:
    """Environment lookup over a fixed list, by id first and then by name."""

    def __init__(self, environments: list[Environment] | None = None):
        self._environments = list(environments or [])

    def get_by_name(self, name: str) -> Environment | None:
        for environment in self._environments:
            if environment.id and environment.id == name:
                return environment
        for environment in self._environments:
            if environment.name == name:
                return environment
        return None
