"""Loading collection, workflow, environment and variable files."""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

import pydantic

from apirunner.errors import LoaderError, ValidationError
from apirunner.schemas.api_collection import Collection
from apirunner.schemas.api_environment import Environment
from apirunner.schemas.api_workflow import Workflow
from apirunner.schemas.base import to_text

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def read_json(path: str | Path) -> Any:
    """Read a JSON file, raising LoaderError when it is missing or malformed."""
    file_path = Path(path)
    if not file_path.is_file():
        raise LoaderError(f"File not found: {file_path}", path=str(file_path))
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON in {file_path}: {e}", path=str(file_path)) from e
    except OSError as e:
        raise LoaderError(f"Cannot read {file_path}: {e}", path=str(file_path)) from e


def validate_model(model: type[ModelT], data: Any, label: str) -> ModelT:
    """Validate ``data`` against ``model``, converting pydantic errors."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ValidationError(
            f"Invalid {label}: {first['msg']}" + (f" ({field})" if field else ""),
            field=field,
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def load_collection(path: str | Path) -> Collection:
    return validate_model(Collection, read_json(path), "collection")


def load_workflow(path: str | Path) -> Workflow:
    """
    Load a workflow file.

    Rejects files without a name or without at least one step, so nothing
    runs for a structurally incomplete workflow.
    """
    data = read_json(path)
    if not isinstance(data, dict) or not data.get("name") or not data.get("steps"):
        raise ValidationError("Invalid workflow file: name and a non-empty steps array are required")
    return validate_model(Workflow, data, "workflow")


def load_environments(path: str | Path) -> list[Environment]:
    """
    Load environments from a JSON file.

    Accepts a list of environments, or an object mapping environment names
    to their variables.
    """
    data = read_json(path)
    if isinstance(data, dict):
        data = [{"name": name, "variables": variables} for name, variables in data.items()]
    if not isinstance(data, list):
        raise ValidationError("Invalid environments file: expected a list or an object")
    return [validate_model(Environment, item, "environment") for item in data]


def load_variables(path: str | Path) -> dict[str, str]:
    """Load a flat variable map, e.g. the global variables file."""
    data = read_json(path)
    # Global files may wrap the map as {"variables": {...}}
    if isinstance(data, dict) and isinstance(data.get("variables"), dict):
        data = data["variables"]
    if not isinstance(data, dict):
        raise ValidationError("Invalid variables file: expected an object")
    return {str(key): to_text(value) for key, value in data.items()}


def create_workflow_template(name: str) -> dict:
    """Sample two-step workflow showing a capture feeding the next request."""
    return {
        "name": name,
        "description": "Workflow description",
        "environment": "",
        "steps": [
            {
                "name": "Step 1: Get data",
                "request": {
                    "method": "GET",
                    "url": "https://api.example.com/data",
                    "headers": {},
                    "params": {},
                    "tests": [],
                },
                "extractVariables": [
                    {"name": "extractedId", "path": "id", "scope": "workflow"},
                ],
                "continueOnError": False,
            },
            {
                "name": "Step 2: Use extracted data",
                "request": {
                    "method": "POST",
                    "url": "https://api.example.com/items",
                    "headers": {"Content-Type": "application/json"},
                    "params": {},
                    "body": {"id": "{{extractedId}}", "name": "Item from workflow"},
                    "tests": [],
                },
                "continueOnError": False,
            },
        ],
    }


def workflow_template_filename(name: str) -> str:
    return "-".join(name.split()).lower() + ".workflow.json"
