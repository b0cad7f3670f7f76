"""
Project resources: datasets, stored null distributions and JSON results.

Every resource lives next to its project manifest as
{filename}_{8 hex chars}{ext} and is tracked by one manifest entry holding
its type, a one-line explanation, the tool call that produced it and
type-specific metadata (row counts for datasets; statistic, reps and seed
for null distributions, enough to regenerate them).

Underscore-prefixed helpers are used by the tools; the manifest functions
are exposed directly to MCP clients.
"""

import json
import secrets
import inspect
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from infer_mcp.infrastructure.supported_resource_types import TYPE_REGISTRY
from infer_mcp.config import DATA_ROOT


def get_supported_resource_types() -> list[str]:
    """Return the resource types that can be stored in a project."""
    return list(TYPE_REGISTRY)


def _get_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")


def _check_if_manifest_exists(project_manifest_path: str) -> bool:
    """Internal: Check manifest exists, raise helpful error if not."""
    if Path(project_manifest_path).exists():
        return True
    raise FileNotFoundError(
        f"Project manifest not found at {project_manifest_path}. Please supply the correct path "
        f"or create a new project manifest using the create_project_manifest function. "
        f"The default data directory is located at {DATA_ROOT}"
    )


def _read_manifest(project_manifest_path: str) -> dict:
    _check_if_manifest_exists(project_manifest_path)
    with open(project_manifest_path, "r") as f:
        return json.load(f)


def _write_manifest(project_manifest_path: str, manifest: dict) -> None:
    with open(project_manifest_path, "w") as f:
        json.dump(manifest, f, indent=4)


def _summarize_arg(value: Any) -> Any:
    """JSON-friendly stand-in for a tool argument."""
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    if isinstance(value, (list, tuple)):
        return f"<{type(value).__name__} of length {len(value)}>"
    if isinstance(value, dict):
        return f"<dict with {len(value)} keys>"
    text = repr(value)
    return text if len(text) < 100 else f"<{type(value).__name__}>"


def _caller_info() -> dict:
    """Name, module and inputs of the first caller outside this module (the tool)."""
    info = {'function_name': 'unknown', 'function_inputs': {}, 'module': 'unknown'}
    try:
        caller = next(
            (frame_info for frame_info in inspect.stack()[1:] if frame_info.filename != __file__),
            None,
        )
        if caller is None:
            return info

        arginfo = inspect.getargvalues(caller.frame)
        module = inspect.getmodule(caller.frame)
        info['function_name'] = caller.function
        info['function_inputs'] = {name: _summarize_arg(arginfo.locals.get(name)) for name in arginfo.args}
        info['module'] = module.__name__ if module else None
    except Exception as e:
        # provenance is best effort; storing the resource must still succeed
        info['error'] = str(e)
    return info


def _generate_id(type_tag: str) -> str:
    """Unique suffix: _{8 uppercase hex chars}{extension}."""
    return f"_{secrets.token_hex(4).upper()}{TYPE_REGISTRY[type_tag]['ext']}"


def _store_resource(obj: Any, project_manifest_path: str, filename: str, explanation: str, type_tag: str) -> str:
    """Internal: Save an object next to the manifest and track it.

    Args:
        obj: DataFrame (csv), NullDistribution (null_distribution) or dict (json)
        project_manifest_path: Full path to the project manifest
        filename: Base filename without extension (e.g. "flights")
        explanation: One-line description of the resource
        type_tag: Key of TYPE_REGISTRY

    Returns:
        The stored filename, e.g. "flights_A3F2B1D4.csv"

    Raises:
        ValueError: Unsupported type_tag
        FileNotFoundError: No manifest at project_manifest_path
    """
    if type_tag not in TYPE_REGISTRY:
        raise ValueError(f"Unsupported resource type: {type_tag}")
    _check_if_manifest_exists(project_manifest_path)

    handler = TYPE_REGISTRY[type_tag]
    output_filename = f"{filename}{_generate_id(type_tag)}"
    handler['save'](obj, Path(project_manifest_path).parent / output_filename)

    caller = _caller_info()
    add_to_project_manifest(
        project_manifest_path=project_manifest_path,
        filename=output_filename,
        type_tag=type_tag,
        explanation=explanation,
        timestamp=_get_timestamp(),
        parent_function_name=caller['function_name'],
        parent_function_inputs=caller['function_inputs'],
        module_name=caller['module'],
        metadata=handler['describe'](obj),
    )
    return output_filename


def _load_resource(project_manifest_path: str, filename: str) -> Any:
    """Internal: Load a tracked resource; its type comes from the manifest entry.

    Raises:
        ValueError: Resource not tracked, or tracked with an unknown type
        FileNotFoundError: Manifest or resource file missing
    """
    resources = _read_manifest(project_manifest_path).get("resources", [])
    entry = next((res for res in resources if res["filename"] == filename), None)
    if entry is None:
        raise ValueError(
            f"Resource '{filename}' not found in manifest at {project_manifest_path}. "
            f"Available resources: {[res['filename'] for res in resources]}."
        )

    type_tag = entry["type_tag"]
    if type_tag not in TYPE_REGISTRY:
        raise ValueError(f"Unknown resource type '{type_tag}' in manifest for resource '{filename}'")

    path = Path(project_manifest_path).parent / filename
    if not path.exists():
        raise FileNotFoundError(f"Resource file '{filename}' not found at expected location: {path}")
    return TYPE_REGISTRY[type_tag]['load'](path)


def create_project_manifest(path: str, project_name: str) -> dict:
    """Create a new project manifest to track datasets and results in a directory.

    Writes <path>/<project_name>_manifest.json. Every dataset, derived dataset
    and stored null distribution of the analysis is tracked in it.

    **IMPORTANT**: Create a manifest BEFORE storing any dataset. Ask the user
    for a project directory and name (check_default_data_dir gives a default).

    Args:
        path: Directory for the manifest and its resources (created if needed)
        project_name: Project name, used in the manifest filename

    Returns:
        dict with project_name, created_at and an empty resources list

    Raises:
        FileExistsError: A manifest with this name already exists in path

    Example:
        create_project_manifest("/path/to/project", "flight_delays")
    """
    project_manifest_path = Path(path) / f"{project_name}_manifest.json"
    if project_manifest_path.exists():
        raise FileExistsError(f"Project manifest already exists at {project_manifest_path}")

    Path(path).mkdir(parents=True, exist_ok=True)
    manifest = {
        "project_name": project_name,
        "created_at": _get_timestamp(),
        "resources": [],
    }
    _write_manifest(project_manifest_path, manifest)
    return manifest


def read_project_manifest(project_manifest_path: str) -> dict:
    """Read the project manifest: project name, creation time and every tracked resource.

    Each resource entry holds filename, type_tag, explanation, timestamp, the
    producing tool (parent_function_name / parent_function_inputs) and
    metadata such as the seed of a stored null distribution.
    """
    return _read_manifest(project_manifest_path)


def add_to_project_manifest(
    project_manifest_path: str,
    filename: str,
    type_tag: str,
    explanation: Optional[str] = 'unknown',
    timestamp: Optional[str] = None,
    parent_function_name: Optional[str] = 'unknown',
    parent_function_inputs: dict | str | None = 'unknown',
    module_name: Optional[str] = 'unknown',
    metadata: Optional[dict] = None,
) -> None:
    """Track an existing file in the project manifest.

    **REQUIRED**: a one-sentence explanation, e.g. "Flights with departure
    delay and origin airport" or "Permutation null of diff in props, 1000 reps".

    Args:
        project_manifest_path: Full path to the project manifest
        filename: Name of the file (in the manifest's directory)
        type_tag: Resource type (see get_supported_resource_types)
        explanation: One-sentence description
        timestamp: Defaults to now
        parent_function_name, parent_function_inputs, module_name: Provenance,
            filled in automatically when a tool stores the resource
        metadata: Type-specific details (row counts, reps, seed)
    """
    manifest = _read_manifest(project_manifest_path)
    manifest["resources"].append({
        "filename": filename,
        "type_tag": type_tag,
        "explanation": explanation,
        "timestamp": timestamp or _get_timestamp(),
        "parent_function_name": parent_function_name,
        "parent_function_inputs": parent_function_inputs,
        "module_name": module_name,
        "metadata": metadata or {},
    })
    _write_manifest(project_manifest_path, manifest)


def remove_from_project_manifest(project_manifest_path: str, resource_name: str, delete_file: bool = False) -> dict | None:
    """Stop tracking a resource, optionally deleting its file.

    Returns:
        The removed entry, or None when the resource was not tracked
    """
    manifest = _read_manifest(project_manifest_path)
    kept = [res for res in manifest.get("resources", []) if res["filename"] != resource_name]
    removed = next((res for res in manifest.get("resources", []) if res["filename"] == resource_name), None)

    if removed is not None and delete_file:
        Path(project_manifest_path).parent.joinpath(resource_name).unlink(missing_ok=True)

    manifest["resources"] = kept
    _write_manifest(project_manifest_path, manifest)
    return removed


def list_untracked_resources_in_project(project_manifest_path: str) -> list[str]:
    """List files in the project directory that the manifest does not track (manifest excluded)."""
    manifest = _read_manifest(project_manifest_path)
    project_dir = Path(project_manifest_path).parent
    on_disk = {f.name for f in project_dir.iterdir() if f.is_file()}
    on_disk.discard(Path(project_manifest_path).name)
    tracked = {res["filename"] for res in manifest.get("resources", [])}
    return sorted(on_disk - tracked)


def check_default_data_dir() -> str:
    """Default directory for project manifests, resources and history.log.

    ~/.infer_mcp unless INFER_MCP_DATA_DIR is set.
    """
    return str(DATA_ROOT)


def get_all_resources_tools() -> list[Callable]:
    """Resource and manifest tools for MCP server registration."""
    return [
        create_project_manifest,
        read_project_manifest,
        add_to_project_manifest,
        remove_from_project_manifest,
        list_untracked_resources_in_project,
        get_supported_resource_types,
        check_default_data_dir,
    ]
