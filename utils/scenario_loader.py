"""
Scenario Loader for the Multi-Resource Safety Checker.

Loads and validates JSON scenario files into an initial Configuration.
Also accepts a process/resource format (max_demand and initial_allocation
per process).
"""

import json
from typing import Any, Dict, List

from models.configuration import Configuration
from models.errors import ContractViolation
from models.owner import Owner
from models.resources import as_vector


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


def load_scenario(file_path: str) -> Configuration:
    """
    Load scenario from JSON file.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Initial Configuration

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")

    return parse_scenario(data)


def parse_scenario(data: Dict[str, Any]) -> Configuration:
    """
    Build a Configuration from already-decoded scenario data.

    Two shapes are accepted:
      - {"free": [...], "owners": [{"id", "owned", "required"}, ...]}
      - {"resources": [...], "processes": [...]} (process/resource format)

    Raises:
        ScenarioLoadError: If required fields are missing or values are invalid
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")

    if 'owners' in data:
        if 'free' not in data:
            raise ScenarioLoadError("Scenario missing 'free' field")
        owners = _load_owners(data['owners'])
        free = data['free']
    elif 'processes' in data:
        if 'resources' not in data:
            raise ScenarioLoadError("Scenario missing 'resources' field")
        owners, free = _load_processes(data['processes'], data['resources'])
    else:
        raise ScenarioLoadError("Scenario missing 'owners' field")

    try:
        return Configuration(owners, free)
    except ContractViolation as e:
        raise ScenarioLoadError(f"Invalid scenario: {e}")


def _load_owners(owner_data: List[Dict]) -> List[Owner]:
    """
    Load owners from the direct format.

    Args:
        owner_data: List of owner dictionaries

    Returns:
        List of Owner objects
    """
    if not isinstance(owner_data, list):
        raise ScenarioLoadError("'owners' must be a list")

    owners = []
    seen_ids = set()

    for index, entry in enumerate(owner_data):
        if not isinstance(entry, dict):
            raise ScenarioLoadError(f"Owner {index} must be an object")
        for field in ['owned', 'required']:
            if field not in entry:
                raise ScenarioLoadError(f"Owner {index} missing required field: {field}")

        owner_id = entry.get('id', index)
        if not isinstance(owner_id, (int, str)) or isinstance(owner_id, bool):
            raise ScenarioLoadError(f"Owner {index}: 'id' must be an integer or string")
        if owner_id in seen_ids:
            raise ScenarioLoadError(f"Duplicate owner id: {owner_id}")
        seen_ids.add(owner_id)

        try:
            owners.append(Owner(owned=entry['owned'], required=entry['required'],
                                owner_id=owner_id))
        except ContractViolation as e:
            raise ScenarioLoadError(f"Owner {owner_id}: {e}")

    return owners


def _vector_field(values: Any, label: str) -> List[int]:
    """Validate a list-of-counts field, reporting problems as ScenarioLoadError."""
    try:
        return as_vector(values, label)
    except ContractViolation as e:
        raise ScenarioLoadError(str(e))


def _load_processes(process_data: List[Dict], resource_data: List[Dict]):
    """
    Convert process/resource-format processes and resources to owners and a free pool.

    required = max_demand - initial_allocation
    free = total_instances - sum(initial_allocation)

    Returns:
        Tuple of (owners, free vector)
    """
    if not isinstance(resource_data, list):
        raise ScenarioLoadError("'resources' must be a list")
    if not isinstance(process_data, list):
        raise ScenarioLoadError("'processes' must be a list")

    resources = []
    for index, res in enumerate(resource_data):
        if not isinstance(res, dict):
            raise ScenarioLoadError(f"Resource {index} must be an object")
        if 'type_id' not in res:
            raise ScenarioLoadError("Resource missing 'type_id' field")
        if 'total_instances' not in res:
            raise ScenarioLoadError(f"Resource {res['type_id']} missing 'total_instances'")
        if not isinstance(res['type_id'], int) or isinstance(res['type_id'], bool):
            raise ScenarioLoadError(f"Resource {index}: 'type_id' must be an integer")
        _vector_field([res['total_instances']], f"resource {res['type_id']} total_instances")
        resources.append(res)
    resources.sort(key=lambda r: r['type_id'])
    num_resources = len(resources)

    owners = []
    total_allocated = [0] * num_resources

    for index, proc in enumerate(process_data):
        if not isinstance(proc, dict):
            raise ScenarioLoadError(f"Process {index} must be an object")
        for field in ['pid', 'max_demand']:
            if field not in proc:
                raise ScenarioLoadError(f"Process missing required field: {field}")

        pid = proc['pid']
        max_demand = _vector_field(proc['max_demand'], f"process {pid} max_demand")
        allocation = _vector_field(proc.get('initial_allocation', [0] * num_resources),
                                   f"process {pid} initial_allocation")

        if len(max_demand) != num_resources:
            raise ScenarioLoadError(
                f"Process {pid}: max_demand length ({len(max_demand)}) "
                f"does not match resource count ({num_resources})"
            )
        if len(allocation) != num_resources:
            raise ScenarioLoadError(f"Process {pid}: initial_allocation length mismatch")

        for i, (alloc, max_d) in enumerate(zip(allocation, max_demand)):
            if alloc > max_d:
                raise ScenarioLoadError(
                    f"Process {pid}: initial_allocation[{i}] ({alloc}) "
                    f"exceeds max_demand[{i}] ({max_d})"
                )
            total_allocated[i] += alloc

        required = [max_d - alloc for alloc, max_d in zip(allocation, max_demand)]
        try:
            owners.append(Owner(owned=allocation, required=required, owner_id=pid))
        except ContractViolation as e:
            raise ScenarioLoadError(f"Process {pid}: {e}")

    free = []
    for i, res in enumerate(resources):
        if total_allocated[i] > res['total_instances']:
            raise ScenarioLoadError(
                f"VALIDATION FAILED: Resource R{i} initial allocations ({total_allocated[i]}) "
                f"exceed total instances ({res['total_instances']})"
            )
        free.append(res['total_instances'] - total_allocated[i])

    return owners, free


def get_scenario_description(file_path: str) -> str:
    """
    Get description from scenario file without full loading.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Description string, or empty string if not present
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return ''
    if not isinstance(data, dict):
        return ''
    return data.get('description', '')
