"""
JSON Encoding

Converts a Module into JSON-compatible dictionaries using the stable external
keys. ``required_core``, ``provider_aliases`` and ``diagnostics`` are left out
when empty; every other collection is always emitted.
"""

import json
from typing import Any, Dict, Optional

from .diagnostics import Diagnostic
from .module import (
    Module,
    ModuleCall,
    Output,
    ProviderRef,
    ProviderRequirement,
    Resource,
    SourcePos,
    Variable,
)


def _pos_to_dict(pos: Optional[SourcePos]) -> Dict[str, Any]:
    if pos is None:
        return {"filename": "", "line": 0}
    return {"filename": pos.filename, "line": pos.line}


def _provider_ref_to_dict(ref: ProviderRef) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": ref.name}
    if ref.alias:
        data["alias"] = ref.alias
    return data


def variable_to_dict(variable: Variable) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": variable.name}
    if variable.type:
        data["type"] = variable.type
    if variable.description:
        data["description"] = variable.description
    data["default"] = variable.default
    data["required"] = variable.required
    if variable.sensitive:
        data["sensitive"] = True
    data["pos"] = _pos_to_dict(variable.pos)
    return data


def output_to_dict(output: Output) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": output.name}
    if output.description:
        data["description"] = output.description
    if output.sensitive:
        data["sensitive"] = True
    data["pos"] = _pos_to_dict(output.pos)
    return data


def provider_requirement_to_dict(requirement: ProviderRequirement) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if requirement.source:
        data["source"] = requirement.source
    if requirement.version_constraints:
        data["version_constraints"] = list(requirement.version_constraints)
    if requirement.configuration_aliases:
        data["configuration_aliases"] = [
            _provider_ref_to_dict(ref) for ref in requirement.configuration_aliases
        ]
    return data


def resource_to_dict(resource: Resource) -> Dict[str, Any]:
    return {
        "mode": resource.mode.value,
        "type": resource.type,
        "name": resource.name,
        "provider": _provider_ref_to_dict(resource.provider),
        "pos": _pos_to_dict(resource.pos),
    }


def module_call_to_dict(call: ModuleCall) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": call.name, "source": call.source}
    if call.version:
        data["version"] = call.version
    data["pos"] = _pos_to_dict(call.pos)
    return data


def diagnostic_to_dict(diag: Diagnostic) -> Dict[str, Any]:
    data: Dict[str, Any] = {"severity": diag.severity.value, "summary": diag.summary}
    if diag.detail:
        data["detail"] = diag.detail
    if diag.pos is not None:
        data["pos"] = _pos_to_dict(diag.pos)
    return data


def module_to_dict(module: Module) -> Dict[str, Any]:
    """Build the serialized form of a module."""
    data: Dict[str, Any] = {
        "path": module.path,
        "variables": {k: variable_to_dict(v) for k, v in module.variables.items()},
        "outputs": {k: output_to_dict(v) for k, v in module.outputs.items()},
    }
    if module.required_core:
        data["required_core"] = list(module.required_core)
    data["required_providers"] = {
        k: provider_requirement_to_dict(v) for k, v in module.required_providers.items()
    }
    if module.provider_aliases:
        data["provider_aliases"] = {k: list(v) for k, v in module.provider_aliases.items()}
    data["managed_resources"] = {
        k: resource_to_dict(v) for k, v in module.managed_resources.items()
    }
    data["data_resources"] = {k: resource_to_dict(v) for k, v in module.data_resources.items()}
    data["module_calls"] = {k: module_call_to_dict(v) for k, v in module.module_calls.items()}
    if module.diagnostics:
        data["diagnostics"] = [diagnostic_to_dict(d) for d in module.diagnostics]
    return data


def module_to_json(module: Module, indent: Optional[int] = 2) -> str:
    """Serialize a module to a JSON string."""
    return json.dumps(module_to_dict(module), indent=indent)
