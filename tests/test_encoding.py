"""Tests for encoding module."""

import json

from tfconfig.encoding import module_to_dict, module_to_json
from tfconfig.module import (
    ModuleCall,
    Output,
    ProviderRef,
    ProviderRequirement,
    Resource,
    ResourceMode,
    SourcePos,
    Variable,
    new_module,
)


class TestModuleToDict:
    """Tests for module_to_dict."""

    def test_empty_module_keys(self):
        """Test empty collections are emitted except the omit-when-empty ones."""
        data = module_to_dict(new_module("./mod"))
        assert data == {
            "path": "./mod",
            "variables": {},
            "outputs": {},
            "required_providers": {},
            "managed_resources": {},
            "data_resources": {},
            "module_calls": {},
        }

    def test_omitted_fields_appear_when_set(self):
        """Test required_core, provider_aliases and diagnostics appear when non-empty."""
        module = new_module("./mod")
        module.required_core.append(">= 1.0")
        module.provider_aliases.add("aws", "east")
        module.diagnostics.warning("Something odd", "Details here")

        data = module_to_dict(module)
        assert data["required_core"] == [">= 1.0"]
        assert data["provider_aliases"] == {"aws": ["east"]}
        assert data["diagnostics"] == [
            {"severity": "warning", "summary": "Something odd", "detail": "Details here"}
        ]

    def test_variable(self):
        """Test variable serialization and its omission rules."""
        module = new_module("./mod")
        pos = SourcePos(filename="variables.tf", line=1)
        module.variables["name"] = Variable(name="name", type="string", pos=pos)
        module.variables["region"] = Variable(
            name="region", default="eu-west-1", required=False, sensitive=True, pos=pos
        )

        data = module_to_dict(module)["variables"]
        assert data["name"] == {
            "name": "name",
            "type": "string",
            "default": None,
            "required": True,
            "pos": {"filename": "variables.tf", "line": 1},
        }
        assert data["region"]["default"] == "eu-west-1"
        assert data["region"]["required"] is False
        assert data["region"]["sensitive"] is True
        assert "type" not in data["region"]

    def test_resources_and_calls(self):
        """Test resources, outputs, providers and module calls."""
        module = new_module("./mod")
        resource = Resource(
            mode=ResourceMode.MANAGED,
            type="aws_vpc",
            name="main",
            provider=ProviderRef(name="aws", alias="east"),
            pos=SourcePos(filename="main.tf", line=5),
        )
        module.managed_resources[resource.map_key] = resource
        module.outputs["vpc_id"] = Output(name="vpc_id")
        module.required_providers["aws"] = ProviderRequirement(
            source="hashicorp/aws", version_constraints=["~> 5.0"]
        )
        module.module_calls["net"] = ModuleCall(name="net", source="./net")

        data = module_to_dict(module)
        assert data["managed_resources"]["aws_vpc.main"] == {
            "mode": "managed",
            "type": "aws_vpc",
            "name": "main",
            "provider": {"name": "aws", "alias": "east"},
            "pos": {"filename": "main.tf", "line": 5},
        }
        assert data["outputs"]["vpc_id"] == {
            "name": "vpc_id",
            "pos": {"filename": "", "line": 0},
        }
        assert data["required_providers"]["aws"] == {
            "source": "hashicorp/aws",
            "version_constraints": ["~> 5.0"],
        }
        assert data["module_calls"]["net"]["source"] == "./net"
        assert "version" not in data["module_calls"]["net"]

    def test_empty_provider_requirement(self):
        """Test a requirement with nothing set serializes to an empty object."""
        module = new_module("./mod")
        module.required_providers["null"] = ProviderRequirement()
        assert module_to_dict(module)["required_providers"] == {"null": {}}


class TestModuleToJson:
    """Tests for module_to_json."""

    def test_valid_json(self):
        """Test output parses back to the dict form."""
        module = new_module("./mod")
        module.provider_aliases.add("aws", "east")
        assert json.loads(module_to_json(module)) == module_to_dict(module)
