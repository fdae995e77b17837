"""
Module Model

In-memory representation of a single Terraform module: its variables,
outputs, provider requirements, resources, module calls and the diagnostics
produced while loading it.

A Module is built by one loader in a single pass and then handed to
consumers as a read-only snapshot. None of the types here synchronize
access; concurrent mutation needs external locking.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .diagnostics import Diagnostics


@dataclass
class SourcePos:
    """Location of a declaration in a configuration file."""

    filename: str
    line: int


@dataclass
class Variable:
    """Represents a declared input variable."""

    name: str
    type: str = ""
    description: str = ""
    default: Any = None
    required: bool = True
    sensitive: bool = False
    pos: Optional[SourcePos] = None


@dataclass
class Output:
    """Represents a declared output value."""

    name: str
    description: str = ""
    sensitive: bool = False
    pos: Optional[SourcePos] = None


@dataclass
class ProviderRequirement:
    """Requirements the module places on one provider."""

    source: str = ""
    version_constraints: List[str] = field(default_factory=list)
    configuration_aliases: List["ProviderRef"] = field(default_factory=list)


@dataclass
class ProviderRef:
    """Reference to a provider configuration, e.g. ``aws.east``."""

    name: str
    alias: str = ""

    def __str__(self) -> str:
        if self.alias:
            return f"{self.name}.{self.alias}"
        return self.name


class ResourceMode(str, Enum):
    MANAGED = "managed"
    DATA = "data"


@dataclass
class Resource:
    """Represents a managed or data resource."""

    mode: ResourceMode
    type: str
    name: str
    provider: ProviderRef
    pos: Optional[SourcePos] = None

    @property
    def map_key(self) -> str:
        """Address the resource is keyed by in its module."""
        if self.mode == ResourceMode.DATA:
            return f"data.{self.type}.{self.name}"
        return f"{self.type}.{self.name}"


@dataclass
class ModuleCall:
    """Represents a module instantiation."""

    name: str
    source: str
    version: str = ""
    pos: Optional[SourcePos] = None


class ProviderAliases(Dict[str, List[str]]):
    """Mapping from provider name to its alias names.

    Providers without aliases have no entry at all.
    """

    def add(self, name: str, alias: str) -> None:
        """Record ``alias`` for provider ``name``.

        Repeated calls with the same pair are no-ops and the first-seen
        order of aliases is kept.
        """
        if name not in self:
            self[name] = [alias]
            return

        for existing in self[name]:
            if existing == alias:
                return
        self[name].append(alias)


@dataclass
class Module:
    """Top-level type representing a parsed Terraform module.

    Every collection field is always present, possibly empty, so callers
    can iterate without checking for None.
    """

    # Directory (or other origin) the module was loaded from
    path: str
    variables: Dict[str, Variable] = field(default_factory=dict)
    outputs: Dict[str, Output] = field(default_factory=dict)
    required_core: List[str] = field(default_factory=list)
    required_providers: Dict[str, ProviderRequirement] = field(default_factory=dict)
    provider_aliases: ProviderAliases = field(default_factory=ProviderAliases)
    managed_resources: Dict[str, Resource] = field(default_factory=dict)
    data_resources: Dict[str, Resource] = field(default_factory=dict)
    module_calls: Dict[str, ModuleCall] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "path" and "path" in self.__dict__:
            raise AttributeError("Module.path cannot be reassigned")
        super().__setattr__(name, value)


def new_module(path: str) -> Module:
    """Create an empty Module for the given path."""
    return Module(path=path)
