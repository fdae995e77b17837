"""
Terraform Module Loader

Reads the configuration files of a single module directory and populates a
Module with the variables, outputs, providers, resources and module calls it
declares. Problems are recorded as diagnostics on the module.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import hcl2
from lark.exceptions import LarkError

from .module import (
    Module,
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

logger = logging.getLogger(__name__)

_INTERPOLATION_RE = re.compile(r"^\$\{(.*)\}$", re.DOTALL)


@dataclass
class LoaderConfig:
    """Options controlling which files are read."""

    include_overrides: bool = True
    suffixes: Tuple[str, ...] = (".tf",)


def is_module_dir(directory: Union[str, Path], config: Optional[LoaderConfig] = None) -> bool:
    """Return True if the directory contains at least one primary configuration file."""
    config = config or LoaderConfig()
    try:
        primary, _ = _module_files(Path(directory), config)
    except OSError:
        return False
    return bool(primary)


def load_module(directory: Union[str, Path], config: Optional[LoaderConfig] = None) -> Module:
    """Load the module in ``directory``.

    Never raises for problems in the configuration itself; check
    ``module.diagnostics`` to judge whether the result is usable.
    """
    config = config or LoaderConfig()
    module = new_module(str(directory))

    try:
        primary, overrides = _module_files(Path(directory), config)
    except OSError as e:
        logger.warning("Could not read module directory %s: %s", directory, e)
        module.diagnostics.error(
            "Failed to read module directory",
            f"Module directory {directory} does not exist or cannot be read.",
        )
        return module

    if not primary:
        logger.warning("No configuration files found in %s", directory)

    for tf_file in primary:
        _ModuleFileLoader(module, tf_file).load()
    if config.include_overrides:
        for tf_file in overrides:
            _ModuleFileLoader(module, tf_file, override=True).load()

    logger.info(
        "Loaded %s: %d variables, %d outputs, %d resources, %d module calls, %d diagnostics",
        directory,
        len(module.variables),
        len(module.outputs),
        len(module.managed_resources) + len(module.data_resources),
        len(module.module_calls),
        len(module.diagnostics),
    )
    return module


def _module_files(directory: Path, config: LoaderConfig) -> Tuple[List[Path], List[Path]]:
    """Split the directory's configuration files into primary and override files."""
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    primary: List[Path] = []
    overrides: List[Path] = []
    for entry in sorted(directory.iterdir()):
        if not entry.is_file() or _is_ignored_file(entry.name):
            continue
        suffix = next((s for s in config.suffixes if entry.name.endswith(s)), None)
        if suffix is None:
            continue
        stem = entry.name[: -len(suffix)]
        if stem == "override" or stem.endswith("_override"):
            overrides.append(entry)
        else:
            primary.append(entry)
    return primary, overrides


def _is_ignored_file(name: str) -> bool:
    # Editor swap/backup files and hidden files
    return name.startswith(".") or name.startswith("#") or name.endswith("~")


def unwrap_expression(value: Any) -> Any:
    """Strip the ``${...}`` wrapper hcl2 puts around non-literal expressions."""
    if isinstance(value, str):
        match = _INTERPOLATION_RE.match(value.strip())
        if match:
            return match.group(1).strip()
    return value


def parse_provider_ref(value: Any) -> Optional[ProviderRef]:
    """Parse a provider reference such as ``aws`` or ``aws.east``."""
    expr = unwrap_expression(value)
    if not isinstance(expr, str) or not expr:
        return None
    name, _, alias = expr.partition(".")
    return ProviderRef(name=name, alias=alias)


def implied_provider(resource_type: str) -> str:
    """Provider name implied by a resource type, e.g. ``aws`` for ``aws_instance``."""
    return resource_type.split("_", 1)[0]


def _body(config: Any) -> Dict[str, Any]:
    """Normalize a block body; hcl2 sometimes wraps it in a list."""
    if isinstance(config, list):
        config = config[0] if config else {}
    if not isinstance(config, dict):
        return {}
    return config


def _items(block: Dict[str, Any]) -> Iterator[Tuple[str, Any]]:
    """Iterate a block's entries, skipping hcl2 line metadata."""
    for key, value in block.items():
        if key.startswith("__"):
            continue
        yield key, value


class _ModuleFileLoader:
    """Adds the declarations of one file to a Module."""

    def __init__(self, module: Module, file_path: Path, override: bool = False):
        self.module = module
        self.file_path = file_path
        # Override files replace earlier declarations instead of duplicating them
        self.override = override

    def load(self) -> None:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                content = hcl2.load(f, with_meta=True)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", self.file_path, e)
            self.module.diagnostics.error(
                "Failed to read file",
                f"The configuration file {self.file_path} could not be read: {e}",
                SourcePos(filename=str(self.file_path), line=0),
            )
            return
        except LarkError as e:
            # Syntax errors and transformer failures such as repeated attributes
            logger.warning("Could not parse HCL in %s: %s", self.file_path, e)
            self.module.diagnostics.error(
                "Invalid configuration syntax",
                str(e),
                SourcePos(filename=str(self.file_path), line=getattr(e, "line", 0) or 0),
            )
            return

        for block in content.get("terraform", []):
            self._load_terraform_block(_body(block))
        for block in content.get("provider", []):
            for name, config in _items(block):
                self._load_provider(name, _body(config))
        for block in content.get("variable", []):
            for name, config in _items(block):
                self._load_variable(name, _body(config))
        for block in content.get("output", []):
            for name, config in _items(block):
                self._load_output(name, _body(config))
        for block in content.get("resource", []):
            self._load_resources(block, ResourceMode.MANAGED)
        for block in content.get("data", []):
            self._load_resources(block, ResourceMode.DATA)
        for block in content.get("module", []):
            for name, config in _items(block):
                self._load_module_call(name, _body(config))

    def _pos(self, config: Dict[str, Any]) -> SourcePos:
        return SourcePos(filename=str(self.file_path), line=config.get("__start_line__", 0))

    def _requirement(self, name: str) -> ProviderRequirement:
        requirement = self.module.required_providers.get(name)
        if requirement is None:
            requirement = ProviderRequirement()
            self.module.required_providers[name] = requirement
        return requirement

    def _check_duplicate(self, kind: str, collection: Dict[str, Any], name: str, pos: SourcePos) -> None:
        if self.override:
            return
        if name in collection:
            previous = collection[name].pos
            where = f" at {previous.filename}:{previous.line}" if previous else ""
            self.module.diagnostics.error(
                f"Duplicate {kind} declaration",
                f'A {kind} named "{name}" was already declared{where}.',
                pos,
            )

    def _load_terraform_block(self, config: Dict[str, Any]) -> None:
        required_version = config.get("required_version")
        if isinstance(required_version, str) and required_version:
            self.module.required_core.append(required_version)

        providers_blocks = config.get("required_providers", [])
        if isinstance(providers_blocks, dict):
            providers_blocks = [providers_blocks]
        for providers_block in providers_blocks:
            for name, spec in _items(_body(providers_block)):
                self._load_required_provider(name, spec)

    def _load_required_provider(self, name: str, spec: Any) -> None:
        requirement = self._requirement(name)

        # Legacy form: aws = "~> 3.0"
        if isinstance(spec, str):
            requirement.version_constraints.append(spec)
            return

        spec = _body(spec)
        source = spec.get("source")
        if isinstance(source, str) and source:
            requirement.source = source
        version = spec.get("version")
        if isinstance(version, str) and version:
            requirement.version_constraints.append(version)

        aliases = spec.get("configuration_aliases") or []
        if not isinstance(aliases, list):
            aliases = [aliases]
        for value in aliases:
            ref = parse_provider_ref(value)
            if ref is None or not ref.alias:
                self.module.diagnostics.warning(
                    "Invalid configuration alias",
                    f'Provider "{name}" lists configuration alias {value!r}, which is not of the form name.alias.',
                    self._pos(spec),
                )
                continue
            if ref not in requirement.configuration_aliases:
                requirement.configuration_aliases.append(ref)
            self.module.provider_aliases.add(ref.name, ref.alias)

    def _static_string(self, value: Any, summary: str, what: str, pos: SourcePos) -> str:
        """Return a literal string argument, or "" after recording an error for an expression."""
        if not isinstance(value, str):
            return ""
        if _INTERPOLATION_RE.match(value.strip()):
            self.module.diagnostics.error(
                summary,
                f"The {what} must be a literal string, not the expression {unwrap_expression(value)}.",
                pos,
            )
            return ""
        return value

    def _load_provider(self, name: str, config: Dict[str, Any]) -> None:
        requirement = self._requirement(name)
        pos = self._pos(config)

        alias = self._static_string(
            config.get("alias"), "Invalid provider alias", f'alias of provider "{name}"', pos
        )
        if alias:
            self.module.provider_aliases.add(name, alias)

        # Legacy version argument inside the provider block
        version = self._static_string(
            config.get("version"),
            "Invalid provider version constraint",
            f'version of provider "{name}"',
            pos,
        )
        if version:
            requirement.version_constraints.append(version)

    def _load_variable(self, name: str, config: Dict[str, Any]) -> None:
        pos = self._pos(config)
        self._check_duplicate("variable", self.module.variables, name, pos)

        var_type = unwrap_expression(config.get("type", ""))
        description = config.get("description", "")
        self.module.variables[name] = Variable(
            name=name,
            type=var_type if isinstance(var_type, str) else str(var_type),
            description=description if isinstance(description, str) else "",
            default=config.get("default"),
            required="default" not in config,
            sensitive=config.get("sensitive") is True,
            pos=pos,
        )

    def _load_output(self, name: str, config: Dict[str, Any]) -> None:
        pos = self._pos(config)
        self._check_duplicate("output", self.module.outputs, name, pos)

        description = config.get("description", "")
        self.module.outputs[name] = Output(
            name=name,
            description=description if isinstance(description, str) else "",
            sensitive=config.get("sensitive") is True,
            pos=pos,
        )

    def _load_resources(self, block: Dict[str, Any], mode: ResourceMode) -> None:
        target = (
            self.module.managed_resources
            if mode == ResourceMode.MANAGED
            else self.module.data_resources
        )
        for resource_type, resources in _items(block):
            for resource_name, config in _items(_body(resources)):
                config = _body(config)
                pos = self._pos(config)

                provider = parse_provider_ref(config.get("provider"))
                if provider is None:
                    provider = ProviderRef(name=implied_provider(resource_type))

                resource = Resource(
                    mode=mode,
                    type=resource_type,
                    name=resource_name,
                    provider=provider,
                    pos=pos,
                )
                self._check_duplicate("resource", target, resource.map_key, pos)
                target[resource.map_key] = resource
                self._requirement(provider.name)

    def _load_module_call(self, name: str, config: Dict[str, Any]) -> None:
        pos = self._pos(config)
        self._check_duplicate("module call", self.module.module_calls, name, pos)

        raw_source = config.get("source", "")
        source = self._static_string(
            raw_source, "Invalid module source", f'source of module call "{name}"', pos
        )
        version = self._static_string(
            config.get("version", ""), "Invalid module version", f'version of module call "{name}"', pos
        )
        if not raw_source:
            self.module.diagnostics.error(
                "Missing module source",
                f'Module call "{name}" has no source argument.',
                pos,
            )
        self.module.module_calls[name] = ModuleCall(
            name=name,
            source=source,
            version=version,
            pos=pos,
        )
