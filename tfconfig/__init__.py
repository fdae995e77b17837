"""tfconfig - In-memory model of a Terraform module's declarations."""

__version__ = "1.0.0"

from .diagnostics import DiagSeverity, Diagnostic, Diagnostics, DiagnosticsError
from .encoding import module_to_dict, module_to_json
from .loader import LoaderConfig, is_module_dir, load_module
from .markdown import render_markdown
from .module import (
    Module,
    ModuleCall,
    Output,
    ProviderAliases,
    ProviderRef,
    ProviderRequirement,
    Resource,
    ResourceMode,
    SourcePos,
    Variable,
    new_module,
)

__all__ = [
    "__version__",
    "DiagSeverity",
    "Diagnostic",
    "Diagnostics",
    "DiagnosticsError",
    "LoaderConfig",
    "Module",
    "ModuleCall",
    "Output",
    "ProviderAliases",
    "ProviderRef",
    "ProviderRequirement",
    "Resource",
    "ResourceMode",
    "SourcePos",
    "Variable",
    "is_module_dir",
    "load_module",
    "module_to_dict",
    "module_to_json",
    "new_module",
    "render_markdown",
]
