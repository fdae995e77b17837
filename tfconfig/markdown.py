"""
Markdown Summary

Renders a human-readable Markdown overview of a loaded module.
"""

import json
from typing import List

from .module import Module, Resource


def _code(text: str) -> str:
    return f"`{text}`"


def _resource_line(resource: Resource) -> str:
    line = f"* {_code(resource.map_key)} from {_code(resource.provider.name)}"
    if resource.provider.alias:
        line += f" (alias {_code(resource.provider.alias)})"
    return line


def render_markdown(module: Module) -> str:
    """Render the module as Markdown. Sections without content are skipped."""
    lines: List[str] = [f"# Module {_code(module.path)}", ""]

    if module.required_core:
        lines.append("Core Version Constraints:")
        lines.extend(f"* {_code(c)}" for c in module.required_core)
        lines.append("")

    if module.required_providers:
        lines.append("Provider Requirements:")
        for name in sorted(module.required_providers):
            requirement = module.required_providers[name]
            label = f"**{name}"
            if requirement.source:
                label += f" ({_code(requirement.source)})"
            label += ":**"
            constraints = ", ".join(_code(c) for c in requirement.version_constraints)
            lines.append(f"* {label} {constraints or '(any version)'}")
            aliases = module.provider_aliases.get(name)
            if aliases:
                lines.append(f"  * aliases: {', '.join(_code(a) for a in aliases)}")
        lines.append("")

    if module.variables:
        lines.extend(["## Input Variables", ""])
        ordered = sorted(module.variables.values(), key=lambda v: (not v.required, v.name))
        for variable in ordered:
            if variable.required:
                line = f"* {_code(variable.name)} (required)"
            else:
                line = f"* {_code(variable.name)} (default {_code(json.dumps(variable.default))})"
            if variable.description:
                line += f": {variable.description}"
            lines.append(line)
        lines.append("")

    if module.outputs:
        lines.extend(["## Output Values", ""])
        for name in sorted(module.outputs):
            output = module.outputs[name]
            line = f"* {_code(name)}"
            if output.description:
                line += f": {output.description}"
            lines.append(line)
        lines.append("")

    if module.managed_resources:
        lines.extend(["## Managed Resources", ""])
        lines.extend(_resource_line(module.managed_resources[k]) for k in sorted(module.managed_resources))
        lines.append("")

    if module.data_resources:
        lines.extend(["## Data Resources", ""])
        lines.extend(_resource_line(module.data_resources[k]) for k in sorted(module.data_resources))
        lines.append("")

    if module.module_calls:
        lines.extend(["## Child Modules", ""])
        for name in sorted(module.module_calls):
            call = module.module_calls[name]
            line = f"* {_code(name)} from {_code(call.source)}"
            if call.version:
                line += f" ({_code(call.version)})"
            lines.append(line)
        lines.append("")

    if module.diagnostics:
        lines.extend(["## Problems", ""])
        for diag in module.diagnostics:
            lines.append(f"## {diag.severity.value.capitalize()}: {diag.summary}")
            lines.append("")
            if diag.pos is not None:
                lines.append(f"(at {_code(diag.pos.filename)} line {diag.pos.line})")
                lines.append("")
            if diag.detail:
                lines.append(diag.detail)
                lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"
