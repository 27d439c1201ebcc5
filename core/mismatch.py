"""Three-way comparison of project, tool and template manifests."""

import json

from .models import DEPENDENCIES, DEPENDENCY_TYPES, DEV_DEPENDENCIES, MISSING, Manifest, MismatchRecord
from .versions import is_valid_version

Mismatches = dict[str, MismatchRecord]


def _template_pass(project: Manifest, template: Manifest, dep_type: str) -> Mismatches:
    """Mark every template package the project is missing or has too old."""
    declared = project.section(dep_type)
    updates: Mismatches = {}
    for name, required in template.section(dep_type).items():
        if not is_valid_version(declared.get(name), required):
            updates[name] = MismatchRecord(
                required=required,
                project=declared.get(name) or MISSING,
                type=dep_type,
            )
    return updates


def _tool_pass(project: Manifest, tool: Manifest) -> Mismatches:
    """Mark shared runtime packages whose declared string differs from the tool's pin."""
    declared = project.dependencies
    updates: Mismatches = {}
    for name, required in tool.dependencies.items():
        current = declared.get(name)
        if current and current != required:
            updates[name] = MismatchRecord(required=required, project=current, type=DEPENDENCIES)
    return updates


def detect_mismatches(project: Manifest, tool: Manifest, template: Manifest) -> Mismatches:
    """Compare the project manifest against the template and tool manifests.

    Passes run in a fixed order and later passes replace earlier records for
    the same package: template ``dependencies``, template ``devDependencies``,
    then the tool's ``dependencies``. The tool pass only looks at packages the
    project already declares and uses exact string comparison, so a version
    pinned by the tool always wins.

    Args:
        project: The manifest of the project being worked on
        tool: The manifest of the scaffolding tool
        template: The manifest bundled with new projects

    Returns:
        Mapping of package name to MismatchRecord; empty when aligned
    """
    passes = [
        _template_pass(project, template, DEPENDENCIES),
        _template_pass(project, template, DEV_DEPENDENCIES),
        _tool_pass(project, tool),
    ]

    mismatches: Mismatches = {}
    for updates in passes:
        mismatches = {**mismatches, **updates}
    return mismatches


def apply_mismatches(manifest: Manifest, mismatches: Mismatches) -> Manifest:
    """Return a copy of ``manifest`` with every mismatch set to its required version.

    Both dependency sections are re-sorted by package name, including
    sections with no changes.
    """
    data = dict(manifest.data)
    sections = {dep_type: dict(manifest.section(dep_type)) for dep_type in DEPENDENCY_TYPES}

    for name, record in mismatches.items():
        sections[record.type][name] = record.required

    for dep_type, section in sections.items():
        data[dep_type] = dict(sorted(section.items()))

    return Manifest(data=data, path=manifest.path)


def format_mismatches(mismatches: Mismatches) -> str:
    """Render mismatches as indented JSON for display."""
    return json.dumps({name: record.to_dict() for name, record in mismatches.items()}, indent=1)
