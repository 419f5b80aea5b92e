"""
Scaffold Engine: field-spec parsing, reverse schema extraction, generation.

Ticket: 0001_field_spec_scaffolding
Design: DESIGN.md

This package is the engine core. It is project-agnostic: directories,
namespaces and the database driver come from the consuming repository's
.scaffold/config.yaml.
"""
