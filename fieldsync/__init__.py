"""
fieldsync: field-spec scaffolding and schema synchronization.

Ticket: 0001_field_spec_scaffolding
Design: DESIGN.md
"""

__version__ = "0.1.0"
