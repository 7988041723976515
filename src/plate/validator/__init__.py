"""plate document validator.

Exports the ``Validator`` class, the ``validate`` convenience function,
``Diagnostic`` types, and all built-in validation rules.
"""
from __future__ import annotations

from plate.validator.diagnostics import Diagnostic, DiagnosticSeverity, format_path
from plate.validator.rules import DEFAULT_RULES, Rule
from plate.validator.validator import Validator, validate

__all__ = [
    "Validator",
    "validate",
    "Diagnostic",
    "DiagnosticSeverity",
    "format_path",
    "Rule",
    "DEFAULT_RULES",
]
