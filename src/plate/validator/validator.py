"""plate Validator: read-only diagnostics for a ``Document``.

The ``Validator`` runs a configurable set of rules against a document,
interpreting node kinds through a ``PluginRegistry``, and returns a list
of ``Diagnostic`` objects.  In strict mode, warnings are promoted to
errors so that CI pipelines can require fully normalized documents.

Usage
-----
::

    from plate.plugins.registry import PluginRegistry
    from plate.validator import Validator

    validator = Validator(PluginRegistry.richtext())
    diagnostics = validator.validate(doc)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

import logging

from plate.model.nodes import Document
from plate.plugins.registry import PluginRegistry
from plate.validator.diagnostics import Diagnostic, DiagnosticSeverity
from plate.validator.rules import DEFAULT_RULES, Rule

logger = logging.getLogger(__name__)


class Validator:
    """Document validator.

    Parameters
    ----------
    registry:
        Registry whose node specs define the known kinds.  Defaults to
        the richtext preset.
    rules:
        The list of validation rules to run.  Defaults to all built-in
        rules (``DEFAULT_RULES``).
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR
        severity.
    """

    def __init__(
        self,
        registry: PluginRegistry | None = None,
        rules: list[Rule] | None = None,
        strict: bool = False,
    ) -> None:
        self._registry = registry if registry is not None else PluginRegistry.richtext()
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._strict: bool = strict

    def validate(self, doc: Document) -> list[Diagnostic]:
        """Run all rules against ``doc`` and return the collected diagnostics.

        Returns
        -------
        list[Diagnostic]
            All findings, sorted by node path then code.  Empty if the
            document is valid.
        """
        all_diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            try:
                all_diagnostics.extend(rule(doc, self._registry))
            except Exception as exc:  # noqa: BLE001
                logger.exception("Validator rule %r failed", rule.__name__)
                all_diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.ERROR,
                        code="PLT999",
                        message=f"Internal validator error in rule {rule.__name__!r}: {exc}",
                        path=(),
                        suggestion="Please report this as a bug",
                        rule=rule.__name__,
                    )
                )

        if self._strict:
            all_diagnostics = [
                Diagnostic(
                    severity=DiagnosticSeverity.ERROR,
                    code=d.code,
                    message=d.message,
                    path=d.path,
                    suggestion=d.suggestion,
                    rule=d.rule,
                )
                if d.severity == DiagnosticSeverity.WARNING
                else d
                for d in all_diagnostics
            ]

        all_diagnostics.sort(key=lambda d: (d.path, d.code))
        return all_diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule ``(Document, PluginRegistry) -> list[Diagnostic]``."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        return len(self._rules)


def validate(
    doc: Document, registry: PluginRegistry | None = None, strict: bool = False
) -> list[Diagnostic]:
    """Convenience function: validate ``doc`` with the default rules."""
    return Validator(registry, strict=strict).validate(doc)
