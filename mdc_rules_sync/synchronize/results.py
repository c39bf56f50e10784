"""Contains results of the rules sync workflow."""

from typing import Any

from mdc_rules_sync.synchronize.models import RemoteRuleFile, SyncDecision


class RuleFileSynchronizationResult:
    """Contains the result of synchronizing a single rule file."""

    def __init__(self, rule_file: RemoteRuleFile, decision: SyncDecision) -> None:
        """Initialize the result with the remote rule file and the decision taken for it."""
        self.rule_file = rule_file
        self.decision = decision


class SyncRulesResult:
    """Contains results of the sync workflow."""

    def __init__(
        self,
        results: list[RuleFileSynchronizationResult] | None = None,
        errors: list[dict[str, Any]] | None = None,
        cancelled: bool = False,
        aborted: bool = False,
    ) -> None:
        """Initialize the result.

        ``aborted`` is set when the sync stopped on an error before any file
        was processed; ``cancelled`` when the user backed out at a prompt.
        The two are never both set: backing out of a prompt offered after an
        error counts as cancelled, and the error stays listed in ``errors``.
        """
        self.results = results or []
        self.errors = errors or []
        self.cancelled = cancelled
        self.aborted = aborted

    def decisions(self) -> dict[str, SyncDecision]:
        """Map of rule file name to the decision taken for it."""
        return {result.rule_file.name: result.decision for result in self.results}
