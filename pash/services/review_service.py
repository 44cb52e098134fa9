from __future__ import annotations

import logging
from typing import Optional, Sequence

from rich.console import Console  # type: ignore[import]

from pash.change_ingest import ChangeCollector, VersionControlPort, count_changed_files
from pash.config import Settings
from pash.errors import TooManyFilesError
from pash.models import ChangeScope, ReviewOutcome, RuleSet
from pash.review import ReviewClient, build_prompt, count_line_changes
from pash.rules import RuleLoader
from pash.services.reporter import ReviewReporter

logger = logging.getLogger(__name__)


class ReviewService:
    """Coordinates collecting pending changes and sending them through the review client."""

    def __init__(
        self,
        repository: VersionControlPort,
        settings: Settings,
        *,
        client: Optional[ReviewClient] = None,
        reporter: Optional[ReviewReporter] = None,
        rule_loader: Optional[RuleLoader] = None,
        console: Optional[Console] = None,
    ) -> None:
        self._repository = repository
        self._settings = settings
        self._collector = ChangeCollector(repository)
        self._client = client
        self._reporter = reporter or ReviewReporter()
        self._rule_loader = rule_loader or RuleLoader()
        self._console = console or Console()

    def review(
        self,
        scope: ChangeScope | str = ChangeScope.ALL,
        *,
        rule_paths: Optional[Sequence[str]] = None,
        use_rules: bool = True,
    ) -> ReviewOutcome:
        """
        Review the pending changes selected by ``scope``.

        Args:
            scope: Which changes to collect.
            rule_paths: Explicit rule files. When empty the local rules directory is used.
            use_rules: When False the default security prompt is used regardless of rule files.

        Returns:
            ReviewOutcome; its ``result`` is None when there was nothing to review.
        """
        scope = ChangeScope(scope)
        self._repository.verify_has_commits()

        diff = self._collector.collect(scope)
        outcome = ReviewOutcome(scope=scope)
        if not diff.strip():
            self._console.print("No changes to review.")
            return outcome

        outcome.file_count = count_changed_files(diff)
        limit = self._settings.max_files_to_review
        if outcome.file_count > limit:
            raise TooManyFilesError(outcome.file_count, limit, self._settings.config_file)
        logger.debug("Collected %d changed files for scope %s", outcome.file_count, scope.value)

        outcome.rules = self._rule_loader.load(rule_paths) if use_rules else RuleSet()
        prompt = build_prompt(diff, outcome.rules)

        added, removed = count_line_changes(diff)
        self.render_basic_summary(added, removed, console=self._console)

        client = self._client or ReviewClient.from_settings(self._settings)
        self._console.print(
            f"Analyzing changes with LiteLLM (Model: {client.model})... (This may take a moment)",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        outcome.result = client.review(prompt, diff)
        outcome.report_path = self._reporter.write(outcome.result)
        self._reporter.present(outcome.result, outcome.report_path, console=self._console)
        return outcome

    @staticmethod
    def render_basic_summary(added: int, removed: int, *, console: Optional[Console] = None) -> None:
        console = console or Console()
        console.rule("[bold cyan]Basic Summary[/bold cyan]")
        console.print(f"  - Added lines: {added}", highlight=False)
        console.print(f"  - Removed lines: {removed}", highlight=False)
