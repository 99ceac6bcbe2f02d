"""Analysis pipeline orchestrator.

Runs every diagram through the same strictly sequential stages:
detect -> parse -> build graph -> compute metrics (with dimensions) ->
evaluate rules. Diagrams share no mutable state, so files can be analyzed on
a thread pool; results always come back in sorted file order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path

from mermaid_sonar.analyzers import (
    build_graph,
    compute_metrics,
    detect_diagram_type,
    discover_files,
    extract_diagrams,
    parse_dialect,
)
from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models import AnalysisReport, Diagram, DiagramResult, DiagramType, RuleFailure
from mermaid_sonar.rules import RuleRegistry, default_registry, evaluate_rules

logger = logging.getLogger(__name__)

IO_FAILURE = "<io>"


@dataclass
class PipelineOptions:
    """Options for controlling pipeline execution.

    Attributes:
        workers: Number of files analyzed concurrently (1 = sequential)
        run_rules: Evaluate rules (False computes metrics only)
    """

    workers: int = 1
    run_rules: bool = True

    def __post_init__(self) -> None:
        """Validate pipeline options."""
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1 (got {self.workers})")


@dataclass
class _FileOutcome:
    results: list[DiagramResult]
    failure: RuleFailure | None = None


class AnalysisPipeline:
    """Analyzes diagrams, documents and directory trees.

    The rule registry and resolved configuration are fixed at construction
    and only read afterwards.
    """

    def __init__(
        self,
        config: ResolvedConfig | None = None,
        registry: RuleRegistry | None = None,
        options: PipelineOptions | None = None,
    ) -> None:
        """Initialize the analysis pipeline.

        Args:
            config: Resolved configuration (defaults if None)
            registry: Rules to evaluate (built-in rules if None)
            options: Execution options
        """
        self.config = config or ResolvedConfig()
        self.registry = registry if registry is not None else default_registry()
        self.options = options or PipelineOptions()

    # =========================================================================
    # Single diagram
    # =========================================================================

    def analyze_diagram(self, diagram: Diagram) -> DiagramResult:
        """Run the full pipeline on one diagram.

        Args:
            diagram: Diagram to analyze

        Returns:
            DiagramResult with metrics, issues and rule failures
        """
        if diagram.type == DiagramType.UNKNOWN:
            detected = detect_diagram_type(diagram.content)
            if detected != DiagramType.UNKNOWN:
                diagram = replace(diagram, type=detected)

        parse = parse_dialect(diagram.type, diagram.content)
        graph = build_graph(parse)
        metrics = compute_metrics(graph, parse, self.config.estimation)

        if not self.options.run_rules:
            return DiagramResult(diagram=diagram, metrics=metrics)

        issues, failures = evaluate_rules(self.registry, diagram, metrics, self.config)
        logger.debug(
            "%s (%s): %d issues", diagram.location, diagram.type.value, len(issues)
        )
        return DiagramResult(diagram=diagram, metrics=metrics, issues=issues, failures=failures)

    # =========================================================================
    # Documents
    # =========================================================================

    def analyze_text(self, text: str, file_path: str) -> list[DiagramResult]:
        """Analyze every diagram in a document's text.

        Args:
            text: Document content
            file_path: Path reported on results

        Returns:
            One DiagramResult per diagram, in document order
        """
        return [self.analyze_diagram(diagram) for diagram in extract_diagrams(text, file_path)]

    def analyze_file(self, path: Path) -> list[DiagramResult]:
        """Analyze every diagram in a file.

        Args:
            path: Markdown or Mermaid file

        Returns:
            One DiagramResult per diagram

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not UTF-8
        """
        text = path.read_text(encoding="utf-8")
        return self.analyze_text(text, str(path))

    def _analyze_file_safely(self, path: Path) -> _FileOutcome:
        try:
            return _FileOutcome(results=self.analyze_file(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return _FileOutcome(
                results=[],
                failure=RuleFailure(rule=IO_FAILURE, message=str(e), file_path=str(path)),
            )

    # =========================================================================
    # Batch
    # =========================================================================

    def analyze_paths(self, paths: list[Path], workers: int | None = None) -> AnalysisReport:
        """Analyze files and directory trees.

        Args:
            paths: Files and/or directories
            workers: Concurrent files (overrides the pipeline option)

        Returns:
            AnalysisReport in sorted file order
        """
        workers = workers or self.options.workers
        report = AnalysisReport()

        files: set[Path] = set()
        for path in paths:
            try:
                files.update(discover_files([path]))
            except FileNotFoundError as e:
                logger.warning("%s", e)
                report.failures.append(
                    RuleFailure(rule=IO_FAILURE, message=str(e), file_path=str(path))
                )
        ordered = sorted(files)

        logger.info("Analyzing %d files", len(ordered))

        if workers > 1 and len(ordered) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(self._analyze_file_safely, ordered))
        else:
            outcomes = [self._analyze_file_safely(path) for path in ordered]

        for path, outcome in zip(ordered, outcomes, strict=True):
            report.files.append(str(path))
            report.results.extend(outcome.results)
            if outcome.failure is not None:
                report.failures.append(outcome.failure)

        summary = report.summary()
        logger.info(
            "Analysis complete: %d diagrams, %d errors, %d warnings",
            summary["diagrams"],
            summary["errors"],
            summary["warnings"],
        )
        return report
