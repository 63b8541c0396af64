"""Pipeline orchestrator — drives each input file through its stages.

Per file: STAGING -> SPLITTING -> REASSEMBLING -> AUDITING -> REPORTED, with
FAILED reachable from any stage. Stages for one file run strictly in order;
files run independently on a small thread pool. Each file owns its
FileResult and working set, so nothing mutable is shared between tasks.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from linesplit.audit.auditor import DiffAuditor
from linesplit.audit.log_parser import summarize_log
from linesplit.audit.models import AuditEvent
from linesplit.config.schema import LineSplitConfig
from linesplit.pipeline.models import FileResult, Stage
from linesplit.reassembly.normalizer import normalizer_for
from linesplit.reassembly.reassembler import reassemble
from linesplit.splitter.line_endings import detect_line_ending
from linesplit.splitter.line_splitter import LineSplitter, SplitError
from linesplit.workspace.manifest import Manifest, ManifestError, load_manifest, write_manifest
from linesplit.workspace.staging import WorkingSet, create_working_set

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[FileResult, str], None]
ReportCallback = Callable[[FileResult], None]
EventCallback = Callable[[FileResult, AuditEvent, str], None]


class _StageFailed(Exception):
    """Internal: a stage failed and the result has been marked FAILED."""


class Pipeline:
    """Split-and-verify pipeline bound to one configuration."""

    def __init__(
        self,
        config: LineSplitConfig,
        *,
        on_progress: Optional[ProgressCallback] = None,
        on_report: Optional[ReportCallback] = None,
        on_event: Optional[EventCallback] = None,
    ) -> None:
        self.config = config
        self.on_progress = on_progress
        self.on_report = on_report
        self.on_event = on_event
        self.splitter = LineSplitter(
            config.split.max_lines,
            prefix=config.split.segment_prefix,
            index_width=config.split.index_width,
        )
        self.auditor = DiffAuditor(
            resync_window=config.audit.resync_window,
            confirm_lines=config.audit.confirm_lines,
        )

    # ---- single file ----

    def process_file(self, source: Path) -> FileResult:
        """Run every stage for *source*. Never raises for per-file failures."""
        return self._run(
            FileResult(source=source),
            [
                self._stage_staging,
                self._stage_splitting,
                self._stage_reassembling,
                self._stage_auditing,
                self._stage_report,
            ],
        )

    def verify(self, root: Path) -> FileResult:
        """Re-run reassembly and audit for an existing working set."""
        return self._run(
            FileResult(source=root, stage=Stage.REASSEMBLING),
            [
                lambda result: self._load_manifest(result, root),
                self._stage_reassembling,
                self._stage_auditing,
                self._stage_report,
            ],
        )

    def _run(self, result: FileResult, stages: List[Callable[[FileResult], None]]) -> FileResult:
        start = time.perf_counter()
        try:
            for stage in stages:
                stage(result)
        except _StageFailed:
            pass
        except Exception as exc:
            logger.exception("internal error while processing %s", result.source)
            self._mark_failed(result, f"internal error: {exc}")
        result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        if result.failed and self.on_report is not None:
            self.on_report(result)
        return result

    # ---- stages ----

    def _enter(self, result: FileResult, stage: Stage, message: str) -> None:
        result.stage = stage
        logger.debug("%s: %s", result.source, stage.value)
        if self.on_progress is not None:
            self.on_progress(result, message)

    @staticmethod
    def _mark_failed(result: FileResult, message: str) -> None:
        result.failed_stage = result.stage
        result.stage = Stage.FAILED
        result.error = message

    def _fail(self, result: FileResult, exc: BaseException) -> None:
        self._mark_failed(result, str(exc))
        logger.debug("%s failed during %s: %s", result.source, result.failed_stage.value, exc)
        raise _StageFailed() from exc

    def _load_manifest(self, result: FileResult, root: Path) -> None:
        try:
            manifest = load_manifest(root / "manifest.yaml")
        except ManifestError as exc:
            self._fail(result, exc)
        result.source = manifest.source
        result.working_set = WorkingSet(source=manifest.source, root=root)
        result.line_ending = manifest.line_ending
        result.segments = list(manifest.segments)

    def _stage_staging(self, result: FileResult) -> None:
        self._enter(result, Stage.STAGING, "staging")
        try:
            result.working_set = create_working_set(
                result.source, marker=self.config.split.dir_marker
            )
        except OSError as exc:
            self._fail(result, exc)

    def _stage_splitting(self, result: FileResult) -> None:
        ws = result.working_set
        assert ws is not None
        self._enter(
            result,
            Stage.SPLITTING,
            f"splitting into files of at most {self.splitter.max_lines} lines",
        )
        try:
            result.line_ending = detect_line_ending(ws.original)
            result.segments = self.splitter.split(
                ws.original, ws.root, line_ending=result.line_ending
            )
            write_manifest(
                ws.manifest,
                Manifest(
                    source=result.source,
                    line_ending=result.line_ending,
                    max_lines=self.splitter.max_lines,
                    segments=result.segments,
                ),
            )
        except SplitError as exc:
            result.segments = exc.segments
            self._fail(result, exc)
        except OSError as exc:
            self._fail(result, exc)

    def _stage_reassembling(self, result: FileResult) -> None:
        ws = result.working_set
        assert ws is not None and result.line_ending is not None
        self._enter(result, Stage.REASSEMBLING, f"reassembling {len(result.segments)} segment(s)")
        normalizer = (
            normalizer_for(result.line_ending)
            if self.config.reassembly.normalize_boundaries
            else None
        )
        try:
            result.reassembled = reassemble(
                result.segments,
                ws.verification,
                line_ending=result.line_ending,
                normalizer=normalizer,
            )
        except OSError as exc:
            self._fail(result, exc)

    def _stage_auditing(self, result: FileResult) -> None:
        ws = result.working_set
        assert ws is not None and result.line_ending is not None
        self._enter(result, Stage.AUDITING, "auditing")

        on_event = None
        if self.on_event is not None:
            callback = self.on_event

            def on_event(event: AuditEvent, entry: str) -> None:
                callback(result, event, entry)

        try:
            result.audit = self.auditor.audit(
                ws.original,
                ws.verification,
                ws.audit_log,
                line_ending=result.line_ending,
                encoding=self.config.audit.encoding,
                sample_size=self.config.audit.sample_size,
                on_event=on_event,
            )
        except OSError as exc:
            self._fail(result, exc)

    def _stage_report(self, result: FileResult) -> None:
        """Read the audit log back; a bad log is a warning, not a failure."""
        assert result.audit is not None and result.audit.log_path is not None
        try:
            logged = summarize_log(result.audit.log_path)
        except OSError as exc:
            result.log_warning = f"audit log unreadable: {exc}"
        else:
            if logged.is_corrupt:
                reasons = sorted({p.reason for p in logged.problems})
                result.log_warning = f"audit log damaged ({', '.join(reasons)})"
            elif logged.error_count != result.audit.error_count:
                result.log_warning = (
                    f"audit log reports {logged.error_count} error(s), "
                    f"expected {result.audit.error_count}"
                )
        result.stage = Stage.REPORTED
        if self.on_report is not None:
            self.on_report(result)


# ---- batch ----


def run_batch(
    files: Sequence[Path],
    config: LineSplitConfig,
    *,
    on_progress: Optional[ProgressCallback] = None,
    on_report: Optional[ReportCallback] = None,
    on_event: Optional[EventCallback] = None,
    max_workers: Optional[int] = None,
) -> List[FileResult]:
    """Process *files* independently; results come back in input order."""
    pipeline = Pipeline(
        config, on_progress=on_progress, on_report=on_report, on_event=on_event
    )
    workers = max(1, max_workers or config.batch.max_workers)
    if workers == 1 or len(files) <= 1:
        return [pipeline.process_file(path) for path in files]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(pipeline.process_file, path) for path in files]
        return [future.result() for future in futures]
