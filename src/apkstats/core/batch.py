"""Run manifest extraction over many decompiled packages in parallel."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel

from apkstats.core.manifest import MANIFEST_FILE_NAME, ExtractionResult, ManifestExtractor
from apkstats.exceptions import InvalidArgumentError
from apkstats.models.apk import ApkFile
from apkstats.models.manifest import AndroidManifestData
from apkstats.utils.log import get_logger, get_package_logger


class BatchResult(BaseModel):
    """Manifest extraction outcome for one package of a batch."""

    marker: str
    """Diagnostic tag of the package."""

    decompiled_dir: Path
    """Decompiled directory that was processed."""

    manifest: AndroidManifestData
    """Extracted (possibly partial or empty) manifest data."""

    error: str | None = None
    """Description of the failure that stopped extraction, if any."""

    timed_out: bool = False
    """Whether the package exceeded the per-package deadline."""

    @property
    def success(self) -> bool:
        """Check if extraction completed without error."""
        return self.error is None and not self.timed_out


def discover_decompiled_dirs(root: Path) -> list[Path]:
    """Find decompiled package directories directly under root.

    Args:
        root: Directory containing one decompiled directory per package.

    Returns:
        Sorted list of subdirectories holding an AndroidManifest.xml.

    Raises:
        InvalidArgumentError: If root is not a directory.
    """
    if not root.is_dir():
        raise InvalidArgumentError(f"Not a directory: {root}")

    return sorted(
        entry
        for entry in root.iterdir()
        if entry.is_dir() and (entry / MANIFEST_FILE_NAME).is_file()
    )


@dataclass
class _Job:
    """One package queued on the pool, with the moment a worker picked it up."""

    apk_file: ApkFile
    started: threading.Event = field(default_factory=threading.Event)
    started_at: float = 0.0

    def run(self, logger: logging.Logger | logging.LoggerAdapter) -> ExtractionResult:
        self.started_at = time.monotonic()
        self.started.set()
        return ManifestExtractor(self.apk_file, logger=logger).run()

    def remaining(self, timeout: float) -> float:
        """Seconds left before the deadline, once the job has started."""
        self.started.wait()
        return max(self.started_at + timeout - time.monotonic(), 0.0)


def extract_many(
    apk_files: list[ApkFile],
    workers: int = 4,
    timeout: float | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> list[BatchResult]:
    """Extract manifests of many packages using a thread pool.

    Each package gets its own extractor and document. The deadline of a
    package starts when a worker picks it up, so packages waiting in the
    queue never time out. A package still running ``timeout`` seconds after
    it started is reported as timed out with an empty record; its thread is
    left to finish in the background.

    Args:
        apk_files: Packages to process.
        workers: Number of worker threads.
        timeout: Optional per-package deadline in seconds.
        logger: Logger passed to every extractor.

    Returns:
        One BatchResult per package, in input order.

    Raises:
        InvalidArgumentError: If workers is less than 1 or timeout is not
            positive.
    """
    if workers < 1:
        raise InvalidArgumentError(f"workers must be at least 1, got {workers}")
    if timeout is not None and timeout <= 0:
        raise InvalidArgumentError(f"timeout must be positive, got {timeout}")

    log = logger or get_logger("batch")
    results: list[BatchResult] = []

    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="apkstats")
    try:
        jobs = [_Job(apk_file) for apk_file in apk_files]
        futures: list[tuple[_Job, Future[ExtractionResult]]] = [
            (job, executor.submit(job.run, log)) for job in jobs
        ]

        for job, future in futures:
            apk_file = job.apk_file
            try:
                if timeout is None:
                    outcome = future.result()
                else:
                    outcome = future.result(timeout=job.remaining(timeout))
            except FutureTimeoutError:
                get_package_logger(log, apk_file.marker).error(
                    f"Extraction timed out after {timeout}s"
                )
                results.append(
                    BatchResult(
                        marker=apk_file.marker,
                        decompiled_dir=apk_file.decompiled_dir,
                        manifest=AndroidManifestData(),
                        error=f"Timed out after {timeout}s",
                        timed_out=True,
                    )
                )
                continue

            results.append(
                BatchResult(
                    marker=apk_file.marker,
                    decompiled_dir=apk_file.decompiled_dir,
                    manifest=outcome.record,
                    error=str(outcome.error) if outcome.error else None,
                )
            )
    finally:
        # Do not block on extractions that overran their deadline
        executor.shutdown(wait=False, cancel_futures=True)

    return results
