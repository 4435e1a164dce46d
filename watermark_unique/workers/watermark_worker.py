"""
Watermark Worker - Async Watermark Stamping
===========================================
QThread worker that runs watermark jobs off the calling thread.

Workflow:
1. For each job in the queue:
   a. Decode source (and overlay image, if any)
   b. Normalize orientation, composite, encode
   c. Write the output file according to the job's naming policy
2. Emit progress signals during processing
3. Emit finished signal with results

A job is never interrupted once started; cancel() takes effect between jobs.
"""

import logging
from typing import List, Optional

from PyQt6.QtCore import QThread, pyqtSignal

from watermark_unique.core.compositor import CompositorConfig
from watermark_unique.core.watermarker import Watermarker

from .jobs import WatermarkJob, WatermarkResult, run_job

logger = logging.getLogger(__name__)


class WatermarkWorker(QThread):
    """
    Worker thread for stamping watermarks onto images.

    Signals:
        progress(int, int, str): (current, total, current_file_name)
        job_completed(WatermarkResult): Emitted when each job is done
        finished_all(list[WatermarkResult]): Emitted when all jobs are done
        error(str): Emitted on critical errors
    """

    # Signals
    progress = pyqtSignal(int, int, str)  # current, total, filename
    job_completed = pyqtSignal(object)  # WatermarkResult
    finished_all = pyqtSignal(list)  # List[WatermarkResult]
    error = pyqtSignal(str)  # Error message

    def __init__(
            self,
            jobs: List[WatermarkJob],
            font_path: Optional[str] = None,
            config: Optional[CompositorConfig] = None,
            parent=None
    ):
        """
        Initialize the watermark worker.

        Args:
            jobs: Jobs to run in order.
            font_path: Optional custom font for text watermarks.
            config: Compositor margins and shadow settings.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self.jobs = list(jobs)
        self._font_path = font_path
        self._config = config
        self._is_cancelled = False

    def cancel(self):
        """Request cancellation before the next job starts."""
        self._is_cancelled = True

    def run(self):
        """
        Main worker execution.

        Runs every job and emits progress signals.
        """
        results: List[WatermarkResult] = []
        total = len(self.jobs)

        if total == 0:
            self.error.emit("No images to process")
            self.finished_all.emit(results)
            return

        watermarker = Watermarker(font_path=self._font_path, config=self._config)

        try:
            for idx, job in enumerate(self.jobs):
                if self._is_cancelled:
                    logger.info("Cancelled after %d of %d job(s)", idx, total)
                    break

                self.progress.emit(idx + 1, total, job.source_path.name)

                result = run_job(job, watermarker)
                results.append(result)

                self.job_completed.emit(result)

        except Exception as e:
            logger.exception("Critical error in watermark worker")
            self.error.emit(f"Critical error: {e}")

        finally:
            watermarker.fonts.clear()

        self.finished_all.emit(results)
