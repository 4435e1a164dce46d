"""
Watermark Unique - Main Entry Point
===================================
Runs watermark requests from a JSON file without a GUI.

Usage:
    python main.py requests.json [-v]

The file holds one request or a list of them:

    {"method": "addTextWatermark",
     "arguments": {"filePath": "photo.jpg", "text": "Hello", "textSize": 32,
                   "color": 4294967295, "quality": 90, "imageFormat": "jpeg"}}

Architecture:
    - Model: watermark_unique/core/ (pure image pipeline)
    - Workers: watermark_unique/workers/ (QThread job runner)
    - Controller: This file (signal/slot connections)
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QCoreApplication

from watermark_unique.core.errors import ArgumentError, WatermarkError
from watermark_unique.workers import WatermarkJob, WatermarkResult, WatermarkWorker, build_job

logger = logging.getLogger("watermark_unique")


class WatermarkController:
    """
    Connects worker signals to console output.

    Responsibilities:
    - Validate requests before any image is decoded
    - Create and manage the worker thread
    - Report each result and quit the event loop when done
    """

    def __init__(self, app: QCoreApplication):
        self.app = app
        self._worker: Optional[WatermarkWorker] = None
        self.results: List[WatermarkResult] = []
        self.rejected = 0

    def load_jobs(self, request_file: Path) -> List[WatermarkJob]:
        """
        Parse the request file into jobs.

        Invalid requests are reported and skipped.

        Raises:
            ValueError: If the file is not JSON, or holds neither an object
                nor a list of objects.
        """
        with open(request_file, "r", encoding="utf-8") as handle:
            payload = json.load(handle)

        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            raise ValueError(
                f"Expected a request object or a list of requests, got {type(payload).__name__}"
            )

        jobs = []
        for index, entry in enumerate(payload):
            try:
                if not isinstance(entry, dict):
                    raise ArgumentError(f"Request #{index} is not an object")
                jobs.append(build_job(entry.get("method"), entry.get("arguments")))
            except WatermarkError as e:
                self.rejected += 1
                print(f"#{index} {e.code}: {e.message}")
        return jobs

    def start(self, jobs: List[WatermarkJob]):
        self._worker = WatermarkWorker(jobs)

        self._worker.progress.connect(self._on_progress)
        self._worker.job_completed.connect(self._on_job_completed)
        self._worker.finished_all.connect(self._on_finished)
        self._worker.error.connect(self._on_error)

        self._worker.start()

    def _on_progress(self, current: int, total: int, filename: str):
        logger.info("Processing %s (%d/%d)", filename, current, total)

    def _on_job_completed(self, result: WatermarkResult):
        if result.success:
            print(result.output_path)
        else:
            print(f"{result.source_path} {result.error_code}: {result.error_message}")

    def _on_finished(self, results: list):
        self.results = results
        if self._worker:
            self._worker.wait()
            self._worker.deleteLater()
            self._worker = None
        self.app.quit()

    def _on_error(self, error_message: str):
        logger.error(error_message)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    parser = argparse.ArgumentParser(description="Stamp watermarks onto photos.")
    parser.add_argument("requests", type=Path, help="JSON file with watermark requests")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr
    )

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Watermark Unique")

    controller = WatermarkController(app)
    try:
        jobs = controller.load_jobs(args.requests)
    except (OSError, ValueError) as e:
        logger.error("Cannot read %s: %s", args.requests, e)
        return 2

    if jobs:
        controller.start(jobs)
        app.exec()

    failed = controller.rejected + sum(1 for r in controller.results if not r.success)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
