"""
Workers Module - Caller Layer and Async Thread Management
=========================================================
Turns caller requests into pipeline jobs and runs them in QThread workers.

Components:
- build_job / run_job: argument validation and output persistence
- WatermarkWorker: watermark stamping with progress tracking
"""

from .jobs import (
    ADD_IMAGE_WATERMARK, ADD_TEXT_WATERMARK, OutputNaming,
    WatermarkJob, WatermarkResult, build_job, run_job, write_output
)
from .watermark_worker import WatermarkWorker

__all__ = [
    "ADD_TEXT_WATERMARK",
    "ADD_IMAGE_WATERMARK",
    "OutputNaming",
    "WatermarkJob",
    "WatermarkResult",
    "build_job",
    "run_job",
    "write_output",
    "WatermarkWorker",
]
