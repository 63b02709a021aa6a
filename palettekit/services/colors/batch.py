"""
Batch palette extraction.

A BatchProcessor is an ordinary object owned by its caller; it keeps the
jobs it created and the images they reference, and nothing else.
"""

import time
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from palettekit.exceptions import JobNotFoundError
from palettekit.schemas import BatchImageResult, BatchJob, BatchOptions, Palette
from palettekit.services.colors.accessibility import simulate_color_blindness
from palettekit.services.colors.advanced import evaluate_palette_wcag
from palettekit.services.colors.extraction import extract_colors
from palettekit.services.colors.pixels import PixelBuffer
from palettekit.services.observability import MetricsCollector, performance_monitor
from palettekit.utils.ids import generate_job_id
from palettekit.utils.logging import get_logger

ProgressCallback = Callable[[int], None]


class BatchProcessor:
    """Runs palette extraction over several images and tracks progress."""

    def __init__(self, collector: Optional[MetricsCollector] = None):
        self.collector = collector
        self.log = get_logger("batch")
        self._jobs: Dict[str, BatchJob] = {}
        self._images: Dict[str, List[PixelBuffer]] = {}

    def create_job(self, name: str,
                   images: Iterable[Tuple[str, PixelBuffer]],
                   options: Optional[BatchOptions] = None) -> BatchJob:
        """
        Register a pending job.

        Args:
            name: Job name
            images: (image name, pixels) pairs in processing order
            options: Extraction settings

        Returns:
            The pending BatchJob
        """
        images = list(images)
        job = BatchJob(
            id=generate_job_id(),
            name=name,
            image_names=[image_name for image_name, _ in images],
            options=options or BatchOptions(),
        )
        self._jobs[job.id] = job
        self._images[job.id] = [pixels for _, pixels in images]
        self.log.info(f"Created batch job with {len(images)} images", {"job_id": job.id, "job_name": name})
        return job

    def get_job(self, job_id: str) -> Optional[BatchJob]:
        return self._jobs.get(job_id)

    def list_jobs(self) -> List[BatchJob]:
        """All jobs, newest first."""
        return sorted(self._jobs.values(), key=lambda job: job.created_at, reverse=True)

    def delete_job(self, job_id: str) -> None:
        if job_id not in self._jobs:
            raise JobNotFoundError(job_id)
        del self._jobs[job_id]
        del self._images[job_id]

    def _process_image(self, image_name: str, pixels: PixelBuffer,
                       options: BatchOptions) -> BatchImageResult:
        start = time.perf_counter()
        colors = extract_colors(
            pixels,
            options.palette_size,
            algorithm=options.algorithm,
            quality=options.quality,
            collector=self.collector,
        )
        palette = Palette(name=f"{image_name} palette", colors=colors, file_name=image_name)

        return BatchImageResult(
            image_name=image_name,
            palette=palette,
            wcag=evaluate_palette_wcag(colors) if options.include_wcag else [],
            color_blindness=simulate_color_blindness(colors) if options.include_color_blindness else None,
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    def run_job(self, job_id: str,
                progress_callback: Optional[ProgressCallback] = None) -> BatchJob:
        """
        Process every image of a job in order.

        A failing image stops the job and marks it ``error`` with the
        failure message; results of earlier images are kept.

        Args:
            job_id: Job to run
            progress_callback: Called with the 0-100 progress after each image

        Returns:
            The updated BatchJob

        Raises:
            JobNotFoundError: If the job id is unknown
        """
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        images = self._images[job_id]
        job.status = "processing"
        job.progress = 0
        job.results = []
        job.error = None

        with performance_monitor("batch_job", self.collector, job_id=job_id, images=len(images)):
            for index, (image_name, pixels) in enumerate(zip(job.image_names, images)):
                try:
                    job.results.append(self._process_image(image_name, pixels, job.options))
                except Exception as e:
                    self.log.error(f"Batch job failed on image {image_name}: {e}",
                                   {"job_id": job_id, "image_name": image_name})
                    job.status = "error"
                    job.error = f"{image_name}: {e}"
                    return job

                job.progress = round((index + 1) / len(images) * 100)
                if progress_callback:
                    progress_callback(job.progress)

        job.status = "completed"
        job.completed_at = datetime.now()
        self.log.info(f"Batch job completed: {len(job.results)} palettes", {"job_id": job_id})
        return job
