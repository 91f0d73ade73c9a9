"""
Progress reporting for uploads.

Pure mapping from stage and counters to an UploadProgress record. All percent
arithmetic lives here so the orchestrator carries no magic numbers.
"""

import math
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from ..schemas.upload import UploadProgress
from ..utils.constants import CLIENT_UPLOAD_STAGE_TEXT, STAGE_PERCENT_RANGES, ClientUploadStage


class ProgressCounters(BaseModel):
    """Counters describing where an upload stands inside its stage."""

    model_config = ConfigDict(frozen=True)

    uploaded_chunks: int = 0
    total_chunks: int = 0
    current_chunk: int = 0
    stage_fraction: float = Field(0.0, ge=0.0, le=1.0, description="Position inside the stage range")
    chunk_fraction: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Transfer progress of the current chunk"
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(value + 0.5))


def stage_percent(stage: ClientUploadStage, fraction: float = 0.0) -> int:
    """Percent at ``fraction`` (0-1) of the stage's range."""
    low, high = STAGE_PERCENT_RANGES[stage]
    return round_half_up(low + (high - low) * fraction)


def stage_fraction_at(stage: ClientUploadStage, percent: int) -> float:
    """Inverse of stage_percent: where ``percent`` sits inside the stage range."""
    low, high = STAGE_PERCENT_RANGES[stage]
    if high <= low:
        return 1.0
    return min(1.0, max(0.0, (percent - low) / (high - low)))


def calculate_upload_percent(
    uploaded_chunks: int, total_chunks: int, chunk_fraction: float = 0.0
) -> int:
    """
    Overall percent while uploading.
    Completed chunks split the range evenly; the current chunk's transfer
    advances inside its own slice. Clamped to the stage range.
    """
    low, high = STAGE_PERCENT_RANGES[ClientUploadStage.UPLOADING]
    if total_chunks <= 0:
        return low
    per_chunk = (high - low) / total_chunks
    percent = low + (uploaded_chunks + chunk_fraction) * per_chunk
    return round_half_up(min(high, max(low, percent)))


def to_progress(
    stage: ClientUploadStage,
    counters: Optional[ProgressCounters] = None,
    status: Optional[str] = None,
) -> UploadProgress:
    """Build the progress record for a stage and its counters."""
    counters = counters or ProgressCounters()

    chunk_progress = None
    if stage == ClientUploadStage.UPLOADING:
        percent = calculate_upload_percent(
            counters.uploaded_chunks,
            counters.total_chunks,
            counters.chunk_fraction or 0.0,
        )
        if counters.chunk_fraction is not None:
            chunk_progress = round_half_up(counters.chunk_fraction * 100)
    else:
        percent = stage_percent(stage, counters.stage_fraction)

    return UploadProgress(
        stage=stage,
        percent=percent,
        uploaded_chunks=counters.uploaded_chunks,
        total_chunks=counters.total_chunks,
        current_chunk=counters.current_chunk,
        current_status=status or CLIENT_UPLOAD_STAGE_TEXT[stage],
        chunk_progress=chunk_progress,
    )
