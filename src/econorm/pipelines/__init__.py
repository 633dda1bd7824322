"""Batch normalization pipeline: validation, quality, orchestration and I/O."""

from econorm.pipelines.io import export_result, failed_to_frame, points_from_frame, result_to_frame
from econorm.pipelines.orchestrator import PipelineContext, PipelineState, normalize, run_pipeline
from econorm.pipelines.quality import QualityIssue, QualityReport, assess_quality
from econorm.pipelines.validate import validate_points

__all__ = [
    "PipelineContext",
    "PipelineState",
    "QualityIssue",
    "QualityReport",
    "assess_quality",
    "export_result",
    "failed_to_frame",
    "normalize",
    "points_from_frame",
    "result_to_frame",
    "run_pipeline",
    "validate_points",
]
