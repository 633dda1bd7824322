"""Per-item audit trail of normalization decisions."""

from econorm.explain.recorder import (
    ExplainEntry,
    ExplainRecorder,
    ExplainTrail,
    record,
    record_exempt,
)

__all__ = ["ExplainEntry", "ExplainRecorder", "ExplainTrail", "record", "record_exempt"]
