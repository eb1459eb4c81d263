"""Preview execution and the sample-data backend."""

from extract_query.execution.executor import PreviewExecutor
from extract_query.execution.stub import SamplePreviewBackend, sample_value

__all__ = ["PreviewExecutor", "SamplePreviewBackend", "sample_value"]
