"""Symbol file patching."""

from .models import (
    EXTRACTION_FAILURE,
    INDEX_BUILD_FAILURE,
    RESOURCE_FAILURE,
    SKIP_NO_LOCAL_FILES,
    SKIP_NO_SOURCE_INFO,
    TIMEOUT,
    TOOL_FAILURE,
    IndexStreamBuilder,
    PatchError,
    PatchOutcome,
    SourceExtractor,
    StreamWriter,
)
from .orchestrator import PdbFilePatcher

__all__ = [
    "EXTRACTION_FAILURE",
    "INDEX_BUILD_FAILURE",
    "IndexStreamBuilder",
    "PatchError",
    "PatchOutcome",
    "PdbFilePatcher",
    "RESOURCE_FAILURE",
    "SKIP_NO_LOCAL_FILES",
    "SKIP_NO_SOURCE_INFO",
    "SourceExtractor",
    "StreamWriter",
    "TIMEOUT",
    "TOOL_FAILURE",
]
