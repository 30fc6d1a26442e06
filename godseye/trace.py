"""Optional sinks for debug artifacts (prompt, raw LLM reply, final output).

The extractor never touches the filesystem directly; callers pass a sink.
"""

from pathlib import Path
from typing import Optional, Protocol, Union

from godseye.config import get_trace_dir
from godseye.logging_config import get_logger

__all__ = [
    "TraceSink",
    "NullTraceSink",
    "FileTraceSink",
    "default_trace_sink",
    "PROMPT_ARTIFACT",
    "RAW_RESPONSE_ARTIFACT",
    "FINAL_OUTPUT_ARTIFACT",
]

logger = get_logger("trace")

PROMPT_ARTIFACT = "prompt_content.txt"
RAW_RESPONSE_ARTIFACT = "gemini_raw.txt"
FINAL_OUTPUT_ARTIFACT = "final_output.json"


class TraceSink(Protocol):
    def write(self, name: str, content: str) -> None:
        ...


class NullTraceSink:
    """Discards everything."""

    def write(self, name: str, content: str) -> None:
        return None


class FileTraceSink:
    """Writes each artifact as a UTF-8 file under a directory."""

    def __init__(self, directory: Union[Path, str]):
        self.directory = Path(directory)

    def write(self, name: str, content: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / name).write_text(content, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write trace artifact {name}: {e}")


def default_trace_sink(directory: Optional[Union[Path, str]] = None) -> TraceSink:
    """FileTraceSink for directory (or GODSEYE_TRACE_DIR), else NullTraceSink."""
    target = Path(directory) if directory else get_trace_dir()
    if target is None:
        return NullTraceSink()
    return FileTraceSink(target)
