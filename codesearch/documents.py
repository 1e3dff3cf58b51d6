"""Per-line document construction."""

from __future__ import annotations

from .functions import extract_function_name
from .models import CodeLine


def build_code_line(repository: str, file_path: str, line_number: int, content: str) -> CodeLine:
    """Assemble the record for one source line, labelling its function if any."""
    return CodeLine(
        repository=repository,
        file_path=file_path,
        line=line_number,
        content=content,
        function=extract_function_name(content),
    )


__all__ = ["build_code_line"]
