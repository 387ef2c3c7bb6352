"""Image attachment port supplied by the host application."""
from __future__ import annotations

from typing import Awaitable, Callable

# (source_url, suggested_file_name) -> stable reference path of the saved copy
ImageAttachmentSaver = Callable[[str, str], Awaitable[str]]
