"""Fenced `cardlink` block the note editor stores for a resolved link."""
from __future__ import annotations

from cardlink.constants import CODE_BLOCK_LANGUAGE_TAG
from cardlink.domain.models import LinkMetadata


def generate_code_block(metadata: LinkMetadata) -> str:
    # title and description arrive escaped for double-quoted scalars
    lines = [
        f"```{CODE_BLOCK_LANGUAGE_TAG}",
        f'url: "{metadata.url}"',
        f'title: "{metadata.title}"',
    ]
    if metadata.description:
        lines.append(f'description: "{metadata.description}"')
    if metadata.host:
        lines.append(f'host: "{metadata.host}"')
    if metadata.favicon:
        lines.append(f'favicon: "{metadata.favicon}"')
    if metadata.image:
        lines.append(f'image: "{metadata.image}"')
    if metadata.indent > 0:
        lines.append(f"indent: {metadata.indent}")
    lines.append("```")
    return "\n".join(lines)
