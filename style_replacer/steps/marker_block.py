"""Marker block step — wraps marked lines in Pandoc custom-style blocks.

A line such as

    >r Hello there

becomes a fenced div that Pandoc maps to a named paragraph style in
DOCX output (custom-style attribute) and to a CSS class in EPUB/HTML
output:

    ::: {custom-style="RightAligned" .RightAligned}
    Hello there
    :::

The marker must sit at the very start of the line and be followed by at
least one space or tab. Everything else passes through byte-for-byte.

The whitespace after the marker never crosses a line break: a line with
nothing but the marker and trailing spaces becomes an empty block rather
than pulling in the following line. A `\r` before the newline is treated
as part of the line ending, so CRLF text keeps its CRLF endings.
"""

import logging
import re
import time
from collections.abc import MutableMapping
from typing import Any, Callable, Optional

from .escaping import escape_pattern
from .schemas import (
    MarkerBlockConfig,
    StepContext,
    StepDescription,
    StepOption,
    StepResult,
)

logger = logging.getLogger(__name__)

MISSING_CONFIG_WARNING = (
    "Smart Style Replacer: Marker or Style Name is missing. Skipping step."
)

# Horizontal whitespace only; \r stays with the line ending
_MARKER_TEMPLATE = r"^{marker}[^\S\r\n]+([^\r\n]*)(?=\r?$)"

_BLOCK_OPENING = '::: {{custom-style="{style}" .{style}}}'
_BLOCK_CLOSING = ":::"


class MarkerBlockTransformer:
    """Rewrites marker-prefixed scene lines into styled fenced divs.

    Stateless. The pattern is compiled per call since marker and style
    can differ between invocations.
    """

    step_key = "smart_style_replacer"

    description = StepDescription(
        name="Smart Style Replacer",
        description=(
            "Wraps text lines starting with a specific marker into a Pandoc "
            "custom-style block (Fenced Div). Ideal for chat logs, poetry, "
            "or special formatting."
        ),
        available_kinds=["Scene"],
        options=[
            StepOption(
                id="marker",
                name="Line Marker",
                description=(
                    "The short code at the start of the line (e.g. '>r' or "
                    "'>l'). The script assumes there is at least one space "
                    "after the marker."
                ),
                type="Text",
                default=">r",
            ),
            StepOption(
                id="styleName",
                name="Style Name (Word & CSS)",
                description=(
                    "The name of the style to apply. Must match a style in "
                    "your Reference Doc (for Word) and a class in your CSS "
                    "(for EPUB). Example: 'RightAligned'."
                ),
                type="Text",
                default="RightAligned",
            ),
        ],
    )

    # ── Pattern construction ──────────────────────────────

    @staticmethod
    def build_pattern(marker: str) -> re.Pattern:
        """Compile the line pattern for a (stripped) marker."""
        return re.compile(
            _MARKER_TEMPLATE.format(marker=escape_pattern(marker)),
            re.MULTILINE,
        )

    @staticmethod
    def build_replacement(style_name: str) -> Callable[[re.Match], str]:
        """Replacement that wraps the captured line text in a styled fenced div.

        A callable rather than a template string, so backslashes in the
        style name are never read as group references.
        """
        opening = _BLOCK_OPENING.format(style=style_name)

        def _render(match: re.Match) -> str:
            return f"{opening}\n{match.group(1)}\n{_BLOCK_CLOSING}"

        return _render

    # ── Execution ─────────────────────────────────────────

    async def apply(self, scenes: Any, config: MarkerBlockConfig) -> StepResult:
        """Run the step and report what happened.

        Args:
            scenes: Ordered sequence of objects exposing a `contents`
                attribute, or mappings with a "contents" key
            config: Marker and style name

        Returns:
            StepResult carrying the same `scenes` object that was passed in
        """
        start_time = time.time()

        if not config.is_complete:
            logger.warning(MISSING_CONFIG_WARNING)
            return StepResult(
                success=True,
                skipped=True,
                warning=MISSING_CONFIG_WARNING,
                scenes=scenes,
            )

        pattern = self.build_pattern(config.marker)
        render = self.build_replacement(config.style_name)

        scenes_modified = 0
        replacements = 0
        for index, scene in enumerate(scenes):
            is_mapping = isinstance(scene, MutableMapping)
            if is_mapping:
                contents = scene.get("contents")
            else:
                contents = getattr(scene, "contents", None)
            if not contents:
                continue

            new_contents, count = pattern.subn(render, contents)
            if count:
                if is_mapping:
                    scene["contents"] = new_contents
                else:
                    scene.contents = new_contents
                scenes_modified += 1
                replacements += count
                logger.debug(f"Scene {index}: wrapped {count} line(s)")

        elapsed = int((time.time() - start_time) * 1000)
        logger.info(
            f"Wrapped {replacements} line(s) in {scenes_modified} scene(s) "
            f"with style '{config.style_name}'"
        )
        return StepResult(
            success=True,
            scenes=scenes,
            scenes_modified=scenes_modified,
            replacements=replacements,
            execution_time_ms=elapsed,
        )

    async def transform(self, scenes: Any, config: MarkerBlockConfig) -> Any:
        """Rewrite marked lines in place and return the same sequence."""
        result = await self.apply(scenes, config)
        return result.scenes

    async def compile(self, scenes: Any, context: StepContext) -> Any:
        """Host entry point: options come from the pipeline context."""
        return await self.transform(scenes, MarkerBlockConfig.from_context(context))


# Global step instance
_transformer: Optional[MarkerBlockTransformer] = None


def get_marker_block_transformer() -> MarkerBlockTransformer:
    """Get the global marker block step instance."""
    global _transformer
    if _transformer is None:
        _transformer = MarkerBlockTransformer()
    return _transformer
