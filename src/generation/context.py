"""Relevance filtering and numbered context assembly."""

import logging

from src.config import RetrievalConfig
from src.models.answer import AssembledContext
from src.models.vector import Match

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n---\n\n"
MISSING_CONTENT = "[content not found]"
DEFAULT_PAGE_TITLE = "Web page"


class ContextAssembler:
    """Builds the numbered ``SECTION <n>:`` context for one answer turn.

    Args:
        min_score: Matches scoring at or below this are dropped.
        max_sections: Maximum number of sections kept.
    """

    def __init__(self, min_score: float = 0.5, max_sections: int = 5) -> None:
        self.min_score = min_score
        self.max_sections = max_sections

    @classmethod
    def from_config(cls, config: RetrievalConfig) -> "ContextAssembler":
        return cls(min_score=config.min_score, max_sections=config.max_sections)

    def filter_matches(self, matches: list[Match]) -> list[Match]:
        """Keep matches above the threshold, capped at max_sections.

        Input order is preserved; matches arrive score-sorted, so the cap is
        a plain prefix take.
        """
        relevant = [m for m in matches if m.score > self.min_score]
        return relevant[: self.max_sections]

    @staticmethod
    def source_label(match: Match) -> str:
        """Return a human-readable source label for a match. Never raises."""
        metadata = match.metadata
        url = metadata.get("url")
        if url:
            title = metadata.get("title") or DEFAULT_PAGE_TITLE
            return f"{title} ({url})"

        file_name = metadata.get("fileName") or metadata.get("file_name")
        if file_name:
            return f"File: {file_name}"

        return f"{DEFAULT_PAGE_TITLE} ({str(match.id)[:8]}...)"

    def assemble(self, matches: list[Match]) -> AssembledContext:
        """Number the retained matches and build the context text.

        Args:
            matches: Retrieval results in descending score order.

        Returns:
            AssembledContext whose section_map keys are exactly 1..N. Both
            fields are empty when no match passes the filter.
        """
        retained = self.filter_matches(matches)
        if not retained:
            logger.info(
                "No match above %.2f among %d candidates",
                self.min_score,
                len(matches),
            )
            return AssembledContext()

        parts: list[str] = []
        section_map: dict[int, str] = {}
        for number, match in enumerate(retained, start=1):
            content = match.metadata.get("content") or MISSING_CONTENT
            parts.append(f"SECTION {number}:\n{content}")
            section_map[number] = self.source_label(match)

        return AssembledContext(
            context_text=SECTION_SEPARATOR.join(parts),
            section_map=section_map,
        )
