"""Parsing of the used-sections footer out of a model answer."""

import logging
import re

from src.generation.prompt import USED_SECTIONS_MARKER

logger = logging.getLogger(__name__)

# The marker, optionally bolded, and the rest of its line.
MARKER_PATTERN = re.compile(
    r"(?:\*\*)?" + re.escape(USED_SECTIONS_MARKER) + r"(?:\*\*)?[^\S\n]*([^\n]*)"
)
TOKEN_SPLIT = re.compile(r"[,\s]+")
# ASCII digits only; longer runs cannot be a section number.
SECTION_NUMBER = re.compile(r"\d{1,9}", re.ASCII)


def _section_numbers(raw: str) -> list[int]:
    numbers: list[int] = []
    for token in TOKEN_SPLIT.split(raw):
        token = token.strip("[]().*")
        if SECTION_NUMBER.fullmatch(token):
            numbers.append(int(token))
    return numbers


def extract_citations(
    raw_answer: str, section_map: dict[int, str]
) -> tuple[str, list[str]]:
    """Resolve the sections a model cited and strip the footer.

    Looks for the last ``KULLANILAN BÖLÜMLER:`` line. Missing markers and
    markers without any number leave the answer untouched with no sources.
    Unknown section numbers are ignored. Never raises.

    Args:
        raw_answer: Text returned by the chat model.
        section_map: Section number to source label for this turn.

    Returns:
        Tuple of (answer without footer, ordered unique source labels).
    """
    found = list(MARKER_PATTERN.finditer(raw_answer))
    if not found:
        return raw_answer, []

    marker = found[-1]
    numbers = _section_numbers(marker.group(1))
    if not numbers:
        logger.debug("Used-sections marker had no section numbers")
        return raw_answer, []

    sources: list[str] = []
    for number in numbers:
        label = section_map.get(number)
        if label is None:
            logger.debug("Model cited unknown section %d", number)
            continue
        if label not in sources:
            sources.append(label)

    clean_answer = raw_answer[: marker.start()].rstrip()
    return clean_answer, sources
