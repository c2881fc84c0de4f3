"""
Code block extraction for model answers.

Models are prompted to explain first and give the complete fixed source
last, and often quote partial snippets along the way. Only the last
fenced block is taken as the answer.
"""

import re
from typing import List, Optional

from jester.core.models import FencedBlock

CODE_BLOCK_PATTERN = re.compile(r"```(\w*)\n(.*?)```", re.DOTALL)


class CodeExtractor:
    """Stateless scanner for markdown code fences."""

    def __init__(self, pattern: "re.Pattern[str]" = CODE_BLOCK_PATTERN):
        self.pattern = pattern

    def find_blocks(self, text: str) -> List[FencedBlock]:
        """Return every fenced block in document order."""
        if not text:
            return []
        return [
            FencedBlock(language=m.group(1), payload=m.group(2), start=m.start())
            for m in self.pattern.finditer(text)
        ]

    def extract_last(self, text: str) -> Optional[str]:
        """
        Return the trimmed payload of the textually last fenced block.

        Returns None when the text holds no complete block. Neither the
        first nor the longest block is considered.
        """
        blocks = self.find_blocks(text)
        if not blocks:
            return None
        last = max(blocks, key=lambda block: block.start)
        return last.payload.strip()


_default_extractor = CodeExtractor()


def find_code_blocks(text: str) -> List[FencedBlock]:
    return _default_extractor.find_blocks(text)


def extract_last_code_block(text: str) -> Optional[str]:
    """Module-level shortcut for CodeExtractor().extract_last()."""
    return _default_extractor.extract_last(text)
