"""
Prompt Builder

Builds the review prompt sent to the completion endpoint.
"""

from ..config import DEFAULT_INSTRUCTIONS


SYSTEM_PROMPT = "You are a code reviewer bot."
DIFF_SECTION_HEADER = "## Code Changes (Diffs):"
FULL_FILES_SECTION_HEADER = "## Full Content of Updated Files:"


class ReviewPromptComposer:
    """Composes a review prompt from the diff block and the full-file block."""

    def __init__(self, instructions: str = DEFAULT_INSTRUCTIONS):
        self.instructions = instructions

    def compose(self, diff_text: str, full_files_text: str) -> str:
        """
        Compose the user prompt.

        Both blocks are embedded verbatim; nothing is truncated.

        Args:
            diff_text: Concatenated per-file diff fragments
            full_files_text: Concatenated per-file full-content fragments

        Returns:
            Prompt text
        """
        lines = [
            self.instructions,
            DIFF_SECTION_HEADER,
            diff_text,
            FULL_FILES_SECTION_HEADER,
            full_files_text,
        ]
        return "".join(f"{line}\n" for line in lines)
