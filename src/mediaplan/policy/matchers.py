"""Pattern matching for audio track titles.

Commentary tracks are recognised by their title alone; they are kept no
matter which language they are tagged with.
"""

import re
from re import Pattern


class CommentaryMatcher:
    """Matches track titles against commentary patterns.

    Patterns are compiled once and reused. All matching is case-insensitive.
    """

    def __init__(self, patterns: tuple[str, ...]) -> None:
        """Initialize the matcher with regex patterns.

        Args:
            patterns: Tuple of regex pattern strings.

        Raises:
            ValueError: If any pattern is invalid regex.
        """
        self._compiled: list[Pattern[str]] = []

        for idx, pattern in enumerate(patterns):
            try:
                self._compiled.append(re.compile(pattern, re.IGNORECASE))
            except re.error as e:
                raise ValueError(
                    f"Invalid regex pattern at commentary_patterns[{idx}]: {e}"
                ) from e

    def is_commentary(self, title: str | None) -> bool:
        """Check if a track title matches any commentary pattern.

        Args:
            title: Track title to check. None or empty returns False.

        Returns:
            True if the title matches any commentary pattern.
        """
        if not title:
            return False
        return any(compiled.search(title) for compiled in self._compiled)


def validate_regex_patterns(
    patterns: list[str], pattern_name: str = "patterns"
) -> list[str]:
    """Validate a list of regex patterns and return error messages.

    Args:
        patterns: List of pattern strings to validate.
        pattern_name: Name for error messages.

    Returns:
        List of error messages (empty if all patterns are valid).
    """
    errors = []
    for idx, pattern in enumerate(patterns):
        try:
            re.compile(pattern)
        except re.error as e:
            errors.append(f"Invalid regex pattern at {pattern_name}[{idx}]: {e}")
    return errors
