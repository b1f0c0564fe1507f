"""Configuration errors for the directory, search and roulette settings."""

from typing import Dict, List, Optional

# Section used for problems that are not tied to one config section
GENERAL_SECTION = "general"


class ConfigurationError(Exception):
    """
    Raised when settings cannot be loaded or fail validation.

    Problems are reported per config section (``search``, ``matching``,
    ``openai``, ``logging``, ``advanced``) together with where the values came
    from, so one run shows everything that needs fixing.

    Attributes:
        message: Summary of what failed
        source: Config file path, ``"environment"``, or None when unknown
        section_errors: Problems keyed by config section, in report order
        suggestions: Fixes worth trying
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        source: Optional[str] = None,
        section_errors: Optional[Dict[str, List[str]]] = None,
    ):
        self.message = message
        self.source = source
        self.suggestions = suggestions or []
        self.section_errors: Dict[str, List[str]] = {
            section: list(problems) for section, problems in (section_errors or {}).items()
        }
        if errors:
            self.section_errors.setdefault(GENERAL_SECTION, []).extend(errors)
        super().__init__(self._format_message())

    @property
    def errors(self) -> List[str]:
        """Every problem, flattened in report order."""
        return [problem for problems in self.section_errors.values() for problem in problems]

    @property
    def sections(self) -> List[str]:
        """Config sections that have at least one problem."""
        return [section for section, problems in self.section_errors.items() if problems]

    def _format_message(self) -> str:
        header = f"{self.message} [{self.source}]" if self.source else self.message
        lines = [header]

        for section in self.sections:
            lines.append(f"\nIn '{section}':")
            lines.extend(f"  - {problem}" for problem in self.section_errors[section])

        if self.suggestions:
            lines.append("\nTo fix:")
            lines.extend(f"  * {suggestion}" for suggestion in self.suggestions)

        return "\n".join(lines)
