"""Report document model and Markdown serialisation."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ReportSection:
    """One heading plus its body text. Level 2 is a top-level section."""
    heading: str
    body: str = ""
    level: int = 2

    def to_markdown(self) -> str:
        text = f"{'#' * self.level} {self.heading}\n\n"
        if self.body:
            text += self.body.rstrip("\n") + "\n\n"
        return text


@dataclass(frozen=True)
class Report:
    """An ordered, immutable sequence of sections under a title."""
    title: str
    sections: tuple[ReportSection, ...] = field(default_factory=tuple)

    def to_markdown(self) -> str:
        parts = [f"# {self.title}\n\n"]
        parts.extend(section.to_markdown() for section in self.sections)
        return "".join(parts).rstrip("\n") + "\n"

    def headings(self, level: Optional[int] = None) -> list[str]:
        return [s.heading for s in self.sections if level is None or s.level == level]

    def section(self, heading: str) -> ReportSection:
        for s in self.sections:
            if s.heading == heading:
                return s
        raise KeyError(heading)
