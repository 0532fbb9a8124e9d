"""
Analysis configuration.

An AnalysisConfig bundles everything one run needs: where the solution is,
which namespace prefix to analyse, which methods may not close a cycle, and
how to report the result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

from .analysis.cycles.filters import IgnorePolicy

OUTPUT_FORMATS = ("text", "json")


def parse_ignore_list(value: Optional[str]) -> FrozenSet[str]:
    """Split a comma-separated ignore list.

    Entries are kept verbatim, since they are matched exactly against
    ``"ContainingType.Name"`` strings. An absent value gives an empty set.
    """
    if value is None:
        return frozenset()
    return frozenset(value.split(","))


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings for one analysis run.

    Attributes:
        solution_path: File or directory to analyse.
        namespace_filter: Module prefix a method must have to be analysed.
        ignore_list: Qualified names excluded from closing a cycle.
        output_format: One of OUTPUT_FORMATS.
        output: File to write the report to; stdout when None.
    """

    solution_path: Path
    namespace_filter: str
    ignore_list: FrozenSet[str] = field(default_factory=frozenset)
    output_format: str = "text"
    output: Optional[Path] = None

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError("unknown output format '%s'" % self.output_format)

    @classmethod
    def from_args(cls, args) -> "AnalysisConfig":
        """Build a config from parsed command-line arguments."""
        return cls(
            solution_path=Path(args.solution_path),
            namespace_filter=args.namespace_filter,
            ignore_list=parse_ignore_list(args.ignore_list),
            output_format=getattr(args, "format", "text"),
            output=getattr(args, "output", None),
        )

    def policy(self) -> IgnorePolicy:
        return IgnorePolicy(self.namespace_filter, self.ignore_list)
