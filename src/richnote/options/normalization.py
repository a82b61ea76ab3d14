#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the normalization engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from richnote.constants import DEFAULT_MAX_NORMALIZATION_PASSES
from richnote.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class NormalizationOptions(CloneFrozenMixin):
    """Configuration options for tree normalization.

    Parameters
    ----------
    max_passes : int, default 10000
        Upper bound on repair passes before NormalizationError is raised.
        Correct rules converge long before this; it only guards against loops.
    log_repairs : bool, default True
        Log each applied repair at DEBUG level. Dropped nodes are always
        logged at WARNING

    """

    max_passes: int = field(
        default=DEFAULT_MAX_NORMALIZATION_PASSES,
        metadata={"help": "Maximum number of repair passes before giving up", "importance": "advanced"},
    )
    log_repairs: bool = field(
        default=True,
        metadata={"help": "Log each repair at DEBUG level", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If max_passes is not positive.

        """
        if self.max_passes <= 0:
            raise ValueError(f"max_passes must be positive, got {self.max_passes}")
