"""Per-call encoder options."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EncodeOptions:
    """Options for a single ``encode`` call.

    Attributes:
        enable_abbreviations: Rewrite repeated path prefixes into ``@alias`` tokens.
        abbreviation_threshold: Minimum number of lines sharing a prefix before
            it is considered for an alias.
    """
    enable_abbreviations: bool = True
    abbreviation_threshold: int = 2

    def __post_init__(self):
        if self.abbreviation_threshold < 1:
            raise ValueError(
                f"abbreviation_threshold must be >= 1, got {self.abbreviation_threshold}"
            )
