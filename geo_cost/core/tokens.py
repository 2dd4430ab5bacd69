"""
Average token counts per pipeline phase.

Assumes a prompt of ~35 words and an answer of ~400 words, with
1 word ~ 1.3 tokens.
"""

from dataclasses import dataclass

from .errors import InvalidInput


@dataclass(frozen=True)
class TokenAssumptions:
    """Average token counts for the two passes of a run.

    Pass 2 input is the pass 1 answer plus the extraction prompt; pass 2
    output is the structured JSON of extracted mentions.
    """
    pass1_input: int
    pass1_output: int
    pass2_input: int
    pass2_output: int

    def __post_init__(self):
        """Validate token counts are non-negative."""
        for attr in ("pass1_input", "pass1_output", "pass2_input", "pass2_output"):
            if getattr(self, attr) < 0:
                raise InvalidInput(f"{attr} cannot be negative")

    @property
    def pass1_total(self) -> int:
        return self.pass1_input + self.pass1_output

    @property
    def pass2_total(self) -> int:
        return self.pass2_input + self.pass2_output


DEFAULT_TOKEN_ASSUMPTIONS = TokenAssumptions(
    pass1_input=50,
    pass1_output=500,
    pass2_input=600,
    pass2_output=100,
)
