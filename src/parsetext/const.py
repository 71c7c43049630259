"""
General use constants.
"""

from __future__ import annotations
from typing import Final

END_OF_INPUT: Final[str] = "end of input"
"""How a missing token is described in failure messages."""
NO_ALTERNATIVE: Final[str] = "No alternative matched."

ANY_CHAR: Final[str] = "any character"
LETTER: Final[str] = "any letter"
SPACE: Final[str] = "any space"
DIGIT: Final[str] = "any digit"
