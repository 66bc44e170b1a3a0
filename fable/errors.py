from typing import Optional
from fable.types import ErrorVal


class FableError(Exception):
    """Exception type used to abort a story run with a fatal error."""
    def __init__(self, err: ErrorVal, line: Optional[int] = None, text: Optional[str] = None):
        super().__init__(err.message)
        self.err = err
        self.line = line
        self.text = text

    @property
    def name(self) -> str:
        return self.err.name

    def at_line(self, line: int, text: str) -> 'FableError':
        # keep the innermost location if one was already attached
        if self.line is None:
            self.line = line
            self.text = text
        return self

    def __str__(self) -> str:
        msg = f"FableError: {self.err.name}: {self.err.message}"
        if self.line is not None:
            msg += f" (line {self.line}: {self.text!r})"
        return msg
