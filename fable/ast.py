"""Line node definitions for the Fable story language.

Every script line is classified once, at parse time, into exactly one of
the node types below. The interpreter dispatches on the node type instead
of re-reading the leading marker character. Each node records its 0-based
`index` in the script and the raw `text` of the line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class Node:
    """Base class for all line nodes."""
    index: int
    text: str


@dataclass
class Empty(Node):
    pass


@dataclass
class LabelDecl(Node):
    name: str


@dataclass
class Comment(Node):
    pass


@dataclass
class BlankOutput(Node):
    pass


@dataclass
class Goto(Node):
    label: str


@dataclass
class Assign(Node):
    name: str
    expr: str


@dataclass
class Print(Node):
    message: str


@dataclass
class Invalid(Node):
    """A line that failed to tokenize. Raises its error when executed."""
    error: str
    message: str


Branch = Union[Goto, Assign, Print, Invalid]


@dataclass
class Conditional(Node):
    condition: str
    then_branch: Branch
    else_branch: Optional[Branch] = None


@dataclass
class Choice(Node):
    prompt: str
    target: str


@dataclass
class Input(Node):
    mode: str  # 'i' numeric, 's' string; anything else fails when executed
    prompt: str
    variable: str


@dataclass
class Pause(Node):
    pass


@dataclass
class Clear(Node):
    pass


@dataclass
class Story:
    lines: List[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)
