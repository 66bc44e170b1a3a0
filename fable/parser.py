"""Parser for the Fable story language.

A story is a plain text file where every line is a command selected by
its first character:

    (empty)          no-op
    :name            label declaration
    *text            comment
    |                blank output line
    #name            jump to a label
    !cond:then:else  conditional branch (else part optional)
    @name=expr       assignment
    ?prompt:#label   multiple choice option (consecutive lines form a menu)
    ^i prompt:@var   numeric input (^s for free text)
    ~                pause until Enter is pressed
    `                clear the display
    anything else    print with @variable interpolation

`parse_story` classifies each line into a node from `fable.ast`. Lines
that do not tokenize are kept as `Invalid` nodes so that the error is only
reported if the interpreter actually reaches them.
"""

from __future__ import annotations

from typing import List, Tuple

from .ast import (
    Node, Story, Empty, LabelDecl, Comment, BlankOutput, Goto, Conditional,
    Assign, Choice, Input, Pause, Clear, Print, Invalid, Branch,
)
from .errors import FableError
from .types import ErrorVal


def malformed_token(text: str, count: int, expected: str, delim: str, index: int) -> FableError:
    return FableError(ErrorVal(
        'MalformedToken',
        f'the token {text!r} contained {count} parts but should have {expected} '
        f'at line {index + 1}; it should be separated by {delim!r}',
    ))


def split_exact(text: str, delim: str, index: int) -> Tuple[str, str]:
    """Split `text` on `delim` into exactly two fields."""
    parts = text.split(delim)
    if len(parts) != 2:
        raise malformed_token(text, len(parts), 'exactly 2', delim, index)
    return parts[0], parts[1]


def split_branch(text: str, delim: str, index: int) -> Tuple[int, List[str]]:
    """Split `text` on `delim` into 2 or 3 fields.

    Returns the field count and the fields, padded with an empty string
    when only two were present.
    """
    parts = text.split(delim)
    if len(parts) < 2 or len(parts) > 3:
        raise malformed_token(text, len(parts), '2 or 3', delim, index)
    count = len(parts)
    if count == 2:
        parts.append('')
    return count, parts


def label_name(text: str) -> str:
    """Strip goto decoration (`#` and `:`) from a jump target."""
    return text.replace('#', '').replace(':', '').strip()


def invalid(index: int, text: str, err: FableError) -> Invalid:
    return Invalid(index, text, err.err.name, err.err.message)


def parse_branch(branch: str, index: int, text: str) -> Branch:
    """Classify the then/else part of a conditional line."""
    branch = branch.strip()
    if branch.startswith('#'):
        return Goto(index, text, label_name(branch))
    if branch.startswith('@'):
        try:
            name, expr = split_exact(branch, '=', index)
        except FableError as e:
            return invalid(index, text, e)
        return Assign(index, text, name[1:].strip(), expr)
    if branch.startswith('"'):
        quoted = branch[1:]
        if not quoted.endswith('"'):
            return Invalid(
                index, text, 'UnterminatedQuote',
                f'a branch starting with " must also end with " at line {index + 1}',
            )
        return Print(index, text, quoted.rstrip('"'))
    return Print(index, text, branch)


def parse_line(text: str, index: int) -> Node:
    if not text:
        return Empty(index, text)
    marker = text[0]
    if marker == ':':
        return LabelDecl(index, text, text[1:].strip())
    if marker == '*':
        return Comment(index, text)
    if marker == '|':
        return BlankOutput(index, text)
    if marker == '#':
        return Goto(index, text, label_name(text))
    if marker == '!':
        try:
            count, (condition, then_part, else_part) = split_branch(text, ':', index)
        except FableError as e:
            return invalid(index, text, e)
        else_branch = parse_branch(else_part, index, text) if count == 3 else None
        return Conditional(index, text, condition[1:], parse_branch(then_part, index, text), else_branch)
    if marker == '@':
        try:
            name, expr = split_exact(text, '=', index)
        except FableError:
            # prose that merely starts with @ is printed
            return Print(index, text, text)
        return Assign(index, text, name[1:].strip(), expr)
    if marker == '?':
        try:
            prompt, target = split_exact(text, ':', index)
        except FableError as e:
            return invalid(index, text, e)
        return Choice(index, text, prompt[1:], label_name(target))
    if marker == '^':
        try:
            spec, variable = split_exact(text, ':', index)
        except FableError as e:
            return invalid(index, text, e)
        return Input(index, text, spec[1:2], spec[2:].strip(), variable.strip().lstrip('@'))
    if marker == '~':
        return Pause(index, text)
    if marker == '`':
        return Clear(index, text)
    return Print(index, text, text)


def split_lines(source: str) -> List[str]:
    """Split on newlines only, dropping a trailing carriage return per line."""
    lines = source.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


def parse_story(source: str) -> Story:
    """Classify every line of `source` into a `Story`."""
    return Story([parse_line(text, index) for index, text in enumerate(split_lines(source))])
