"""Interpreter for the Fable story language.

The interpreter owns the whole narrative state: the classified script,
the label table, the variable store and the program counter (`index`).
Running a story is a two step process:

1. `load` walks the script once and records every label position and
   declares every assigned variable with the value "0". This has to
   happen before execution because a jump may target a label, or reach an
   assignment, further down the file.
2. `step` executes the line under the program counter and either moves
   to the next line or jumps to a label. `run` steps until the program
   counter falls off the end of the script.

All user-visible effects go through the `io` object (see `fable.std.io`),
so stories can be driven by scripted answers in tests.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .ast import (
    Node, Story, Empty, LabelDecl, Comment, BlankOutput, Goto, Conditional,
    Assign, Choice, Input, Pause, Clear, Print, Invalid,
)
from .environment import Environment
from .errors import FableError
from .evaluator import compare, evaluate
from .parser import parse_story
from .std.io import BasicIO, read_script
from .types import ErrorVal, to_string


class Interpreter:
    """Executes a classified Fable story."""
    def __init__(self, io: Optional[BasicIO] = None, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.io = io if io is not None else BasicIO()
        self.story = Story()
        self.labels: Dict[str, int] = {}
        self.env = Environment()
        self.index = 0
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def load(self, story: Story):
        """Index labels and declare variables without executing anything."""
        self.story = story
        self.labels = {}
        self.env = Environment()
        self.index = 0
        for node in story.lines:
            if isinstance(node, LabelDecl):
                # duplicates are allowed, the last declaration wins
                self.labels[node.name] = node.index
            elif isinstance(node, Assign):
                self.env.declare(node.name)
        if self.debug_level >= 1:
            self.debug(f"loaded {len(story)} lines, {len(self.labels)} labels, {len(self.env.values)} variables")

    # Public API
    def run(self, story: Story) -> None:
        self.load(story)
        try:
            while self.step():
                pass
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def step(self) -> bool:
        """Execute the line under the program counter.

        Returns False once the story has finished.
        """
        if self.index >= len(self.story.lines):
            return False
        node = self.story.lines[self.index]
        if self.debug_level >= 4:
            self.debug(f"{node.index + 1}: {type(node).__name__} {node.text!r}")
        try:
            self.execute(node)
        except FableError as e:
            raise e.at_line(node.index + 1, node.text)
        return self.index < len(self.story.lines)

    def fail(self, name: str, message: str) -> FableError:
        return FableError(ErrorVal(name, message))

    def execute(self, node: Node) -> None:
        if isinstance(node, (Empty, LabelDecl, Comment)):
            self.index += 1
            return
        if isinstance(node, BlankOutput):
            self.io.write_line()
            self.index += 1
            return
        if isinstance(node, Goto):
            self.jump(node.label)
            return
        if isinstance(node, Conditional):
            self.execute_conditional(node)
            return
        if isinstance(node, Assign):
            self.assign(node)
            return
        if isinstance(node, Choice):
            self.execute_menu()
            return
        if isinstance(node, Input):
            self.execute_input(node)
            return
        if isinstance(node, Pause):
            self.io.write_line()
            self.io.write_line('Press Enter to Continue.')
            self.io.read_line()
            self.io.clear()
            self.index += 1
            return
        if isinstance(node, Clear):
            self.io.clear()
            self.index += 1
            return
        if isinstance(node, Print):
            self.io.write_line(self.env.interpolate(node.message))
            self.index += 1
            return
        if isinstance(node, Invalid):
            raise self.fail(node.error, node.message)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def jump(self, label: str):
        if label not in self.labels:
            raise self.fail('UndefinedLabel', f'goto {label} is missing')
        if self.debug_level >= 2:
            self.debug(f"goto {label} -> line {self.labels[label] + 1}")
        self.index = self.labels[label]

    def assign(self, node: Assign):
        if node.name not in self.env:
            raise self.fail('UndeclaredVariable', f'variable {node.name} must be created before it can be assigned')
        value = to_string(evaluate(self.env.interpolate(node.expr)))
        self.env.set(node.name, value)
        if self.debug_level >= 2:
            self.debug(f"assign {node.name} = {value!r}")
        self.index += 1

    def execute_conditional(self, node: Conditional):
        expression = self.env.interpolate(node.condition)
        truthy = compare(expression)
        if self.debug_level >= 3:
            self.debug(f"if {expression!r} -> {truthy}")
        branch = node.then_branch if truthy else node.else_branch
        if branch is None:
            self.index += 1
            return
        # branches run in place of the conditional line itself
        self.execute(branch)

    def execute_menu(self):
        lines = self.story.lines
        targets: List[str] = []
        while self.index < len(lines) and lines[self.index].text.startswith('?'):
            option = lines[self.index]
            if isinstance(option, Invalid):
                raise self.fail(option.error, option.message).at_line(option.index + 1, option.text)
            targets.append(option.target)
            self.io.write_line(f"{len(targets)}. {option.prompt}")
            self.index += 1
        choice = self.read_choice(len(targets))
        label = targets[choice - 1]
        if self.debug_level >= 2:
            self.debug(f"menu choice {choice} -> {label}")
        self.jump(label)

    def read_choice(self, count: int) -> int:
        while True:
            self.io.write_line(f"Enter a number from 1 to {count}")
            answer = self.io.read_line()
            # plain ASCII integer only, with at most one sign
            digits = answer[1:] if answer[:1] in ('+', '-') else answer
            if not (digits.isascii() and digits.isdigit()):
                self.io.write_line('You must use a number')
                continue
            choice = int(answer)
            if 1 <= choice <= count:
                return choice

    def execute_input(self, node: Input):
        if node.variable not in self.env:
            raise self.fail(
                'UndeclaredVariable',
                f'variable {node.variable} must be created before an input statement can use it',
            )
        if node.mode == 'i':
            while True:
                self.io.write_line()
                self.io.write_line(node.prompt)
                answer = self.io.read_line()
                if not any(c.isalpha() for c in answer):
                    break
                self.io.write_line('You may only enter in a Number. Please try again.')
        elif node.mode == 's':
            self.io.write_line()
            self.io.write_line(node.prompt)
            answer = self.io.read_line()
        else:
            raise self.fail('InvalidInputMode', 'missing i or s for the input type, for example: ^i how many?:@count')
        self.env.set(node.variable, answer)
        if self.debug_level >= 2:
            self.debug(f"input {node.variable} = {answer!r}")
        self.index += 1


def run_story(source: str, io: Optional[BasicIO] = None, debug_level: int = 0) -> Interpreter:
    """Convenience function to parse and run a story from source text."""
    story = parse_story(source)
    interpreter = Interpreter(io=io, debug_level=debug_level)
    interpreter.run(story)
    return interpreter


def run_file(file_path: str, io: Optional[BasicIO] = None, debug_level: int = 0) -> Interpreter:
    """Read, parse and run a story file, returning the interpreter instance."""
    source = read_script(file_path)
    return run_story(source, io=io, debug_level=debug_level)
