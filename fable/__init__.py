# Fable story language package
# This package provides a line-oriented interpreter for branching stories.
from .errors import FableError
from .interpreter import run_story, run_file, Interpreter
from .parser import parse_story

__all__ = [
    'run_story',
    'run_file',
    'parse_story',
    'Interpreter',
    'FableError',
]
