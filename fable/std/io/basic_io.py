import builtins
import sys
from collections import deque
from typing import Iterable, List, Optional
from fable.errors import FableError
from fable.types import ErrorVal

CLEAR_SCREEN = '\x1b[2J\x1b[1;1H'


class BasicIO:
    """Console boundary: stdout for the transcript, stdin for answers."""

    def write_line(self, text: str = '') -> None:
        print(text)

    def read_line(self) -> str:
        try:
            line = builtins.input()
        except EOFError:
            raise FableError(ErrorVal('EndOfInput', 'input was closed while waiting for an answer'))
        return line.replace('\r\n', '').replace('\n', '')

    def clear(self) -> None:
        sys.stdout.write(CLEAR_SCREEN)
        sys.stdout.flush()


class BufferedIO(BasicIO):
    """In-memory boundary fed from a list of scripted answers."""

    def __init__(self, answers: Optional[Iterable[str]] = None):
        self.answers = deque(answers or [])
        self.lines: List[str] = []
        self.clears = 0

    def write_line(self, text: str = '') -> None:
        self.lines.append(text)

    def read_line(self) -> str:
        if not self.answers:
            raise FableError(ErrorVal('EndOfInput', 'no scripted answers left'))
        return self.answers.popleft()

    def clear(self) -> None:
        self.clears += 1

    @property
    def output(self) -> str:
        return '\n'.join(self.lines)


def read_script(filename: str) -> str:
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError:
        raise FableError(ErrorVal('FileNotFoundError', f"couldn't open {filename}: file not found"))
    except PermissionError:
        raise FableError(ErrorVal('PermissionError', f"couldn't open {filename}: permission denied"))
    except (OSError, UnicodeDecodeError) as e:
        raise FableError(ErrorVal('IOError', f"couldn't read {filename}: {e}"))
