import re
from typing import Dict, List
from fable.errors import FableError
from fable.types import ErrorVal

# characters that end a variable name inside text, besides whitespace
VARIABLE_BOUNDARY = r'\s\0+\-<>=().!#:;^/\\@\[\]'
VARIABLE_REFERENCE = re.compile(r'@([^' + VARIABLE_BOUNDARY + r']+)')


class Environment:
    """Variable store mapping names to their textual values."""
    def __init__(self):
        self.values: Dict[str, str] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def declare(self, name: str):
        self.values[name] = '0'

    def get(self, name: str) -> str:
        if name in self.values:
            return self.values[name]
        raise undeclared(name)

    def set(self, name: str, value: str):
        if name not in self.values:
            raise undeclared(name)
        self.values[name] = value

    def references(self, text: str) -> List[str]:
        """Return the distinct variable names referenced in `text`, in order."""
        names: List[str] = []
        for name in VARIABLE_REFERENCE.findall(text):
            if name not in names:
                names.append(name)
        return names

    def interpolate(self, text: str) -> str:
        """Replace every `@name` in `text` with the variable's value.

        All references are resolved before anything is substituted, so the
        result is either fully interpolated or an error is raised.
        """
        resolved = {name: self.get(name) for name in self.references(text)}
        if not resolved:
            return text
        return VARIABLE_REFERENCE.sub(lambda m: resolved[m.group(1)], text)


def undeclared(name: str) -> FableError:
    return FableError(ErrorVal(
        'UndeclaredVariable',
        f'variable {name} is missing; it must be created with @{name}= before it is used',
    ))
