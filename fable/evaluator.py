"""Expression evaluation for Fable.

Two evaluators live here:

* `evaluate` computes a single arithmetic expression (`2+3*4`,
  `sqrt(16)`, `-2^2`) with a small LALR grammar. Anything that is not a
  valid arithmetic expression is returned unchanged as literal text, which
  is how assignments can hold either numbers or strings.
* `compare` splits a relational expression on its operator and compares
  both sides, numerically when possible and as text otherwise.
"""

from __future__ import annotations

import math
import re
from typing import Dict, List, Tuple

from lark import Lark, v_args
from lark.visitors import Transformer_NonRecursive
from lark.exceptions import LarkError

from .builtin_function import BuiltinFunction
from .errors import FableError
from .types import ErrorVal, Value, approx_eq

ARITH_GRAMMAR = r"""
    ?start: sum

    ?sum: product
        | sum "+" product      -> add
        | sum "-" product      -> sub

    ?product: power
            | product "*" power  -> mul
            | product "/" power  -> div
            | product "%" power  -> mod

    // left associative, and unary minus binds tighter: -2^2 == 4
    ?power: unary
          | power "^" unary    -> pow

    ?unary: atom
          | "-" unary          -> neg
          | "+" unary

    ?atom: NUMBER              -> number
         | NAME                -> constant
         | NAME "(" [sum ("," sum)*] ")" -> call
         | "(" sum ")"

    %import common.NUMBER
    %import common.CNAME -> NAME
    %import common.WS
    %ignore WS
"""

ARITH_PARSER = Lark(
    ARITH_GRAMMAR,
    parser='lalr',
    maybe_placeholders=False,
)

RELATIONAL_OPERATOR = re.compile(r'!=|==|<=|>=|<|>')


class EvaluationError(Exception):
    pass


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _modulo(a: float, b: float) -> float:
    if b == 0.0:
        return math.nan
    return math.fmod(a, b)


def _power(a: float, b: float) -> float:
    try:
        result = a ** b
    except ZeroDivisionError:
        return math.inf
    except OverflowError:
        return math.inf
    if isinstance(result, complex):
        return math.nan
    return result


def _factorial(a: float) -> float:
    if a < 0.0 or math.isnan(a):
        return math.nan
    if a > 170.0:
        return math.inf
    return float(math.factorial(int(a)))


def _combinations(n: float, r: float):
    if n < 0.0 or r < 0.0 or n < r:
        return math.nan
    return math.comb(int(n), int(r))


def _permutations(n: float, r: float):
    if n < 0.0 or r < 0.0 or n < r:
        return math.nan
    return math.perm(int(n), int(r))


def _safe(fn):
    def wrapper(*args: float) -> float:
        try:
            return float(fn(*args))
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf
    return wrapper


def _log(a: float) -> float:
    if a == 0.0:
        return -math.inf
    return math.log(a)


def _log10(a: float) -> float:
    if a == 0.0:
        return -math.inf
    return math.log10(a)


FUNCTIONS: Dict[str, BuiltinFunction] = {
    f.name: f for f in (
        BuiltinFunction('abs', 1, _safe(math.fabs)),
        BuiltinFunction('acos', 1, _safe(math.acos)),
        BuiltinFunction('asin', 1, _safe(math.asin)),
        BuiltinFunction('atan', 1, _safe(math.atan)),
        BuiltinFunction('atan2', 2, _safe(math.atan2)),
        BuiltinFunction('ceil', 1, _safe(math.ceil)),
        BuiltinFunction('cos', 1, _safe(math.cos)),
        BuiltinFunction('cosh', 1, _safe(math.cosh)),
        BuiltinFunction('exp', 1, _safe(math.exp)),
        BuiltinFunction('fac', 1, _factorial),
        BuiltinFunction('floor', 1, _safe(math.floor)),
        BuiltinFunction('ln', 1, _safe(_log)),
        BuiltinFunction('log', 1, _safe(_log10)),
        BuiltinFunction('log10', 1, _safe(_log10)),
        BuiltinFunction('ncr', 2, _safe(_combinations)),
        BuiltinFunction('npr', 2, _safe(_permutations)),
        BuiltinFunction('pow', 2, _power),
        BuiltinFunction('sin', 1, _safe(math.sin)),
        BuiltinFunction('sinh', 1, _safe(math.sinh)),
        BuiltinFunction('sqrt', 1, _safe(math.sqrt)),
        BuiltinFunction('tan', 1, _safe(math.tan)),
        BuiltinFunction('tanh', 1, _safe(math.tanh)),
    )
}

CONSTANTS: Dict[str, float] = {
    'pi': math.pi,
    'e': math.e,
}


@v_args(inline=True)
class ArithmeticTransformer(Transformer_NonRecursive):
    """Folds the arithmetic parse tree into a float.

    Non-recursive so long chains like 1+1+...+1 do not exhaust the stack.
    """

    def number(self, token):
        return float(token)

    def constant(self, token):
        name = str(token)
        if name not in CONSTANTS:
            raise EvaluationError(f'unknown constant {name}')
        return CONSTANTS[name]

    def call(self, token, *args):
        name = str(token)
        func = FUNCTIONS.get(name)
        if func is None:
            raise EvaluationError(f'unknown function {name}')
        if func.arity is not None and len(args) != func.arity:
            raise EvaluationError(f'{name} expects {func.arity} arguments')
        return func.fn(*args)

    def add(self, a, b):
        return a + b

    def sub(self, a, b):
        return a - b

    def mul(self, a, b):
        return a * b

    def div(self, a, b):
        return _divide(a, b)

    def mod(self, a, b):
        return _modulo(a, b)

    def pow(self, a, b):
        return _power(a, b)

    def neg(self, a):
        return -a


ARITH_TRANSFORMER = ArithmeticTransformer()


def evaluate(text: str) -> Value:
    """Evaluate `text` as arithmetic, or return it unchanged as a string."""
    try:
        tree = ARITH_PARSER.parse(text)
        result = ARITH_TRANSFORMER.transform(tree)
    except LarkError:
        return text
    return result


def split_expression(text: str) -> Tuple[str, str, str]:
    """Split a relational expression into (left, operator, right)."""
    match = RELATIONAL_OPERATOR.search(text)
    if match is None:
        raise FableError(ErrorVal('MalformedExpression', f'no relational operator found in {text!r}'))
    op = match.group(0)
    parts: List[str] = text.split(op)
    if len(parts) != 2:
        raise FableError(ErrorVal(
            'MalformedExpression',
            f'expressions must contain a left side, a right side and one operator: {text!r}',
        ))
    return parts[0], op, parts[1]


def compare(text: str) -> bool:
    """Evaluate a relational expression such as `@gold>=10`."""
    left, op, right = split_expression(text)
    lvalue = evaluate(left)
    rvalue = evaluate(right)
    numeric = isinstance(lvalue, float) and isinstance(rvalue, float)
    if op == '==':
        return approx_eq(lvalue, rvalue) if numeric else left == right
    if op == '!=':
        return not approx_eq(lvalue, rvalue) if numeric else left != right
    if not numeric:
        raise FableError(ErrorVal('TypeError', f'strings cannot be compared with {op}'))
    if op == '<':
        return lvalue < rvalue
    if op == '>':
        return lvalue > rvalue
    if op == '<=':
        return lvalue <= rvalue
    return lvalue >= rvalue
