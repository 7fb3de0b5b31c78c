"""Prefix (Polish) expression evaluation for the logo language.

Every value in a logo program travels as a string token. Expressions are written operator-first and need no
parentheses, since every operator is binary:

```
<expr>     ::= <operator> <operand> <operand>
<operand>  ::= <expr> | <value>
<operator> ::= "EQ" | "NE" | "GT" | "LT" | "AND" | "OR" | "+" | "-" | "*" | "/"
```

A line holds at most one expression. `evaluate_polish` finds it among the resolved tokens of a command, reduces it,
and splices the result back in.
"""

from dataclasses import dataclass
from enum import Enum

from logo.lang.error import ErrorKind, LogoError


OPERATORS = ("EQ", "NE", "GT", "LT", "AND", "OR", "+", "-", "*", "/")
BLOCK_OPEN = "["

TRUE = "TRUE"
FALSE = "FALSE"


def format_number(number):
    """Formats a float the way logo prints numbers: integral values lose their fractional part."""
    if number != number or number in (float("inf"), float("-inf")):
        return str(number)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def parse_number(token):
    """Parses token as a float. Raises ValueError if token is not plain float text."""
    if "_" in token or token != token.strip():
        raise ValueError(f"'{token}' is not a number")
    return float(token)


def parse_integer(token):
    """Parses token as an integer: an optional sign followed by decimal digits. Raises ValueError otherwise."""
    digits = token[1:] if token[:1] in ("+", "-") else token
    if not digits.isdigit() or not digits.isascii():
        raise ValueError(f"'{token}' is not an integer")
    return int(token)


class ValueKind(Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"


@dataclass(frozen=True)
class Value:
    """Tagged view of a string token. str(value) is the canonical token text that gets stored back into a program."""
    kind: ValueKind
    data: object
    text: str

    @classmethod
    def parse(cls, token):
        if token in (TRUE, FALSE):
            return cls(ValueKind.BOOLEAN, token == TRUE, token)
        try:
            return cls(ValueKind.NUMBER, parse_number(token), token)
        except ValueError:
            return cls(ValueKind.TEXT, token, token)

    @classmethod
    def number(cls, number):
        return cls(ValueKind.NUMBER, float(number), format_number(float(number)))

    @classmethod
    def boolean(cls, flag):
        return cls(ValueKind.BOOLEAN, bool(flag), TRUE if flag else FALSE)

    def as_number(self):
        if self.kind is not ValueKind.NUMBER:
            raise LogoError(ErrorKind.NOT_A_NUMBER, "'{}' is not a number", self.text)
        return self.data

    def as_boolean(self):
        if self.kind is not ValueKind.BOOLEAN:
            raise LogoError(ErrorKind.NOT_A_BOOLEAN, "'{}' is not TRUE or FALSE", self.text)
        return self.data

    def __str__(self):
        if self.kind is ValueKind.NUMBER:
            return format_number(self.data)
        return self.text


class Operation(Enum):
    """Binary operators. operate takes its operands in the order they are popped off the reduction stack, which is
    the order they were written in.
    """
    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    LT = "LT"
    AND = "AND"
    OR = "OR"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    def operate(self, operand1, operand2):
        """Applies this operation to two string tokens and returns the resulting token."""
        if self is Operation.EQ:
            return str(Value.boolean(operand1 == operand2))
        if self is Operation.NE:
            return str(Value.boolean(operand1 != operand2))

        op1, op2 = Value.parse(operand1), Value.parse(operand2)

        if self in (Operation.AND, Operation.OR):
            try:
                left, right = op1.as_boolean(), op2.as_boolean()
            except LogoError:
                raise LogoError(ErrorKind.NOT_A_BOOLEAN, "{} expects 2 booleans, got '{}' and '{}'",
                                [self.value, operand1, operand2])
            return str(Value.boolean(left and right if self is Operation.AND else left or right))

        try:
            left, right = op1.as_number(), op2.as_number()
        except LogoError:
            raise LogoError(ErrorKind.NOT_A_NUMBER, "{} expects 2 numbers, got '{}' and '{}'",
                            [self.value, operand1, operand2])

        if self is Operation.GT:
            return str(Value.boolean(left > right))
        elif self is Operation.LT:
            return str(Value.boolean(left < right))
        elif self is Operation.ADD:
            return str(Value.number(left + right))
        elif self is Operation.SUB:
            return str(Value.number(left - right))
        elif self is Operation.MUL:
            return str(Value.number(left * right))

        if right == 0:
            raise LogoError(ErrorKind.DIVISION_BY_ZERO, "cannot divide '{}' by zero", operand1)
        return str(Value.number(left / right))


def find_span(tokens):
    """Returns the indices of the first prefix expression in tokens, which is empty if tokens has no operator.

    Once the first operator is found, every later operator joins the span, while other tokens join only until there
    is one more of them than there are operators. A block open counts as an operand here even though it has no value.
    """
    span = []
    operators = operands = 0
    for index, token in enumerate(tokens):
        if token in OPERATORS:
            operators += 1
            span.append(index)
        elif span and operands < operators + 1:
            operands += 1
            span.append(index)
    return span


def reduce_span(span):
    """Reduces the tokens of a prefix expression to a single token. Reversing them lets the expression be reduced
    with a postfix stack while keeping operands in the order they were written.
    """
    stack = []
    for token in reversed(span):
        if token in OPERATORS:
            if len(stack) < 2:
                raise LogoError(ErrorKind.MALFORMED_EXPRESSION, "not enough operands for '{}' in '{}'",
                                [token, " ".join(span)])
            operand1 = stack.pop()
            operand2 = stack.pop()
            stack.append(Operation(token).operate(operand1, operand2))
        elif token != BLOCK_OPEN:
            stack.append(token)

    if len(stack) != 1:
        raise LogoError(ErrorKind.MALFORMED_EXPRESSION, "'{}' does not reduce to a single value", " ".join(span))
    return stack[0]


def evaluate_polish(tokens):
    """Returns a copy of tokens with its embedded prefix expression, if any, replaced by the expression's value."""
    span = find_span(tokens)
    if not span:
        return list(tokens)

    result = reduce_span([tokens[index] for index in span])

    members = set(span)
    evaluated = [token for index, token in enumerate(tokens) if index not in members]
    evaluated.insert(span[0], result)
    return evaluated
