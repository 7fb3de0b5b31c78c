"""Commands of the logo language. A command is one non-empty source line, already split on whitespace:

```
<command>  ::= <opcode> <token>*
<token>    ::= ":" <name>                ; variable lookup
             | '"' <char>*               ; literal
             | "XCOR" | "YCOR" | "HEADING" | "COLOR"
             | <operator> | "["
<comment>  ::= "//" <char>*
```

This module checks the shape of a command and resolves its tokens. It never changes turtle or variable state.
"""

from enum import Enum

from logo.lang.error import ErrorKind, LogoError
from logo.lang.expression import BLOCK_OPEN, OPERATORS, format_number


COMMENT = "//"
BLOCK_CLOSE = "]"
PROCEDURE_START = "TO"
PROCEDURE_END = "END"

VARIABLE_SIGIL = ":"
LITERAL_SIGIL = "\""

QUERIES = ("XCOR", "YCOR", "HEADING", "COLOR")

NO_ARGUMENTS = ("PENUP", "PENDOWN", PROCEDURE_END)
CONDITIONALS = ("IF", "WHILE")
ONE_ARGUMENT = ("FORWARD", "BACK", "LEFT", "RIGHT", "SETPENCOLOR", "TURN", "SETHEADING", "SETX", "SETY")
TWO_ARGUMENTS = ("MAKE", "ADDASSIGN")


class Classification(Enum):
    EXPRESSION_EXPECTED = "expression expected"
    NO_EXPRESSION = "no expression"


class Command:
    """One line of a logo program. line_num is the line of the source file it came from, if any."""

    def __init__(self, tokens, line_num=None):
        if isinstance(tokens, str):
            tokens = tokens.split()
        if not tokens:
            raise ValueError("a command needs at least one token")

        self.tokens = tuple(tokens)
        self.line_num = line_num

    @property
    def opcode(self):
        return self.tokens[0]

    @property
    def args(self):
        return self.tokens[1:]

    def check_command(self):
        """Checks the argument count of this command and returns whether an expression is expected in it."""
        args = self.args

        if self.opcode in NO_ARGUMENTS:
            if args:
                raise self._argument_count_error("no arguments")

        elif self.opcode == PROCEDURE_START:
            if not args:
                raise self._argument_count_error("a procedure name")

        elif self.opcode in CONDITIONALS:
            if len(args) < 2:
                raise self._argument_count_error("a condition and '['")
            if args[-1] != BLOCK_OPEN:
                raise LogoError(ErrorKind.MALFORMED_BLOCK, "'{}' is missing a block open '['", str(self))
            return Classification.EXPRESSION_EXPECTED

        elif self.opcode in ONE_ARGUMENT:
            if args and args[0] in OPERATORS:
                return Classification.EXPRESSION_EXPECTED
            if len(args) != 1:
                raise self._argument_count_error("1 argument")

        elif self.opcode in TWO_ARGUMENTS:
            if len(args) >= 2 and args[1] in OPERATORS:
                return Classification.EXPRESSION_EXPECTED
            if len(args) != 2:
                raise self._argument_count_error("2 arguments")

        return Classification.NO_EXPRESSION

    def get_tokens(self, turtle, variables):
        """Returns the arguments of this command with variables and queries substituted. turtle only has to be
        readable: position, heading and color.
        """
        if self.opcode == COMMENT:
            return []

        args = self.args
        tokens = []
        if self.opcode == PROCEDURE_START:
            tokens.append(args[0])  # procedure name is taken verbatim
            args = args[1:]

        for token in args:
            tokens.append(resolve_token(token, turtle, variables))
        return tokens

    def _argument_count_error(self, expected):
        return LogoError(ErrorKind.INVALID_ARGUMENT_COUNT, "'{}' expects {}, got {}",
                         [self.opcode, expected, str(len(self.args))])

    def __repr__(self):
        return f"Command('{self}')"

    def __str__(self):
        return " ".join(self.tokens)


def resolve_token(token, turtle, variables):
    """Resolves a single raw token to a value token."""
    if token.startswith(VARIABLE_SIGIL):
        name = token[1:]
        if name not in variables:
            raise LogoError(ErrorKind.UNDEFINED_VARIABLE, "variable '{}' is not defined", name)
        return variables[name]

    elif token.startswith(LITERAL_SIGIL):
        return token[1:]

    elif token == "XCOR":
        return format_number(turtle.coords[0])
    elif token == "YCOR":
        return format_number(turtle.coords[1])
    elif token == "HEADING":
        return str(turtle.heading)
    elif token == "COLOR":
        return str(turtle.color)

    elif token in OPERATORS or token == BLOCK_OPEN:
        return token

    raise LogoError(ErrorKind.INVALID_TOKEN, "'{}' is not a valid token", token)


def check_procedures(commands):
    """Checks that there are as many procedure starts as procedure ends in commands."""
    starts = sum(1 for command in commands if command.opcode == PROCEDURE_START)
    ends = sum(1 for command in commands if command.opcode == PROCEDURE_END)

    if starts > ends:
        raise LogoError(ErrorKind.UNBALANCED_PROCEDURES, "too many {}, not enough {} ({} vs {})",
                        [PROCEDURE_START, PROCEDURE_END, str(starts), str(ends)])
    elif ends > starts:
        raise LogoError(ErrorKind.UNBALANCED_PROCEDURES, "too many {}, not enough {} ({} vs {})",
                        [PROCEDURE_END, PROCEDURE_START, str(ends), str(starts)])
