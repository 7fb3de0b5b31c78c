"""Execution engine for the logo language.

A program is a flat list of Commands addressed by index. Control flow is nothing more than moving the program
counter around that list:

- IF cond [ ... ]       when TRUE, the index past the matching ] is pushed onto the block stack so that ] resumes
                        there; when FALSE, the counter jumps straight to the matching ]
- WHILE cond [ ... ]    when TRUE, the index of the WHILE itself is pushed so that ] goes back to re-check cond
- TO name params ... END
                        registers the procedure and skips its body; calling it pushes the call site onto the call
                        stack and END returns there

Every step ends by moving the counter one command forward, so jump targets are always one short of where execution
continues. Variables live in a single global namespace: procedure parameters included.
"""

import math
from dataclasses import dataclass, field

from logo.graphics.image import COLORS
from logo.graphics.turtle import PenState
from logo.lang.command import BLOCK_CLOSE, COMMENT, CONDITIONALS, PROCEDURE_END, PROCEDURE_START
from logo.lang.error import ErrorKind, LogoError
from logo.lang.expression import FALSE, TRUE, Value, ValueKind, evaluate_polish, format_number, parse_integer, \
    parse_number


DIRECTIONS = {"FORWARD": 0, "BACK": 180, "RIGHT": 90, "LEFT": 270}


@dataclass
class Procedure:
    name: str
    params: tuple
    start: int  # index of the TO command


@dataclass
class ExecutionContext:
    """All mutable interpreter state of one run, apart from the turtle and image."""
    counter: int = 0
    variables: dict = field(default_factory=dict)
    procedures: list = field(default_factory=list)
    block_stack: list = field(default_factory=list)
    call_stack: list = field(default_factory=list)

    def find_procedure(self, name):
        for procedure in self.procedures:
            if procedure.name == name:
                return procedure
        return None

    def define_procedure(self, procedure):
        """Adds procedure, replacing any procedure with the same name. Returns whether one was replaced."""
        for idx, existing in enumerate(self.procedures):
            if existing.name == procedure.name:
                self.procedures[idx] = procedure
                return True
        self.procedures.append(procedure)
        return False


class Engine:
    """Runs a list of Commands against a turtle and image. error_handler, if given, receives warnings and traces."""

    def __init__(self, commands, image, turtle, error_handler=None):
        self.commands = list(commands)
        self.image = image
        self.turtle = turtle
        self.error_handler = error_handler

        self._handlers = {
            COMMENT: self._comment,
            "PENUP": self._penup,
            "PENDOWN": self._pendown,
            "SETPENCOLOR": self._setpencolor,
            "FORWARD": self._move,
            "BACK": self._move,
            "LEFT": self._move,
            "RIGHT": self._move,
            "TURN": self._turn,
            "SETHEADING": self._setheading,
            "SETX": self._setx,
            "SETY": self._sety,
            "MAKE": self._make,
            "ADDASSIGN": self._addassign,
            "IF": self._if,
            "WHILE": self._while,
            BLOCK_CLOSE: self._block_close,
            PROCEDURE_START: self._define,
            PROCEDURE_END: self._return,
        }

    def run(self, context=None):
        """Runs until the counter leaves the program. Returns the final context."""
        if context is None:
            context = ExecutionContext()

        while 0 <= context.counter < len(self.commands):
            self.step(context)

        if context.block_stack or context.call_stack:
            raise LogoError(ErrorKind.UNBALANCED_CONTROL_FLOW,
                            "program ended inside a block or procedure ({} open blocks, {} open calls)",
                            [str(len(context.block_stack)), str(len(context.call_stack))])
        return context

    def step(self, context):
        """Executes the command at the counter and advances the counter."""
        index = context.counter
        command = self.commands[index]
        if self.error_handler:
            self.error_handler.trace(index, str(command))

        try:
            command.check_command()
            tokens = command.get_tokens(self.turtle, context.variables)
            tokens = evaluate_polish(tokens)

            handler = self._handlers.get(command.opcode, self._call)
            handler(context, command, tokens)
        except LogoError as error:
            raise error.locate(index)

        context.counter += 1

    def _warn(self, msg, *exprs):
        if self.error_handler:
            self.error_handler.warn(msg, *exprs)

    def _comment(self, context, command, tokens):
        pass

    def _penup(self, context, command, tokens):
        self.turtle.change_penstate(PenState.UP)

    def _pendown(self, context, command, tokens):
        self.turtle.change_penstate(PenState.DOWN)

    def _setpencolor(self, context, command, tokens):
        try:
            color = parse_integer(tokens[0])
        except ValueError:
            color = None
        if color is None or not 0 <= color < len(COLORS):
            raise LogoError(ErrorKind.INVALID_COLOR, "'{}' is not a color, expected an integer from 0 to {}",
                            [tokens[0], str(len(COLORS) - 1)])
        self.turtle.change_color(color)

    def _move(self, context, command, tokens):
        distance = _number(tokens[0])
        self.turtle.draw(self.image, DIRECTIONS[command.opcode], distance)

    def _turn(self, context, command, tokens):
        self.turtle.turn(_integer(tokens[0]))

    def _setheading(self, context, command, tokens):
        self.turtle.change_heading(_integer(tokens[0]))

    def _setx(self, context, command, tokens):
        self.turtle.change_x(_number(tokens[0]))

    def _sety(self, context, command, tokens):
        self.turtle.change_y(_number(tokens[0]))

    def _make(self, context, command, tokens):
        name, value = tokens[0], Value.parse(tokens[1])
        if value.kind is ValueKind.TEXT:
            raise LogoError(ErrorKind.INVALID_VALUE, "'{}' is not a number, TRUE or FALSE", value.text)
        context.variables[name] = str(value)

    def _addassign(self, context, command, tokens):
        name = tokens[0]
        if name not in context.variables:
            raise LogoError(ErrorKind.UNDEFINED_VARIABLE, "variable '{}' is not defined", name)
        total = Value.parse(context.variables[name]).as_number() + Value.parse(tokens[1]).as_number()
        context.variables[name] = format_number(total)

    def _if(self, context, command, tokens):
        end = self.find_block_end(context.counter)
        if _condition(tokens[0]):
            context.block_stack.append(end + 1)
        else:
            context.counter = end

    def _while(self, context, command, tokens):
        end = self.find_block_end(context.counter)
        if _condition(tokens[0]):
            context.block_stack.append(context.counter)
        else:
            context.counter = end

    def _block_close(self, context, command, tokens):
        if context.block_stack:
            context.counter = context.block_stack.pop() - 1
        else:
            self._warn("'{}' without an open block, ignored", BLOCK_CLOSE)

    def _define(self, context, command, tokens):
        name, *params = tokens
        if context.define_procedure(Procedure(name, tuple(params), context.counter)):
            self._warn("procedure '{}' redefined", name)
        context.counter = self.find_procedure_end(context.counter)

    def _return(self, context, command, tokens):
        if context.call_stack:
            context.counter = context.call_stack.pop()
        else:
            self._warn("'{}' outside of a procedure call, ignored", PROCEDURE_END)

    def _call(self, context, command, tokens):
        procedure = context.find_procedure(command.opcode)
        if procedure is None:
            raise LogoError(ErrorKind.UNDEFINED_PROCEDURE, "no procedure named '{}' has been defined", command.opcode)

        if len(tokens) < len(procedure.params):
            missing = procedure.params[len(tokens)]
            raise LogoError(ErrorKind.MISSING_ARGUMENT, "procedure '{}' is missing argument '{}'",
                            [procedure.name, missing])
        for param, value in zip(procedure.params, tokens):
            context.variables[param] = value

        context.call_stack.append(context.counter)
        context.counter = procedure.start

    def find_block_end(self, index):
        """Returns the index of the ] matching the IF or WHILE at index."""
        depth = 0
        for idx in range(index + 1, len(self.commands)):
            opcode = self.commands[idx].opcode
            if opcode in CONDITIONALS:
                depth += 1
            elif opcode == BLOCK_CLOSE:
                if depth == 0:
                    return idx
                depth -= 1
        raise LogoError(ErrorKind.UNTERMINATED_BLOCK, "'{}' has no matching '{}'",
                        [str(self.commands[index]), BLOCK_CLOSE])

    def find_procedure_end(self, index):
        """Returns the index of the first END after index. Procedures do not nest."""
        for idx in range(index + 1, len(self.commands)):
            if self.commands[idx].opcode == PROCEDURE_END:
                return idx
        raise LogoError(ErrorKind.UNTERMINATED_PROCEDURE, "'{}' has no '{}'",
                        [str(self.commands[index]), PROCEDURE_END])


def _number(token):
    try:
        number = parse_number(token)
    except ValueError:
        raise LogoError(ErrorKind.NOT_A_NUMBER, "'{}' is not a number", token)
    if not math.isfinite(number):
        raise LogoError(ErrorKind.NOT_A_NUMBER, "'{}' is not a finite number", token)
    return number


def _integer(token):
    try:
        return parse_integer(token)
    except ValueError:
        raise LogoError(ErrorKind.NOT_A_NUMBER, "'{}' is not a whole number", token)


def _condition(token):
    if token == TRUE:
        return True
    elif token == FALSE:
        return False
    raise LogoError(ErrorKind.NOT_A_BOOLEAN, "condition '{}' is not TRUE or FALSE", token)
