"""Error handling for the logo language. Only LogoErrors should be encountered while a program runs: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys
from enum import Enum

from termcolor import colored


class ErrorKind(Enum):
    """Every way a logo program can fail. All of them are fatal to the run."""
    INVALID_ARGUMENT_COUNT = "invalid argument count"
    MALFORMED_BLOCK = "malformed block"
    UNDEFINED_VARIABLE = "undefined variable"
    INVALID_TOKEN = "invalid token"
    MALFORMED_EXPRESSION = "malformed expression"
    NOT_A_NUMBER = "not a number"
    NOT_A_BOOLEAN = "not a boolean"
    DIVISION_BY_ZERO = "division by zero"
    INVALID_COLOR = "invalid color"
    INVALID_VALUE = "invalid value"
    UNTERMINATED_BLOCK = "unterminated block"
    UNTERMINATED_PROCEDURE = "unterminated procedure"
    UNDEFINED_PROCEDURE = "undefined procedure"
    MISSING_ARGUMENT = "missing argument"
    UNBALANCED_CONTROL_FLOW = "unbalanced control flow"
    UNBALANCED_PROCEDURES = "unbalanced procedures"
    FILE_ACCESS = "file access"
    UNSUPPORTED_IMAGE_FORMAT = "unsupported image format"
    INTERRUPTED = "interrupted"
    INTERNAL = "internal"


class LogoError(Exception):
    """Templates an error message so that it can be used to throw a logo error. The {} slots of msg are filled with
    exprs, highlighted in bold.
    """

    def __init__(self, kind, msg, exprs=None, index=None):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.kind = kind
        self.plain_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.index = index  # program counter of the failing command, if known
        self.internal = kind is ErrorKind.INTERNAL

        super().__init__(self.plain_msg)

    def locate(self, index):
        """Attaches the program counter of the failing command, unless a more precise one is already known."""
        if self.index is None:
            self.index = index
        return self

    def __str__(self):
        if self.index is None:
            return f"{self.kind.value}: {self.plain_msg}"
        return f"{self.kind.value}: {self.plain_msg} (command {self.index})"


class ErrorHandler:
    """Context manager that will report LogoErrors with the source line they came from."""
    ERROR = "red"
    WARNING = "magenta"
    TRACE = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose  # whether or not trace messages are printed
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called before the error is thrown."""
        self.traceback[path] = (line, line_num)

    def warn(self, msg, *exprs):
        """Prints a warning. Warnings never stop the program."""
        msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))
        print(colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + msg)

    def trace(self, index, line):
        """Prints an executed command with its program counter, if verbose."""
        if self.verbose:
            print(colored(f"[{index:>4}] ", ErrorHandler.TRACE) + line)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a LogoError, and self.traceback must be a dict
        of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        for file, (line, line_num) in self.traceback.items():
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if self.fatal:
            sys.exit(1)
        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LogoError(ErrorKind.INTERRUPTED, "keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is LogoError:
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LogoError(ErrorKind.INTERNAL, "unknown error: '{}: {}'", [exc_type.__name__, str(exc_val)]))
            do_exit = True

        return not do_exit
