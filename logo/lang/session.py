"""Session control for the logo language: loads a program from a file and runs it against a turtle and image."""

from logo.graphics.image import Image
from logo.graphics.turtle import Turtle
from logo.lang.command import Command, check_procedures
from logo.lang.engine import Engine
from logo.lang.error import ErrorKind, LogoError


class Session:
    """Governs one run of a logo program."""

    def __init__(self, error_handler, path=None, lines=None):
        self.error_handler = error_handler
        self.path = path if path is not None else "<in>"  # used for error messages
        self.error_handler.register_file(self.path)

        self.commands = []
        self.context = None
        self.turtle = None

        if lines is None:
            try:
                with open(path, "r") as file:
                    lines = file.readlines()
            except OSError:
                raise LogoError(ErrorKind.FILE_ACCESS, "'{}' could not be opened", str(path))

        for line_num, line in enumerate(lines):
            self.add(line, line_num + 1)

    def add(self, line, line_num=None):
        """Adds a source line to the program. Blank lines are skipped."""
        if line.strip():
            self.commands.append(Command(line.split(), line_num))

    def run(self, image, turtle=None):
        """Checks and runs the program, drawing into image. Returns the final ExecutionContext."""
        if turtle is None:
            turtle = Turtle.centered(image)
        self.turtle = turtle

        check_procedures(self.commands)

        engine = Engine(self.commands, image, turtle, self.error_handler)
        try:
            self.context = engine.run()
        except LogoError as error:
            if error.index is not None:
                command = self.commands[error.index]
                self.error_handler.register_line(self.path, str(command), command.line_num)
            raise

        return self.context

    def render(self, width, height):
        """Runs the program on a fresh image of the given size and returns the image."""
        image = Image(width, height)
        self.run(image)
        return image
