"""The turtle: a pen with a position, heading and color, moving over an Image."""

from enum import Enum

from logo.graphics.image import COLORS, get_end_coordinates


class PenState(Enum):
    UP = "up"
    DOWN = "down"


class Turtle:
    """Heading is a whole number of degrees and is never wrapped around. The pen starts up and white."""
    DEFAULT_COLOR = 7

    def __init__(self, coords):
        self.coords = (float(coords[0]), float(coords[1]))
        self.color = Turtle.DEFAULT_COLOR
        self.pen_state = PenState.UP
        self.heading = 0

    @classmethod
    def centered(cls, image):
        """Returns a turtle in the middle of image."""
        return cls((image.width / 2, image.height / 2))

    def change_penstate(self, pen_state):
        self.pen_state = pen_state

    def change_color(self, color):
        if not 0 <= color < len(COLORS):
            raise ValueError(f"color index {color} out of range")
        self.color = color

    def change_x(self, x):
        self.coords = (x, self.coords[1])

    def change_y(self, y):
        self.coords = (self.coords[0], y)

    def change_heading(self, heading):
        self.heading = heading

    def turn(self, degrees):
        self.heading += degrees

    def draw(self, image, direction, distance):
        """Moves distance in direction relative to the heading, drawing into image if the pen is down. A negative
        distance moves the opposite way. Returns the new position.
        """
        direction += self.heading
        if distance < 0:
            distance = -distance
            direction += 180

        x, y = self.coords
        if self.pen_state is PenState.DOWN:
            self.coords = image.draw_simple_line(x, y, direction, distance, COLORS[self.color])
        else:
            self.coords = get_end_coordinates(x, y, direction, distance)
        return self.coords
