"""Runs a logo program and saves the resulting drawing. Called from the logo executable script."""

import argparse

from logo.graphics.image import check_image_path
from logo.lang.error import ErrorHandler
from logo.lang.session import Session


def positive_int(text):
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(prog="logo", description="Draws a logo program to an SVG or PNG image.")
    parser.add_argument("file", help="logo program to run")
    parser.add_argument("image_path", help="where to save the drawing (.svg or .png)")
    parser.add_argument("height", type=positive_int, help="image height in pixels")
    parser.add_argument("width", type=positive_int, help="image width in pixels")
    parser.add_argument("--trace", action="store_true", help="print every command as it is executed")
    return parser


def main(argv=None):
    """Runs logo interpreter."""
    args = build_parser().parse_args(argv)

    with ErrorHandler(verbose=args.trace) as error_handler:
        check_image_path(args.image_path)

        sess = Session(error_handler, args.file)
        image = sess.render(args.width, args.height)
        image.save(args.image_path)


if __name__ == "__main__":
    main()
