import contextlib
import io
import os
import tempfile
import unittest

from logo.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.program = os.path.join(self.directory.name, "star.lg")
        with open(self.program, "w") as file:
            file.write("PENDOWN\nSETPENCOLOR \"4\nMAKE \"n \"0\nWHILE LT :n \"5 [\n"
                       "FORWARD \"20\nTURN \"144\nADDASSIGN \"n \"1\n]\n")

    def tearDown(self):
        self.directory.cleanup()

    def test_svg(self):
        image_path = os.path.join(self.directory.name, "star.svg")
        main([self.program, image_path, "100", "120"])

        with open(image_path) as file:
            svg = file.read()
        self.assertEqual(5, svg.count("<line"))
        self.assertIn('width="120" height="100"', svg)

    def test_png(self):
        image_path = os.path.join(self.directory.name, "star.png")
        main([self.program, image_path, "50", "50"])
        self.assertTrue(os.path.exists(image_path))

    def test_trace(self):
        image_path = os.path.join(self.directory.name, "star.svg")
        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            main([self.program, image_path, "100", "100", "--trace"])
        self.assertIn("FORWARD \"20", output.getvalue())

    def test_unsupported_extension(self):
        image_path = os.path.join(self.directory.name, "star.bmp")
        with contextlib.redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as raised:
                main([self.program, image_path, "100", "100"])
        self.assertEqual(1, raised.exception.code)
        self.assertFalse(os.path.exists(image_path))

    def test_program_error(self):
        with open(self.program, "w") as file:
            file.write("FORWARD / \"1 \"0\n")
        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            with self.assertRaises(SystemExit):
                main([self.program, os.path.join(self.directory.name, "out.svg"), "10", "10"])
        self.assertIn("line 1:", output.getvalue())


if __name__ == '__main__':
    unittest.main()
