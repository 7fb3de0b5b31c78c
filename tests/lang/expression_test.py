import unittest

from logo.lang.error import ErrorKind, LogoError
from logo.lang.expression import Operation, Value, ValueKind, evaluate_polish, find_span, format_number, \
    parse_integer


class ValueTestCase(unittest.TestCase):

    def test_parse(self):
        cases = {
            "TRUE": ValueKind.BOOLEAN,
            "FALSE": ValueKind.BOOLEAN,
            "true": ValueKind.TEXT,
            "10": ValueKind.NUMBER,
            "-2.5": ValueKind.NUMBER,
            "1e3": ValueKind.NUMBER,
            "1_000": ValueKind.TEXT,
            "abc": ValueKind.TEXT,
            "": ValueKind.TEXT,
        }
        for case, kind in cases.items():
            self.assertEqual(kind, Value.parse(case).kind, case)

    def test_str(self):
        cases = {"10": "10", "10.0": "10", "-3.50": "-3.5", "1e3": "1000", "TRUE": "TRUE", "word": "word"}
        for case, result in cases.items():
            self.assertEqual(result, str(Value.parse(case)), case)

    def test_coercion(self):
        self.assertEqual(2.5, Value.parse("2.5").as_number())
        self.assertTrue(Value.parse("TRUE").as_boolean())

        with self.assertRaises(LogoError) as raised:
            Value.parse("TRUE").as_number()
        self.assertIs(ErrorKind.NOT_A_NUMBER, raised.exception.kind)

        with self.assertRaises(LogoError) as raised:
            Value.parse("1").as_boolean()
        self.assertIs(ErrorKind.NOT_A_BOOLEAN, raised.exception.kind)


class NumberFormatTestCase(unittest.TestCase):

    def test_format_number(self):
        cases = {5.0: "5", -3.0: "-3", 2.5: "2.5", 0.1: "0.1", 250.0: "250"}
        for case, result in cases.items():
            self.assertEqual(result, format_number(case), case)

    def test_parse_integer(self):
        should_fail = ["90.5", "1e2", "", "-", "1_0", "ten"]
        for case in should_fail:
            self.assertRaises(ValueError, parse_integer, case)

        should_pass = {"90": 90, "-45": -45, "+3": 3, "0": 0}
        for case, result in should_pass.items():
            self.assertEqual(result, parse_integer(case), case)


class OperationTestCase(unittest.TestCase):

    def test_operate(self):
        cases = [
            (Operation.EQ, "1", "1", "TRUE"),
            (Operation.EQ, "1", "1.0", "FALSE"),
            (Operation.NE, "a", "b", "TRUE"),
            (Operation.GT, "3", "2", "TRUE"),
            (Operation.GT, "2", "3", "FALSE"),
            (Operation.LT, "2", "3", "TRUE"),
            (Operation.AND, "TRUE", "FALSE", "FALSE"),
            (Operation.OR, "TRUE", "FALSE", "TRUE"),
            (Operation.ADD, "2", "3", "5"),
            (Operation.SUB, "10", "4", "6"),
            (Operation.MUL, "2.5", "2", "5"),
            (Operation.DIV, "1", "4", "0.25"),
        ]
        for operation, operand1, operand2, result in cases:
            self.assertEqual(result, operation.operate(operand1, operand2), (operation, operand1, operand2))

    def test_operate_errors(self):
        cases = [
            (Operation.GT, "a", "1", ErrorKind.NOT_A_NUMBER),
            (Operation.ADD, "TRUE", "1", ErrorKind.NOT_A_NUMBER),
            (Operation.AND, "1", "TRUE", ErrorKind.NOT_A_BOOLEAN),
            (Operation.OR, "TRUE", "yes", ErrorKind.NOT_A_BOOLEAN),
            (Operation.DIV, "4", "0", ErrorKind.DIVISION_BY_ZERO),
        ]
        for operation, operand1, operand2, kind in cases:
            with self.assertRaises(LogoError) as raised:
                operation.operate(operand1, operand2)
            self.assertIs(kind, raised.exception.kind, (operation, operand1, operand2))


class EvaluatePolishTestCase(unittest.TestCase):

    def test_find_span(self):
        cases = {
            ("x", "10"): [],
            ("+", "1", "2"): [0, 1, 2],
            ("x", "+", "1", "2", "y"): [1, 2, 3],
            ("AND", "TRUE", "OR", "TRUE", "FALSE", "extra"): [0, 1, 2, 3, 4],
            ("EQ", "1", "[",): [0, 1, 2],
        }
        for case, result in cases.items():
            self.assertEqual(result, find_span(list(case)), case)

    def test_evaluate(self):
        cases = {
            ("EQ", "1", "1"): ["TRUE"],
            ("+", "2", "3"): ["5"],
            ("-", "10", "3"): ["7"],
            ("/", "9", "2"): ["4.5"],
            ("AND", "TRUE", "OR", "TRUE", "FALSE"): ["TRUE"],
            ("+", "1", "*", "2", "3"): ["7"],
            ("-", "*", "2", "3", "1"): ["5"],
            ("x", "+", "1", "2"): ["x", "3"],
            ("+", "1", "2", "name"): ["3", "name"],
            ("EQ", "1", "1", "["): ["TRUE", "["],
            ("TRUE", "["): ["TRUE", "["],
            ("10",): ["10"],
            (): [],
        }
        for case, result in cases.items():
            self.assertEqual(result, evaluate_polish(list(case)), case)

    def test_evaluate_does_not_mutate(self):
        tokens = ["+", "1", "2"]
        evaluate_polish(tokens)
        self.assertEqual(["+", "1", "2"], tokens)

    def test_evaluate_errors(self):
        cases = {
            ("/", "4", "0"): ErrorKind.DIVISION_BY_ZERO,
            ("+", "1"): ErrorKind.MALFORMED_EXPRESSION,
            ("+",): ErrorKind.MALFORMED_EXPRESSION,
            ("+", "1", "+"): ErrorKind.MALFORMED_EXPRESSION,
            ("*", "a", "2"): ErrorKind.NOT_A_NUMBER,
            ("AND", "1", "2"): ErrorKind.NOT_A_BOOLEAN,
            # a block open fills an operand slot without supplying a value
            ("EQ", "1", "["): ErrorKind.MALFORMED_EXPRESSION,
        }
        for case, kind in cases.items():
            with self.assertRaises(LogoError) as raised:
                evaluate_polish(list(case))
            self.assertIs(kind, raised.exception.kind, case)


if __name__ == '__main__':
    unittest.main()
