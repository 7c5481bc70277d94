# python
"""
Assignment behavioral tests.

Scope
- Initial state from the parameter's default (tagged UNSET/DEFAULT/EXPLICIT).
- set_argument(): parsing, default substitution, notification only on change.
- set_value(): argument resync, revert with Unset.
- set_text(), set_flag(), increment()/decrement(), complete().
- is_captured() and get_hint().

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from commandeer import (
    AT_CURSOR,
    Argument,
    Assignment,
    AssignmentState,
    Hint,
    IllegalArgumentError,
    NumberType,
    Parameter,
    SelectionType,
    Status,
)
from commandeer.utils import Unset


class Recorder:

    def __init__(self, assignment):
        self.calls = []
        assignment.listen(self)

    def __call__(self, assignment):
        self.calls.append(assignment.value)


class TestInitialState(TestCase):

    def testRequired(self):
        assignment = Assignment(Parameter("name", "string"), 1)
        self.assertIs(assignment.value, Unset)
        self.assertIs(assignment.state, AssignmentState.UNSET)
        self.assertIsNone(assignment.arg)
        self.assertEqual(assignment.status, Status.INCOMPLETE)

    def testWithDefault(self):
        assignment = Assignment(Parameter("size", "number", default=4), 1)
        self.assertEqual(assignment.value, 4)
        self.assertIs(assignment.state, AssignmentState.DEFAULT)
        self.assertEqual(assignment.status, Status.VALID)

    def testBooleanDefaultsToFalse(self):
        assignment = Assignment(Parameter("verbose", "boolean"), 1)
        self.assertIs(assignment.value, False)
        self.assertIs(assignment.state, AssignmentState.DEFAULT)


class TestSetArgument(TestCase):

    def setUp(self):
        self.assignment = Assignment(Parameter("size", NumberType(min=1, max=8), "Tab size.", default=4), 1)
        self.recorder = Recorder(self.assignment)

    def testParsesText(self):
        self.assignment.set_argument(Argument("6", 5, 6, " "))
        self.assertEqual(self.assignment.value, 6)
        self.assertIs(self.assignment.state, AssignmentState.EXPLICIT)
        self.assertEqual(self.recorder.calls, [6])

    def testNotifiesOnlyOnChange(self):
        self.assignment.set_argument(Argument("6", 5, 6, " "))
        self.assignment.set_argument(Argument("6", 7, 8, " "))
        self.assertEqual(self.recorder.calls, [6])
        self.assertEqual(self.assignment.arg.start, 7)

    def testEmptyTextTakesDefault(self):
        self.assignment.set_argument(Argument("6", 5, 6, " "))
        self.assignment.set_argument(Argument())
        self.assertEqual(self.assignment.value, 4)
        self.assertIs(self.assignment.state, AssignmentState.DEFAULT)
        self.assertEqual(self.recorder.calls, [6, 4])

    def testInvalidTextClearsValue(self):
        self.assignment.set_argument(Argument("99", 5, 7, " "))
        self.assertIs(self.assignment.value, Unset)
        self.assertEqual(self.assignment.status, Status.ERROR)
        self.assertIs(self.assignment.state, AssignmentState.UNSET)

    def testFlagIsRecorded(self):
        flag = Argument("--size", 5, 11, " ")
        self.assignment.set_argument(Argument("2", 12, 13, " "), flag)
        self.assertIs(self.assignment.flag, flag)
        self.assignment.set_argument(Argument("2", 5, 6, " "))
        self.assertIsNone(self.assignment.flag)


class TestSetValue(TestCase):

    def setUp(self):
        self.assignment = Assignment(Parameter("size", NumberType(min=1, max=8), default=4), 1)
        self.recorder = Recorder(self.assignment)

    def testResyncsArgument(self):
        self.assignment.set_argument(Argument("6", 5, 6, " "))
        self.assignment.set_value(8)
        self.assertEqual(self.assignment.arg.text, "8")
        self.assertEqual((self.assignment.arg.start, self.assignment.arg.end), (5, 6))
        self.assertEqual(str(self.assignment.arg), " 8")
        self.assertEqual(self.assignment.conversion.status, Status.VALID)

    def testCreatesArgumentAtCursor(self):
        self.assignment.set_value(7)
        self.assertEqual(self.assignment.arg.text, "7")
        self.assertEqual(self.assignment.arg.start, AT_CURSOR)

    def testUnsetRevertsToDefault(self):
        self.assignment.set_value(7)
        self.assignment.set_value(Unset)
        self.assertEqual(self.assignment.value, 4)
        self.assertIsNone(self.assignment.arg)
        self.assertIs(self.assignment.state, AssignmentState.DEFAULT)
        self.assertEqual(self.recorder.calls, [7, 4])

    def testSameValueIsSilent(self):
        self.assignment.set_value(4)
        self.assertEqual(self.recorder.calls, [])

    def testUnlisten(self):
        self.assignment.unlisten(self.recorder)
        self.assignment.set_value(7)
        self.assertEqual(self.recorder.calls, [])
        with self.assertRaises(LookupError):
            self.assignment.unlisten(self.recorder)

    def testListenRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            self.assignment.listen("callback")


class TestEditing(TestCase):

    def testSetText(self):
        assignment = Assignment(Parameter("size", "number"), 1)
        assignment.set_argument(Argument("3", 5, 6, " "))
        assignment.set_text("12")
        self.assertEqual(assignment.value, 12)
        self.assertEqual(assignment.arg.start, 5)

    def testSetTextNone(self):
        assignment = Assignment(Parameter("size", "number"), 1)
        with self.assertRaises(IllegalArgumentError):
            assignment.set_text(None)

    def testSetFlag(self):
        assignment = Assignment(Parameter("verbose", "boolean"), 1)
        recorder = Recorder(assignment)
        flag = Argument("--verbose", 4, 13, " ")
        assignment.set_flag(flag)
        self.assertIs(assignment.value, True)
        self.assertIs(assignment.flag, flag)
        self.assertIsNone(assignment.arg)
        self.assertEqual(recorder.calls, [True])

    def testFalseValueReplacesBareFlag(self):
        assignment = Assignment(Parameter("verbose", "boolean"), 1)
        assignment.set_flag(Argument("--verbose", 4, 13, " "))
        assignment.set_value(False)
        self.assertIs(assignment.value, False)
        self.assertIsNone(assignment.flag)
        self.assertTrue(assignment.arg.at_cursor)
        self.assertEqual(str(assignment.arg), " false")

    def testIncrementReplacesBareFlag(self):
        assignment = Assignment(Parameter("verbose", "boolean"), 1)
        assignment.set_flag(Argument("--verbose", 4, 13, " "))
        assignment.increment()
        self.assertIs(assignment.value, False)
        self.assertIsNone(assignment.flag)
        self.assertEqual(assignment.arg.text, "false")

    def testTrueValueKeepsBareFlag(self):
        flag = Argument("--verbose", 4, 13, " ")
        assignment = Assignment(Parameter("verbose", "boolean"), 1)
        assignment.set_flag(flag)
        assignment.set_value(True)
        self.assertIs(assignment.flag, flag)
        self.assertIsNone(assignment.arg)

    def testValueFillsDanglingFlag(self):
        flag = Argument("--times", 9, 16, " ")
        assignment = Assignment(Parameter("times", NumberType(min=1), default=1), 3)
        assignment.set_argument(Argument(), flag)
        assignment.set_value(4)
        self.assertIs(assignment.flag, flag)
        self.assertEqual(str(assignment.arg), " 4")

    def testIncrementDecrement(self):
        assignment = Assignment(Parameter("size", NumberType(min=1, max=3), default=2), 1)
        assignment.increment()
        self.assertEqual(assignment.value, 3)
        assignment.increment()
        self.assertEqual(assignment.value, 3)
        assignment.decrement()
        assignment.decrement()
        assignment.decrement()
        self.assertEqual(assignment.value, 1)

    def testIncrementWithoutAdjacentValue(self):
        assignment = Assignment(Parameter("name", "text"), 1)
        assignment.increment()
        self.assertIs(assignment.value, Unset)

    def testComplete(self):
        assignment = Assignment(Parameter("option", SelectionType(["tabstop", "tabstopstyle"])), 1)
        assignment.set_argument(Argument("tab", 4, 7, " "))
        self.assertEqual(assignment.status, Status.INCOMPLETE)
        assignment.complete()
        self.assertEqual(assignment.value, "tabstop")
        self.assertEqual(str(assignment.arg), " tabstop")

    def testCompleteWithoutPredictions(self):
        assignment = Assignment(Parameter("name", "text"), 1)
        assignment.set_argument(Argument("bob", 4, 7, " "))
        assignment.complete()
        self.assertEqual(assignment.value, "bob")


class TestCapture(TestCase):

    def testAtCursorArgumentCaptures(self):
        assignment = Assignment(Parameter("size", "number", default=1), 1)
        assignment.set_argument(Argument())
        self.assertTrue(assignment.is_captured(100))

    def testUnboundDoesNotCapture(self):
        self.assertFalse(Assignment(Parameter("size", "number"), 1).is_captured(0))

    def testResolvedReleasesAtEnd(self):
        assignment = Assignment(Parameter("size", "number"), 1)
        assignment.set_argument(Argument("12", 5, 7, " "))
        self.assertTrue(assignment.is_captured(6))
        self.assertFalse(assignment.is_captured(7))
        self.assertTrue(assignment.is_captured(7, end_is_prev=True))
        self.assertFalse(assignment.is_captured(8, end_is_prev=True))

    def testAmbiguousRetainsAtEnd(self):
        assignment = Assignment(Parameter("option", SelectionType(["tabstop", "tabstopstyle"])), 1)
        assignment.set_argument(Argument("tabstop", 0, 7))
        self.assertEqual(assignment.status, Status.VALID)
        self.assertTrue(assignment.is_captured(7))

    def testIncompleteRetainsAtEnd(self):
        assignment = Assignment(Parameter("size", "number"), 1)
        assignment.set_argument(Argument("-", 5, 6, " "))
        self.assertTrue(assignment.is_captured(6))


class TestHintGeneration(TestCase):

    def testRequiredMissing(self):
        assignment = Assignment(Parameter("name", "string", "Who to greet."), 2)
        assignment.set_argument(Argument())
        hint = assignment.get_hint()
        self.assertEqual(hint.status, Status.ERROR)
        self.assertEqual(hint.message, "Who to greet: (Required)")
        self.assertEqual(hint.param_index, 2)
        self.assertEqual(hint.start, AT_CURSOR)

    def testLabelFallsBackToName(self):
        assignment = Assignment(Parameter("name", "string", "   "), 1)
        assignment.set_argument(Argument("bob", 3, 6, " "))
        hint = assignment.get_hint()
        self.assertEqual((hint.status, hint.message, hint.start, hint.end), (Status.VALID, "name:", 3, 6))

    def testConversionMessageAppended(self):
        assignment = Assignment(Parameter("size", NumberType(max=8), "Tab size"), 1)
        assignment.set_argument(Argument("9", 3, 4, " "))
        hint = assignment.get_hint()
        self.assertEqual(hint.status, Status.ERROR)
        self.assertEqual(hint.message, "Tab size: 9 is greater than the maximum of 8")

    def testPredictionsCopied(self):
        assignment = Assignment(Parameter("option", SelectionType(["tabstop", "tabstopstyle"])), 1)
        assignment.set_argument(Argument("tab", 4, 7, " "))
        hint = assignment.get_hint()
        self.assertEqual(hint.status, Status.INCOMPLETE)
        self.assertEqual(hint.predictions, ("tabstop", "tabstopstyle"))

    def testDefaultIsNotRequired(self):
        assignment = Assignment(Parameter("size", "number", "Tab size", default=4), 1)
        assignment.set_argument(Argument())
        self.assertEqual(assignment.get_hint().status, Status.VALID)
        self.assertNotIn("(Required)", assignment.get_hint().message)

    def testCustomHint(self):
        def custom_hint(value, arg):
            return Hint(Status.VALID, "hello %s" % value, 7, arg.start, arg.end)

        assignment = Assignment(Parameter("name", "string", custom_hint=custom_hint), 1)
        assignment.set_argument(Argument("bob", 3, 6, " "))
        self.assertEqual(assignment.get_hint(), Hint(Status.VALID, "hello bob", 7, 3, 6))

    def testCustomHintSkippedWithoutValue(self):
        assignment = Assignment(Parameter("name", "string", custom_hint=lambda value, arg: Hint()), 1)
        assignment.set_argument(Argument())
        self.assertIn("(Required)", assignment.get_hint().message)

    def testFlagSpan(self):
        assignment = Assignment(Parameter("verbose", "boolean"), 3)
        assignment.set_flag(Argument("--verbose", 4, 13, " "))
        hint = assignment.get_hint()
        self.assertEqual((hint.start, hint.end, hint.status), (4, 13, Status.VALID))


if __name__ == "__main__":
    unittest.main()
