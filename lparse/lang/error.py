"""Error handling for lparse. Only GenericExceptions should be encountered during parsing: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a lparse error."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class GrammarError(GenericException):
    """Raised when a state mapper rejects the next character (or the end of input). expr and pos locate the offending
    character for diagnosis, and are filled in by the executor.
    """

    def __init__(self, state, char, expected=None, expr="", pos=0):
        self.state = state
        self.char = char
        self.expected = expected

        msg = "'{}' has invalid next character '{}' in parser state " + state.name
        if expected:
            msg += f" (expected {expected})"
        super().__init__(msg, (expr, char if char else "<end of input>"), start=pos, end=pos + 1)

    def locate(self, expr, pos):
        """Returns a copy of this error pointing at position pos of expr."""
        return GrammarError(self.state, self.char, self.expected, expr, pos)


class NestedParseError(GenericException):
    """Raised when parsing a captured parenthetical/lambda body fails. Wraps the original error."""

    def __init__(self, body, cause):
        self.body = body
        self.cause = cause
        escaped = cause.msg.replace("{", "{{").replace("}", "}}")
        super().__init__("could not parse nested expression '{}': " + escaped, body, diagnosis=False)


class BindingError(GenericException):
    """Raised when a lambda is finalized without a binding variable."""

    def __init__(self, body):
        self.body = body
        super().__init__("λ-abstraction over '{}' has no binding variable", body, diagnosis=False)


class NestingError(GenericException):
    """Raised when nested bodies go deeper than the executor allows."""

    def __init__(self, body, limit):
        self.body = body
        self.limit = limit
        super().__init__("'{}' exceeds maximum nesting depth of {}", (body, str(limit)), diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom lparse errors."""
    ERROR = "red"
    STEP = "cyan"

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, symbol, expr):
        """Prints a single parsing step if tracing is enabled."""
        if self.trace:
            print(colored(f"  {symbol} ", ErrorHandler.STEP, attrs=["bold"]) + expr)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # reset lines (no need if fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded while parsing"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
