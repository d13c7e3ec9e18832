"""Error handling for sexpi. Only GenericExceptions should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors are organized by the pipeline stage that raised them:

```
GenericException
 ├── ParseError          ; structural mismatch, premature end of input, bad binder
 └── EvalError
      ├── UnboundVariable
      ├── TypeMismatch    ; operand/condition/callee of the wrong kind
      ├── DivisionByZero  ; integer division only
      └── IntegerOverflow ; result outside of 64-bit signed range
```

There is no lexing error: every word the lexer cannot classify becomes an identifier.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a sexpi error/warning. start and end are
    offsets into the source chunk that was being run when the error occurred.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ()
        if isinstance(exprs, str):
            exprs = (exprs,)

        self.plain = msg.format(*exprs)
        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.exprs = tuple(exprs)

        self.start = start
        self.end = end if end != -1 else start + 1  # needed for error display
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain)


class ParseError(GenericException):
    """Raised by the parser on the first structural violation. actual is None when input ran out."""

    def __init__(self, msg, exprs=None, expected=None, actual=None, **kwargs):
        super().__init__(msg, exprs, **kwargs)
        self.expected = expected
        self.actual = actual


class EvalError(GenericException):
    """Superclass for all errors raised while walking a tree."""


class UnboundVariable(EvalError):

    def __init__(self, name, **kwargs):
        super().__init__("unbound variable '{}'", name, **kwargs)
        self.name = name


class TypeMismatch(EvalError):
    """Operand, condition or callee evaluated to the wrong kind of value. msg is formatted with exprs, then expected,
    then actual's kind and actual itself.
    """

    def __init__(self, msg, expected, actual, exprs=(), **kwargs):
        if isinstance(exprs, str):
            exprs = (exprs,)
        super().__init__(msg, (*exprs, expected, actual.kind, actual), **kwargs)
        self.expected = expected
        self.actual = actual


class DivisionByZero(EvalError):
    pass


class IntegerOverflow(EvalError):
    pass


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom sexpi errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.traceback = {}
        self.steps = []

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session run."""
        self.traceback[path] = (None, None)

    def register_step(self, label, text):
        """Records one evaluation step. Steps are only printed when tracing."""
        self.steps.append((label, text))
        if self.trace:
            print(colored(f"  {label} ", ErrorHandler.STEP, attrs=["bold"]) + colored(text, attrs=["dark"]))

    def current_line(self):
        """Returns (file, line, line_num) of the most recently registered line, or (None, None, None)."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line:
                return file, line, line_num
        return None, None, None

    @staticmethod
    def diagnose(error, line, warning=False):
        """Returns offending part of line highlighted and bolded, with a caret underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        start = min(error.start, len(line))
        end = max(min(error.end, len(line)), start + 1)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        file, line, line_num = self.current_line()
        if file is None:
            print(colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg)
            return

        error_msg = colored(f"{file}:{line_num}:{error.start}: ", attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.diagnosis:
            print(ErrorHandler.diagnose(error, line, warning=True))

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

        __, line, __ = self.current_line()
        if not error.internal and line and error.diagnosis:
            print(ErrorHandler.diagnose(error, line))

        if self.fatal:
            sys.exit(1)
        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded", diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))
            do_exit = True

        return not do_exit
