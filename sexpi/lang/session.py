"""Session control for sexpi. Runs source chunks through the lexer, parser and evaluator, either in command-line mode
or file interpretation mode.

Source files are read line by line. ';;' starts a comment that runs to the end of the line, and a line that opens
more parentheses than it closes is continued on the next line. Each resulting chunk may hold any number of top-level
expressions; each one is evaluated in an empty environment.
"""

from dataclasses import dataclass

from sexpi.lang.error import GenericException
from sexpi.pure.evaluation import Evaluator
from sexpi.pure.lexical import tokenize
from sexpi.pure.runtime import Environment
from sexpi.pure.syntax import Expression, parse


@dataclass(frozen=True)
class Outcome:
    """A top-level expression paired with the value it evaluated to."""
    tree: Expression
    value: object

    def __str__(self):
        return str(self.value)


class Session:
    """Governs a sexpi session: chunks are queued with add and executed in order with run."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";;"

    def __init__(self, error_handler, path, cmd_line, echo=False, show_tokens=False, show_tree=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # used for error messages
        self.cmd_line = cmd_line        # whether or not in command-line mode
        self.echo = echo                # print values as they are produced
        self.show_tokens = show_tokens  # print each chunk's tokens before parsing
        self.show_tree = show_tree      # print each tree before evaluating

        self.evaluator = Evaluator(error_handler)
        self.to_exec = {}   # dict of line num: source chunks to execute
        self.results = []   # Outcomes not yet consumed

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr in exprs:
                self.add(*expr)

        elif not cmd_line:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's chunks), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev. Must be called before calling run.
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]  # get rid of comments

        line = line.rstrip()
        if exprs is not None:
            if line.strip() and not add_to_prev:
                exprs.append((line, line_num))
            elif add_to_prev:
                prev, prev_num = exprs.pop()
                line = f"{prev} {line}" if line.strip() else prev
                exprs.append((line, prev_num))

        return line, line.count("(") > line.count(")")

    @staticmethod
    def render_tokens(tokens):
        """Returns tokens as one line of text."""
        return " ".join(repr(token) for token in tokens)

    def add(self, expr, line_num):
        """Queues the source chunk expr. Nothing is lexed until run is called."""
        if not expr.strip():
            raise ValueError("expr cannot be empty")

        self.to_exec[line_num] = expr

    def execute(self, source):
        """Yields an Outcome for each top-level expression in source. The whole chunk is parsed before anything is
        evaluated, so a ParseError means nothing in the chunk runs.
        """
        tokens = tokenize(source)
        if self.show_tokens:
            print(Session.render_tokens(tokens))

        for tree in parse(tokens):
            if self.show_tree:
                print(tree.display())
            yield Outcome(tree, self.evaluator.evaluate(tree, Environment()))

    def run(self):
        """Runs this session's queued chunks in order. Will raise any errors that are encountered; chunks after the
        failing one stay queued.
        """
        for line_num, source in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)

            try:
                for outcome in self.execute(source):
                    self.results.append(outcome)
                    if self.echo:
                        print(outcome)
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the oldest Outcome."""
        return self.results.pop(0)
