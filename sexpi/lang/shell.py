"""Handles interactive/command-line mode for sexpi interpreter. Uses cmd as backend."""

import cmd

from sexpi.pure.lexical import tokenize
from sexpi.pure.syntax import parse


class Shell(cmd.Cmd):
    """sexpi interpreter shell."""
    intro = "sexpi :: S-expression interpreter\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def onecmd(self, line):
        """Commands are only recognized at the start of an expression: a continuation line is always source. cmd
        reports end of input as 'EOF', which still exits.
        """
        if self._tmp_line and line != "EOF":
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary sexpi source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if self._tmp_line:
                line = f"{self._tmp_line} {line}"
            line, add_to_prev = self.sess.preprocess_line(line, self.line_num, bool(self._tmp_line))

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                try:
                    self.sess.add(line, self.line_num)
                except ValueError:
                    return  # if line is empty, terminate

                try:
                    self.sess.run()
                finally:
                    while self.sess.results:  # values produced before an error are still shown
                        print(self.sess.pop())

    def _register(self, arg):
        self.line_num += 1
        self.sess.error_handler.register_line(self.sess.path, arg, self.line_num)

    def do_tokens(self, arg):
        """Prints the tokens of arg without parsing it."""
        with self.sess.error_handler:
            self._register(arg)
            print(self.sess.render_tokens(tokenize(arg)))
            self.sess.error_handler.remove_line(self.sess.path)

    def do_tree(self, arg):
        """Prints the syntax tree(s) of arg without evaluating it."""
        with self.sess.error_handler:
            self._register(arg)
            for tree in parse(tokenize(arg)):
                print(tree.display())
            self.sess.error_handler.remove_line(self.sess.path)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the sexpi interpreter!\n\n"
              "sexpi is a small functional language written as S-expressions. It has integers, \n"
              "floats, booleans (#t, #f), the operators = + - * /, and the special forms \n"
              "(let (NAME VALUE) BODY), (lambda (PARAM) BODY) and (if COND THEN ELSE). \n"
              "Functions take exactly one argument: curry them to take more.\n\n"
              "Try it out by typing '(let (inc (lambda (x) (+ x 1))) (inc 41))'. This will bind \n"
              "a function to 'inc' and apply it to 41, giving 42 as the result.\n\n"
              "'tokens SOURCE' and 'tree SOURCE' show how SOURCE is lexed and parsed.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
