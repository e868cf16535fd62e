"""Handles interactive/command-line mode for lparse. Uses cmd as backend."""

import cmd

SWITCHES = {"on": True, "off": False}


class Shell(cmd.Cmd):
    """Lambda calculus parser shell. Each line is parsed and its terms are printed, or displayed as trees."""
    intro = ("Lambda calculus parser :: finite-state backend\n"
             "Type '?' or 'help' for more information, 'tree' or 'trace' to change the output.")
    prompt = "> "
    secondary_prompt = ". "  # shown while parentheses are unclosed
    _tmp_prompt = "> "

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Parses a sequence of expressions and prints the resulting terms."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + line, self.line_num, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.add(line, self.line_num)
            except ValueError:
                return  # nothing left after comments

            self.sess.run()

    def _switch(self, arg, current):
        """Returns the new value of an on/off setting given arg (toggles if arg is empty)."""
        if not arg:
            return not current
        return SWITCHES[arg.strip().lower()]

    def do_tree(self, arg):
        """tree [on|off]: display parsed terms as trees instead of printing them."""
        try:
            self.sess.tree = self._switch(arg, self.sess.tree)
        except KeyError:
            print(f"tree expects 'on' or 'off', got '{arg}'")
            return
        print(f"tree display {'on' if self.sess.tree else 'off'}")

    def do_trace(self, arg):
        """trace [on|off]: print every parser state transition."""
        handler = self.sess.error_handler
        try:
            handler.trace = self._switch(arg, handler.trace)
        except KeyError:
            print(f"trace expects 'on' or 'off', got '{arg}'")
            return
        print(f"transition trace {'on' if handler.trace else 'off'}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lparse shell!\n\n"
              "Type a lambda calculus expression to see how it is parsed. Variables are letters \n"
              "followed by digits (x1, ab23), 'L' stands for λ, and abstraction bodies must be \n"
              "parenthesized: 'λx1.x1 y1' is written 'lx1.(x1y1)'.\n\n"
              "Try it out by typing '(x1)ly1.(x1)'. This will print 'X1 λY1.X1'. Redundant \n"
              "parentheses are dropped, so '((x1))' prints as 'X1'.\n\n"
              "'tree' toggles tree display of parsed terms, 'trace' toggles the state trace.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits shell."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits shell."""
        return True
