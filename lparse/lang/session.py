"""Session control for lparse. Reads statements from a file or the command line, parses them, and prints the parsed
terms, either in command line mode or file interpretation mode.

Statement files hold one expression sequence per line. ";;" starts a comment, and a line with unclosed parentheses
continues on the next line.
"""

from lparse.lang.error import GenericException
from lparse.pure.executor import default_executor


class Session:
    """Governs a lparse session: pending statements and their parsed results."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";;"

    def __init__(self, error_handler, path, executor=None, cmd_line=False, tree=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # used for error messages
        self.cmd_line = cmd_line        # whether or not in command-line mode
        self.tree = tree                # whether or not to display term trees instead of printed terms
        self.executor = executor if executor is not None else default_executor()

        self.to_parse = {}  # dict of line num: statement to parse
        self.results = []   # list of parsed statements, each a list of terms

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

            for expr, line_num in exprs:
                self.add(expr, line_num)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev.
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]  # get rid of comments

        line = line.strip()
        if exprs is not None:
            if line and not add_to_prev:
                exprs.append((line, line_num))
            elif add_to_prev:
                prev, prev_num = exprs.pop()
                line = prev + line
                exprs.append((line, prev_num))

        return line, line.count("(") > line.count(")")

    def add(self, expr, line_num):
        """Adds a statement to the current session. Parsing is delayed until run is called."""
        if not expr:
            raise ValueError("statement cannot be empty")
        self.to_parse[line_num] = expr

    def run(self):
        """Parses and prints this session's pending statements. Will raise any errors that are encountered."""
        for line_num, expr in list(self.to_parse.items()):
            self.error_handler.register_line(self.path, expr, line_num)

            try:
                terms = self.executor.parse(expr, self.error_handler)
            finally:
                del self.to_parse[line_num]

            self.results.append(terms)
            print(self.format(terms))

            self.error_handler.remove_line(self.path)

    def format(self, terms):
        """Printed terms separated by spaces, or their trees if self.tree."""
        if self.tree:
            return "\n".join(term.display() for term in terms)
        return " ".join(term.print() for term in terms)

    def pop(self):
        """Returns and removes the most recent results."""
        return self.results.pop()
