"""
Exception types raised by GeneScreen.
"""

class ScreenError(Exception):
    """Base class for every error GeneScreen reports to the user."""

class MalformedAlignmentRow(ScreenError):
    def __init__(self, source: str, reason: str, line_number: int = 0):
        self.source = source
        self.reason = reason
        self.line_number = line_number
        super().__init__(f"Can't parse aligner output for {source} (line {line_number}): {reason}")

class UnreadableInputFile(ScreenError):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Can't read input file '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)

class DuplicateSummaryInput(ScreenError):
    """Logged as a warning when the same report is passed twice; never raised."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Skipping duplicate file: {path}")

class MalformedReportHeader(ScreenError):
    def __init__(self, path: str, missing):
        self.path = path
        self.missing = list(missing)
        super().__init__(f"Report header in '{path}' lacks column(s): {', '.join(self.missing)}")

class DatabaseNotFound(ScreenError):
    def __init__(self, name: str, datadir: str):
        self.name = name
        self.datadir = datadir
        super().__init__(f"Database '{name}' not found in {datadir}. Run --list or --setupdb.")

class AlignerError(ScreenError):
    def __init__(self, command: str, returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{command} failed with exit code {returncode}:\n{stderr}")
