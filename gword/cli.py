#!/usr/bin/env python3
"""
gword Command-Line Interface

Provides interactive REPL, script execution, and pipe/filter modes.

Usage:
    gword                              # Start REPL (generators s, t)
    gword -g a,b,c                     # REPL over generators a, b, c
    gword script.gw                    # Run script
    gword -e "(t*s)^3"                 # Evaluate expression
    gword -r rules.subst -e "s*t*s^-1" # One-shot with substitutions
    echo "s*s^-1*t" | gword            # Filter mode

Script Format (.gw files):
    #!/usr/bin/env gword
    :gens s t
    :load commutators.subst

    @kill-st: s*t => (id)

    s*t*s^-1*t^-1
    (t*s)^3

REPL Commands:
    :help              Show help
    :gens NAMES        Start over in the free group on NAMES
    :load FILE         Load substitutions from file
    :rules             List loaded substitutions
    :clear             Clear all substitutions
    :trace on|off      Toggle tracing
    :find W in H       Find sub-word W in H
    :ball RADIUS       Sizes of the word-length ball
    :quit              Exit
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .errors import GWordError
from .findreplace import Substitution, find_first, find_symbol, replace_all
from .groups import FreeGroup, wlmetric_ball
from .parser import (
    format_substitutions, load_substitutions_from_file, parse_substitution_line, parse_word,
)

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False

DEFAULT_GENERATORS = ["s", "t"]

logger = logging.getLogger(__name__)


def split_generators(text: str) -> List[str]:
    """Split "a,b c" into generator names."""
    return [name for name in re.split(r'[\s,]+', text.strip()) if name]


class GWordCompleter:
    """Tab completer for the gword REPL."""

    COMMANDS = [
        ":help", ":quit", ":exit", ":q",
        ":gens", ":load", ":rules", ":clear",
        ":trace", ":find", ":ball",
    ]

    TRACE_OPTIONS = ["on", "off"]

    def __init__(self, repl: 'GWordREPL'):
        self.repl = repl

    def complete(self, text: str, state: int) -> Optional[str]:
        """Return the next possible completion for 'text'."""
        if state == 0:
            line = readline.get_line_buffer() if HAS_READLINE else ""
            self.matches = self._get_matches(text, line)

        try:
            return self.matches[state]
        except IndexError:
            return None

    def _get_matches(self, text: str, line: str) -> list:
        """Get list of matches for the current input."""
        line = line.lstrip()

        if line.startswith(":trace "):
            return [t for t in self.TRACE_OPTIONS if t.startswith(text)]

        if line.startswith(":load "):
            return self._complete_path(text)

        if text.startswith(":") or (line.startswith(":") and " " not in line):
            return [c for c in self.COMMANDS if c.startswith(text)]

        # In word context, complete generator names
        return [name for name in self.repl.group.names if name.startswith(text)]

    def _complete_path(self, text: str) -> list:
        """Complete file paths."""
        import glob

        if not text:
            text = "./"

        matches = []
        for path in glob.glob(text + "*"):
            if Path(path).is_dir():
                matches.append(path + "/")
            else:
                matches.append(path)
        return matches


# Printed words hold no spaces or colons.
FAILURE_PREFIXES = ("Error:", "Error loading ", "Unknown command", "Failed to parse")


def is_failure(result: Optional[str]) -> bool:
    """True if a REPL result reports a failure."""
    return bool(result) and result.startswith(FAILURE_PREFIXES)


def count_parens(text: str) -> int:
    """Count unbalanced parentheses. Returns >0 if more open than close."""
    depth = 0
    for c in text:
        if c == '(':
            depth += 1
        elif c == ')':
            depth -= 1
    return depth


class GWordREPL:
    """Interactive REPL for gword."""

    def __init__(self, generators: Optional[List[str]] = None):
        self.group = FreeGroup(generators or DEFAULT_GENERATORS)
        self.substitutions: List[Substitution] = []
        self.trace = False
        self.running = True
        self.multi_line_buffer = ""

        # Set up readline history and completion
        if HAS_READLINE:
            self.history_file = Path.home() / ".gword_history"
            try:
                readline.read_history_file(self.history_file)
            except OSError:
                pass
            readline.set_history_length(1000)

            self.completer = GWordCompleter(self)
            readline.set_completer(self.completer.complete)
            readline.parse_and_bind("tab: complete")
            readline.set_completer_delims(" \t\n*^()")

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                logger.debug("could not save history to %s: %s", self.history_file, e)

    def set_generators(self, names: List[str]) -> None:
        """Switch to the free group on names; loaded substitutions are dropped."""
        self.group = FreeGroup(names)
        self.substitutions = []

    def load_file(self, path: Path) -> int:
        """Load substitutions from a file; returns how many were added."""
        subs = load_substitutions_from_file(path, self.group)
        self.substitutions.extend(subs)
        return len(subs)

    def evaluate(self, text: str):
        """Parse, reduce and rewrite one word. Returns (word, trace or None)."""
        word = parse_word(text, self.group).reduce()
        if not self.substitutions:
            return word, None
        if self.trace:
            return replace_all(word, self.substitutions, trace=True)
        return replace_all(word, self.substitutions), None

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd == "quit" or cmd == "exit" or cmd == "q":
            self.running = False
            return None

        elif cmd == "gens":
            if not arg:
                return f"Generators: {' '.join(self.group.names)}"
            try:
                self.set_generators(split_generators(arg))
            except ValueError as e:
                return f"Error: {e}"
            return f"Working in {self.group}: {' '.join(self.group.names)}"

        elif cmd == "load":
            if not arg:
                return "Usage: :load FILENAME"
            try:
                count = self.load_file(Path(arg))
                return f"Loaded {count} substitutions from {arg}"
            except (GWordError, OSError) as e:
                return f"Error loading {arg}: {e}"

        elif cmd == "rules":
            if not self.substitutions:
                return "No substitutions loaded"
            return format_substitutions(self.substitutions)

        elif cmd == "clear":
            self.substitutions = []
            return "Cleared all substitutions"

        elif cmd == "trace":
            if arg.lower() in ("on", "true", "1"):
                self.trace = True
                return "Tracing enabled"
            elif arg.lower() in ("off", "false", "0"):
                self.trace = False
                return "Tracing disabled"
            else:
                self.trace = not self.trace
                return f"Tracing {'enabled' if self.trace else 'disabled'}"

        elif cmd == "find":
            if " in " not in arg:
                return "Usage: :find NEEDLE in HAYSTACK"
            needle_text, haystack_text = arg.split(" in ", 1)
            try:
                needle = parse_word(needle_text, self.group).reduce()
                haystack = parse_word(haystack_text, self.group).reduce()
                if needle.syllable_length() == 1:
                    idx = find_symbol(needle, haystack)
                else:
                    idx = find_first(needle, haystack)
            except GWordError as e:
                return f"Error: {e}"
            if idx is None:
                return f"{needle} not found in {haystack}"
            return f"{needle} found in {haystack} at syllable {idx}"

        elif cmd == "ball":
            try:
                radius = int(arg) if arg else 2
                gens = self.group.gens()
                _, sizes = wlmetric_ball(gens + [g.inv() for g in gens], radius=radius)
            except ValueError as e:
                return f"Error: {e}"
            return "Ball sizes: " + ", ".join(str(n) for n in sizes)

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return """gword REPL Commands:
  :help              Show this help
  :gens NAMES        Start over in the free group on NAMES (e.g. :gens a b c)
  :load FILE         Load substitutions from file
  :rules             List all loaded substitutions
  :clear             Clear all substitutions
  :trace on|off      Toggle tracing
  :find W in H       Find sub-word W inside H
  :ball RADIUS       Sizes of the word-length ball of the given radius
  :quit              Exit

Syntax:
  @name: pattern => replacement            Define a substitution
  @name "description": pattern => repl     Substitution with description
  s*t^-1*(s*t)^2                           Evaluate (reduce, then substitute)
  (id)                                     The identity
"""

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        Returns the result to print, or None.
        """
        line = line.strip()

        # Empty line or comment
        if not line or line.startswith("#"):
            return None

        if line.startswith(":"):
            return self.handle_command(line)

        if "=>" in line:
            try:
                sub = parse_substitution_line(line, self.group)
            except GWordError as e:
                return f"Error: {e}"
            if sub is None:
                return "Failed to parse substitution"
            self.substitutions.append(sub)
            return "Added 1 substitution"

        try:
            word, trace = self.evaluate(line)
        except GWordError as e:
            return f"Error: {e}"
        if trace:
            return f"{word}\n{trace.format('rules')}"
        return str(word)

    def run(self):
        """Run the REPL loop."""
        print(f"gword - words in {self.group}: {' '.join(self.group.names)}")
        print("Type :help for help, :quit to exit")
        print()

        while self.running:
            try:
                prompt = "...... " if self.multi_line_buffer else "gword> "
                line = input(prompt)

                if self.multi_line_buffer:
                    self.multi_line_buffer += " " + line
                else:
                    self.multi_line_buffer = line

                paren_count = count_parens(self.multi_line_buffer)
                if paren_count > 0:
                    continue
                elif paren_count < 0:
                    print("Error: Unbalanced parentheses (too many closing)")
                    self.multi_line_buffer = ""
                    continue

                complete_input = self.multi_line_buffer
                self.multi_line_buffer = ""

                result = self.process_line(complete_input)
                if result:
                    print(result)

            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                if self.multi_line_buffer:
                    print("\nInput cancelled")
                    self.multi_line_buffer = ""
                else:
                    print()
                continue

        self.save_history()


class ScriptRunner:
    """Runs gword scripts."""

    def __init__(self, generators: Optional[List[str]] = None):
        self.repl = GWordREPL(generators)

    def run_script(self, path: Path, quiet: bool = False) -> int:
        """
        Run a script file.

        Args:
            path: Path to the script
            quiet: If True, don't print word results

        Returns:
            Exit code (0 for success)
        """
        try:
            lines = path.read_text().splitlines()
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1

        for lineno, line in enumerate(lines, 1):
            line = line.strip()

            # Skip empty lines, comments, and shebang
            if not line or line.startswith("#"):
                continue

            if line.startswith(":"):
                result = self.repl.handle_command(line)
                if is_failure(result):
                    print(f"{path}:{lineno}: {result}", file=sys.stderr)
                    return 1
                if result and line.split()[0] in (":find", ":ball", ":rules") and not quiet:
                    print(result)
                continue

            result = self.repl.process_line(line)
            if is_failure(result):
                print(f"{path}:{lineno}: {result}", file=sys.stderr)
                return 1
            if result and "=>" not in line and not quiet:
                print(result)

        return 0

    def run_expression(self, expr_str: str) -> int:
        """
        Evaluate a single expression.

        Returns:
            Exit code (0 for success)
        """
        result = self.repl.process_line(expr_str)
        if result:
            print(result)
            if is_failure(result):
                return 1
        return 0

    def run_stdin(self) -> int:
        """
        Read words from stdin and evaluate them.

        Returns:
            Exit code (0 for success)
        """
        for line in sys.stdin:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            result = self.repl.process_line(line)
            if result:
                print(result)
                if is_failure(result):
                    return 1

        return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="gword",
        description="gword - words, reduction and substitution in free groups",
        epilog="Examples:\n"
               "  gword                            Start REPL\n"
               "  gword script.gw                  Run script\n"
               "  gword -e '(t*s)^3'               Evaluate a word\n"
               "  gword -g a,b -e 'a*b*b^-1'       Evaluate over generators a, b\n"
               "  echo 's*s^-1' | gword            Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="Script file to run (.gw)"
    )

    parser.add_argument(
        "-g", "--gens",
        default=",".join(DEFAULT_GENERATORS),
        help="Generator names, comma or space separated (default: s,t)"
    )

    parser.add_argument(
        "-r", "--rules",
        action="append",
        default=[],
        help="Load substitutions from file (can be specified multiple times)"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Evaluate a single word"
    )

    parser.add_argument(
        "-t", "--trace",
        action="store_true",
        help="Enable tracing"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (suppress non-essential output)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        runner = ScriptRunner(split_generators(args.gens))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    runner.repl.trace = args.trace

    for rules_file in args.rules:
        try:
            count = runner.repl.load_file(Path(rules_file))
            if not args.quiet:
                print(f"Loaded {count} substitutions from {rules_file}", file=sys.stderr)
        except (GWordError, OSError) as e:
            print(f"Error loading {rules_file}: {e}", file=sys.stderr)
            sys.exit(1)

    if args.script:
        sys.exit(runner.run_script(Path(args.script), quiet=args.quiet))

    elif args.expr:
        sys.exit(runner.run_expression(args.expr))

    elif not sys.stdin.isatty():
        sys.exit(runner.run_stdin())

    else:
        runner.repl.run()


if __name__ == "__main__":
    main()
