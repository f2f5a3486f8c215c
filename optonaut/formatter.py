"""
Optonaut help formatter.

HelpFormatter renders the texts a parser shows: the usage line, the full help
listing and the version line. It only returns strings; printing is up to the
parser and its faults.

Layout of render_help():

    Usage: prog [options]

    Optional description, wrapped to the width.

    Options:
      -h, --help            show this help message and exit
      -fFILE, --file=FILE   read data from FILE
      --a-really-long-option-string=VALUE
                            help that does not fit beside the option
                            strings starts on the next line

    Optional epilog.

Option strings are joined with ", "; a value-taking option shows its metavar
right after a short string ("-fFILE") and after '=' for a long one
("--file=FILE"). Options whose help is SUPPRESS_HELP are left out.
"""
import textwrap

from .options import SUPPRESS_HELP
from .utils import progname


class HelpFormatter:
    """
    Indented help formatter.

    Parameters
    - indent_increment: spaces added before each option line (default 2).
    - max_help_position: the column help text may start at, at most (default 24).
    - width: total line width used for wrapping (default 80).
    """

    def __init__(self, indent_increment=2, max_help_position=24, width=80):
        if not isinstance(indent_increment, int) or indent_increment < 0:
            raise ValueError("formatter 'indent_increment' must be a non-negative integer")
        if not isinstance(max_help_position, int) or max_help_position < 0:
            raise ValueError("formatter 'max_help_position' must be a non-negative integer")
        if not isinstance(width, int) or width < 1:
            raise ValueError("formatter 'width' must be a positive integer")
        self.indent_increment = indent_increment
        self.max_help_position = max_help_position
        self.width = width

    @staticmethod
    def expand_prog(text, prog, /):
        return text.replace("%prog", prog if prog is not None else progname())

    def format_usage(self, usage, /):
        return f"Usage: {usage}\n"

    def format_heading(self, heading, /, indent=0):
        return f"{' ' * indent}{heading}:\n"

    def format_description(self, description, /):
        if not description:
            return ""
        return textwrap.fill(description, self.width) + "\n"

    def format_epilog(self, epilog, /):
        if not epilog:
            return "\n"
        return "\n" + textwrap.fill(epilog, self.width) + "\n\n"

    def format_option_strings(self, option, /):
        """
        Return "-fFILE, --file=FILE" style text for an option's active strings.
        """
        metavar = option.metavar if option.nargs > 0 else ""
        strings = []
        for string in option.strings:
            if len(string) == 2:
                strings.append(string + metavar)
            elif option.nargs > 0:
                strings.append(f"{string}={metavar}")
            else:
                strings.append(string)
        return ", ".join(strings)

    def format_option(self, option, /, help_position, indent=0):
        strings = self.format_option_strings(option)
        width = max(help_position - indent - 2, 0)
        if len(strings) > width:
            lines = [f"{' ' * indent}{strings}\n"]
            first = help_position
        else:
            lines = [f"{' ' * indent}{strings:<{width + 2}}"]
            first = 0

        if option.help:
            wrapped = textwrap.wrap(option.help, max(self.width - help_position, 11)) or [""]
            lines.append(f"{' ' * first}{wrapped[0]}\n")
            lines.extend(f"{' ' * help_position}{line}\n" for line in wrapped[1:])
        else:
            lines[0] = lines[0].rstrip() + "\n"
        return "".join(lines)

    def format_option_help(self, options, /):
        """
        Return the "Options:" section for the visible options, or "" when
        there are none.
        """
        visible = [option for option in options if option.help != SUPPRESS_HELP]
        if not visible:
            return ""

        indent = self.indent_increment
        longest = max(len(self.format_option_strings(option)) + indent for option in visible)
        help_position = min(longest + 2, self.max_help_position)

        return self.format_heading("Options") + "".join(
            self.format_option(option, help_position, indent) for option in visible
        )

    def render_usage(self, parser, /):
        """
        Usage line with %prog expanded, or "" when the parser has no usage.
        """
        if not parser.usage:
            return ""
        return self.format_usage(self.expand_prog(parser.usage, parser.prog))

    def render_help(self, parser, /):
        result = ""
        if usage := self.render_usage(parser):
            result += usage + "\n"
        if parser.description:
            result += self.format_description(self.expand_prog(parser.description, parser.prog)) + "\n"
        result += self.format_option_help(parser.options)
        result += self.format_epilog(parser.epilog)
        return result

    def render_version(self, parser, /):
        """
        Version text with %prog expanded, or "" when the parser has no version.
        """
        if not parser.version:
            return ""
        return self.expand_prog(parser.version, parser.prog) + "\n"


__all__ = (
    "HelpFormatter",
)
