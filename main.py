from rich.pretty import pprint

from slimarg import *

parser = Parser(
    "Copy the given files into a destination directory.",
    "Exit status is 1 when the arguments cannot be parsed.",
)
parser.add_signal("h", "help", "Show this message and exit.")
parser.add_signal("", "version", "Show the version and exit.")
parser.add_flag("verbose", "v", "verbose", "Log every copied file.")
parser.add_option("jobs", "j", "jobs", "N", "Number of parallel copies.", type=uint8, default=1)
parser.add_option("suffix", "", "suffix", "TEXT", "Appended to existing names instead of overwriting.")
parser.add_operand("target", "DIR", "Destination directory.", required=True)
parser.add_sink("sources", "FILE", "Files to copy.")


if __name__ == '__main__':
    match outcome := parser.parse():
        case Signalled(long="help"):
            parser.write_help()
        case Signalled(long="version"):
            print(__import__("slimarg").__version__)
        case Failure():
            outcome.trigger(shell=True, fancy=True, colorful=True)
        case Success(values=values):
            pprint(values)
