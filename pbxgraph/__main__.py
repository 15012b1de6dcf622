from argparse import ArgumentParser
import logging
import sys

from pbxgraph.details.tools.add_source import add_source_main
from pbxgraph.details.tools.format import format_main
from pbxgraph.details.tools.set_build_property import set_build_property_main
from pbxgraph.details.tools.targets import targets_main
from pbxgraph.details.tools.validate import validate_main
from pbxgraph.project import Project


def main(argv=None):
    COMMANDS = {
        "format": format_main,
        "validate": validate_main,
        "targets": targets_main,
        "add-source": add_source_main,
        "set-build-property": set_build_property_main,
    }
    # parse common arguments...
    parser = ArgumentParser(prog="pbxgraph")
    parser.add_argument("command", choices=COMMANDS.keys())
    parser.add_argument("project", type=str, help="path to a project.pbxproj file")
    parser.add_argument("--verbose", action="store_true")
    args, command_args = parser.parse_known_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    project = Project(args.project).parse()
    # Pass the parsed project and the remaining args to the command
    exit_code = COMMANDS[args.command](project=project, command_args=command_args)
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
