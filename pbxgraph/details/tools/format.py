from argparse import ArgumentParser

from pbxgraph.config import WriterOptions
from pbxgraph.project import Project


def format_main(project: Project, command_args: list[str]):
    parser = ArgumentParser(prog="pbxgraph format")
    parser.add_argument("--omit-empty-values", action="store_true")
    parser.add_argument("--in-place", action="store_true")
    args = parser.parse_args(command_args)

    options = WriterOptions(omit_empty_values=args.omit_empty_values)
    if args.in_place:
        project.save(options=options)
    else:
        print(project.write(options), end="")
