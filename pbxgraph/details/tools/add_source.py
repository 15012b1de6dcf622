from argparse import ArgumentParser

from pbxgraph.file import FileOptions
from pbxgraph.project import Project


def add_source_main(project: Project, command_args: list[str]):
    parser = ArgumentParser(prog="pbxgraph add-source")
    parser.add_argument("paths", nargs="+")
    parser.add_argument("--target", type=str, help="target name")
    parser.add_argument("--group", type=str, help="name of the group to place the files in")
    args = parser.parse_args(command_args)

    target = None
    if args.target:
        target = project.find_target_key(args.target)
        if target is None:
            print(f"Unknown target: {args.target}")
            return 1

    group = None
    if args.group:
        group = project.find_pbx_group_key(name=args.group) or project.find_pbx_group_key(
            path=args.group
        )
        if group is None:
            print(f"Unknown group: {args.group}")
            return 1

    for path in args.paths:
        if project.add_source_file(path, FileOptions(target=target), group) is None:
            print(f"{path} is already part of the project")
    project.save()
    return None
