from argparse import ArgumentParser

from pbxgraph.project import Project
from pbxgraph.utils import quote_if_needed


def set_build_property_main(project: Project, command_args: list[str]):
    parser = ArgumentParser(prog="pbxgraph set-build-property")
    parser.add_argument("name")
    parser.add_argument("value")
    parser.add_argument("--config", type=str, help="configuration name, e.g. Debug")
    parser.add_argument("--target", type=str, help="target name")
    args = parser.parse_args(command_args)

    project.update_build_property(
        args.name, quote_if_needed(args.value), build=args.config, target_name=args.target
    )
    project.save()
