from pbxgraph.project import Project
from pbxgraph.validator import validate_references


def validate_main(project: Project, command_args: list[str]):
    assert not command_args

    errors = validate_references(project.document)
    for error in errors:
        print(error)
    if errors:
        return 1
    print("No dangling references")
    return None
