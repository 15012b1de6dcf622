from pbxgraph.objects import ref_id
from pbxgraph.project import Project
from pbxgraph.utils import unquote


def targets_main(project: Project, command_args: list[str]):
    assert not command_args

    for target in project.all_targets():
        print(f"{target.name} ({target.kind.value}) {target.uuid}")
        for phase in target.obj.get("buildPhases") or []:
            print(f"  {getattr(phase, 'comment', None) or ref_id(phase)}")
        product_type = target.obj.get("productType")
        if product_type:
            print(f"  product type: {unquote(product_type)}")
