from typing import Iterable

import libcst as cst


class BindingRenamerTransformer(cst.CSTTransformer):
    """
    Renames a fixed set of ``Name`` nodes, identified by node identity.

    The nodes must come from the module being visited (for a
    ``MetadataWrapper``, from ``wrapper.module``).
    """

    def __init__(self, targets: Iterable[cst.Name], old_name: str, new_name: str):
        super().__init__()
        self._target_ids = {id(node) for node in targets}
        self.old_name = old_name
        self.new_name = new_name
        self.renamed = 0

    def leave_Name(
        self, original_node: cst.Name, updated_node: cst.Name
    ) -> cst.BaseExpression:
        if id(original_node) not in self._target_ids:
            return updated_node
        # Name Match Guard: never rewrite a node whose text is not the old name.
        if original_node.value != self.old_name:
            return updated_node
        self.renamed += 1
        return updated_node.with_changes(value=self.new_name)
