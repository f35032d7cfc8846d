"""Context objects for inference: per-node facts and per-run state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..model import OBJECT, Indexer, Type
from .ast_compat import ASTNode

if TYPE_CHECKING:
    from .environment import Environment


@dataclass
class NodeInfo:
    """Facts attached to one AST node during a walk."""

    type: Type | None = None
    target: ASTNode | None = None
    is_lhs: bool = False
    fname: str | None = None
    fname_range: tuple[int, int] | None = None
    amd_defn: ASTNode | None = None
    is_constructor: bool = False


class SideTable:
    """NodeInfo keyed by node identity; the AST itself is never mutated."""

    def __init__(self) -> None:
        self._infos: dict[int, tuple[ASTNode, NodeInfo]] = {}

    def info(self, node: ASTNode) -> NodeInfo:
        entry = self._infos.get(id(node))
        if entry is None:
            entry = (node, NodeInfo())
            self._infos[id(node)] = entry
        return entry[1]

    def peek(self, node: ASTNode) -> NodeInfo | None:
        entry = self._infos.get(id(node))
        if entry is None:
            return None
        return entry[1]


@dataclass
class InferenceState:
    """Everything one inference walk reads and writes."""

    env: Environment
    source: str
    offset: int | None
    indexer: Indexer | None = None
    table: SideTable = field(default_factory=SideTable)
    amd_module: ASTNode | None = None
    commonjs_module: ASTNode | None = None

    def info(self, node: ASTNode) -> NodeInfo:
        return self.table.info(node)

    def type_of(self, node: object) -> Type:
        """Inferred type of a visited node; Object when unknown."""
        if not isinstance(node, dict):
            return OBJECT
        info = self.table.peek(node)
        if info is None or info.type is None:
            return OBJECT
        return info.type

    def target_type(self, node: ASTNode) -> Type | None:
        """Inferred type of the node whose member this node names, if any."""
        info = self.table.peek(node)
        if info is None or info.target is None:
            return None
        target = self.table.peek(info.target)
        if target is None:
            return None
        return target.type
