"""Proposal generation: members visible on a record, filtered and sorted."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..frontend.classify import MEMBER
from ..frontend.environment import Environment
from ..model import FuncType
from .readable import readable_type


@dataclass
class Position:
    """A linked-editing span for one argument of a function proposal."""

    offset: int
    length: int

    def to_dict(self) -> dict[str, object]:
        return {"offset": self.offset, "length": self.length}


@dataclass
class Proposal:
    """Completion text (without the typed prefix) and its display description."""

    proposal: str
    description: str
    positions: list[Position] = field(default_factory=list)
    escape_position: int | None = None

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {"proposal": self.proposal, "description": self.description}
        if self.escape_position is not None:
            d["positions"] = [p.to_dict() for p in self.positions]
            d["escapePosition"] = self.escape_position
        return d


def function_completion(name: str, fn: FuncType, start: int) -> tuple[str, list[Position]]:
    """Call text ``name(a, b)`` and the span of each argument, relative to start."""
    completion = name + "("
    positions: list[Position] = []
    for i, param in enumerate(fn.params):
        if i > 0:
            completion += ", "
        positions.append(Position(start + len(completion), len(param)))
        completion += param
    return completion + ")", positions


def _collect(
    type_name: str,
    env: Environment,
    kind: str,
    prefix: str,
    replace_start: int,
    proposals: dict[str, Proposal],
) -> None:
    # Root of the prototype chain first so derived members overwrite base ones.
    for record in reversed(list(env.chain(type_name))):
        for name, definition in record.members.items():
            if name == "this" and kind == MEMBER:
                continue
            if not name.startswith(prefix):
                continue
            t = definition.type
            if isinstance(t, FuncType):
                completion, positions = function_completion(name, t, replace_start)
                proposals[name] = Proposal(
                    completion[len(prefix) :],
                    completion + " : " + readable_type(t, env),
                    positions,
                    replace_start + len(completion),
                )
            else:
                proposals[name] = Proposal(name[len(prefix) :], name + " : " + readable_type(t, env))


def generate_proposals(
    type_name: str, env: Environment, kind: str, prefix: str, replace_start: int
) -> list[Proposal]:
    """Sorted, de-duplicated proposals for members of type_name matching prefix."""
    collected: dict[str, Proposal] = {}
    if env.find_type(type_name) is not None:
        _collect(type_name, env, kind, prefix, replace_start, collected)
    result: list[Proposal] = []
    for proposal in sorted(collected.values(), key=lambda p: p.description):
        if len(result) > 0 and result[-1].description == proposal.description:
            continue
        result.append(proposal)
    return result
