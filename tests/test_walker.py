"""Tests for the generic AST walker."""

from jsassist.frontend.ast_compat import children, in_range, is_after, is_before
from jsassist.frontend.walker import Found, visit


def _node(kind: str, start: int | None, end: int | None, **fields: object) -> dict:
    node: dict = {"type": kind}
    if start is not None:
        node["range"] = [start, end]
    node.update(fields)
    return node


def _tree() -> dict:
    # Fields deliberately out of source order.
    right = _node("Identifier", 4, 5, name="b")
    left = _node("Identifier", 0, 1, name="a")
    expr = _node("BinaryExpression", 0, 5, right=right, left=left, operator="+")
    stmt = _node("ExpressionStatement", 0, 6, expression=expr)
    return _node("Program", 0, 6, body=[stmt], comments=[_node("Block", 0, 0, value="x")])


def _names(order: list[dict]) -> list[str]:
    return [n.get("name", n["type"]) for n in order]


def test_children_sorted_by_start():
    expr = _tree()["body"][0]["expression"]
    assert _names(children(expr)) == ["a", "b"]


def test_unranged_children_last_in_field_order():
    node = _node(
        "Program",
        0,
        9,
        body=[_node("X", None, None, name="late1"), _node("Y", 3, 4, name="early"), _node("Z", None, None, name="late2")],
    )
    assert _names(children(node)) == ["early", "late1", "late2"]


def test_pre_and_post_order():
    pre: list[dict] = []
    post: list[dict] = []

    def on_pre(node, ctx, entering):
        pre.append(node)
        return True

    def on_post(node, ctx, entering):
        post.append(node)
        return None

    assert visit(_tree(), None, on_pre, on_post) is None
    assert _names(pre) == ["Program", "ExpressionStatement", "BinaryExpression", "a", "b"]
    assert _names(post) == ["a", "b", "BinaryExpression", "ExpressionStatement", "Program"]


def test_comments_are_not_visited():
    seen: list[str] = []

    def on_pre(node, ctx, entering):
        seen.append(node["type"])
        return True

    visit(_tree(), None, on_pre)
    assert "Block" not in seen


def test_falsy_pre_skips_subtree_and_post():
    post: list[str] = []

    def on_pre(node, ctx, entering):
        return node["type"] != "BinaryExpression"

    def on_post(node, ctx, entering):
        post.append(node.get("name", node["type"]))
        return None

    visit(_tree(), None, on_pre, on_post)
    assert post == ["ExpressionStatement", "Program"]


def test_found_stops_the_walk():
    post: list[str] = []

    def on_pre(node, ctx, entering):
        return True

    def on_post(node, ctx, entering):
        post.append(node.get("name", node["type"]))
        if node.get("name") == "a":
            return Found("hit")
        return None

    result = visit(_tree(), None, on_pre, on_post)
    assert result == Found("hit")
    assert post == ["a"]


def test_found_from_pre():
    def on_pre(node, ctx, entering):
        if node["type"] == "ExpressionStatement":
            return Found(node["range"])
        return True

    assert visit(_tree(), None, on_pre).value == [0, 6]


def test_offset_predicates():
    assert in_range(3, (3, 5))
    assert in_range(5, (3, 5))
    assert not in_range(6, (3, 5))
    assert not in_range(None, (3, 5))
    assert is_before(2, (3, 5))
    assert not is_before(3, (3, 5))
    assert is_after(6, (3, 5))
    assert not is_after(5, (3, 5))
    assert is_after(None, (3, 5))
    assert not is_before(None, (3, 5))
