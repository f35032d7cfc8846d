"""Inference visitor: syntax-directed type synthesis over the ESTree AST.

infer_pre runs top-down and opens scopes, names functions, and marks
left-hand sides. infer_post runs bottom-up and assigns each node its type.
The walk always ends with a Found carrying the name of the record whose
members are visible at the cursor (or, with no cursor, the global scope).
"""

from __future__ import annotations

import logging

from ..middleend.returns import find_return
from ..model import (
    ARGUMENTS,
    ARRAY,
    BOOLEAN,
    ERROR,
    GLOBAL,
    NUMBER,
    OBJECT,
    REGEXP,
    STRING,
    FuncType,
    Indexer,
    NamedType,
    Record,
    Summary,
    Type,
    return_type,
    with_return,
)
from .ast_compat import (
    FUNCTION_EXPRESSIONS,
    ASTNode,
    identifier_name,
    in_range,
    is_after,
    is_before,
    is_type,
    node_range,
    node_type,
)
from .classify import after_dot
from .context import InferenceState
from .environment import Environment
from .walker import Found, visit

logger = logging.getLogger(__name__)

NUMERIC_OPERATORS: set[str] = {"-", "/", "*", "%", "&", "|", "^", "<<", ">>", ">>>"}
COMPARISON_OPERATORS: set[str] = {"!==", "!=", "===", "==", "<", "<=", ">", ">="}


def run_inference(
    root: ASTNode,
    source: str,
    offset: int | None,
    env: Environment,
    indexer: Indexer | None = None,
) -> tuple[InferenceState, str]:
    """Infer types over root. Returns the state and the record name at the cursor."""
    state = InferenceState(env=env, source=source, offset=offset, indexer=indexer)
    add_jslint_globals(root, env)
    add_indexed_globals(env, indexer)
    found = visit(root, state, infer_pre, infer_post)
    if found is None or not isinstance(found.value, str):
        raise RuntimeError("inference walk ended without resolving a scope")
    return state, found.value


def add_jslint_globals(root: ASTNode, env: Environment) -> None:
    """Seed names from the first /*global a b*/ directive as untyped globals."""
    for comment in root.get("comments") or []:
        value = comment.get("value") or ""
        if comment.get("type") == "Block" and value.startswith("global"):
            rng = node_range(comment)
            for name in value.split()[1:]:
                env.add_or_set_variable(name, None, None, rng)
            return


def add_indexed_globals(env: Environment, indexer: Indexer | None) -> None:
    if indexer is None:
        return
    for summary in indexer.retrieve_global_summaries():
        env.merge_summary(summary, "Global")


# --- Module detection ---


def _define_call(stmt: object) -> ASTNode | None:
    if not is_type(stmt, ["ExpressionStatement"]):
        return None
    expr = stmt.get("expression")
    if not is_type(expr, ["CallExpression"]):
        return None
    if identifier_name(expr.get("callee")) != "define":
        return None
    return expr


def check_for_amd(program: ASTNode) -> ASTNode | None:
    """The define(...) call when it is the first statement of the file."""
    body = program.get("body") or []
    if len(body) == 0:
        return None
    return _define_call(body[0])


def check_for_commonjs(program: ASTNode) -> ASTNode | None:
    """A top-level define(function (require, exports, module) {...}) call."""
    for stmt in program.get("body") or []:
        call = _define_call(stmt)
        if call is None:
            continue
        args = call.get("arguments") or []
        if len(args) != 1 or not is_type(args[0], ["FunctionExpression"]):
            continue
        names = [identifier_name(p) for p in args[0].get("params") or []]
        if names == ["require", "exports", "module"]:
            return call
    return None


def apply_summary(summary: Summary, state: InferenceState) -> Type:
    """Merge a dependency into the environment; returns the type it provides."""
    env = state.env
    if isinstance(summary.provided, Record):
        name = env.new_fleeting_object()
        env.merge_summary(summary, name)
        return NamedType(name)
    env.merge_summary(summary, env.scope())
    return summary.provided


def extract_require_module(call: ASTNode, state: InferenceState) -> Type | None:
    """Provided type of require('name') when the indexer knows the module."""
    if state.indexer is None:
        return None
    if identifier_name(call.get("callee")) != "require":
        return None
    args = call.get("arguments") or []
    if len(args) != 1 or not is_type(args[0], ["Literal"]):
        return None
    name = args[0].get("value")
    if not isinstance(name, str):
        return None
    summary = state.indexer.retrieve_summary(name)
    if summary is None:
        return None
    return apply_summary(summary, state)


def find_module_definitions(fnode: ASTNode, state: InferenceState) -> list[Type]:
    """Parameter types for a function; AMD callbacks get their dependencies' types."""
    env = state.env
    params = fnode.get("params") or []
    types: list[Type] = []
    defn = state.info(fnode).amd_defn
    if len(params) > 0 and state.indexer is not None and defn is not None:
        args = defn.get("arguments") or []
        if len(args) > 1 and args[-1] is fnode:
            names = None
            if len(args) == 3 and is_type(args[0], ["Literal"]) and is_type(args[1], ["ArrayExpression"]):
                names = args[1].get("elements") or []
            elif len(args) == 2 and is_type(args[0], ["ArrayExpression"]):
                names = args[0].get("elements") or []
            if names is not None:
                for i in range(len(params)):
                    module = names[i] if i < len(names) else None
                    if is_type(module, ["Literal"]) and isinstance(module.get("value"), str):
                        summary = state.indexer.retrieve_summary(module["value"])
                        if summary is not None:
                            types.append(apply_summary(summary, state))
                        else:
                            types.append(NamedType(env.new_fleeting_object()))
                    else:
                        types.append(OBJECT)
    if len(types) == 0:
        types = [NamedType(env.new_fleeting_object()) for _ in params]
    return types


def find_right_most(node: object) -> ASTNode | None:
    """Identifier assigned to by a (possibly dotted) left-hand side."""
    if is_type(node, ["Identifier"]):
        return node
    if is_type(node, ["MemberExpression"]):
        return find_right_most(node.get("property"))
    return None


def _param_name(param: object) -> str:
    if is_type(param, ["AssignmentPattern"]):
        return _param_name(param.get("left"))
    if is_type(param, ["RestElement"]):
        return _param_name(param.get("argument"))
    return identifier_name(param) or ""


def _literal_type(node: ASTNode) -> Type:
    if node.get("regex") is not None:
        return REGEXP
    value = node.get("value")
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    return OBJECT


# --- Pre-order rules ---


def _pre_program(node: ASTNode, state: InferenceState) -> None:
    state.commonjs_module = check_for_commonjs(node)
    if state.commonjs_module is None:
        state.amd_module = check_for_amd(node)
    if state.commonjs_module is not None:
        logger.debug("wrapped commonjs module")
    elif state.amd_module is not None:
        logger.debug("AMD module")


def _pre_block(node: ASTNode, state: InferenceState) -> None:
    state.info(node).type = NamedType(state.env.new_scope())


def _pre_literal(node: ASTNode, state: InferenceState) -> None:
    state.info(node).type = _literal_type(node)


def _pre_array(node: ASTNode, state: InferenceState) -> None:
    state.info(node).type = ARRAY


def _pre_object(node: ASTNode, state: InferenceState) -> None:
    env = state.env
    obj = NamedType(env.new_object(None, node_range(node)))
    state.info(node).type = obj
    for prop in node.get("properties") or []:
        key = prop.get("key")
        name = identifier_name(key)
        if name is None or prop.get("computed"):
            continue
        env.add_variable(name, obj, OBJECT, node_range(key))
        state.info(key).is_lhs = True
        value = prop.get("value")
        if is_type(value, FUNCTION_EXPRESSIONS):
            info = state.info(value)
            info.fname = name
            info.fname_range = node_range(key)


def _pre_function(node: ASTNode, state: InferenceState) -> None:
    env = state.env
    info = state.info(node)
    rng = node_range(node)
    fid = node.get("id")
    name = identifier_name(fid)
    name_range = node_range(fid)
    if name is None and info.fname is not None:
        name = info.fname
        name_range = info.fname_range or rng
    param_nodes = node.get("params") or []
    params = tuple(_param_name(p) for p in param_nodes)
    body = node.get("body")
    is_constructor = (
        name is not None
        and body is not None
        and node_type(node) != "ArrowFunctionExpression"
        and name[:1].isupper()
    )
    if is_constructor:
        ret: Type = NamedType(env.new_object(name, rng))
    else:
        ret = OBJECT
    if isinstance(body, dict):
        state.info(body).is_constructor = is_constructor
    fn_type = FuncType(ret, params)
    if is_constructor:
        env.create_constructor(fn_type, ret.name)
    info.type = fn_type
    if name is not None and not is_before(state.offset, rng):
        env.add_variable(name, None, fn_type, name_range)
    env.new_scope()
    if node_type(node) != "ArrowFunctionExpression":
        env.add_variable("arguments", None, ARGUMENTS, rng)
    if len(params) > 0:
        defs = find_module_definitions(node, state)
        for i, param in enumerate(param_nodes):
            if params[i] != "":
                env.add_variable(params[i], None, defs[i], node_range(param))


def _pre_declarator(node: ASTNode, state: InferenceState) -> None:
    vid = node.get("id")
    if identifier_name(vid) is None:
        return
    state.info(vid).is_lhs = True
    init = node.get("init")
    if is_type(init, FUNCTION_EXPRESSIONS):
        info = state.info(init)
        info.fname = vid["name"]
        info.fname_range = node_range(vid)


def _pre_assignment(node: ASTNode, state: InferenceState) -> None:
    left = node.get("left")
    right = node.get("right")
    if is_type(left, ["Identifier"]) and is_type(right, FUNCTION_EXPRESSIONS):
        info = state.info(right)
        info.fname = left["name"]
        info.fname_range = node_range(left)


def _pre_catch(node: ASTNode, state: InferenceState) -> None:
    state.info(node).type = NamedType(state.env.new_scope())
    param = node.get("param")
    name = identifier_name(param)
    if name is not None:
        state.info(param).type = ERROR
        state.env.add_variable(name, None, ERROR, node_range(param))


def _pre_member(node: ASTNode, state: InferenceState) -> None:
    prop = node.get("property")
    if isinstance(prop, dict) and not node.get("computed"):
        state.info(prop).target = node.get("object")


def _pre_call(node: ASTNode, state: InferenceState) -> None:
    if identifier_name(node.get("callee")) not in ("define", "require"):
        return
    args = node.get("arguments") or []
    if len(args) > 1 and is_type(args[-1], FUNCTION_EXPRESSIONS) and is_type(args[-2], ["ArrayExpression"]):
        state.info(args[-1]).amd_defn = node


_PRE = {
    "Program": _pre_program,
    "BlockStatement": _pre_block,
    "Literal": _pre_literal,
    "ArrayExpression": _pre_array,
    "ObjectExpression": _pre_object,
    "FunctionDeclaration": _pre_function,
    "FunctionExpression": _pre_function,
    "ArrowFunctionExpression": _pre_function,
    "VariableDeclarator": _pre_declarator,
    "AssignmentExpression": _pre_assignment,
    "CatchClause": _pre_catch,
    "MemberExpression": _pre_member,
    "CallExpression": _pre_call,
}


def infer_pre(node: ASTNode, state: InferenceState, entering: bool) -> bool:
    kind = node_type(node)
    if kind == "VariableDeclaration" and is_before(state.offset, node_range(node)):
        return False
    handler = _PRE.get(kind)
    if handler is not None:
        handler(node, state)
    return True


# --- Post-order rules ---


def _post_program(node: ASTNode, state: InferenceState) -> object:
    return Found(state.env.scope())


def _post_block(node: ASTNode, state: InferenceState) -> object:
    if in_range(state.offset, node_range(node)):
        return Found(state.env.scope())
    state.env.pop_scope()
    return None


def _post_member(node: ASTNode, state: InferenceState) -> object:
    obj = node.get("object")
    if after_dot(state.offset, node, state.source):
        return Found(state.env.scope(state.type_of(obj)))
    prop = node.get("property")
    if node.get("computed"):
        t = OBJECT
    elif isinstance(prop, dict):
        t = state.type_of(prop)
    else:
        t = state.type_of(obj)
    state.info(node).type = t
    return None


def _post_call(node: ASTNode, state: InferenceState) -> object:
    t = extract_require_module(node, state)
    if t is None:
        t = return_type(state.type_of(node.get("callee")))
    state.info(node).type = t
    return None


def _post_new(node: ASTNode, state: InferenceState) -> object:
    state.info(node).type = return_type(state.type_of(node.get("callee")))
    return None


def _post_object(node: ASTNode, state: InferenceState) -> object:
    obj = state.info(node).type
    for prop in node.get("properties") or []:
        key = prop.get("key")
        name = identifier_name(key)
        if name is None or prop.get("computed"):
            continue
        t = state.type_of(prop.get("value"))
        state.info(key).type = t
        state.env.add_variable(name, obj, t, node_range(key))
    state.env.pop_scope()
    return None


def _post_binary(node: ASTNode, state: InferenceState) -> object:
    op = node.get("operator")
    left = state.type_of(node.get("left"))
    if op == "+":
        if left == STRING or state.type_of(node.get("right")) == STRING:
            t = STRING
        else:
            t = NUMBER
    elif op in NUMERIC_OPERATORS:
        t = NUMBER
    elif op == "&&" or op == "||":
        t = left
    elif op in COMPARISON_OPERATORS:
        t = BOOLEAN
    else:
        t = OBJECT
    state.info(node).type = t
    return None


def _post_unary(node: ASTNode, state: InferenceState) -> object:
    state.info(node).type = BOOLEAN if node.get("operator") == "!" else NUMBER
    return None


def _post_function(node: ASTNode, state: InferenceState) -> object:
    env = state.env
    env.pop_scope()
    body = node.get("body")
    if not isinstance(body, dict):
        return None
    info = state.info(node)
    fn_type = info.type
    if not isinstance(fn_type, FuncType):
        return None
    fid = node.get("id")
    if state.info(body).is_constructor:
        env.pop_scope()
        ctor_name = identifier_name(fid) or info.fname or fn_type.ret.name
        name_range = node_range(fid) if fid is not None else node_range(node)
        env.add_or_set_variable(ctor_name, None, fn_type, name_range)
        return None
    if node_type(node) == "ArrowFunctionExpression" and not is_type(body, ["BlockStatement"]):
        returned: ASTNode | None = body
    else:
        returned = find_return(body)
    if returned is None:
        return None
    info.type = with_return(fn_type, state.type_of(returned))
    name = identifier_name(fid)
    name_range = node_range(fid)
    if name is None:
        name = info.fname
        name_range = info.fname_range
    if name is not None:
        env.add_or_set_variable(name, None, info.type, name_range)
    return None


def _post_declarator(node: ASTNode, state: InferenceState) -> object:
    init = node.get("init")
    t = state.type_of(init) if init is not None else OBJECT
    state.info(node).type = t
    vid = node.get("id")
    name = identifier_name(vid)
    if name is not None:
        state.info(vid).type = t
        state.env.add_variable(name, None, t, node_range(vid))
    return None


def _post_assignment(node: ASTNode, state: InferenceState) -> object:
    op = node.get("operator")
    left = node.get("left")
    if op == "=":
        t = state.type_of(node.get("right"))
    elif op == "+=" and state.type_of(left) == STRING:
        t = STRING
    else:
        t = NUMBER
    state.info(node).type = t
    right_most = find_right_most(left)
    if right_most is not None:
        state.info(right_most).type = t
        state.env.add_or_set_variable(
            right_most["name"], state.target_type(right_most), t, node_range(right_most)
        )
    return None


def _post_identifier(node: ASTNode, state: InferenceState) -> object:
    env = state.env
    rng = node_range(node)
    info = state.info(node)
    target = state.target_type(node)
    if in_range(state.offset, rng):
        return Found(env.scope(target))
    name = node.get("name")
    t = env.lookup_name(name, target)
    if t is not None:
        info.type = t
    elif info.target is None and not info.is_lhs and is_after(state.offset, rng):
        info.type = env.add_or_set_variable(name, GLOBAL, None, rng)
    return None


def _post_this(node: ASTNode, state: InferenceState) -> object:
    state.info(node).type = state.env.lookup_name("this")
    return None


def _post_return(node: ASTNode, state: InferenceState) -> object:
    argument = node.get("argument")
    if argument is not None:
        state.info(node).type = state.type_of(argument)
    return None


_POST = {
    "Program": _post_program,
    "BlockStatement": _post_block,
    "CatchClause": _post_block,
    "MemberExpression": _post_member,
    "CallExpression": _post_call,
    "NewExpression": _post_new,
    "ObjectExpression": _post_object,
    "BinaryExpression": _post_binary,
    "LogicalExpression": _post_binary,
    "UnaryExpression": _post_unary,
    "UpdateExpression": _post_unary,
    "FunctionDeclaration": _post_function,
    "FunctionExpression": _post_function,
    "ArrowFunctionExpression": _post_function,
    "VariableDeclarator": _post_declarator,
    "AssignmentExpression": _post_assignment,
    "Identifier": _post_identifier,
    "ThisExpression": _post_this,
    "ReturnStatement": _post_return,
}


def infer_post(node: ASTNode, state: InferenceState, entering: bool) -> object:
    handler = _POST.get(node_type(node))
    if handler is not None:
        result = handler(node, state)
        if isinstance(result, Found):
            return result
    info = state.info(node)
    if info.type is None:
        info.type = OBJECT
    return None
