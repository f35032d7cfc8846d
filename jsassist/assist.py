"""Content assist provider: proposals, hover, definitions and file summaries."""

from __future__ import annotations

import logging

from .backend.proposals import Proposal, generate_proposals
from .backend.readable import readable_type
from .frontend.classify import classify, find_hover_target
from .frontend.environment import Environment
from .frontend.inference import run_inference
from .frontend.parse import ParseError, parse
from .middleend.reachability import filter_types
from .model import (
    GLOBAL,
    OBJECT,
    Definition,
    DefinitionResult,
    FuncType,
    Indexer,
    Record,
    Summary,
    Type,
    return_type,
)

logger = logging.getLogger(__name__)

LOCAL_UID = "local"


class ContentAssistProvider:
    """Entry point for editor requests. The indexer is optional.

    Without an indexer, summaries of other files are never consulted.
    Every request builds and discards its own Environment.
    """

    def __init__(self, indexer: Indexer | None = None) -> None:
        self.indexer: Indexer | None = indexer

    def compute_proposals(self, source: str, offset: int, prefix: str = "") -> list[Proposal]:
        """Completion proposals for the cursor at offset with prefix already typed."""
        try:
            root = parse(source)
            kind = classify(root, offset, prefix, source)
            if not kind:
                logger.debug("no completion at offset %d", offset)
                return []
            env = Environment(LOCAL_UID)
            _, target = run_inference(root, source, offset, env, self.indexer)
            return generate_proposals(target, env, kind, prefix, offset - len(prefix))
        except ParseError:
            raise
        except Exception:
            logger.error("computing proposals failed at offset %d", offset, exc_info=True)
            raise

    def compute_hover(self, source: str, offset: int) -> str | None:
        """``name :: type`` for the identifier at offset."""
        result = self.find_definition(source, offset)
        if result is None:
            return None
        return result.hover

    def find_definition(self, source: str, offset: int) -> DefinitionResult | None:
        """Where the identifier at offset was bound, with its type and hover text."""
        try:
            root = parse(source)
            target = find_hover_target(root, offset)
            if target is None:
                return None
            env = Environment(LOCAL_UID)
            state, _ = run_inference(root, source, offset, env, self.indexer)
            name = target.get("name")
            definition = env.lookup_name(name, state.target_type(target), include_definition=True)
            if not isinstance(definition, Definition):
                return None
            hover = name + " :: " + readable_type(definition.type, env, use_signature=True)
            return DefinitionResult(definition.type, definition.range, definition.path, hover)
        except ParseError:
            raise
        except Exception:
            logger.error("finding definition failed at offset %d", offset, exc_info=True)
            raise

    def compute_summary(self, source: str, file_name: str) -> Summary:
        """What this file provides to files that depend on it."""
        root = parse(source)
        env = Environment(file_name)
        try:
            state, _ = run_inference(root, source, None, env, self.indexer)
        except Exception:
            logger.error("summarizing %s failed", file_name, exc_info=True)
            raise
        if state.amd_module is not None:
            args = state.amd_module.get("arguments") or []
            if len(args) > 0:
                module_type: Type = return_type(state.type_of(args[-1]))
            else:
                module_type = OBJECT
            kind = "AMD"
        elif state.commonjs_module is not None:
            exports_param = state.commonjs_module["arguments"][0]["params"][1]
            module_type = state.type_of(exports_param)
            kind = "commonjs"
        else:
            exports = env.types["Global"].members.get("exports")
            if exports is not None:
                module_type = exports.type
                kind = "commonjs"
            else:
                module_type = GLOBAL
                kind = "global"
        record = env.find_type(module_type)
        if isinstance(module_type, FuncType) or record is None or record.builtin:
            provided: Type | Record = module_type
        else:
            provided = record
            record.attach_path(file_name)
        types = filter_types(env.types, kind, module_type)
        for kept in types.values():
            kept.attach_path(file_name)
        logger.debug("summary of %s: kind %s, %d records", file_name, kind, len(types))
        return Summary(provided, types, kind)
