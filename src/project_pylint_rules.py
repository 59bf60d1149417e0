"""Custom pylint rules for project typing and JSON codec policy."""

from __future__ import annotations

from collections.abc import Iterable

from astroid import nodes
from pylint.checkers import BaseChecker
from pylint.lint import PyLinter


_MESSAGE_PREFER_OPTIONAL = "prefer-optional"
_MESSAGE_RAW_JSON_CALL = "raw-json-call"

# Modules allowed to call the stdlib json reader and writer directly.
_CODEC_MODULES = frozenset({"decoder", "encoder", "locate"})
_JSON_FUNCTIONS = frozenset({"dump", "dumps", "load", "loads"})


class ProjectRulesChecker(BaseChecker):
    """Project-specific AST checks."""

    name = "project-rules"

    msgs = {
        "C9501": (
            "Use Optional[T] instead of T | None in annotations",
            _MESSAGE_PREFER_OPTIONAL,
            "Project style requires Optional[T] for nullable annotations.",
        ),
        "E9504": (
            "Call to json.%s outside the codec modules; use tracker_json.decode/encode",
            _MESSAGE_RAW_JSON_CALL,
            "Payload JSON must go through the codec so that integer, double and "
            "key-order fidelity hold.",
        ),
    }

    def visit_annassign(self, node: nodes.AnnAssign) -> None:
        """Validate annotation style for annotated assignments."""
        self._check_annotation(node.annotation)

    def visit_arguments(self, node: nodes.Arguments) -> None:
        """Validate annotation style for function arguments."""
        for annotation in self._iter_argument_annotations(node):
            self._check_annotation(annotation)

    def visit_functiondef(self, node: nodes.FunctionDef) -> None:
        """Validate annotation style for function return type."""
        if node.returns is not None:
            self._check_annotation(node.returns)

    def visit_call(self, node: nodes.Call) -> None:
        """Reject direct stdlib json calls outside the codec modules."""
        func = node.func
        if not isinstance(func, nodes.Attribute) or func.attrname not in _JSON_FUNCTIONS:
            return
        if not isinstance(func.expr, nodes.Name) or func.expr.name != "json":
            return
        module_name = node.root().name.rsplit(".", maxsplit=1)[-1]
        if module_name in _CODEC_MODULES:
            return
        self.add_message(_MESSAGE_RAW_JSON_CALL, node=node, args=(func.attrname,))

    def _check_annotation(self, annotation: nodes.NodeNG) -> None:
        for candidate in annotation.nodes_of_class(nodes.BinOp):
            if candidate.op != "|":
                continue
            if _is_none_literal(candidate.left) or _is_none_literal(candidate.right):
                self.add_message(_MESSAGE_PREFER_OPTIONAL, node=candidate)

    @staticmethod
    def _iter_argument_annotations(arguments: nodes.Arguments) -> Iterable[nodes.NodeNG]:
        for annotation in (
            *arguments.posonlyargs_annotations,
            *arguments.annotations,
            *arguments.kwonlyargs_annotations,
            arguments.varargannotation,
            arguments.kwargannotation,
        ):
            if annotation is not None:
                yield annotation


def _is_none_literal(node: nodes.NodeNG) -> bool:
    return isinstance(node, nodes.Const) and node.value is None


def register(linter: PyLinter) -> None:
    """Register checker."""
    linter.register_checker(ProjectRulesChecker(linter))
