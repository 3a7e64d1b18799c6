"""
Syntax tree wrapper for `ast`

Provides traversal, spans in character columns, and comment association.
"""

import ast
from collections.abc import Iterable

from codegraph_source.models import Comment, Span
from codegraph_source.parsing.source_buffer import SourceBuffer


class SyntaxTree:
    """
    Wrapper for a parsed module.

    A tree is usable right away; complete() materializes parent links and
    span cache for every node so later lookups never touch the buffer.
    """

    def __init__(self, buffer: SourceBuffer, root: ast.AST):
        """
        Initialize syntax tree.

        Args:
            buffer: Source buffer the tree was parsed from
            root: Module node
        """
        self.buffer = buffer
        self._root = root
        self._parents: dict[int, ast.AST] | None = None
        self._span_cache: dict[int, Span] = {}  # node id -> Span

    @property
    def root(self) -> ast.AST:
        """Get root node"""
        return self._root

    @property
    def is_complete(self) -> bool:
        return self._parents is not None

    def complete(self) -> "SyntaxTree":
        """
        Materialize parent links and spans for all nodes.

        Returns:
            self
        """
        if self._parents is not None:
            return self

        parents: dict[int, ast.AST] = {}
        for node in ast.walk(self._root):
            for child in ast.iter_child_nodes(node):
                parents[id(child)] = node
            if _has_position(node):
                self.get_span(node)

        self._parents = parents
        return self

    def walk(self, node: ast.AST | None = None) -> list[ast.AST]:
        """
        Walk the tree in depth-first (pre-order) order.

        Args:
            node: Starting node (defaults to root)

        Returns:
            List of nodes
        """
        if node is None:
            node = self._root

        nodes: list[ast.AST] = []
        stack = [node]
        while stack:
            current = stack.pop()
            nodes.append(current)
            stack.extend(reversed(list(ast.iter_child_nodes(current))))
        return nodes

    def get_parent(self, node: ast.AST) -> ast.AST | None:
        """Get parent node (None for root)"""
        self.complete()
        return self._parents.get(id(node))

    def get_children(self, node: ast.AST) -> list[ast.AST]:
        """Get child nodes"""
        return list(ast.iter_child_nodes(node))

    def get_span(self, node: ast.AST) -> Span | None:
        """
        Get node span in character columns.

        Returns:
            Span, or None for nodes without positions (Module, operators, ...)
        """
        node_id = id(node)
        if node_id in self._span_cache:
            return self._span_cache[node_id]

        if not _has_position(node):
            return None

        end_line = getattr(node, "end_lineno", None) or node.lineno
        end_offset = getattr(node, "end_col_offset", None)
        if end_offset is None:
            end_offset = node.col_offset

        span = Span(
            start_line=node.lineno,
            start_col=self.buffer.char_column(node.lineno, node.col_offset),
            end_line=end_line,
            end_col=self.buffer.char_column(end_line, end_offset),
        )
        self._span_cache[node_id] = span
        return span

    def get_text(self, node: ast.AST) -> str | None:
        """Get source text of a node"""
        return ast.get_source_segment(self.buffer.source, node)

    def find_enclosing_node(self, line: int, column: int) -> ast.AST:
        """
        Find the innermost positioned node containing a position.

        Args:
            line: Line number (1-indexed)
            column: Column (0-indexed, characters)

        Returns:
            Deepest enclosing node, or the root when none encloses it
        """
        node = self._root
        while True:
            child = self._child_containing(node, line, column)
            if child is None:
                return node
            node = child

    def _child_containing(self, node: ast.AST, line: int, column: int) -> ast.AST | None:
        for child in ast.iter_child_nodes(node):
            span = self.get_span(child)
            if span is None:
                # Unpositioned containers (arguments, match_case, ...) hold positioned nodes
                found = self._child_containing(child, line, column)
                if found is not None:
                    return found
            elif span.contains(line, column):
                return child
        return None

    def associate_comments(self, comments: Iterable[Comment]) -> dict[ast.AST, list[Comment]]:
        """
        Associate each comment with its nearest enclosing node.

        Returns:
            Node -> comments, in comment order
        """
        associated: dict[ast.AST, list[Comment]] = {}
        for comment in comments:
            node = self.find_enclosing_node(comment.location.line, comment.location.column)
            associated.setdefault(node, []).append(comment)
        return associated

    def __repr__(self) -> str:
        return f"SyntaxTree(file={self.buffer.name}, root={type(self._root).__name__})"


def _has_position(node: ast.AST) -> bool:
    return getattr(node, "lineno", None) is not None and getattr(node, "col_offset", None) is not None
