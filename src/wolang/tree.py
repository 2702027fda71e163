"""Presentation helpers for parsed workouts.

to_tree() builds a Lark Tree so callers get Tree.pretty() for free;
to_data() builds plain dicts/lists suitable for json.dumps().
"""
from __future__ import annotations

from typing import Any, Dict, Union

from lark import Token, Tree

from .ast_nodes import Intensity, Interval, Node, PercentFTP, Power, Program, Set


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(value)


def _intensity_tree(intensity: Intensity) -> Tree:
    if isinstance(intensity, Power):
        return Tree('power', [Token('WATTS', str(intensity.value))])
    return Tree('percent_ftp', [Token('FTP', repr(intensity.value))])


def _node_tree(node: Node) -> Tree:
    if isinstance(node, Set):
        return Tree('set', [Token('REPEAT', str(node.repeat))] + [_node_tree(c) for c in node.children])

    children = [Token('DURATION', _number(node.duration)), _intensity_tree(node.intensity)]
    if node.annotation is not None:
        children.append(Tree('annotation', [Token('STRING', node.annotation)]))
    return Tree('interval', children)


def to_tree(program: Program) -> Tree:
    """Convert a Program into a Lark Tree (program/set/interval/...)."""
    return Tree('program', [_node_tree(node) for node in program.body])


def to_data(node: Union[Program, Node, Intensity]) -> Any:
    """Convert an AST node into JSON-friendly data.

    Intervals only carry an "annotation" key when one was written.
    """
    if isinstance(node, Program):
        return [to_data(child) for child in node.body]
    if isinstance(node, Set):
        return {'repeat': node.repeat, 'sets': [to_data(child) for child in node.children]}
    if isinstance(node, Interval):
        data: Dict[str, Any] = {'duration': node.duration, 'intensity': to_data(node.intensity)}
        if node.annotation is not None:
            data['annotation'] = node.annotation
        return data
    if isinstance(node, Power):
        return {'power': node.value}
    if isinstance(node, PercentFTP):
        return {'percentFTP': node.value}
    raise TypeError(f"Not a wolang AST node: {node!r}")
