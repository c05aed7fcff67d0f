"""Declarations: the top-level elements of a module. The only declaration is a named function."""

from dataclasses import dataclass
from typing import List

from lilt.tree.node import Node
from lilt.tree.statement import Statement


class Declaration(Node):
    """Superclass of all declarations."""
    name: str


@dataclass
class FunctionDecl(Declaration):
    """`fn name(params) { ... }`"""
    name: str
    params: List[str]
    body: Statement
