"""Common base of every syntax tree node (expressions, statements, declarations)."""

from abc import ABC
from dataclasses import fields, is_dataclass
from enum import Enum


class Node(ABC):
    """Superclass of all syntax tree nodes. Subclasses are dataclasses whose fields are either plain data (names,
    operators, values) or child nodes.
    """

    @property
    def nodes(self):
        """Child nodes, in source order."""
        children = []
        for field in fields(self):
            attr = getattr(self, field.name)
            if isinstance(attr, Node):
                children.append(attr)
            elif isinstance(attr, (list, tuple)):
                children.extend(item for item in attr if isinstance(item, Node))
        return children

    def attrs(self):
        """Non-node fields as (name, value) pairs."""
        result = []
        for field in fields(self):
            attr = getattr(self, field.name)
            if isinstance(attr, Node) or (isinstance(attr, (list, tuple)) and any(isinstance(a, Node) for a in attr)):
                continue
            result.append((field.name, attr))
        return result

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<attr>=<value>, nodes=[
            <Node>(<attr>=<value>, nodes=[
                ...
                <Node>(<attr>=<value>)  # <-- if nodes is empty
            ])
        ])
        """
        assert is_dataclass(self), f"{type(self).__name__} must be a dataclass"

        attrs = ", ".join(f"{name}={Node._display_attr(value)}" for name, value in self.attrs())
        result = f"{'    ' * indents}{type(self).__name__}({attrs}"

        nodes = self.nodes
        if nodes:
            result += ", nodes=[" if attrs else "nodes=["
            for node in nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    @staticmethod
    def _display_attr(value):
        if isinstance(value, Enum):
            return f"'{value.value}'"  # Op/Comp
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(Node._display_attr(item) for item in value) + "]"
        if isinstance(value, str):
            return f"'{value}'"
        return str(value)

    def __str__(self):
        return self.display()
