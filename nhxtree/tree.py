from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt
from typing_extensions import Self

from nhxtree.exceptions import MissingTagError, TreeStructureError

# Parent entry of the root node
ROOT_SENTINEL = -1


class AnnotatedTree:
    """
    Read-only query interface over an index-based tree whose nodes carry
    string tags.

    Nodes are plain integers, stable for the lifetime of the tree. This is the
    only surface writers and other downstream consumers rely on.
    """

    def children(self, node: int) -> Sequence[int]:
        raise NotImplementedError

    def parent(self, node: int) -> Optional[int]:
        raise NotImplementedError

    def root(self) -> int:
        raise NotImplementedError

    def nb_nodes(self) -> int:
        raise NotImplementedError

    def tag(self, node: int, name: str) -> str:
        raise NotImplementedError

    def tags(self, node: int) -> Mapping[str, str]:
        raise NotImplementedError


class DoubleListAnnotatedTree(AnnotatedTree):
    """
    Append-only arena of nodes with a parent list and children lists.

    Nodes are appended with ``add_node`` while parsing and never removed or
    reordered. ``finalize`` freezes the store: the parent list becomes a
    read-only numpy array, children lists become tuples and tag dicts become
    read-only mappings.

    Invariants:
    - ``_parent`` and ``_children`` have the same length as ``_nodes``
    - exactly one node has parent ``ROOT_SENTINEL``, and it is ``_root``
    - ``i in _children[_parent[i]]`` for every non-root ``i``, in insertion order
    """

    __slots__ = ("_nodes", "_parent", "_children", "_root", "_frozen")

    _nodes: List[Dict[str, str]]
    _parent: List[int]
    _children: List[List[int]]
    _root: Optional[int]
    _frozen: bool

    def __init__(self):
        self._nodes = []
        self._parent = []
        self._children = []
        self._root = None
        self._frozen = False

    # ------------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------------

    def add_node(self, parent: int = ROOT_SENTINEL) -> int:
        """
        Append a node under ``parent`` and return its index.

        Args:
            parent: Index of an existing node, or ``ROOT_SENTINEL`` for the root

        Returns:
            The index of the new node (always the current node count)

        Raises:
            TreeStructureError: If the store is frozen, the parent is unknown,
                or a second root is requested
        """
        self._ensure_mutable()
        index = len(self._nodes)
        if parent == ROOT_SENTINEL:
            if self._root is not None:
                raise TreeStructureError(
                    f"Tree already has root {self._root}; node {index} needs a parent"
                )
            self._root = index
        elif not 0 <= parent < index:
            raise TreeStructureError(f"Unknown parent {parent} for node {index}")

        self._nodes.append({})
        self._parent.append(parent)
        self._children.append([])
        if parent != ROOT_SENTINEL:
            self._children[parent].append(index)
        return index

    def set_tag(self, node: int, name: str, value: str) -> None:
        self._ensure_mutable()
        self._check_node(node)
        self._nodes[node][name] = value

    def finalize(self) -> Self:
        """
        Freeze the store and make it safe to hand out.

        Raises:
            TreeStructureError: If the tree is empty or does not have exactly one root
        """
        if self._frozen:
            return self
        if not self._nodes:
            raise TreeStructureError("Cannot finalize an empty tree")

        parents = np.asarray(self._parent, dtype=np.intp)
        roots = np.flatnonzero(parents == ROOT_SENTINEL)
        if roots.size != 1:
            raise TreeStructureError(
                f"Expected exactly one root, found {roots.size}: {roots.tolist()}"
            )
        parents.flags.writeable = False

        self._root = int(roots[0])
        self._parent = parents  # type: ignore[assignment]
        self._children = tuple(tuple(c) for c in self._children)  # type: ignore[assignment]
        self._nodes = tuple(MappingProxyType(n) for n in self._nodes)  # type: ignore[assignment]
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------

    def children(self, node: int) -> Tuple[int, ...]:
        self._check_node(node)
        return tuple(self._children[node])

    def parent(self, node: int) -> Optional[int]:
        """Return the parent index of ``node``, or None for the root."""
        self._check_node(node)
        parent = int(self._parent[node])
        return None if parent == ROOT_SENTINEL else parent

    def root(self) -> int:
        if self._root is None:
            raise TreeStructureError("Tree has no root yet")
        return self._root

    def nb_nodes(self) -> int:
        return len(self._nodes)

    def tag(self, node: int, name: str) -> str:
        """
        Return the value of tag ``name`` on ``node``.

        Raises:
            IndexError: If ``node`` is not a node of this tree
            MissingTagError: If the node does not carry the tag
        """
        self._check_node(node)
        try:
            return self._nodes[node][name]
        except KeyError:
            raise MissingTagError(node, name) from None

    def has_tag(self, node: int, name: str) -> bool:
        self._check_node(node)
        return name in self._nodes[node]

    def tags(self, node: int) -> Mapping[str, str]:
        """Read-only view of every tag on ``node``."""
        self._check_node(node)
        return MappingProxyType(self._nodes[node])

    def is_leaf(self, node: int) -> bool:
        self._check_node(node)
        return not self._children[node]

    def parent_array(self) -> npt.NDArray[np.intp]:
        """
        Parent index of every node as a read-only integer array.

        The root's entry is ``ROOT_SENTINEL``.
        """
        if self._frozen:
            return self._parent  # type: ignore[return-value]
        parents = np.asarray(self._parent, dtype=np.intp)
        parents.flags.writeable = False
        return parents

    def traverse(self) -> Iterator[int]:
        """Yield node indices in pre-order, children left to right."""
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(self._children[node]))

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "building"
        return f"DoubleListAnnotatedTree(nb_nodes={len(self._nodes)}, root={self._root}, {state})"

    # ------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------

    def _check_node(self, node: int) -> None:
        if not 0 <= node < len(self._nodes):
            raise IndexError(
                f"Node index {node} out of range for tree with {len(self._nodes)} nodes"
            )

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise TreeStructureError("Tree is finalized and can no longer be modified")
