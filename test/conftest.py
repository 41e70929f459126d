import logging

import pytest

from nhxtree.tree import AnnotatedTree


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Example tree from the NHX format description
NHX_EXAMPLE = (
    "(((ADH2:0.1[&&NHX:S=human:E=1.1.1.1], ADH1:0.11[&&NHX:S=human:E=1.1.1.1]):0.05[&&NHX:S="
    "Primates:E=1.1.1.1:D=Y:B=100],ADHY:0.1[&&NHX:S=nematode:E=1.1.1.1],ADHX:0.12[&&NHX:S="
    "insect:E=1.1.1.1]):0.1[&&NHX:S=Metazoa:E=1.1.1.1:D=N],(ADH4:0.09[&&NHX:S=yeast:E=1.1.1.1],"
    "ADH3:0.13[&&NHX:S=yeast:E=1.1.1.1],ADH2:0.12[&&NHX:S=yeast:E=1.1.1.1],ADH1:0.11[&&NHX:S="
    "yeast:E=1.1.1.1]):0.1[&&NHX:S=Fungi])[&&NHX:E=1.1.1.1:D=N]; "
)


@pytest.fixture
def nhx_example() -> str:
    return NHX_EXAMPLE


def snapshot(tree: AnnotatedTree):
    """Everything observable about a tree, for equality checks between parses."""
    nodes = range(tree.nb_nodes())
    return (
        tree.nb_nodes(),
        tree.root(),
        tuple(tree.parent(i) for i in nodes),
        tuple(tuple(tree.children(i)) for i in nodes),
        tuple(dict(tree.tags(i)) for i in nodes),
    )


def assert_tree_invariants(tree: AnnotatedTree) -> None:
    roots = [i for i in range(tree.nb_nodes()) if tree.parent(i) is None]
    assert roots == [tree.root()]
    for i in range(tree.nb_nodes()):
        parent = tree.parent(i)
        if parent is not None:
            assert list(tree.children(parent)).count(i) == 1
        for child in tree.children(i):
            assert tree.parent(child) == i
        # Indices are handed out in textual order, so children ascend
        assert list(tree.children(i)) == sorted(tree.children(i))


@pytest.fixture(name="snapshot")
def snapshot_fixture():
    return snapshot


@pytest.fixture(name="assert_tree_invariants")
def assert_tree_invariants_fixture():
    return assert_tree_invariants
