"""
Append-only incremental Merkle tree of fixed depth.

Nodes are hashed with the compression profile as hash([left, right]).
Empty positions hold the zero value, and each level's empty subtree root
is precomputed, so a tree of depth d always has 2**d leaf slots and
proofs always carry exactly d siblings (most specific first).

Membership sets of identity strings must be lower-cased and sorted before
insertion; build_membership_tree() does this and the caller must look up
its own index in the same sorted order, otherwise the proof is built
against a different root than the one that was signed.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .errors import IndexOutOfRange
from .field import to_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    root: int
    leaf: int
    siblings: List[int] = field(default_factory=list)
    path_indices: List[int] = field(default_factory=list)


def compute_root(hasher, leaf, siblings, path_indices):
    if len(siblings) != len(path_indices):
        raise IndexOutOfRange("siblings and path indices differ in length")
    node = to_field(leaf)
    for sibling, bit in zip(siblings, path_indices):
        sibling = to_field(sibling)
        if bit == 0:
            node = hasher.compress([node, sibling])
        elif bit == 1:
            node = hasher.compress([sibling, node])
        else:
            raise IndexOutOfRange(f"path index must be 0 or 1, got {bit}")
    return node


class IncrementalMerkleTree:
    def __init__(self, hasher, depth, zero_value=0):
        if depth < 1:
            raise ValueError("tree depth must be at least 1")
        self.hasher = hasher
        self.depth = depth
        self.zeroes = []
        zero = to_field(zero_value)
        for _ in range(depth):
            self.zeroes.append(zero)
            zero = hasher.compress([zero, zero])
        self.nodes = [[] for _ in range(depth + 1)]
        self.root = zero

    @property
    def leaves(self):
        return list(self.nodes[0])

    def __len__(self):
        return len(self.nodes[0])

    def _node(self, level, index):
        nodes = self.nodes[level]
        return nodes[index] if index < len(nodes) else self.zeroes[level]

    def insert(self, leaf):
        index = len(self.nodes[0])
        if index >= 1 << self.depth:
            raise IndexOutOfRange(f"tree of depth {self.depth} is full")
        node = to_field(leaf)
        for level in range(self.depth):
            self._set(level, index, node)
            left = self._node(level, index - index % 2)
            right = self._node(level, index - index % 2 + 1)
            node = self.hasher.compress([left, right])
            index //= 2
        self.nodes[self.depth] = [node]
        self.root = node

    def _set(self, level, index, node):
        nodes = self.nodes[level]
        if index < len(nodes):
            nodes[index] = node
        else:
            nodes.append(node)

    def extend(self, leaves):
        """Bulk insert, hashing each level once instead of once per leaf."""
        leaves = [to_field(leaf) for leaf in leaves]
        if not leaves:
            return
        if len(self) + len(leaves) > 1 << self.depth:
            raise IndexOutOfRange(f"tree of depth {self.depth} is full")
        first = len(self.nodes[0])
        self.nodes[0].extend(leaves)
        for level in range(self.depth):
            below = self.nodes[level]
            first -= first % 2
            parents = self.nodes[level + 1][:first // 2]
            for index in range(first, len(below), 2):
                right = below[index + 1] if index + 1 < len(below) else self.zeroes[level]
                parents.append(self.hasher.compress([below[index], right]))
            self.nodes[level + 1] = parents
            first //= 2
        self.root = self.nodes[self.depth][0]

    def index_of(self, leaf):
        try:
            return self.nodes[0].index(to_field(leaf))
        except ValueError:
            raise IndexOutOfRange("leaf is not a member of the tree") from None

    def prove_inclusion(self, index):
        if index < 0 or index >= len(self.nodes[0]):
            raise IndexOutOfRange(f"leaf {index} does not exist in a tree of {len(self)} leaves")
        leaf = self.nodes[0][index]
        siblings = []
        path_indices = []
        for level in range(self.depth):
            position = index % 2
            siblings.append(self._node(level, index + 1 if position == 0 else index - 1))
            path_indices.append(position)
            index //= 2
        return MerkleProof(self.root, leaf, siblings, path_indices)


def build(hasher, leaves, depth, zero_value=0):
    tree = IncrementalMerkleTree(hasher, depth, zero_value)
    tree.extend(leaves)
    return tree


def prove_inclusion(tree, index):
    return tree.prove_inclusion(index)


def verify(hasher, root, leaf, proof):
    try:
        return compute_root(hasher, leaf, proof.siblings, proof.path_indices) == to_field(root)
    except IndexOutOfRange:
        return False


def normalize_identities(identities):
    return sorted(identity.lower() for identity in identities)


def build_membership_tree(hasher, identities, depth, zero_value=0):
    """
    Lower-case and sort `identities`, insert them as integers and return
    (tree, sorted_identities).
    """
    members = normalize_identities(identities)
    tree = build(hasher, [int(member, 16) for member in members], depth, zero_value)
    logger.debug("built membership tree of %d members, root %x", len(members), tree.root)
    return tree, members


def membership_proof(tree, members, identity):
    identity = identity.lower()
    if identity not in members:
        raise IndexOutOfRange(f"{identity} is not in the membership set")
    return tree.prove_inclusion(members.index(identity))
