"""
Merkle Proof Visualization Module

Renders the walk from a leaf to the root level by level: where the path node
sits, which side its sibling is on, and which levels it is carried through
without a partner.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from rich.console import Console
from rich.tree import Tree

from .merkle import DEFAULT_HASHER, Hasher, MalformedProofError, expected_proof_length


@dataclass
class PathStep:
    """One level of the walk from leaf to root."""
    level: int
    position: int
    level_size: int
    side: str  # "left", "right" or "carried"
    sibling: Optional[bytes]
    node: bytes


def describe_proof_path(
    leaf: bytes,
    index: int,
    total_leaves: int,
    proof: Sequence[bytes],
    hasher: Optional[Hasher] = None,
) -> List[PathStep]:
    """
    Walk a proof and record every level.

    Args:
        leaf: Claimed leaf
        index: Claimed leaf index
        total_leaves: Number of leaves in the tree
        proof: Sibling path
        hasher: Hash primitive, SHA-256 when omitted

    Returns:
        One PathStep per level transition; ``node`` is the value after the
        step, so the last step's node is the reconstructed root

    Raises:
        MalformedProofError: If the proof length does not match the tree shape
    """
    hasher = hasher or DEFAULT_HASHER
    expected = expected_proof_length(index, total_leaves)
    if len(proof) != expected:
        raise MalformedProofError(f"Expected {expected} siblings, got {len(proof)}")

    steps = []
    current = leaf
    pos, level_size = index, total_leaves
    siblings = iter(proof)
    level = 0
    while level_size > 1:
        if level_size % 2 == 1 and pos == level_size - 1:
            steps.append(PathStep(level, pos, level_size, "carried", None, current))
        else:
            sibling = next(siblings)
            if pos % 2 == 0:
                current = hasher.concat_and_hash(current, sibling)
                side = "left"
            else:
                current = hasher.concat_and_hash(sibling, current)
                side = "right"
            steps.append(PathStep(level, pos, level_size, side, sibling, current))
        pos //= 2
        level_size = (level_size + 1) // 2
        level += 1
    return steps


def render_proof_tree(
    leaf: bytes,
    index: int,
    total_leaves: int,
    proof: Sequence[bytes],
    root: Optional[bytes] = None,
    hasher: Optional[Hasher] = None,
) -> Tree:
    """Build a rich Tree of the proof path, optionally checked against `root`."""
    steps = describe_proof_path(leaf, index, total_leaves, proof, hasher)
    computed = steps[-1].node if steps else leaf

    if root is None:
        title = f"🏁 Root 0x{computed.hex()}"
    elif computed == root:
        title = f"[green]🏁 Root 0x{root.hex()} ✅[/green]"
    else:
        title = f"[red]🏁 Root 0x{root.hex()} ❌ (computed 0x{computed.hex()})[/red]"

    tree = Tree(title)
    branch = tree
    for step in reversed(steps):
        label = f"Level {step.level:2d} · pos {step.position}/{step.level_size}"
        if step.side == "carried":
            label += " · [yellow]carried up, no sibling[/yellow]"
        else:
            label += f" · our node {step.side} · sibling [cyan]0x{step.sibling.hex()}[/cyan]"
        branch = branch.add(label)
    branch.add(f"🎯 Leaf {index} of {total_leaves}: 0x{leaf.hex()}")
    return tree


def print_proof_path(
    leaf: bytes,
    index: int,
    total_leaves: int,
    proof: Sequence[bytes],
    root: Optional[bytes] = None,
    console: Optional[Console] = None,
) -> None:
    console = console or Console()
    console.print(render_proof_tree(leaf, index, total_leaves, proof, root))
    console.print(f"\n📊 Proof length: {len(proof)} siblings")
