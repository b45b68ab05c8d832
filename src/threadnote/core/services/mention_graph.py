"""
Cycle detection over the mention graph.

The graph maps a note id to the ids it mentions. It is built on demand from
stored mention rows; proposed edges are added to a working copy only, so the
caller's mapping is never mutated.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

MentionGraph = Dict[str, List[str]]


def with_proposed_edges(
    graph: Mapping[str, Sequence[str]],
    from_note_id: str,
    to_note_ids: Iterable[str],
    replace_existing: bool = False,
) -> MentionGraph:
    """Working copy of the graph with extra outgoing edges for one note.

    With replace_existing the note's stored edges are dropped first, which is
    what an update needs: its old mentions are about to be replaced.
    """
    working: MentionGraph = {node: list(targets) for node, targets in graph.items()}
    current = [] if replace_existing else working.get(from_note_id, [])
    working[from_note_id] = [*current, *to_note_ids]
    return working


def has_cycle_from(graph: Mapping[str, Sequence[str]], start: str) -> bool:
    """Depth-first search from start using white/gray/black marking.

    Reaching a node that is still on the DFS stack (gray) means a cycle. Only
    edges reachable from start are visited. Iterative, so long mention chains
    do not hit the recursion limit.
    """
    on_stack = {start}
    visited = {start}
    # each frame: node and an iterator over its remaining neighbours
    stack = [(start, iter(graph.get(start, ())))]

    while stack:
        node, neighbours = stack[-1]
        advanced = False
        for neighbour in neighbours:
            if neighbour in on_stack:
                return True
            if neighbour in visited:
                continue
            visited.add(neighbour)
            on_stack.add(neighbour)
            stack.append((neighbour, iter(graph.get(neighbour, ()))))
            advanced = True
            break
        if not advanced:
            stack.pop()
            on_stack.discard(node)

    return False


def detect_circular_reference(
    from_note_id: str,
    proposed_to_note_ids: Iterable[str],
    existing_graph: Mapping[str, Sequence[str]],
    replace_existing: bool = False,
) -> bool:
    """True if adding the proposed mentions would close a cycle."""
    proposed = list(proposed_to_note_ids)
    if not proposed:
        return False
    working = with_proposed_edges(existing_graph, from_note_id, proposed, replace_existing)
    return has_cycle_from(working, from_note_id)


def find_cycle_targets(
    from_note_id: str,
    proposed_to_note_ids: Iterable[str],
    existing_graph: Mapping[str, Sequence[str]],
    replace_existing: bool = False,
) -> List[str]:
    """Proposed targets from which from_note_id is already reachable.

    On an acyclic graph these are exactly the mentions that close a cycle,
    so they are what CircularReferenceError reports.
    """
    base = with_proposed_edges(existing_graph, from_note_id, [], replace_existing)
    offending: List[str] = []
    for target in dict.fromkeys(proposed_to_note_ids):
        if target == from_note_id or _reaches(base, target, from_note_id):
            offending.append(target)
    return offending


def _reaches(graph: Mapping[str, Sequence[str]], source: str, goal: str) -> bool:
    seen = {source}
    frontier = [source]
    while frontier:
        node = frontier.pop()
        if node == goal:
            return True
        for neighbour in graph.get(node, ()):
            if neighbour not in seen:
                seen.add(neighbour)
                frontier.append(neighbour)
    return False
