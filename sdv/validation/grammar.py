"""
Grammar — A small rule algebra over a node's ordered children.

Rules are data. One evaluator interprets them:

- Literal(name, matcher): consumes one child when matcher(child, sink) holds.
- Sequence(label, rules): applies rules left to right on a shared cursor;
  leftover children are reported as out of order or unknown.
- Repeat(rule, min, max): counts speculative matches, then commits them
  only when the count is within bounds.
- OneOf(rules): non-consuming classifier; true when any rule would match.
  select() names the alternative, so a matcher can apply just that one.

Speculative evaluation runs against the silent sink, so a trial that is
not committed never produces a diagnostic. A matcher may look at the sink's
``speculative`` flag and skip its content checks during trials.

Cursors are immutable; forking for a trial is an index copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from sdv.core.diagnostics import SILENT, DiagnosticSink
from sdv.tree.node import Node

# A matcher classifies one node and, when it commits, checks its content.
# It must not log anything before deciding to return True.
Matcher = Callable[[Node, DiagnosticSink], bool]


# =============================================================================
# Cursor
# =============================================================================

@dataclass(frozen=True)
class Cursor:
    """Position within an ordered sequence of sibling nodes."""

    nodes: tuple[Node, ...]
    pos: int = 0
    parent: Optional[Node] = None

    @classmethod
    def over(cls, node: Node) -> "Cursor":
        """Cursor over the children of node."""
        return cls(nodes=node.children, pos=0, parent=node)

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.nodes)

    def peek(self) -> Optional[Node]:
        if self.at_end:
            return None
        return self.nodes[self.pos]

    def advance(self, count: int = 1) -> "Cursor":
        return Cursor(nodes=self.nodes, pos=min(self.pos + count, len(self.nodes)), parent=self.parent)

    def remaining(self) -> tuple[Node, ...]:
        return self.nodes[self.pos:]

    def exhaust(self) -> "Cursor":
        return Cursor(nodes=self.nodes, pos=len(self.nodes), parent=self.parent)


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class Literal:
    name: str
    matcher: Matcher


@dataclass(frozen=True)
class Sequence:
    label: str
    rules: tuple["Rule", ...]
    # Report and fail on children left over once every rule has run
    exhaustive: bool = True


@dataclass(frozen=True)
class Repeat:
    rule: "Rule"
    min: int = 0
    max: Optional[int] = None  # None = unbounded
    # Message used when min > 0 and nothing matched
    missing: Optional[str] = None


@dataclass(frozen=True)
class OneOf:
    rules: tuple["Rule", ...]


Rule = Union[Literal, Sequence, Repeat, OneOf]


# =============================================================================
# Constructors
# =============================================================================

def literal(name: str, matcher: Matcher) -> Literal:
    return Literal(name=name, matcher=matcher)


def tag_literal(tag: str, id: Optional[str] = None) -> Literal:
    """Literal matching an element by tag name and, optionally, id."""
    def matcher(node: Node, sink: DiagnosticSink) -> bool:
        return node.tag == tag and (id is None or node.id == id)

    name = f"<{tag}>" if id is None else f"<{tag} id={id}>"
    return Literal(name=name, matcher=matcher)


def sequence(label: str, *rules: Rule, exhaustive: bool = True) -> Sequence:
    return Sequence(label=label, rules=tuple(rules), exhaustive=exhaustive)


def repeat(rule: Rule, min: int = 0, max: Optional[int] = None, missing: Optional[str] = None) -> Repeat:
    if min < 0 or (max is not None and max < min):
        raise ValueError(f"Invalid repeat bounds: {min}..{max}")
    return Repeat(rule=rule, min=min, max=max, missing=missing)


def optional(rule: Rule) -> Repeat:
    return repeat(rule, 0, 1)


def zero_or_more(rule: Rule) -> Repeat:
    return repeat(rule, 0, None)


def one_or_more(rule: Rule, missing: Optional[str] = None) -> Repeat:
    return repeat(rule, 1, None, missing=missing)


def exactly_one(rule: Rule, missing: Optional[str] = None) -> Repeat:
    return repeat(rule, 1, 1, missing=missing)


def one_of(*rules: Rule) -> OneOf:
    return OneOf(rules=tuple(rules))


# =============================================================================
# Naming
# =============================================================================

def rule_name(rule: Rule) -> str:
    """Human-readable name used in diagnostics."""
    if isinstance(rule, Literal):
        return rule.name
    if isinstance(rule, Sequence):
        return rule.label
    if isinstance(rule, Repeat):
        return rule_name(rule.rule)
    if isinstance(rule, OneOf):
        return " or ".join(rule_name(r) for r in rule.rules)
    raise TypeError(f"Unknown grammar rule: {type(rule).__name__}")


def describe_bounds(min: int, max: Optional[int]) -> str:
    if max is None:
        return f"at least {min}"
    if min == max:
        return f"exactly {min}"
    if min == 0:
        return f"at most {max}"
    return f"between {min} and {max}"


def describe_nodes(nodes: tuple[Node, ...]) -> str:
    """Space-separated ids, falling back to tag names."""
    return " ".join(n.id or n.tag for n in nodes)


def _container(cursor: Cursor) -> str:
    return cursor.parent.describe() if cursor.parent is not None else "element"


# =============================================================================
# Evaluator
# =============================================================================

def evaluate(rule: Rule, cursor: Cursor, sink: DiagnosticSink) -> tuple[bool, Cursor]:
    """
    Apply rule at cursor.

    Returns (matched, cursor after the match). A failed sequence may still
    have advanced past the rules that did match; callers that backtrack
    keep their own copy of the cursor.
    """
    if isinstance(rule, Literal):
        return _evaluate_literal(rule, cursor, sink)
    if isinstance(rule, Sequence):
        return _evaluate_sequence(rule, cursor, sink)
    if isinstance(rule, Repeat):
        return _evaluate_repeat(rule, cursor, sink)
    if isinstance(rule, OneOf):
        return _evaluate_one_of(rule, cursor), cursor
    raise TypeError(f"Unknown grammar rule: {type(rule).__name__}")


def _evaluate_literal(rule: Literal, cursor: Cursor, sink: DiagnosticSink) -> tuple[bool, Cursor]:
    node = cursor.peek()
    if node is None:
        return False, cursor
    if rule.matcher(node, sink):
        return True, cursor.advance()
    return False, cursor


def _evaluate_sequence(rule: Sequence, cursor: Cursor, sink: DiagnosticSink) -> tuple[bool, Cursor]:
    matched_all = True

    # Keep going after a failed rule so the rest of the content is still checked
    for sub_rule in rule.rules:
        matched, cursor = evaluate(sub_rule, cursor, sink)
        if not matched:
            matched_all = False
            # Repeat reports its own count mismatch
            if not isinstance(sub_rule, Repeat):
                sink.error(f"{rule.label}: expected {rule_name(sub_rule)}", cursor.peek() or cursor.parent)

    if rule.exhaustive and not cursor.at_end:
        leftovers = cursor.remaining()
        sink.error(
            f"{rule.label} contains out of order or unknown children: {describe_nodes(leftovers)}",
            cursor.parent,
        )
        return False, cursor.exhaust()

    return matched_all, cursor


def _evaluate_repeat(rule: Repeat, cursor: Cursor, sink: DiagnosticSink) -> tuple[bool, Cursor]:
    count = 0
    trial = cursor
    while not trial.at_end:
        matched, after = evaluate(rule.rule, trial, SILENT)
        # A zero-width match would repeat forever
        if not matched or after.pos == trial.pos:
            break
        count += 1
        trial = after

    if count < rule.min or (rule.max is not None and count > rule.max):
        if count == 0 and rule.missing:
            message = rule.missing
        else:
            message = (
                f"{_container(cursor)}: expected {describe_bounds(rule.min, rule.max)} "
                f"{rule_name(rule.rule)}, found {count}"
            )
        sink.error(message, cursor.parent)
        return False, cursor

    # Commit: replay the accepted matches against the real sink
    if sink.speculative:
        return True, trial
    for _ in range(count):
        _, cursor = evaluate(rule.rule, cursor, sink)
    return True, cursor


def _evaluate_one_of(rule: OneOf, cursor: Cursor) -> bool:
    return select(rule, cursor) is not None


def select(choice: OneOf, cursor: Cursor) -> Optional[Rule]:
    """First alternative of choice that would match at cursor, tried on throwaway copies."""
    for candidate in choice.rules:
        matched, _ = evaluate(candidate, cursor, SILENT)
        if matched:
            return candidate
    return None


def match_all(rule: Rule, node: Node, sink: DiagnosticSink) -> bool:
    """Apply rule to the children of node."""
    matched, _ = evaluate(rule, Cursor.over(node), sink)
    return matched
