"""
Canonical node fingerprints.

Two nodes with identical structure and content produce the same string,
and different nodes never do, so the fingerprint works as an equality
oracle for deduplication:

    Stripe R10                     -> "R10"
    root, plain  [R10 K2]          -> "[R/RP:R10 K2]"
    nested, reflected [K2 Y4]      -> "[B/RF:K2 Y4]"

Stripes that the threadcount notation cannot write (names with digits or
symbols, non-integer counts) are quoted so they cannot run into a
neighbouring name or count:

    Stripe('K1', 2)                -> "\"K1\"*2"
"""

import json
import re

from .sett import Stripe, Block

_PLAIN_NAME = re.compile(r'[A-Za-z]+')


def _stripe_hash(stripe):
    count = stripe.count
    if (
        isinstance(stripe.name, str) and _PLAIN_NAME.fullmatch(stripe.name)
        and isinstance(count, int) and not isinstance(count, bool) and count >= 0
    ):
        return f"{stripe.name}{count}"
    return f"{json.dumps(stripe.name)}*{count!r}"


def calculate_node_hash(node) -> str:
    if isinstance(node, Stripe):
        return _stripe_hash(node)
    if isinstance(node, Block):
        kind = 'R' if node.is_root else 'B'
        mode = 'RF' if node.reflect else 'RP'
        inner = ' '.join(calculate_node_hash(item) for item in node.items)
        return f"[{kind}/{mode}:{inner}]"
    raise TypeError(f"Cannot hash {type(node).__name__}: expected Stripe or Block")
