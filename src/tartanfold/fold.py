"""
Fold engine: finds compact, symmetric representations of a sett axis.

Pipeline per axis:
  existing sub-blocks re-folded → root rotations → {root reflection,
  nested block search} → dedupe by hash → rank by weight

Examples (non-greedy, nested blocks enabled):
  R10 K20 Y2 G2 Y2 K20         → R/10 K20 Y2 G/2  (root reflection)
  R15 K10 Y2 K10 R10           → R5 [R10 K10 Y2]  (split stripe)
  R10 K20 Y2 G2 Y2 K20 R10 ... → R10 [K20 Y2 G2] R10 ...

The search is exhaustive within max_fold_levels / min_block_size, so its
cost grows quickly with sett length; real setts are short.
"""

import logging
from typing import List, Optional

from .config import FoldOptions, MIN_FOLDED_ITEMS, MIN_UNFOLDED_ITEMS
from .sett import Stripe, Block, Sett, Variant, is_same_node

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
#  Reflection                                                          #
# ------------------------------------------------------------------ #

def try_fold_block(items) -> Optional[list]:
    """
    Reduce a mirrored sequence to its first half (center included once).

    Smallest reflective sett has 3 stripes in threadcount or 5 when
    unfolded: R/10 K2 Y/2 => R10 K2 Y2 K2 R10. Anything shorter, of even
    length, or not a perfect palindrome gives None.
    """
    if len(items) < MIN_UNFOLDED_ITEMS or len(items) % 2 != 1:
        return None

    result = []
    i = 0
    j = len(items) - 1
    while True:
        if not is_same_node(items[i], items[j]):
            return None
        result.append(items[i])
        if i == j:
            break
        i += 1
        j -= 1
    return result


# ------------------------------------------------------------------ #
#  Rotation                                                            #
# ------------------------------------------------------------------ #

def find_root_block_variants(root: Block, options: FoldOptions) -> List[Block]:
    """
    All cyclic rotations of a root block, the original first.
    A root repeats endlessly, so a mirror may only show up from another
    starting stripe.
    """
    variants = [root]
    if root.reflect or not root.items or not options.allow_root_reorder:
        return variants

    items = list(root.items)
    for _ in range(len(items) - 1):
        # Move first node to the end
        items = items[1:] + items[:1]
        variants.append(root.with_items(items))
    return variants


# ------------------------------------------------------------------ #
#  Nested block search                                                 #
# ------------------------------------------------------------------ #

def find_all_possible_variants(items, options: FoldOptions, level: int) -> List[tuple]:
    """
    Every way to express `items` with nested reflected blocks, searching
    at most `level` levels deep. The unchanged sequence always comes first.
    """
    items = tuple(items)
    results = [items]
    if level <= 0:
        return results

    min_size = options.min_block_size
    if len(items) >= min_size * 2 - 1:
        for index in range(min_size - 1, len(items) - min_size + 1):
            results.extend(try_find_nested_blocks(index, items, options, level - 1))
    return results


def split_stripes(left, right):
    """
    Split two same-colored stripes of different width at a fold boundary.

    Returns (shared, to_prefix, to_suffix): the narrower stripe goes into
    the mirrored block, the remainder stays outside on the wider side.
    None if the pair cannot be split.
    """
    if not (isinstance(left, Stripe) and isinstance(right, Stripe)):
        return None
    if left.name != right.name or left.count == right.count:
        return None

    diff = left.count - right.count
    leftover = Stripe(left.name, abs(diff))
    shared = Stripe(left.name, min(left.count, right.count))
    if diff > 0:
        return shared, leftover, None
    return shared, None, leftover


def try_find_nested_blocks(index: int, items: tuple, options: FoldOptions, level: int) -> List[tuple]:
    """
    Grow a mirror window around items[index] and emit the sequences it
    produces.

    Non-greedy mode emits every window the expansion passes through;
    greedy mode only the widest one. On a same-colored mismatch a split
    window is emitted on top (if allowed), after which expansion stops.
    """
    results = []
    left = index - 1
    right = index + 1
    middle = [items[index]]

    while left >= 0 and right < len(items):
        if not is_same_node(items[left], items[right]):
            break
        middle.insert(0, items[left])
        left -= 1
        right += 1
        if not options.greedy:
            results.extend(process_nested_variants(
                items, left, right, middle, None, None, options, level))

    if options.greedy:
        results.extend(process_nested_variants(
            items, left, right, middle, None, None, options, level))

    if options.allow_split_stripe and left >= 0 and right < len(items):
        split = split_stripes(items[left], items[right])
        if split is not None:
            shared, to_prefix, to_suffix = split
            results.extend(process_nested_variants(
                items, left - 1, right + 1, [shared] + middle,
                to_prefix, to_suffix, options, level))

    return results


def process_nested_variants(items, left, right, middle, append_to_prefix,
                            prepend_to_suffix, options: FoldOptions, level: int) -> List[tuple]:
    """
    Combine prefix × reflected middle × suffix for one mirror window.

    `left`/`right` are the first indices outside the window. Prefix, middle
    and suffix are each searched again for nested blocks at `level`.
    """
    middle = tuple(middle)
    if len(middle) < max(options.min_block_size, MIN_FOLDED_ITEMS):
        return []

    prefix = list(items[:left + 1]) if left >= 0 else []
    if append_to_prefix is not None:
        prefix.append(append_to_prefix)

    suffix = list(items[right:])
    if prepend_to_suffix is not None:
        suffix.insert(0, prepend_to_suffix)

    prefix_variants = find_all_possible_variants(prefix, options, level)
    middle_variants = find_all_possible_variants(middle, options, level)
    suffix_variants = find_all_possible_variants(suffix, options, level)

    results = []
    for head in prefix_variants:
        for body in middle_variants:
            block = Block(body, reflect=True)
            for tail in suffix_variants:
                results.append(head + (block,) + tail)
    return results


def rank_variants(candidates, excluded=()) -> List[Variant]:
    """Drop excluded hashes, keep the first of each hash, sort by weight (stable)."""
    excluded = set(excluded)
    seen = set()
    ranked = []
    for variant in candidates:
        if variant.hash in excluded or variant.hash in seen:
            continue
        seen.add(variant.hash)
        ranked.append(variant)
    ranked.sort(key=lambda v: v.weight)
    return ranked


# ------------------------------------------------------------------ #
#  Engine                                                              #
# ------------------------------------------------------------------ #

class SettFolder:
    """
    Fold transform for a whole sett.

    Usage:
        folder = SettFolder(allow_nested_blocks=True)
        folded = folder(sett)
        folded.warp            # best Block
        folded.warp_variants   # every Variant, ascending weight
    """

    def __init__(self, options: FoldOptions = None, **overrides):
        options = options or FoldOptions()
        if overrides:
            options = options.replace(**overrides)
        self.options = options

    def __call__(self, sett: Sett) -> Sett:
        return self.transform(sett)

    def make_variant(self, node: Block, options: FoldOptions = None) -> Variant:
        options = options or self.options
        return Variant(
            node=node,
            hash=options.calculate_node_hash(node),
            weight=options.calculate_node_weight(node),
        )

    # ---- Candidate sources ----

    def fold_root_block(self, root: Block, options: FoldOptions = None) -> Optional[Variant]:
        """Reflect the root around its wrap point; None if it does not mirror."""
        if root.reflect or not root.items:
            return None

        folded = try_fold_block(root.items + root.items[:1])
        if folded is None:
            return None
        return self.make_variant(root.with_items(folded, reflect=True), options)

    def find_nested_blocks(self, block: Block, options: FoldOptions = None) -> List[Variant]:
        """Variants of `block` with nested reflected blocks; the unchanged block first."""
        options = options or self.options
        if len(block.items) < options.min_block_size * 2 - 1:
            # Too small to hold a block of min_block_size folded stripes
            return []

        variants = find_all_possible_variants(block.items, options, options.max_fold_levels)
        return [self.make_variant(block.with_items(items), options) for items in variants]

    def process_existing_blocks(self, root: Block, options: FoldOptions = None) -> List[Block]:
        """
        The root plus every combination of re-folded sub-blocks already in it.
        Each sub-block is folded as its own (non-rotating) root one level down.
        """
        options = options or self.options
        results = [root]
        if not (
            options.allow_nested_blocks and options.process_existing_blocks
            and options.max_fold_levels > 1
        ):
            return results

        # Nested blocks are not real roots, so do not try rotations
        sub_options = options.replace(
            allow_root_reorder=False,
            max_fold_levels=options.max_fold_levels - 1,
        )

        prefixes = []
        literal = []
        for item in root.items:
            if not isinstance(item, Block):
                literal.append(item)
                continue

            variants = self.process_tokens(item.with_items(item.items, is_root=True), sub_options)
            nodes = [v.node.with_items(v.node.items, is_root=False) for v in variants]
            if prefixes:
                prefixes = [prefix + literal + [node] for node in nodes for prefix in prefixes]
            else:
                prefixes = [literal + [node] for node in nodes]
            literal = []

        results.extend(root.with_items(prefix + literal) for prefix in prefixes)
        return results

    # ---- Aggregation ----

    def process_tokens(self, root: Block, options: FoldOptions = None) -> List[Variant]:
        """
        Ranked, deduplicated variants of one axis, best (lowest weight) first.

        Rotations are only stepping stones: a rotated root that was not
        folded any further never survives, unless the very same node was
        also produced as the original or by a genuine fold.
        """
        options = options or self.options
        if not isinstance(root, Block):
            raise TypeError(f"Expected a Block, got {type(root).__name__}")

        baseline = self.make_variant(root, options)
        candidates = [baseline]
        accepted = {baseline.hash}
        excluded = set()

        bases = self.process_existing_blocks(root, options)
        for base in bases[1:]:
            variant = self.make_variant(base, options)
            candidates.append(variant)
            accepted.add(variant.hash)

        for base in bases:
            for position, rotated in enumerate(find_root_block_variants(base, options)):
                if position > 0:
                    excluded.add(options.calculate_node_hash(rotated))

                folded = self.fold_root_block(rotated, options)
                if folded is not None:
                    candidates.append(folded)
                    accepted.add(folded.hash)

                if options.allow_nested_blocks:
                    nested = self.find_nested_blocks(rotated, options)
                    candidates.extend(nested)
                    # nested[0] is the rotation itself, unfolded
                    start = 0 if position == 0 else 1
                    accepted.update(v.hash for v in nested[start:])

        return rank_variants(candidates, excluded - accepted)

    # ---- Axis driver ----

    def transform(self, sett: Sett) -> Sett:
        """
        Fold both axes. A copy of `sett` is returned with warp/weft set to
        the best variant and warp_variants/weft_variants holding all of them.
        When warp and weft are the same object they share one computation.
        """
        result = sett.copy()
        warp_is_weft = sett.warp is sett.weft

        if isinstance(sett.warp, Block):
            result.warp_variants = self.process_tokens(sett.warp)
            result.warp = result.warp_variants[0].node
            logger.debug("warp: %d variants, best weight %.4f",
                         len(result.warp_variants), result.warp_variants[0].weight)

        if isinstance(sett.weft, Block):
            if warp_is_weft:
                result.weft_variants = result.warp_variants
            else:
                result.weft_variants = self.process_tokens(sett.weft)
                logger.debug("weft: %d variants, best weight %.4f",
                             len(result.weft_variants), result.weft_variants[0].weight)
            result.weft = result.weft_variants[0].node

        return result
