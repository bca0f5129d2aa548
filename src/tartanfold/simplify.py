"""
Simple sett transforms: plain list clean-ups that usually run before folding.

  remove_zero_width_stripes:  R10 K0 Y2        → R10 Y2
  remove_empty_blocks:        R10 () Y2        → R10 Y2
  flatten_simple_blocks:      R10 (K2 Y2) G4   → R10 K2 Y2 G4
  merge_stripes:              R10 R2 K4        → R12 K4
  optimize:                   all of the above, in that order

All transforms return new nodes and leave the input untouched. Pivots of
a reflected block (its last item, and the first one of a reflected root)
are not mirrored on unfolding, so no transform moves threads into or out
of them: the thread sequence of `unfold()` stays the same.
"""

from .sett import Stripe, Block


def _map_blocks(block, fn):
    """Apply fn bottom-up: nested blocks first, then `block` itself."""
    items = [
        _map_blocks(item, fn) if isinstance(item, Block) else item
        for item in block.items
    ]
    return fn(block.with_items(items))


def _pivots(node):
    """Indices of the items that `unfold()` does not mirror."""
    if not node.reflect or not node.items:
        return set()
    pivots = {len(node.items) - 1}
    if node.is_root:
        pivots.add(0)
    return pivots


def remove_zero_width_stripes(block):
    def drop_zero(node):
        pivots = _pivots(node)
        return node.with_items(
            item for index, item in enumerate(node.items)
            if index in pivots or not (isinstance(item, Stripe) and item.count == 0)
        )
    return _map_blocks(block, drop_zero)


def remove_empty_blocks(block):
    def drop_empty(node):
        pivots = _pivots(node)
        return node.with_items(
            item for index, item in enumerate(node.items)
            if index in pivots or not (isinstance(item, Block) and not item.items)
        )
    return _map_blocks(block, drop_empty)


def flatten_simple_blocks(block):
    """
    Inline plain nested groups into their parent. A reflected block with a
    single item mirrors to that item alone, so it is inlined as well.
    A group of several items sitting on a pivot stays a group.
    """
    def inline(node):
        pivots = _pivots(node)
        items = []
        for index, item in enumerate(node.items):
            if not isinstance(item, Block) or (item.reflect and len(item.items) != 1):
                items.append(item)
            elif index in pivots and len(item.items) != 1:
                items.append(item)
            else:
                items.extend(item.items)
        return node.with_items(items)
    return _map_blocks(block, inline)


def merge_stripes(block):
    """
    Merge neighbouring stripes of the same color. Nothing is merged into or
    out of a pivot, since a pivot is not repeated on unfolding.
    """
    def merge(node):
        pivots = _pivots(node)
        items = []
        for index, item in enumerate(node.items):
            previous = items[-1] if items else None
            if (
                index not in pivots and index - 1 not in pivots
                and isinstance(item, Stripe) and isinstance(previous, Stripe)
                and previous.name == item.name
            ):
                items[-1] = previous.with_count(previous.count + item.count)
            else:
                items.append(item)
        return node.with_items(items)
    return _map_blocks(block, merge)


def optimize(block):
    block = remove_zero_width_stripes(block)
    block = remove_empty_blocks(block)
    block = flatten_simple_blocks(block)
    return merge_stripes(block)


def apply_to_sett(sett, transform):
    """Run a block transform on both axes; an aliased warp/weft stays aliased."""
    result = sett.copy()
    if isinstance(sett.warp, Block):
        result.warp = transform(sett.warp)
    if isinstance(sett.weft, Block):
        result.weft = result.warp if sett.weft is sett.warp else transform(sett.weft)
    return result
