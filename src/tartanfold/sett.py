"""
Sett node model: stripes, blocks and the two-axis sett container.

A Stripe is a single colored band (name + thread count).
A Block is an ordered group of stripes/blocks:
  - is_root: outermost block of an axis, logically a closed cycle
  - reflect: `items` hold only half of the sequence; the full sequence is
    items followed by reversed(items[:-1]) (the center is not duplicated)

Nodes are read-only. Every transform builds new nodes via Block.with_items,
so variants never share a mutable item list.
"""


class Stripe:
    __slots__ = ('name', 'count')

    def __init__(self, name, count):
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'count', count)

    def __setattr__(self, key, value):
        raise AttributeError(f"Stripe is read-only (tried to set '{key}')")

    def __eq__(self, other):
        if not isinstance(other, Stripe):
            return NotImplemented
        return self.name == other.name and self.count == other.count

    def __hash__(self):
        return hash(('stripe', self.name, self.count))

    def with_count(self, count):
        return Stripe(self.name, count)

    def unfold(self):
        return [self]

    def to_dict(self):
        return {'type': 'stripe', 'name': self.name, 'count': self.count}

    def __repr__(self):
        return f"Stripe({self.name}{self.count})"


class Block:
    __slots__ = ('items', 'is_root', 'reflect')

    def __init__(self, items=(), is_root=False, reflect=False):
        object.__setattr__(self, 'items', tuple(items))
        object.__setattr__(self, 'is_root', bool(is_root))
        object.__setattr__(self, 'reflect', bool(reflect))

    def __setattr__(self, key, value):
        raise AttributeError(f"Block is read-only (tried to set '{key}')")

    def __eq__(self, other):
        if not isinstance(other, Block):
            return NotImplemented
        return (
            self.is_root == other.is_root
            and self.reflect == other.reflect
            and self.items == other.items
        )

    def __hash__(self):
        return hash(('block', self.is_root, self.reflect, self.items))

    def __len__(self):
        return len(self.items)

    def with_items(self, items, reflect=None, is_root=None):
        """Copy of this block with replaced items (and optionally flags)."""
        return Block(
            items,
            is_root=self.is_root if is_root is None else is_root,
            reflect=self.reflect if reflect is None else reflect,
        )

    def unfold(self):
        """
        Logical flat stripe sequence this block stands for.

        A reflected root is one cycle of the sett, so both pivots appear once:
        R/10 K2 Y/2 -> R10 K2 Y2 K2 (the next cycle starts with R10 again).
        A reflected nested block repeats everything but its last item:
        [R10 K2 Y2] -> R10 K2 Y2 K2 R10.
        """
        flat = []
        for item in self.items:
            flat.extend(item.unfold())
        if self.reflect and self.items:
            mirror = self.items[1:-1] if self.is_root else self.items[:-1]
            for item in reversed(mirror):
                flat.extend(reversed(item.unfold()))
        return flat

    def to_dict(self):
        return {
            'type': 'block',
            'items': [item.to_dict() for item in self.items],
            'is_root': self.is_root,
            'reflect': self.reflect,
        }

    def __repr__(self):
        flags = []
        if self.is_root:
            flags.append('root')
        if self.reflect:
            flags.append('reflect')
        suffix = f", {'|'.join(flags)}" if flags else ''
        return f"Block({list(self.items)}{suffix})"


def is_same_node(left, right):
    """Two items match when they are of the same kind and structurally equal."""
    if type(left) is not type(right):
        return False
    return left == right


def node_from_dict(data):
    """Build a Stripe or Block from its to_dict() form."""
    kind = data.get('type')
    if kind == 'stripe':
        return Stripe(data['name'], data['count'])
    if kind == 'block':
        return Block(
            [node_from_dict(item) for item in data.get('items', [])],
            is_root=data.get('is_root', False),
            reflect=data.get('reflect', False),
        )
    raise ValueError(f"Unknown node type: {kind!r}")


class Variant:
    """One candidate representation of an axis: node + fingerprint + rank."""
    __slots__ = ('node', 'hash', 'weight')

    def __init__(self, node, hash, weight):
        object.__setattr__(self, 'node', node)
        object.__setattr__(self, 'hash', hash)
        object.__setattr__(self, 'weight', weight)

    def __setattr__(self, key, value):
        raise AttributeError(f"Variant is read-only (tried to set '{key}')")

    def to_dict(self):
        return {'node': self.node.to_dict(), 'hash': self.hash, 'weight': self.weight}

    def __repr__(self):
        return f"Variant({self.hash}, weight={self.weight:.4f})"


class Sett:
    """Warp and weft axes plus, after folding, their ranked variants."""

    def __init__(self, warp=None, weft=None, warp_variants=None, weft_variants=None):
        self.warp = warp
        self.weft = weft
        self.warp_variants = warp_variants
        self.weft_variants = weft_variants

    @property
    def is_symmetric(self):
        """True when both axes are the very same node object."""
        return self.warp is not None and self.warp is self.weft

    def copy(self):
        """Shallow clone; keeps warp/weft aliasing intact."""
        return Sett(self.warp, self.weft, self.warp_variants, self.weft_variants)

    # ---- Serialization ----

    def to_dict(self):
        data = {
            'warp': self.warp.to_dict() if isinstance(self.warp, (Stripe, Block)) else self.warp,
            'weft': self.weft.to_dict() if isinstance(self.weft, (Stripe, Block)) else self.weft,
        }
        if self.warp_variants is not None:
            data['warp_variants'] = [v.to_dict() for v in self.warp_variants]
        if self.weft_variants is not None:
            data['weft_variants'] = [v.to_dict() for v in self.weft_variants]
        return data

    @classmethod
    def from_dict(cls, data):
        warp_data = data.get('warp')
        weft_data = data.get('weft')
        warp = node_from_dict(warp_data) if isinstance(warp_data, dict) else warp_data
        if isinstance(weft_data, dict):
            # Equal axes in the document are the same axis in memory
            weft = warp if weft_data == warp_data else node_from_dict(weft_data)
        else:
            weft = weft_data
        return cls(warp, weft)

    def __repr__(self):
        if self.is_symmetric:
            return f"Sett(warp=weft={self.warp!r})"
        return f"Sett(warp={self.warp!r}, weft={self.weft!r})"
