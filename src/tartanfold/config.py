"""
Shared configuration for the tartanfold engine.
"""

from . import hashing, weights

# ------------------------------------------------------------------ #
#  Fold search defaults                                                #
# ------------------------------------------------------------------ #

DEFAULT_ALLOW_ROOT_REORDER      = True   # root is a cycle: try every rotation
DEFAULT_ALLOW_NESTED_BLOCKS     = False  # fold root only
DEFAULT_MAX_FOLD_LEVELS         = 2      # root + up to 2 nested levels; 0 = unlimited
DEFAULT_MIN_BLOCK_SIZE          = 3      # nested blocks keep >= 3 items when folded
DEFAULT_GREEDY                  = False  # False: also emit shorter symmetric matches
DEFAULT_ALLOW_SPLIT_STRIPE      = True   # R15 K10 Y2 K10 R10 => R5 [R10 K10 Y2]
DEFAULT_PROCESS_EXISTING_BLOCKS = True   # re-fold blocks already in the sett

UNBOUNDED_FOLD_LEVELS = 200000000

# ------------------------------------------------------------------ #
#  Reflection limits                                                   #
# ------------------------------------------------------------------ #

# Smallest reflective sett: R/10 K2 Y/2 => R10 K2 Y2 K2 R10
MIN_UNFOLDED_ITEMS = 5
MIN_FOLDED_ITEMS   = 2

_CAMEL_CASE = {
    'allowRootReorder': 'allow_root_reorder',
    'allowNestedBlocks': 'allow_nested_blocks',
    'maxFoldLevels': 'max_fold_levels',
    'minBlockSize': 'min_block_size',
    'greedy': 'greedy',
    'allowSplitStripe': 'allow_split_stripe',
    'processExistingBlocks': 'process_existing_blocks',
    'calculateNodeWeight': 'calculate_node_weight',
    'calculateNodeHash': 'calculate_node_hash',
}


class FoldOptions:
    """
    Read-only options for one fold run.

    Normalized on construction: min_block_size is clamped to >= 1 and
    max_fold_levels <= 0 means "unbounded". Use replace() to derive a
    modified copy (e.g. one level deeper in the recursion).
    """
    __slots__ = (
        'allow_root_reorder', 'allow_nested_blocks', 'max_fold_levels',
        'min_block_size', 'greedy', 'allow_split_stripe',
        'process_existing_blocks', 'calculate_node_weight', 'calculate_node_hash',
    )

    def __init__(
        self,
        allow_root_reorder: bool = DEFAULT_ALLOW_ROOT_REORDER,
        allow_nested_blocks: bool = DEFAULT_ALLOW_NESTED_BLOCKS,
        max_fold_levels: int = DEFAULT_MAX_FOLD_LEVELS,
        min_block_size: int = DEFAULT_MIN_BLOCK_SIZE,
        greedy: bool = DEFAULT_GREEDY,
        allow_split_stripe: bool = DEFAULT_ALLOW_SPLIT_STRIPE,
        process_existing_blocks: bool = DEFAULT_PROCESS_EXISTING_BLOCKS,
        calculate_node_weight=None,
        calculate_node_hash=None,
    ):
        if max_fold_levels <= 0:
            max_fold_levels = UNBOUNDED_FOLD_LEVELS
        set_ = object.__setattr__
        set_(self, 'allow_root_reorder', bool(allow_root_reorder))
        set_(self, 'allow_nested_blocks', bool(allow_nested_blocks))
        set_(self, 'max_fold_levels', int(max_fold_levels))
        set_(self, 'min_block_size', max(1, int(min_block_size)))
        set_(self, 'greedy', bool(greedy))
        set_(self, 'allow_split_stripe', bool(allow_split_stripe))
        set_(self, 'process_existing_blocks', bool(process_existing_blocks))
        set_(self, 'calculate_node_weight', calculate_node_weight or weights.calculate_node_weight)
        set_(self, 'calculate_node_hash', calculate_node_hash or hashing.calculate_node_hash)

    def __setattr__(self, key, value):
        raise AttributeError(f"FoldOptions is read-only (tried to set '{key}')")

    def replace(self, **changes) -> "FoldOptions":
        unknown = set(changes) - set(self.__slots__)
        if unknown:
            raise TypeError(f"Unknown fold options: {sorted(unknown)}")
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(changes)
        return FoldOptions(**values)

    @classmethod
    def from_dict(cls, data) -> "FoldOptions":
        """Accepts snake_case names or the camelCase ones used in sett documents."""
        values = {}
        for key, value in data.items():
            name = _CAMEL_CASE.get(key, key)
            if name not in cls.__slots__:
                raise ValueError(f"Unknown fold option: '{key}'")
            values[name] = value
        return cls(**values)

    def to_dict(self):
        return {
            name: getattr(self, name) for name in self.__slots__
            if not name.startswith('calculate_')
        }

    def __repr__(self):
        pairs = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"FoldOptions({pairs})"
