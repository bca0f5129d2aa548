import pytest
from tartanfold.sett import (
    Stripe, Block, Sett, Variant, is_same_node, node_from_dict,
)
from tartanfold.hashing import calculate_node_hash
from tartanfold.weights import NodeWeigher, calculate_node_weight
from tartanfold.config import FoldOptions, UNBOUNDED_FOLD_LEVELS
from tartanfold.fold import rank_variants
from tartanfold import hashing, weights


def stripes(text):
    return [Stripe(token[0], int(token[1:])) for token in text.split()]


# ============================================================
# Node model
# ============================================================

class TestNodeModel:
    def test_stripe_equality_is_structural(self):
        assert Stripe('R', 10) == Stripe('R', 10)
        assert Stripe('R', 10) != Stripe('R', 12)
        assert Stripe('R', 10) != Stripe('K', 10)

    def test_nodes_are_read_only(self):
        stripe = Stripe('R', 10)
        block = Block(stripes("R10 K2"))
        with pytest.raises(AttributeError):
            stripe.count = 5
        with pytest.raises(AttributeError):
            block.reflect = True

    def test_items_are_copied_into_a_tuple(self):
        items = stripes("R10 K2")
        block = Block(items)
        items.append(Stripe('Y', 2))
        assert block.items == tuple(stripes("R10 K2"))

    def test_with_items_keeps_flags_and_original(self):
        root = Block(stripes("R10 K2 Y2"), is_root=True)
        folded = root.with_items(stripes("R10 K2"), reflect=True)
        assert folded.is_root and folded.reflect
        assert root.items == tuple(stripes("R10 K2 Y2"))
        assert not root.reflect

    def test_is_same_node(self):
        block = Block(stripes("K2 Y2"), reflect=True)
        assert is_same_node(Stripe('R', 10), Stripe('R', 10))
        assert is_same_node(block, Block(stripes("K2 Y2"), reflect=True))
        assert not is_same_node(block, Block(stripes("K2 Y2")))
        assert not is_same_node(Stripe('K', 2), Block([Stripe('K', 2)]))

    def test_unfold_reflected_nested_block(self):
        block = Block(stripes("R10 K10 Y2"), reflect=True)
        assert block.unfold() == stripes("R10 K10 Y2 K10 R10")

    def test_unfold_reflected_root_is_one_cycle(self):
        root = Block(stripes("R10 K20 Y2 G2"), is_root=True, reflect=True)
        assert root.unfold() == stripes("R10 K20 Y2 G2 Y2 K20")

    def test_unfold_nested_inside_root(self):
        inner = Block(stripes("R10 K10 Y2"), reflect=True)
        root = Block([Stripe('R', 5), inner], is_root=True)
        assert root.unfold() == stripes("R5 R10 K10 Y2 K10 R10")

    def test_dict_roundtrip(self):
        root = Block([Stripe('R', 5), Block(stripes("R10 K10 Y2"), reflect=True)], is_root=True)
        assert node_from_dict(root.to_dict()) == root

    def test_unknown_node_type_raises(self):
        with pytest.raises(ValueError):
            node_from_dict({'type': 'twill'})

    def test_variant_is_read_only(self):
        variant = Variant(Block(stripes("R10 K2"), is_root=True), "[R/RP:R10 K2]", 2.0)
        with pytest.raises(AttributeError):
            variant.weight = 0.0
        with pytest.raises(AttributeError):
            variant.hash = "other"


class TestSett:
    def test_copy_keeps_aliasing(self):
        axis = Block(stripes("R10 K2"), is_root=True)
        sett = Sett(axis, axis)
        clone = sett.copy()
        assert clone is not sett
        assert clone.warp is clone.weft
        assert clone.is_symmetric

    def test_from_dict_shares_equal_axes(self):
        axis = Block(stripes("R10 K2"), is_root=True).to_dict()
        sett = Sett.from_dict({'warp': axis, 'weft': dict(axis)})
        assert sett.warp is sett.weft

    def test_from_dict_distinct_axes(self):
        warp = Block(stripes("R10 K2"), is_root=True)
        weft = Block(stripes("G4 Y2"), is_root=True)
        sett = Sett.from_dict(Sett(warp, weft).to_dict())
        assert sett.warp == warp
        assert sett.weft == weft
        assert not sett.is_symmetric

    def test_variants_serialize(self):
        axis = Block(stripes("R10 K2"), is_root=True)
        variant = Variant(axis, calculate_node_hash(axis), 2.0)
        data = Sett(axis, None, [variant], None).to_dict()
        assert data['warp_variants'][0]['hash'] == "[R/RP:R10 K2]"
        assert data['weft'] is None
        assert 'weft_variants' not in data


# ============================================================
# Hashing
# ============================================================

class TestHashing:
    def test_stripe_hash(self):
        assert calculate_node_hash(Stripe('R', 10)) == "R10"

    def test_block_hash(self):
        root = Block(stripes("R10 K2"), is_root=True)
        nested = Block(stripes("K2 Y4"), reflect=True)
        assert calculate_node_hash(root) == "[R/RP:R10 K2]"
        assert calculate_node_hash(nested) == "[B/RF:K2 Y4]"

    def test_nested_hash(self):
        root = Block([Stripe('R', 5), Block(stripes("R10 K10 Y2"), reflect=True)], is_root=True)
        assert calculate_node_hash(root) == "[R/RP:R5 [B/RF:R10 K10 Y2]]"

    def test_equal_structure_equal_hash(self):
        a = Block([Stripe('R', 5), Block(stripes("K2 Y2"), reflect=True)], is_root=True)
        b = Block([Stripe('R', 5), Block(stripes("K2 Y2"), reflect=True)], is_root=True)
        assert calculate_node_hash(a) == calculate_node_hash(b)

    def test_flags_change_hash(self):
        plain = Block(stripes("R10 K2 Y2"), is_root=True)
        assert calculate_node_hash(plain) != calculate_node_hash(plain.with_items(plain.items, reflect=True))
        assert calculate_node_hash(plain) != calculate_node_hash(plain.with_items(plain.items, is_root=False))

    def test_rejects_foreign_objects(self):
        with pytest.raises(TypeError):
            calculate_node_hash("R10")

    def test_digit_in_name_does_not_collide_with_count(self):
        plain = Block([Stripe('K', 12), Stripe('Y', 2)], is_root=True)
        odd = Block([Stripe('K1', 2), Stripe('Y', 2)], is_root=True)
        assert calculate_node_hash(plain) == "[R/RP:K12 Y2]"
        assert calculate_node_hash(odd) != calculate_node_hash(plain)

    @pytest.mark.parametrize("left, right", [
        (Stripe('K1', 2), Stripe('K', 12)),
        (Stripe('K', 2.5), Stripe('K2.', 5)),
        (Stripe('R', -1), Stripe('R-', 1)),
        (Stripe('R', 1), Stripe('R', True)),
        (Stripe('K2 Y', 2), Stripe('K', 2)),
    ])
    def test_distinct_stripes_hash_differently(self, left, right):
        assert calculate_node_hash(left) != calculate_node_hash(right)

    def test_quoted_names_keep_blocks_apart(self):
        joined = Block([Stripe('K2 Y', 2)], is_root=True)
        split = Block([Stripe('K', 2), Stripe('Y', 2)], is_root=True)
        assert calculate_node_hash(joined) != calculate_node_hash(split)

    def test_rank_variants_keeps_colliding_names_apart(self):
        nodes = [
            Block([Stripe('K', 12), Stripe('Y', 2)], is_root=True),
            Block([Stripe('K1', 2), Stripe('Y', 2)], is_root=True),
        ]
        ranked = rank_variants(Variant(node, calculate_node_hash(node), 1.0) for node in nodes)
        assert [v.node for v in ranked] == nodes


# ============================================================
# Weights
# ============================================================

class TestWeights:
    def test_flat_root_counts_stripes(self):
        assert calculate_node_weight(Block(stripes("R10 K20 Y2 G2"), is_root=True)) == pytest.approx(4.0)

    def test_nested_block_costs_extra(self):
        root = Block([Stripe('R', 5), Block(stripes("R10 K10 Y2"), reflect=True)], is_root=True)
        # 1 + 3 * 1.25 + 0.5
        assert calculate_node_weight(root) == pytest.approx(5.25)

    def test_single_stripe_and_empty_block(self):
        assert calculate_node_weight(Stripe('R', 10)) == pytest.approx(1.0)
        assert calculate_node_weight(Block([], is_root=True)) == pytest.approx(0.0)

    def test_fewer_stripes_rank_lower(self):
        unfolded = Block(stripes("R10 K20 Y2 G2 Y2 K20"), is_root=True)
        folded = unfolded.with_items(stripes("R10 K20 Y2 G2"), reflect=True)
        assert calculate_node_weight(folded) < calculate_node_weight(unfolded)

    def test_custom_costs(self):
        weigher = NodeWeigher(stripe_cost=2.0, depth_penalty=0.0, block_cost=1.0)
        root = Block([Stripe('R', 5), Block(stripes("K2 Y2"), reflect=True)], is_root=True)
        assert weigher(root) == pytest.approx(2.0 * 3 + 1.0)


# ============================================================
# Options
# ============================================================

class TestFoldOptions:
    def test_defaults(self):
        options = FoldOptions()
        assert options.allow_root_reorder is True
        assert options.allow_nested_blocks is False
        assert options.max_fold_levels == 2
        assert options.min_block_size == 3
        assert options.greedy is False
        assert options.allow_split_stripe is True
        assert options.process_existing_blocks is True
        assert options.calculate_node_weight is weights.calculate_node_weight
        assert options.calculate_node_hash is hashing.calculate_node_hash

    def test_normalization(self):
        options = FoldOptions(min_block_size=0, max_fold_levels=0)
        assert options.min_block_size == 1
        assert options.max_fold_levels == UNBOUNDED_FOLD_LEVELS

    def test_read_only(self):
        options = FoldOptions()
        with pytest.raises(AttributeError):
            options.greedy = True

    def test_replace(self):
        options = FoldOptions()
        deeper = options.replace(max_fold_levels=1, allow_root_reorder=False)
        assert deeper.max_fold_levels == 1
        assert deeper.allow_root_reorder is False
        assert options.max_fold_levels == 2
        assert options.allow_root_reorder is True
        with pytest.raises(TypeError):
            options.replace(colour='red')

    def test_from_dict_accepts_camel_case(self):
        options = FoldOptions.from_dict({'allowNestedBlocks': True, 'min_block_size': 2})
        assert options.allow_nested_blocks is True
        assert options.min_block_size == 2
        with pytest.raises(ValueError):
            FoldOptions.from_dict({'maxDepth': 3})

    def test_to_dict_lists_scalar_options(self):
        data = FoldOptions().to_dict()
        assert data['max_fold_levels'] == 2
        assert 'calculate_node_weight' not in data
