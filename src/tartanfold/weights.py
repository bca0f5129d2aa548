"""
Node weights: a ranking score for equivalent sett representations.

Lower is better. The default favours representations that need fewer
written stripes, and charges a little for every nested block and for
stripes buried deeper in the tree, so a fold only wins when it pays off.
"""

import numpy as np

from .sett import Stripe, Block


class NodeWeigher:

    def __init__(self, stripe_cost: float = 1.0, depth_penalty: float = 0.25,
                 block_cost: float = 0.5):
        """
        Args:
            stripe_cost:   base cost of every written stripe
            depth_penalty: extra cost per nesting level, relative to stripe_cost
            block_cost:    cost of every nested (non-root) block
        """
        self.stripe_cost = stripe_cost
        self.depth_penalty = depth_penalty
        self.block_cost = block_cost

    def collect_depths(self, node):
        """
        Walk the tree and return (stripe_depths, nested_block_count).
        Items of the node passed in sit at depth 0.
        """
        if isinstance(node, Stripe):
            return np.zeros(1), 0
        if not isinstance(node, Block):
            raise TypeError(f"Cannot weigh {type(node).__name__}")

        depths = []
        blocks = 0
        stack = [(item, 0) for item in node.items]
        while stack:
            current, depth = stack.pop()
            if isinstance(current, Stripe):
                depths.append(depth)
            elif isinstance(current, Block):
                blocks += 1
                stack.extend((item, depth + 1) for item in current.items)
            else:
                raise TypeError(f"Cannot weigh {type(current).__name__}")
        return np.asarray(depths, dtype=np.float64), blocks

    def __call__(self, node) -> float:
        depths, blocks = self.collect_depths(node)
        if depths.size == 0:
            return float(self.block_cost * blocks)
        stripe_weights = self.stripe_cost * (1.0 + self.depth_penalty * depths)
        return float(stripe_weights.sum() + self.block_cost * blocks)


calculate_node_weight = NodeWeigher()
