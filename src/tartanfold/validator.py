"""
SettValidator: Checks the node-model contract before folding.
Returns a list of ValidationError objects.

The fold engine assumes positive stripe counts and a tree-shaped node graph
(a block never contains itself); this is where those are enforced.
"""

import networkx as nx

from .sett import Stripe, Block


class ValidationError:
    def __init__(self, error_type, severity, path, message):
        self.error_type = error_type    # 'type', 'count', 'zero_width', 'name', 'empty_reflect', 'cycle'
        self.severity = severity        # 'critical', 'high', 'medium', 'low'
        self.path = path                # item indices from the axis root, e.g. (2, 0)
        self.message = message

    def __repr__(self):
        return f"[{self.severity.upper()}] {self.error_type}: {self.message} (at {self.path})"


def is_valid(errors):
    """No critical errors."""
    return not any(e.severity == 'critical' for e in errors)


class SettValidator:

    def validate(self, node):
        """Run all checks. Returns list of ValidationError."""
        errors = []
        errors.extend(self.check_acyclic(node))
        if errors:
            # Walking a cyclic graph item by item would never end
            return errors
        for path, item in self._walk(node):
            errors.extend(self.check_item(path, item))
        return errors

    def validate_sett(self, sett):
        """Validate both axes; an aliased weft is checked once."""
        errors = []
        for label, axis in (('warp', sett.warp), ('weft', sett.weft)):
            if label == 'weft' and sett.weft is sett.warp:
                continue
            if axis is None:
                continue
            for error in self.validate(axis):
                error.path = (label,) + tuple(error.path)
                errors.append(error)
        return errors

    def _walk(self, node, path=()):
        yield path, node
        if isinstance(node, Block):
            for index, item in enumerate(node.items):
                yield from self._walk(item, path + (index,))

    def containment_graph(self, node):
        """DiGraph of block identities: edge parent -> nested block."""
        graph = nx.DiGraph()
        pending = [node]
        seen = set()
        while pending:
            block = pending.pop()
            if not isinstance(block, Block) or id(block) in seen:
                continue
            seen.add(id(block))
            graph.add_node(id(block))
            for item in block.items:
                if isinstance(item, Block):
                    graph.add_edge(id(block), id(item))
                    pending.append(item)
        return graph

    def check_acyclic(self, node):
        """A block must not (transitively) contain itself."""
        graph = self.containment_graph(node)
        if nx.is_directed_acyclic_graph(graph):
            return []
        cycle = nx.find_cycle(graph)
        return [ValidationError(
            'cycle', 'critical', (),
            f'Block contains itself ({len(cycle)} blocks in the cycle)'
        )]

    def check_item(self, path, item):
        errors = []
        if isinstance(item, Stripe):
            if not isinstance(item.count, int) or isinstance(item.count, bool) or item.count < 0:
                errors.append(ValidationError(
                    'count', 'critical', path,
                    f'Stripe {item.name!r} has invalid count {item.count!r}'
                ))
            elif item.count == 0:
                errors.append(ValidationError(
                    'zero_width', 'low', path,
                    f'Stripe {item.name!r} has zero width'
                ))
            if not item.name:
                errors.append(ValidationError(
                    'name', 'high', path, 'Stripe has no color name'
                ))
        elif isinstance(item, Block):
            if item.reflect and not item.items:
                errors.append(ValidationError(
                    'empty_reflect', 'medium', path, 'Reflected block has no items'
                ))
        else:
            errors.append(ValidationError(
                'type', 'critical', path,
                f'Expected Stripe or Block, got {type(item).__name__}'
            ))
        return errors
