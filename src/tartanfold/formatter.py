from .sett import Stripe, Block


class ThreadcountFormatter:
    """
    Renders nodes back into threadcount notation (the inverse of
    ThreadcountParser):

    R/10 K20 Y2 G/2             reflected root
    R5 [R10 K10 Y2]             nested reflected block
    R5 (K2 Y2) R5               nested plain group
    """

    def format_node(self, node) -> str:
        if isinstance(node, Stripe):
            return f"{node.name}{node.count}"
        if not isinstance(node, Block):
            raise TypeError(f"Cannot format {type(node).__name__}")
        if node.is_root:
            return self._format_axis(node)
        inner = ' '.join(self.format_node(item) for item in node.items)
        return f"[{inner}]" if node.reflect else f"({inner})"

    def _format_axis(self, root):
        parts = [self.format_node(item) for item in root.items]
        if root.reflect and parts:
            pivots = {0, len(parts) - 1}
            parts = [
                self._pivot(item, text) if index in pivots else text
                for index, (item, text) in enumerate(zip(root.items, parts))
            ]
        return ' '.join(parts)

    def _pivot(self, item, text):
        if isinstance(item, Stripe):
            return f"{item.name}/{item.count}"
        return f"/{text}"

    def format_variants(self, variants, limit=None) -> str:
        """One line per variant: weight, then threadcount. Best first."""
        if not variants:
            return "No variants."
        shown = variants if limit is None else variants[:limit]
        lines = [f"{v.weight:8.4f}  {self.format_node(v.node)}" for v in shown]
        hidden = len(variants) - len(shown)
        if hidden > 0:
            lines.append(f"... {hidden} more")
        return '\n'.join(lines)

    def format_sett(self, sett) -> str:
        if sett.is_symmetric:
            return f"sett: {self.format_node(sett.warp)}"
        lines = []
        for label, axis in (('warp', sett.warp), ('weft', sett.weft)):
            text = self.format_node(axis) if isinstance(axis, (Stripe, Block)) else '-'
            lines.append(f"{label}: {text}")
        return '\n'.join(lines)
