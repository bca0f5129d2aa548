import re

from .sett import Stripe, Block, Sett


class ParseError(ValueError):
    pass


class ThreadcountParser:
    """
    Parses threadcount notation into a root Block.

      R10 K20 Y2          plain root (repeats as a cycle)
      R/10 K20 Y/2        reflected root: pivots on first and last stripe
      R5 [R10 K10 Y2]     nested reflected block
      R5 (K2 Y2) R5       nested plain group
      /[K2 Y4] R8 G/2     pivot written in front of a group

    Commas and whitespace both separate items.
    """

    TOKEN_PATTERN = re.compile(
        r'\s*(?:'
        r'(?P<open>/?[\[(])'
        r'|(?P<close>[\])])'
        r'|(?P<name>[A-Za-z]+)(?P<pivot>/)?(?P<count>\d+)'
        r'|(?P<sep>,)'
        r')'
    )

    CLOSING = {'[': ']', '(': ')'}

    def tokenize(self, text):
        """
        Split text into tokens, dropping separators.
        Example: "R/10 [K2, Y4]" -> ['R/10', '[', 'K2', 'Y4', ']']
        """
        return [token for _, token in self._scan(text)]

    def _scan(self, text):
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            match = self.TOKEN_PATTERN.match(text, pos)
            if not match:
                raise ParseError(f"Unexpected character '{text[pos]}' at position {pos}")
            token = match.group(0).strip()
            pos = match.end()
            if match.group('sep'):
                continue
            yield pos - len(token), token

    def parse(self, text):
        """Parse one axis into a root Block."""
        stack = []              # (opener, position, items) of unfinished groups
        current = []            # items of the group being filled
        pivots = []             # top-level item indices carrying a pivot

        for position, token in self._scan(text):
            if token.endswith('[') or token.endswith('('):
                opener = token[-1]
                if token.startswith('/'):
                    if stack:
                        raise ParseError(f"Pivot inside a nested block at position {position}")
                    pivots.append(len(current))
                stack.append((opener, position, current))
                current = []

            elif token in (']', ')'):
                if not stack:
                    raise ParseError(f"Unbalanced '{token}' at position {position}")
                opener, start, parent = stack.pop()
                if self.CLOSING[opener] != token:
                    raise ParseError(
                        f"'{opener}' at position {start} closed by '{token}' at position {position}")
                parent.append(Block(current, reflect=(opener == '[')))
                current = parent

            else:
                match = self.TOKEN_PATTERN.match(token)
                if match.group('pivot'):
                    if stack:
                        raise ParseError(f"Pivot inside a nested block at position {position}")
                    pivots.append(len(current))
                current.append(Stripe(match.group('name'), int(match.group('count'))))

        if stack:
            opener, start, _ = stack[-1]
            raise ParseError(f"Unclosed '{opener}' at position {start}")

        return Block(current, is_root=True, reflect=self._check_pivots(pivots, len(current)))

    def _check_pivots(self, pivots, length):
        if not pivots:
            return False
        expected = [0, length - 1] if length > 1 else [0]
        if pivots != expected:
            raise ParseError(
                "Pivots must mark exactly the first and last item of the sett")
        return True

    def parse_sett(self, warp_text, weft_text=None):
        """
        Parse both axes. Without a weft the sett is symmetric: warp and weft
        are the same Block object.
        """
        warp = self.parse(warp_text)
        weft = warp if weft_text is None else self.parse(weft_text)
        return Sett(warp, weft)
