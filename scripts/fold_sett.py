"""
Fold a sett and print its ranked variants.

    python scripts/fold_sett.py "R10 K20 Y2 G2 Y2 K20"
    python scripts/fold_sett.py "R15 K10 Y2 K10 R10" --nested --top 5
    python scripts/fold_sett.py --json sett.json --output folded.json
"""
import sys, os, argparse, json, logging
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tartanfold.config import FoldOptions
from tartanfold.fold import SettFolder
from tartanfold.formatter import ThreadcountFormatter
from tartanfold.parser import ThreadcountParser, ParseError
from tartanfold.sett import Sett
from tartanfold.simplify import apply_to_sett, optimize
from tartanfold.validator import SettValidator, is_valid


def build_options(args):
    return FoldOptions(
        allow_root_reorder=not args.no_reorder,
        allow_nested_blocks=args.nested,
        max_fold_levels=args.max_levels,
        min_block_size=args.min_block,
        greedy=args.greedy,
        allow_split_stripe=not args.no_split,
        process_existing_blocks=not args.no_existing,
    )


def load_sett(args):
    if args.json:
        with open(args.json, "r") as f:
            return Sett.from_dict(json.load(f))
    if not args.warp:
        raise ParseError("Either a warp threadcount or --json is required")
    return ThreadcountParser().parse_sett(args.warp, args.weft)


def main():
    parser = argparse.ArgumentParser(description="Find the most compact symmetric form of a sett.")
    parser.add_argument("warp", nargs="?", help="warp threadcount, e.g. 'R10 K20 Y2 G2 Y2 K20'")
    parser.add_argument("--weft", type=str, default=None, help="weft threadcount (default: same as warp)")
    parser.add_argument("--json", type=str, default=None, help="read the sett from a JSON file")
    parser.add_argument("--nested", action="store_true", help="search for nested blocks")
    parser.add_argument("--max-levels", type=int, default=2, help="nested levels, 0 = unlimited")
    parser.add_argument("--min-block", type=int, default=3)
    parser.add_argument("--greedy", action="store_true", help="only the longest match per center")
    parser.add_argument("--no-split", action="store_true", help="never split stripes at a fold")
    parser.add_argument("--no-reorder", action="store_true", help="do not rotate the root")
    parser.add_argument("--no-existing", action="store_true", help="leave existing blocks alone")
    parser.add_argument("--optimize", action="store_true", help="merge/clean stripes before folding")
    parser.add_argument("--top", type=int, default=10, help="variants to show per axis")
    parser.add_argument("--output", type=str, default=None, help="write the folded sett as JSON")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        sett = load_sett(args)
    except (ParseError, ValueError, OSError) as e:
        print(f"Could not read sett: {e}")
        sys.exit(1)

    errors = SettValidator().validate_sett(sett)
    for error in errors:
        print(error)
    if not is_valid(errors):
        sys.exit(1)

    if args.optimize:
        sett = apply_to_sett(sett, optimize)

    formatter = ThreadcountFormatter()
    folder = SettFolder(build_options(args))
    folded = folder(sett)

    print(formatter.format_sett(folded))
    if folded.is_symmetric or folded.warp_variants is folded.weft_variants:
        print(f"\n=== Variants ({len(folded.warp_variants or [])}) ===")
        print(formatter.format_variants(folded.warp_variants, limit=args.top))
    else:
        for label, variants in (("warp", folded.warp_variants), ("weft", folded.weft_variants)):
            if variants is None:
                continue
            print(f"\n=== {label} variants ({len(variants)}) ===")
            print(formatter.format_variants(variants, limit=args.top))

    if args.output:
        with open(args.output, "w") as f:
            json.dump(folded.to_dict(), f, indent=2)
        print(f"\nFolded sett saved to: {args.output}")


if __name__ == "__main__":
    main()
