"""Command-line script for scoring a decoded-tag log against a reference.

The decoded log holds one tag per line, as written by a chunking run. The
reference is a labeled `WORD POS TAG` corpus; its feature context is rebuilt so
that mismatches can be written with the same layout a run uses.
"""
import argparse
import sys
from pathlib import Path

# Add project root to path to allow for package imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from chunker.evaluation import evaluate, format_report
from chunker.features import encode_corpus
from chunker.io_utils import read_corpus, read_lines, write_lines

def main():
    """
    Main entry point for the command-line evaluation script.

    Prints per-tag mismatch counts and block-level precision, recall and
    F-score. With `--mismatches-out`, every disagreement is also written to
    that file.
    """
    parser = argparse.ArgumentParser(
        description="Evaluate decoded BIO tags against a labeled reference corpus.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--generated", required=True, help="Path to the decoded-tag log (one tag per line).")
    parser.add_argument("--reference", required=True, help="Path to the labeled reference corpus.")
    parser.add_argument("--mismatches-out", help="Optional: path to write one line per mismatch.")
    args = parser.parse_args()

    try:
        predicted = read_lines(args.generated)
        sentences = read_corpus(args.reference, labeled=True)
        reference = [tok.tag for sentence in sentences for tok in sentence]
        context = encode_corpus(sentences)

        if len(predicted) != len(reference):
            print(
                f"Warning: {len(predicted)} generated tags vs {len(reference)} reference tags; "
                "comparing the common prefix."
            )

        metrics = evaluate(predicted, reference, context, log=bool(args.mismatches_out))
        print(format_report(metrics))

        if args.mismatches_out:
            write_lines(args.mismatches_out, metrics.mismatches)
            print(f"\nWrote {len(metrics.mismatches)} mismatches to {args.mismatches_out}")

    except (FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
