import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from chunker.features import encode_corpus
from chunker.io_utils import read_corpus, save_model, write_lines
from chunker.model_builder import train_model

def main():
    """
    Main entry point for the command-line model training script.

    This script:
    1.  Reads a labeled `WORD POS TAG` corpus.
    2.  Encodes every token into its contextual feature set, with the
        reference tag appended as the outcome.
    3.  Optionally saves those training events, one per line.
    4.  Trains a maximum-entropy model with Generalized Iterative Scaling and
        saves it as JSON.
    """
    parser = argparse.ArgumentParser(
        description="Train the maxent chunk classifier from a labeled corpus.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--corpus", type=str, required=True, help="Path to the labeled training corpus.")
    parser.add_argument("--model", type=str, required=True, help="Output path for the model JSON file.")
    parser.add_argument("--features-out", type=str, help="Optional: output path for the encoded training events.")
    parser.add_argument("--iterations", type=int, default=100, help="Number of GIS iterations.")
    parser.add_argument("--cutoff", type=int, default=4, help="Minimum predicate frequency.")
    args = parser.parse_args()

    try:
        sentences = read_corpus(args.corpus, labeled=True)
        print(f"Read {len(sentences)} sentences from {args.corpus}.")
        events = encode_corpus(sentences, include_outcome=True)

        if args.features_out:
            write_lines(args.features_out, (" ".join(fs) for fs in events))
            print(f"Saved {len(events)} training events to {args.features_out}")

        model = train_model(events, iterations=args.iterations, cutoff=args.cutoff)
        save_model(args.model, model)
        print(f"Successfully saved model with {model.num_outcomes()} outcomes to {args.model}")

    except (FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
