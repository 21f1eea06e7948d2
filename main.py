import argparse
import sys
from pathlib import Path

# Add project root to path for robust execution
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from chunker.config import DECODE_SCOPES, load_config
from chunker.evaluation import format_report
from chunker.pipeline import run, tag

def main():
    """
    Main command-line interface for the BIO chunker.

    This script orchestrates a complete chunking run:
    1.  Loads the run configuration (`config.yaml`) and applies any
        command-line overrides.
    2.  Trains a maximum-entropy model from the training corpus, or reads a
        previously saved one.
    3.  Encodes and scores the test corpus, then decodes it with Viterbi and
        with the per-token best-outcome baseline.
    4.  Prints mismatch counts, precision, recall and F-score for both, and
        writes the decoded-tag and mismatch logs.

    With `--tag-input`, only steps 1-3 run on an unlabeled corpus and the
    decoded tags are written to `--tag-output`.
    """
    parser = argparse.ArgumentParser(
        description="Chunk a POS-tagged corpus with a maxent classifier and Viterbi decoding.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the configuration YAML file."
    )
    parser.add_argument(
        "--read-model",
        dest="read_model_in",
        action="store_true",
        help="Read the saved model instead of training a new one."
    )
    parser.add_argument(
        "--train-model",
        dest="read_model_in",
        action="store_false",
        help="Train a new model regardless of config settings."
    )
    parser.add_argument(
        "--decode-scope",
        choices=DECODE_SCOPES,
        help="Decode the corpus as one chain or each sentence separately."
    )
    parser.add_argument(
        "--log-mismatches",
        action="store_true",
        help="Write one line per mismatch into the Viterbi and best-outcome logs."
    )
    parser.add_argument(
        "--tag-input",
        help="Decode this unlabeled corpus instead of running an evaluation."
    )
    parser.add_argument(
        "--tag-output",
        default="tags.log",
        help="Where to write tags decoded from --tag-input."
    )
    parser.set_defaults(read_model_in=None)
    args = parser.parse_args()

    try:
        print(f"Loading configuration from {args.config}...")
        cfg = load_config(args.config)

        if args.read_model_in is not None:
            cfg.read_model_in = args.read_model_in
        if args.decode_scope is not None:
            cfg.decode_scope = args.decode_scope
        if args.log_mismatches:
            cfg.enable_mismatch_logging = True

        if args.tag_input:
            tags = tag(cfg, args.tag_input, args.tag_output)
            print(f"\nSuccessfully wrote {len(tags)} tags to {args.tag_output}")
            return

        result = run(cfg)

        print("\nUsing viterbi:")
        print(format_report(result.viterbi_metrics))

        print("\nUsing getBestOutcome:")
        print(format_report(result.best_outcome_metrics))

    except (FileNotFoundError, ValueError, TypeError, KeyError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
