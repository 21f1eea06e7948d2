import unittest

import numpy as np

from chunker.viterbi import decode_sentences, viterbi


class FixedModel:
    """Minimal model exposing only the outcome alphabet."""

    def __init__(self, labels):
        self.labels = list(labels)

    def num_outcomes(self):
        return len(self.labels)

    def outcome_label(self, index):
        return self.labels[index]

    def score(self, feature_set):
        raise AssertionError("the decoder never scores features")

    def best_outcome(self, distribution):
        return self.labels[int(np.argmax(distribution))]


class TestViterbi(unittest.TestCase):
    def setUp(self):
        self.model = FixedModel(["B", "I", "O"])

    def test_empty_chain_yields_empty_path(self):
        self.assertEqual(viterbi([], self.model), [])

    def test_single_token_picks_most_probable_label(self):
        model = FixedModel(["B", "O"])
        self.assertEqual(viterbi([[0.9, 0.1]], model), ["B"])
        self.assertEqual(viterbi([[0.1, 0.9]], model), ["O"])

    def test_path_length_matches_input(self):
        rng = np.random.default_rng(7)
        for t in (1, 2, 5, 17):
            probs = rng.dirichlet(np.ones(3), size=t)
            self.assertEqual(len(viterbi(probs, self.model)), t)
            self.assertEqual(len(viterbi(probs, self.model, log_space=True)), t)

    def test_follows_per_token_maximum_without_transitions(self):
        probs = [
            [0.7, 0.2, 0.1],
            [0.1, 0.8, 0.1],
            [0.2, 0.1, 0.7],
        ]
        self.assertEqual(viterbi(probs, self.model), ["B", "I", "O"])

    def test_tied_predecessors_resolve_to_lowest_index(self):
        model = FixedModel(["X", "Y"])
        # Both states at t=0 score 0.5, so every state at t=1 has two
        # predecessors with identical scores; the lower index must win.
        probs = [[0.5, 0.5], [0.2, 0.8]]
        self.assertEqual(viterbi(probs, model), ["X", "Y"])
        self.assertEqual(viterbi(probs, model, log_space=True), ["X", "Y"])

    def test_tied_final_states_resolve_to_lowest_index(self):
        model = FixedModel(["X", "Y"])
        self.assertEqual(viterbi([[0.5, 0.5]], model), ["X"])

    def test_raw_products_underflow_to_lowest_index(self):
        model = FixedModel(["X", "Y"])
        # The second step leaves scores near 1e-200; the third multiplies them
        # below the smallest subnormal, so both states reach exactly zero.
        probs = [[0.3, 0.7]] + [[1e-200, 2e-200]] * 4

        raw = viterbi(probs, model)
        logged = viterbi(probs, model, log_space=True)

        # Once every score is zero, ties fall back to the lowest index.
        self.assertEqual(raw, ["Y", "X", "X", "X", "X"])
        self.assertEqual(logged, ["Y"] * 5)

    def test_wrong_distribution_length_is_rejected(self):
        with self.assertRaises(ValueError):
            viterbi([[0.5, 0.5, 0.0], [0.5, 0.5]], self.model)


class TestDecodeSentences(unittest.TestCase):
    def test_decodes_each_sentence_independently(self):
        model = FixedModel(["X", "Y"])
        probs = [[0.5, 0.5], [0.2, 0.8], [0.9, 0.1]]

        self.assertEqual(decode_sentences(probs, [2, 1], model), ["X", "Y", "X"])

    def test_lengths_must_cover_corpus(self):
        model = FixedModel(["X", "Y"])
        with self.assertRaises(ValueError):
            decode_sentences([[0.5, 0.5]], [2], model)


if __name__ == "__main__":
    unittest.main()
