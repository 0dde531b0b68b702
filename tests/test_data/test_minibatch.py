import os
import tempfile
import unittest

import torch
from torch.nn.utils import rnn

from dynamite import Data

CORPUS = """\
0 |x 3:1 |y 0 1 0
0 |x 5:1
0 |x 2:1
1 |x 1:1 |y 1 0 0
1 |x 7:1
2 |x 4:1 |y 0 0 1
"""


def make_streams():
    return [Data.StreamInformation("features", 8, True, "x"),
            Data.StreamInformation("labels", 3, False, "y", is_sequence=False)]


class TestSampleCountBatchSampler(unittest.TestCase):
    """
    Test minibatches are planned by sample count
    """
    def test_grouping(self):
        sampler = Data.SampleCountBatchSampler([3, 2, 1], 4)
        self.assertEqual(list(sampler), [[0], [1, 2]])
        self.assertEqual(len(sampler), 2)

    def test_long_sequence(self):
        """Test a sequence longer than the budget still gets a minibatch"""
        sampler = Data.SampleCountBatchSampler([10, 1], 4)
        self.assertEqual(list(sampler), [[0], [1]])

    def test_exact_fit(self):
        sampler = Data.SampleCountBatchSampler([2, 2, 2, 2], 4)
        self.assertEqual(list(sampler), [[0, 1], [2, 3]])

    def test_bad_size(self):
        with self.assertRaises(ValueError):
            Data.SampleCountBatchSampler([1, 2], 0)


class TestCollate(unittest.TestCase):
    def test_collate(self):
        items = [{"features": torch.ones([3, 8]), "labels": torch.ones([1, 3])},
                 {"features": torch.ones([1, 8]), "labels": torch.ones([1, 3])}]
        minibatch = Data.collate_minibatch(items, make_streams())
        self.assertIsInstance(minibatch["features"].data, rnn.PackedSequence)
        self.assertEqual(minibatch["features"].number_of_sequences, 2)
        self.assertEqual(minibatch["features"].number_of_samples, 4)
        self.assertEqual(minibatch["labels"].number_of_samples, 2)


class TestMinibatchSource(unittest.TestCase):
    """
    Test a full sweep over a file
    """
    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".ctf")
        with os.fdopen(handle, "w") as file:
            file.write(CORPUS)

    def tearDown(self):
        os.remove(self.path)

    def test_sweep(self):
        source = Data.create_minibatch_source(self.path, make_streams(), 4)
        minibatches = list(source)
        self.assertEqual(len(minibatches), 2)
        self.assertEqual(minibatches[0]["features"].number_of_sequences, 1)
        self.assertEqual(minibatches[1]["features"].number_of_sequences, 2)
        self.assertEqual(minibatches[1]["features"].number_of_samples, 3)

    def test_order_kept(self):
        """Test sequences come back in file order once unpacked"""
        source = Data.create_minibatch_source(self.path, make_streams(), 4)
        minibatch = list(source)[1]
        labels = rnn.unpack_sequence(minibatch["labels"].data)
        self.assertEqual(labels[0][0].tolist(), [1, 0, 0])
        self.assertEqual(labels[1][0].tolist(), [0, 0, 1])

    def test_to_device(self):
        source = Data.create_minibatch_source(self.path, make_streams(), 4)
        stream = list(source)[0]["features"].to(torch.device("cpu"))
        self.assertEqual(stream.number_of_samples, 3)
