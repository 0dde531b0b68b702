"""
Test features for the small tensor helpers in core
"""
import unittest

import torch
from torch.nn import functional as F

from dynamite import Core


class TestIndex(unittest.TestCase):
    """
    Test indexing along the sequence axis
    """
    def test_index(self):
        """Test the step is selected and the axis dropped"""
        tensor = torch.arange(12.0).reshape(4, 3)
        output = Core.index(tensor, 2)
        self.assertEqual(output.shape, torch.Size([3]))
        self.assertTrue(torch.equal(output, torch.tensor([6.0, 7.0, 8.0])))

    def test_out_of_range(self):
        tensor = torch.zeros([2, 3])
        with self.assertRaises(Core.MinibatchConversionException):
            Core.index(tensor, 2)
        with self.assertRaises(Core.MinibatchConversionException):
            Core.index(tensor, -1)

    def test_to_vector(self):
        """Test a sequence splits into all of its steps, in order"""
        tensor = torch.randn([5, 2])
        steps = Core.to_vector(tensor)
        self.assertEqual(len(steps), 5)
        for t, step in enumerate(steps):
            self.assertTrue(torch.equal(step, tensor[t]))


class TestSoftmax(unittest.TestCase):
    """
    Test the softmax and the cross entropy built on it
    """
    def test_softmax_normalizes(self):
        """Test the result sums to one over every element"""
        z = torch.randn([4, 3])
        p = Core.softmax(z)
        self.assertEqual(p.shape, z.shape)
        self.assertTrue(torch.allclose(p.sum(), torch.tensor(1.0), atol=1e-6))

    def test_softmax_vector(self):
        z = torch.randn([6])
        self.assertTrue(torch.allclose(Core.softmax(z), torch.softmax(z, dim=0), atol=1e-6))

    def test_cross_entropy(self):
        """Test agreement with torch's cross entropy for one hot labels"""
        z = torch.randn([5])
        label = F.one_hot(torch.tensor(3), 5).float()
        expected = F.cross_entropy(z.unsqueeze(0), torch.tensor([3]))
        self.assertTrue(torch.allclose(Core.softmax_cross_entropy(z, label), expected, atol=1e-5))

    def test_batched_cross_entropy(self):
        """Test batched logits give one loss per row"""
        z = torch.randn([4, 5])
        targets = torch.tensor([0, 1, 4, 2])
        labels = F.one_hot(targets, 5).float()
        expected = F.cross_entropy(z, targets, reduction="none")
        output = Core.softmax_cross_entropy(z, labels)
        self.assertEqual(output.shape, torch.Size([4]))
        self.assertTrue(torch.allclose(output, expected, atol=1e-5))

    def test_classification_error(self):
        z = torch.tensor([[0.1, 0.9], [0.8, 0.2]])
        labels = torch.tensor([[0.0, 1.0], [0.0, 1.0]])
        self.assertEqual(Core.classification_error(z, labels).tolist(), [0.0, 1.0])


class TestMisc(unittest.TestCase):
    def test_splice(self):
        output = Core.splice([torch.ones([2]), torch.zeros([3])], dim=0)
        self.assertEqual(output.tolist(), [1.0, 1.0, 0.0, 0.0, 0.0])

    def test_flush(self):
        """Test flush hands back the same tensor"""
        tensor = torch.ones([2])
        self.assertIs(Core.flush(tensor), tensor)

    @unittest.skipUnless(torch.cuda.is_available(), "gpu test requires valid gpu install")
    def test_flush_cuda(self):
        tensor = torch.ones([2], device="cuda")
        self.assertIs(Core.flush(tensor), tensor)
