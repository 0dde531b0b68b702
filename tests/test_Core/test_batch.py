import unittest

import torch

from dynamite import Core

PRINT_ERRORS = True


class TestBatchMap(unittest.TestCase):
    """
    Test mapping models over python lists
    """
    def test_unary(self):
        batch = [torch.tensor(1.0), torch.tensor(2.0), torch.tensor(3.0)]
        output = Core.batch_map(lambda x: x + 1, batch)
        self.assertEqual([item.item() for item in output], [2.0, 3.0, 4.0])

    def test_binary(self):
        """Test items are paired up by position"""
        xs = [torch.tensor(1.0), torch.tensor(2.0)]
        ys = [torch.tensor(10.0), torch.tensor(20.0)]
        output = Core.batch_map(lambda x, y: x * y, xs, ys)
        self.assertEqual([item.item() for item in output], [10.0, 40.0])

    def test_sequences(self):
        """Test items which are themselves lists are handed over whole"""
        xs = [[torch.tensor(1.0), torch.tensor(2.0)], [torch.tensor(3.0)]]
        ys = [[torch.tensor(1.0)], [torch.tensor(1.0), torch.tensor(1.0)]]
        output = Core.batch_map(lambda x, y: len(x) + len(y), xs, ys)
        self.assertEqual(output, [3, 3])

    def test_lifted(self):
        """Test make_batch_map gives a reusable batch function"""
        mapper = Core.make_batch_map(lambda x: x * 2)
        output = mapper([torch.tensor(1.0)])
        self.assertEqual(output[0].item(), 2.0)

    def test_mismatched_sizes(self):
        """Test batches of different sizes are rejected"""
        try:
            Core.batch_map(lambda x, y: x, [torch.tensor(1.0)], [])
            raise RuntimeError("No error when there should be")
        except Core.BatchException as err:
            if PRINT_ERRORS:
                print(err)


class TestBatchSum(unittest.TestCase):
    """
    Test summing a batch
    """
    def test_sum(self):
        batch = [torch.randn([3, 2]) for _ in range(4)]
        expected = batch[0] + batch[1] + batch[2] + batch[3]
        output = Core.batch_sum(batch)
        self.assertEqual(output.shape, torch.Size([3, 2]))
        self.assertTrue(torch.allclose(output, expected))

    def test_sum_of_sequences(self):
        """Test every step of every sequence is a summand"""
        batch = [[torch.tensor(1.0), torch.tensor(2.0)], [torch.tensor(3.0)]]
        self.assertEqual(Core.batch_sum(batch).item(), 6.0)

    def test_scalars(self):
        batch = [torch.tensor(1.5), torch.tensor(2.5)]
        output = Core.batch_sum(batch)
        self.assertEqual(output.dim(), 0)
        self.assertEqual(output.item(), 4.0)

    def test_empty(self):
        with self.assertRaises(Core.BatchException):
            Core.batch_sum([])
