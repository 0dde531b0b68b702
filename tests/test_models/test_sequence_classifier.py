import unittest

import torch
from torch import nn

from dynamite import Core
from dynamite import Models


def one_hot_sequence(length, dim):
    sequence = torch.zeros([length, dim])
    sequence[torch.arange(length), torch.randint(0, dim, [length])] = 1.0
    return sequence


def one_hot(position, dim):
    vector = torch.zeros([dim])
    vector[position] = 1.0
    return vector


class TestStaticClassifier(unittest.TestCase):
    """
    Test the whole minibatch classifier
    """
    def setUp(self):
        torch.manual_seed(0)
        self.features = [one_hot_sequence(length, 10) for length in (4, 1, 3)]
        self.labels = torch.stack([one_hot(0, 5), one_hot(3, 5), one_hot(4, 5)])
        self.batch = Core.SequenceBatch.from_list(self.features)

    def test_logits(self):
        model = Models.create_model_function(5, 6, 7, 10)
        self.assertEqual(model(self.batch).shape, torch.Size([3, 5]))

    def test_criterion(self):
        model = Models.create_model_function(5, 6, 7, 10)
        criterion = Models.create_criterion_function(model)
        losses = criterion(self.batch, self.labels)
        self.assertEqual(losses.shape, torch.Size([3]))
        self.assertTrue(torch.all(losses > 0))

    def test_metric(self):
        model = Models.create_model_function(5, 6, 7, 10)
        metric = Models.create_metric_function(model)
        errors = metric(self.batch, self.labels)
        self.assertEqual(errors.shape, torch.Size([3]))
        self.assertTrue(torch.all((errors == 0) | (errors == 1)))

    def test_inferred_input(self):
        """Test the vocabulary size is taken from the data"""
        model = Models.create_model_function(5, 6, 7)
        model(self.batch)
        self.assertEqual(model.nested("[0]")["E"].shape, torch.Size([6, 10]))

    def test_parameter_names(self):
        model = Models.create_model_function(5, 6, 7, 10)
        for source_path in Models.static_to_unrolled_mapping().values():
            self.assertIsInstance(model.parameter_block.lookup(source_path), nn.Parameter)


class TestUnrolledClassifier(unittest.TestCase):
    """
    Test the one sequence at a time classifier, and that it agrees
    with the static classifier once parameters are copied across.
    """
    def setUp(self):
        torch.manual_seed(1)
        self.features = [one_hot_sequence(length, 10) for length in (2, 5, 1)]
        self.label_list = [one_hot(1, 5), one_hot(2, 5), one_hot(0, 5)]

    def test_logits(self):
        model = Models.create_model_function_unrolled(5, 6, 7, 10)
        self.assertEqual(model(self.features[0]).shape, torch.Size([5]))

    def test_moved_model(self):
        """Test a model converted after construction still runs"""
        model = Models.create_model_function_unrolled(5, 6, 7, 10).to(torch.float64)
        output = model(self.features[0].to(torch.float64))
        self.assertEqual(output.dtype, torch.float64)

    def test_criterion_sums(self):
        model = Models.create_model_function_unrolled(5, 6, 7, 10)
        criterion = Models.create_criterion_function_unrolled(model)
        total = criterion(self.features, self.label_list)
        expected = sum(Core.softmax_cross_entropy(model(x), y) for x, y in zip(self.features, self.label_list))
        self.assertEqual(total.dim(), 0)
        self.assertTrue(torch.allclose(total, expected, atol=1e-5))

    def test_matches_static(self):
        """Test the two formulations give the same losses with the same parameters"""
        static = Models.create_model_function(5, 6, 7, 10)
        unrolled = Models.create_model_function_unrolled(5, 6, 7)
        Models.copy_parameters(unrolled, static, Models.static_to_unrolled_mapping())

        batch = Core.SequenceBatch.from_list(self.features)
        static_losses = Models.create_criterion_function(static)(batch, torch.stack(self.label_list))
        for i, (x, y) in enumerate(zip(self.features, self.label_list)):
            loss = Core.softmax_cross_entropy(unrolled(x), y)
            self.assertTrue(torch.allclose(loss, static_losses[i], atol=1e-5))

    def test_copy_keeps_identity(self):
        """Test copying writes into the existing parameters"""
        static = Models.create_model_function(5, 6, 7, 10)
        unrolled = Models.create_model_function_unrolled(5, 6, 7, 10)
        weight = unrolled.nested("step")["W"]
        Models.copy_parameters(unrolled, static, Models.static_to_unrolled_mapping())
        self.assertIs(unrolled.nested("step")["W"], weight)
        self.assertTrue(torch.equal(weight, static.nested("[1]").nested("step")["W"]))

    def test_copy_unknown_path(self):
        static = Models.create_model_function(5, 6, 7, 10)
        unrolled = Models.create_model_function_unrolled(5, 6, 7, 10)
        with self.assertRaises(Core.ParameterBlockException):
            Models.copy_parameters(unrolled, static, {"step/Q": "[1]/step/W"})
