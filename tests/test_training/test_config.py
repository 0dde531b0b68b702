import unittest

import torch

from dynamite import Core
from dynamite import Training

PRINT_ERRORS = True


class TestTrainingConfig(unittest.TestCase):
    """
    Test the training configuration validates itself
    """
    def test_defaults(self):
        config = Training.TrainingConfig()
        self.assertEqual(config.input_dim, 2000)
        self.assertEqual(config.embedding_dim, 50)
        self.assertEqual(config.hidden_dim, 25)
        self.assertEqual(config.num_output_classes, 5)
        self.assertEqual(config.minibatch_size, 200)
        self.assertEqual(config.learning_rate, 0.05)
        self.assertEqual(config.torch_device(), torch.device("cpu"))

    def test_streams(self):
        """Test the streams describe a sparse sequence and a dense label"""
        features, labels = Training.TrainingConfig(input_dim=11, num_output_classes=3).streams()
        self.assertEqual((features.name, features.dim, features.is_sparse, features.alias), ("features", 11, True, "x"))
        self.assertTrue(features.is_sequence)
        self.assertEqual((labels.name, labels.dim, labels.is_sparse, labels.alias), ("labels", 3, False, "y"))
        self.assertFalse(labels.is_sequence)

    def test_non_positive_dim(self):
        try:
            Training.TrainingConfig(hidden_dim=0)
            raise RuntimeError("No error when there should be")
        except Core.ConfigurationException as err:
            if PRINT_ERRORS:
                print(err)

    def test_negative_repeats(self):
        with self.assertRaises(Core.ConfigurationException):
            Training.TrainingConfig(dynamic_repeats=-1)

    def test_learning_rate(self):
        with self.assertRaises(Core.ConfigurationException):
            Training.TrainingConfig(learning_rate=0.0)

    def test_max_minibatches(self):
        with self.assertRaises(Core.ConfigurationException):
            Training.TrainingConfig(max_minibatches=-2)

    def test_stream_names(self):
        with self.assertRaises(Core.ConfigurationException):
            Training.TrainingConfig(labels_name="features")

    def test_device(self):
        with self.assertRaises(Core.ConfigurationException):
            Training.TrainingConfig(device="not_a_device")
