"""
Configuration for training the sequence classifier.
"""
from dataclasses import dataclass
from typing import List, Optional

import torch

from dynamite import Core
from dynamite.Data import StreamInformation


@dataclass
class TrainingConfig:
    """
    Configuration for a training run.

    Attributes:
        training_path: The text format corpus to train on.
        device: Torch device string, e.g. 'cpu' or 'cuda:0'.

        input_dim: Vocabulary size of the feature stream.
        embedding_dim: Width of the embedding.
        hidden_dim: Width of the recurrent state.
        attention_dim: Width of the attention space of the seq2seq model.
        num_output_classes: Number of label classes.

        features_name, features_alias, sparse_features: The feature stream.
        labels_name, labels_alias, sparse_labels: The label stream.

        minibatch_size: Samples (feature steps) per minibatch.
        learning_rate: SGD learning rate, applied per sample.
        max_minibatches: Stop after this many minibatches. None for a full sweep.

        static_repeats: Static training steps inside each timed block.
        dynamic_repeats: Eager criterion evaluations inside each timed block.
        dynamic_blocks: Timed eager blocks per minibatch.

        compile_static: Wrap the static criterion in torch.compile.
        compile_backend: torch.compile backend.
        run_seq2seq: Also evaluate the seq2seq model as an auto-encoder.

        log_frequency: Log training progress every this many minibatches.
        seed: Seed for torch's generator. None leaves it alone.
    """

    training_path: str = ""
    device: str = "cpu"

    # Model
    input_dim: int = 2000
    embedding_dim: int = 50
    hidden_dim: int = 25
    attention_dim: int = 20
    num_output_classes: int = 5

    # Streams
    features_name: str = "features"
    features_alias: str = "x"
    sparse_features: bool = True
    labels_name: str = "labels"
    labels_alias: str = "y"
    sparse_labels: bool = False

    # Training
    minibatch_size: int = 200
    learning_rate: float = 0.05
    max_minibatches: Optional[int] = None

    # Timing
    static_repeats: int = 10
    dynamic_repeats: int = 10
    dynamic_blocks: int = 5

    # Behavior
    compile_static: bool = False
    compile_backend: str = "inductor"
    run_seq2seq: bool = False

    log_frequency: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate config."""
        task = "Validating the training configuration"
        positive = ("input_dim", "embedding_dim", "hidden_dim", "attention_dim",
                    "num_output_classes", "minibatch_size", "log_frequency")
        for name in positive:
            if getattr(self, name) < 1:
                raise Core.ConfigurationException(f"{name} must be positive, got {getattr(self, name)}", task)

        non_negative = ("static_repeats", "dynamic_repeats", "dynamic_blocks")
        for name in non_negative:
            if getattr(self, name) < 0:
                raise Core.ConfigurationException(f"{name} must not be negative, got {getattr(self, name)}", task)

        if self.learning_rate <= 0:
            raise Core.ConfigurationException(f"learning_rate must be positive, got {self.learning_rate}", task)
        if self.max_minibatches is not None and self.max_minibatches < 0:
            raise Core.ConfigurationException("max_minibatches must not be negative", task)
        if self.features_name == self.labels_name:
            raise Core.ConfigurationException("The feature and label streams need distinct names", task)

        try:
            torch.device(self.device)
        except RuntimeError as err:
            raise Core.ConfigurationException(f"Unknown device '{self.device}'", task) from err

    def torch_device(self) -> torch.device:
        return torch.device(self.device)

    def streams(self) -> List[StreamInformation]:
        """The feature stream followed by the label stream"""
        return [
            StreamInformation(self.features_name, self.input_dim, self.sparse_features,
                              self.features_alias, is_sequence=True),
            StreamInformation(self.labels_name, self.num_output_classes, self.sparse_labels,
                              self.labels_alias, is_sequence=False),
        ]
