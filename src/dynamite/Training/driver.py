"""
The training driver. Trains the static classifier and, on the same
minibatches, evaluates the unrolled formulation with the static
parameters copied across, timing both paths.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

import torch

from dynamite import Core
from dynamite import Data
from dynamite import Models
from dynamite.Training.config import TrainingConfig
from dynamite.Training.timer import ScopeTimer
from dynamite.Training.trainer import Trainer, print_training_progress

logger = logging.getLogger(__name__)


@dataclass
class TrainingSummary:
    minibatches: int = 0
    static_loss_average: float = 0.0
    dynamic_loss_per_sequence: float = 0.0
    seq2seq_loss_per_sequence: Optional[float] = None
    timings: Dict[str, float] = field(default_factory=lambda: {"conversion": 0.0,
                                                               "dynamic": 0.0,
                                                               "static": 0.0})


def train_sequence_classifier(config: TrainingConfig,
                              minibatch_source: Optional[Iterable[Data.Minibatch]] = None,
                              ) -> TrainingSummary:
    """
    Runs training.

    :param config: The run configuration
    :param minibatch_source: Minibatches to train on. Read from config.training_path if None.
    :return: A summary of the run
    """
    if config.seed is not None:
        torch.manual_seed(config.seed)
    device = config.torch_device()
    streams = config.streams()
    features_name, labels_name = config.features_name, config.labels_name

    # dynamic model and criterion function
    d_model_fn = Models.create_model_function_unrolled(config.num_output_classes, config.embedding_dim,
                                                       config.hidden_dim, config.input_dim, device)
    d_criterion_fn = Models.create_criterion_function_unrolled(d_model_fn)
    s2s_model_fn = None
    if config.run_seq2seq:
        # auto-encoder: the input vocabulary doubles as the output classes
        s2s_model_fn = Models.create_model_function_s2s_att(config.input_dim, config.embedding_dim,
                                                            2 * config.hidden_dim, config.attention_dim,
                                                            config.input_dim, device=device)

    # static model and criterion function
    model_fn = Models.create_model_function(config.num_output_classes, config.embedding_dim,
                                            config.hidden_dim, config.input_dim, device)
    criterion_fn = Models.create_criterion_function(model_fn)
    trainer = Trainer(criterion_fn,
                      config.learning_rate,
                      metric=Models.create_metric_function(model_fn),
                      compile=config.compile_static,
                      compile_backend=config.compile_backend)
    mapping = Models.static_to_unrolled_mapping()

    if minibatch_source is None:
        minibatch_source = Data.create_minibatch_source(config.training_path, streams, config.minibatch_size)

    summary = TrainingSummary()
    for repeats, minibatch_data in enumerate(minibatch_source):
        if config.max_minibatches is not None and repeats >= config.max_minibatches:
            break
        features_data = minibatch_data[features_name].to(device)
        labels_data = minibatch_data[labels_name].to(device)
        num_sequences = features_data.number_of_sequences

        # Dynamite
        logger.info("#seq: %d, #words: %d", num_sequences, features_data.number_of_samples)
        with ScopeTimer("from_packed_minibatch", logger) as timer:
            args = Data.from_packed_minibatch([features_data.data, labels_data.data], streams)
        summary.timings["conversion"] += timer.elapsed

        with torch.no_grad():
            mb_loss = d_criterion_fn(args[0], args[1])
        if repeats > 0:
            Models.copy_parameters(d_model_fn, model_fn, mapping)

        if s2s_model_fn is not None:
            vargs = [Core.to_vector(sequence) for sequence in args[0]]
            with torch.no_grad():
                s2s_losses = Core.make_batch_map(s2s_model_fn)(vargs, vargs)
                s2s_loss = Core.batch_sum(s2s_losses)
            summary.seq2seq_loss_per_sequence = s2s_loss.item() / num_sequences
            logger.info("seq2seq loss per sequence: %.6f", summary.seq2seq_loss_per_sequence)

        if repeats > 0:
            for _ in range(config.dynamic_blocks):
                with ScopeTimer("d_criterion_fn", logger) as timer:
                    with torch.no_grad():
                        for _ in range(config.dynamic_repeats):
                            mb_loss = Core.flush(d_criterion_fn(args[0], args[1]))
                summary.timings["dynamic"] += timer.elapsed
                logger.info("%.6f", mb_loss.item() / num_sequences)
        summary.dynamic_loss_per_sequence = mb_loss.item() / num_sequences

        # static
        features = Data.to_sequence_batch(features_data)
        labels = Data.to_dense_batch(labels_data)
        trainer.train_minibatch(features, labels)
        with ScopeTimer("static", logger) as timer:
            for _ in range(config.static_repeats):
                trainer.train_minibatch(features, labels)
        summary.timings["static"] += timer.elapsed
        print_training_progress(trainer, repeats, config.log_frequency)

        summary.minibatches = repeats + 1
        summary.static_loss_average = trainer.previous_minibatch_loss_average

    return summary
