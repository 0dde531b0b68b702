"""
A minimal trainer for the static formulation.
"""
import logging
from typing import Callable, Optional

import torch

from dynamite import Core

logger = logging.getLogger(__name__)


class Trainer:
    """
    Owns an SGD optimizer over the parameters of a criterion.

    The criterion returns one loss per sequence. train_minibatch sums
    those losses, so the learning rate applies per sample, then steps
    the optimizer and records the averages of the minibatch.
    """
    def __init__(self,
                 criterion: Core.Model,
                 learning_rate: float,
                 metric: Optional[Callable[..., torch.Tensor]] = None,
                 compile: bool = False,
                 compile_backend: str = "inductor",
                 ):
        """
        :param criterion: Model returning per sequence losses
        :param learning_rate: The SGD learning rate
        :param metric: Optional callable returning per sequence errors, evaluated without gradients
        :param compile: Run the criterion through torch.compile
        :param compile_backend: The torch.compile backend
        """
        self.criterion = criterion
        self.metric = metric
        self.forward = torch.compile(criterion, backend=compile_backend) if compile else criterion
        self.optimizer = torch.optim.SGD(criterion.parameters(), lr=learning_rate)

        self.previous_minibatch_loss_average = 0.0
        self.previous_minibatch_evaluation_average = 0.0
        self.previous_minibatch_sample_count = 0

    def train_minibatch(self, *arguments) -> float:
        """
        Runs one update.

        :param arguments: Whatever the criterion is called with
        :return: The summed loss of the minibatch
        """
        losses = self.forward(*arguments)
        loss = losses.sum()
        count = losses.numel()

        # Evaluated against the same parameter values as the loss
        if self.metric is not None:
            with torch.no_grad():
                errors = self.metric(*arguments)
            self.previous_minibatch_evaluation_average = errors.sum().item() / count if count else 0.0

        self.optimizer.zero_grad()
        loss.backward()
        self.optimizer.step()

        total = loss.item()
        self.previous_minibatch_sample_count = count
        self.previous_minibatch_loss_average = total / count if count else 0.0
        return total


def print_training_progress(trainer: Trainer, minibatch_index: int, output_frequency: int):
    """Logs the trainer's last averages every output_frequency minibatches"""
    if minibatch_index % output_frequency != 0 or trainer.previous_minibatch_sample_count == 0:
        return
    logger.info("Minibatch %d: CrossEntropy loss = %.8g, Evaluation criterion = %.8g",
                minibatch_index,
                trainer.previous_minibatch_loss_average,
                trainer.previous_minibatch_evaluation_average)
