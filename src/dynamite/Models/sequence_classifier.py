"""
Two formulations of the same sequence classifier,

    embedding -> relu recurrence, last state -> linear

The static formulation takes a whole minibatch as a SequenceBatch and
runs the recurrence across all sequences at once. The unrolled
formulation takes one sequence at a time and issues every step as its
own operation. With the same parameter values the two compute the same
losses; copy_parameters keeps them in step.
"""
from typing import Dict, List, Optional, Union

import torch
from torch import nn

from dynamite import Basics
from dynamite import Core
from dynamite import Sequence


def create_model_function(num_output_classes: int,
                          embedding_dim: int,
                          hidden_dim: int,
                          input_dim: Optional[int] = None,
                          device: Optional[torch.device] = None,
                          dtype: Optional[torch.dtype] = None,
                          ) -> Core.UnaryModel:
    """
    The static classifier. Maps a SequenceBatch of inputs to
    logits of shape [batch, num_output_classes].

    Nested names: "[0]" embedding, "[1]" fold (its step under "step"), "[2]" linear.
    """
    return Basics.sequential([
        Basics.embedding(embedding_dim, input_dim, device, dtype),
        Sequence.fold(Basics.rnn_step(hidden_dim, embedding_dim, device, dtype)),
        Basics.linear(num_output_classes, hidden_dim, device, dtype),
    ])


def create_criterion_function(model: Core.UnaryModel) -> Core.BinaryModel:
    """
    (features: SequenceBatch, labels: [batch, classes]) -> loss per sequence, [batch]
    """
    def forward(features: Core.SequenceBatch, labels: torch.Tensor) -> torch.Tensor:
        z = model(features)
        return Core.softmax_cross_entropy(z, labels)

    return Core.Model(forward, nested={"model": model})


def create_metric_function(model: Core.UnaryModel) -> Core.BinaryModel:
    """
    (features: SequenceBatch, labels: [batch, classes]) -> classification error per sequence, [batch]
    """
    def forward(features: Core.SequenceBatch, labels: torch.Tensor) -> torch.Tensor:
        return Core.classification_error(model(features), labels)

    return Core.Model(forward, nested={"model": model})


def create_model_function_unrolled(num_output_classes: int,
                                   embedding_dim: int,
                                   hidden_dim: int,
                                   input_dim: Optional[int] = None,
                                   device: Optional[torch.device] = None,
                                   dtype: Optional[torch.dtype] = None,
                                   ) -> Core.UnaryModel:
    """
    The unrolled classifier. Maps one sequence, [length, input_dim],
    to logits of shape [num_output_classes].

    Nested names: "embed", "step", "linear".
    """
    embed = Basics.embedding(embedding_dim, input_dim, device, dtype)
    step = Basics.rnn_step(hidden_dim, embedding_dim, device, dtype)
    linear = Basics.linear(num_output_classes, hidden_dim, device, dtype)
    def forward(x: torch.Tensor) -> torch.Tensor:
        state = x.new_zeros([hidden_dim])
        for t in range(x.shape[0]):
            xt = Core.index(x, t)
            xt = embed(xt)
            state = step(state, xt)
        return linear(state)

    return Core.Model(forward,
                      nested={"embed": embed, "step": step, "linear": linear},
                      output_dim=num_output_classes)


def create_criterion_function_unrolled(model: Core.UnaryModel) -> Core.BinaryModel:
    """
    (features: list of sequences, labels: list of [classes]) -> summed minibatch loss
    """
    def criterion(feature: torch.Tensor, label: torch.Tensor) -> torch.Tensor:
        z = model(feature)
        return Core.softmax_cross_entropy(z, label)

    batch_criterion = Core.make_batch_map(criterion)

    def forward(features: List[torch.Tensor], labels: List[torch.Tensor]) -> torch.Tensor:
        losses = batch_criterion(features, labels)
        collated_losses = torch.stack(losses, dim=0)
        return collated_losses.sum(dim=0)

    return Core.Model(forward, nested={"model": model})


def static_to_unrolled_mapping() -> Dict[str, str]:
    """Unrolled parameter path -> static parameter path"""
    return {
        "embed/E": "[0]/E",
        "step/W": "[1]/step/W",
        "step/R": "[1]/step/R",
        "step/b": "[1]/step/b",
        "linear/W": "[2]/W",
        "linear/b": "[2]/b",
    }


def copy_parameters(target: Union[Core.Model, Core.ParameterBlock],
                    source: Union[Core.Model, Core.ParameterBlock],
                    mapping: Dict[str, str]):
    """
    Copies parameter values from source into target.

    :param target: The model receiving values
    :param source: The model providing values
    :param mapping: target path -> source path, paths as understood by ParameterBlock.lookup
    """
    if isinstance(target, Core.Model):
        target = target.parameter_block
    if isinstance(source, Core.Model):
        source = source.parameter_block

    with torch.no_grad():
        for target_path, source_path in mapping.items():
            destination = target.lookup(target_path)
            value = source.lookup(source_path)
            if isinstance(destination, nn.UninitializedParameter):
                destination.materialize(value.shape)
            destination.copy_(value)
