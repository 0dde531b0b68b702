"""
Definitions for the model wrapper used throughout
the library.

In general, getting a layer running consists of
three distinct steps. These are

* Making the parameters the layer needs
* Writing a closure which captures those parameters
* Binding the closure and its parameters into a Model

The Model is what everything else composes. Calling it calls
the closure; indexing it finds a parameter by name.
"""
from typing import Any, Callable, Dict, Optional, Union

from torch import nn

from dynamite.Core.parameter_block import ParameterBlock
from dynamite.Core.sequence_batch import SequenceBatch


class Model(nn.Module):
    """
    A closure with its parameters attached.

    The closure may take any number of arguments. Its parameters,
    and the parameter blocks of whatever other models it captured,
    are held in a ParameterBlock and are visible to torch as
    ordinary submodule parameters.
    """
    def __init__(self,
                 function: Callable[..., Any],
                 parameters: Optional[Dict[str, nn.Parameter]] = None,
                 nested: Optional[Dict[str, Union["Model", ParameterBlock]]] = None,
                 output_dim: Optional[int] = None,
                 parameter_block: Optional[ParameterBlock] = None,
                 ):
        """
        :param function: The closure to execute when the model is called
        :param parameters: The named parameters the closure captured
        :param nested: The named models or blocks the closure captured
        :param output_dim: The width of the output, when the constructor knows it
        :param parameter_block: An existing block to share instead of building one
        """
        super().__init__()
        if parameter_block is None:
            blocks = {}
            if nested is not None:
                for name, item in nested.items():
                    blocks[name] = item.parameter_block if isinstance(item, Model) else item
            parameter_block = ParameterBlock(parameters, blocks)

        self.function = function
        self.parameter_block = parameter_block
        self.output_dim = output_dim

    def forward(self, *args):
        return self.function(*args)

    def __getitem__(self, name: str) -> nn.Parameter:
        return self.parameter_block[name]

    def nested(self, name: str) -> ParameterBlock:
        return self.parameter_block.nested(name)


# Arity names. These are the same class; they only document intent.
UnaryModel = Model
BinaryModel = Model
UnarySequenceModel = Model
BinarySequenceModel = Model


class BroadcastingModel(Model):
    """
    A unary model which may also be handed a list of tensors or
    a padded SequenceBatch. A list is mapped item by item; a
    SequenceBatch has the closure applied to its data, lengths
    unchanged. A plain tensor is passed straight through.
    """
    def __init__(self, model: Model):
        super().__init__(model.function,
                         output_dim=model.output_dim,
                         parameter_block=model.parameter_block)

    def forward(self, x):
        if isinstance(x, SequenceBatch):
            return x.with_data(self.function(x.data))
        if isinstance(x, (list, tuple)):
            return [self.function(item) for item in x]
        return self.function(x)
