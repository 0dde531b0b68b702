"""
Parameter bookkeeping for closure based models.

A model in this library is a plain python closure which captures
the tensors it needs. The closure alone cannot tell anyone what it
owns, so each one is paired with a ParameterBlock: a named registry
of the learnable tensors the closure captured, plus the blocks of any
models it captured in turn. Because the block is an nn.Module, torch
finds every parameter through .parameters() and the optimizer never
needs to know about closures at all.
"""
from typing import Dict, List, Optional

from torch import nn

from dynamite.Core import errors


class ParameterBlock(nn.Module):
    """
    A named collection of parameters and nested blocks.

    Lookup is by name. Unknown names raise a ParameterBlockException
    rather than returning None, so a typo in a synchronization
    routine is caught immediately.
    """
    def __init__(self,
                 parameters: Optional[Dict[str, nn.Parameter]] = None,
                 nested: Optional[Dict[str, "ParameterBlock"]] = None,
                 ):
        super().__init__()

        task = "Creating a parameter block"
        parameters = parameters if parameters is not None else {}
        nested = nested if nested is not None else {}

        self.params = nn.ParameterDict()
        for name, parameter in parameters.items():
            if not name:
                raise errors.ParameterBlockException("parameters must be named", task)
            self.params[name] = parameter

        self.blocks = nn.ModuleDict()
        for name, block in nested.items():
            if not name:
                raise errors.ParameterBlockException("captured models must be named", task)
            if not isinstance(block, ParameterBlock):
                reason = f"""\
                Captured model '{name}' was expected to provide a ParameterBlock,
                but instead provided {type(block)}
                """
                raise errors.ParameterBlockException(errors.dedent(reason), task)
            self.blocks[name] = block

    def __getitem__(self, name: str) -> nn.Parameter:
        if name not in self.params:
            raise errors.ParameterBlockException("no such parameter: %s" % name,
                                                 "Looking up a parameter")
        return self.params[name]

    def __contains__(self, name: str) -> bool:
        return name in self.params

    def nested(self, name: str) -> "ParameterBlock":
        if name not in self.blocks:
            raise errors.ParameterBlockException("no such captured model: %s" % name,
                                                 "Looking up a captured model")
        return self.blocks[name]

    def names(self) -> List[str]:
        return list(self.params.keys())

    def nested_names(self) -> List[str]:
        return list(self.blocks.keys())

    def lookup(self, path: str) -> nn.Parameter:
        """
        Resolves a '/' separated path. Every segment but the
        last names a nested block; the last names a parameter.

        :param path: Something like "[1]/step/W"
        :return: The parameter at the end of the path
        """
        *block_names, parameter_name = path.split("/")
        block = self
        for block_name in block_names:
            block = block.nested(block_name)
        return block[parameter_name]
