"""
Additive attention over a list of encoder states.
"""
from typing import List, Optional

import torch

from dynamite import Core
from dynamite.Basics import parameters
from dynamite.Basics.linear import linear_forward


def attention_model(attention_dim: int,
                    encoder_dim: Optional[int] = None,
                    decoder_dim: Optional[int] = None,
                    device: Optional[torch.device] = None,
                    dtype: Optional[torch.dtype] = None,
                    ) -> Core.Model:
    """
    Makes an additive attention model. Called as

        attention(h_encs, h_dec)

    with h_encs a list of encoder states, each [hidden], and h_dec the
    decoder state. The result is the attention weighted average of
    the encoder states, [hidden].

    :param attention_dim: The width of the shared attention space
    :param encoder_dim: The width of the encoder states. None to infer.
    :param decoder_dim: The width of the decoder state. None to infer.
    :return: A model with parameters 'Wenc', 'Wdec' and 'v'
    """
    Wenc = parameters.make_weight(attention_dim, encoder_dim, device, dtype)
    Wdec = parameters.make_weight(attention_dim, decoder_dim, device, dtype)
    v = parameters.make_vector(attention_dim, device, dtype)

    task = "Running attention"

    def forward(h_encs: List[torch.Tensor], h_dec: torch.Tensor) -> torch.Tensor:
        if len(h_encs) == 0:
            raise Core.LayerException("Cannot attend over an empty sequence", task)

        h_encs_tensor = torch.stack(list(h_encs), dim=0)  # [input_len, hidden]
        parameters.materialize(Wenc, attention_dim, h_encs_tensor.shape[-1])
        parameters.materialize(Wdec, attention_dim, h_dec.shape[-1])

        # The encoder projection is recomputed for every decoder step.
        h_encs_proj = linear_forward(h_encs_tensor, Wenc, None, task)  # [input_len, attention]
        h_dec_proj = linear_forward(h_dec, Wdec, None, task)  # [attention]
        u = torch.tanh(h_encs_proj + h_dec_proj)
        scores = torch.matmul(u, v)  # [input_len]
        weights = Core.softmax(scores)
        return torch.matmul(weights, h_encs_tensor)

    return Core.Model(forward, {"Wenc": Wenc, "Wdec": Wdec, "v": v})
