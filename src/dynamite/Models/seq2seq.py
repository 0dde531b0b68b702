"""
A sequence to sequence translator with attention, written
in the unrolled style: every encoder and decoder step is its
own operation on its own tensors.
"""
from typing import List, Optional

import torch

from dynamite import Attention
from dynamite import Basics
from dynamite import Core
from dynamite import Sequence


def create_model_function_s2s_att(num_output_classes: int,
                                  embedding_dim: int,
                                  hidden_dim: int,
                                  attention_dim: int,
                                  input_dim: Optional[int] = None,
                                  bidirectional: bool = False,
                                  device: Optional[torch.device] = None,
                                  dtype: Optional[torch.dtype] = None,
                                  ) -> Core.BinarySequenceModel:
    """
    Makes the translator. Called as model(input, label), both lists
    of one hot step vectors, it returns one loss per label step.

    Decoding uses the labels as history: step t is fed the embedded
    label of step t - 1, with an all zero vector standing in for the
    start symbol. Each decoder step attends over the encoder states and
    feeds the previous word spliced with the attention context to the
    decoder recurrence.

    :param num_output_classes: The width of the label vectors
    :param embedding_dim: The width of both embeddings
    :param hidden_dim: The width of the encoder and decoder states
    :param attention_dim: The width of the attention space
    :param input_dim: The width of the input vectors. None to infer.
    :param bidirectional: Encode with a forward and a backward recurrence
    :return: A model with nested "embed", "encoder", "out_embed",
        "decoder", "attention" and "out_proj"
    """
    embed = Basics.embedding(embedding_dim, input_dim, device, dtype)

    fwd_enc = Basics.rnn_step(hidden_dim, embedding_dim, device, dtype)
    if bidirectional:
        bwd_enc = Basics.rnn_step(hidden_dim, embedding_dim, device, dtype)
        encoder = Sequence.bi_recurrence(fwd_enc, bwd_enc)
        encoded_dim = 2 * hidden_dim
    else:
        encoder = Sequence.unrolled_recurrence(fwd_enc)
        encoded_dim = hidden_dim

    out_embed = Basics.embedding(embedding_dim, num_output_classes, device, dtype)
    fwd_dec = Basics.rnn_step(hidden_dim, embedding_dim + encoded_dim, device, dtype)
    attention = Attention.attention_model(attention_dim, encoded_dim, hidden_dim, device, dtype)
    out_proj = Basics.linear(num_output_classes, hidden_dim, device, dtype)

    def decode(encoded: List[torch.Tensor],
               recurrence_state: torch.Tensor,
               prev_word: torch.Tensor) -> torch.Tensor:
        attention_augmented_state = attention(encoded, recurrence_state)
        prev_word_embedded = out_embed(prev_word)
        decoder_input = Core.splice([prev_word_embedded, attention_augmented_state], dim=0)
        return fwd_dec(recurrence_state, decoder_input)

    def forward(input: List[torch.Tensor], label: List[torch.Tensor]) -> List[torch.Tensor]:
        if len(input) == 0:
            raise Core.LayerException("Cannot translate an empty sequence", "Running the translator")
        seq = embed(input)
        encoded = encoder(seq)

        # Start states follow the device and dtype of the data
        losses: List[torch.Tensor] = []
        state = seq[0].new_zeros([hidden_dim])
        for t in range(len(label)):
            prev_out = label[0].new_zeros([num_output_classes]) if t == 0 else label[t - 1]
            state = decode(encoded, state, prev_out)
            z = out_proj(state)
            losses.append(Core.softmax_cross_entropy(z, label[t]))
        return losses

    return Core.Model(forward,
                      nested={"embed": embed,
                              "encoder": encoder,
                              "out_embed": out_embed,
                              "decoder": fwd_dec,
                              "attention": attention,
                              "out_proj": out_proj})
