from dynamite.Basics import parameters
from dynamite.Basics.linear import linear, linear_forward
from dynamite.Basics.embedding import embedding
from dynamite.Basics.rnn_step import rnn_step
from dynamite.Basics.sequential import sequential
