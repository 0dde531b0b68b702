from dynamite.Core import errors as Errors
from dynamite.Core.errors import (ValidationError,
                                  ParameterBlockException,
                                  BatchException,
                                  MinibatchConversionException,
                                  LayerException,
                                  DataFormatException,
                                  ConfigurationException,
                                  dedent)
from dynamite.Core.parameter_block import ParameterBlock
from dynamite.Core.sequence_batch import SequenceBatch
from dynamite.Core.model import (Model,
                                 UnaryModel,
                                 BinaryModel,
                                 UnarySequenceModel,
                                 BinarySequenceModel,
                                 BroadcastingModel)
from dynamite.Core.batch import batch_map, make_batch_map, batch_sum
from dynamite.Core.functional import (index,
                                      to_vector,
                                      splice,
                                      softmax,
                                      softmax_cross_entropy,
                                      classification_error,
                                      flush)
