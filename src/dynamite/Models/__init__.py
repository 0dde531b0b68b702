from dynamite.Models.sequence_classifier import (create_model_function,
                                                 create_criterion_function,
                                                 create_metric_function,
                                                 create_model_function_unrolled,
                                                 create_criterion_function_unrolled,
                                                 static_to_unrolled_mapping,
                                                 copy_parameters)
from dynamite.Models.seq2seq import create_model_function_s2s_att
