from dynamite.Training.config import TrainingConfig
from dynamite.Training.logging_config import setup_logging
from dynamite.Training.timer import ScopeTimer
from dynamite.Training.trainer import Trainer, print_training_progress
from dynamite.Training.driver import TrainingSummary, train_sequence_classifier
