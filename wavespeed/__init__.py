from .client import WaveSpeed
from .config import Settings, get_settings
from .errors import (
    APIError,
    ConfigurationError,
    PredictionCreateError,
    PredictionReloadError,
    UploadError,
    WaveSpeedError,
)
from .models import PredictionStatus, PredictionUrls, UploadResult
from .prediction import Prediction
from .retry import RetryPolicy

__version__ = "0.1.0"

__all__ = [
    "WaveSpeed",
    "Prediction",
    "PredictionStatus",
    "PredictionUrls",
    "UploadResult",
    "Settings",
    "get_settings",
    "RetryPolicy",
    "WaveSpeedError",
    "ConfigurationError",
    "APIError",
    "PredictionCreateError",
    "PredictionReloadError",
    "UploadError",
]
