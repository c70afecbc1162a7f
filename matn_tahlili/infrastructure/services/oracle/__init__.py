from .base import BaseCorrectionOracle
from .fake_oracle import FakeCorrectionOracle
from .google_oracle import GoogleCorrectionOracle

__all__ = ["BaseCorrectionOracle", "FakeCorrectionOracle", "GoogleCorrectionOracle"]
