"""Shared type aliases for the survey_stats package."""

from collections.abc import Sequence

import numpy as np
import pandas as pd

# Vector-like inputs accepted by the public API.
ArrayLike = np.ndarray | pd.Series | Sequence
