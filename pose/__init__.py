"""
pose: Pose classifier post-processing
======================================

The pose classifier itself (webcam capture and model inference) runs
outside this project; it pushes per-class probabilities in, and this
package turns them into a lane label the game engine understands.

Modules
-------
stabilizer
    :class:`PredictionStabilizer` windowed-mean label filter.
"""

from .stabilizer import PredictionStabilizer, StabilizedPrediction

__all__ = ["PredictionStabilizer", "StabilizedPrediction"]
