"""Wavelog Gate: forward ADIF QSO records received over UDP to Wavelog."""

__version__ = "0.2.0"
