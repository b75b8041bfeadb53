"""
Rosslerscope: animated, interactive Rössler attractor.

Fixed-step Euler trajectory generation, a progressive reveal animation with
hue cycling, debounced live parameter editing and a software renderer.
"""

from rosslerscope.app import AppConfig, AttractorApp
from rosslerscope.core.reveal import RevealConfig, RevealController, RevealPhase, RevealState
from rosslerscope.core.session import ParamEvent, ParameterSession, SessionConfig
from rosslerscope.core.trajectory import DEFAULT_PARAMETERS, Parameters, Trajectory, generate

__version__ = "0.1.0"
