"""Gameplay systems for the downhill run: gates, pursuit, skier and streaming."""
from .audio import AudioCue, AudioService, MixerAudioService, NullAudioService
from .events import Signal
from .gates import GateData, GateSettings, GateState, GateTracker
from .pursuer import PursuerConfig, PursuerCues, PursuerDriver, PursuerZone
from .skier import SkierInput, SkierMotion, SkierParameters, TurnCalculator
from .obstacles import CollisionHandler, ObstacleInstance
from .settings import RunSettings, TileSettings, load_run_settings
from .streaming import TileInstance, TileStreamer
from .world import GameMode, RunOrchestrator, RunState, TelemetryClient
