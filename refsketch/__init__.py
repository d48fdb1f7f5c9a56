from .errors import (
    SketchError,
    ResolutionError,
    UnknownId,
    InvalidProperty,
    UnresolvedCycle,
    MalformedPath,
    SessionError,
)
from .path import Collection, Prop, ReferencePath, parse_path
from .values import Coord, Literal, Reference, Resolvable, PointXY, literal_number, literal_point
from .model import Step, StepKind, Data, DataKind
from .resolve import Resolver, Drawable, resolve, execute
from .snap import SnapIndex, SnapPoint, SnapHit, nearest
from .session import Session, Invalidation
from .infer import InferController, HoverCandidate, Idle, InferArmed, Viewport
from .render import render, Style, Clear, CircleCmd, SegmentCmd, ErrorCmd, DrawCommand
from .config import SketchConfig, get_config, set_config
from .script import parse_script, run_script, ScriptError

__all__ = [
    'SketchError',
    'ResolutionError',
    'UnknownId',
    'InvalidProperty',
    'UnresolvedCycle',
    'MalformedPath',
    'SessionError',
    'Collection',
    'Prop',
    'ReferencePath',
    'parse_path',
    'Coord',
    'Literal',
    'Reference',
    'Resolvable',
    'PointXY',
    'literal_number',
    'literal_point',
    'Step',
    'StepKind',
    'Data',
    'DataKind',
    'Resolver',
    'Drawable',
    'resolve',
    'execute',
    'SnapIndex',
    'SnapPoint',
    'SnapHit',
    'nearest',
    'Session',
    'Invalidation',
    'InferController',
    'HoverCandidate',
    'Idle',
    'InferArmed',
    'Viewport',
    'render',
    'Style',
    'Clear',
    'CircleCmd',
    'SegmentCmd',
    'ErrorCmd',
    'DrawCommand',
    'SketchConfig',
    'get_config',
    'set_config',
    'parse_script',
    'run_script',
    'ScriptError',
]
