"""
param_types.py

Defines the verb set understood by the signal generator and a data class
describing the endpoint each verb is bound to.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class Verb(Enum):
    """
    Enumeration of the fixed command types. Each verb maps to exactly one device endpoint.
    """
    SET_FREQUENCY = "set_frequency"
    SET_STEP = "set_step"
    SET_PULSE_WIDTH = "set_pulse_width"
    SET_BIT_DEPTH = "set_bit_depth"
    STEP_UP = "step_up"
    STEP_DOWN = "step_down"
    SET_SQUARE = "set_square"
    SET_SINE = "set_sine"
    SET_TRIANGLE = "set_triangle"
    LOAD_PRESET = "load_preset"
    SAVE_PRESET = "save_preset"
    REBOOT = "reboot"
    CONSOLE = "console"


class ReplyState(Enum):
    """
    Lifecycle of one outstanding exchange.
    """
    ISSUED = "issued"
    COMPLETED = "completed"
    FAILED = "failed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class EndpointDefinition:
    """
    Data class describing the endpoint a verb is bound to.

    Attributes:
        verb: The verb this endpoint serves.
        path: The fixed relative path on the device (None for the free-form console).
        param: The query parameter name the device expects, or None for bare GETs.
        control: Name of the input control that owns the argument, if any.
        description: A human-readable description of the command.
    """
    verb: Verb
    path: Optional[str]
    param: Optional[str] = None
    control: Optional[str] = None
    description: str = ""

    @property
    def takes_argument(self) -> bool:
        return self.param is not None
