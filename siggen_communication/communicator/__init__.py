"""
__init__.py

Initializes the communicator package: transports, the exchange runner, and the
dispatcher/reconciler pair coordinated by the client controller.
"""

from siggen_communication.communicator.client import SignalGeneratorClient
from siggen_communication.communicator.controller import ClientController
from siggen_communication.communicator.command_dispatcher import CommandDispatcher
from siggen_communication.communicator.status_reconciler import StatusReconciler
from siggen_communication.communicator.transport_factory import get_transport

__all__ = [
    'SignalGeneratorClient',
    'ClientController',
    'CommandDispatcher',
    'StatusReconciler',
    'get_transport'
]
