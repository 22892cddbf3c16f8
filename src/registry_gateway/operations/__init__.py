"""
Operations package - the gateway facade and its CLI-facing helpers.

This package provides the RegistryGateway facade that maps domain operations
onto backend RPC calls, plus centralized error mapping for the CLI.
"""
from .facade import RegistryGateway
from .mappers import exit_code_for, run_and_exit

__all__ = ["RegistryGateway", "exit_code_for", "run_and_exit"]
