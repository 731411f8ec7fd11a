"""Adapters serving a HookGate router from a host web framework."""
