"""
Example agents shipped with agentrun.

Registered at API startup when AGENTRUN_BUILTIN_AGENTS is true.
"""
