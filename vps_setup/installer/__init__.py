"""
Installer core: component catalogue, status detection, handler resolution,
action dispatch and the "install everything" batch flow.
"""
