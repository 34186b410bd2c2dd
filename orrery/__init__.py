"""
Orrery: real-time 2D solar system viewer.

Core modules: orbit_model (ellipse kinematics), camera (viewport transform),
registry (runtime bodies), simulation (context and frame update), renderer
(pygame draw passes), measurement (distance ruler) and controller (input).
"""

__version__ = "1.0.0"
