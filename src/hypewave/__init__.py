"""
hypewave: crowd hype and movement-wave field simulator

Simulates a concert crowd as two vector fields on a square grid:
- Hype (enthusiasm) is clamped, decays, and flows along its own direction
- Movement waves decay, flow outward, and get deflected by hype
- Mosh pits (timed circles) and stages (fixed rectangles) absorb movement

Collaborators read and write the fields through FieldSimulator and learn
about new state by subscribing to its tick_completed signal.
"""

__version__ = "0.1.0"
