"""PulseMind trust core.

Progressive trust ladder (readiness scoring, phase transitions, engagement
tracking) and the toxicity gate that guards community content.
"""

__version__ = "0.1.0"
