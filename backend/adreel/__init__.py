"""AdReel - fashion product video script and Veo prompt generator.

Turns a product photo and description into five candidate 30-second
video scripts, then into a per-scene prompt package for a text-to-video
model together with ad copy.
"""

__version__ = "0.1.0"
