"""In-process domain events.

Services publish here after a successful commit; transports subscribe and
forward to their clients. Receivers run synchronously in the publisher's
thread, so they must not raise.
"""
from blinker import Namespace

_signals = Namespace()

# sender: the Flask app; kwargs: game=<serialized Game>
game_updated = _signals.signal('game-updated')
