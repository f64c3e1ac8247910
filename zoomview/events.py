#
# events.py -- Gesture event classes for the zoom/pan controller.
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#

# legal values for the `state` of a continuous gesture
gesture_states = ('start', 'move', 'stop')


class UIEvent:
    """Base class for user interface events."""
    def __init__(self, viewer=None):
        self.viewer = viewer
        self.handled = False

    def accept(self):
        self.handled = True

    def was_handled(self):
        return self.handled


class PinchEvent(UIEvent):
    """A pinch gesture sample.

    Attributes
    ----------
    state: str
        'start' (gesture starting), 'move' (in action) or 'stop' (done)

    scale : float
        Incremental scale of the pinch since the last sample; 1.0 means
        no change, >1 is a spread and <1 a squeeze

    viewer : object
        The viewer in which the event happened
    """
    def __init__(self, state=None, scale=1.0, viewer=None):
        super().__init__(viewer=viewer)
        self.state = state
        self.scale = scale

    def __repr__(self):
        return "PinchEvent(state=%r, scale=%r)" % (self.state, self.scale)


class PanEvent(UIEvent):
    """A pan (drag) gesture sample.

    Attributes
    ----------
    state: str
        'start' (gesture starting), 'move' (in action) or 'stop' (done)

    delta_x : float
        Total movement in the X direction since the gesture started

    delta_y : float
        Total movement in the Y direction since the gesture started

    viewer : object
        The viewer in which the event happened
    """
    def __init__(self, state=None, delta_x=0.0, delta_y=0.0, viewer=None):
        super().__init__(viewer=viewer)
        self.state = state
        self.delta_x = delta_x
        self.delta_y = delta_y

    def __repr__(self):
        return "PanEvent(state=%r, delta_x=%r, delta_y=%r)" % (
            self.state, self.delta_x, self.delta_y)


class TapEvent(UIEvent):
    """A double tap.

    Attributes
    ----------
    x : float
        X position of the tap in view-local coordinates

    y : float
        Y position of the tap in view-local coordinates

    viewer : object
        The viewer in which the event happened
    """
    def __init__(self, x=0.0, y=0.0, viewer=None):
        super().__init__(viewer=viewer)
        self.x = x
        self.y = y

    def __repr__(self):
        return "TapEvent(x=%r, y=%r)" % (self.x, self.y)
