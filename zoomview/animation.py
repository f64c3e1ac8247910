#
# animation.py -- time driven property animation
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
"""
Frame-ticked animations.

Nothing here owns a thread or a timer.  The host calls
`AnimationScheduler.tick()` once per display refresh, on the same
thread that delivers gesture events, and every running animation
samples its easing curve for the current time and pushes the values
out through its setters.

Animations live in named slots.  Committing an animation into a slot
that is already busy cancels the running one first, so two drivers
never fight over the same property.
"""
import time
import logging

from zoomview.misc import Callback
from zoomview import easing as easing_mod


class AnimationError(Exception):
    pass


def monotonic_ms():
    return time.monotonic() * 1000.0


class Tween(object):
    """Move one value from `start` to `end` along `easing`.

    `start` and `end` may be numbers or numpy arrays of equal shape;
    `setter` is called with the interpolated value at every step.
    """

    def __init__(self, start, end, setter, easing='linear'):
        self.start = start
        self.end = end
        self.setter = setter
        self.easing = easing_mod.get_easing(easing)

    def step(self, t):
        self.setter(easing_mod.interpolate(self.start, self.end,
                                           self.easing, t))


class Driver(object):
    """Sample `easing` once per step and hand the eased progress to
    `callback`, which applies it to as many values as it likes.
    """

    def __init__(self, callback, easing='linear'):
        self.callback = callback
        self.easing = easing_mod.get_easing(easing)

    def step(self, t):
        self.callback(self.easing(t))


class Animation(object):
    """A group of tweens sharing one clock.

    Parameters
    ----------
    name : str
        Slot name; at most one animation per name runs at a time.

    tweens : list of `Tween` or `Driver`
        The children to advance at each step.

    duration_ms : float
        Length of the animation in milliseconds.

    on_step : callable or None
        Called as ``on_step(animation)`` after all children have been
        advanced for a step.

    on_finish : callable or None
        Called exactly once as ``on_finish(animation, canceled)``.
    """

    def __init__(self, name, tweens, duration_ms, on_step=None,
                 on_finish=None):
        self.name = name
        self.tweens = list(tweens)
        self.duration_ms = float(duration_ms)
        self.on_step = on_step
        self.on_finish = on_finish

        self.start_ms = None
        self.last_t = None
        self.done = False

    def get_progress(self, now_ms):
        if self.duration_ms <= 0.0:
            return 1.0
        t = (now_ms - self.start_ms) / self.duration_ms
        return min(1.0, max(0.0, t))

    def step(self, t):
        self.last_t = t
        for tween in self.tweens:
            tween.step(t)
        if self.on_step is not None:
            self.on_step(self)

    def finish(self, canceled):
        if self.done:
            return
        self.done = True
        if self.on_finish is not None:
            self.on_finish(self, canceled)


class AnimationScheduler(Callback.Callbacks):
    """Runs named animations against a millisecond clock.

    Callbacks
    ---------
    'started' : fn(scheduler, name, animation)
    'canceled' : fn(scheduler, name, animation)
    'finished' : fn(scheduler, name, animation)
    """

    def __init__(self, logger=None, clock=None):
        Callback.Callbacks.__init__(self)

        if logger is None:
            logger = logging.getLogger(__name__)
        self.logger = logger
        if clock is None:
            clock = monotonic_ms
        self.clock = clock

        self.animations = {}

        for name in ('started', 'canceled', 'finished'):
            self.enable_callback(name)

    def get_time(self):
        return self.clock()

    def is_running(self, name):
        return name in self.animations

    def get_animation(self, name):
        return self.animations.get(name, None)

    def commit(self, animation, now_ms=None):
        """Start `animation`, cancelling whatever occupies its slot.

        The t=0 sample is applied immediately.
        """
        if animation.done or animation.start_ms is not None:
            raise AnimationError("Animation '%s' has already been run" % (
                animation.name))
        self.abort(animation.name)

        if now_ms is None:
            now_ms = self.get_time()
        animation.start_ms = now_ms
        self.animations[animation.name] = animation
        self.logger.debug("animation '%s' started (%.1f ms)" % (
            animation.name, animation.duration_ms))
        self.make_callback('started', animation.name, animation)

        animation.step(0.0)
        if animation.duration_ms <= 0.0:
            self._complete(animation)

    def abort(self, name):
        """Cancel the animation in slot `name`.  Returns True if one
        was running.
        """
        animation = self.animations.pop(name, None)
        if animation is None:
            return False
        self.logger.debug("animation '%s' canceled at t=%s" % (
            name, animation.last_t))
        animation.finish(True)
        self.make_callback('canceled', name, animation)
        return True

    def abort_all(self):
        for name in list(self.animations.keys()):
            self.abort(name)

    def _complete(self, animation):
        if self.animations.get(animation.name) is animation:
            del self.animations[animation.name]
        animation.step(1.0)
        self.logger.debug("animation '%s' finished" % (animation.name))
        animation.finish(False)
        self.make_callback('finished', animation.name, animation)

    def tick(self, now_ms=None):
        """Advance every running animation to `now_ms` (default: the
        scheduler clock).  Returns True if anything is still running.
        """
        if now_ms is None:
            now_ms = self.get_time()

        for animation in list(self.animations.values()):
            # an earlier step may have replaced or canceled this one
            if self.animations.get(animation.name) is not animation:
                continue
            t = animation.get_progress(now_ms)
            if t >= 1.0:
                self._complete(animation)
            elif t > 0.0:
                animation.step(t)

        return len(self.animations) > 0

# END
